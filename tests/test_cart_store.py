import threading
import time

import httpx
import pytest

from storefront.core.config import Settings
from storefront.core.cookies import CookieJar
from storefront.core.shopify_client import StorefrontClient
from storefront.repositories.cart_repo import CartRepository
from storefront.services.cart_store import (
    CART_ID_KEY,
    CART_OPEN_KEY,
    CartLockRegistry,
    CartStore,
)

VARIANT = "gid://shopify/ProductVariant/1"


@pytest.fixture
def jar() -> CookieJar:
    return CookieJar({})


@pytest.fixture
def store(storefront_client, jar) -> CartStore:
    return CartStore(CartRepository(), storefront_client, jar, locks=CartLockRegistry())


def test_first_add_creates_cart_and_persists_its_id(store, jar, shopify):
    result = store.add_to_cart(VARIANT, 2)

    assert result.ok
    assert jar.get(CART_ID_KEY) == result.cart.id
    assert store.cart.id == jar.get(CART_ID_KEY)
    assert shopify.operations() == ["CartCreate"]
    assert store.is_open


def test_second_add_uses_existing_cart(store, shopify):
    store.add_to_cart(VARIANT, 1)
    result = store.add_to_cart("gid://shopify/ProductVariant/2", 3)

    assert result.ok
    assert shopify.operations() == ["CartCreate", "CartLinesAdd"]
    assert store.cart_count == 4
    assert len(shopify.carts) == 1


def test_update_then_fetch_returns_requested_quantity(store, shopify):
    line_id = store.add_to_cart(VARIANT, 1).cart.lines[0].id

    assert store.update_cart_item(line_id, 7).ok
    fetched = store.fetch_cart(store.cart_id)

    assert fetched.ok
    assert [(line.id, line.quantity) for line in fetched.cart.lines] == [(line_id, 7)]


def test_remove_every_line_empties_cart_and_repeat_is_an_error(store):
    store.add_to_cart(VARIANT, 1)
    store.add_to_cart("gid://shopify/ProductVariant/2", 1)
    line_ids = [line.id for line in store.cart.lines]

    for line_id in line_ids:
        assert store.remove_from_cart(line_id).ok

    assert store.cart.lines == []
    assert store.is_empty

    again = store.remove_from_cart(line_ids[0])
    assert not again.ok
    assert again.error.code == "user_error"
    # The failed call leaves the mirror as it was.
    assert store.cart is not None
    assert store.cart.lines == []


def test_add_update_remove_scenario(store, jar):
    added = store.add_to_cart("gid://variant/1", 2)
    assert added.ok
    assert len(added.cart.lines) == 1
    line = added.cart.lines[0]
    assert line.quantity == 2

    updated = store.update_cart_item(line.id, 5)
    assert updated.ok
    assert [(l.id, l.quantity) for l in updated.cart.lines] == [(line.id, 5)]

    removed = store.remove_from_cart(line.id)
    assert removed.ok
    assert removed.cart.lines == []

    view = store.view()
    assert view.is_empty
    assert view.cart_count == 0
    assert view.cart.id == jar.get(CART_ID_KEY)


def test_invalid_quantity_is_rejected_without_remote_call(store, shopify):
    store.add_to_cart(VARIANT, 1)
    line_id = store.cart.lines[0].id
    calls_before = len(shopify.calls)

    for quantity in (0, -3):
        result = store.update_cart_item(line_id, quantity)
        assert result.error.code == "invalid_quantity"
    assert store.add_to_cart(VARIANT, 0).error.code == "invalid_quantity"

    assert len(shopify.calls) == calls_before
    assert store.cart.lines[0].quantity == 1


def test_mutations_without_cart_report_no_cart(store, shopify):
    assert store.update_cart_item("gid://shopify/CartLine/1", 2).error.code == "no_cart"
    assert store.remove_from_cart("gid://shopify/CartLine/1").error.code == "no_cart"
    assert store.clear_cart().error.code == "no_cart"
    assert shopify.calls == []


def test_failed_add_keeps_previous_state(store, shopify, jar):
    store.add_to_cart(VARIANT, 1)
    before = store.cart
    shopify.overrides["CartLinesAdd"] = httpx.Response(500)

    result = store.add_to_cart(VARIANT, 1)

    assert result.error.code == "transport"
    assert store.cart == before
    assert jar.get(CART_ID_KEY) == before.id


def test_unknown_cart_is_forgotten(store, jar, shopify):
    jar.set(CART_ID_KEY, "gid://shopify/Cart/expired")

    result = store.load()

    assert result.error.code == "not_found"
    assert jar.get(CART_ID_KEY) is None
    assert store.cart is None


def test_upstream_failure_on_fetch_also_forgets(store, jar, shopify):
    cart_id = shopify.new_cart([{"merchandiseId": VARIANT, "quantity": 1}])
    jar.set(CART_ID_KEY, cart_id)
    shopify.overrides["GetCart"] = httpx.Response(200, json={"errors": [{"message": "Throttled"}]})

    result = store.load()

    assert result.error.code == "application"
    assert jar.get(CART_ID_KEY) is None


def test_load_without_cart_is_empty_success(store, shopify):
    result = store.load()

    assert result.ok
    assert result.cart is None
    assert store.is_empty
    assert shopify.calls == []


def test_clear_cart_fetches_then_removes_all_lines(store, jar, shopify):
    cart_id = shopify.new_cart(
        [
            {"merchandiseId": VARIANT, "quantity": 1},
            {"merchandiseId": "gid://shopify/ProductVariant/2", "quantity": 2},
        ]
    )
    jar.set(CART_ID_KEY, cart_id)

    result = store.clear_cart()

    assert result.ok
    assert result.cart.lines == []
    assert shopify.operations() == ["GetCart", "CartLinesRemove"]
    _, variables, _ = shopify.calls[-1]
    assert len(variables["lineIds"]) == 2


def test_clear_removes_lines_added_by_another_request(store, jar, storefront_client, shopify):
    store.add_to_cart(VARIANT, 1)
    other_jar = CookieJar({CART_ID_KEY: jar.get(CART_ID_KEY)})
    other = CartStore(CartRepository(), storefront_client, other_jar, locks=store.locks)
    assert other.add_to_cart("gid://shopify/ProductVariant/2", 1).ok

    result = store.clear_cart()

    assert result.ok
    assert result.cart.lines == []
    assert shopify.carts[store.cart_id]["lines"] == []


def test_clear_reads_line_ids_under_the_cart_lock(store, jar, shopify):
    cart_id = shopify.new_cart([{"merchandiseId": VARIANT, "quantity": 1}])
    jar.set(CART_ID_KEY, cart_id)
    held_during_fetch = []

    def get_cart(variables):
        held_during_fetch.append(len(store.locks))
        return httpx.Response(200, json={"data": shopify.op_GetCart(variables)})

    shopify.overrides["GetCart"] = get_cart

    assert store.clear_cart().ok
    assert held_during_fetch == [1]
    assert len(store.locks) == 0


def test_clear_empty_cart_is_noop(store, jar, shopify):
    jar.set(CART_ID_KEY, shopify.new_cart())

    result = store.clear_cart()

    assert result.ok
    assert shopify.operations() == ["GetCart"]


def test_mirror_for_another_cart_id_is_discarded(store, jar):
    store.add_to_cart(VARIANT, 1)
    jar.set(CART_ID_KEY, "gid://shopify/Cart/other")

    assert store.cart is None
    assert store.cart_count == 0


def test_visibility_flags(store, jar):
    assert not store.is_open
    store.open_cart()
    assert jar.get(CART_OPEN_KEY) == "1"
    store.toggle_cart()
    assert not store.is_open
    store.toggle_cart()
    assert store.is_open
    store.close_cart()
    assert not store.is_open


def test_config_error_is_reported_not_raised(jar):
    client = StorefrontClient(Settings(SHOPIFY_STOREFRONT_PRIVATE_ACCESS_TOKEN=None))
    store = CartStore(CartRepository(), client, jar, locks=CartLockRegistry())

    result = store.add_to_cart(VARIANT, 1)

    assert result.error.code == "config"
    assert jar.get(CART_ID_KEY) is None


def test_lock_registry_serialises_holders_of_one_cart():
    locks = CartLockRegistry()
    inside = 0
    max_inside = 0
    guard = threading.Lock()

    def work():
        nonlocal inside, max_inside
        with locks.hold("gid://shopify/Cart/c1"):
            with guard:
                inside += 1
                max_inside = max(max_inside, inside)
            time.sleep(0.01)
            with guard:
                inside -= 1

    threads = [threading.Thread(target=work) for _ in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert max_inside == 1
    assert len(locks) == 0


def test_concurrent_adds_to_one_cart_are_all_applied(storefront_client, shopify):
    cart_id = shopify.new_cart()
    locks = CartLockRegistry()

    def add():
        store = CartStore(CartRepository(), storefront_client, CookieJar({CART_ID_KEY: cart_id}), locks=locks)
        assert store.add_to_cart(VARIANT, 1).ok

    threads = [threading.Thread(target=add) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert shopify.carts[cart_id]["lines"][0]["quantity"] == 4
