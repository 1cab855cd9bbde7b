# storefront/services/cart_store.py
"""
Session cart: a mirror of one remote cart, keyed by an id the browser keeps.

The browser holds two cookies:
  - cart_id:   the remote cart identifier
  - cart_open: whether the cart drawer is open

A CartStore is built per request from those cookies. It never edits the
mirror locally: each successful remote call replaces it wholesale, and a
failed call leaves it untouched and returns the error to the caller.
"""
import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Protocol

from storefront.core.shopify_client import StorefrontClient
from storefront.repositories.cart_repo import CartRepository
from storefront.schemas.cart import (
    Cart,
    CartLineAdd,
    CartLineChange,
    CartResult,
    CartView,
)

logger = logging.getLogger(__name__)

CART_ID_KEY = "cart_id"
CART_OPEN_KEY = "cart_open"


class CartStorage(Protocol):
    """Persistent key/value storage owned by the client (cookies in practice)."""

    def get(self, name: str) -> str | None: ...

    def set(self, name: str, value: str) -> None: ...

    def delete(self, name: str) -> None: ...


class CartLockRegistry:
    """
    One mutex per cart id, shared by every request in this process.

    Entries are reference-counted and dropped once no request holds or
    waits on them, so the registry does not grow with the number of carts.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, list] = {}

    @contextmanager
    def hold(self, cart_id: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(cart_id, [threading.Lock(), 0])
            entry[1] += 1
        entry[0].acquire()
        try:
            yield
        finally:
            entry[0].release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    self._locks.pop(cart_id, None)

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)


cart_locks = CartLockRegistry()


class CartStore:
    """
    Cart operations for one client session.

    Operations:
      - add_to_cart / create_cart / update_cart_item / remove_from_cart /
        clear_cart: mutate the remote cart and replace the mirror
      - load / fetch_cart: refresh the mirror; a cart that cannot be fetched
        is forgotten (cookie and mirror cleared)
      - open_cart / close_cart / toggle_cart: drawer visibility

    Mutations on an existing cart hold that cart's lock for the duration of
    the remote call, so two requests editing the same cart apply in order.
    """

    def __init__(
        self,
        repo: CartRepository,
        client: StorefrontClient,
        storage: CartStorage,
        locks: CartLockRegistry = cart_locks,
    ):
        self.repo = repo
        self.client = client
        self.storage = storage
        self.locks = locks
        self._cart: Cart | None = None

    # ---- state ----

    @property
    def cart_id(self) -> str | None:
        return self.storage.get(CART_ID_KEY)

    @property
    def cart(self) -> Cart | None:
        # A mirror for a different id than the stored one is stale.
        if self._cart is not None and self._cart.id != self.cart_id:
            self._cart = None
        return self._cart

    @property
    def is_open(self) -> bool:
        return self.storage.get(CART_OPEN_KEY) == "1"

    @property
    def cart_count(self) -> int:
        cart = self.cart
        if cart is None:
            return 0
        return sum(line.quantity for line in cart.lines)

    @property
    def is_empty(self) -> bool:
        cart = self.cart
        return cart is None or not cart.lines

    def view(self) -> CartView:
        return CartView(
            cart=self.cart,
            is_open=self.is_open,
            cart_count=self.cart_count,
            is_empty=self.is_empty,
        )

    # ---- visibility ----

    def open_cart(self) -> None:
        self.storage.set(CART_OPEN_KEY, "1")

    def close_cart(self) -> None:
        self.storage.set(CART_OPEN_KEY, "0")

    def toggle_cart(self) -> None:
        if self.is_open:
            self.close_cart()
        else:
            self.open_cart()

    # ---- internal helpers ----

    def _forget(self) -> None:
        self.storage.delete(CART_ID_KEY)
        self._cart = None

    def _apply(self, op: str, result: CartResult) -> CartResult:
        if result.ok:
            self._cart = result.cart
        else:
            logger.warning("Cart %s failed (%s): %s", op, result.error.code, result.error.message)
        return result

    # ---- reads ----

    def load(self) -> CartResult:
        """
        Populate the mirror from the stored id, if any.
        No stored id is a successful load of "no cart".
        """
        cart_id = self.cart_id
        if not cart_id:
            return CartResult.success(None)
        return self.fetch_cart(cart_id)

    def fetch_cart(self, cart_id: str) -> CartResult:
        """
        Fetch the remote cart. Any failure (unknown id, expired cart,
        upstream error) makes this session forget the cart.
        """
        result = self.repo.get(self.client, cart_id)
        if not result.ok:
            logger.info("Forgetting cart %s: %s", cart_id, result.error.message)
            self._forget()
            return result
        self._cart = result.cart
        return result

    # ---- mutations ----

    def create_cart(self, lines: list[CartLineAdd] | None = None) -> CartResult:
        result = self.repo.create(self.client, lines)
        if result.ok:
            self.storage.set(CART_ID_KEY, result.cart.id)
        return self._apply("create", result)

    def add_to_cart(self, variant_id: str, quantity: int = 1) -> CartResult:
        """
        Add `quantity` of a variant, creating the cart on first use.
        Opens the cart drawer on success.
        """
        if not variant_id or not variant_id.strip():
            return CartResult.failure("user_error", "Variant id is required")
        if quantity < 1:
            return CartResult.failure("invalid_quantity", "Quantity must be at least 1")

        line = CartLineAdd(merchandise_id=variant_id, quantity=quantity)
        cart_id = self.cart_id
        if not cart_id:
            result = self.create_cart([line])
        else:
            with self.locks.hold(cart_id):
                result = self._apply("add", self.repo.add_lines(self.client, cart_id, [line]))

        if result.ok:
            self.open_cart()
        return result

    def update_cart_item(self, line_id: str, quantity: int) -> CartResult:
        cart_id = self.cart_id
        if not cart_id:
            return CartResult.failure("no_cart", "No cart found")
        if quantity < 1:
            return CartResult.failure("invalid_quantity", "Quantity must be at least 1")

        change = CartLineChange(id=line_id, quantity=quantity)
        with self.locks.hold(cart_id):
            return self._apply("update", self.repo.update_lines(self.client, cart_id, [change]))

    def remove_from_cart(self, line_id: str) -> CartResult:
        cart_id = self.cart_id
        if not cart_id:
            return CartResult.failure("no_cart", "No cart found")
        with self.locks.hold(cart_id):
            return self._apply("remove", self.repo.remove_lines(self.client, cart_id, [line_id]))

    def clear_cart(self) -> CartResult:
        """
        Remove every line. The line ids come from a fetch made under the
        cart's lock, so lines added by a concurrent request are cleared
        too; an already empty cart is left alone.
        """
        cart_id = self.cart_id
        if not cart_id:
            return CartResult.failure("no_cart", "No cart found")

        with self.locks.hold(cart_id):
            loaded = self.fetch_cart(cart_id)
            if not loaded.ok:
                return loaded

            line_ids = [line.id for line in loaded.cart.lines]
            if not line_ids:
                return loaded
            return self._apply("clear", self.repo.remove_lines(self.client, cart_id, line_ids))
