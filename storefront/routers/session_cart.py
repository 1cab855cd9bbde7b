# storefront/routers/session_cart.py
from fastapi import APIRouter, Depends, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from storefront.core.cookies import CookieJar, get_cookie_jar
from storefront.core.errors import CART_ERROR_STATUS
from storefront.core.shopify_client import StorefrontClient, get_storefront_client
from storefront.repositories.cart_repo import CartRepository
from storefront.schemas.cart import CartItemCreate, CartItemUpdate, CartResult
from storefront.services.cart_store import CartStore

router = APIRouter(prefix="/cart", tags=["Session cart"])

cart_repo = CartRepository()


def get_cart_store(
    jar: CookieJar = Depends(get_cookie_jar),
    client: StorefrontClient = Depends(get_storefront_client),
) -> CartStore:
    """Per-request CartStore backed by this request's cookies."""
    return CartStore(cart_repo, client, jar)


# Failures after which Shopify still answered, so the cart can be re-read.
RELOADABLE_ERRORS = {"user_error", "invalid_quantity"}


def _respond(store: CartStore, jar: CookieJar, result: CartResult | None = None) -> JSONResponse:
    """
    Render the cart view. Cookie changes are flushed on failures too,
    e.g. a cart id that could not be fetched is forgotten either way.

    A cart that no longer exists upstream is reported as an empty cart,
    not as an error. A failed mutation never reports a stored cart as
    empty: the cart is re-read, or its fields are left out when it
    cannot be.
    """
    failed = result is not None and not result.ok and result.error.code != "not_found"
    if failed and store.cart is None and store.cart_id and result.error.code in RELOADABLE_ERRORS:
        store.load()

    body = jsonable_encoder(store.view())
    status_code = status.HTTP_200_OK
    if failed:
        if store.cart is None and store.cart_id:
            for field in ("cart", "cart_count", "is_empty"):
                body.pop(field, None)
        status_code = CART_ERROR_STATUS.get(result.error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        body["detail"] = result.error.message
        body["code"] = result.error.code
    return jar.apply(JSONResponse(content=body, status_code=status_code))


@router.get("")
def get_cart(
    store: CartStore = Depends(get_cart_store),
    jar: CookieJar = Depends(get_cookie_jar),
):
    """
    Current session cart (cart, is_open, cart_count, is_empty).
    """
    return _respond(store, jar, store.load())


@router.post("/items")
def add_to_cart(
    payload: CartItemCreate,
    store: CartStore = Depends(get_cart_store),
    jar: CookieJar = Depends(get_cookie_jar),
):
    """
    Add a variant to the session cart, creating the cart on first use.
    Opens the cart drawer on success.
    """
    return _respond(store, jar, store.add_to_cart(payload.variant_id, payload.quantity))


@router.patch("/items/{line_id:path}")
def update_cart_item(
    line_id: str,
    payload: CartItemUpdate,
    store: CartStore = Depends(get_cart_store),
    jar: CookieJar = Depends(get_cookie_jar),
):
    return _respond(store, jar, store.update_cart_item(line_id, payload.quantity))


@router.delete("/items/{line_id:path}")
def remove_from_cart(
    line_id: str,
    store: CartStore = Depends(get_cart_store),
    jar: CookieJar = Depends(get_cookie_jar),
):
    return _respond(store, jar, store.remove_from_cart(line_id))


@router.delete("")
def clear_cart(
    store: CartStore = Depends(get_cart_store),
    jar: CookieJar = Depends(get_cookie_jar),
):
    """
    Remove every line from the session cart. The cart itself is kept.
    """
    return _respond(store, jar, store.clear_cart())


# -------- Drawer visibility --------


@router.post("/open")
def open_cart(
    store: CartStore = Depends(get_cart_store),
    jar: CookieJar = Depends(get_cookie_jar),
):
    store.open_cart()
    return _respond(store, jar, store.load())


@router.post("/close")
def close_cart(
    store: CartStore = Depends(get_cart_store),
    jar: CookieJar = Depends(get_cookie_jar),
):
    store.close_cart()
    return _respond(store, jar, store.load())


@router.post("/toggle")
def toggle_cart(
    store: CartStore = Depends(get_cart_store),
    jar: CookieJar = Depends(get_cookie_jar),
):
    store.toggle_cart()
    return _respond(store, jar, store.load())
