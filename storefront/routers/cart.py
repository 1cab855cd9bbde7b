# storefront/routers/cart.py
from fastapi import APIRouter, Depends

from storefront.core.shopify_client import StorefrontClient, get_storefront_client
from storefront.repositories.cart_repo import CartRepository
from storefront.schemas.cart import (
    CartCreateRequest,
    CartLinesAddRequest,
    CartLinesRemoveRequest,
    CartLinesUpdateRequest,
    CartResponse,
)
from storefront.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
service = CartService(cart_repo)


# `create` must be registered before the `{cart_id:path}` routes.
@router.post("/create", response_model=CartResponse)
def create_cart(
    payload: CartCreateRequest,
    client: StorefrontClient = Depends(get_storefront_client),
):
    """
    Create a new remote cart, optionally with initial lines.

    The caller keeps the returned cart id; nothing is stored server-side.
    """
    return CartResponse(cart=service.create_cart(client, payload.lines))


@router.get("/{cart_id:path}", response_model=CartResponse)
def get_cart(
    cart_id: str,
    client: StorefrontClient = Depends(get_storefront_client),
):
    """
    Get a cart by id.

    - 404 if the cart is unknown or expired.
    """
    return CartResponse(cart=service.get_cart(client, cart_id))


@router.post("/{cart_id:path}", response_model=CartResponse)
def add_lines(
    cart_id: str,
    payload: CartLinesAddRequest,
    client: StorefrontClient = Depends(get_storefront_client),
):
    """
    Add lines (`merchandise_id`, `quantity`) to a cart.
    """
    return CartResponse(cart=service.add_lines(client, cart_id, payload.lines))


@router.put("/{cart_id:path}", response_model=CartResponse)
def update_lines(
    cart_id: str,
    payload: CartLinesUpdateRequest,
    client: StorefrontClient = Depends(get_storefront_client),
):
    """
    Set the quantity of existing lines. A quantity of 0 removes the line.
    """
    return CartResponse(cart=service.update_lines(client, cart_id, payload.lines))


@router.delete("/{cart_id:path}", response_model=CartResponse)
def remove_lines(
    cart_id: str,
    payload: CartLinesRemoveRequest,
    client: StorefrontClient = Depends(get_storefront_client),
):
    """
    Remove lines by id.
    """
    return CartResponse(cart=service.remove_lines(client, cart_id, payload.line_ids))
