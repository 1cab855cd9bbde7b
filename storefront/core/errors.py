# storefront/core/errors.py
from typing import Any

from fastapi import HTTPException, status

from storefront.core.shopify_client import (
    ApplicationError,
    GraphQLOk,
    GraphQLResult,
)
from storefront.schemas.cart import CartError

# CartError.code -> HTTP status for the route layer
CART_ERROR_STATUS: dict[str, int] = {
    "no_cart": status.HTTP_404_NOT_FOUND,
    "not_found": status.HTTP_404_NOT_FOUND,
    "invalid_quantity": status.HTTP_400_BAD_REQUEST,
    "user_error": status.HTTP_400_BAD_REQUEST,
    "application": status.HTTP_502_BAD_GATEWAY,
    "transport": status.HTTP_502_BAD_GATEWAY,
    "config": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def unwrap(result: GraphQLResult) -> dict[str, Any]:
    """
    Return the `data` of a successful GraphQL result.

    Raises:
        HTTPException(401): upstream rejected the customer's credentials.
        HTTPException(502): any other transport or GraphQL-level failure.
    """
    if isinstance(result, GraphQLOk):
        return result.data
    if isinstance(result, ApplicationError):
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=result.message,
        )
    if result.status == status.HTTP_401_UNAUTHORIZED:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    raise HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=result.message,
    )


def user_errors_message(payload: dict[str, Any] | None, key: str = "userErrors") -> str | None:
    """Join `userErrors[].message` of a mutation payload, or None if clean."""
    errors = (payload or {}).get(key) or []
    if not errors:
        return None
    return ", ".join(e.get("message", "") for e in errors)


def raise_cart_error(error: CartError) -> None:
    raise HTTPException(
        status_code=CART_ERROR_STATUS.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR),
        detail=error.message,
    )
