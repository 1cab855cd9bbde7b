# storefront/services/cart_service.py
from storefront.core.errors import raise_cart_error
from storefront.core.shopify_client import StorefrontClient
from storefront.repositories.cart_repo import CartRepository
from storefront.schemas.cart import (
    Cart,
    CartLineAdd,
    CartLineChange,
    CartResult,
)


class CartService:
    """
    Stateless cart proxy behind /api/cart.

    Responsibilities:
      - forward each request to the Storefront cart API as-is
      - turn a failed CartResult into an HTTP error
      - never cache or merge anything; the caller owns the cart id
    """

    def __init__(self, cart_repo: CartRepository):
        self.cart_repo = cart_repo

    # ---- internal helpers ----

    @staticmethod
    def _unwrap(result: CartResult) -> Cart:
        if result.error is not None:
            raise_cart_error(result.error)
        return result.cart

    # ---- public operations ----

    def get_cart(self, client: StorefrontClient, cart_id: str) -> Cart:
        """
        Fetch a cart by id.

        Raises:
            HTTPException(404): cart unknown or expired.
        """
        return self._unwrap(self.cart_repo.get(client, cart_id))

    def create_cart(
        self,
        client: StorefrontClient,
        lines: list[CartLineAdd] | None = None,
    ) -> Cart:
        return self._unwrap(self.cart_repo.create(client, lines))

    def add_lines(
        self,
        client: StorefrontClient,
        cart_id: str,
        lines: list[CartLineAdd],
    ) -> Cart:
        return self._unwrap(self.cart_repo.add_lines(client, cart_id, lines))

    def update_lines(
        self,
        client: StorefrontClient,
        cart_id: str,
        lines: list[CartLineChange],
    ) -> Cart:
        return self._unwrap(self.cart_repo.update_lines(client, cart_id, lines))

    def remove_lines(
        self,
        client: StorefrontClient,
        cart_id: str,
        line_ids: list[str],
    ) -> Cart:
        return self._unwrap(self.cart_repo.remove_lines(client, cart_id, line_ids))
