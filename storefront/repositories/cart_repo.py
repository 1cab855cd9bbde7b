# storefront/repositories/cart_repo.py
import logging
from typing import Any

from storefront.core.shopify_client import (
    ApplicationError,
    GraphQLOk,
    ShopifyConfigError,
    StorefrontClient,
)
from storefront.queries.storefront import (
    ADD_TO_CART,
    CREATE_CART,
    GET_CART,
    REMOVE_FROM_CART,
    UPDATE_CART,
)
from storefront.repositories.mappers import to_cart
from storefront.schemas.cart import CartLineAdd, CartLineChange, CartResult

logger = logging.getLogger(__name__)


class CartRepository:
    """
    Remote cart operations against the Storefront API.

    - One GraphQL call per method, no retries.
    - Every outcome (including config and transport failures) is folded
      into a CartResult; nothing here raises.
    """

    def get(self, client: StorefrontClient, cart_id: str) -> CartResult:
        result = self._execute(client, GET_CART, {"cartId": cart_id})
        if not isinstance(result, GraphQLOk):
            return result
        node = result.data.get("cart")
        if not node:
            return CartResult.failure("not_found", "Cart not found")
        return CartResult.success(to_cart(node))

    def create(
        self,
        client: StorefrontClient,
        lines: list[CartLineAdd] | None = None,
    ) -> CartResult:
        variables = {"lines": [self._line_input(line) for line in lines]} if lines else {}
        return self._mutate(client, CREATE_CART, variables, "cartCreate", "Failed to create cart")

    def add_lines(
        self,
        client: StorefrontClient,
        cart_id: str,
        lines: list[CartLineAdd],
    ) -> CartResult:
        variables = {"cartId": cart_id, "lines": [self._line_input(line) for line in lines]}
        return self._mutate(client, ADD_TO_CART, variables, "cartLinesAdd", "Failed to add items to cart")

    def update_lines(
        self,
        client: StorefrontClient,
        cart_id: str,
        lines: list[CartLineChange],
    ) -> CartResult:
        variables = {
            "cartId": cart_id,
            "lines": [{"id": line.id, "quantity": line.quantity} for line in lines],
        }
        return self._mutate(client, UPDATE_CART, variables, "cartLinesUpdate", "Failed to update cart")

    def remove_lines(
        self,
        client: StorefrontClient,
        cart_id: str,
        line_ids: list[str],
    ) -> CartResult:
        variables = {"cartId": cart_id, "lineIds": line_ids}
        return self._mutate(
            client, REMOVE_FROM_CART, variables, "cartLinesRemove", "Failed to remove items from cart"
        )

    # ---- internal helpers ----

    @staticmethod
    def _line_input(line: CartLineAdd) -> dict[str, Any]:
        return {"merchandiseId": line.merchandise_id, "quantity": line.quantity}

    def _execute(
        self,
        client: StorefrontClient,
        query: str,
        variables: dict[str, Any],
    ) -> GraphQLOk | CartResult:
        try:
            result = client.execute(query, variables)
        except ShopifyConfigError as e:
            return CartResult.failure("config", str(e))

        if isinstance(result, GraphQLOk):
            return result
        if isinstance(result, ApplicationError):
            return CartResult.failure("application", result.message)
        return CartResult.failure("transport", result.message)

    def _mutate(
        self,
        client: StorefrontClient,
        query: str,
        variables: dict[str, Any],
        root: str,
        fallback: str,
    ) -> CartResult:
        result = self._execute(client, query, variables)
        if not isinstance(result, GraphQLOk):
            return result

        payload = result.data.get(root) or {}
        user_errors = payload.get("userErrors") or []
        if user_errors:
            message = ", ".join(e.get("message", "") for e in user_errors)
            logger.warning("Cart %s rejected: %s", root, message)
            return CartResult.failure("user_error", message)

        node = payload.get("cart")
        if not node:
            return CartResult.failure("user_error", fallback)
        return CartResult.success(to_cart(node))
