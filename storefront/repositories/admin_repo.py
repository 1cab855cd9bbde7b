# storefront/repositories/admin_repo.py
from storefront.core.shopify_client import AdminClient, GraphQLResult
from storefront.queries.admin import GET_ADMIN_PRODUCTS, GET_SHOP_INFO


class AdminRepository:
    """
    Read-only Admin API queries used by the admin endpoints.
    """

    def shop_info(self, client: AdminClient) -> GraphQLResult:
        return client.execute(GET_SHOP_INFO)

    def list_products(
        self,
        client: AdminClient,
        first: int = 20,
        after: str | None = None,
        query: str | None = None,
    ) -> GraphQLResult:
        return client.execute(
            GET_ADMIN_PRODUCTS, {"first": first, "after": after, "query": query}
        )
