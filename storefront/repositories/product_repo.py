# storefront/repositories/product_repo.py
from storefront.core.shopify_client import GraphQLResult, StorefrontClient
from storefront.queries.storefront import (
    GET_COLLECTION_PRODUCTS,
    GET_COLLECTIONS,
    GET_PRODUCT_BY_HANDLE,
    GET_PRODUCTS,
)


class ProductRepository:
    """
    Data access layer for products & collections (Storefront API).

    - Pure remote reads, results returned untouched.
    - No FastAPI, no mapping; the service decides what a failure means.
    """

    # ----- Products -----

    def list(
        self,
        client: StorefrontClient,
        first: int = 12,
        after: str | None = None,
    ) -> GraphQLResult:
        return client.execute(GET_PRODUCTS, {"first": first, "after": after})

    def get_by_handle(self, client: StorefrontClient, handle: str) -> GraphQLResult:
        return client.execute(GET_PRODUCT_BY_HANDLE, {"handle": handle})

    # ----- Collections -----

    def list_collections(self, client: StorefrontClient, first: int = 20) -> GraphQLResult:
        return client.execute(GET_COLLECTIONS, {"first": first})

    def get_collection_products(
        self,
        client: StorefrontClient,
        handle: str,
        first: int = 12,
        after: str | None = None,
    ) -> GraphQLResult:
        return client.execute(
            GET_COLLECTION_PRODUCTS,
            {"handle": handle, "first": first, "after": after},
        )
