# storefront/services/product_service.py
import logging

from fastapi import HTTPException, status

from storefront.core.errors import unwrap
from storefront.core.shopify_client import StorefrontClient
from storefront.repositories.mappers import (
    nodes,
    to_collection,
    to_page_info,
    to_product,
)
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import (
    CollectionList,
    CollectionProducts,
    Product,
    ProductList,
)

logger = logging.getLogger(__name__)


class ProductService:
    """
    Read-only catalog access.

    Responsibilities:
      - fetch products/collections through the repository
      - map GraphQL connections to flat schemas
      - map "not found" to 404 and upstream failures to 502
    """

    def __init__(self, repo: ProductRepository):
        self.repo = repo

    # ---- products ----

    def list_products(
        self,
        client: StorefrontClient,
        first: int = 12,
        after: str | None = None,
    ) -> ProductList:
        data = unwrap(self.repo.list(client, first=first, after=after))
        connection = data.get("products")
        if connection is None:
            logger.error("No products data in Storefront response")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="No products found",
            )

        return ProductList(
            products=[to_product(n) for n in nodes(connection)],
            page_info=to_page_info(connection.get("pageInfo")),
        )

    def get_product(self, client: StorefrontClient, handle: str) -> Product:
        """
        Get a single product by handle.

        Raises:
            HTTPException(404): no product with this handle.
        """
        node = unwrap(self.repo.get_by_handle(client, handle)).get("product")
        if not node:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Product not found",
            )
        return to_product(node)

    # ---- collections ----

    def list_collections(self, client: StorefrontClient, first: int = 20) -> CollectionList:
        data = unwrap(self.repo.list_collections(client, first=first))
        return CollectionList(
            collections=[to_collection(n) for n in nodes(data.get("collections"))],
        )

    def get_collection_products(
        self,
        client: StorefrontClient,
        handle: str,
        first: int = 12,
        after: str | None = None,
    ) -> CollectionProducts:
        node = unwrap(
            self.repo.get_collection_products(client, handle, first=first, after=after)
        ).get("collection")
        if not node:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Collection not found",
            )

        connection = node.get("products") or {}
        return CollectionProducts(
            collection=to_collection(node),
            products=[to_product(n) for n in nodes(connection)],
            page_info=to_page_info(connection.get("pageInfo")),
        )
