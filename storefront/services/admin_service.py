# storefront/services/admin_service.py
import logging
from typing import Any

from storefront.core.errors import unwrap
from storefront.core.shopify_client import AdminClient, GraphQLOk, ShopifyConfigError
from storefront.repositories.admin_repo import AdminRepository
from storefront.repositories.mappers import nodes

logger = logging.getLogger(__name__)


class AdminService:
    """
    Admin API reads for the admin endpoints.
    """

    def __init__(self, repo: AdminRepository):
        self.repo = repo

    def check_access(self, client: AdminClient) -> dict[str, Any]:
        """
        Is the Admin API configured and reachable?
        Never raises; configuration problems are reported as inaccessible.
        """
        try:
            result = self.repo.shop_info(client)
        except ShopifyConfigError as e:
            return {"accessible": False, "reason": str(e)}

        if not isinstance(result, GraphQLOk):
            logger.warning("Admin API access check failed: %s", result.message)
            return {"accessible": False, "reason": result.message}

        shop = result.data.get("shop") or {}
        return {"accessible": True, "shop": shop}

    def list_products(
        self,
        client: AdminClient,
        first: int = 20,
        after: str | None = None,
        query: str | None = None,
    ) -> dict[str, Any]:
        data = unwrap(self.repo.list_products(client, first=first, after=after, query=query))
        connection = data.get("products") or {}
        return {
            "products": nodes(connection),
            "page_info": connection.get("pageInfo") or {"hasNextPage": False, "endCursor": None},
        }
