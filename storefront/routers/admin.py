# storefront/routers/admin.py
from typing import Any

from fastapi import APIRouter, Depends, Query

from storefront.core.auth import require_admin_key
from storefront.core.shopify_client import AdminClient, get_admin_client
from storefront.repositories.admin_repo import AdminRepository
from storefront.services.admin_service import AdminService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin_key)],
)

repo = AdminRepository()
service = AdminService(repo)


@router.get("/status")
def admin_status(client: AdminClient = Depends(get_admin_client)) -> dict[str, Any]:
    """
    Whether the optional Admin API is configured and reachable.

    Auth:
      - Header `X-Admin-Key` must match ADMIN_DASHBOARD_KEY.
    """
    return service.check_access(client)


@router.get("/products")
def admin_products(
    first: int = Query(default=20, ge=1, le=250),
    after: str | None = None,
    query: str | None = None,
    client: AdminClient = Depends(get_admin_client),
) -> dict[str, Any]:
    """
    Products as the Admin API sees them (including drafts and inventory).

    `query` uses Shopify's product search syntax, e.g. `status:active`.
    """
    return service.list_products(client, first=first, after=after, query=query)
