# storefront/routers/env.py
from typing import Any

from fastapi import APIRouter

from storefront.core.config import get_settings

router = APIRouter(tags=["Environment"])


def mask_token(token: str | None) -> str:
    """Show only the first and last 4 characters of a secret."""
    if not token:
        return "Not set"
    if len(token) <= 8:
        return "********"
    return f"{token[:4]}...{token[-4:]}"


@router.get("/test-env")
def test_env() -> dict[str, Any]:
    """
    Which Shopify variables are configured, with secrets masked.

    Only the Storefront variables decide `isValid`; the Admin token is optional.
    """
    settings = get_settings()
    missing = settings.missing_storefront_vars()

    return {
        "environment": settings.ENVIRONMENT,
        "shopify": {
            "storeDomain": settings.SHOPIFY_STORE_DOMAIN or "Not set",
            "storefrontPublicToken": mask_token(settings.SHOPIFY_STOREFRONT_PUBLIC_ACCESS_TOKEN),
            "storefrontPrivateToken": mask_token(settings.SHOPIFY_STOREFRONT_PRIVATE_ACCESS_TOKEN),
            "adminApiToken": (
                mask_token(settings.SHOPIFY_ADMIN_API_ACCESS_TOKEN)
                if settings.SHOPIFY_ADMIN_API_ACCESS_TOKEN
                else "Not set (optional)"
            ),
        },
        "status": {
            "isValid": not missing,
            "storeDomain": bool(settings.SHOPIFY_STORE_DOMAIN),
            "storefrontPublicToken": bool(settings.SHOPIFY_STOREFRONT_PUBLIC_ACCESS_TOKEN),
            "storefrontPrivateToken": bool(settings.SHOPIFY_STOREFRONT_PRIVATE_ACCESS_TOKEN),
            "adminApiToken": bool(settings.SHOPIFY_ADMIN_API_ACCESS_TOKEN),
            "missingVars": missing,
        },
    }
