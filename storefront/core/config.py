# storefront/core/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Centralized application settings loaded from environment.

    Storefront API (required for catalog/cart calls, checked at call time):
      - SHOPIFY_STORE_DOMAIN
      - SHOPIFY_STOREFRONT_PUBLIC_ACCESS_TOKEN
      - SHOPIFY_STOREFRONT_PRIVATE_ACCESS_TOKEN

    Customer Account API (OAuth login):
      - SHOPIFY_CUSTOMER_ACCOUNT_API_CLIENT_ID
      - SHOPIFY_CUSTOMER_ACCOUNT_API_URL
      - SHOPIFY_CUSTOMER_API_VERSION
      - SHOPIFY_ORIGIN_URL

    Optional:
      - SHOPIFY_ADMIN_API_ACCESS_TOKEN (admin endpoints only)

    Nothing here is required at startup. A missing variable surfaces as a
    ShopifyConfigError when the corresponding API is first called.
    """

    PROJECT_NAME: str = "Storefront Backend"
    ENVIRONMENT: str = "development"
    API_PREFIX: str = "/api"

    # Storefront API
    SHOPIFY_STORE_DOMAIN: str | None = None
    SHOPIFY_STOREFRONT_PUBLIC_ACCESS_TOKEN: str | None = None
    SHOPIFY_STOREFRONT_PRIVATE_ACCESS_TOKEN: str | None = None
    SHOPIFY_STOREFRONT_API_VERSION: str = "2025-04"

    # Admin API (optional)
    SHOPIFY_ADMIN_API_ACCESS_TOKEN: str | None = None
    SHOPIFY_ADMIN_API_VERSION: str = "2023-10"

    # Customer Account API (OAuth)
    SHOPIFY_CUSTOMER_ACCOUNT_API_CLIENT_ID: str | None = None
    SHOPIFY_CUSTOMER_ACCOUNT_API_URL: str | None = None
    SHOPIFY_CUSTOMER_API_VERSION: str | None = None
    SHOPIFY_CUSTOMER_ACCOUNT_GRAPHQL_URL: str = "https://customer-api.shopify.com/graphql"

    # Public origin of this application, used to build the OAuth redirect URI
    SHOPIFY_ORIGIN_URL: str | None = None

    # Upper bound for every outbound call to Shopify
    SHOPIFY_REQUEST_TIMEOUT_S: float = 10.0

    # Cookies
    COOKIE_SECURE: bool = True
    COOKIE_MAX_AGE_S: int = 30 * 24 * 60 * 60

    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Shared secret for /api/admin/* (header X-Admin-Key)
    ADMIN_DASHBOARD_KEY: str | None = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def missing_storefront_vars(self) -> list[str]:
        """Names of the required Storefront variables that are not set."""
        required = {
            "SHOPIFY_STORE_DOMAIN": self.SHOPIFY_STORE_DOMAIN,
            "SHOPIFY_STOREFRONT_PUBLIC_ACCESS_TOKEN": self.SHOPIFY_STOREFRONT_PUBLIC_ACCESS_TOKEN,
            "SHOPIFY_STOREFRONT_PRIVATE_ACCESS_TOKEN": self.SHOPIFY_STOREFRONT_PRIVATE_ACCESS_TOKEN,
        }
        return [name for name, value in required.items() if not value]


@lru_cache
def get_settings() -> Settings:
    """
    Cached settings loader.
    Ensures we don't re-parse .env on every import / request.
    """
    return Settings()
