# storefront/core/shopify_client.py
"""
GraphQL clients for the three Shopify APIs.

Every call returns a tagged result instead of raising, because Shopify
reports failures on two channels:

  - TransportError:   non-2xx HTTP status, or the request never completed
  - ApplicationError: HTTP 200 whose payload carries a GraphQL `errors` array
  - GraphQLOk:        everything else (the raw payload is kept as-is)

Missing configuration is the exception: it raises ShopifyConfigError at
call time, so a half-configured deployment still starts.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Union

import httpx

from storefront.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class ShopifyConfigError(RuntimeError):
    """Raised when a Shopify API is called without its required settings."""


@dataclass(frozen=True)
class GraphQLOk:
    payload: dict[str, Any]
    status: int = 200

    @property
    def data(self) -> dict[str, Any]:
        return self.payload.get("data") or {}


@dataclass(frozen=True)
class TransportError:
    status: int | None
    message: str
    body: Any = None


@dataclass(frozen=True)
class ApplicationError:
    messages: list[str]
    status: int = 200
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def message(self) -> str:
        return ", ".join(self.messages)


GraphQLResult = Union[GraphQLOk, TransportError, ApplicationError]


@dataclass(frozen=True)
class ProxyEnvelope:
    """Shape returned to relay callers: remote JSON, or a normalized error."""

    status: int
    body: dict[str, Any]


def to_envelope(result: GraphQLResult) -> ProxyEnvelope:
    if isinstance(result, GraphQLOk):
        return ProxyEnvelope(status=result.status, body=result.payload)
    if isinstance(result, ApplicationError):
        return ProxyEnvelope(
            status=500,
            body={"errors": [{"message": m} for m in result.messages]},
        )
    return ProxyEnvelope(status=500, body={"errors": [{"message": result.message}]})


def error_messages(payload: Any) -> list[str]:
    """Collect `errors[].message` from a GraphQL payload (empty if none)."""
    if not isinstance(payload, dict):
        return []
    errors = payload.get("errors")
    if not errors:
        return []
    if isinstance(errors, str):
        return [errors]
    messages = []
    for err in errors:
        if isinstance(err, dict):
            messages.append(str(err.get("message") or "Unknown error"))
        else:
            messages.append(str(err))
    return messages


class _GraphQLClient:
    """
    Shared POST-and-classify logic.

    Subclasses provide `endpoint` and `_headers()`, and call
    `_check_config()` before any network I/O.
    """

    api_name = "Shopify"

    def __init__(
        self,
        settings: Settings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.timeout_s = settings.SHOPIFY_REQUEST_TIMEOUT_S
        self._transport = transport

    @property
    def endpoint(self) -> str:
        raise NotImplementedError

    def _headers(self) -> dict[str, str]:
        raise NotImplementedError

    def _check_config(self) -> None:
        return None

    def _post(
        self,
        query: str,
        variables: dict[str, Any] | None,
        headers: dict[str, str],
    ) -> GraphQLResult:
        body = {"query": query, "variables": variables or {}}
        try:
            with httpx.Client(timeout=self.timeout_s, transport=self._transport) as c:
                r = c.post(self.endpoint, json=body, headers=headers)
        except httpx.HTTPError as e:
            logger.error("%s API request failed: %s", self.api_name, e)
            return TransportError(status=None, message=f"{self.api_name} API request failed: {e}")

        try:
            payload = r.json()
        except ValueError:
            payload = None

        if r.is_error:
            logger.error("%s API error: %s %s", self.api_name, r.status_code, r.reason_phrase)
            return TransportError(
                status=r.status_code,
                message=f"{self.api_name} API error: {r.status_code} {r.reason_phrase}",
                body=payload,
            )

        if not isinstance(payload, dict):
            return TransportError(
                status=r.status_code,
                message=f"{self.api_name} API returned a non-JSON response",
            )

        messages = error_messages(payload)
        if messages:
            logger.warning("%s API GraphQL errors: %s", self.api_name, ", ".join(messages))
            return ApplicationError(messages=messages, status=r.status_code, payload=payload)

        return GraphQLOk(payload=payload, status=r.status_code)

    def execute(self, query: str, variables: dict[str, Any] | None = None) -> GraphQLResult:
        self._check_config()
        return self._post(query, variables, self._headers())

    def relay(self, query: str, variables: dict[str, Any] | None = None) -> ProxyEnvelope:
        """
        Forward a document and normalize the outcome into a ProxyEnvelope.

        Configuration errors are folded into the envelope as well, so relay
        callers only ever branch on status/body.
        """
        try:
            result = self.execute(query, variables)
        except ShopifyConfigError as e:
            return ProxyEnvelope(status=500, body={"errors": [{"message": str(e)}]})
        return to_envelope(result)


class StorefrontClient(_GraphQLClient):
    """Storefront API: catalog, carts, legacy customer tokens."""

    api_name = "Storefront"

    @property
    def endpoint(self) -> str:
        domain = (self.settings.SHOPIFY_STORE_DOMAIN or "").rstrip("/")
        if not domain.startswith("http"):
            domain = f"https://{domain}"
        return f"{domain}/api/{self.settings.SHOPIFY_STOREFRONT_API_VERSION}/graphql.json"

    def _check_config(self) -> None:
        missing = self.settings.missing_storefront_vars()
        if missing:
            raise ShopifyConfigError(
                f"Missing Shopify Storefront configuration: {', '.join(missing)}"
            )

    def _headers(self) -> dict[str, str]:
        h = {"Content-Type": "application/json"}
        # Server-side calls prefer the private token; the public one is the fallback.
        if self.settings.SHOPIFY_STOREFRONT_PRIVATE_ACCESS_TOKEN:
            h["Shopify-Storefront-Private-Token"] = self.settings.SHOPIFY_STOREFRONT_PRIVATE_ACCESS_TOKEN
        else:
            h["X-Shopify-Storefront-Access-Token"] = self.settings.SHOPIFY_STOREFRONT_PUBLIC_ACCESS_TOKEN or ""
        return h


class CustomerAccountClient(_GraphQLClient):
    """
    Customer Account API: requests are made on behalf of a logged-in
    customer, so the access token is passed per call.
    """

    api_name = "Customer Account"

    @property
    def endpoint(self) -> str:
        return self.settings.SHOPIFY_CUSTOMER_ACCOUNT_GRAPHQL_URL

    def _check_config(self) -> None:
        if not self.settings.SHOPIFY_CUSTOMER_API_VERSION:
            raise ShopifyConfigError("Missing SHOPIFY_CUSTOMER_API_VERSION environment variable")

    def execute_as(
        self,
        access_token: str,
        query: str,
        variables: dict[str, Any] | None = None,
    ) -> GraphQLResult:
        self._check_config()
        headers = {
            "Content-Type": "application/json",
            "X-Shopify-Customer-Access-Token": access_token,
            "X-Shopify-Api-Version": self.settings.SHOPIFY_CUSTOMER_API_VERSION or "",
        }
        return self._post(query, variables, headers)

    def execute(self, query: str, variables: dict[str, Any] | None = None) -> GraphQLResult:
        raise TypeError("Customer Account API calls need a customer token; use execute_as()")


class AdminClient(_GraphQLClient):
    """Admin API (optional). Never expose the token to the frontend."""

    api_name = "Admin"

    @property
    def endpoint(self) -> str:
        domain = (self.settings.SHOPIFY_STORE_DOMAIN or "").rstrip("/")
        if not domain.startswith("http"):
            domain = f"https://{domain}"
        return f"{domain}/admin/api/{self.settings.SHOPIFY_ADMIN_API_VERSION}/graphql.json"

    def _check_config(self) -> None:
        if not self.settings.SHOPIFY_ADMIN_API_ACCESS_TOKEN:
            raise ShopifyConfigError("Missing SHOPIFY_ADMIN_API_ACCESS_TOKEN in environment")
        if not self.settings.SHOPIFY_STORE_DOMAIN:
            raise ShopifyConfigError("Missing SHOPIFY_STORE_DOMAIN in environment")

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": self.settings.SHOPIFY_ADMIN_API_ACCESS_TOKEN or "",
        }


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------


@lru_cache
def get_storefront_client() -> StorefrontClient:
    return StorefrontClient(get_settings())


@lru_cache
def get_customer_account_client() -> CustomerAccountClient:
    return CustomerAccountClient(get_settings())


@lru_cache
def get_admin_client() -> AdminClient:
    """
    Admin API client.

    WARNING:
      - Only backend code may call this.
      - Calls raise ShopifyConfigError until SHOPIFY_ADMIN_API_ACCESS_TOKEN is set.
    """
    return AdminClient(get_settings())
