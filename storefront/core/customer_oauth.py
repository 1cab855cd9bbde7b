# storefront/core/customer_oauth.py
"""
OAuth2 authorization-code client for the Shopify Customer Account API.

Endpoints (relative to SHOPIFY_CUSTOMER_ACCOUNT_API_URL):
  - /auth/oauth/authorize   browser redirect target
  - /auth/oauth/token       code exchange and refresh (form-encoded)
  - /auth/oauth/revoke      token revocation (logout)
"""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from functools import lru_cache
from typing import Any
from urllib.parse import urlencode

import httpx
from jose import JWTError, jwt

from storefront.core.config import Settings, get_settings
from storefront.core.shopify_client import ShopifyConfigError

logger = logging.getLogger(__name__)

OAUTH_SCOPE = "openid email profile"


class TokenEndpointError(RuntimeError):
    """
    Non-success answer from a token/revoke endpoint.
    Carries the HTTP status and status text reported by the endpoint.
    """

    def __init__(self, action: str, status: int | None, status_text: str):
        self.status = status
        self.status_text = status_text
        super().__init__(f"Failed to {action}: {status_text}")


@dataclass(frozen=True)
class TokenSet:
    access_token: str
    refresh_token: str
    expires_in: int | None = None
    customer_id: str | None = None


def generate_state() -> str:
    """Anti-forgery `state` value from the OS CSPRNG."""
    return secrets.token_urlsafe(32)


def customer_id_from_id_token(id_token: str | None) -> str | None:
    """
    Read the `sub` claim of an OpenID id_token without verifying it.

    The token was received directly from the token endpoint over TLS, so it
    is only used as a source of the customer id, never as a credential.
    """
    if not id_token:
        return None
    try:
        claims = jwt.get_unverified_claims(id_token)
    except JWTError:
        logger.warning("Token endpoint returned an unreadable id_token")
        return None
    sub = claims.get("sub")
    return str(sub) if sub else None


class CustomerOAuthClient:
    def __init__(
        self,
        settings: Settings,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.timeout_s = settings.SHOPIFY_REQUEST_TIMEOUT_S
        self._transport = transport

    # ---- config ----

    def _require(self, *names: str) -> None:
        for name in names:
            if not getattr(self.settings, name):
                raise ShopifyConfigError(f"Missing {name} environment variable")

    @property
    def base_url(self) -> str:
        return (self.settings.SHOPIFY_CUSTOMER_ACCOUNT_API_URL or "").rstrip("/")

    @property
    def redirect_uri(self) -> str:
        return f"{(self.settings.SHOPIFY_ORIGIN_URL or '').rstrip('/')}/authorize"

    # ---- endpoints ----

    def authorization_url(self, state: str, redirect_after_login: str | None = None) -> str:
        self._require(
            "SHOPIFY_CUSTOMER_ACCOUNT_API_CLIENT_ID",
            "SHOPIFY_CUSTOMER_ACCOUNT_API_URL",
            "SHOPIFY_ORIGIN_URL",
        )
        params = {
            "client_id": self.settings.SHOPIFY_CUSTOMER_ACCOUNT_API_CLIENT_ID,
            "response_type": "code",
            "redirect_uri": self.redirect_uri,
            "scope": OAUTH_SCOPE,
            "state": state,
        }
        if redirect_after_login:
            params["redirect_after_login"] = redirect_after_login
        return f"{self.base_url}/auth/oauth/authorize?{urlencode(params)}"

    def exchange_code(self, code: str) -> TokenSet:
        self._require(
            "SHOPIFY_CUSTOMER_ACCOUNT_API_CLIENT_ID",
            "SHOPIFY_CUSTOMER_ACCOUNT_API_URL",
            "SHOPIFY_ORIGIN_URL",
        )
        data = self._post_form(
            "/auth/oauth/token",
            {
                "grant_type": "authorization_code",
                "client_id": self.settings.SHOPIFY_CUSTOMER_ACCOUNT_API_CLIENT_ID,
                "redirect_uri": self.redirect_uri,
                "code": code,
            },
            action="exchange code for tokens",
        )
        self._check_tokens(data, "exchange code for tokens")
        return TokenSet(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            expires_in=data.get("expires_in"),
            customer_id=data.get("customer_id") or customer_id_from_id_token(data.get("id_token")),
        )

    def refresh(self, refresh_token: str) -> TokenSet:
        self._require("SHOPIFY_CUSTOMER_ACCOUNT_API_CLIENT_ID", "SHOPIFY_CUSTOMER_ACCOUNT_API_URL")
        data = self._post_form(
            "/auth/oauth/token",
            {
                "grant_type": "refresh_token",
                "client_id": self.settings.SHOPIFY_CUSTOMER_ACCOUNT_API_CLIENT_ID,
                "refresh_token": refresh_token,
            },
            action="refresh token",
        )
        self._check_tokens(data, "refresh token")
        return TokenSet(
            access_token=data["access_token"],
            refresh_token=data["refresh_token"],
            expires_in=data.get("expires_in"),
        )

    def revoke(self, access_token: str) -> None:
        self._require("SHOPIFY_CUSTOMER_ACCOUNT_API_CLIENT_ID", "SHOPIFY_CUSTOMER_ACCOUNT_API_URL")
        self._post_form(
            "/auth/oauth/revoke",
            {
                "client_id": self.settings.SHOPIFY_CUSTOMER_ACCOUNT_API_CLIENT_ID,
                "token": access_token,
            },
            action="revoke token",
        )

    # ---- internal ----

    @staticmethod
    def _check_tokens(data: dict[str, Any], action: str) -> None:
        if not data.get("access_token") or not data.get("refresh_token"):
            raise TokenEndpointError(action, None, "Token response is missing tokens")

    def _post_form(self, path: str, form: dict[str, Any], action: str) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            with httpx.Client(timeout=self.timeout_s, transport=self._transport) as c:
                r = c.post(url, data=form)
        except httpx.HTTPError as e:
            logger.error("Token endpoint unreachable (%s): %s", action, e)
            raise TokenEndpointError(action, None, str(e)) from e

        if r.is_error:
            logger.error("Token endpoint error (%s): %s %s", action, r.status_code, r.reason_phrase)
            raise TokenEndpointError(action, r.status_code, r.reason_phrase)

        if not r.content:
            return {}
        try:
            return r.json()
        except ValueError as e:
            raise TokenEndpointError(action, r.status_code, "Invalid JSON response") from e


@lru_cache
def get_oauth_client() -> CustomerOAuthClient:
    return CustomerOAuthClient(get_settings())
