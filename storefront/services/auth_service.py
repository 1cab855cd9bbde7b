# storefront/services/auth_service.py
import logging
import secrets

from storefront.core.auth import (
    OAUTH_COOKIE_MAX_AGE,
    OAUTH_STATE_COOKIE,
    POST_LOGIN_REDIRECT_COOKIE,
    CustomerSession,
)
from storefront.core.customer_oauth import (
    CustomerOAuthClient,
    TokenEndpointError,
    generate_state,
)
from storefront.core.shopify_client import ShopifyConfigError

logger = logging.getLogger(__name__)

DEFAULT_LANDING_PATH = "/account"


class OAuthStateError(RuntimeError):
    """The `state` echoed by the identity provider does not match ours."""


def safe_redirect_path(target: str | None) -> str | None:
    """
    Accept only same-site absolute paths ("/account", "/cart?x=1").
    Anything else (full URLs, protocol-relative "//host") is dropped.
    """
    if not target:
        return None
    if not target.startswith("/") or target.startswith("//") or "\\" in target:
        return None
    return target


class AuthService:
    """
    Customer login lifecycle (OAuth2 authorization code flow).

    States, as seen from the cookies:
      anonymous -> awaiting_callback (state cookie set, redirected to Shopify)
                -> authenticated (identity cookies set)
                -> anonymous (logout, or a refresh that failed)

    Failures never leave a partial session behind: either the identity
    cookies are written, or none are. The customer id cookie is only
    written when the token endpoint names the customer.
    """

    def __init__(self, oauth: CustomerOAuthClient):
        self.oauth = oauth

    def is_authenticated(self, session: CustomerSession) -> bool:
        """Presence of the access token cookie. Not a validity check."""
        return session.is_authenticated()

    def initiate_login(self, session: CustomerSession, redirect_to: str | None = None) -> str:
        """
        Build the identity provider URL to send the browser to.

        A fresh anti-forgery state and the post-login target are remembered
        in short-lived cookies; identity cookies are not touched.

        Raises:
            ShopifyConfigError: Customer Account API settings are missing.
        """
        state = generate_state()
        redirect_path = safe_redirect_path(redirect_to)
        url = self.oauth.authorization_url(state, redirect_path)

        session.jar.set(OAUTH_STATE_COOKIE, state, max_age=OAUTH_COOKIE_MAX_AGE)
        if redirect_path:
            session.jar.set(POST_LOGIN_REDIRECT_COOKIE, redirect_path, max_age=OAUTH_COOKIE_MAX_AGE)
        return url

    @staticmethod
    def _verify_state(session: CustomerSession, state: str | None) -> None:
        """
        A stored state must be echoed back exactly. A callback that carries
        a state we never issued is rejected too; only a flow with neither
        side (login started elsewhere) is let through.
        """
        expected_state = session.jar.get(OAUTH_STATE_COOKIE)
        if expected_state:
            if not state or not secrets.compare_digest(state.encode(), expected_state.encode()):
                raise OAuthStateError("Invalid OAuth state")
        elif state:
            raise OAuthStateError("Unexpected OAuth state")

    def handle_auth_callback(
        self,
        session: CustomerSession,
        code: str,
        redirect_to: str | None = None,
        state: str | None = None,
    ) -> str:
        """
        Exchange the one-time code and store the session.

        Returns:
            The path to send the browser to after login.

        Raises:
            OAuthStateError: returned state does not match the stored one.
            TokenEndpointError: the code exchange was rejected.
            ShopifyConfigError: Customer Account API settings are missing.
        """
        self._verify_state(session, state)

        tokens = self.oauth.exchange_code(code)
        if not tokens.customer_id:
            logger.warning("Token endpoint returned no customer id; id cookie left unset")
        session.store(tokens.access_token, tokens.refresh_token, tokens.customer_id)

        target = (
            safe_redirect_path(redirect_to)
            or safe_redirect_path(session.jar.get(POST_LOGIN_REDIRECT_COOKIE))
            or DEFAULT_LANDING_PATH
        )
        session.jar.delete(OAUTH_STATE_COOKIE)
        session.jar.delete(POST_LOGIN_REDIRECT_COOKIE)
        logger.info("Customer session established")
        return target

    def refresh_tokens(self, session: CustomerSession, refresh_token: str) -> bool:
        """
        Swap the refresh token for a new access/refresh pair.
        The customer id cookie is kept as-is. Returns False on failure
        without touching the session.
        """
        try:
            tokens = self.oauth.refresh(refresh_token)
        except (TokenEndpointError, ShopifyConfigError) as e:
            logger.warning("Token refresh failed: %s", e)
            return False

        session.store(tokens.access_token, tokens.refresh_token, session.customer_id)
        return True

    def refresh_token_if_needed(self, session: CustomerSession) -> bool:
        """
        Refresh when a refresh token is present. A failed refresh ends the
        session: all identity cookies are cleared and False is returned.
        """
        refresh_token = session.refresh_token
        if not refresh_token:
            return False
        if self.refresh_tokens(session, refresh_token):
            return True
        session.clear()
        return False

    def logout(self, session: CustomerSession) -> str:
        """
        Revoke the access token (best effort), then clear the session
        unconditionally.

        Returns:
            The path to send the browser to ("/").
        """
        access_token = session.access_token
        if access_token:
            try:
                self.oauth.revoke(access_token)
            except (TokenEndpointError, ShopifyConfigError) as e:
                logger.warning("Token revocation failed, clearing session anyway: %s", e)
        session.clear()
        return "/"
