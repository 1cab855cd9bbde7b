# storefront/core/auth.py
import secrets

from fastapi import Depends, Header, HTTPException, status

from storefront.core.config import get_settings
from storefront.core.cookies import CookieJar, get_cookie_jar

settings = get_settings()

# Identity cookies (httpOnly, SameSite=Lax, 30 days)
ACCESS_TOKEN_COOKIE = "shopify_customer_access_token"
REFRESH_TOKEN_COOKIE = "shopify_customer_refresh_token"
CUSTOMER_ID_COOKIE = "shopify_customer_id"

# Short-lived cookies bridging /api/auth/login -> /authorize
OAUTH_STATE_COOKIE = "shopify_oauth_state"
POST_LOGIN_REDIRECT_COOKIE = "shopify_post_login_redirect"
OAUTH_COOKIE_MAX_AGE = 10 * 60


class CustomerSession:
    """
    The logged-in customer as seen through this request's cookies.

    The three identity cookies are always written and cleared together.
    Authentication is a presence check on the access token only; whether
    Shopify still accepts it is discovered by calling the API.
    """

    def __init__(self, jar: CookieJar):
        self.jar = jar

    @property
    def access_token(self) -> str | None:
        return self.jar.get(ACCESS_TOKEN_COOKIE)

    @property
    def refresh_token(self) -> str | None:
        return self.jar.get(REFRESH_TOKEN_COOKIE)

    @property
    def customer_id(self) -> str | None:
        return self.jar.get(CUSTOMER_ID_COOKIE)

    def is_authenticated(self) -> bool:
        return self.access_token is not None

    def store(self, access_token: str, refresh_token: str, customer_id: str | None) -> None:
        """Write the token pair. An unknown customer id drops any stale id cookie."""
        self.jar.set(ACCESS_TOKEN_COOKIE, access_token)
        self.jar.set(REFRESH_TOKEN_COOKIE, refresh_token)
        if customer_id:
            self.jar.set(CUSTOMER_ID_COOKIE, customer_id)
        else:
            self.jar.delete(CUSTOMER_ID_COOKIE)

    def clear(self) -> None:
        self.jar.delete(ACCESS_TOKEN_COOKIE)
        self.jar.delete(REFRESH_TOKEN_COOKIE)
        self.jar.delete(CUSTOMER_ID_COOKIE)


def get_customer_session(jar: CookieJar = Depends(get_cookie_jar)) -> CustomerSession:
    """
    Per-request CustomerSession. Shares the request's CookieJar, so the
    route can flush cookie changes with `jar.apply(response)`.
    """
    return CustomerSession(jar)


def require_access_token(session: CustomerSession = Depends(get_customer_session)) -> str:
    """
    Enforce a logged-in customer.

    Returns:
        The customer's access token.

    Raises:
        HTTPException(401): if no access token cookie is present.
    """
    token = session.access_token
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    return token


def require_admin_key(x_admin_key: str | None = Header(default=None)) -> None:
    """
    Guard for /api/admin/*.

    Raises:
        HTTPException(403): admin key not configured, missing, or wrong.
    """
    expected = settings.ADMIN_DASHBOARD_KEY
    if not expected or not x_admin_key or not secrets.compare_digest(x_admin_key, expected):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
