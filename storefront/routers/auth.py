# storefront/routers/auth.py
import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, RedirectResponse

from storefront.core.auth import CustomerSession, get_customer_session
from storefront.core.config import get_settings
from storefront.core.customer_oauth import (
    CustomerOAuthClient,
    TokenEndpointError,
    get_oauth_client,
)
from storefront.core.shopify_client import (
    CustomerAccountClient,
    ShopifyConfigError,
    get_customer_account_client,
)
from storefront.repositories.customer_repo import CustomerRepository
from storefront.schemas.customer import CustomerEnvelope
from storefront.services.auth_service import AuthService, OAuthStateError
from storefront.services.customer_service import CustomerService

logger = logging.getLogger(__name__)
settings = get_settings()

router = APIRouter(prefix="/auth", tags=["Auth"])
# The OAuth redirect URI is {ORIGIN}/authorize, outside the API prefix.
callback_router = APIRouter(tags=["Auth"])

customer_service = CustomerService(CustomerRepository())


def get_auth_service(oauth: CustomerOAuthClient = Depends(get_oauth_client)) -> AuthService:
    return AuthService(oauth)


@router.get("/login")
def login(
    redirect_to: str | None = Query(default=None, alias="redirectTo"),
    session: CustomerSession = Depends(get_customer_session),
    service: AuthService = Depends(get_auth_service),
):
    """
    Start the OAuth login: redirect the browser to Shopify's login page.

    `redirectTo` (same-site path) is where the customer lands afterwards.
    """
    url = service.initiate_login(session, redirect_to)
    return session.jar.apply(RedirectResponse(url, status_code=status.HTTP_302_FOUND))


@callback_router.get("/authorize")
def authorize(
    code: str | None = None,
    state: str | None = None,
    redirect_after_login: str | None = None,
    session: CustomerSession = Depends(get_customer_session),
    service: AuthService = Depends(get_auth_service),
):
    """
    OAuth callback.

    - 400 if `code` is missing.
    - On success: identity cookies set, redirect to the post-login target.
    - On failure: redirect to `{ORIGIN}/login?error=...`, no session stored.
    """
    if not code:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing authorization code",
        )

    try:
        target = service.handle_auth_callback(session, code, redirect_after_login, state)
    except (TokenEndpointError, OAuthStateError, ShopifyConfigError) as e:
        logger.error("OAuth callback failed: %s", e)
        origin = (settings.SHOPIFY_ORIGIN_URL or "").rstrip("/")
        error = quote(str(e) or "Authentication failed", safe="")
        return RedirectResponse(f"{origin}/login?error={error}", status_code=status.HTTP_302_FOUND)

    return session.jar.apply(RedirectResponse(target, status_code=status.HTTP_302_FOUND))


@router.get("/logout")
def logout(
    session: CustomerSession = Depends(get_customer_session),
    service: AuthService = Depends(get_auth_service),
):
    """
    Revoke the access token (best effort) and clear the session cookies.
    Always redirects to "/".
    """
    target = service.logout(session)
    return session.jar.apply(RedirectResponse(target, status_code=status.HTTP_302_FOUND))


@router.get("/customer", response_model=CustomerEnvelope)
def get_customer(
    session: CustomerSession = Depends(get_customer_session),
    service: AuthService = Depends(get_auth_service),
    client: CustomerAccountClient = Depends(get_customer_account_client),
):
    """
    Current customer's profile.

    - 401 if not logged in.
    - Tokens are refreshed first when a refresh token is present; a failed
      refresh keeps the current token.
    """
    if not service.is_authenticated(session):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    refresh_token = session.refresh_token
    if refresh_token:
        service.refresh_tokens(session, refresh_token)

    # Refreshed cookies must reach the browser even if the lookup fails.
    try:
        customer = customer_service.get_customer(client, session.access_token)
    except HTTPException as e:
        return session.jar.apply(
            JSONResponse(content={"detail": e.detail}, status_code=e.status_code)
        )

    body = jsonable_encoder(CustomerEnvelope(customer=customer))
    return session.jar.apply(JSONResponse(content=body))
