# storefront/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from storefront.core.config import get_settings
from storefront.core.shopify_client import ShopifyConfigError

# Routers
from storefront.routers.account import router as account_router
from storefront.routers.admin import router as admin_router
from storefront.routers.auth import callback_router as auth_callback_router
from storefront.routers.auth import router as auth_router
from storefront.routers.cart import router as cart_router
from storefront.routers.env import router as env_router
from storefront.routers.graphql import router as graphql_router
from storefront.routers.products import collections_router
from storefront.routers.products import router as products_router
from storefront.routers.session_cart import router as session_cart_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Report missing Shopify configuration. Nothing is fatal here: each
        API fails with ShopifyConfigError when first called unconfigured.

    Shutdown:
      - No special cleanup needed; HTTP clients are opened per call.
    """
    missing = settings.missing_storefront_vars()
    if missing:
        logger.warning(f"⚠️ Startup: missing Storefront configuration: {', '.join(missing)}")
    else:
        logger.info(f"✅ Startup: Storefront API configured for {settings.SHOPIFY_STORE_DOMAIN}")
    if not settings.SHOPIFY_CUSTOMER_ACCOUNT_API_CLIENT_ID:
        logger.warning("⚠️ Startup: Customer Account API not configured, OAuth login disabled")
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


# --- CORS configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Error envelopes ---
@app.exception_handler(ShopifyConfigError)
async def shopify_config_error_handler(request: Request, exc: ShopifyConfigError):
    logger.error(f"❌ Shopify configuration error on {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"errors": [{"message": str(exc)}]},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies are a client error; reject before any upstream call.
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


# API routes under /api
app.include_router(cart_router, prefix=settings.API_PREFIX)
app.include_router(graphql_router, prefix=settings.API_PREFIX)
app.include_router(products_router, prefix=settings.API_PREFIX)
app.include_router(collections_router, prefix=settings.API_PREFIX)
app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(account_router, prefix=settings.API_PREFIX)
app.include_router(admin_router, prefix=settings.API_PREFIX)
app.include_router(env_router, prefix=settings.API_PREFIX)

# Browser-facing routes: OAuth callback and the cookie-backed session cart
app.include_router(auth_callback_router)
app.include_router(session_cart_router)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "storefront-backend"}
