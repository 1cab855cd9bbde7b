# storefront/routers/products.py
from fastapi import APIRouter, Depends, Query

from storefront.core.shopify_client import StorefrontClient, get_storefront_client
from storefront.repositories.product_repo import ProductRepository
from storefront.schemas.product import (
    CollectionList,
    CollectionProducts,
    ProductList,
    ProductResponse,
)
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["Products"])
collections_router = APIRouter(prefix="/collections", tags=["Collections"])

repo = ProductRepository()
service = ProductService(repo)


# -------- Products --------


@router.get("", response_model=ProductList)
def list_products(
    first: int = Query(default=12, ge=1, le=250),
    after: str | None = None,
    client: StorefrontClient = Depends(get_storefront_client),
):
    """
    List products, cursor-paginated.

    - Public endpoint.
    - Pass `page_info.end_cursor` back as `after` for the next page.
    """
    return service.list_products(client, first=first, after=after)


@router.get("/{handle}", response_model=ProductResponse)
def get_product(
    handle: str,
    client: StorefrontClient = Depends(get_storefront_client),
):
    """
    Get a single product by handle.

    - Public endpoint.
    """
    return ProductResponse(product=service.get_product(client, handle))


# -------- Collections --------


@collections_router.get("", response_model=CollectionList)
def list_collections(
    first: int = Query(default=20, ge=1, le=250),
    client: StorefrontClient = Depends(get_storefront_client),
):
    return service.list_collections(client, first=first)


@collections_router.get("/{handle}", response_model=CollectionProducts)
def get_collection(
    handle: str,
    first: int = Query(default=12, ge=1, le=250),
    after: str | None = None,
    client: StorefrontClient = Depends(get_storefront_client),
):
    """
    A collection and one page of its products.
    """
    return service.get_collection_products(client, handle, first=first, after=after)
