# storefront/routers/account.py
from typing import Any

from fastapi import APIRouter, Depends, Query, status

from storefront.core.auth import require_access_token
from storefront.core.shopify_client import (
    CustomerAccountClient,
    StorefrontClient,
    get_customer_account_client,
    get_storefront_client,
)
from storefront.repositories.customer_repo import CustomerRepository
from storefront.schemas.customer import (
    AddressCreate,
    AddressUpdate,
    CustomerAccessToken,
    CustomerLoginRequest,
    CustomerProfileUpdate,
    CustomerRecoverRequest,
    CustomerRegisterRequest,
    CustomerRegisterResult,
    DefaultAddressUpdate,
    MessageResponse,
    OrderList,
)
from storefront.services.customer_service import CustomerService

router = APIRouter(prefix="/account", tags=["Account"])

repo = CustomerRepository()
service = CustomerService(repo)


# -------- Legacy email/password accounts (Storefront API) --------


@router.post("/login", response_model=CustomerAccessToken)
def login(
    payload: CustomerLoginRequest,
    client: StorefrontClient = Depends(get_storefront_client),
):
    """
    Exchange email/password for a customer access token.

    - 400 if email or password is missing.
    - 401 if Shopify rejects the credentials.
    """
    return service.login(client, payload.email, payload.password)


@router.post(
    "/register",
    response_model=CustomerRegisterResult,
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: CustomerRegisterRequest,
    client: StorefrontClient = Depends(get_storefront_client),
):
    """
    Create a customer and log them in when possible.
    """
    return service.register(client, payload)


@router.post("/recover", response_model=MessageResponse)
def recover(
    payload: CustomerRecoverRequest,
    client: StorefrontClient = Depends(get_storefront_client),
):
    """
    Request a password reset email. The answer does not reveal whether
    the email has an account.
    """
    return service.recover(client, payload.email)


# -------- Orders (Customer Account API, login required) --------


@router.get("/orders", response_model=OrderList)
def list_orders(
    first: int = Query(default=10, ge=1, le=100),
    after: str | None = None,
    access_token: str = Depends(require_access_token),
    client: CustomerAccountClient = Depends(get_customer_account_client),
):
    """
    Current customer's orders, newest first.
    """
    return service.list_orders(client, access_token, first=first, after=after)


@router.get("/orders/{order_id:path}")
def get_order(
    order_id: str,
    access_token: str = Depends(require_access_token),
    client: CustomerAccountClient = Depends(get_customer_account_client),
) -> dict[str, Any]:
    """
    One order with its line items.

    - 404 if the order does not belong to the customer.
    """
    return {"order": service.get_order(client, access_token, order_id)}


# -------- Addresses --------


@router.get("/addresses")
def list_addresses(
    access_token: str = Depends(require_access_token),
    client: CustomerAccountClient = Depends(get_customer_account_client),
) -> dict[str, Any]:
    return {"addresses": service.list_addresses(client, access_token)}


@router.post("/addresses", status_code=status.HTTP_201_CREATED)
def create_address(
    payload: AddressCreate,
    access_token: str = Depends(require_access_token),
    client: CustomerAccountClient = Depends(get_customer_account_client),
) -> dict[str, Any]:
    return {"address": service.create_address(client, access_token, payload)}


@router.post("/addresses/default")
def set_default_address(
    payload: DefaultAddressUpdate,
    access_token: str = Depends(require_access_token),
    client: CustomerAccountClient = Depends(get_customer_account_client),
) -> dict[str, Any]:
    return {"address": service.set_default_address(client, access_token, payload.address_id)}


@router.patch("/addresses/{address_id:path}")
def update_address(
    address_id: str,
    payload: AddressUpdate,
    access_token: str = Depends(require_access_token),
    client: CustomerAccountClient = Depends(get_customer_account_client),
) -> dict[str, Any]:
    """
    Partial address update. Fields left out are unchanged.
    """
    return {"address": service.update_address(client, access_token, address_id, payload)}


@router.delete("/addresses/{address_id:path}")
def delete_address(
    address_id: str,
    access_token: str = Depends(require_access_token),
    client: CustomerAccountClient = Depends(get_customer_account_client),
) -> dict[str, Any]:
    return {"deleted_address_id": service.delete_address(client, access_token, address_id)}


# -------- Profile --------


@router.patch("/profile")
def update_profile(
    payload: CustomerProfileUpdate,
    access_token: str = Depends(require_access_token),
    client: CustomerAccountClient = Depends(get_customer_account_client),
) -> dict[str, Any]:
    return {"customer": service.update_profile(client, access_token, payload)}
