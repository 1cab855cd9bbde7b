# storefront/repositories/customer_repo.py
from typing import Any

from storefront.core.shopify_client import (
    CustomerAccountClient,
    GraphQLResult,
    StorefrontClient,
)
from storefront.queries import customer_account as ca
from storefront.queries.storefront import (
    CUSTOMER_ACCESS_TOKEN_CREATE,
    CUSTOMER_CREATE,
    CUSTOMER_RECOVER,
)


class CustomerRepository:
    """
    Remote customer data.

    Two APIs are involved:
      - Storefront legacy customer mutations (email/password accounts)
      - Customer Account API (OAuth customers; every call carries the
        customer's access token)
    """

    # ----- Storefront legacy accounts -----

    def create_access_token(
        self, client: StorefrontClient, email: str, password: str
    ) -> GraphQLResult:
        return client.execute(
            CUSTOMER_ACCESS_TOKEN_CREATE,
            {"input": {"email": email, "password": password}},
        )

    def create_customer(
        self, client: StorefrontClient, customer_input: dict[str, Any]
    ) -> GraphQLResult:
        return client.execute(CUSTOMER_CREATE, {"input": customer_input})

    def recover(self, client: StorefrontClient, email: str) -> GraphQLResult:
        return client.execute(CUSTOMER_RECOVER, {"email": email})

    # ----- Customer Account API -----

    def get_customer(self, client: CustomerAccountClient, access_token: str) -> GraphQLResult:
        return client.execute_as(access_token, ca.GET_CUSTOMER)

    def list_addresses(self, client: CustomerAccountClient, access_token: str) -> GraphQLResult:
        return client.execute_as(access_token, ca.GET_CUSTOMER_ADDRESSES)

    def list_orders(
        self,
        client: CustomerAccountClient,
        access_token: str,
        first: int = 10,
        after: str | None = None,
    ) -> GraphQLResult:
        return client.execute_as(
            access_token, ca.GET_CUSTOMER_ORDERS, {"first": first, "after": after}
        )

    def get_order(
        self, client: CustomerAccountClient, access_token: str, order_id: str
    ) -> GraphQLResult:
        return client.execute_as(access_token, ca.GET_CUSTOMER_ORDER, {"orderId": order_id})

    def update_customer(
        self, client: CustomerAccountClient, access_token: str, customer_input: dict[str, Any]
    ) -> GraphQLResult:
        return client.execute_as(access_token, ca.UPDATE_CUSTOMER, {"input": customer_input})

    def create_address(
        self,
        client: CustomerAccountClient,
        access_token: str,
        address: dict[str, Any],
        default_address: bool = False,
    ) -> GraphQLResult:
        return client.execute_as(
            access_token,
            ca.CREATE_ADDRESS,
            {"address": address, "defaultAddress": default_address},
        )

    def update_address(
        self,
        client: CustomerAccountClient,
        access_token: str,
        address_id: str,
        address: dict[str, Any] | None = None,
        default_address: bool | None = None,
    ) -> GraphQLResult:
        return client.execute_as(
            access_token,
            ca.UPDATE_ADDRESS,
            {"addressId": address_id, "address": address, "defaultAddress": default_address},
        )

    def delete_address(
        self, client: CustomerAccountClient, access_token: str, address_id: str
    ) -> GraphQLResult:
        return client.execute_as(access_token, ca.DELETE_ADDRESS, {"addressId": address_id})
