# storefront/services/customer_service.py
import logging
from typing import Any

from fastapi import HTTPException, status

from storefront.core.errors import unwrap, user_errors_message
from storefront.core.shopify_client import (
    CustomerAccountClient,
    GraphQLOk,
    StorefrontClient,
)
from storefront.repositories.customer_repo import CustomerRepository
from storefront.repositories.mappers import camelize, nodes
from storefront.schemas.customer import (
    AddressCreate,
    AddressUpdate,
    CustomerAccessToken,
    CustomerProfileUpdate,
    CustomerRegisterRequest,
    CustomerRegisterResult,
    MessageResponse,
    OrderList,
)

logger = logging.getLogger(__name__)

RECOVER_MESSAGE = (
    "If an account with that email exists, you will receive a password reset email shortly."
)


class CustomerService:
    """
    Business logic for customer accounts.

    Responsibilities:
      - legacy email/password accounts (Storefront customer tokens)
      - OAuth customers' profile, addresses and orders (Customer Account API)
      - map mutation userErrors to 400/401 and upstream failures to 502
    """

    def __init__(self, repo: CustomerRepository):
        self.repo = repo

    # ---- internal helpers ----

    @staticmethod
    def _mutation_payload(
        data: dict[str, Any],
        root: str,
        errors_key: str = "userErrors",
        error_status: int = status.HTTP_400_BAD_REQUEST,
    ) -> dict[str, Any]:
        payload = data.get(root) or {}
        message = user_errors_message(payload, errors_key)
        if message:
            raise HTTPException(status_code=error_status, detail=message)
        return payload

    # ----- Legacy accounts -----

    def login(self, client: StorefrontClient, email: str, password: str) -> CustomerAccessToken:
        """
        Exchange email/password for a Storefront customer access token.

        Raises:
            HTTPException(401): credentials rejected.
        """
        data = unwrap(self.repo.create_access_token(client, email, password))
        payload = self._mutation_payload(
            data,
            "customerAccessTokenCreate",
            errors_key="customerUserErrors",
            error_status=status.HTTP_401_UNAUTHORIZED,
        )
        token = payload.get("customerAccessToken")
        if not token:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Failed to create access token",
            )
        return CustomerAccessToken(
            access_token=token["accessToken"],
            expires_at=token["expiresAt"],
        )

    def register(
        self, client: StorefrontClient, payload: CustomerRegisterRequest
    ) -> CustomerRegisterResult:
        """
        Create a customer, then log them in.

        A failed follow-up login still counts as a successful registration;
        the customer is asked to log in explicitly.
        """
        customer_input = camelize(
            {
                "email": payload.email,
                "password": payload.password,
                "first_name": payload.first_name,
                "last_name": payload.last_name,
                "accepts_marketing": False,
            }
        )
        data = unwrap(self.repo.create_customer(client, customer_input))
        created = self._mutation_payload(data, "customerCreate", errors_key="customerUserErrors")
        if not created.get("customer"):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Failed to create customer",
            )

        try:
            token = self.login(client, payload.email, payload.password)
        except HTTPException as e:
            logger.info("Login after registration failed: %s", e.detail)
            return CustomerRegisterResult(
                success=True,
                message="Account created successfully. Please log in.",
            )

        return CustomerRegisterResult(
            success=True,
            access_token=token.access_token,
            expires_at=token.expires_at,
        )

    def recover(self, client: StorefrontClient, email: str) -> MessageResponse:
        """
        Request a password reset email.

        Always answers with the same message so the endpoint cannot be used
        to find out which emails have accounts.
        """
        result = self.repo.recover(client, email)
        if not isinstance(result, GraphQLOk):
            logger.warning("Password reset request failed upstream")
        else:
            message = user_errors_message(result.data.get("customerRecover"), "customerUserErrors")
            if message:
                logger.info("Password reset request rejected: %s", message)
        return MessageResponse(message=RECOVER_MESSAGE)

    # ----- Customer Account API -----

    def get_customer(self, client: CustomerAccountClient, access_token: str) -> dict[str, Any] | None:
        return unwrap(self.repo.get_customer(client, access_token)).get("customer")

    def list_addresses(
        self, client: CustomerAccountClient, access_token: str
    ) -> list[dict[str, Any]]:
        customer = unwrap(self.repo.list_addresses(client, access_token)).get("customer") or {}
        default_id = (customer.get("defaultAddress") or {}).get("id")
        addresses = nodes(customer.get("addresses"))
        for address in addresses:
            address["isDefault"] = address.get("id") == default_id
        return addresses

    def list_orders(
        self,
        client: CustomerAccountClient,
        access_token: str,
        first: int = 10,
        after: str | None = None,
    ) -> OrderList:
        customer = unwrap(
            self.repo.list_orders(client, access_token, first=first, after=after)
        ).get("customer") or {}
        connection = customer.get("orders") or {}
        return OrderList(
            orders=nodes(connection),
            page_info=connection.get("pageInfo") or {"hasNextPage": False, "endCursor": None},
        )

    def get_order(
        self, client: CustomerAccountClient, access_token: str, order_id: str
    ) -> dict[str, Any]:
        """
        Raises:
            HTTPException(404): order not found for this customer.
        """
        order = unwrap(self.repo.get_order(client, access_token, order_id)).get("order")
        if not order:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return order

    def update_profile(
        self,
        client: CustomerAccountClient,
        access_token: str,
        payload: CustomerProfileUpdate,
    ) -> dict[str, Any]:
        data = unwrap(
            self.repo.update_customer(client, access_token, camelize(payload.model_dump()))
        )
        return self._mutation_payload(data, "customerUpdate").get("customer") or {}

    def create_address(
        self,
        client: CustomerAccountClient,
        access_token: str,
        payload: AddressCreate,
    ) -> dict[str, Any]:
        address = camelize(payload.model_dump(exclude={"default_address"}))
        data = unwrap(
            self.repo.create_address(
                client, access_token, address, default_address=payload.default_address
            )
        )
        return self._mutation_payload(data, "customerAddressCreate").get("customerAddress") or {}

    def update_address(
        self,
        client: CustomerAccountClient,
        access_token: str,
        address_id: str,
        payload: AddressUpdate,
    ) -> dict[str, Any]:
        address = camelize(payload.model_dump(exclude={"default_address"})) or None
        data = unwrap(
            self.repo.update_address(
                client,
                access_token,
                address_id,
                address=address,
                default_address=payload.default_address,
            )
        )
        return self._mutation_payload(data, "customerAddressUpdate").get("customerAddress") or {}

    def set_default_address(
        self, client: CustomerAccountClient, access_token: str, address_id: str
    ) -> dict[str, Any]:
        return self.update_address(
            client, access_token, address_id, AddressUpdate(default_address=True)
        )

    def delete_address(
        self, client: CustomerAccountClient, access_token: str, address_id: str
    ) -> str:
        data = unwrap(self.repo.delete_address(client, access_token, address_id))
        payload = self._mutation_payload(data, "customerAddressDelete")
        return payload.get("deletedAddressId") or address_id
