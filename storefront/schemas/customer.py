# storefront/schemas/customer.py
from typing import Any

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field


class CustomerLoginRequest(SQLModel):
    """
    Email/password login against the Storefront legacy customer API.
    """

    email: str
    password: str

    @field_validator("email", "password")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Email and password are required")
        return v


class CustomerAccessToken(SQLModel):
    access_token: str
    expires_at: str


class CustomerRegisterRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: str
    password: str = Field(min_length=5)
    first_name: str | None = None
    last_name: str | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("email cannot be empty")
        return v


class CustomerRegisterResult(SQLModel):
    """
    `access_token` is set when the follow-up login succeeded; otherwise
    the customer exists but has to log in explicitly.
    """

    success: bool
    message: str | None = None
    access_token: str | None = None
    expires_at: str | None = None


class CustomerRecoverRequest(SQLModel):
    email: str


class MessageResponse(SQLModel):
    success: bool = True
    message: str


class CustomerEnvelope(SQLModel):
    customer: dict[str, Any] | None


class CustomerProfileUpdate(SQLModel):
    """
    Partial profile update (Customer Account API). Only names are editable.
    """

    model_config = ConfigDict(extra="forbid")

    first_name: str | None = None
    last_name: str | None = None


class AddressInput(SQLModel):
    model_config = ConfigDict(extra="forbid")

    first_name: str | None = None
    last_name: str | None = None
    company: str | None = None
    address1: str | None = None
    address2: str | None = None
    city: str | None = None
    zone_code: str | None = None
    zip: str | None = None
    territory_code: str | None = None
    phone_number: str | None = None


class AddressCreate(AddressInput):
    default_address: bool = False


class AddressUpdate(AddressInput):
    default_address: bool | None = None


class DefaultAddressUpdate(SQLModel):
    address_id: str


class OrderList(SQLModel):
    orders: list[dict[str, Any]]
    page_info: dict[str, Any]
