# storefront/schemas/cart.py
from dataclasses import dataclass
from typing import Literal

from pydantic import AliasChoices, field_validator
from sqlmodel import SQLModel, Field

from storefront.schemas.product import Image, Money


# ---- Remote cart snapshot ----


class Merchandise(SQLModel):
    """
    The variant a cart line points at, with the parent product's
    title/handle and first image flattened in.
    """

    id: str
    title: str
    product_title: str
    product_handle: str
    image: Image | None = None
    price: Money


class CartLine(SQLModel):
    id: str
    quantity: int
    merchandise: Merchandise


class CartCost(SQLModel):
    subtotal: Money
    total: Money
    tax: Money | None = None


class Cart(SQLModel):
    """
    Snapshot of the remote cart. Always replaced wholesale, never merged.
    """

    id: str
    checkout_url: str
    total_quantity: int = 0
    lines: list[CartLine] = []
    cost: CartCost


class CartResponse(SQLModel):
    cart: Cart


# ---- Proxy payloads (/api/cart) ----


class CartLineAdd(SQLModel):
    """
    One line to add: variant (merchandise) id and quantity.
    Accepts Shopify's camelCase `merchandiseId` as well.
    """

    merchandise_id: str = Field(
        schema_extra={"validation_alias": AliasChoices("merchandise_id", "merchandiseId")}
    )
    quantity: int = Field(default=1, gt=0)

    @field_validator("merchandise_id")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("merchandise_id cannot be empty")
        return v


class CartLineChange(SQLModel):
    """
    One existing line to change. Shopify removes a line updated to 0.
    """

    id: str
    quantity: int = Field(ge=0)


class CartCreateRequest(SQLModel):
    lines: list[CartLineAdd] | None = None


class CartLinesAddRequest(SQLModel):
    lines: list[CartLineAdd]


class CartLinesUpdateRequest(SQLModel):
    lines: list[CartLineChange]


class CartLinesRemoveRequest(SQLModel):
    line_ids: list[str] = Field(
        schema_extra={"validation_alias": AliasChoices("line_ids", "lineIds")}
    )


# ---- Session cart payloads (/cart) ----

# Single-line quantity edits are capped like the cart drawer's stepper.
MAX_LINE_QUANTITY = 99


class CartItemCreate(SQLModel):
    variant_id: str
    quantity: int = Field(default=1, gt=0)


class CartItemUpdate(SQLModel):
    quantity: int = Field(ge=1, le=MAX_LINE_QUANTITY)


class CartView(SQLModel):
    """
    What the cart drawer needs: the mirror plus its visibility flag.
    `is_empty` selects the "your cart is empty" path.
    """

    cart: Cart | None = None
    is_open: bool = False
    cart_count: int = 0
    is_empty: bool = True


# ---- Results ----

CartErrorCode = Literal[
    "no_cart",
    "not_found",
    "invalid_quantity",
    "user_error",
    "application",
    "transport",
    "config",
]


@dataclass(frozen=True)
class CartError:
    code: CartErrorCode
    message: str


@dataclass(frozen=True)
class CartResult:
    """
    Outcome of a cart operation: exactly one of `cart` / `error` is set,
    except for no-op successes on an absent cart (both None).
    """

    cart: Cart | None = None
    error: CartError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, cart: Cart | None) -> "CartResult":
        return cls(cart=cart)

    @classmethod
    def failure(cls, code: CartErrorCode, message: str) -> "CartResult":
        return cls(error=CartError(code=code, message=message))
