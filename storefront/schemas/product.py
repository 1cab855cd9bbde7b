# storefront/schemas/product.py
from decimal import Decimal

from sqlmodel import SQLModel


class Money(SQLModel):
    """
    Decimal amount plus ISO currency code, as Shopify reports it.
    """

    amount: Decimal
    currency_code: str


class Image(SQLModel):
    url: str
    alt_text: str | None = None
    width: int | None = None
    height: int | None = None


class PriceRange(SQLModel):
    min_variant_price: Money
    max_variant_price: Money


class SelectedOption(SQLModel):
    name: str
    value: str


class ProductOption(SQLModel):
    id: str | None = None
    name: str
    values: list[str] = []


class ProductVariant(SQLModel):
    """
    A purchasable configuration of a product (size/color/...).
    Its `id` is the merchandise id used when adding to a cart.
    """

    id: str
    title: str
    available_for_sale: bool = True
    price: Money
    compare_at_price: Money | None = None
    selected_options: list[SelectedOption] = []


class Product(SQLModel):
    """
    Read-only projection of a catalog product.
    """

    id: str
    handle: str
    title: str
    description: str = ""
    description_html: str | None = None
    available_for_sale: bool = True
    price_range: PriceRange
    images: list[Image] = []
    options: list[ProductOption] = []
    variants: list[ProductVariant] = []


class PageInfo(SQLModel):
    has_next_page: bool = False
    end_cursor: str | None = None


class ProductList(SQLModel):
    products: list[Product]
    page_info: PageInfo


class ProductResponse(SQLModel):
    product: Product


class Collection(SQLModel):
    id: str
    handle: str
    title: str
    description: str = ""
    image: Image | None = None


class CollectionList(SQLModel):
    collections: list[Collection]


class CollectionProducts(SQLModel):
    """
    A collection together with one page of its products.
    """

    collection: Collection
    products: list[Product]
    page_info: PageInfo
