# storefront/repositories/mappers.py
"""
Translate Storefront GraphQL nodes (camelCase, edges/node connections)
into the flat snake_case schemas served by this API.
"""
from typing import Any

from pydantic.alias_generators import to_camel

from storefront.schemas.cart import Cart, CartCost, CartLine, Merchandise
from storefront.schemas.product import (
    Collection,
    Image,
    Money,
    PageInfo,
    PriceRange,
    Product,
    ProductOption,
    ProductVariant,
    SelectedOption,
)


def nodes(connection: dict[str, Any] | None) -> list[dict[str, Any]]:
    """`{edges: [{node: X}, ...]}` -> `[X, ...]`; tolerates a missing connection."""
    if not connection:
        return []
    return [edge["node"] for edge in connection.get("edges") or [] if edge.get("node")]


def camelize(payload: dict[str, Any]) -> dict[str, Any]:
    """Snake_case input keys -> GraphQL camelCase (one level deep), dropping None."""
    return {to_camel(k): v for k, v in payload.items() if v is not None}


def to_money(node: dict[str, Any] | None) -> Money | None:
    if not node:
        return None
    return Money(amount=node["amount"], currency_code=node["currencyCode"])


def to_image(node: dict[str, Any] | None) -> Image | None:
    if not node:
        return None
    return Image(
        url=node["url"],
        alt_text=node.get("altText"),
        width=node.get("width"),
        height=node.get("height"),
    )


def to_page_info(node: dict[str, Any] | None) -> PageInfo:
    node = node or {}
    return PageInfo(
        has_next_page=bool(node.get("hasNextPage")),
        end_cursor=node.get("endCursor"),
    )


# ---- Cart ----


def to_cart_line(node: dict[str, Any]) -> CartLine:
    merchandise = node.get("merchandise") or {}
    product = merchandise.get("product") or {}
    images = nodes(product.get("images"))
    return CartLine(
        id=node["id"],
        quantity=node["quantity"],
        merchandise=Merchandise(
            id=merchandise.get("id", ""),
            title=merchandise.get("title", ""),
            product_title=product.get("title", ""),
            product_handle=product.get("handle", ""),
            image=to_image(images[0]) if images else None,
            price=to_money(merchandise.get("price")),
        ),
    )


def to_cart(node: dict[str, Any]) -> Cart:
    cost = node.get("cost") or {}
    lines = [to_cart_line(n) for n in nodes(node.get("lines"))]
    total_quantity = node.get("totalQuantity")
    if total_quantity is None:
        total_quantity = sum(line.quantity for line in lines)
    return Cart(
        id=node["id"],
        checkout_url=node.get("checkoutUrl", ""),
        total_quantity=total_quantity,
        lines=lines,
        cost=CartCost(
            subtotal=to_money(cost.get("subtotalAmount")),
            total=to_money(cost.get("totalAmount")),
            tax=to_money(cost.get("totalTaxAmount")),
        ),
    )


# ---- Catalog ----


def to_variant(node: dict[str, Any]) -> ProductVariant:
    return ProductVariant(
        id=node["id"],
        title=node.get("title", ""),
        available_for_sale=node.get("availableForSale", True),
        price=to_money(node.get("price")),
        compare_at_price=to_money(node.get("compareAtPrice")),
        selected_options=[
            SelectedOption(name=o["name"], value=o["value"])
            for o in node.get("selectedOptions") or []
        ],
    )


def to_product(node: dict[str, Any]) -> Product:
    price_range = node.get("priceRange") or {}
    return Product(
        id=node["id"],
        handle=node["handle"],
        title=node["title"],
        description=node.get("description") or "",
        description_html=node.get("descriptionHtml"),
        available_for_sale=node.get("availableForSale", True),
        price_range=PriceRange(
            min_variant_price=to_money(price_range.get("minVariantPrice")),
            max_variant_price=to_money(price_range.get("maxVariantPrice")),
        ),
        images=[to_image(n) for n in nodes(node.get("images"))],
        options=[
            ProductOption(id=o.get("id"), name=o["name"], values=o.get("values") or [])
            for o in node.get("options") or []
        ],
        variants=[to_variant(n) for n in nodes(node.get("variants"))],
    )


def to_collection(node: dict[str, Any]) -> Collection:
    return Collection(
        id=node["id"],
        handle=node["handle"],
        title=node["title"],
        description=node.get("description") or "",
        image=to_image(node.get("image")),
    )
