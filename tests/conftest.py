"""Shared fixtures: a fake Shopify upstream behind httpx.MockTransport."""
from __future__ import annotations

import json
import os
import re
from decimal import Decimal
from urllib.parse import parse_qs

# Settings are read at import time by several modules.
os.environ.update(
    {
        "SHOPIFY_STORE_DOMAIN": "test-shop.myshopify.com",
        "SHOPIFY_STOREFRONT_PUBLIC_ACCESS_TOKEN": "public-token-1234",
        "SHOPIFY_STOREFRONT_PRIVATE_ACCESS_TOKEN": "shpat_private_token_5678",
        "SHOPIFY_ADMIN_API_ACCESS_TOKEN": "shpat_admin_token_9012",
        "SHOPIFY_CUSTOMER_ACCOUNT_API_CLIENT_ID": "client-abc",
        "SHOPIFY_CUSTOMER_ACCOUNT_API_URL": "https://shopify.com/authentication/42",
        "SHOPIFY_CUSTOMER_API_VERSION": "2025-04",
        "SHOPIFY_ORIGIN_URL": "http://localhost:3000",
        "COOKIE_SECURE": "false",
        "ADMIN_DASHBOARD_KEY": "admin-secret",
        "ENVIRONMENT": "test",
    }
)

import httpx
import pytest
from fastapi.testclient import TestClient

from storefront.core.config import get_settings
from storefront.core.customer_oauth import CustomerOAuthClient, get_oauth_client
from storefront.core.shopify_client import (
    AdminClient,
    CustomerAccountClient,
    StorefrontClient,
    get_admin_client,
    get_customer_account_client,
    get_storefront_client,
)

OPERATION = re.compile(r"\b(query|mutation)\s+(\w+)")

UNIT_PRICE = Decimal("12.50")


def money(amount: Decimal | str) -> dict:
    return {"amount": str(amount), "currencyCode": "USD"}


def product_node(handle: str = "chocolate-cake", title: str = "Chocolate Cake") -> dict:
    return {
        "id": f"gid://shopify/Product/{handle}",
        "handle": handle,
        "title": title,
        "description": f"{title} description",
        "descriptionHtml": f"<p>{title} description</p>",
        "availableForSale": True,
        "priceRange": {
            "minVariantPrice": money(UNIT_PRICE),
            "maxVariantPrice": money(UNIT_PRICE),
        },
        "images": {"edges": [{"node": {"url": f"https://cdn.test/{handle}.jpg", "altText": title}}]},
        "options": [{"id": "gid://shopify/ProductOption/1", "name": "Size", "values": ["Small"]}],
        "variants": {
            "edges": [
                {
                    "node": {
                        "id": "gid://shopify/ProductVariant/1",
                        "title": "Small",
                        "availableForSale": True,
                        "price": money(UNIT_PRICE),
                        "compareAtPrice": None,
                        "selectedOptions": [{"name": "Size", "value": "Small"}],
                    }
                }
            ]
        },
    }


class FakeShopify:
    """
    In-memory Storefront / Customer Account / Admin / OAuth upstream.

    GraphQL requests are dispatched on the operation name to `op_<Name>`.
    `overrides[name]` replaces a whole response (an httpx.Response or a
    callable taking the variables).
    """

    def __init__(self) -> None:
        self.carts: dict[str, dict] = {}
        self.calls: list[tuple[str | None, dict, httpx.Headers]] = []
        self.form_calls: list[tuple[str, dict]] = []
        self.overrides: dict[str, object] = {}
        self.token_status = 200
        self.revoke_status = 200
        self.token_customer_id: str | None = "gid://shopify/Customer/7"
        self._seq = 0

    # ---- transport entry point ----

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        if path.endswith("/auth/oauth/token"):
            return self._token(request)
        if path.endswith("/auth/oauth/revoke"):
            self.form_calls.append(("revoke", self._form(request)))
            return httpx.Response(self.revoke_status)

        body = json.loads(request.content)
        match = OPERATION.search(body["query"])
        op = match.group(2) if match else None
        variables = body.get("variables") or {}
        self.calls.append((op, variables, request.headers))

        override = self.overrides.get(op)
        if override is not None:
            return override(variables) if callable(override) else override

        handler = getattr(self, f"op_{op}", None)
        if handler is None:
            return httpx.Response(200, json={"errors": [{"message": f"Unknown operation {op}"}]})
        return httpx.Response(200, json={"data": handler(variables)})

    def operations(self) -> list[str | None]:
        return [op for op, _, _ in self.calls]

    # ---- OAuth ----

    @staticmethod
    def _form(request: httpx.Request) -> dict:
        return {k: v[0] for k, v in parse_qs(request.content.decode()).items()}

    def _token(self, request: httpx.Request) -> httpx.Response:
        form = self._form(request)
        self.form_calls.append((form.get("grant_type"), form))
        if self.token_status != 200:
            return httpx.Response(self.token_status)
        if form.get("grant_type") == "authorization_code" and form.get("code") != "good-code":
            return httpx.Response(400)
        self._seq += 1
        return httpx.Response(
            200,
            json={
                "access_token": f"access-{self._seq}",
                "refresh_token": f"refresh-{self._seq}",
                "expires_in": 3600,
                "customer_id": self.token_customer_id,
            },
        )

    # ---- carts ----

    def _next(self, prefix: str) -> str:
        self._seq += 1
        return f"{prefix}{self._seq}"

    def _cart_node(self, cart: dict) -> dict:
        lines = cart["lines"]
        subtotal = sum((UNIT_PRICE * line["quantity"] for line in lines), Decimal("0"))
        return {
            "id": cart["id"],
            "checkoutUrl": f"https://test-shop.myshopify.com/cart/c/{cart['id'].rsplit('/', 1)[-1]}",
            "totalQuantity": sum(line["quantity"] for line in lines),
            "cost": {
                "subtotalAmount": money(subtotal),
                "totalAmount": money(subtotal),
                "totalTaxAmount": None,
            },
            "lines": {
                "edges": [
                    {
                        "node": {
                            "id": line["id"],
                            "quantity": line["quantity"],
                            "merchandise": {
                                "id": line["merchandiseId"],
                                "title": "Small",
                                "price": money(UNIT_PRICE),
                                "product": {
                                    "title": "Chocolate Cake",
                                    "handle": "chocolate-cake",
                                    "images": {"edges": []},
                                },
                            },
                        }
                    }
                    for line in lines
                ]
            },
        }

    def _add(self, cart: dict, lines: list[dict]) -> None:
        for new in lines:
            for line in cart["lines"]:
                if line["merchandiseId"] == new["merchandiseId"]:
                    line["quantity"] += new["quantity"]
                    break
            else:
                cart["lines"].append(
                    {
                        "id": self._next("gid://shopify/CartLine/"),
                        "merchandiseId": new["merchandiseId"],
                        "quantity": new["quantity"],
                    }
                )

    @staticmethod
    def _user_error(root: str, message: str) -> dict:
        return {root: {"cart": None, "userErrors": [{"field": None, "message": message}]}}

    def new_cart(self, lines: list[dict] | None = None) -> str:
        cart = {"id": self._next("gid://shopify/Cart/c"), "lines": []}
        self._add(cart, lines or [])
        self.carts[cart["id"]] = cart
        return cart["id"]

    def op_GetCart(self, v: dict) -> dict:
        cart = self.carts.get(v["cartId"])
        return {"cart": self._cart_node(cart) if cart else None}

    def op_CartCreate(self, v: dict) -> dict:
        cart_id = self.new_cart(v.get("lines"))
        return {"cartCreate": {"cart": self._cart_node(self.carts[cart_id]), "userErrors": []}}

    def op_CartLinesAdd(self, v: dict) -> dict:
        cart = self.carts.get(v["cartId"])
        if cart is None:
            return self._user_error("cartLinesAdd", "The specified cart does not exist.")
        self._add(cart, v["lines"])
        return {"cartLinesAdd": {"cart": self._cart_node(cart), "userErrors": []}}

    def op_CartLinesUpdate(self, v: dict) -> dict:
        cart = self.carts.get(v["cartId"])
        if cart is None:
            return self._user_error("cartLinesUpdate", "The specified cart does not exist.")
        by_id = {line["id"]: line for line in cart["lines"]}
        for change in v["lines"]:
            if change["id"] not in by_id:
                return self._user_error(
                    "cartLinesUpdate", f"The merchandise line with id {change['id']} does not exist."
                )
        for change in v["lines"]:
            by_id[change["id"]]["quantity"] = change["quantity"]
        cart["lines"] = [line for line in cart["lines"] if line["quantity"] > 0]
        return {"cartLinesUpdate": {"cart": self._cart_node(cart), "userErrors": []}}

    def op_CartLinesRemove(self, v: dict) -> dict:
        cart = self.carts.get(v["cartId"])
        if cart is None:
            return self._user_error("cartLinesRemove", "The specified cart does not exist.")
        known = {line["id"] for line in cart["lines"]}
        missing = [line_id for line_id in v["lineIds"] if line_id not in known]
        if missing:
            return self._user_error(
                "cartLinesRemove", f"The merchandise line with id {missing[0]} does not exist."
            )
        cart["lines"] = [line for line in cart["lines"] if line["id"] not in v["lineIds"]]
        return {"cartLinesRemove": {"cart": self._cart_node(cart), "userErrors": []}}

    # ---- catalog ----

    def op_GetProducts(self, v: dict) -> dict:
        return {
            "products": {
                "pageInfo": {"hasNextPage": True, "endCursor": "cursor-1"},
                "edges": [
                    {"node": product_node("chocolate-cake", "Chocolate Cake")},
                    {"node": product_node("lemon-tart", "Lemon Tart")},
                ],
            }
        }

    def op_GetProductByHandle(self, v: dict) -> dict:
        if v["handle"] != "chocolate-cake":
            return {"product": None}
        return {"product": product_node()}

    def op_GetCollections(self, v: dict) -> dict:
        return {
            "collections": {
                "edges": [
                    {"node": {"id": "gid://shopify/Collection/1", "handle": "cakes", "title": "Cakes"}}
                ]
            }
        }

    def op_GetCollectionProducts(self, v: dict) -> dict:
        if v["handle"] != "cakes":
            return {"collection": None}
        return {
            "collection": {
                "id": "gid://shopify/Collection/1",
                "handle": "cakes",
                "title": "Cakes",
                "products": {
                    "pageInfo": {"hasNextPage": False, "endCursor": None},
                    "edges": [{"node": product_node()}],
                },
            }
        }

    # ---- legacy customers ----

    def op_CustomerAccessTokenCreate(self, v: dict) -> dict:
        if v["input"]["password"] != "correct-password":
            return {
                "customerAccessTokenCreate": {
                    "customerAccessToken": None,
                    "customerUserErrors": [
                        {"code": "UNIDENTIFIED_CUSTOMER", "field": None, "message": "Unidentified customer"}
                    ],
                }
            }
        return {
            "customerAccessTokenCreate": {
                "customerAccessToken": {
                    "accessToken": "legacy-token",
                    "expiresAt": "2030-01-01T00:00:00Z",
                },
                "customerUserErrors": [],
            }
        }

    def op_CustomerCreate(self, v: dict) -> dict:
        return {
            "customerCreate": {
                "customer": {"id": "gid://shopify/Customer/9", "email": v["input"]["email"]},
                "customerUserErrors": [],
            }
        }

    def op_CustomerRecover(self, v: dict) -> dict:
        return {"customerRecover": {"customerUserErrors": []}}

    # ---- Customer Account API ----

    def op_GetCustomer(self, v: dict) -> dict:
        return {
            "customer": {
                "id": "gid://shopify/Customer/7",
                "firstName": "Ada",
                "lastName": "Lovelace",
                "emailAddress": {"emailAddress": "ada@example.com"},
            }
        }

    def op_GetCustomerOrders(self, v: dict) -> dict:
        return {
            "customer": {
                "id": "gid://shopify/Customer/7",
                "orders": {
                    "pageInfo": {"hasNextPage": False, "endCursor": None},
                    "edges": [{"node": {"id": "gid://shopify/Order/1", "name": "#1001"}}],
                },
            }
        }

    def op_GetCustomerAddresses(self, v: dict) -> dict:
        return {
            "customer": {
                "id": "gid://shopify/Customer/7",
                "defaultAddress": {"id": "gid://shopify/CustomerAddress/2"},
                "addresses": {
                    "edges": [
                        {"node": {"id": "gid://shopify/CustomerAddress/1", "city": "Hanoi"}},
                        {"node": {"id": "gid://shopify/CustomerAddress/2", "city": "Hue"}},
                    ]
                },
            }
        }

    # ---- Admin API ----

    def op_GetShopInfo(self, v: dict) -> dict:
        return {"shop": {"name": "Test Shop", "primaryDomain": {"url": "https://test-shop.com"}}}

    def op_GetAdminProducts(self, v: dict) -> dict:
        return {
            "products": {
                "pageInfo": {"hasNextPage": False, "endCursor": None},
                "edges": [{"node": {"id": "gid://shopify/Product/1", "title": "Chocolate Cake", "status": "DRAFT"}}],
            }
        }


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def shopify() -> FakeShopify:
    return FakeShopify()


@pytest.fixture
def transport(shopify: FakeShopify) -> httpx.MockTransport:
    return httpx.MockTransport(shopify.handler)


@pytest.fixture
def storefront_client(transport) -> StorefrontClient:
    return StorefrontClient(get_settings(), transport=transport)


@pytest.fixture
def customer_account_client(transport) -> CustomerAccountClient:
    return CustomerAccountClient(get_settings(), transport=transport)


@pytest.fixture
def admin_client(transport) -> AdminClient:
    return AdminClient(get_settings(), transport=transport)


@pytest.fixture
def oauth_client(transport) -> CustomerOAuthClient:
    return CustomerOAuthClient(get_settings(), transport=transport)


@pytest.fixture
def client(storefront_client, customer_account_client, admin_client, oauth_client):
    from storefront.main import app

    app.dependency_overrides[get_storefront_client] = lambda: storefront_client
    app.dependency_overrides[get_customer_account_client] = lambda: customer_account_client
    app.dependency_overrides[get_admin_client] = lambda: admin_client
    app.dependency_overrides[get_oauth_client] = lambda: oauth_client
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
