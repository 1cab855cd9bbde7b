import httpx
import pytest

from storefront.core.config import Settings, get_settings
from storefront.core.shopify_client import (
    AdminClient,
    ApplicationError,
    CustomerAccountClient,
    GraphQLOk,
    ShopifyConfigError,
    StorefrontClient,
    TransportError,
)
from storefront.queries.storefront import GET_PRODUCTS


def _client(handler, **overrides) -> StorefrontClient:
    settings = Settings(**overrides) if overrides else get_settings()
    return StorefrontClient(settings, transport=httpx.MockTransport(handler))


def test_ok_result_keeps_payload_and_sends_private_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        return httpx.Response(200, json={"data": {"shop": {"name": "x"}}})

    result = _client(handler).execute("query Shop { shop { name } }")

    assert isinstance(result, GraphQLOk)
    assert result.data == {"shop": {"name": "x"}}
    assert seen["url"] == "https://test-shop.myshopify.com/api/2025-04/graphql.json"
    assert seen["headers"]["Shopify-Storefront-Private-Token"] == "shpat_private_token_5678"
    assert "X-Shopify-Storefront-Access-Token" not in seen["headers"]


def test_public_token_header_when_no_private_token():
    client = StorefrontClient(Settings(SHOPIFY_STOREFRONT_PRIVATE_ACCESS_TOKEN=None))

    headers = client._headers()

    assert headers["X-Shopify-Storefront-Access-Token"] == "public-token-1234"
    assert "Shopify-Storefront-Private-Token" not in headers


def test_non_2xx_is_transport_error():
    result = _client(lambda r: httpx.Response(503, json={"message": "down"})).execute(GET_PRODUCTS)

    assert isinstance(result, TransportError)
    assert result.status == 503
    assert "503" in result.message


def test_errors_array_on_200_is_application_error():
    payload = {"errors": [{"message": "Field 'nope' doesn't exist"}, {"message": "second"}]}
    result = _client(lambda r: httpx.Response(200, json=payload)).execute(GET_PRODUCTS)

    assert isinstance(result, ApplicationError)
    assert result.messages == ["Field 'nope' doesn't exist", "second"]
    assert result.message == "Field 'nope' doesn't exist, second"


def test_network_failure_is_transport_error_without_status():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = _client(handler).execute(GET_PRODUCTS)

    assert isinstance(result, TransportError)
    assert result.status is None


def test_missing_storefront_config_raises_at_call_time():
    client = _client(lambda r: httpx.Response(200, json={"data": {}}), SHOPIFY_STORE_DOMAIN=None)

    with pytest.raises(ShopifyConfigError, match="SHOPIFY_STORE_DOMAIN"):
        client.execute(GET_PRODUCTS)


def test_relay_normalizes_every_failure_to_500_envelope():
    ok = _client(lambda r: httpx.Response(200, json={"data": {"a": 1}})).relay("query A { a }")
    app_error = _client(
        lambda r: httpx.Response(200, json={"errors": [{"message": "bad"}]})
    ).relay("query A { a }")
    transport = _client(lambda r: httpx.Response(401)).relay("query A { a }")
    config = _client(
        lambda r: httpx.Response(200, json={"data": {}}),
        SHOPIFY_STOREFRONT_PUBLIC_ACCESS_TOKEN=None,
    ).relay("query A { a }")

    assert (ok.status, ok.body) == (200, {"data": {"a": 1}})
    assert (app_error.status, app_error.body) == (500, {"errors": [{"message": "bad"}]})
    assert transport.status == 500
    assert "401" in transport.body["errors"][0]["message"]
    assert config.status == 500
    assert "SHOPIFY_STOREFRONT_PUBLIC_ACCESS_TOKEN" in config.body["errors"][0]["message"]


def test_customer_account_client_sends_customer_token_and_version(shopify, transport):
    client = CustomerAccountClient(get_settings(), transport=transport)

    result = client.execute_as("customer-token", "query GetCustomer { customer { id } }")

    assert isinstance(result, GraphQLOk)
    _, _, headers = shopify.calls[-1]
    assert headers["X-Shopify-Customer-Access-Token"] == "customer-token"
    assert headers["X-Shopify-Api-Version"] == "2025-04"


def test_customer_account_client_refuses_anonymous_calls(transport):
    client = CustomerAccountClient(get_settings(), transport=transport)

    with pytest.raises(TypeError):
        client.execute("query GetCustomer { customer { id } }")
    # Not a configuration problem, so relay does not fold it into a 500 envelope.
    with pytest.raises(TypeError):
        client.relay("query GetCustomer { customer { id } }")


def test_admin_client_uses_admin_endpoint_and_token():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["headers"] = request.headers
        return httpx.Response(200, json={"data": {"shop": {"name": "Test Shop"}}})

    client = AdminClient(get_settings(), transport=httpx.MockTransport(handler))
    result = client.execute("query GetShopInfo { shop { name } }")

    assert isinstance(result, GraphQLOk)
    assert seen["url"] == "https://test-shop.myshopify.com/admin/api/2023-10/graphql.json"
    assert seen["headers"]["X-Shopify-Access-Token"] == "shpat_admin_token_9012"


def test_admin_client_without_token_raises():
    client = AdminClient(Settings(SHOPIFY_ADMIN_API_ACCESS_TOKEN=None))

    with pytest.raises(ShopifyConfigError, match="SHOPIFY_ADMIN_API_ACCESS_TOKEN"):
        client.execute("query GetShopInfo { shop { name } }")
