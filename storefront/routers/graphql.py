# storefront/routers/graphql.py
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from storefront.core.shopify_client import StorefrontClient, get_storefront_client
from storefront.schemas.graphql import GraphQLRequest

router = APIRouter(prefix="/graphql", tags=["GraphQL"])


@router.post("")
def relay_graphql(
    payload: GraphQLRequest,
    client: StorefrontClient = Depends(get_storefront_client),
):
    """
    Forward a GraphQL document to the Storefront API with the server's
    credentials.

    - 200 with the remote JSON on success.
    - 500 with `{"errors": [{"message": ...}]}` on any failure.
    """
    envelope = client.relay(payload.query, payload.variables or {})
    return JSONResponse(content=envelope.body, status_code=envelope.status)
