# storefront/schemas/graphql.py
from typing import Any

from pydantic import field_validator
from sqlmodel import SQLModel


class GraphQLRequest(SQLModel):
    """
    Generic relay payload: a document and its variables.
    """

    query: str
    variables: dict[str, Any] | None = None

    @field_validator("query")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Query is required")
        return v
