"""Response models for the registry GraphQL protocol.

Registry clients return ``RegistryResponse``; the schema provider reads the
``service.schema`` payload out of its data.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RegistryError(BaseModel):
    """One entry of a GraphQL ``errors`` list. Extra keys are kept."""

    model_config = ConfigDict(extra="allow")

    message: str


class RegistryResponse(BaseModel):
    """A GraphQL response envelope from the registry."""

    data: dict[str, Any] | None = None
    errors: list[RegistryError] | None = None

    @property
    def error_messages(self) -> list[str]:
        return [error.message for error in self.errors or []]


class SchemaPayload(BaseModel):
    """``service.schema``: the schema hash and its introspection result."""

    model_config = ConfigDict(extra="ignore")

    hash: str | None = None
    introspection: dict[str, Any]


class ServicePayload(BaseModel):
    """``data.service`` of a ``GetSchemaByTag`` response."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    schema_payload: SchemaPayload | None = Field(default=None, alias="schema")

    @classmethod
    def from_data(cls, data: dict[str, Any] | None) -> "ServicePayload | None":
        """Extract ``data.service`` from a response, or None when absent."""
        if not data or not data.get("service"):
            return None
        return cls.model_validate(data["service"])
