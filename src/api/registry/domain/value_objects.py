"""Domain value objects for the Registry bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeAlias

from graphql import GraphQLSchema
from pydantic import BaseModel, ConfigDict, Field, SecretStr

from registry.domain.exceptions import ConfigurationError

DEFAULT_TAG = "current"
SERVICE_TAG_SEPARATOR = "@"


class ServiceReference(BaseModel):
    """A registry service id paired with the tag (schema variant) to fetch."""

    model_config = ConfigDict(frozen=True)

    service_id: str = Field(min_length=1)
    tag: str = Field(default=DEFAULT_TAG, min_length=1)

    def __str__(self) -> str:
        return f"{self.service_id}{SERVICE_TAG_SEPARATOR}{self.tag}"

    def as_variables(self) -> dict[str, str]:
        """Variables for the GetSchemaByTag operation."""
        return {"id": self.service_id, "tag": self.tag}


def parse_service_specifier(specifier: object) -> ServiceReference:
    """Parse a ``<id>`` or ``<id>@<tag>`` service specifier.

    Args:
        specifier: The configured service value.

    Returns:
        ServiceReference with the tag defaulting to ``DEFAULT_TAG``.

    Raises:
        ConfigurationError: If the value is not a string, is empty, has more
            than one ``@``, or has an empty id or tag.
    """
    if not isinstance(specifier, str):
        raise ConfigurationError(
            f"Service specifier must be a string, found {specifier!r}",
            value=specifier,
        )

    parts = [part.strip() for part in specifier.split(SERVICE_TAG_SEPARATOR)]
    if len(parts) > 2:
        raise ConfigurationError(
            f"Invalid service specifier {specifier!r}: expected '<id>' or '<id>@<tag>'",
            value=specifier,
        )

    service_id = parts[0]
    if not service_id:
        raise ConfigurationError(
            f"Invalid service specifier {specifier!r}: service id is empty",
            value=specifier,
        )

    if len(parts) == 1:
        return ServiceReference(service_id=service_id)

    tag = parts[1]
    if not tag:
        raise ConfigurationError(
            f"Invalid service specifier {specifier!r}: tag after '@' is empty",
            value=specifier,
        )
    return ServiceReference(service_id=service_id, tag=tag)


class RegistryCredentials(BaseModel):
    """API key and optional endpoint override used to reach the registry."""

    model_config = ConfigDict(frozen=True)

    api_key: SecretStr
    endpoint: str | None = None


class EngineConfig(BaseModel):
    """The ``engine`` section of a client configuration."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    engine_api_key: str | None = Field(default=None, alias="engineApiKey")
    endpoint: str | None = None


class ClientConfig(BaseModel):
    """The ``client`` section of a client configuration.

    ``service`` is left untyped so a wrong shape reaches the provider,
    which reports it as a configuration error.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    service: Any = None


class SchemaProviderConfig(BaseModel):
    """Configuration consumed by the registry schema provider."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    engine: EngineConfig | None = None
    client: ClientConfig | None = Field(default_factory=ClientConfig)

    @property
    def service(self) -> Any:
        """The configured service specifier; None without a client section."""
        return self.client.service if self.client is not None else None

    def credentials(self) -> RegistryCredentials | None:
        """Registry credentials, or None when no API key is configured."""
        if self.engine is None or not self.engine.engine_api_key:
            return None
        return RegistryCredentials(
            api_key=SecretStr(self.engine.engine_api_key),
            endpoint=self.engine.endpoint,
        )


@dataclass(frozen=True)
class Unresolved:
    """No schema has been fetched yet."""


@dataclass(frozen=True)
class Resolved:
    """A schema fetched from the registry."""

    schema: GraphQLSchema
    service: ServiceReference
    schema_hash: str | None = None


SchemaState: TypeAlias = Unresolved | Resolved
