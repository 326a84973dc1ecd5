"""Application services for the Registry bounded context."""

from __future__ import annotations

import asyncio
from types import TracebackType

from graphql import GraphQLSchema
from pydantic import ValidationError

from registry.application.observability import (
    DefaultSchemaProviderProbe,
    SchemaProviderProbe,
)
from registry.application.schema_builder import (
    build_schema_from_introspection,
    describe_schema,
)
from registry.domain.exceptions import (
    AuthenticationError,
    ConfigurationError,
    InvalidIntrospectionError,
    RegistryQueryError,
    SchemaChangeNotSupportedError,
    SchemaNotFoundError,
    SchemaProviderError,
)
from registry.domain.introspection_query import (
    SCHEMA_QUERY,
    SCHEMA_QUERY_OPERATION_NAME,
)
from registry.domain.value_objects import (
    Resolved,
    SchemaProviderConfig,
    SchemaState,
    ServiceReference,
    Unresolved,
    parse_service_specifier,
)
from registry.ports.registry_client import IRegistryClient, RegistryClientFactory
from registry.ports.registry_models import RegistryResponse, ServicePayload
from registry.ports.schema_provider import SchemaChangeHandler, SchemaChangeUnsubscribe

API_KEY_CREDENTIAL = "engineApiKey"


def _missing_api_key() -> AuthenticationError:
    return AuthenticationError(
        f"{API_KEY_CREDENTIAL} not found; a registry API key is required",
        credential=API_KEY_CREDENTIAL,
    )


class RegistrySchemaProvider:
    """Schema provider backed by a remote schema registry.

    Fetches the schema for the configured service once, then serves it
    from memory for the lifetime of the provider. A failed resolution
    leaves nothing cached, so calling ``resolve_schema`` again retries.

    Concurrent first calls each reach the registry unless
    ``coalesce_concurrent`` is set, in which case they share one request.
    """

    supports_schema_change = False

    def __init__(
        self,
        config: SchemaProviderConfig,
        client_factory: RegistryClientFactory,
        probe: SchemaProviderProbe | None = None,
        coalesce_concurrent: bool = False,
    ):
        """Initialize the provider.

        Args:
            config: Engine credentials and client service configuration.
            client_factory: Builds the registry client from credentials.
            probe: Optional domain probe for observability.
            coalesce_concurrent: Serialize first resolutions so that
                concurrent callers share a single registry request.
        """
        self._config = config
        self._client_factory = client_factory
        self._probe = probe or DefaultSchemaProviderProbe()
        self._client: IRegistryClient | None = None
        self._state: SchemaState = Unresolved()
        self._lock = asyncio.Lock() if coalesce_concurrent else None

    @property
    def is_resolved(self) -> bool:
        return isinstance(self._state, Resolved)

    @property
    def schema_hash(self) -> str | None:
        """Registry hash of the resolved schema, if any."""
        if isinstance(self._state, Resolved):
            return self._state.schema_hash
        return None

    @property
    def service(self) -> ServiceReference | None:
        """Service reference the resolved schema was fetched for, if any."""
        if isinstance(self._state, Resolved):
            return self._state.service
        return None

    async def resolve_schema(self) -> GraphQLSchema:
        """Return the service's schema, fetching it from the registry on first use.

        Returns:
            The cached GraphQLSchema.

        Raises:
            ConfigurationError: If the service specifier is missing or malformed.
            AuthenticationError: If no API key is configured.
            RegistryQueryError: If the registry reports GraphQL errors.
            SchemaNotFoundError: If the registry has no schema for the service/tag.
            InvalidIntrospectionError: If the returned schema cannot be built.
            RegistryUnavailableError: If the registry cannot be reached.
        """
        if isinstance(self._state, Resolved):
            self._probe.schema_cache_hit(service=str(self._state.service))
            return self._state.schema

        if self._lock is None:
            return await self._fetch_schema()

        async with self._lock:
            # Another caller may have resolved while we waited
            if isinstance(self._state, Resolved):
                self._probe.schema_cache_hit(service=str(self._state.service))
                return self._state.schema
            return await self._fetch_schema()

    def on_schema_change(self, handler: SchemaChangeHandler) -> SchemaChangeUnsubscribe:
        """Watching the registry for schema changes is not supported.

        Raises:
            SchemaChangeNotSupportedError: Always; the handler is never stored.
        """
        self._probe.schema_change_subscription_rejected()
        raise SchemaChangeNotSupportedError(
            "Polling the schema registry for changes is not implemented"
        )

    async def aclose(self) -> None:
        """Close the registry client if one was created."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> RegistrySchemaProvider:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def _fetch_schema(self) -> GraphQLSchema:
        try:
            service = self._validated_service()
            client = self._ensure_client()

            self._probe.schema_resolution_started(service=str(service))
            response = await client.execute(
                query=SCHEMA_QUERY,
                variables=service.as_variables(),
                operation_name=SCHEMA_QUERY_OPERATION_NAME,
            )
            resolved = self._build_resolved(service, response)
        except SchemaProviderError as e:
            configured = self._config.service
            self._probe.schema_resolution_failed(
                error_type=type(e).__name__,
                error=str(e),
                service=configured if isinstance(configured, str) else None,
            )
            raise

        self._state = resolved
        summary = describe_schema(resolved.schema)
        self._probe.schema_resolved(
            service=str(resolved.service),
            schema_hash=resolved.schema_hash,
            type_count=len(summary.types),
            directive_count=len(summary.directives),
        )
        return resolved.schema

    def _validated_service(self) -> ServiceReference:
        """Check the configuration in order: service shape, then credentials."""
        service = self._config.service
        if not isinstance(service, str):
            raise ConfigurationError(
                f"Service name not found for client, found {service!r}",
                value=service,
            )

        if self._client is None and self._config.credentials() is None:
            raise _missing_api_key()

        return parse_service_specifier(service)

    def _ensure_client(self) -> IRegistryClient:
        if self._client is None:
            credentials = self._config.credentials()
            if credentials is None:
                raise _missing_api_key()
            self._client = self._client_factory(credentials)
            self._probe.registry_client_created(endpoint=credentials.endpoint)
        return self._client

    def _build_resolved(
        self, service: ServiceReference, response: RegistryResponse
    ) -> Resolved:
        if response.errors:
            raise RegistryQueryError(response.error_messages)

        try:
            payload = ServicePayload.from_data(response.data)
        except ValidationError as e:
            raise InvalidIntrospectionError(
                f"Malformed schema payload for service {service.service_id}: {e}"
            ) from e

        if payload is None or payload.schema_payload is None:
            raise SchemaNotFoundError(service_id=service.service_id, tag=service.tag)

        schema = build_schema_from_introspection(payload.schema_payload.introspection)
        return Resolved(
            schema=schema,
            service=service,
            schema_hash=payload.schema_payload.hash,
        )
