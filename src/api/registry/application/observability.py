"""Domain probes for the Registry application layer.

Following Domain Oriented Observability pattern.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class SchemaProviderProbe(Protocol):
    """Domain probe for registry schema provider operations."""

    def schema_cache_hit(self, service: str) -> None:
        """Record that a cached schema was returned without network access."""
        ...

    def schema_resolution_started(self, service: str) -> None:
        """Record that a schema is being fetched from the registry."""
        ...

    def registry_client_created(self, endpoint: str | None) -> None:
        """Record that the provider created its registry client."""
        ...

    def schema_resolved(
        self,
        service: str,
        schema_hash: str | None,
        type_count: int,
        directive_count: int,
    ) -> None:
        """Record that a schema was built and cached."""
        ...

    def schema_resolution_failed(
        self,
        error_type: str,
        error: str,
        service: str | None = None,
    ) -> None:
        """Record that resolving the schema failed."""
        ...

    def schema_change_subscription_rejected(self) -> None:
        """Record that a caller tried to watch for schema changes."""
        ...

    def with_context(self, context: ObservationContext) -> SchemaProviderProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultSchemaProviderProbe:
    """Default implementation using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultSchemaProviderProbe:
        return DefaultSchemaProviderProbe(logger=self._logger, context=context)

    def schema_cache_hit(self, service: str) -> None:
        self._logger.debug(
            "registry_schema_cache_hit",
            service=service,
            **self._get_context_kwargs(),
        )

    def schema_resolution_started(self, service: str) -> None:
        self._logger.info(
            "registry_schema_resolution_started",
            service=service,
            **self._get_context_kwargs(),
        )

    def registry_client_created(self, endpoint: str | None) -> None:
        self._logger.info(
            "registry_client_created",
            endpoint=endpoint,
            **self._get_context_kwargs(),
        )

    def schema_resolved(
        self,
        service: str,
        schema_hash: str | None,
        type_count: int,
        directive_count: int,
    ) -> None:
        self._logger.info(
            "registry_schema_resolved",
            service=service,
            schema_hash=schema_hash,
            type_count=type_count,
            directive_count=directive_count,
            **self._get_context_kwargs(),
        )

    def schema_resolution_failed(
        self,
        error_type: str,
        error: str,
        service: str | None = None,
    ) -> None:
        self._logger.error(
            "registry_schema_resolution_failed",
            error_type=error_type,
            error=error,
            service=service,
            **self._get_context_kwargs(),
        )

    def schema_change_subscription_rejected(self) -> None:
        self._logger.warning(
            "registry_schema_change_subscription_rejected",
            **self._get_context_kwargs(),
        )
