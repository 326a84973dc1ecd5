"""Domain probe for registry client operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to talking to the schema registry.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class RegistryClientProbe(Protocol):
    """Domain probe for registry client operations.

    Records domain events while executing operations against the registry.
    """

    def request_sent(self, endpoint: str, operation_name: str | None) -> None:
        """Record that an operation was sent to the registry."""
        ...

    def response_received(
        self, endpoint: str, status_code: int, error_count: int
    ) -> None:
        """Record that the registry answered with a GraphQL response."""
        ...

    def request_failed(
        self, endpoint: str, reason: str, status_code: int | None = None
    ) -> None:
        """Record that a registry request failed."""
        ...

    def client_closed(self, endpoint: str) -> None:
        """Record that the client released its transport."""
        ...

    def with_context(self, context: ObservationContext) -> RegistryClientProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultRegistryClientProbe:
    """Default implementation of RegistryClientProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultRegistryClientProbe:
        """Create a new probe with observation context bound."""
        return DefaultRegistryClientProbe(logger=self._logger, context=context)

    def request_sent(self, endpoint: str, operation_name: str | None) -> None:
        self._logger.debug(
            "registry_request_sent",
            endpoint=endpoint,
            operation_name=operation_name,
            **self._get_context_kwargs(),
        )

    def response_received(
        self, endpoint: str, status_code: int, error_count: int
    ) -> None:
        self._logger.info(
            "registry_response_received",
            endpoint=endpoint,
            status_code=status_code,
            error_count=error_count,
            **self._get_context_kwargs(),
        )

    def request_failed(
        self, endpoint: str, reason: str, status_code: int | None = None
    ) -> None:
        self._logger.error(
            "registry_request_failed",
            endpoint=endpoint,
            reason=reason,
            status_code=status_code,
            **self._get_context_kwargs(),
        )

    def client_closed(self, endpoint: str) -> None:
        self._logger.debug(
            "registry_client_closed",
            endpoint=endpoint,
            **self._get_context_kwargs(),
        )
