"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Captures session-scoped and registry-relevant metadata that should be
    included with all instrumentation events.

    Attributes:
        request_id: Identifier for the current operation (if applicable).
        session_id: Identifier of the tooling session owning the provider.
        service_id: Registry service the operation targets.
        tag: Registry tag (schema variant) the operation targets.
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(session_id="lsp-1", service_id="my-graph")
        probe = DefaultSchemaProviderProbe().with_context(context)
    """

    request_id: str | None = None
    session_id: str | None = None
    service_id: str | None = None
    tag: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.session_id is not None:
            result["session_id"] = self.session_id
        if self.service_id is not None:
            result["service_id"] = self.service_id
        if self.tag is not None:
            result["tag"] = self.tag
        result.update(self.extra)
        return result

    def with_service(self, service_id: str, tag: str | None = None) -> ObservationContext:
        """Create a new context targeting a registry service."""
        return replace(self, service_id=service_id, tag=tag)

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        return replace(self, extra={**self.extra, **kwargs})
