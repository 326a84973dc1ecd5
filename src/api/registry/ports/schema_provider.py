"""Schema provider interface shared by every schema backend.

Downstream tooling (validation, completion) depends on this contract only.
Backends that cannot watch for changes advertise it through
``supports_schema_change`` rather than leaving callers to discover it from
the exception.
"""

from __future__ import annotations

from typing import Callable, Protocol, TypeAlias

from graphql import GraphQLSchema

SchemaChangeHandler: TypeAlias = Callable[[GraphQLSchema], None]
SchemaChangeUnsubscribe: TypeAlias = Callable[[], None]


class ISchemaProvider(Protocol):
    """Interface for resolving a GraphQL schema and watching it for changes."""

    @property
    def supports_schema_change(self) -> bool:
        """Whether ``on_schema_change`` can register handlers."""
        ...

    async def resolve_schema(self) -> GraphQLSchema:
        """Resolve the schema, fetching it on first use.

        Returns:
            The resolved GraphQLSchema.
        """
        ...

    def on_schema_change(self, handler: SchemaChangeHandler) -> SchemaChangeUnsubscribe:
        """Register a handler called with the new schema when it changes.

        Args:
            handler: Callback receiving the new schema.

        Returns:
            Callable that removes the handler.

        Raises:
            NotImplementedError: If the backend cannot watch for changes.
        """
        ...
