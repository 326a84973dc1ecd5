"""Registry client interface (port) for the Registry bounded context.

The schema provider talks to the registry only through this protocol, so
the HTTP transport can be swapped or faked without touching the provider.
"""

from __future__ import annotations

from typing import Any, Callable, Protocol, TypeAlias, runtime_checkable

from registry.domain.value_objects import RegistryCredentials
from registry.ports.registry_models import RegistryResponse


@runtime_checkable
class IRegistryClient(Protocol):
    """Authenticated handle to a remote schema registry."""

    async def execute(
        self,
        query: str,
        variables: dict[str, Any],
        operation_name: str | None = None,
    ) -> RegistryResponse:
        """Execute a GraphQL operation against the registry.

        Args:
            query: GraphQL document text.
            variables: Operation variables.
            operation_name: Operation to run when the document holds several.

        Returns:
            RegistryResponse carrying ``data`` and ``errors`` as returned.

        Raises:
            RegistryUnavailableError: If the registry cannot be reached or
                does not answer with a GraphQL response.
        """
        ...

    async def aclose(self) -> None:
        """Release transport resources held by the client."""
        ...


RegistryClientFactory: TypeAlias = Callable[[RegistryCredentials], IRegistryClient]
