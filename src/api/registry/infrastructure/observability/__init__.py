"""Domain probes for Registry infrastructure."""

from registry.infrastructure.observability.registry_client_probe import (
    DefaultRegistryClientProbe,
    RegistryClientProbe,
)

__all__ = ["DefaultRegistryClientProbe", "RegistryClientProbe"]
