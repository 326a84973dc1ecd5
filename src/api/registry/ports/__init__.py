"""Registry ports (interfaces) module.

Ports define the contracts between the application layer and infrastructure,
so the provider never depends on a concrete registry transport.
"""

from registry.ports.registry_client import IRegistryClient, RegistryClientFactory
from registry.ports.schema_provider import ISchemaProvider

__all__ = ["IRegistryClient", "ISchemaProvider", "RegistryClientFactory"]
