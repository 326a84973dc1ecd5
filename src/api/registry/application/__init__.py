"""Registry application layer."""

from registry.application.services import RegistrySchemaProvider

__all__ = ["RegistrySchemaProvider"]
