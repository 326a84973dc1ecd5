"""Registry domain module.

Contains value objects, exceptions and the introspection request for the
Registry bounded context.
"""

from registry.domain.exceptions import (
    AuthenticationError,
    ConfigurationError,
    InvalidIntrospectionError,
    RegistryQueryError,
    RegistryUnavailableError,
    SchemaChangeNotSupportedError,
    SchemaNotFoundError,
    SchemaProviderError,
    TruncatedTypeReferenceError,
)
from registry.domain.value_objects import (
    DEFAULT_TAG,
    RegistryCredentials,
    SchemaProviderConfig,
    ServiceReference,
    parse_service_specifier,
)

__all__ = [
    "DEFAULT_TAG",
    "AuthenticationError",
    "ConfigurationError",
    "InvalidIntrospectionError",
    "RegistryCredentials",
    "RegistryQueryError",
    "RegistryUnavailableError",
    "SchemaChangeNotSupportedError",
    "SchemaNotFoundError",
    "SchemaProviderConfig",
    "SchemaProviderError",
    "ServiceReference",
    "TruncatedTypeReferenceError",
    "parse_service_specifier",
]
