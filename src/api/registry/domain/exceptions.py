"""Domain exceptions for the Registry bounded context.

Every failure of a schema resolution surfaces to the caller as one of these.
None of them are retried internally.
"""

from __future__ import annotations


class SchemaProviderError(Exception):
    """Base exception for schema provider failures."""

    pass


class ConfigurationError(SchemaProviderError):
    """Raised when the service specifier is missing or malformed."""

    def __init__(self, message: str, value: object = None):
        super().__init__(message)
        self.value = value


class AuthenticationError(SchemaProviderError):
    """Raised when a required registry credential is missing."""

    def __init__(self, message: str, credential: str):
        super().__init__(message)
        self.credential = credential


class RegistryQueryError(SchemaProviderError):
    """Raised when the registry answers with one or more GraphQL errors.

    The message is every reported error message joined by newlines, in the
    order the registry returned them.
    """

    def __init__(self, messages: list[str]):
        super().__init__("\n".join(messages))
        self.messages = list(messages)


class SchemaNotFoundError(SchemaProviderError):
    """Raised when the registry has no schema for the requested service/tag."""

    def __init__(self, service_id: str, tag: str | None = None):
        target = service_id if tag is None else f"{service_id}@{tag}"
        super().__init__(f"Unable to get schema from the registry for service {target}")
        self.service_id = service_id
        self.tag = tag


class RegistryUnavailableError(SchemaProviderError):
    """Raised when the registry cannot be reached or answers with a non-GraphQL failure."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidIntrospectionError(SchemaProviderError):
    """Raised when an introspection payload cannot be turned into a schema."""

    pass


class TruncatedTypeReferenceError(InvalidIntrospectionError):
    """Raised when a type reference ends before reaching a named type."""

    def __init__(self, depth: int, kinds: tuple[str, ...]):
        chain = " -> ".join(kinds) if kinds else "<empty>"
        super().__init__(
            f"Type reference exceeds maximum depth of {depth} wrapper levels: {chain}"
        )
        self.depth = depth
        self.kinds = kinds


class SchemaChangeNotSupportedError(SchemaProviderError, NotImplementedError):
    """Raised when subscribing to schema changes on a backend without polling."""

    pass
