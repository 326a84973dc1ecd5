"""Dependency wiring for the Registry bounded context.

Composes settings, probes, the HTTP registry client and the schema provider.
"""

from __future__ import annotations

from typing import Any, Mapping

from pydantic import ValidationError

from infrastructure.settings import RegistrySettings, get_registry_settings
from infrastructure.version import __version__
from registry.application.observability import (
    DefaultSchemaProviderProbe,
    SchemaProviderProbe,
)
from registry.application.services import RegistrySchemaProvider
from registry.domain.exceptions import ConfigurationError
from registry.domain.value_objects import RegistryCredentials, SchemaProviderConfig
from registry.infrastructure.engine_client import EngineRegistryClient
from registry.infrastructure.observability.registry_client_probe import (
    DefaultRegistryClientProbe,
    RegistryClientProbe,
)
from registry.ports.registry_client import RegistryClientFactory
from shared_kernel.observability_context import ObservationContext


def get_schema_provider_probe(
    context: ObservationContext | None = None,
) -> SchemaProviderProbe:
    """Get SchemaProviderProbe instance.

    Returns:
        DefaultSchemaProviderProbe, bound to ``context`` when given
    """
    probe = DefaultSchemaProviderProbe()
    return probe.with_context(context) if context is not None else probe


def get_registry_client_probe(
    context: ObservationContext | None = None,
) -> RegistryClientProbe:
    """Get RegistryClientProbe instance.

    Returns:
        DefaultRegistryClientProbe, bound to ``context`` when given
    """
    probe = DefaultRegistryClientProbe()
    return probe.with_context(context) if context is not None else probe


def get_registry_client_factory(
    settings: RegistrySettings | None = None,
    context: ObservationContext | None = None,
) -> RegistryClientFactory:
    """Get a factory building HTTP registry clients from credentials.

    Args:
        settings: Registry settings (default: cached environment settings)
        context: Optional observation context for the client probe

    Returns:
        Callable creating an EngineRegistryClient per credentials
    """
    settings = settings or get_registry_settings()
    probe = get_registry_client_probe(context)

    def create_client(credentials: RegistryCredentials) -> EngineRegistryClient:
        return EngineRegistryClient.from_credentials(
            credentials,
            client_name=settings.client_name,
            client_version=settings.client_version or __version__,
            timeout_seconds=settings.timeout_seconds,
            probe=probe,
        )

    return create_client


def get_schema_provider(
    config: SchemaProviderConfig | Mapping[str, Any] | None = None,
    settings: RegistrySettings | None = None,
    context: ObservationContext | None = None,
    coalesce_concurrent: bool = False,
) -> RegistrySchemaProvider:
    """Get a registry-backed schema provider.

    Args:
        config: Provider configuration, either a model or a mapping shaped
            like ``{"engine": {"engineApiKey": ...}, "client": {"service": ...}}``.
            Built from registry settings when omitted.
        settings: Registry settings (default: cached environment settings)
        context: Optional observation context bound to the probes
        coalesce_concurrent: Share one registry request between concurrent
            first callers

    Returns:
        RegistrySchemaProvider ready to resolve the configured schema

    Raises:
        ConfigurationError: If a configuration mapping has a wrongly shaped
            section

    Example:
        >>> provider = get_schema_provider(
        ...     {"engine": {"engineApiKey": "service:my-graph:abc"},
        ...      "client": {"service": "my-graph@staging"}}
        ... )
        >>> schema = await provider.resolve_schema()
    """
    settings = settings or get_registry_settings()

    if config is None:
        provider_config = settings.to_provider_config()
    elif isinstance(config, SchemaProviderConfig):
        provider_config = config
    else:
        try:
            provider_config = SchemaProviderConfig.model_validate(config)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid schema provider configuration: {e}", value=config
            ) from e

    return RegistrySchemaProvider(
        config=provider_config,
        client_factory=get_registry_client_factory(settings=settings, context=context),
        probe=get_schema_provider_probe(context),
        coalesce_concurrent=coalesce_concurrent,
    )
