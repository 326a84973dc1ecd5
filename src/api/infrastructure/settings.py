"""Application settings using pydantic-settings.

Settings are loaded from environment variables with sensible defaults
for development. Deployments should set the registry credentials explicitly.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from registry.domain.value_objects import (
    ClientConfig,
    EngineConfig,
    SchemaProviderConfig,
)


class RegistrySettings(BaseSettings):
    """Schema registry connection settings.

    Environment variables:
        REGISTRY_API_KEY: Registry API key (required to fetch schemas)
        REGISTRY_ENDPOINT: Registry GraphQL endpoint override (default: standard endpoint)
        REGISTRY_SERVICE: Service specifier, "<id>" or "<id>@<tag>"
        REGISTRY_TIMEOUT_SECONDS: HTTP timeout for registry requests (default: 30)
        REGISTRY_CLIENT_NAME: Client name reported to the registry
        REGISTRY_CLIENT_VERSION: Client version reported to the registry (default: package version)
    """

    model_config = SettingsConfigDict(
        env_prefix="REGISTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Registry API key",
    )
    endpoint: str | None = Field(
        default=None,
        description="Registry GraphQL endpoint override",
    )
    service: str | None = Field(
        default=None,
        description="Service specifier (<id> or <id>@<tag>)",
    )
    timeout_seconds: float = Field(
        default=30.0,
        description="HTTP timeout for registry requests",
        gt=0,
        le=300,
    )
    client_name: str = Field(
        default="registry-schema-provider",
        description="Client name reported to the registry",
    )
    client_version: str | None = Field(
        default=None,
        description="Client version reported to the registry",
    )

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, value: str | None) -> str | None:
        """Reject endpoints that are not http(s) URLs."""
        if value is None or value == "":
            return None
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"endpoint must be an http(s) URL, got: {value}")
        return value

    def to_provider_config(self) -> SchemaProviderConfig:
        """Build the provider configuration from these settings.

        An empty API key is passed through as missing so the provider
        reports it as an authentication failure.
        """
        api_key = self.api_key.get_secret_value() or None
        return SchemaProviderConfig(
            engine=EngineConfig(engine_api_key=api_key, endpoint=self.endpoint),
            client=ClientConfig(service=self.service),
        )


class Settings(BaseSettings):
    """Main application settings aggregating all configuration sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(
        default="Registry Schema Provider", description="Application name"
    )
    log_level: Literal["debug", "info", "warning", "error"] = Field(
        default="info", description="Minimum log level"
    )

    @property
    def registry(self) -> RegistrySettings:
        """Get registry settings."""
        return get_registry_settings()


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()


@lru_cache
def get_registry_settings() -> RegistrySettings:
    """Get cached registry settings.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return RegistrySettings()
