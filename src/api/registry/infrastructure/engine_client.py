"""HTTP client for the hosted schema registry.

Sends GraphQL operations to the registry endpoint with httpx, authenticated
by an API key header.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from registry.domain.exceptions import RegistryUnavailableError
from registry.domain.value_objects import RegistryCredentials
from registry.infrastructure.observability.registry_client_probe import (
    DefaultRegistryClientProbe,
    RegistryClientProbe,
)
from registry.ports.registry_client import IRegistryClient
from registry.ports.registry_models import RegistryResponse

DEFAULT_ENGINE_ENDPOINT = "https://engine-graphql.apollographql.com/api/graphql"


class EngineRegistryClient(IRegistryClient):
    """Registry client posting GraphQL operations over HTTPS.

    The underlying ``httpx.AsyncClient`` is created on first use unless one
    is injected; an injected client is left open by ``aclose``.
    """

    def __init__(
        self,
        api_key: str,
        endpoint: str | None = None,
        client_name: str | None = None,
        client_version: str | None = None,
        timeout_seconds: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
        probe: RegistryClientProbe | None = None,
    ):
        """Initialize the registry client.

        Args:
            api_key: Registry API key sent as ``x-api-key``.
            endpoint: Endpoint override (default: ``DEFAULT_ENGINE_ENDPOINT``).
            client_name: Reported as ``apollo-client-name`` when set.
            client_version: Reported as ``apollo-client-version`` when set.
            timeout_seconds: Timeout for each request.
            http_client: Optional pre-built client (not closed by ``aclose``).
            probe: Optional domain probe for observability.
        """
        self._api_key = api_key
        self._endpoint = endpoint or DEFAULT_ENGINE_ENDPOINT
        self._client_name = client_name
        self._client_version = client_version
        self._timeout = timeout_seconds
        self._http_client = http_client
        self._owns_http_client = http_client is None
        self._probe = probe or DefaultRegistryClientProbe()

    @classmethod
    def from_credentials(
        cls, credentials: RegistryCredentials, **kwargs: Any
    ) -> EngineRegistryClient:
        """Create a client from registry credentials."""
        return cls(
            api_key=credentials.api_key.get_secret_value(),
            endpoint=credentials.endpoint,
            **kwargs,
        )

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def _request_headers(self) -> dict[str, str]:
        """Build request headers including the API key."""
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self._api_key,
        }
        if self._client_name is not None:
            headers["apollo-client-name"] = self._client_name
        if self._client_version is not None:
            headers["apollo-client-version"] = self._client_version
        return headers

    def _ensure_http_client(self) -> httpx.AsyncClient:
        """Lazily create the HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
        return self._http_client

    async def execute(
        self,
        query: str,
        variables: dict[str, Any],
        operation_name: str | None = None,
    ) -> RegistryResponse:
        payload: dict[str, Any] = {"query": query, "variables": variables}
        if operation_name is not None:
            payload["operationName"] = operation_name

        self._probe.request_sent(endpoint=self._endpoint, operation_name=operation_name)

        client = self._ensure_http_client()
        try:
            response = await client.post(
                self._endpoint,
                json=payload,
                headers=self._request_headers,
            )
        except httpx.HTTPError as e:
            self._probe.request_failed(endpoint=self._endpoint, reason=repr(e))
            raise RegistryUnavailableError(
                f"Failed to reach the registry at {self._endpoint}: {e}"
            ) from e

        if response.status_code != 200:
            error_envelope = self._error_envelope(response)
            if error_envelope is not None:
                self._probe.response_received(
                    endpoint=self._endpoint,
                    status_code=response.status_code,
                    error_count=len(error_envelope.errors or []),
                )
                return error_envelope

            self._probe.request_failed(
                endpoint=self._endpoint,
                reason="HTTP error",
                status_code=response.status_code,
            )
            raise RegistryUnavailableError(
                f"HTTP {response.status_code}: registry request to {self._endpoint} failed",
                status_code=response.status_code,
            )

        try:
            result = RegistryResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            self._probe.request_failed(
                endpoint=self._endpoint,
                reason="Malformed GraphQL response",
                status_code=response.status_code,
            )
            raise RegistryUnavailableError(
                f"Registry at {self._endpoint} returned a malformed response",
                status_code=response.status_code,
            ) from e

        self._probe.response_received(
            endpoint=self._endpoint,
            status_code=response.status_code,
            error_count=len(result.errors or []),
        )
        return result

    @staticmethod
    def _error_envelope(response: httpx.Response) -> RegistryResponse | None:
        """GraphQL errors carried by a non-200 response, if its body has any."""
        try:
            result = RegistryResponse.model_validate(response.json())
        except (ValueError, ValidationError):
            return None
        return result if result.errors else None

    async def aclose(self) -> None:
        if self._http_client is None:
            return
        if self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None
        self._probe.client_closed(endpoint=self._endpoint)
