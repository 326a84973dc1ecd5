"""Unit tests for EngineRegistryClient."""

import json
from unittest.mock import create_autospec

import httpx
import pytest
from pydantic import SecretStr

from registry.application.services import RegistrySchemaProvider
from registry.domain.exceptions import RegistryQueryError, RegistryUnavailableError
from registry.domain.value_objects import RegistryCredentials, SchemaProviderConfig
from registry.infrastructure.engine_client import (
    DEFAULT_ENGINE_ENDPOINT,
    EngineRegistryClient,
)
from registry.infrastructure.observability.registry_client_probe import (
    RegistryClientProbe,
)
from registry.ports.registry_client import IRegistryClient


@pytest.fixture
def mock_probe():
    """Create mock probe."""
    return create_autospec(RegistryClientProbe, instance=True)


@pytest.fixture
def seen_requests():
    """Collect requests seen by the mock transport."""
    return []


def _http_client(seen_requests, response):
    def handler(request: httpx.Request) -> httpx.Response:
        seen_requests.append(request)
        if isinstance(response, Exception):
            raise response
        return response

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _client(http_client, probe, **kwargs):
    return EngineRegistryClient(
        api_key="service:my-graph:secret",
        http_client=http_client,
        probe=probe,
        **kwargs,
    )


class TestInit:
    """Tests for client initialization."""

    def test_uses_default_endpoint(self):
        """Should target the standard registry endpoint by default."""
        client = EngineRegistryClient(api_key="key")
        assert client.endpoint == DEFAULT_ENGINE_ENDPOINT

    def test_honours_endpoint_override(self):
        """Should target the override when supplied."""
        client = EngineRegistryClient(api_key="key", endpoint="https://registry.test")
        assert client.endpoint == "https://registry.test"

    def test_from_credentials(self):
        """Should take key and endpoint from credentials."""
        credentials = RegistryCredentials(
            api_key=SecretStr("key"), endpoint="https://registry.test"
        )
        client = EngineRegistryClient.from_credentials(credentials, client_name="lsp")
        assert client._api_key == "key"
        assert client.endpoint == "https://registry.test"
        assert client._client_name == "lsp"

    def test_creates_http_client_lazily(self):
        """No HTTP client should exist before the first request."""
        client = EngineRegistryClient(api_key="key")
        assert client._http_client is None

    def test_satisfies_registry_client_port(self):
        """Should be usable wherever the port is expected."""
        assert isinstance(EngineRegistryClient(api_key="key"), IRegistryClient)

    def test_uses_default_probe_when_none_provided(self):
        """Should create default probe if none provided."""
        client = EngineRegistryClient(api_key="key")
        assert client._probe is not None


class TestExecute:
    """Tests for executing operations."""

    @pytest.mark.asyncio
    async def test_posts_graphql_payload(self, seen_requests, mock_probe):
        """Should POST query, variables and operation name as JSON."""
        http_client = _http_client(
            seen_requests, httpx.Response(200, json={"data": {"service": None}})
        )
        client = _client(http_client, mock_probe)

        await client.execute(
            query="query Q { a }", variables={"id": "x"}, operation_name="Q"
        )

        (request,) = seen_requests
        assert request.method == "POST"
        assert str(request.url) == DEFAULT_ENGINE_ENDPOINT
        assert json.loads(request.content) == {
            "query": "query Q { a }",
            "variables": {"id": "x"},
            "operationName": "Q",
        }

    @pytest.mark.asyncio
    async def test_omits_operation_name_when_absent(self, seen_requests, mock_probe):
        """operationName is only sent when given."""
        http_client = _http_client(seen_requests, httpx.Response(200, json={"data": {}}))
        client = _client(http_client, mock_probe)

        await client.execute(query="{ a }", variables={})

        assert "operationName" not in json.loads(seen_requests[0].content)

    @pytest.mark.asyncio
    async def test_sends_api_key_and_client_headers(self, seen_requests, mock_probe):
        """Should authenticate with x-api-key and identify the client."""
        http_client = _http_client(seen_requests, httpx.Response(200, json={"data": {}}))
        client = _client(
            http_client, mock_probe, client_name="lsp", client_version="1.2.3"
        )

        await client.execute(query="{ a }", variables={})

        headers = seen_requests[0].headers
        assert headers["x-api-key"] == "service:my-graph:secret"
        assert headers["apollo-client-name"] == "lsp"
        assert headers["apollo-client-version"] == "1.2.3"

    @pytest.mark.asyncio
    async def test_omits_client_headers_when_unset(self, seen_requests, mock_probe):
        """Client identification headers are optional."""
        http_client = _http_client(seen_requests, httpx.Response(200, json={"data": {}}))
        client = _client(http_client, mock_probe)

        await client.execute(query="{ a }", variables={})

        assert "apollo-client-name" not in seen_requests[0].headers

    @pytest.mark.asyncio
    async def test_returns_data_and_errors(self, seen_requests, mock_probe):
        """Should parse data and errors from the response body."""
        body = {
            "data": {"service": None},
            "errors": [{"message": "A", "path": ["service"]}, {"message": "B"}],
        }
        http_client = _http_client(seen_requests, httpx.Response(200, json=body))
        client = _client(http_client, mock_probe)

        response = await client.execute(query="{ a }", variables={})

        assert response.data == {"service": None}
        assert response.error_messages == ["A", "B"]
        mock_probe.response_received.assert_called_once_with(
            endpoint=DEFAULT_ENGINE_ENDPOINT, status_code=200, error_count=2
        )

    @pytest.mark.asyncio
    async def test_network_error_raises_unavailable(self, seen_requests, mock_probe):
        """Transport failures are reported as an unavailable registry."""
        http_client = _http_client(seen_requests, httpx.ConnectError("Connection refused"))
        client = _client(http_client, mock_probe)

        with pytest.raises(RegistryUnavailableError, match="Failed to reach"):
            await client.execute(query="{ a }", variables={})

        mock_probe.request_failed.assert_called_once()

    @pytest.mark.asyncio
    async def test_http_error_raises_unavailable(self, seen_requests, mock_probe):
        """Non-200 responses carry the status code."""
        http_client = _http_client(seen_requests, httpx.Response(503, text="unavailable"))
        client = _client(http_client, mock_probe)

        with pytest.raises(RegistryUnavailableError, match="HTTP 503") as exc_info:
            await client.execute(query="{ a }", variables={})

        assert exc_info.value.status_code == 503
        mock_probe.request_failed.assert_called_once_with(
            endpoint=DEFAULT_ENGINE_ENDPOINT, reason="HTTP error", status_code=503
        )

    @pytest.mark.asyncio
    async def test_error_envelope_on_http_error_is_returned(
        self, seen_requests, mock_probe
    ):
        """GraphQL errors sent with a 4xx status reach the caller."""
        body = {"errors": [{"message": "A"}, {"message": "B"}]}
        http_client = _http_client(seen_requests, httpx.Response(400, json=body))
        client = _client(http_client, mock_probe)

        response = await client.execute(query="{ a }", variables={})

        assert response.error_messages == ["A", "B"]
        mock_probe.response_received.assert_called_once_with(
            endpoint=DEFAULT_ENGINE_ENDPOINT, status_code=400, error_count=2
        )
        mock_probe.request_failed.assert_not_called()

    @pytest.mark.asyncio
    async def test_error_envelope_on_http_error_aggregates_in_provider(
        self, seen_requests, mock_probe
    ):
        """A 4xx error envelope surfaces as a RegistryQueryError."""
        body = {"errors": [{"message": "A"}, {"message": "B"}]}
        http_client = _http_client(seen_requests, httpx.Response(401, json=body))
        provider = RegistrySchemaProvider(
            config=SchemaProviderConfig.model_validate(
                {"engine": {"engineApiKey": "key"}, "client": {"service": "my-graph"}}
            ),
            client_factory=lambda credentials: _client(http_client, mock_probe),
        )

        with pytest.raises(RegistryQueryError) as exc_info:
            await provider.resolve_schema()

        assert str(exc_info.value) == "A\nB"

    @pytest.mark.asyncio
    async def test_http_error_without_errors_raises_unavailable(
        self, seen_requests, mock_probe
    ):
        """A non-200 JSON body without GraphQL errors is still unavailable."""
        http_client = _http_client(
            seen_requests, httpx.Response(502, json={"errors": []})
        )
        client = _client(http_client, mock_probe)

        with pytest.raises(RegistryUnavailableError, match="HTTP 502"):
            await client.execute(query="{ a }", variables={})

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response",
        [
            httpx.Response(200, text="<html>not json</html>"),
            httpx.Response(200, json={"errors": [{"code": "no message"}]}),
        ],
    )
    async def test_malformed_body_raises_unavailable(
        self, response, seen_requests, mock_probe
    ):
        """Bodies that are not GraphQL responses are rejected."""
        http_client = _http_client(seen_requests, response)
        client = _client(http_client, mock_probe)

        with pytest.raises(RegistryUnavailableError, match="malformed response"):
            await client.execute(query="{ a }", variables={})


class TestClose:
    """Tests for releasing the HTTP client."""

    @pytest.mark.asyncio
    async def test_leaves_injected_client_open(self, seen_requests, mock_probe):
        """An injected HTTP client belongs to the caller."""
        http_client = _http_client(seen_requests, httpx.Response(200, json={"data": {}}))
        client = _client(http_client, mock_probe)

        await client.aclose()

        assert http_client.is_closed is False
        mock_probe.client_closed.assert_called_once()
        await http_client.aclose()

    @pytest.mark.asyncio
    async def test_closes_owned_client(self, mock_probe):
        """A lazily created HTTP client is closed and dropped."""
        client = EngineRegistryClient(api_key="key", probe=mock_probe)
        http_client = client._ensure_http_client()

        await client.aclose()

        assert http_client.is_closed is True
        assert client._http_client is None

    @pytest.mark.asyncio
    async def test_close_before_use_is_noop(self, mock_probe):
        """Closing an unused client does nothing."""
        client = EngineRegistryClient(api_key="key", probe=mock_probe)

        await client.aclose()

        mock_probe.client_closed.assert_not_called()
