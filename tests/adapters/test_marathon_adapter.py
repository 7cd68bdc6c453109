"""
Tests for the Marathon API client and adapter.

Tests cover:
- Authentication headers
- Retry logic for transient failures
- Error mapping (401, 403, 404)
- Fetching and parsing application definitions
"""

from unittest.mock import MagicMock, patch

import pytest
import requests

from marathon2consul.adapters.http_base import calculate_delay, get_retry_after
from marathon2consul.adapters.marathon import MarathonAdapter, MarathonApiClient
from marathon2consul.core.domain import ApplicationDefinition
from marathon2consul.core.exceptions import DefinitionError
from marathon2consul.core.ports import (
    AuthenticationError,
    MarathonConfig,
    NotFoundError,
    OrchestratorError,
    PermissionError,
    RateLimitError,
    TransientError,
)


def make_response(status_code=200, json_data=None, text=None, headers=None):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.headers = headers or {}
    response.json.return_value = json_data
    response.text = text if text is not None else ("{}" if json_data is not None else "")
    return response


@pytest.fixture
def mock_session():
    """Patch requests.Session in the Marathon client module."""
    with patch("marathon2consul.adapters.marathon.client.requests.Session") as mock:
        session = MagicMock()
        session.headers = {}
        mock.return_value = session
        yield session


@pytest.fixture
def client(mock_session):
    """Client with minimal retry delays."""
    return MarathonApiClient(
        url="http://marathon.mesos:8080/",
        max_retries=2,
        initial_delay=0.001,
        max_delay=0.01,
    )


# =============================================================================
# HTTP Helper Tests
# =============================================================================


class TestHttpHelpers:
    """Tests for the shared retry helpers."""

    def test_exponential_backoff(self):
        assert calculate_delay(0, initial_delay=1.0, jitter=0.0) == 1.0
        assert calculate_delay(3, initial_delay=1.0, jitter=0.0) == 8.0

    def test_delay_capped(self):
        assert calculate_delay(10, initial_delay=1.0, max_delay=5.0, jitter=0.0) == 5.0

    def test_retry_after_wins(self):
        assert calculate_delay(0, initial_delay=1.0, jitter=0.0, retry_after=7) == 7.0

    def test_get_retry_after(self):
        assert get_retry_after(make_response(headers={"Retry-After": "3"})) == 3
        assert get_retry_after(make_response(headers={"Retry-After": "soon"})) is None
        assert get_retry_after(make_response()) is None


# =============================================================================
# Client Tests
# =============================================================================


class TestMarathonClientInit:
    """Tests for client initialization."""

    def test_strips_trailing_slash(self, client):
        assert client.base_url == "http://marathon.mesos:8080"

    def test_token_auth(self, mock_session):
        MarathonApiClient(url="http://m", token="acs")
        assert mock_session.headers["Authorization"] == "token=acs"

    def test_basic_auth(self, mock_session):
        MarathonApiClient(url="http://m", username="u", password="p")
        assert mock_session.auth == ("u", "p")
        assert "Authorization" not in mock_session.headers


class TestMarathonClientRequests:
    """Tests for requests, retries and errors."""

    def test_get_app(self, client, mock_session):
        mock_session.request.return_value = make_response(json_data={"app": {"id": "/prod/web"}})

        assert client.get_app("/prod/web") == {"id": "/prod/web"}
        args, kwargs = mock_session.request.call_args
        assert args == ("GET", "http://marathon.mesos:8080/v2/apps/prod/web")
        assert kwargs["timeout"] == client.timeout

    def test_get_app_unexpected_body(self, client, mock_session):
        mock_session.request.return_value = make_response(json_data={"apps": []})

        with pytest.raises(OrchestratorError):
            client.get_app("/prod/web")

    def test_retry_then_succeed(self, client, mock_session):
        mock_session.request.side_effect = [
            make_response(503, text="Service Unavailable"),
            make_response(json_data={"app": {"id": "/a"}}),
        ]

        assert client.get_app("a") == {"id": "/a"}
        assert mock_session.request.call_count == 2

    def test_server_error_exhausts_retries(self, client, mock_session):
        mock_session.request.return_value = make_response(502, text="Bad Gateway")

        with pytest.raises(TransientError):
            client.get_app("a")
        assert mock_session.request.call_count == 3

    def test_rate_limit(self, client, mock_session):
        mock_session.request.return_value = make_response(
            429, text="slow down", headers={"Retry-After": "0"}
        )

        with pytest.raises(RateLimitError) as exc_info:
            client.get_app("a")
        assert exc_info.value.retry_after == 0

    @pytest.mark.parametrize(
        "status,error",
        [(401, AuthenticationError), (403, PermissionError), (404, NotFoundError)],
    )
    def test_error_mapping(self, client, mock_session, status, error):
        mock_session.request.return_value = make_response(status, text="nope")

        with pytest.raises(error):
            client.get_app("a")
        assert mock_session.request.call_count == 1

    def test_connection_error(self, client, mock_session):
        mock_session.request.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(OrchestratorError, match="Connection to Marathon failed"):
            client.get_app("a")
        assert mock_session.request.call_count == 3

    def test_ping(self, client, mock_session):
        mock_session.request.return_value = make_response(text="pong")
        assert client.ping() is True

        mock_session.request.return_value = make_response(401, text="")
        assert client.ping() is False


# =============================================================================
# Adapter Tests
# =============================================================================


class TestMarathonAdapter:
    """Tests for the OrchestratorPort implementation."""

    @pytest.fixture
    def api(self):
        return MagicMock(spec=MarathonApiClient)

    @pytest.fixture
    def adapter(self, api):
        return MarathonAdapter(MarathonConfig(url="http://m"), client=api)

    def test_name(self, adapter):
        assert adapter.name == "Marathon"

    def test_fetch_parses_definition(self, adapter, api, web_app_data):
        api.get_app.return_value = web_app_data

        app = adapter.fetch("prod.myapp")

        assert isinstance(app, ApplicationDefinition)
        assert app.id == "prod.myapp"
        assert app.ports[0].port == 8080
        api.get_app.assert_called_once_with("prod.myapp")

    def test_fetch_not_found_carries_app_id(self, adapter, api):
        api.get_app.side_effect = NotFoundError("Not found: v2/apps/x")

        with pytest.raises(NotFoundError) as exc_info:
            adapter.fetch("/x")
        assert exc_info.value.app_id == "/x"

    def test_fetch_unusable_definition(self, adapter, api):
        api.get_app.return_value = {"ports": [80]}

        with pytest.raises(DefinitionError):
            adapter.fetch("/x")

    def test_test_connection(self, adapter, api):
        api.ping.return_value = True
        assert adapter.test_connection() is True
