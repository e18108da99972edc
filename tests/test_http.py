"""
Tests for the base HTTP client.
"""

import json
from unittest.mock import MagicMock, patch

import pytest
import requests

from pteroctl.api._http import HTTPClient
from pteroctl.config import PteroConfig
from pteroctl.exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    PermissionDeniedError,
    ResourceNotFoundError,
    ResponseShapeError,
    ValidationError,
)


@pytest.fixture
def config():
    """Create a test configuration."""
    return PteroConfig(panel_url="https://panel.example.com/", api_key="ptla_test", timeout=10)


@pytest.fixture
def client(config):
    """Create an HTTP client with a mocked session."""
    http = HTTPClient(config)
    http._session = MagicMock()
    return http


def make_response(status_code, body=None, text=None):
    """Build a mock response."""
    response = MagicMock()
    response.status_code = status_code
    response.request.method = "GET"
    response.request.url = "https://panel.example.com/api/application/users"
    if body is not None:
        response.content = json.dumps(body).encode()
        response.json.return_value = body
        response.text = json.dumps(body)
    else:
        response.content = (text or "").encode()
        response.text = text or ""
        response.json.side_effect = ValueError("no json")
    return response


class TestHTTPClientInit:
    """Tests for client construction."""

    def test_requires_panel_url(self):
        """Test a missing panel URL is rejected."""
        with pytest.raises(ConfigurationError):
            HTTPClient(PteroConfig(api_key="ptla_test"))

    def test_requires_api_key(self):
        """Test a missing API key is rejected."""
        with pytest.raises(ConfigurationError):
            HTTPClient(PteroConfig(panel_url="https://panel.example.com"))

    def test_base_url(self, client):
        """Test the application API prefix is appended once."""
        assert client.base_url == "https://panel.example.com/api/application"

    def test_build_url(self, client):
        """Test building URLs with and without a query."""
        assert client.build_url("users") == "https://panel.example.com/api/application/users"
        assert client.build_url("/users/1", "include=servers") == (
            "https://panel.example.com/api/application/users/1?include=servers"
        )

    def test_session_headers(self, config):
        """Test the real session carries JSON headers."""
        http = HTTPClient(config)
        assert http.session.headers["Accept"] == "application/json"
        assert http.session.headers["User-Agent"].startswith("pteroctl/")
        http.close()
        assert http._session is None


class TestRequest:
    """Tests for HTTPClient.request."""

    def test_sends_bearer_key_and_query(self, client):
        """Test the request carries auth, query and settings."""
        client._session.request.return_value = make_response(200, {"object": "list", "data": []})

        result = client.request("GET", "users", query="sort=-id")

        assert result == {"object": "list", "data": []}
        kwargs = client._session.request.call_args.kwargs
        assert kwargs["method"] == "GET"
        assert kwargs["url"].endswith("/api/application/users?sort=-id")
        assert kwargs["headers"]["Authorization"] == "Bearer ptla_test"
        assert kwargs["timeout"] == 10
        assert kwargs["verify"] is True

    def test_no_content(self, client):
        """Test 204 responses return None."""
        client._session.request.return_value = make_response(204, text="")
        assert client.request("DELETE", "users/1", expected_status=204) is None

    def test_expected_status_list(self, client):
        """Test any of several expected codes is accepted."""
        client._session.request.return_value = make_response(201, {"object": "user", "attributes": {}})
        assert client.request("POST", "users", json_data={}, expected_status=[200, 201])

    def test_invalid_json_body(self, client):
        """Test an unparsable success body is a shape error."""
        client._session.request.return_value = make_response(200, text="<html>")
        with pytest.raises(ResponseShapeError):
            client.request("GET", "users")

    @pytest.mark.parametrize("status,exc", [
        (401, AuthenticationError),
        (403, PermissionDeniedError),
        (404, ResourceNotFoundError),
        (400, ValidationError),
        (422, ValidationError),
        (500, APIError),
    ])
    def test_error_mapping(self, client, status, exc):
        """Test status codes map to exception types."""
        client._session.request.return_value = make_response(status, {
            "errors": [{"code": "SomeException", "status": str(status), "detail": "Nope"}]
        })

        with pytest.raises(exc) as info:
            client.request("GET", "users")

        assert "[SomeException] Nope" in str(info.value)

    def test_multiple_errors_joined(self, client):
        """Test every panel error is reported."""
        client._session.request.return_value = make_response(422, {"errors": [
            {"code": "ValidationException", "detail": "The email field is required."},
            {"code": "ValidationException", "detail": "The username field is required."},
        ]})

        with pytest.raises(ValidationError) as info:
            client.request("POST", "users", json_data={}, expected_status=201)

        assert "email field" in str(info.value)
        assert "; " in str(info.value)

    def test_error_without_json(self, client):
        """Test plain-text error bodies."""
        client._session.request.return_value = make_response(502, text="Bad Gateway")
        with pytest.raises(APIError) as info:
            client.request("GET", "users")
        assert info.value.status_code == 502
        assert "Bad Gateway" in str(info.value)

    def test_error_is_logged(self, client, caplog):
        """Test failed requests are logged at error level."""
        client._session.request.return_value = make_response(404, {"errors": []})
        with pytest.raises(ResourceNotFoundError):
            client.request("GET", "users/99")
        assert any(r.levelname == "ERROR" for r in caplog.records)

    @pytest.mark.parametrize("error", [
        requests.exceptions.ConnectionError("refused"),
        requests.exceptions.Timeout("slow"),
        requests.exceptions.TooManyRedirects("loop"),
    ])
    def test_transport_errors(self, client, error):
        """Test transport failures become APIError."""
        client._session.request.side_effect = error
        with pytest.raises(APIError):
            client.request("GET", "users")


class TestContextManager:
    """Tests for context manager usage."""

    def test_closes_session(self, config):
        """Test leaving the context closes the session."""
        with patch("pteroctl.api._http.requests.Session") as session_cls:
            with HTTPClient(config) as http:
                http.session
            session_cls.return_value.close.assert_called_once()
