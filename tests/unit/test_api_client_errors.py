"""Tests for API client error handling."""
from unittest.mock import patch

import pytest
import requests

from bridge_api_sdk.api_client import ApiClient
from bridge_api_sdk.auth_config import ApiKeyAuthConfig
from bridge_api_sdk.exceptions import (
    APIError,
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    ResponseDecodeError,
    ServerError,
    TransportError,
    ValidationError,
)
from conftest import make_response


class TestApiClientErrorResponses:
    """Tests for HTTP error response handling."""

    @pytest.fixture
    def client(self):
        return ApiClient("https://api.crunchybridge.com", ApiKeyAuthConfig("key123"))

    def test_200_success(self, client):
        """200 response should return parsed JSON."""
        with patch.object(client.session, "send", return_value=make_response(200, {"data": "success"})):
            assert client.get("/test") == {"data": "success"}

    def test_204_empty_body(self, client):
        """A success without a body should decode to an empty dict."""
        with patch.object(client.session, "send", return_value=make_response(204)):
            assert client.delete("/test") == {}

    def test_400_raises_validation_error(self, client):
        """400 should raise ValidationError."""
        with patch.object(
            client.session, "send", return_value=make_response(400, {"message": "Invalid field"})
        ):
            with pytest.raises(ValidationError) as exc:
                client.get("/test")
        assert exc.value.status_code == 400
        assert "Invalid field" in str(exc.value)

    def test_401_raises_authentication_error(self, client):
        """401 should raise AuthenticationError."""
        with patch.object(
            client.session, "send", return_value=make_response(401, {"message": "Token expired"})
        ):
            with pytest.raises(AuthenticationError) as exc:
                client.get("/test")
        assert exc.value.status_code == 401

    def test_404_raises_not_found_error(self, client):
        """404 should raise NotFoundError."""
        with patch.object(
            client.session, "send", return_value=make_response(404, {"message": "cluster not found"})
        ):
            with pytest.raises(NotFoundError) as exc:
                client.get("/clusters/abc")
        assert "cluster not found" in str(exc.value)

    def test_429_raises_rate_limit_error_with_retry_after(self, client):
        """429 should raise RateLimitError with retry_after."""
        response = make_response(429, {"message": "Rate limit exceeded"}, headers={"Retry-After": "60"})
        with patch.object(client.session, "send", return_value=response):
            with pytest.raises(RateLimitError) as exc:
                client.get("/test")
        assert exc.value.retry_after == 60

    def test_429_without_retry_after(self, client):
        """429 without Retry-After header should have None retry_after."""
        with patch.object(
            client.session, "send", return_value=make_response(429, {"message": "slow down"})
        ):
            with pytest.raises(RateLimitError) as exc:
                client.get("/test")
        assert exc.value.retry_after is None

    @pytest.mark.parametrize("status_code", [500, 502, 503])
    def test_5xx_raises_server_error(self, client, status_code):
        """5xx should raise ServerError."""
        with patch.object(
            client.session, "send", return_value=make_response(status_code, {"message": "down"})
        ):
            with pytest.raises(ServerError) as exc:
                client.get("/test")
        assert exc.value.status_code == status_code

    def test_other_status_raises_api_error(self, client):
        """Unmapped statuses should raise the base APIError."""
        with patch.object(
            client.session, "send", return_value=make_response(409, {"message": "conflict"})
        ):
            with pytest.raises(APIError) as exc:
                client.post("/clusters", json_data={})
        assert type(exc.value) is APIError
        assert exc.value.status_code == 409

    def test_error_without_json_body(self, client):
        """A non-JSON error body should be kept as raw content."""
        with patch.object(client.session, "send", return_value=make_response(502, text="Bad Gateway")):
            with pytest.raises(ServerError) as exc:
                client.get("/test")
        assert exc.value.response_data == {"raw_content": "Bad Gateway"}
        assert exc.value.message == "Unknown error"

    def test_request_id_exposed(self, client):
        """The request id of an error body should be available on the error."""
        body = {"message": "nope", "request_id": "req-42"}
        with patch.object(client.session, "send", return_value=make_response(400, body)):
            with pytest.raises(ValidationError) as exc:
                client.get("/test")
        assert exc.value.request_id == "req-42"

    def test_malformed_success_body(self, client):
        """A success with a body that is not JSON should raise ResponseDecodeError."""
        with patch.object(client.session, "send", return_value=make_response(200, text="{oops")):
            with pytest.raises(ResponseDecodeError):
                client.get("/test")


class TestApiClientTransportErrors:
    """Tests for transport failures."""

    @pytest.fixture
    def client(self):
        return ApiClient("https://api.crunchybridge.com", ApiKeyAuthConfig("key123"))

    @pytest.mark.parametrize(
        "cause",
        [
            requests.ConnectionError("refused"),
            requests.Timeout("timed out"),
            requests.TooManyRedirects("loop"),
        ],
    )
    def test_request_exceptions_wrapped(self, client, cause):
        """requests exceptions should surface as TransportError."""
        with patch.object(client.session, "send", side_effect=cause):
            with pytest.raises(TransportError) as exc:
                client.get("/test")
        assert exc.value.__cause__ is cause

    def test_response_closed(self, client):
        """Responses should be released after use."""
        response = make_response(200, {"ok": True})
        with patch.object(client.session, "send", return_value=response):
            client.get("/test")
        response.close.assert_called_once()

    def test_response_closed_on_error_status(self, client):
        """Responses should be released even when the status is an error."""
        response = make_response(500, {"message": "boom"})
        with patch.object(client.session, "send", return_value=response):
            with pytest.raises(ServerError):
                client.get("/test")
        response.close.assert_called_once()
