"""Exceptions raised by the Bridge API SDK."""

from typing import Any, Dict, Mapping, Optional


class BridgeError(Exception):
    """Base class for all SDK errors."""


class ConfigurationError(BridgeError):
    """Raised when a client or credential cannot be configured."""


class TransportError(BridgeError):
    """Raised when a request could not be performed (connection failure, timeout)."""


class ResponseDecodeError(BridgeError):
    """Raised when a response body could not be decoded."""


class TokenAcquisitionError(BridgeError):
    """Raised when no access token could be obtained for a request."""


class APIError(BridgeError):
    """Raised when the API answers with a non-success status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}
        self.request_id: Optional[str] = self.response_data.get("request_id")

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.message} (status {self.status_code})"


class ValidationError(APIError):
    """400 Bad Request"""


class AuthenticationError(APIError):
    """401 Unauthorized"""


class NotFoundError(APIError):
    """404 Not Found"""


class RateLimitError(APIError):
    """429 Too Many Requests"""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        retry_after: Optional[int] = None,
        response_data: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, status_code, response_data)
        self.retry_after = retry_after


class ServerError(APIError):
    """5xx Server Error"""


def error_from_api_message(
    status_code: int,
    response_data: Optional[Dict[str, Any]],
    headers: Optional[Mapping[str, str]] = None,
) -> APIError:
    """Build the exception matching an error response.

    Args:
        status_code: HTTP status of the response
        response_data: Decoded response body, ``{"message": ..., "request_id": ...}``
        headers: Response headers, used for ``Retry-After``

    Returns:
        The most specific ``APIError`` subclass for the status code
    """
    response_data = response_data or {}
    error_message = response_data.get("message") or "Unknown error"
    if not isinstance(error_message, str):
        error_message = str(error_message)

    if status_code == 400:
        return ValidationError(error_message, status_code, response_data)
    if status_code == 401:
        return AuthenticationError(error_message, status_code, response_data)
    if status_code == 404:
        return NotFoundError(error_message, status_code, response_data)
    if status_code == 429:
        retry_after = None
        raw_retry_after = (headers or {}).get("Retry-After")
        if raw_retry_after is not None:
            try:
                retry_after = int(raw_retry_after)
            except ValueError:
                retry_after = None
        return RateLimitError(error_message, status_code, retry_after, response_data)
    if 500 <= status_code < 600:
        return ServerError(error_message, status_code, response_data)
    return APIError(error_message, status_code, response_data)
