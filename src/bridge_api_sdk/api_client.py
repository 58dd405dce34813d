"""HTTP client that authorizes every request against the Bridge API."""

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional, Sequence, Union
from urllib.parse import urlencode, urljoin, urlsplit

import requests
from requests.auth import AuthBase

from .exceptions import (
    BridgeError,
    ConfigurationError,
    ResponseDecodeError,
    TokenAcquisitionError,
    TransportError,
    error_from_api_message,
)

if TYPE_CHECKING:
    from .auth_config import AuthConfig
    from .auth_provider import AuthProvider


logger = logging.getLogger(__name__)

QueryParams = Mapping[str, Union[str, Sequence[str]]]
ClientOption = Callable[["ApiClient"], None]


def validate_base_url(base_url: Optional[str]) -> str:
    """Return ``base_url`` if it is an absolute http(s) URL, raise otherwise."""
    if not base_url:
        raise ConfigurationError("cannot create client to empty URL target")
    parts = urlsplit(base_url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigurationError(f"invalid API URL {base_url!r}")
    return base_url


def resolve_url(base_url: str, path: str, *params: QueryParams) -> str:
    """Resolve ``path`` against ``base_url`` and merge query parameter sets.

    The path is resolved as a URI reference, so an absolute path replaces the
    base path. Later parameter sets override earlier ones key by key.
    """
    merged: Dict[str, Sequence[str]] = {}
    for param_set in params:
        for name, value in param_set.items():
            merged[name] = [value] if isinstance(value, str) else list(value)

    url = urljoin(base_url, path)
    if not merged:
        return url
    return f"{url}?{urlencode(sorted(merged.items()), doseq=True)}"


def decode_json(response: requests.Response) -> Any:
    """Decode a response body, treating an empty body as ``{}``."""
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError as e:
        raise ResponseDecodeError(f"failed to unmarshal response body: {e}") from e


def raise_for_api_error(response: requests.Response) -> None:
    """Raise the ``APIError`` matching a non-success response."""
    try:
        response_data = response.json() if response.content else {}
    except ValueError:
        response_data = {"raw_content": response.text}
    if not isinstance(response_data, dict):
        response_data = {"raw_content": response_data}
    raise error_from_api_message(response.status_code, response_data, response.headers)


class BearerAuth(AuthBase):
    """Attach a bearer token to a request.

    Request-level auth takes precedence over the session's ``auth`` and over
    credentials found in ``~/.netrc``.
    """

    def __init__(self, token: str) -> None:
        self.token = token

    def __eq__(self, other: object) -> bool:
        return isinstance(other, BearerAuth) and other.token == self.token

    def __call__(self, r: requests.PreparedRequest) -> requests.PreparedRequest:
        r.headers["Authorization"] = f"Bearer {self.token}"
        return r


def with_http_session(session: requests.Session) -> ClientOption:
    """Use a custom-configured ``requests.Session`` for API requests.

    The client creates its own session otherwise.
    """
    def _apply(client: "ApiClient") -> None:
        if client._owns_session:
            client.session.close()
        client.session = session
        client._owns_session = False

    return _apply


def with_user_agent(user_agent: str) -> ClientOption:
    """Send ``user_agent`` as the `User-Agent` header of every API request."""
    def _apply(client: "ApiClient") -> None:
        client.user_agent = user_agent

    return _apply


def with_immediate_login() -> ClientOption:
    """Log in while the client is constructed instead of on the first API call.

    Invalid credentials are reported by the constructor.
    """
    def _apply(client: "ApiClient") -> None:
        client.login()

    return _apply


def with_idempotency_key() -> ClientOption:
    """Send an `Idempotency-Key` header on cluster creation.

    N.B. the API may answer a repeated create with a cached response even after
    the cluster it describes has been changed or deleted.
    """
    def _apply(client: "ApiClient") -> None:
        client.use_idempotency_key = True

    return _apply


class ApiClient:
    """HTTP client holding the API target, the transport and the credential."""

    def __init__(
        self,
        base_url: Optional[str],
        auth_config: "AuthConfig",
        *options: ClientOption,
        timeout: float = 30,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Base URL of the API
            auth_config: Authentication configuration used to create the credential
            options: Client options, applied in order
            timeout: Default request timeout in seconds

        Raises:
            ConfigurationError: If the URL is invalid or an option fails
        """
        self.base_url = validate_base_url(base_url)
        self.timeout = timeout
        self.session = requests.Session()
        self._owns_session = True
        self.user_agent: Optional[str] = None
        self.use_idempotency_key = False

        self.credential: "AuthProvider" = auth_config.create_provider(self)

        for option in options:
            try:
                option(self)
            except BridgeError as e:
                self.close_session()
                raise ConfigurationError(
                    f"error during client initialization: {e}"
                ) from e
            except BaseException:
                self.close_session()
                raise

    def resolve(self, path: str, *params: QueryParams) -> str:
        """Build the absolute URL for ``path`` on this client's target."""
        return resolve_url(self.base_url, path, *params)

    def login(self, timeout: Optional[float] = None) -> None:
        """Obtain an access token now rather than before the first request."""
        self.credential.get_access_token(timeout=timeout)

    def set_common_headers(
        self, request: requests.Request, timeout: Optional[float] = None
    ) -> None:
        """Set the headers every API request carries.

        Raises:
            TokenAcquisitionError: If the credential cannot provide a token
        """
        try:
            token = self.credential.get_access_token(timeout=timeout)
        except BridgeError as e:
            raise TokenAcquisitionError(
                f"failed to get token for request authentication: {e}"
            ) from e

        request.auth = BearerAuth(token)

        if self.user_agent:
            request.headers["User-Agent"] = self.user_agent

    def send(
        self, request: requests.Request, timeout: Optional[float] = None
    ) -> requests.Response:
        """Send a request as-is, without adding authorization."""
        prepared = self.session.prepare_request(request)
        try:
            response = self.session.send(
                prepared, timeout=timeout if timeout is not None else self.timeout
            )
        except requests.RequestException as e:
            raise TransportError(f"failed to perform request: {e}") from e
        # the body is already buffered (stream=False), release the connection
        response.close()
        return response

    def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[QueryParams] = None,
        json_data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Perform an authorized API request and return the decoded body."""
        url = self.resolve(endpoint, params or {})
        request = requests.Request(method, url, headers=dict(headers or {}), json=json_data)
        self.set_common_headers(request, timeout=timeout)

        logger.debug("%s %s", method, url)
        response = self.send(request, timeout=timeout)
        if not 200 <= response.status_code < 300:
            raise_for_api_error(response)
        return decode_json(response)

    def get(
        self, endpoint: str, params: Optional[QueryParams] = None, **kwargs: Any
    ) -> Any:
        return self.request("GET", endpoint, params=params, **kwargs)

    def post(
        self, endpoint: str, json_data: Optional[Dict[str, Any]] = None, **kwargs: Any
    ) -> Any:
        return self.request("POST", endpoint, json_data=json_data, **kwargs)

    def delete(self, endpoint: str, **kwargs: Any) -> Any:
        return self.request("DELETE", endpoint, **kwargs)

    def close(self, timeout: Optional[float] = None) -> None:
        """Log out of the current session.

        There is no explicit login; it happens transparently before API calls.
        """
        self.credential.close(timeout=timeout)

    def close_session(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session:
            self.session.close()
