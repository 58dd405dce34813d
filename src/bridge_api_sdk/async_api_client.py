"""Async HTTP client that authorizes every request against the Bridge API."""

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any, Dict, Mapping, NamedTuple, Optional

import aiohttp
from aiohttp import ClientSession

from .api_client import QueryParams, resolve_url, validate_base_url
from .exceptions import (
    BridgeError,
    ResponseDecodeError,
    TokenAcquisitionError,
    TransportError,
    error_from_api_message,
)

if TYPE_CHECKING:
    from .async_auth_provider import AsyncAuthProvider
    from .auth_config import AuthConfig


logger = logging.getLogger(__name__)


class AsyncResponse(NamedTuple):
    """Status, headers and buffered body of a completed request."""

    status: int
    headers: Mapping[str, str]
    body: str

    def json(self) -> Any:
        """Decode the body, treating an empty body as ``{}``."""
        if not self.body:
            return {}
        try:
            return json.loads(self.body)
        except ValueError as e:
            raise ResponseDecodeError(f"failed to unmarshal response body: {e}") from e

    def raise_for_api_error(self) -> None:
        """Raise the ``APIError`` matching a non-success response."""
        try:
            response_data = json.loads(self.body) if self.body else {}
        except ValueError:
            response_data = {"raw_content": self.body}
        if not isinstance(response_data, dict):
            response_data = {"raw_content": response_data}
        raise error_from_api_message(self.status, response_data, self.headers)


class AsyncApiClient:
    """Async HTTP client holding the API target, the transport and the credential."""

    def __init__(
        self,
        base_url: Optional[str],
        auth_config: "AuthConfig",
        session: Optional[ClientSession] = None,
        user_agent: Optional[str] = None,
        use_idempotency_key: bool = False,
        timeout: float = 30,
    ) -> None:
        """Initialize the async client.

        Args:
            base_url: Base URL of the API
            auth_config: Authentication configuration used to create the credential
            session: Custom aiohttp session, one is created lazily otherwise
            user_agent: `User-Agent` header sent with every API request
            use_idempotency_key: Send an `Idempotency-Key` header on cluster
                creation. N.B. a repeated create may be answered from a cached
                response after the cluster it describes has changed.
            timeout: Default request timeout in seconds

        Raises:
            ConfigurationError: If the URL is invalid
        """
        self.base_url = validate_base_url(base_url)
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self.user_agent = user_agent
        self.use_idempotency_key = use_idempotency_key

        self._session = session
        self._owns_session = session is None

        self.credential: "AsyncAuthProvider" = auth_config.create_async_provider(self)

    async def _get_session(self) -> ClientSession:
        """Get or create the aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    def resolve(self, path: str, *params: QueryParams) -> str:
        """Build the absolute URL for ``path`` on this client's target."""
        return resolve_url(self.base_url, path, *params)

    async def login(self) -> None:
        """Obtain an access token now rather than before the first request."""
        await self.credential.get_access_token()

    async def set_common_headers(self, headers: Dict[str, str]) -> None:
        """Set the headers every API request carries.

        Raises:
            TokenAcquisitionError: If the credential cannot provide a token
        """
        try:
            token = await self.credential.get_access_token()
        except BridgeError as e:
            raise TokenAcquisitionError(
                f"failed to get token for request authentication: {e}"
            ) from e

        headers["Authorization"] = f"Bearer {token}"

        if self.user_agent:
            headers["User-Agent"] = self.user_agent

    async def send(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        json_data: Optional[Dict[str, Any]] = None,
        auth: Optional[aiohttp.BasicAuth] = None,
    ) -> AsyncResponse:
        """Send a request as-is, without adding authorization.

        The body is read before the response is released.
        """
        session = await self._get_session()
        try:
            async with session.request(
                method, url, headers=headers, json=json_data, auth=auth
            ) as response:
                body = await response.text()
                return AsyncResponse(response.status, response.headers, body)
        except aiohttp.ClientError as e:
            raise TransportError(f"failed to perform request: {e}") from e
        except asyncio.TimeoutError as e:
            raise TransportError("request timed out") from e

    async def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[QueryParams] = None,
        json_data: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """Perform an authorized API request and return the decoded body."""
        url = self.resolve(endpoint, params or {})
        request_headers = dict(headers or {})
        await self.set_common_headers(request_headers)

        logger.debug("%s %s", method, url)
        response = await self.send(method, url, headers=request_headers, json_data=json_data)
        if not 200 <= response.status < 300:
            response.raise_for_api_error()
        return response.json()

    async def get(self, endpoint: str, params: Optional[QueryParams] = None, **kwargs: Any) -> Any:
        return await self.request("GET", endpoint, params=params, **kwargs)

    async def post(
        self, endpoint: str, json_data: Optional[Dict[str, Any]] = None, **kwargs: Any
    ) -> Any:
        return await self.request("POST", endpoint, json_data=json_data, **kwargs)

    async def delete(self, endpoint: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", endpoint, **kwargs)

    async def close(self) -> None:
        """Log out of the current session."""
        await self.credential.close()

    async def close_session(self) -> None:
        """Close the aiohttp session if this client created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
