"""Async authentication providers."""

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Optional
from urllib.parse import quote

import aiohttp
from pydantic import ValidationError as PydanticValidationError

from .auth_provider import MIN_TIME_LEFT_FOR_DELETE, MIN_TIME_UNTIL_EXPIRY, ROUTE_ACCESS_TOKENS
from .exceptions import BridgeError, ResponseDecodeError
from .models.auth import AccessTokenResponse

if TYPE_CHECKING:
    from .async_api_client import AsyncApiClient

logger = logging.getLogger(__name__)


class AsyncAuthProvider:
    """Base class for async authentication providers."""

    def __init__(self, api_client: "AsyncApiClient") -> None:
        """Initialize the async auth provider.

        Args:
            api_client: Async API client for making HTTP requests
        """
        self.api_client = api_client

    async def get_access_token(self) -> str:
        """Get a valid access token, refreshing if necessary."""
        raise NotImplementedError

    async def close(self) -> None:
        """End the current session, revoking its token where applicable."""
        raise NotImplementedError


class AsyncApplicationAuthProvider(AsyncAuthProvider):
    """Async authentication provider exchanging an application id and secret
    for short-lived access tokens.

    Cancelling a caller releases the lock and leaves the cached token as it was.
    """

    def __init__(
        self,
        api_client: "AsyncApiClient",
        application_id: str,
        application_secret: str,
    ) -> None:
        super().__init__(api_client)

        self._auth = aiohttp.BasicAuth(application_id, application_secret)

        self._lock = asyncio.Lock()
        self._token_id: Optional[str] = None
        self._access_token: Optional[str] = None
        self._access_token_expires_at: float = 0.0

    async def get_access_token(self) -> str:
        async with self._lock:
            if self._time_until_expiry() > MIN_TIME_UNTIL_EXPIRY:
                return self._access_token or ""

            try:
                token_response = await self._create_access_token()
            except BridgeError:
                logger.error("Failed to obtain access token for application %s", self._auth.login)
                raise

            self._token_id = token_response.token_id
            self._access_token = token_response.access_token
            self._access_token_expires_at = time.time() + token_response.expires_in

            logger.debug(
                "Obtained access token %s, expires in %ds",
                token_response.token_id,
                token_response.expires_in,
            )
            return token_response.access_token

    async def close(self) -> None:
        """Revoke the current access token and clear it from memory."""
        async with self._lock:
            if not self._token_id or self._time_until_expiry() < MIN_TIME_LEFT_FOR_DELETE:
                logger.debug("No access token worth revoking")
                return

            route = self.api_client.resolve(
                f"{ROUTE_ACCESS_TOKENS}/{quote(self._token_id, safe='')}"
            )
            response = await self.api_client.send("DELETE", route)
            if response.status != 200:
                response.raise_for_api_error()

            logger.debug("Revoked access token %s", self._token_id)
            self._token_id = None
            self._access_token = None
            self._access_token_expires_at = 0.0

    def _time_until_expiry(self) -> float:
        return self._access_token_expires_at - time.time()

    async def _create_access_token(self) -> AccessTokenResponse:
        route = self.api_client.resolve(ROUTE_ACCESS_TOKENS)
        response = await self.api_client.send("POST", route, auth=self._auth)
        if response.status != 200:
            response.raise_for_api_error()

        try:
            return AccessTokenResponse.model_validate(response.json())
        except PydanticValidationError as e:
            raise ResponseDecodeError(f"failed to unmarshal response body: {e}") from e


class AsyncApiKeyAuthProvider(AsyncAuthProvider):
    """Async authentication provider for a pre-issued API key."""

    def __init__(self, api_client: "AsyncApiClient", api_key: str) -> None:
        super().__init__(api_client)
        self._api_key = api_key

    async def get_access_token(self) -> str:
        return self._api_key

    async def close(self) -> None:
        pass
