import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import quote

import requests
from pydantic import ValidationError as PydanticValidationError

from .api_client import ApiClient, decode_json, raise_for_api_error
from .exceptions import BridgeError, ResponseDecodeError
from .models.auth import AccessTokenResponse

logger = logging.getLogger(__name__)

ROUTE_ACCESS_TOKENS = "/access-tokens"

# Renew a token once it has a minute or less left; this avoids sending expired
# tokens because of network lag or clock jitter.
MIN_TIME_UNTIL_EXPIRY = 60.0
# Tokens about to expire are not worth revoking.
MIN_TIME_LEFT_FOR_DELETE = 60.0


class AuthProvider(ABC):
    """Abstract base class for authentication providers."""

    def __init__(self, api_client: ApiClient) -> None:
        """Initialize the auth provider.

        Args:
            api_client: API client for making HTTP requests
        """
        self.api_client = api_client

    @abstractmethod
    def get_access_token(self, timeout: Optional[float] = None) -> str:
        """Get a valid access token, refreshing if necessary.

        Args:
            timeout: Deadline in seconds for any request this needs

        Returns:
            Valid access token
        """

    @abstractmethod
    def close(self, timeout: Optional[float] = None) -> None:
        """End the current session, revoking its token where applicable."""


class ApplicationAuthProvider(AuthProvider):
    """Authentication provider exchanging an application id and secret for
    short-lived access tokens.

    All token state is guarded by a single lock held across the network round
    trip, so concurrent callers never trigger more than one exchange.
    """

    def __init__(
        self, api_client: ApiClient, application_id: str, application_secret: str
    ) -> None:
        """Initialize the application auth provider.

        Args:
            api_client: API client for making HTTP requests
            application_id: Application id of the API key
            application_secret: Application secret of the API key
        """
        super().__init__(api_client)

        self._application_id = application_id
        self._application_secret = application_secret

        self._lock = threading.Lock()
        self._token_id: Optional[str] = None
        self._access_token: Optional[str] = None
        self._access_token_expires_at: float = 0.0

    def get_access_token(self, timeout: Optional[float] = None) -> str:
        """Get a valid access token, creating a new one if the cached one is
        missing or about to expire."""
        with self._lock:
            if self._time_until_expiry() > MIN_TIME_UNTIL_EXPIRY:
                return self._access_token or ""

            try:
                token_response = self._create_access_token(timeout)
            except BridgeError:
                logger.error("Failed to obtain access token for application %s", self._application_id)
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

    def close(self, timeout: Optional[float] = None) -> None:
        """Revoke the current access token and clear it from memory.

        Nothing is sent when there is no token or it is about to expire. A
        failed revocation leaves the token in place so ``close`` can be retried.
        """
        with self._lock:
            if not self._token_id or self._time_until_expiry() < MIN_TIME_LEFT_FOR_DELETE:
                logger.debug("No access token worth revoking")
                return

            route = self.api_client.resolve(
                f"{ROUTE_ACCESS_TOKENS}/{quote(self._token_id, safe='')}"
            )
            response = self.api_client.send(
                requests.Request("DELETE", route), timeout=timeout
            )
            if response.status_code != 200:
                raise_for_api_error(response)

            logger.debug("Revoked access token %s", self._token_id)
            self._token_id = None
            self._access_token = None
            self._access_token_expires_at = 0.0

    def _time_until_expiry(self) -> float:
        return self._access_token_expires_at - time.time()

    def _create_access_token(self, timeout: Optional[float]) -> AccessTokenResponse:
        """Exchange the application credentials for a new access token."""
        route = self.api_client.resolve(ROUTE_ACCESS_TOKENS)
        request = requests.Request(
            "POST", route, auth=(self._application_id, self._application_secret)
        )
        response = self.api_client.send(request, timeout=timeout)
        if response.status_code != 200:
            raise_for_api_error(response)

        try:
            return AccessTokenResponse.model_validate(decode_json(response))
        except PydanticValidationError as e:
            raise ResponseDecodeError(f"failed to unmarshal response body: {e}") from e


class ApiKeyAuthProvider(AuthProvider):
    """Authentication provider for a pre-issued API key whose lifecycle is
    managed elsewhere."""

    def __init__(self, api_client: ApiClient, api_key: str) -> None:
        super().__init__(api_client)
        self._api_key = api_key

    def get_access_token(self, timeout: Optional[float] = None) -> str:
        return self._api_key

    def close(self, timeout: Optional[float] = None) -> None:
        pass
