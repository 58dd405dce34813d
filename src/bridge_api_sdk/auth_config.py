import os
from typing import Optional, Protocol, TYPE_CHECKING

from .auth_provider import ApiKeyAuthProvider, ApplicationAuthProvider
from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .api_client import ApiClient
    from .async_api_client import AsyncApiClient
    from .async_auth_provider import AsyncAuthProvider
    from .auth_provider import AuthProvider


class AuthConfig(Protocol):
    """Protocol for authentication configuration."""

    def create_provider(self, api_client: "ApiClient") -> "AuthProvider":
        """Create an auth provider instance with the given API client.

        Args:
            api_client: API client for making HTTP requests

        Returns:
            Configured auth provider instance
        """

    def create_async_provider(self, api_client: "AsyncApiClient") -> "AsyncAuthProvider":
        """Create an async auth provider instance with the given API client."""


class ApiKeyAuthConfig:  # pylint: disable=too-few-public-methods
    """Configuration for a pre-issued API key."""

    def __init__(self, api_key: str) -> None:
        """Initialize API key auth configuration.

        Args:
            api_key: API key generated in the Crunchy Bridge dashboard (secret)
        """
        if not api_key:
            raise ConfigurationError("api_key must not be empty")
        self.api_key = api_key

    def create_provider(self, api_client: "ApiClient") -> "AuthProvider":
        return ApiKeyAuthProvider(api_client=api_client, api_key=self.api_key)

    def create_async_provider(self, api_client: "AsyncApiClient") -> "AsyncAuthProvider":
        from .async_auth_provider import AsyncApiKeyAuthProvider
        return AsyncApiKeyAuthProvider(api_client=api_client, api_key=self.api_key)


class ApplicationAuthConfig:  # pylint: disable=too-few-public-methods
    """Configuration for application id and secret authentication."""

    def __init__(self, application_id: str, application_secret: str) -> None:
        """Initialize application auth configuration.

        Args:
            application_id: Application id component of the API key
            application_secret: Application secret component of the API key (secret)
        """
        if not application_id or not application_secret:
            raise ConfigurationError(
                "application_id and application_secret must both be set"
            )
        self.application_id = application_id
        self.application_secret = application_secret

    def create_provider(self, api_client: "ApiClient") -> "AuthProvider":
        return ApplicationAuthProvider(
            api_client=api_client,
            application_id=self.application_id,
            application_secret=self.application_secret,
        )

    def create_async_provider(self, api_client: "AsyncApiClient") -> "AsyncAuthProvider":
        from .async_auth_provider import AsyncApplicationAuthProvider
        return AsyncApplicationAuthProvider(
            api_client=api_client,
            application_id=self.application_id,
            application_secret=self.application_secret,
        )


def create_auth_config(
    api_key: Optional[str] = None,
    application_id: Optional[str] = None,
    application_secret: Optional[str] = None,
) -> AuthConfig:
    """Pick the authentication configuration for the supplied credentials.

    An application id and secret take precedence over an API key.

    Raises:
        ConfigurationError: If neither form of credentials is complete
    """
    if application_id and application_secret:
        return ApplicationAuthConfig(application_id, application_secret)
    if api_key:
        return ApiKeyAuthConfig(api_key)
    raise ConfigurationError(
        "either supply 'api_key' or 'application_id' and "
        "'application_secret' for authentication"
    )


def create_auth_config_from_env() -> AuthConfig:
    """Read credentials from ``API_KEY``, ``APPLICATION_ID`` and ``APPLICATION_SECRET``."""
    return create_auth_config(
        api_key=os.getenv("API_KEY"),
        application_id=os.getenv("APPLICATION_ID"),
        application_secret=os.getenv("APPLICATION_SECRET"),
    )
