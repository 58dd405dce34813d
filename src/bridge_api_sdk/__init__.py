__version__ = "0.1.0"

from .api_client import (
    ApiClient,
    ClientOption,
    with_http_session,
    with_idempotency_key,
    with_immediate_login,
    with_user_agent,
)
from .async_api_client import AsyncApiClient
from .async_auth_provider import (
    AsyncApiKeyAuthProvider,
    AsyncApplicationAuthProvider,
    AsyncAuthProvider,
)
from .async_bridge_api_client import AsyncBridgeApiClient
from .auth_config import (
    ApiKeyAuthConfig,
    ApplicationAuthConfig,
    AuthConfig,
    create_auth_config,
    create_auth_config_from_env,
)
from .auth_provider import ApiKeyAuthProvider, ApplicationAuthProvider, AuthProvider
from .bridge_api_client import BridgeApiClient, BridgeApiClientConfiguration
from .exceptions import (
    APIError,
    AuthenticationError,
    BridgeError,
    ConfigurationError,
    NotFoundError,
    RateLimitError,
    ResponseDecodeError,
    ServerError,
    TokenAcquisitionError,
    TransportError,
    ValidationError,
)
from . import models
from .models import *  # noqa: F401,F403

__all__ = [
    "APIError",
    "ApiClient",
    "ApiKeyAuthConfig",
    "ApiKeyAuthProvider",
    "ApplicationAuthConfig",
    "ApplicationAuthProvider",
    "AsyncApiClient",
    "AsyncApiKeyAuthProvider",
    "AsyncApplicationAuthProvider",
    "AsyncAuthProvider",
    "AsyncBridgeApiClient",
    "AuthConfig",
    "AuthProvider",
    "AuthenticationError",
    "BridgeApiClient",
    "BridgeApiClientConfiguration",
    "BridgeError",
    "ClientOption",
    "ConfigurationError",
    "NotFoundError",
    "RateLimitError",
    "ResponseDecodeError",
    "ServerError",
    "TokenAcquisitionError",
    "TransportError",
    "ValidationError",
    "create_auth_config",
    "create_auth_config_from_env",
    "with_http_session",
    "with_idempotency_key",
    "with_immediate_login",
    "with_user_agent",
]
__all__ += models.__all__
