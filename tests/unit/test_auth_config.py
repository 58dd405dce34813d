"""Tests for authentication configuration."""
from unittest.mock import Mock

import pytest

from bridge_api_sdk.api_client import ApiClient
from bridge_api_sdk.async_api_client import AsyncApiClient
from bridge_api_sdk.async_auth_provider import AsyncApiKeyAuthProvider, AsyncApplicationAuthProvider
from bridge_api_sdk.auth_config import (
    ApiKeyAuthConfig,
    ApplicationAuthConfig,
    create_auth_config,
    create_auth_config_from_env,
)
from bridge_api_sdk.auth_provider import ApiKeyAuthProvider, ApplicationAuthProvider
from bridge_api_sdk.exceptions import ConfigurationError


class TestCreateAuthConfig:
    """Tests for choosing the credential source."""

    def test_application_credentials_preferred(self):
        """An id and secret should win over an API key."""
        config = create_auth_config(api_key="key", application_id="id", application_secret="secret")
        assert isinstance(config, ApplicationAuthConfig)

    def test_api_key(self):
        config = create_auth_config(api_key="key")
        assert isinstance(config, ApiKeyAuthConfig)
        assert config.api_key == "key"

    def test_api_key_used_when_secret_missing(self):
        """An incomplete id/secret pair should fall back to the API key."""
        config = create_auth_config(api_key="key", application_id="id")
        assert isinstance(config, ApiKeyAuthConfig)

    @pytest.mark.parametrize("kwargs", [
        {},
        {"application_id": "id"},
        {"application_secret": "secret"},
        {"api_key": "", "application_id": "", "application_secret": ""},
    ])
    def test_missing_credentials(self, kwargs):
        """Without usable credentials a ConfigurationError should be raised."""
        with pytest.raises(ConfigurationError, match="either supply 'api_key'"):
            create_auth_config(**kwargs)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("APPLICATION_ID", "env-id")
        monkeypatch.setenv("APPLICATION_SECRET", "env-secret")
        monkeypatch.delenv("API_KEY", raising=False)

        config = create_auth_config_from_env()

        assert isinstance(config, ApplicationAuthConfig)
        assert config.application_id == "env-id"

    def test_from_env_api_key(self, monkeypatch):
        monkeypatch.setenv("API_KEY", "env-key")
        monkeypatch.delenv("APPLICATION_ID", raising=False)
        monkeypatch.delenv("APPLICATION_SECRET", raising=False)

        assert isinstance(create_auth_config_from_env(), ApiKeyAuthConfig)


class TestAuthConfigProviders:
    """Tests for provider creation."""

    def test_empty_api_key_rejected(self):
        with pytest.raises(ConfigurationError):
            ApiKeyAuthConfig("")

    def test_incomplete_application_credentials_rejected(self):
        with pytest.raises(ConfigurationError):
            ApplicationAuthConfig("id", "")

    def test_api_key_providers(self):
        config = ApiKeyAuthConfig("key")
        assert isinstance(config.create_provider(Mock(spec=ApiClient)), ApiKeyAuthProvider)
        assert isinstance(config.create_async_provider(Mock(spec=AsyncApiClient)), AsyncApiKeyAuthProvider)

    def test_application_providers(self):
        config = ApplicationAuthConfig("id", "secret")
        api_client = Mock(spec=ApiClient)

        provider = config.create_provider(api_client)

        assert isinstance(provider, ApplicationAuthProvider)
        assert provider.api_client is api_client
        assert isinstance(
            config.create_async_provider(Mock(spec=AsyncApiClient)), AsyncApplicationAuthProvider
        )

    def test_each_client_gets_its_own_provider(self):
        """Token state should never be shared between clients."""
        config = ApplicationAuthConfig("id", "secret")
        first = ApiClient("https://api.crunchybridge.com", config)
        second = ApiClient("https://api.crunchybridge.com", config)
        assert first.credential is not second.credential
