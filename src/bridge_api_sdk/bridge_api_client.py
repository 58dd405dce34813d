import json
import os
import uuid
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from pydantic import BaseModel, ValidationError as PydanticValidationError

from .api_client import (
    ApiClient,
    ClientOption,
    with_idempotency_key,
    with_immediate_login,
    with_user_agent,
)
from .auth_config import AuthConfig
from .exceptions import ResponseDecodeError
from .models import (
    Account,
    Cluster,
    ClusterRole,
    ClustersResponse,
    ClusterStatus,
    ClusterUpgrade,
    CreateClusterRequest,
    Provider,
    ProvidersResponse,
    Team,
    TeamsResponse,
    UpgradeClusterRequest,
)

PROD_BASE_URL = "https://api.crunchybridge.com"

ROUTE_ACCOUNT = "/account"
ROUTE_CLUSTER = "/clusters/{}"
ROUTE_CLUSTER_UPGRADE = "/clusters/{}/upgrade"
ROUTE_CLUSTERS = "/clusters"
ROUTE_CLUSTER_ROLE = "/clusters/{}/roles/{}"
ROUTE_CLUSTER_STATUS = "/clusters/{}/status"
ROUTE_PROVIDERS = "/providers"
ROUTE_TEAMS = "/teams"

# Namespace of the UUIDv5 idempotency keys derived from request bodies.
BRIDGE_PROVIDER_NS = uuid.UUID("cc67b0e5-7152-4d54-85ff-49a5c17fbbfe")


def _get_version() -> str:
    try:
        from . import __version__
        return __version__
    except (ImportError, AttributeError):
        return "0.1.0"


def route(template: str, *segments: str) -> str:
    """Fill a route template with percent-encoded path segments."""
    return template.format(*(quote(segment, safe="") for segment in segments))


def idempotency_key(body: Dict[str, Any]) -> str:
    """Derive a stable idempotency key from a request body."""
    canonical = json.dumps(body, sort_keys=True, separators=(",", ":"), default=str)
    return str(uuid.uuid5(BRIDGE_PROVIDER_NS, canonical))


def parse_model(model: type, data: Any) -> Any:
    """Validate decoded response data against a pydantic model."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise ResponseDecodeError(
            f"failed to unmarshal {model.__name__} response: {e}"
        ) from e


def request_body(request: BaseModel) -> Dict[str, Any]:
    return request.model_dump(by_alias=True, exclude_none=True, mode="json")


class BridgeApiClientConfiguration:
    DEFAULT: "BridgeApiClientConfiguration"

    def __init__(
        self,
        base_url: Optional[str] = None,
        user_agent: Optional[str] = None,
        immediate_login: bool = False,
        use_idempotency_key: bool = False,
        timeout: float = 30,
    ):
        # explicit base_url overrides the default production URL
        self.base_url = base_url or PROD_BASE_URL
        self.user_agent = user_agent or f"bridge-python-api-sdk-{_get_version()}"
        self.immediate_login = immediate_login
        self.use_idempotency_key = use_idempotency_key
        self.timeout = timeout

    def get_base_url(self) -> str:
        return self.base_url

    @classmethod
    def from_env(cls, **kwargs: Any) -> "BridgeApiClientConfiguration":
        """Build a configuration taking the API URL from ``BRIDGE_API_URL``."""
        kwargs.setdefault("base_url", os.getenv("BRIDGE_API_URL"))
        return cls(**kwargs)

    def client_options(self) -> List[ClientOption]:
        options = [with_user_agent(self.user_agent)]
        if self.use_idempotency_key:
            options.append(with_idempotency_key())
        # login last so every other option is in effect for it
        if self.immediate_login:
            options.append(with_immediate_login())
        return options


BridgeApiClientConfiguration.DEFAULT = BridgeApiClientConfiguration()


class BridgeApiClient:
    """Crunchy Bridge API client"""

    def __init__(
        self,
        auth_config: AuthConfig,
        config: BridgeApiClientConfiguration = BridgeApiClientConfiguration.DEFAULT,
    ) -> None:
        """Initialize the Bridge client.

        Args:
            auth_config: Authentication configuration
            config: Configuration for the API client

        Raises:
            ConfigurationError: If the configuration is invalid or immediate
                login fails
        """
        super().__init__()

        self.config = config
        self.api_client = ApiClient(
            config.get_base_url(),
            auth_config,
            *config.client_options(),
            timeout=config.timeout,
        )

    def close(self) -> None:
        """Revoke the session token and release the HTTP session."""
        try:
            self.api_client.close()
        finally:
            self.api_client.close_session()

    def __enter__(self) -> "BridgeApiClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def get_account(self) -> Account:
        """Get the account the credentials belong to."""
        response = self.api_client.get(ROUTE_ACCOUNT)
        return parse_model(Account, response)

    def get_providers(self) -> List[Provider]:
        """List cloud providers with their regions and plans."""
        response = self.api_client.get(ROUTE_PROVIDERS)
        return parse_model(ProvidersResponse, response).providers

    def get_teams(self) -> List[Team]:
        """List the teams the account is a member of."""
        response = self.api_client.get(ROUTE_TEAMS)
        return parse_model(TeamsResponse, response).teams

    def list_clusters(self, team_id: Optional[str] = None) -> List[Cluster]:
        """List clusters, optionally only those of one team.

        Args:
            team_id: Team to filter by

        Returns:
            Clusters visible to the account
        """
        params = {"team_id": team_id} if team_id else None
        response = self.api_client.get(ROUTE_CLUSTERS, params=params)
        return parse_model(ClustersResponse, response).clusters

    def get_cluster(self, cluster_id: str) -> Cluster:
        response = self.api_client.get(route(ROUTE_CLUSTER, cluster_id))
        return parse_model(Cluster, response)

    def create_cluster(self, create_request: CreateClusterRequest) -> Cluster:
        """Create a cluster.

        With ``use_idempotency_key`` enabled, the request carries a key derived
        from its body, so repeating an identical create may be answered from
        the API's cached response.
        """
        body = request_body(create_request)
        headers = {}
        if self.api_client.use_idempotency_key:
            headers["Idempotency-Key"] = idempotency_key(body)

        response = self.api_client.post(ROUTE_CLUSTERS, json_data=body, headers=headers)
        return parse_model(Cluster, response)

    def upgrade_cluster(
        self, cluster_id: str, upgrade_request: UpgradeClusterRequest
    ) -> ClusterUpgrade:
        """Start an upgrade (plan, storage, HA or Postgres version) of a cluster."""
        response = self.api_client.post(
            route(ROUTE_CLUSTER_UPGRADE, cluster_id),
            json_data=request_body(upgrade_request),
        )
        return parse_model(ClusterUpgrade, response)

    def delete_cluster(self, cluster_id: str) -> None:
        self.api_client.delete(route(ROUTE_CLUSTER, cluster_id))

    def get_cluster_status(self, cluster_id: str) -> ClusterStatus:
        response = self.api_client.get(route(ROUTE_CLUSTER_STATUS, cluster_id))
        return parse_model(ClusterStatus, response)

    def get_cluster_role(self, cluster_id: str, role_name: str) -> ClusterRole:
        """Get a database role of a cluster, including its connection URI."""
        response = self.api_client.get(route(ROUTE_CLUSTER_ROLE, cluster_id, role_name))
        return parse_model(ClusterRole, response)
