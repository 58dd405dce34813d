"""Async Crunchy Bridge API client."""

from typing import List, Optional

from aiohttp import ClientSession

from .async_api_client import AsyncApiClient
from .auth_config import AuthConfig
from .bridge_api_client import (
    ROUTE_ACCOUNT,
    ROUTE_CLUSTER,
    ROUTE_CLUSTER_ROLE,
    ROUTE_CLUSTER_STATUS,
    ROUTE_CLUSTER_UPGRADE,
    ROUTE_CLUSTERS,
    ROUTE_PROVIDERS,
    ROUTE_TEAMS,
    BridgeApiClientConfiguration,
    idempotency_key,
    parse_model,
    request_body,
    route,
)
from .exceptions import BridgeError, ConfigurationError
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


class AsyncBridgeApiClient:
    """Async Crunchy Bridge API client."""

    def __init__(
        self,
        auth_config: AuthConfig,
        config: BridgeApiClientConfiguration = BridgeApiClientConfiguration.DEFAULT,
        session: Optional[ClientSession] = None,
    ) -> None:
        """Initialize the async Bridge client.

        Immediate login, when configured, happens on ``async with`` entry
        only. A failed login there raises ``ConfigurationError``, as in the
        sync client.

        Args:
            auth_config: Authentication configuration
            config: Configuration for the API client
            session: Custom aiohttp session
        """
        super().__init__()

        self.config = config
        self.api_client = AsyncApiClient(
            config.get_base_url(),
            auth_config,
            session=session,
            user_agent=config.user_agent,
            use_idempotency_key=config.use_idempotency_key,
            timeout=config.timeout,
        )

    async def close(self) -> None:
        """Revoke the session token and release resources."""
        try:
            await self.api_client.close()
        finally:
            await self.api_client.close_session()

    async def __aenter__(self) -> "AsyncBridgeApiClient":
        if self.config.immediate_login:
            try:
                await self.api_client.login()
            except BridgeError as e:
                await self.api_client.close_session()
                raise ConfigurationError(
                    f"error during client initialization: {e}"
                ) from e
            except BaseException:
                await self.api_client.close_session()
                raise
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def get_account(self) -> Account:
        response = await self.api_client.get(ROUTE_ACCOUNT)
        return parse_model(Account, response)

    async def get_providers(self) -> List[Provider]:
        response = await self.api_client.get(ROUTE_PROVIDERS)
        return parse_model(ProvidersResponse, response).providers

    async def get_teams(self) -> List[Team]:
        response = await self.api_client.get(ROUTE_TEAMS)
        return parse_model(TeamsResponse, response).teams

    async def list_clusters(self, team_id: Optional[str] = None) -> List[Cluster]:
        """List clusters, optionally only those of one team."""
        params = {"team_id": team_id} if team_id else None
        response = await self.api_client.get(ROUTE_CLUSTERS, params=params)
        return parse_model(ClustersResponse, response).clusters

    async def get_cluster(self, cluster_id: str) -> Cluster:
        response = await self.api_client.get(route(ROUTE_CLUSTER, cluster_id))
        return parse_model(Cluster, response)

    async def create_cluster(self, create_request: CreateClusterRequest) -> Cluster:
        """Create a cluster, see ``BridgeApiClient.create_cluster``."""
        body = request_body(create_request)
        headers = {}
        if self.api_client.use_idempotency_key:
            headers["Idempotency-Key"] = idempotency_key(body)

        response = await self.api_client.post(ROUTE_CLUSTERS, json_data=body, headers=headers)
        return parse_model(Cluster, response)

    async def upgrade_cluster(
        self, cluster_id: str, upgrade_request: UpgradeClusterRequest
    ) -> ClusterUpgrade:
        response = await self.api_client.post(
            route(ROUTE_CLUSTER_UPGRADE, cluster_id),
            json_data=request_body(upgrade_request),
        )
        return parse_model(ClusterUpgrade, response)

    async def delete_cluster(self, cluster_id: str) -> None:
        await self.api_client.delete(route(ROUTE_CLUSTER, cluster_id))

    async def get_cluster_status(self, cluster_id: str) -> ClusterStatus:
        response = await self.api_client.get(route(ROUTE_CLUSTER_STATUS, cluster_id))
        return parse_model(ClusterStatus, response)

    async def get_cluster_role(self, cluster_id: str, role_name: str) -> ClusterRole:
        response = await self.api_client.get(route(ROUTE_CLUSTER_ROLE, cluster_id, role_name))
        return parse_model(ClusterRole, response)
