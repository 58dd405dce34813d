from .account import Account
from .auth import AccessTokenResponse
from .cluster import (
    Cluster,
    ClusterRole,
    ClustersResponse,
    ClusterState,
    ClusterStatus,
    ClusterUpgrade,
    ClusterUpgradeOperation,
    CreateClusterRequest,
    UpgradeClusterRequest,
)
from .provider import Plan, Provider, ProvidersResponse, Region
from .team import Team, TeamRole, TeamsResponse

__all__ = [
    "AccessTokenResponse",
    "Account",
    "Cluster",
    "ClusterRole",
    "ClustersResponse",
    "ClusterState",
    "ClusterStatus",
    "ClusterUpgrade",
    "ClusterUpgradeOperation",
    "CreateClusterRequest",
    "Plan",
    "Provider",
    "ProvidersResponse",
    "Region",
    "Team",
    "TeamRole",
    "TeamsResponse",
    "UpgradeClusterRequest",
]
