from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, AliasChoices, field_validator


class ClusterState(str, Enum):
    CREATING = "creating"
    READY = "ready"
    RESTARTING = "restarting"
    RESUMING = "resuming"
    SUSPENDED = "suspended"
    SUSPENDING = "suspending"
    UNKNOWN = "unknown"


class Cluster(BaseModel):
    model_config = {"populate_by_name": True, "extra": "allow"}

    cluster_id: str = Field(..., alias="id")
    name: str = Field(...)
    team_id: str = Field(...)
    provider_id: Optional[str] = Field(None)
    region_id: Optional[str] = Field(None)
    plan_id: Optional[str] = Field(None)
    major_version: Optional[int] = Field(
        None,
        validation_alias=AliasChoices("major_version", "postgres_version_id"),
    )
    storage: Optional[int] = Field(None, description="Storage size in GB.")
    is_ha: bool = Field(False)
    host: Optional[str] = Field(None)
    cpu: Optional[int] = Field(None)
    memory: Optional[float] = Field(None)
    created_at: Optional[datetime] = Field(None)
    updated_at: Optional[datetime] = Field(None)


class ClustersResponse(BaseModel):
    clusters: List[Cluster] = Field(default_factory=list)


class CreateClusterRequest(BaseModel):
    """Body of ``POST /clusters``."""

    name: str = Field(...)
    team_id: str = Field(...)
    plan_id: str = Field(...)
    provider_id: str = Field(...)
    region_id: str = Field(...)
    major_version: Optional[int] = Field(
        None,
        serialization_alias="postgres_version_id",
        description="Postgres major version, the API default is used when omitted.",
    )
    storage: Optional[int] = Field(None, description="Storage size in GB.")
    is_ha: bool = Field(False)


class UpgradeClusterRequest(BaseModel):
    """Body of ``POST /clusters/{id}/upgrade``. Omitted fields are left unchanged."""

    plan_id: Optional[str] = Field(None)
    major_version: Optional[int] = Field(None, serialization_alias="postgres_version_id")
    storage: Optional[int] = Field(None)
    is_ha: Optional[bool] = Field(None)


class ClusterUpgradeOperation(BaseModel):
    model_config = {"extra": "allow"}

    flavor: str = Field(...)
    state: str = Field(...)
    starting_from: Optional[datetime] = Field(None)


class ClusterUpgrade(BaseModel):
    model_config = {"extra": "allow"}

    cluster_id: str = Field(...)
    operations: List[ClusterUpgradeOperation] = Field(default_factory=list)


class ClusterStatus(BaseModel):
    model_config = {"extra": "allow"}

    state: ClusterState = Field(ClusterState.UNKNOWN)
    oldest_backup_at: Optional[datetime] = Field(None)
    disk_available_mb: Optional[int] = Field(None)
    disk_used_mb: Optional[int] = Field(None)
    disk_total_size_mb: Optional[int] = Field(None)

    @field_validator("state", mode="before")
    @classmethod
    def validate_state(cls, v: Any) -> Any:
        # states added by the API after this release
        if v not in [s.value for s in ClusterState]:
            return ClusterState.UNKNOWN
        return v


class ClusterRole(BaseModel):
    model_config = {"extra": "allow"}

    name: str = Field(...)
    account_id: Optional[str] = Field(None)
    uri: Optional[str] = Field(None, description="Connection URI including credentials.")
