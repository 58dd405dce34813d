from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


class TeamRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"
    UNKNOWN = "unknown"


class Team(BaseModel):
    model_config = {"populate_by_name": True, "extra": "allow"}

    team_id: str = Field(..., alias="id")
    name: str = Field(...)
    is_personal: bool = Field(False)
    role: Optional[TeamRole] = Field(
        None,
        description="Role of the authenticated account within the team.",
    )

    @field_validator("role", mode="before")
    @classmethod
    def validate_role(cls, v: Any) -> Any:
        if v is None or v in [r.value for r in TeamRole]:
            return v
        return TeamRole.UNKNOWN


class TeamsResponse(BaseModel):
    teams: List[Team] = Field(default_factory=list)
