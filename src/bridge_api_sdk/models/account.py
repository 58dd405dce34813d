from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Account(BaseModel):
    model_config = {"populate_by_name": True, "extra": "allow"}

    account_id: str = Field(..., alias="id")
    email: Optional[str] = Field(None)
    name: Optional[str] = Field(None)
    default_team_id: Optional[str] = Field(None)
    created_at: Optional[datetime] = Field(None)
    updated_at: Optional[datetime] = Field(None)
