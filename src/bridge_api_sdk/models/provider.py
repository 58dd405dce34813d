from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field


class Plan(BaseModel):
    model_config = {"populate_by_name": True, "extra": "allow"}

    plan_id: str = Field(..., alias="id")
    display_name: Optional[str] = Field(None)
    cpu: Optional[int] = Field(None)
    memory: Optional[Decimal] = Field(None, description="Memory in GiB.")


class Region(BaseModel):
    model_config = {"populate_by_name": True, "extra": "allow"}

    region_id: str = Field(..., alias="id")
    display_name: Optional[str] = Field(None)
    location: Optional[str] = Field(None)


class Provider(BaseModel):
    model_config = {"populate_by_name": True, "extra": "allow"}

    provider_id: str = Field(..., alias="id")
    display_name: Optional[str] = Field(None)
    regions: List[Region] = Field(default_factory=list)
    plans: List[Plan] = Field(default_factory=list)


class ProvidersResponse(BaseModel):
    providers: List[Provider] = Field(default_factory=list)
