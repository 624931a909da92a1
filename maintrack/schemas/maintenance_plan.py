from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime
from typing import Optional, List

from maintrack.schemas.maintenance_type import MaintenanceTypeSummary


# ==================== Stages ====================

class MaintenanceStageCreate(BaseModel):
    maintenance_plan_id: UUID
    maintenance_type_id: UUID
    kilometers: float
    days: float
    # Accepted for compatibility; the stored rank is always derived from (kilometers, days)
    stage_index: Optional[int] = Field(None, ge=1, le=1000)


class MaintenanceStageUpdate(BaseModel):
    maintenance_plan_id: Optional[UUID] = None
    maintenance_type_id: Optional[UUID] = None
    kilometers: Optional[float] = None
    days: Optional[float] = None
    stage_index: Optional[int] = Field(None, ge=1, le=1000)


class MaintenanceStageResponse(BaseModel):
    id: UUID
    maintenance_plan_id: UUID
    maintenance_type_id: UUID
    stage_index: int
    kilometers: float
    days: float
    user_id: UUID
    created_at: datetime
    updated_at: Optional[datetime] = None
    maintenance_type: Optional[MaintenanceTypeSummary] = None

    class Config:
        from_attributes = True


class StageReorderRequest(BaseModel):
    newOrder: List[UUID] = Field(..., min_length=1)


class StageReorderResult(BaseModel):
    reordered_count: int


# ==================== Plans ====================

class MaintenancePlanCreate(BaseModel):
    name: str = Field(..., max_length=200)
    description: Optional[str] = Field(None, max_length=1000)


class MaintenancePlanUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)


class MaintenancePlanResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    user_id: UUID
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MaintenancePlanWithStages(MaintenancePlanResponse):
    stage_count: int = 0
    maintenance_type_count: int = 0
    stages: List[MaintenanceStageResponse] = []


class CanDeleteResult(BaseModel):
    id: UUID
    name: str
    can_delete: bool
    stage_count: int
    equipment_count: int = 0
    blocking_reason: Optional[str] = None
