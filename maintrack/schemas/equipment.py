from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime
from typing import Optional, List, Literal

from maintrack.schemas.maintenance_plan import MaintenanceStageResponse
from maintrack.schemas.maintenance_record import MaintenanceRecordWithDetails
from maintrack.schemas.mileage_record import MileageRecordResponse
from maintrack.schemas.common import Page


class EquipmentBase(BaseModel):
    type: str = Field(..., min_length=1, max_length=100)
    license_plate: str = Field(..., min_length=1, max_length=50)
    code: str = Field(..., min_length=1, max_length=50)
    maintenance_plan_id: Optional[UUID] = None


class EquipmentCreate(EquipmentBase):
    pass


class EquipmentUpdate(BaseModel):
    type: Optional[str] = Field(None, min_length=1, max_length=100)
    license_plate: Optional[str] = Field(None, min_length=1, max_length=50)
    code: Optional[str] = Field(None, min_length=1, max_length=50)
    maintenance_plan_id: Optional[UUID] = None


class EquipmentResponse(EquipmentBase):
    id: UUID
    user_id: UUID
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SortBy(BaseModel):
    by: str
    order: Literal["asc", "desc"] = "asc"


class EquipmentWithRecordsQuery(BaseModel):
    """Body of POST /equipments/with-records"""
    limit: int = 10
    offset: int = 0
    maintenanceLimit: int = 10
    maintenanceOffset: int = 0
    mileageLimit: int = 30
    mileageOffset: int = 0
    byPriority: Optional[List[str]] = None
    byStatus: Optional[List[str]] = None
    sortBy: Optional[SortBy] = None


class EquipmentWithRecords(EquipmentResponse):
    maintenance_records: Page[MaintenanceRecordWithDetails]
    mileage_records: Page[MileageRecordResponse]


class PlanSummary(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None

    class Config:
        from_attributes = True


class EquipmentMaintenancePlan(EquipmentResponse):
    maintenance_plan: Optional[PlanSummary] = None
    stages: List[MaintenanceStageResponse] = []


class HasRecordsResult(BaseModel):
    equipment_id: UUID
    has_records: bool
