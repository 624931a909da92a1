from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime
from typing import Optional, List

from maintrack.models.maintenance_record import ActivityStatus, ActivityPriority
from maintrack.schemas.maintenance_type import MaintenanceTypeSummary
from maintrack.schemas.mileage_record import MileageRecordResponse


# ==================== Line items ====================

class SparePartLine(BaseModel):
    spare_part_id: UUID
    quantity: int = Field(1, gt=0)
    unit_price: Optional[float] = Field(None, ge=0)


class ActivityLine(BaseModel):
    activity_id: UUID
    status: ActivityStatus = ActivityStatus.PENDING
    priority: ActivityPriority = ActivityPriority.NO
    observations: Optional[str] = None


class SparePartSummary(BaseModel):
    id: UUID
    factory_code: str
    name: str
    price: float

    class Config:
        from_attributes = True


class ActivitySummary(BaseModel):
    id: UUID
    name: str

    class Config:
        from_attributes = True


class MaintenanceSparePartResponse(BaseModel):
    id: UUID
    spare_part_id: UUID
    quantity: int
    unit_price: Optional[float] = None
    spare_part: Optional[SparePartSummary] = None

    class Config:
        from_attributes = True


class MaintenanceActivityResponse(BaseModel):
    id: UUID
    activity_id: UUID
    status: ActivityStatus
    priority: ActivityPriority
    observations: Optional[str] = None
    activity: Optional[ActivitySummary] = None

    class Config:
        from_attributes = True


# ==================== Records ====================

class MaintenanceRecordCreate(BaseModel):
    """
    Composite write: the record, its mileage reading and its line items
    are persisted together or not at all.
    """
    equipment_id: UUID
    maintenance_type_id: UUID
    start_datetime: datetime
    end_datetime: Optional[datetime] = None
    observations: Optional[str] = None

    # Odometer reading on the start date
    mileage: Optional[float] = Field(None, ge=0)
    mileage_record_id: Optional[UUID] = None

    spare_parts: List[SparePartLine] = []
    activities: List[ActivityLine] = []


class MaintenanceRecordUpdate(BaseModel):
    equipment_id: Optional[UUID] = None
    maintenance_type_id: Optional[UUID] = None
    start_datetime: Optional[datetime] = None
    end_datetime: Optional[datetime] = None
    observations: Optional[str] = None

    mileage: Optional[float] = Field(None, ge=0)
    mileage_record_id: Optional[UUID] = None

    # None leaves the line items untouched
    spare_parts: Optional[List[SparePartLine]] = None
    activities: Optional[List[ActivityLine]] = None

    # spare_part_id / activity_id values the caller last saw; defaults to what is stored
    original_spare_parts: Optional[List[UUID]] = None
    original_activities: Optional[List[UUID]] = None


class MaintenanceRecordComplete(BaseModel):
    end_datetime: Optional[datetime] = None
    observations: Optional[str] = None


class MaintenanceRecordResponse(BaseModel):
    id: UUID
    equipment_id: UUID
    maintenance_type_id: UUID
    mileage_record_id: Optional[UUID] = None
    start_datetime: datetime
    end_datetime: Optional[datetime] = None
    observations: Optional[str] = None
    user_id: UUID
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MaintenanceRecordWithDetails(MaintenanceRecordResponse):
    maintenance_type: Optional[MaintenanceTypeSummary] = None
    mileage_record: Optional[MileageRecordResponse] = None
    spare_parts: List[MaintenanceSparePartResponse] = []
    activities: List[MaintenanceActivityResponse] = []
