from pydantic import BaseModel
from uuid import UUID
from datetime import datetime, date
from typing import Optional, List


class MileageRecordCreate(BaseModel):
    equipment_id: UUID
    record_date: date
    kilometers: float


class MileageRecordUpdate(BaseModel):
    equipment_id: Optional[UUID] = None
    record_date: Optional[date] = None
    kilometers: Optional[float] = None


class MileageRecordResponse(BaseModel):
    id: UUID
    equipment_id: UUID
    record_date: date
    kilometers: float
    user_id: UUID
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MileageRecordWithDistance(MileageRecordResponse):
    # kilometers driven since the previous record of the same equipment
    daily_distance: float = 0


class MileageRecordsByEquipment(BaseModel):
    equipment_id: UUID
    total: int
    limit: int
    offset: int
    pages: int
    data: List[MileageRecordWithDistance] = []


class MileageRecordsByDateRange(BaseModel):
    start_date: date
    end_date: date
    equipment_id: Optional[UUID] = None
    total: int
    limit: int
    offset: int
    pages: int
    data: List[MileageRecordResponse] = []
