"""Activities and spare parts: the reusable catalogue a record draws from."""
from pydantic import BaseModel, Field, field_validator
from uuid import UUID
from datetime import datetime
from typing import Optional, List

from maintrack.schemas.maintenance_type import MaintenanceTypeSummary


# ==================== Activities ====================

class ActivityCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    maintenance_type_ids: List[UUID] = Field(..., min_length=1)


class ActivityUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    # Replaces every associated type when present
    maintenance_type_ids: Optional[List[UUID]] = None


class ActivityResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    user_id: UUID
    created_at: datetime
    updated_at: Optional[datetime] = None
    maintenance_types: List[MaintenanceTypeSummary] = []

    class Config:
        from_attributes = True


class ActivityUsage(BaseModel):
    activity_id: UUID
    in_maintenance_record: bool
    usage_count: int


# ==================== Spare parts ====================

def _check_image_url(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    if not value.startswith(("http://", "https://")):
        raise ValueError("image_url must be a valid http(s) URL")
    return value


class SparePartCreate(BaseModel):
    factory_code: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    image_url: Optional[str] = Field(None, max_length=500)

    _image_url = field_validator("image_url")(_check_image_url)


class SparePartUpdate(BaseModel):
    factory_code: Optional[str] = Field(None, min_length=1, max_length=100)
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    image_url: Optional[str] = Field(None, max_length=500)

    _image_url = field_validator("image_url")(_check_image_url)


class SparePartResponse(BaseModel):
    id: UUID
    factory_code: str
    name: str
    description: Optional[str] = None
    price: float
    image_url: Optional[str] = None
    user_id: UUID
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
