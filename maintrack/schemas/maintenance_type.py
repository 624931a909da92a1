from pydantic import BaseModel, Field
from uuid import UUID
from datetime import datetime
from typing import Optional, List


class MaintenanceTypeCreate(BaseModel):
    type: str = Field(..., min_length=1, max_length=150)
    parent_id: Optional[UUID] = None


class MaintenanceTypeUpdate(BaseModel):
    # parent_id explicitly set to null moves the node to the root
    type: Optional[str] = Field(None, min_length=1, max_length=150)
    parent_id: Optional[UUID] = None


class MaintenanceTypeSummary(BaseModel):
    id: UUID
    type: str
    level: int
    path: str

    class Config:
        from_attributes = True


class MaintenanceTypeResponse(MaintenanceTypeSummary):
    parent_id: Optional[UUID] = None
    user_id: UUID
    created_at: datetime
    updated_at: Optional[datetime] = None


class MaintenanceTypeNode(MaintenanceTypeResponse):
    children: List["MaintenanceTypeNode"] = []


MaintenanceTypeNode.model_rebuild()
