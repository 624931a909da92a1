"""
Maintenance Stage Routes
Stages are re-ranked by (kilometers, days) on every write; /reorder lets the
caller impose an explicit order instead.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from maintrack.core.config import settings
from maintrack.core.deps import get_current_user_id
from maintrack.database import get_db
from maintrack.schemas.common import ApiResponse, Page, DeletedResponse
from maintrack.schemas.maintenance_plan import (
    MaintenanceStageCreate,
    MaintenanceStageUpdate,
    MaintenanceStageResponse,
    StageReorderRequest,
    StageReorderResult,
)
from maintrack.services import maintenance_stage_service

router = APIRouter(tags=["Maintenance Stages"])

# Mounted at the plural prefix so /maintenance-stages/reorder resolves too
reorder_router = APIRouter(tags=["Maintenance Stages"])


@router.put("/reorder", response_model=ApiResponse[StageReorderResult])
@reorder_router.put("/reorder", response_model=ApiResponse[StageReorderResult])
def reorder_stages(
    body: StageReorderRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Assign stage_index 1..N following newOrder"""
    result = maintenance_stage_service.reorder_stages(db, body.newOrder, user_id)
    return {"message": "Stages reordered", "data": result}


@router.get("", response_model=ApiResponse[Page[MaintenanceStageResponse]])
@router.get("/", response_model=ApiResponse[Page[MaintenanceStageResponse]], include_in_schema=False)
def list_stages(
    plan_id: Optional[UUID] = None,
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    offset: int = Query(0),
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"data": maintenance_stage_service.list_stages(db, user_id, limit, offset, plan_id)}


@router.post("", response_model=ApiResponse[MaintenanceStageResponse], status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=ApiResponse[MaintenanceStageResponse], status_code=status.HTTP_201_CREATED,
             include_in_schema=False)
def create_stage(
    stage_in: MaintenanceStageCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    stage = maintenance_stage_service.create_stage(db, stage_in, user_id)
    return {"message": "Maintenance stage created", "data": stage}


@router.get("/{stage_id}", response_model=ApiResponse[MaintenanceStageResponse])
def get_stage(
    stage_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"data": maintenance_stage_service.get_owned_stage(db, stage_id, user_id)}


@router.put("/{stage_id}", response_model=ApiResponse[MaintenanceStageResponse])
def update_stage(
    stage_id: UUID,
    stage_in: MaintenanceStageUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    stage = maintenance_stage_service.update_stage(db, stage_id, stage_in, user_id)
    return {"message": "Maintenance stage updated", "data": stage}


@router.delete("/{stage_id}", response_model=ApiResponse[DeletedResponse])
def delete_stage(
    stage_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"message": "Maintenance stage deleted", "data": maintenance_stage_service.delete_stage(db, stage_id, user_id)}
