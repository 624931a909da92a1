from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from uuid import UUID

from maintrack.core.config import settings
from maintrack.core.deps import get_current_user_id
from maintrack.database import get_db
from maintrack.schemas.common import ApiResponse, Page, DeletedResponse
from maintrack.schemas.maintenance_plan import (
    MaintenancePlanCreate,
    MaintenancePlanUpdate,
    MaintenancePlanResponse,
    MaintenancePlanWithStages,
    CanDeleteResult,
)
from maintrack.services import maintenance_plan_service

router = APIRouter(tags=["Maintenance Plans"])


@router.get("", response_model=ApiResponse[Page[MaintenancePlanWithStages]])
@router.get("/", response_model=ApiResponse[Page[MaintenancePlanWithStages]], include_in_schema=False)
def list_plans(
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    offset: int = Query(0),
    include_empty: bool = True,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Plans with their ordered stages; include_empty=false hides plans without stages"""
    return {"data": maintenance_plan_service.list_plans(db, user_id, limit, offset, include_empty)}


@router.post("", response_model=ApiResponse[MaintenancePlanResponse], status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=ApiResponse[MaintenancePlanResponse], status_code=status.HTTP_201_CREATED,
             include_in_schema=False)
def create_plan(
    plan_in: MaintenancePlanCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    plan = maintenance_plan_service.create_plan(db, plan_in, user_id)
    return {"message": "Maintenance plan created", "data": plan}


@router.get("/{plan_id}/can-delete", response_model=ApiResponse[CanDeleteResult])
def can_delete_plan(
    plan_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"data": maintenance_plan_service.can_delete(db, plan_id, user_id)}


@router.get("/{plan_id}", response_model=ApiResponse[MaintenancePlanWithStages])
def get_plan(
    plan_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"data": maintenance_plan_service.get_plan(db, plan_id, user_id)}


@router.put("/{plan_id}", response_model=ApiResponse[MaintenancePlanResponse])
def update_plan(
    plan_id: UUID,
    plan_in: MaintenancePlanUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    plan = maintenance_plan_service.update_plan(db, plan_id, plan_in, user_id)
    return {"message": "Maintenance plan updated", "data": plan}


@router.delete("/{plan_id}", response_model=ApiResponse[DeletedResponse])
def delete_plan(
    plan_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"message": "Maintenance plan deleted", "data": maintenance_plan_service.delete_plan(db, plan_id, user_id)}
