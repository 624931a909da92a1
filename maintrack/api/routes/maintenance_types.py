from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID

from maintrack.core.config import settings
from maintrack.core.deps import get_current_user_id
from maintrack.database import get_db
from maintrack.schemas.common import ApiResponse, Page, DeletedResponse
from maintrack.schemas.maintenance_type import (
    MaintenanceTypeCreate,
    MaintenanceTypeUpdate,
    MaintenanceTypeResponse,
    MaintenanceTypeNode,
)
from maintrack.services import maintenance_type_service

router = APIRouter(tags=["Maintenance Types"])


@router.get("", response_model=ApiResponse[Page[MaintenanceTypeResponse]])
@router.get("/", response_model=ApiResponse[Page[MaintenanceTypeResponse]], include_in_schema=False)
def list_types(
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    offset: int = Query(0),
    parent_id: Optional[UUID] = None,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Types ordered by path, so parents precede their children"""
    return {"data": maintenance_type_service.list_types(db, user_id, limit, offset, parent_id)}


@router.get("/tree", response_model=ApiResponse[List[MaintenanceTypeNode]])
def get_tree(
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"data": maintenance_type_service.get_tree(db, user_id)}


@router.post("", response_model=ApiResponse[MaintenanceTypeResponse], status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=ApiResponse[MaintenanceTypeResponse], status_code=status.HTTP_201_CREATED,
             include_in_schema=False)
def create_type(
    type_in: MaintenanceTypeCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    node = maintenance_type_service.create_type(db, type_in, user_id)
    return {"message": "Maintenance type created", "data": node}


@router.get("/{type_id}/children", response_model=ApiResponse[List[MaintenanceTypeResponse]])
def list_children(
    type_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"data": maintenance_type_service.list_children(db, type_id, user_id)}


@router.get("/{type_id}", response_model=ApiResponse[MaintenanceTypeResponse])
def get_type(
    type_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"data": maintenance_type_service.get_owned(db, type_id, user_id)}


@router.put("/{type_id}", response_model=ApiResponse[MaintenanceTypeResponse])
def update_type(
    type_id: UUID,
    type_in: MaintenanceTypeUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Rename and/or move; send parent_id: null to move the type to the root"""
    node = maintenance_type_service.update_type(db, type_id, type_in, user_id)
    return {"message": "Maintenance type updated", "data": node}


@router.delete("/{type_id}", response_model=ApiResponse[DeletedResponse])
def delete_type(
    type_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"message": "Maintenance type deleted", "data": maintenance_type_service.delete_type(db, type_id, user_id)}
