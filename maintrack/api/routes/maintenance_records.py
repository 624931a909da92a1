"""
Maintenance Record Routes
Create and update write the record, its mileage reading and its line items
in a single transaction.
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from maintrack.core.config import settings
from maintrack.core.deps import get_current_user_id
from maintrack.database import get_db
from maintrack.schemas.common import ApiResponse, Page, DeletedResponse
from maintrack.schemas.maintenance_record import (
    MaintenanceRecordCreate,
    MaintenanceRecordUpdate,
    MaintenanceRecordComplete,
    MaintenanceRecordWithDetails,
)
from maintrack.services import maintenance_record_service

router = APIRouter(tags=["Maintenance Records"])


@router.get("", response_model=ApiResponse[Page[MaintenanceRecordWithDetails]])
@router.get("/", response_model=ApiResponse[Page[MaintenanceRecordWithDetails]], include_in_schema=False)
def list_records(
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    offset: int = Query(0),
    equipment_id: Optional[UUID] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    page = maintenance_record_service.list_records(db, user_id, limit, offset, equipment_id, search)
    return {"data": page}


@router.post("", response_model=ApiResponse[MaintenanceRecordWithDetails], status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=ApiResponse[MaintenanceRecordWithDetails], status_code=status.HTTP_201_CREATED,
             include_in_schema=False)
def create_record(
    record_in: MaintenanceRecordCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    record = maintenance_record_service.create_record(db, record_in, user_id)
    return {"message": "Maintenance record created", "data": record}


@router.get("/by-equipment/{equipment_id}", response_model=ApiResponse[Page[MaintenanceRecordWithDetails]])
def records_by_equipment(
    equipment_id: UUID,
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    offset: int = Query(0),
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Records of one equipment; search matches the observations text"""
    page = maintenance_record_service.records_by_equipment(db, equipment_id, user_id, limit, offset, search)
    return {"data": page}


@router.post("/{record_id}/complete", response_model=ApiResponse[MaintenanceRecordWithDetails])
def complete_record(
    record_id: UUID,
    body: Optional[MaintenanceRecordComplete] = None,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Close the record; end_datetime defaults to now"""
    record = maintenance_record_service.complete_record(
        db, record_id, body or MaintenanceRecordComplete(), user_id
    )
    return {"message": "Maintenance record completed", "data": record}


@router.get("/{record_id}", response_model=ApiResponse[MaintenanceRecordWithDetails])
def get_record(
    record_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"data": maintenance_record_service.get_owned_record(db, record_id, user_id)}


@router.put("/{record_id}", response_model=ApiResponse[MaintenanceRecordWithDetails])
def update_record(
    record_id: UUID,
    record_in: MaintenanceRecordUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    record = maintenance_record_service.update_record(db, record_id, record_in, user_id)
    return {"message": "Maintenance record updated", "data": record}


@router.delete("/{record_id}", response_model=ApiResponse[DeletedResponse])
def delete_record(
    record_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"message": "Maintenance record deleted", "data": maintenance_record_service.delete_record(db, record_id, user_id)}
