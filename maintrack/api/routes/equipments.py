"""
Equipment Routes
CRUD, dependency checks and the aggregated dashboard listings
"""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Literal, Optional
from uuid import UUID

from maintrack.core.config import settings
from maintrack.core.deps import get_current_user_id
from maintrack.database import get_db
from maintrack.schemas.common import ApiResponse, Page, DeletedResponse
from maintrack.schemas.equipment import (
    EquipmentCreate,
    EquipmentUpdate,
    EquipmentResponse,
    EquipmentWithRecords,
    EquipmentWithRecordsQuery,
    EquipmentMaintenancePlan,
    HasRecordsResult,
    SortBy,
)
from maintrack.services import equipment_service

router = APIRouter(tags=["Equipment"])


@router.get("", response_model=ApiResponse[Page[EquipmentResponse]])
@router.get("/", response_model=ApiResponse[Page[EquipmentResponse]], include_in_schema=False)
def list_equipment(
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    offset: int = Query(0),
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """List the current user's equipment"""
    return {"data": equipment_service.list_equipment(db, user_id, limit, offset, search)}


@router.post("", response_model=ApiResponse[EquipmentResponse], status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=ApiResponse[EquipmentResponse], status_code=status.HTTP_201_CREATED,
             include_in_schema=False)
def create_equipment(
    equipment_in: EquipmentCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    equipment = equipment_service.create_equipment(db, equipment_in, user_id)
    return {"message": "Equipment created", "data": equipment}


# ==================== AGGREGATED LISTINGS ====================

@router.get("/with-records", response_model=ApiResponse[Page[EquipmentWithRecords]])
def equipment_with_records(
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    offset: int = Query(0),
    maintenanceLimit: int = Query(10),
    maintenanceOffset: int = Query(0),
    mileageLimit: int = Query(30),
    mileageOffset: int = Query(0),
    byStatus: Optional[List[str]] = Query(None),
    byPriority: Optional[List[str]] = Query(None),
    sortBy: Optional[str] = None,
    order: Literal["asc", "desc"] = "asc",
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Equipment with nested, separately paginated maintenance and mileage records"""
    params = EquipmentWithRecordsQuery(
        limit=limit,
        offset=offset,
        maintenanceLimit=maintenanceLimit,
        maintenanceOffset=maintenanceOffset,
        mileageLimit=mileageLimit,
        mileageOffset=mileageOffset,
        byStatus=byStatus,
        byPriority=byPriority,
        sortBy=SortBy(by=sortBy, order=order) if sortBy else None,
    )
    return {"data": equipment_service.equipment_with_records(db, user_id, params)}


@router.post("/with-records", response_model=ApiResponse[Page[EquipmentWithRecords]])
def search_equipment_with_records(
    params: EquipmentWithRecordsQuery,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Same as GET /with-records with the filters in the body"""
    return {"data": equipment_service.equipment_with_records(db, user_id, params)}


@router.get("/with-pending-records", response_model=ApiResponse[Page[EquipmentWithRecords]])
def equipment_with_pending_records(
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    offset: int = Query(0),
    maintenanceLimit: int = Query(10),
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Equipment with at least one pending or in-progress activity"""
    page = equipment_service.equipment_with_pending_records(
        db, user_id, limit, offset, maintenance_limit=maintenanceLimit
    )
    return {"data": page}


@router.get("/maintenance-plans", response_model=ApiResponse[Page[EquipmentMaintenancePlan]])
def equipment_maintenance_plans(
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    offset: int = Query(0),
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"data": equipment_service.equipment_maintenance_plans(db, user_id, limit, offset)}


@router.get("/has-records/{equipment_id}", response_model=ApiResponse[HasRecordsResult])
def equipment_has_records(
    equipment_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"data": equipment_service.has_records(db, equipment_id, user_id)}


# ==================== SINGLE EQUIPMENT ====================

@router.get("/{equipment_id}", response_model=ApiResponse[EquipmentResponse])
def get_equipment(
    equipment_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"data": equipment_service.get_owned_equipment(db, equipment_id, user_id)}


@router.put("/{equipment_id}", response_model=ApiResponse[EquipmentResponse])
def update_equipment(
    equipment_id: UUID,
    equipment_in: EquipmentUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    equipment = equipment_service.update_equipment(db, equipment_id, equipment_in, user_id)
    return {"message": "Equipment updated", "data": equipment}


@router.delete("/{equipment_id}", response_model=ApiResponse[DeletedResponse])
def delete_equipment(
    equipment_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"message": "Equipment deleted", "data": equipment_service.delete_equipment(db, equipment_id, user_id)}
