from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional
from uuid import UUID

from maintrack.core.config import settings
from maintrack.core.deps import get_current_user_id
from maintrack.database import get_db
from maintrack.schemas.common import ApiResponse, Page, DeletedResponse
from maintrack.schemas.mileage_record import (
    MileageRecordCreate,
    MileageRecordUpdate,
    MileageRecordResponse,
    MileageRecordsByEquipment,
    MileageRecordsByDateRange,
)
from maintrack.services import mileage_record_service

router = APIRouter(tags=["Mileage Records"])


@router.get("", response_model=ApiResponse[Page[MileageRecordResponse]])
@router.get("/", response_model=ApiResponse[Page[MileageRecordResponse]], include_in_schema=False)
def list_records(
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    offset: int = Query(0),
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"data": mileage_record_service.list_records(db, user_id, limit, offset)}


@router.post("", response_model=ApiResponse[MileageRecordResponse], status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=ApiResponse[MileageRecordResponse], status_code=status.HTTP_201_CREATED,
             include_in_schema=False)
def create_record(
    record_in: MileageRecordCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Create the day's reading, or update it if one already exists for that date (200)"""
    record, created = mileage_record_service.create_record(db, record_in, user_id)
    if created:
        return {"message": "Mileage record created", "data": record}
    body = ApiResponse[MileageRecordResponse](
        message="Mileage record updated",
        data=MileageRecordResponse.model_validate(record),
    )
    return JSONResponse(status_code=status.HTTP_200_OK, content=jsonable_encoder(body))


@router.get("/by-equipment/{equipment_id}", response_model=ApiResponse[MileageRecordsByEquipment])
def records_by_equipment(
    equipment_id: UUID,
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    offset: int = Query(0),
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Readings newest first, each with daily_distance since the previous one"""
    page = mileage_record_service.records_by_equipment(db, equipment_id, user_id, limit, offset)
    return {"data": page}


@router.get("/by-date-range", response_model=ApiResponse[MileageRecordsByDateRange])
def records_by_date_range(
    start_date: date,
    end_date: date,
    equipment_id: Optional[UUID] = None,
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    offset: int = Query(0),
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    page = mileage_record_service.records_by_date_range(
        db, user_id, start_date, end_date, limit, offset, equipment_id
    )
    return {"data": page}


@router.get("/{record_id}", response_model=ApiResponse[MileageRecordResponse])
def get_record(
    record_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"data": mileage_record_service.get_owned_record(db, record_id, user_id)}


@router.put("/{record_id}", response_model=ApiResponse[MileageRecordResponse])
def update_record(
    record_id: UUID,
    record_in: MileageRecordUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    record = mileage_record_service.update_record(db, record_id, record_in, user_id)
    return {"message": "Mileage record updated", "data": record}


@router.delete("/{record_id}", response_model=ApiResponse[DeletedResponse])
def delete_record(
    record_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"message": "Mileage record deleted", "data": mileage_record_service.delete_record(db, record_id, user_id)}
