from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from maintrack.core.config import settings
from maintrack.core.deps import get_current_user_id
from maintrack.database import get_db
from maintrack.schemas.common import ApiResponse, Page, DeletedResponse
from maintrack.schemas.catalog import SparePartCreate, SparePartUpdate, SparePartResponse
from maintrack.services import spare_part_service

router = APIRouter(tags=["Spare Parts"])


@router.get("", response_model=ApiResponse[Page[SparePartResponse]])
@router.get("/", response_model=ApiResponse[Page[SparePartResponse]], include_in_schema=False)
def list_spare_parts(
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    offset: int = Query(0),
    search: Optional[str] = None,
    min_price: Optional[float] = None,
    max_price: Optional[float] = None,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    page = spare_part_service.list_spare_parts(db, user_id, limit, offset, search, min_price, max_price)
    return {"data": page}


@router.post("", response_model=ApiResponse[SparePartResponse], status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=ApiResponse[SparePartResponse], status_code=status.HTTP_201_CREATED,
             include_in_schema=False)
def create_spare_part(
    part_in: SparePartCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    part = spare_part_service.create_spare_part(db, part_in, user_id)
    return {"message": "Spare part created", "data": part}


@router.get("/{spare_part_id}", response_model=ApiResponse[SparePartResponse])
def get_spare_part(
    spare_part_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"data": spare_part_service.get_owned_spare_part(db, spare_part_id, user_id)}


@router.put("/{spare_part_id}", response_model=ApiResponse[SparePartResponse])
def update_spare_part(
    spare_part_id: UUID,
    part_in: SparePartUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    part = spare_part_service.update_spare_part(db, spare_part_id, part_in, user_id)
    return {"message": "Spare part updated", "data": part}


@router.delete("/{spare_part_id}", response_model=ApiResponse[DeletedResponse])
def delete_spare_part(
    spare_part_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"message": "Spare part deleted", "data": spare_part_service.delete_spare_part(db, spare_part_id, user_id)}
