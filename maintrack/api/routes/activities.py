from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional
from uuid import UUID

from maintrack.core.config import settings
from maintrack.core.deps import get_current_user_id
from maintrack.database import get_db
from maintrack.schemas.common import ApiResponse, Page, DeletedResponse
from maintrack.schemas.catalog import ActivityCreate, ActivityUpdate, ActivityResponse, ActivityUsage
from maintrack.services import activity_service

router = APIRouter(tags=["Activities"])


@router.get("", response_model=ApiResponse[Page[ActivityResponse]])
@router.get("/", response_model=ApiResponse[Page[ActivityResponse]], include_in_schema=False)
def list_activities(
    limit: int = Query(settings.DEFAULT_PAGE_SIZE),
    offset: int = Query(0),
    search: Optional[str] = None,
    maintenance_type_id: Optional[UUID] = None,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    page = activity_service.list_activities(db, user_id, limit, offset, search, maintenance_type_id)
    return {"data": page}


@router.post("", response_model=ApiResponse[ActivityResponse], status_code=status.HTTP_201_CREATED)
@router.post("/", response_model=ApiResponse[ActivityResponse], status_code=status.HTTP_201_CREATED,
             include_in_schema=False)
def create_activity(
    activity_in: ActivityCreate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    activity = activity_service.create_activity(db, activity_in, user_id)
    return {"message": "Activity created", "data": activity}


@router.get("/in-maintenance-record/{activity_id}", response_model=ApiResponse[ActivityUsage])
def activity_usage(
    activity_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Whether any maintenance record uses the activity"""
    return {"data": activity_service.usage(db, activity_id, user_id)}


@router.get("/{activity_id}", response_model=ApiResponse[ActivityResponse])
def get_activity(
    activity_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"data": activity_service.get_owned_activity(db, activity_id, user_id)}


@router.put("/{activity_id}", response_model=ApiResponse[ActivityResponse])
def update_activity(
    activity_id: UUID,
    activity_in: ActivityUpdate,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    activity = activity_service.update_activity(db, activity_id, activity_in, user_id)
    return {"message": "Activity updated", "data": activity}


@router.delete("/{activity_id}", response_model=ApiResponse[DeletedResponse])
def delete_activity(
    activity_id: UUID,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return {"message": "Activity deleted", "data": activity_service.delete_activity(db, activity_id, user_id)}
