import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from maintrack.core.errors import ErrorCode, MaintrackError, validation_error
from maintrack.database import transaction
from maintrack.models import Activity, MaintenanceType
from maintrack.repositories import catalog_repository as repo
from maintrack.repositories import maintenance_type_repository
from maintrack.schemas.catalog import ActivityCreate, ActivityUpdate
from maintrack.services.ownership import ensure_owned
from maintrack.services.pagination import paginate

logger = logging.getLogger(__name__)


def get_owned_activity(db: Session, activity_id: UUID, user_id: UUID) -> Activity:
    return ensure_owned(
        repo.get_activity(db, activity_id), user_id,
        ErrorCode.ACTIVITY_NOT_FOUND, "Activity",
    )


def _resolve_types(db: Session, type_ids: List[UUID], user_id: UUID) -> List[MaintenanceType]:
    unique_ids = list(dict.fromkeys(type_ids))
    if not unique_ids:
        raise validation_error("An activity needs at least one maintenance type")
    found = {t.id: t for t in maintenance_type_repository.get_by_ids(db, unique_ids)}
    for type_id in unique_ids:
        ensure_owned(found.get(type_id), user_id, ErrorCode.MAINTENANCE_TYPE_NOT_FOUND, "Maintenance type")
    return [found[type_id] for type_id in unique_ids]


def _ensure_unique_name(db: Session, user_id: UUID, name: str, exclude_id: Optional[UUID] = None) -> None:
    if repo.find_activity_by_name(db, user_id, name, exclude_id=exclude_id):
        raise MaintrackError(ErrorCode.ACTIVITY_NAME_EXISTS, f"An activity named '{name}' already exists")


def list_activities(db: Session, user_id: UUID, limit: int, offset: int,
                    search: Optional[str] = None, maintenance_type_id: Optional[UUID] = None):
    query = repo.activities_for_user(db, user_id).options(selectinload(Activity.maintenance_types))
    if search:
        term = f"%{search.strip()}%"
        query = query.filter(or_(Activity.name.ilike(term), Activity.description.ilike(term)))
    if maintenance_type_id is not None:
        query = query.filter(Activity.maintenance_types.any(MaintenanceType.id == maintenance_type_id))
    return paginate(query.order_by(Activity.name), limit, offset)


def create_activity(db: Session, data: ActivityCreate, user_id: UUID) -> Activity:
    name = data.name.strip()
    if not name:
        raise validation_error("name is required")
    _ensure_unique_name(db, user_id, name)
    types = _resolve_types(db, data.maintenance_type_ids, user_id)

    with transaction(db):
        activity = Activity(name=name, description=data.description, user_id=user_id)
        activity.maintenance_types = types
        repo.add(db, activity)
    db.refresh(activity)
    logger.info(f"Activity created: {activity.name} ({activity.id})")
    return activity


def update_activity(db: Session, activity_id: UUID, data: ActivityUpdate, user_id: UUID) -> Activity:
    activity = get_owned_activity(db, activity_id, user_id)
    fields = data.model_dump(exclude_unset=True)

    if "name" in fields:
        name = (fields["name"] or "").strip()
        if not name:
            raise validation_error("name is required")
        _ensure_unique_name(db, user_id, name, exclude_id=activity.id)
        fields["name"] = name
    types = None
    if "maintenance_type_ids" in fields:
        types = _resolve_types(db, fields.pop("maintenance_type_ids") or [], user_id)

    with transaction(db):
        for field, value in fields.items():
            setattr(activity, field, value)
        if types is not None:
            activity.maintenance_types = types
        db.flush()
    db.refresh(activity)
    return activity


def usage(db: Session, activity_id: UUID, user_id: UUID) -> Dict[str, Any]:
    activity = get_owned_activity(db, activity_id, user_id)
    count = repo.count_activity_usage(db, activity.id)
    return {"activity_id": activity.id, "in_maintenance_record": count > 0, "usage_count": count}


def delete_activity(db: Session, activity_id: UUID, user_id: UUID) -> Dict[str, Any]:
    activity = get_owned_activity(db, activity_id, user_id)
    count = repo.count_activity_usage(db, activity.id)
    if count:
        raise MaintrackError(
            ErrorCode.ACTIVITY_IN_USE,
            "Cannot delete an activity used by maintenance records",
            {"usage_count": count},
        )
    with transaction(db):
        activity.maintenance_types = []
        repo.delete(db, activity)
    logger.info(f"Activity deleted: {activity_id}")
    return {"id": str(activity_id)}
