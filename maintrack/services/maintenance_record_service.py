"""
Maintenance record composition.

A record is written together with its odometer reading and its spare-part
and activity line items. All of it happens in one transaction, so a failure
at any step leaves nothing behind.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Set
from uuid import UUID

from sqlalchemy.orm import Session

from maintrack.core.errors import ErrorCode, MaintrackError
from maintrack.database import transaction
from maintrack.db.base import as_utc, utcnow
from maintrack.models import MaintenanceRecord, MileageRecord
from maintrack.repositories import maintenance_record_repository as repo
from maintrack.schemas.maintenance_record import (
    ActivityLine,
    MaintenanceRecordComplete,
    MaintenanceRecordCreate,
    MaintenanceRecordUpdate,
    SparePartLine,
)
from maintrack.services import mileage_record_service
from maintrack.services.activity_service import get_owned_activity
from maintrack.services.equipment_service import get_owned_equipment
from maintrack.services.maintenance_type_service import get_owned as get_owned_type
from maintrack.services.ownership import ensure_owned
from maintrack.services.pagination import paginate
from maintrack.services.spare_part_service import get_owned_spare_part

logger = logging.getLogger(__name__)


def get_owned_record(db: Session, record_id: UUID, user_id: UUID) -> MaintenanceRecord:
    return ensure_owned(
        repo.get_by_id(db, record_id), user_id,
        ErrorCode.MAINTENANCE_RECORD_NOT_FOUND, "Maintenance record",
    )


# ==================== Validation ====================

def _check_range(start: datetime, end: Optional[datetime]) -> None:
    if end is not None and as_utc(end) <= as_utc(start):
        raise MaintrackError(
            ErrorCode.INVALID_DATETIME_RANGE,
            "end_datetime must be after start_datetime",
            {"start_datetime": start.isoformat(), "end_datetime": end.isoformat()},
        )


def _check_unique_keys(keys: Iterable[UUID], label: str) -> None:
    seen: Set[UUID] = set()
    for key in keys:
        if key in seen:
            raise MaintrackError(
                ErrorCode.DUPLICATE_LINE_ITEM,
                f"{label} {key} appears more than once",
                {label: str(key)},
            )
        seen.add(key)


def _check_spare_parts(db: Session, lines: List[SparePartLine], user_id: UUID) -> None:
    _check_unique_keys((line.spare_part_id for line in lines), "spare_part_id")
    for line in lines:
        get_owned_spare_part(db, line.spare_part_id, user_id)


def _check_activities(db: Session, lines: List[ActivityLine], user_id: UUID) -> None:
    _check_unique_keys((line.activity_id for line in lines), "activity_id")
    for line in lines:
        get_owned_activity(db, line.activity_id, user_id)


# ==================== Composite steps ====================

def _resolve_mileage(db: Session, equipment_id: UUID, start: datetime, mileage: Optional[float],
                     mileage_record_id: Optional[UUID], user_id: UUID) -> Optional[UUID]:
    """
    Settle the odometer reading for the record's start date and return the
    id to link. A referenced reading from the same day is corrected in place;
    otherwise the reading for that day is created or updated.
    """
    referenced = None
    if mileage_record_id is not None:
        referenced = mileage_record_service.get_owned_record(db, mileage_record_id, user_id)

    if mileage is None:
        return referenced.id if referenced is not None else None

    kilometers = mileage_record_service.check_kilometers(mileage)
    record_date = mileage_record_service.check_record_date(as_utc(start).date())

    if (
        referenced is not None
        and referenced.equipment_id == equipment_id
        and referenced.record_date == record_date
    ):
        if referenced.kilometers != kilometers:
            referenced.kilometers = kilometers
            db.flush()
        return referenced.id

    record, created = mileage_record_service.upsert_for_date(db, equipment_id, record_date, kilometers, user_id)
    logger.debug(f"Mileage for {equipment_id} on {record_date} {'created' if created else 'reused'}")
    return record.id


def _link_is_stale(linked: Optional[MileageRecord], equipment_id: UUID, start: datetime) -> bool:
    if linked is None:
        return False
    return linked.equipment_id != equipment_id or linked.record_date != as_utc(start).date()


def _sync_spare_parts(db: Session, record_id: UUID, submitted: List[SparePartLine],
                      original: Optional[List[UUID]]) -> None:
    if original is None:
        original = [line.spare_part_id for line in repo.spare_part_lines(db, record_id)]
    keep = {line.spare_part_id for line in submitted}
    for spare_part_id in original:
        if spare_part_id not in keep:
            repo.delete_spare_part_line(db, record_id, spare_part_id)
    repo.upsert_spare_part_lines(db, record_id, [line.model_dump() for line in submitted])


def _sync_activities(db: Session, record_id: UUID, submitted: List[ActivityLine],
                     original: Optional[List[UUID]]) -> None:
    if original is None:
        original = [line.activity_id for line in repo.activity_lines(db, record_id)]
    keep = {line.activity_id for line in submitted}
    for activity_id in original:
        if activity_id not in keep:
            repo.delete_activity_line(db, record_id, activity_id)
    repo.upsert_activity_lines(db, record_id, [line.model_dump() for line in submitted])


# ==================== Operations ====================

def list_records(db: Session, user_id: UUID, limit: int, offset: int,
                 equipment_id: Optional[UUID] = None, search: Optional[str] = None):
    query = repo.query_for_user(db, user_id)
    if equipment_id is not None:
        query = query.filter(MaintenanceRecord.equipment_id == equipment_id)
    if search:
        query = query.filter(MaintenanceRecord.observations.ilike(f"%{search.strip()}%"))
    return paginate(query.order_by(MaintenanceRecord.start_datetime.desc()), limit, offset)


def records_by_equipment(db: Session, equipment_id: UUID, user_id: UUID, limit: int, offset: int,
                         search: Optional[str] = None):
    get_owned_equipment(db, equipment_id, user_id)
    return list_records(db, user_id, limit, offset, equipment_id=equipment_id, search=search)


def create_record(db: Session, data: MaintenanceRecordCreate, user_id: UUID) -> MaintenanceRecord:
    get_owned_equipment(db, data.equipment_id, user_id)
    get_owned_type(db, data.maintenance_type_id, user_id)
    _check_range(data.start_datetime, data.end_datetime)
    _check_spare_parts(db, data.spare_parts, user_id)
    _check_activities(db, data.activities, user_id)

    with transaction(db):
        mileage_record_id = _resolve_mileage(
            db, data.equipment_id, data.start_datetime, data.mileage, data.mileage_record_id, user_id
        )
        record = repo.add(db, MaintenanceRecord(
            equipment_id=data.equipment_id,
            maintenance_type_id=data.maintenance_type_id,
            mileage_record_id=mileage_record_id,
            start_datetime=data.start_datetime,
            end_datetime=data.end_datetime,
            observations=data.observations,
            user_id=user_id,
        ))
        _sync_spare_parts(db, record.id, data.spare_parts, original=[])
        _sync_activities(db, record.id, data.activities, original=[])
        record_id = record.id

    logger.info(
        f"Maintenance record created: {record_id} for equipment {data.equipment_id} "
        f"({len(data.spare_parts)} spare parts, {len(data.activities)} activities)"
    )
    return repo.get_by_id(db, record_id)


def update_record(db: Session, record_id: UUID, data: MaintenanceRecordUpdate, user_id: UUID) -> MaintenanceRecord:
    record = get_owned_record(db, record_id, user_id)
    fields = data.model_dump(exclude_unset=True)

    equipment_id = fields.get("equipment_id") or record.equipment_id
    if equipment_id != record.equipment_id:
        get_owned_equipment(db, equipment_id, user_id)
    if fields.get("maintenance_type_id") is not None:
        get_owned_type(db, fields["maintenance_type_id"], user_id)

    start = fields.get("start_datetime") or record.start_datetime
    end = fields["end_datetime"] if "end_datetime" in fields else record.end_datetime
    _check_range(start, end)

    if data.spare_parts is not None:
        _check_spare_parts(db, data.spare_parts, user_id)
    if data.activities is not None:
        _check_activities(db, data.activities, user_id)

    with transaction(db):
        if data.mileage is not None or "mileage_record_id" in fields:
            record.mileage_record_id = _resolve_mileage(
                db, equipment_id, start, data.mileage,
                fields.get("mileage_record_id", record.mileage_record_id), user_id,
            )
        elif _link_is_stale(record.mileage_record, equipment_id, start):
            # Carry the reading over to the record's new equipment and day
            record.mileage_record_id = _resolve_mileage(
                db, equipment_id, start, record.mileage_record.kilometers, None, user_id,
            )
        record.equipment_id = equipment_id
        record.start_datetime = start
        record.end_datetime = end
        if fields.get("maintenance_type_id") is not None:
            record.maintenance_type_id = fields["maintenance_type_id"]
        if "observations" in fields:
            record.observations = fields["observations"]
        db.flush()

        if data.spare_parts is not None:
            _sync_spare_parts(db, record.id, data.spare_parts, data.original_spare_parts)
        if data.activities is not None:
            _sync_activities(db, record.id, data.activities, data.original_activities)

    logger.info(f"Maintenance record updated: {record_id}")
    return repo.get_by_id(db, record_id)


def complete_record(db: Session, record_id: UUID, data: MaintenanceRecordComplete, user_id: UUID) -> MaintenanceRecord:
    record = get_owned_record(db, record_id, user_id)
    if record.end_datetime is not None:
        raise MaintrackError(
            ErrorCode.MAINTENANCE_RECORD_COMPLETED,
            "Maintenance record is already completed",
            {"end_datetime": as_utc(record.end_datetime).isoformat()},
        )
    end = data.end_datetime or utcnow()
    _check_range(record.start_datetime, end)

    with transaction(db):
        record.end_datetime = end
        if data.observations is not None:
            record.observations = data.observations
        db.flush()
    logger.info(f"Maintenance record completed: {record_id}")
    return repo.get_by_id(db, record_id)


def delete_record(db: Session, record_id: UUID, user_id: UUID) -> Dict[str, Any]:
    record = get_owned_record(db, record_id, user_id)
    with transaction(db):
        repo.delete(db, record)
    logger.info(f"Maintenance record deleted: {record_id}")
    return {"id": str(record_id)}
