"""
Odometer readings. An equipment has at most one reading per day: posting a
second reading for the same date updates the existing one.
"""
import logging
from datetime import date
from typing import Any, Dict, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from maintrack.core.errors import ErrorCode, MaintrackError, validation_error
from maintrack.database import transaction
from maintrack.models import MileageRecord
from maintrack.repositories import mileage_record_repository as repo
from maintrack.schemas.mileage_record import (
    MileageRecordCreate,
    MileageRecordUpdate,
    MileageRecordWithDistance,
)
from maintrack.services.equipment_service import get_owned_equipment
from maintrack.services.ownership import ensure_owned
from maintrack.services.pagination import paginate, paginate_list

logger = logging.getLogger(__name__)


def get_owned_record(db: Session, record_id: UUID, user_id: UUID) -> MileageRecord:
    return ensure_owned(
        repo.get_by_id(db, record_id), user_id,
        ErrorCode.MILEAGE_RECORD_NOT_FOUND, "Mileage record",
    )


def check_kilometers(kilometers: Optional[float]) -> float:
    if kilometers is None or kilometers < 0:
        raise MaintrackError(
            ErrorCode.INVALID_KILOMETERS,
            "kilometers must be greater than or equal to 0",
            {"kilometers": kilometers},
        )
    return round(float(kilometers), 2)


def check_record_date(record_date: Optional[date]) -> date:
    if record_date is None:
        raise validation_error("record_date is required")
    if record_date > date.today():
        raise validation_error("record_date cannot be in the future", {"record_date": str(record_date)})
    return record_date


def list_records(db: Session, user_id: UUID, limit: int, offset: int):
    query = repo.query_for_user(db, user_id).order_by(
        MileageRecord.record_date.desc(), MileageRecord.created_at.desc()
    )
    return paginate(query, limit, offset)


def upsert_for_date(db: Session, equipment_id: UUID, record_date: date, kilometers: float,
                    user_id: UUID) -> Tuple[MileageRecord, bool]:
    """
    Create the reading for ``record_date`` or update the one already there.
    Flushes only; returns (record, created).
    """
    existing = repo.find_by_equipment_and_date(db, equipment_id, record_date)
    if existing is not None:
        if existing.kilometers != kilometers:
            existing.kilometers = kilometers
            db.flush()
        return existing, False
    record = repo.add(db, MileageRecord(
        equipment_id=equipment_id,
        record_date=record_date,
        kilometers=kilometers,
        user_id=user_id,
    ))
    return record, True


def create_record(db: Session, data: MileageRecordCreate, user_id: UUID) -> Tuple[MileageRecord, bool]:
    get_owned_equipment(db, data.equipment_id, user_id)
    kilometers = check_kilometers(data.kilometers)
    record_date = check_record_date(data.record_date)

    with transaction(db):
        record, created = upsert_for_date(db, data.equipment_id, record_date, kilometers, user_id)
    db.refresh(record)
    action = "created" if created else "updated"
    logger.info(f"Mileage record {action}: equipment {record.equipment_id} {record.record_date} = {record.kilometers} km")
    return record, created


def update_record(db: Session, record_id: UUID, data: MileageRecordUpdate, user_id: UUID) -> MileageRecord:
    record = get_owned_record(db, record_id, user_id)
    fields = data.model_dump(exclude_unset=True)

    equipment_id = fields.get("equipment_id") or record.equipment_id
    if equipment_id != record.equipment_id:
        get_owned_equipment(db, equipment_id, user_id)
    if "kilometers" in fields:
        fields["kilometers"] = check_kilometers(fields["kilometers"])
    if "record_date" in fields:
        fields["record_date"] = check_record_date(fields["record_date"])

    record_date = fields.get("record_date", record.record_date)
    duplicate = repo.find_by_equipment_and_date(db, equipment_id, record_date, exclude_id=record.id)
    if duplicate is not None:
        raise MaintrackError(
            ErrorCode.DUPLICATE_MILEAGE_DATE,
            f"A mileage record already exists for {record_date}",
            {"existing_id": str(duplicate.id)},
        )

    with transaction(db):
        for field, value in fields.items():
            if value is not None:
                setattr(record, field, value)
        db.flush()
    db.refresh(record)
    return record


def delete_record(db: Session, record_id: UUID, user_id: UUID) -> Dict[str, Any]:
    record = get_owned_record(db, record_id, user_id)
    references = repo.count_maintenance_references(db, record.id)
    if references:
        raise MaintrackError(
            ErrorCode.MILEAGE_RECORD_IN_USE,
            "Cannot delete a mileage record linked to maintenance records",
            {"maintenance_records": references},
        )
    with transaction(db):
        repo.delete(db, record)
    logger.info(f"Mileage record deleted: {record_id}")
    return {"id": str(record_id)}


def records_by_equipment(db: Session, equipment_id: UUID, user_id: UUID, limit: int, offset: int) -> Dict[str, Any]:
    """Newest first, each with the distance covered since the previous reading."""
    get_owned_equipment(db, equipment_id, user_id)
    records = repo.query_for_user(db, user_id).filter(
        MileageRecord.equipment_id == equipment_id
    ).order_by(MileageRecord.record_date).all()

    with_distance = []
    previous = None
    for record in records:
        item = MileageRecordWithDistance.model_validate(record)
        if previous is not None:
            item.daily_distance = round(record.kilometers - previous.kilometers, 2)
        with_distance.append(item)
        previous = record
    with_distance.reverse()

    page = paginate_list(with_distance, limit, offset)
    page["equipment_id"] = equipment_id
    return page


def records_by_date_range(db: Session, user_id: UUID, start_date: date, end_date: date,
                          limit: int, offset: int, equipment_id: Optional[UUID] = None) -> Dict[str, Any]:
    if start_date > end_date:
        raise MaintrackError(
            ErrorCode.INVALID_DATE_RANGE,
            "start_date must be on or before end_date",
            {"start_date": str(start_date), "end_date": str(end_date)},
        )
    query = repo.query_for_user(db, user_id).filter(
        MileageRecord.record_date >= start_date,
        MileageRecord.record_date <= end_date,
    )
    if equipment_id is not None:
        get_owned_equipment(db, equipment_id, user_id)
        query = query.filter(MileageRecord.equipment_id == equipment_id)
    page = paginate(query.order_by(MileageRecord.record_date.desc()), limit, offset)
    page.update({"start_date": start_date, "end_date": end_date, "equipment_id": equipment_id})
    return page
