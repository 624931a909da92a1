from datetime import date
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session, Query

from maintrack.models import MileageRecord, MaintenanceRecord


def get_by_id(db: Session, record_id: UUID) -> Optional[MileageRecord]:
    return db.query(MileageRecord).filter(MileageRecord.id == record_id).first()


def query_for_user(db: Session, user_id: UUID) -> Query:
    return db.query(MileageRecord).filter(MileageRecord.user_id == user_id)


def find_by_equipment_and_date(
    db: Session, equipment_id: UUID, record_date: date, exclude_id: Optional[UUID] = None
) -> Optional[MileageRecord]:
    query = db.query(MileageRecord).filter(
        MileageRecord.equipment_id == equipment_id,
        MileageRecord.record_date == record_date,
    )
    if exclude_id is not None:
        query = query.filter(MileageRecord.id != exclude_id)
    return query.first()


def count_maintenance_references(db: Session, record_id: UUID) -> int:
    return db.query(MaintenanceRecord).filter(MaintenanceRecord.mileage_record_id == record_id).count()


def add(db: Session, record: MileageRecord) -> MileageRecord:
    db.add(record)
    db.flush()
    return record


def delete(db: Session, record: MileageRecord) -> None:
    db.delete(record)
    db.flush()
