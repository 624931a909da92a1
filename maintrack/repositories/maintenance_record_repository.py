from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, Query, selectinload

from maintrack.models import (
    MaintenanceRecord,
    MaintenanceSparePart,
    MaintenanceActivity,
)


def _with_details(query: Query) -> Query:
    return query.options(
        selectinload(MaintenanceRecord.maintenance_type),
        selectinload(MaintenanceRecord.mileage_record),
        selectinload(MaintenanceRecord.spare_parts).selectinload(MaintenanceSparePart.spare_part),
        selectinload(MaintenanceRecord.activities).selectinload(MaintenanceActivity.activity),
    )


def get_by_id(db: Session, record_id: UUID) -> Optional[MaintenanceRecord]:
    return _with_details(db.query(MaintenanceRecord)).filter(MaintenanceRecord.id == record_id).first()


def query_for_user(db: Session, user_id: UUID) -> Query:
    return _with_details(db.query(MaintenanceRecord)).filter(MaintenanceRecord.user_id == user_id)


def add(db: Session, record: MaintenanceRecord) -> MaintenanceRecord:
    db.add(record)
    db.flush()
    return record


def delete(db: Session, record: MaintenanceRecord) -> None:
    db.delete(record)
    db.flush()


# ==================== Line items ====================

def spare_part_lines(db: Session, record_id: UUID) -> List[MaintenanceSparePart]:
    return (
        db.query(MaintenanceSparePart)
        .filter(MaintenanceSparePart.maintenance_record_id == record_id)
        .all()
    )


def activity_lines(db: Session, record_id: UUID) -> List[MaintenanceActivity]:
    return (
        db.query(MaintenanceActivity)
        .filter(MaintenanceActivity.maintenance_record_id == record_id)
        .all()
    )


def delete_spare_part_line(db: Session, record_id: UUID, spare_part_id: UUID) -> bool:
    row = (
        db.query(MaintenanceSparePart)
        .filter(
            MaintenanceSparePart.maintenance_record_id == record_id,
            MaintenanceSparePart.spare_part_id == spare_part_id,
        )
        .first()
    )
    if row is None:
        return False
    db.delete(row)
    db.flush()
    return True


def delete_activity_line(db: Session, record_id: UUID, activity_id: UUID) -> bool:
    row = (
        db.query(MaintenanceActivity)
        .filter(
            MaintenanceActivity.maintenance_record_id == record_id,
            MaintenanceActivity.activity_id == activity_id,
        )
        .first()
    )
    if row is None:
        return False
    db.delete(row)
    db.flush()
    return True


def upsert_spare_part_lines(db: Session, record_id: UUID, lines: List[Dict]) -> int:
    """Insert or update line items keyed by spare_part_id in one pass."""
    existing = {line.spare_part_id: line for line in spare_part_lines(db, record_id)}
    for values in lines:
        row = existing.get(values["spare_part_id"])
        if row is None:
            db.add(MaintenanceSparePart(maintenance_record_id=record_id, **values))
        else:
            row.quantity = values["quantity"]
            row.unit_price = values.get("unit_price")
    db.flush()
    return len(lines)


def upsert_activity_lines(db: Session, record_id: UUID, lines: List[Dict]) -> int:
    """Insert or update line items keyed by activity_id in one pass."""
    existing = {line.activity_id: line for line in activity_lines(db, record_id)}
    for values in lines:
        row = existing.get(values["activity_id"])
        if row is None:
            db.add(MaintenanceActivity(maintenance_record_id=record_id, **values))
        else:
            row.status = values["status"]
            row.priority = values["priority"]
            row.observations = values.get("observations")
    db.flush()
    return len(lines)
