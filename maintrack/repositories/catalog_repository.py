"""Activities and spare parts."""
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session, Query

from maintrack.models import Activity, SparePart, MaintenanceActivity, MaintenanceSparePart


# ==================== Activities ====================

def get_activity(db: Session, activity_id: UUID) -> Optional[Activity]:
    return db.query(Activity).filter(Activity.id == activity_id).first()


def activities_for_user(db: Session, user_id: UUID) -> Query:
    return db.query(Activity).filter(Activity.user_id == user_id)


def find_activity_by_name(
    db: Session, user_id: UUID, name: str, exclude_id: Optional[UUID] = None
) -> Optional[Activity]:
    query = activities_for_user(db, user_id).filter(Activity.name == name)
    if exclude_id is not None:
        query = query.filter(Activity.id != exclude_id)
    return query.first()


def count_activity_usage(db: Session, activity_id: UUID) -> int:
    return db.query(MaintenanceActivity).filter(MaintenanceActivity.activity_id == activity_id).count()


# ==================== Spare parts ====================

def get_spare_part(db: Session, spare_part_id: UUID) -> Optional[SparePart]:
    return db.query(SparePart).filter(SparePart.id == spare_part_id).first()


def spare_parts_for_user(db: Session, user_id: UUID) -> Query:
    return db.query(SparePart).filter(SparePart.user_id == user_id)


def find_spare_part_by_factory_code(
    db: Session, user_id: UUID, factory_code: str, exclude_id: Optional[UUID] = None
) -> Optional[SparePart]:
    query = spare_parts_for_user(db, user_id).filter(SparePart.factory_code == factory_code)
    if exclude_id is not None:
        query = query.filter(SparePart.id != exclude_id)
    return query.first()


def count_spare_part_usage(db: Session, spare_part_id: UUID) -> int:
    return db.query(MaintenanceSparePart).filter(MaintenanceSparePart.spare_part_id == spare_part_id).count()


# ==================== Shared ====================

def add(db: Session, row):
    db.add(row)
    db.flush()
    return row


def delete(db: Session, row) -> None:
    db.delete(row)
    db.flush()
