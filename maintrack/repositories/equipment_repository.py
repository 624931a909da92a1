from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session, Query

from maintrack.models import Equipment, MaintenanceRecord, MileageRecord


def get_by_id(db: Session, equipment_id: UUID) -> Optional[Equipment]:
    return db.query(Equipment).filter(Equipment.id == equipment_id).first()


def query_for_user(db: Session, user_id: UUID) -> Query:
    return db.query(Equipment).filter(Equipment.user_id == user_id)


def find_by_license_plate(
    db: Session, user_id: UUID, license_plate: str, exclude_id: Optional[UUID] = None
) -> Optional[Equipment]:
    query = query_for_user(db, user_id).filter(Equipment.license_plate == license_plate)
    if exclude_id is not None:
        query = query.filter(Equipment.id != exclude_id)
    return query.first()


def find_by_code(
    db: Session, user_id: UUID, code: str, exclude_id: Optional[UUID] = None
) -> Optional[Equipment]:
    query = query_for_user(db, user_id).filter(Equipment.code == code)
    if exclude_id is not None:
        query = query.filter(Equipment.id != exclude_id)
    return query.first()


def count_maintenance_records(db: Session, equipment_id: UUID) -> int:
    return db.query(MaintenanceRecord).filter(MaintenanceRecord.equipment_id == equipment_id).count()


def count_mileage_records(db: Session, equipment_id: UUID) -> int:
    return db.query(MileageRecord).filter(MileageRecord.equipment_id == equipment_id).count()


def count_by_plan(db: Session, plan_id: UUID) -> int:
    return db.query(Equipment).filter(Equipment.maintenance_plan_id == plan_id).count()


def add(db: Session, equipment: Equipment) -> Equipment:
    db.add(equipment)
    db.flush()
    return equipment


def delete(db: Session, equipment: Equipment) -> None:
    db.delete(equipment)
    db.flush()
