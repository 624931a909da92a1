from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, Query

from maintrack.models import MaintenanceType, MaintenanceStage, MaintenanceRecord


def get_by_id(db: Session, type_id: UUID) -> Optional[MaintenanceType]:
    return db.query(MaintenanceType).filter(MaintenanceType.id == type_id).first()


def get_by_ids(db: Session, type_ids: List[UUID]) -> List[MaintenanceType]:
    if not type_ids:
        return []
    return db.query(MaintenanceType).filter(MaintenanceType.id.in_(type_ids)).all()


def query_for_user(db: Session, user_id: UUID) -> Query:
    return db.query(MaintenanceType).filter(MaintenanceType.user_id == user_id)


def children_of(db: Session, type_id: UUID) -> List[MaintenanceType]:
    return (
        db.query(MaintenanceType)
        .filter(MaintenanceType.parent_id == type_id)
        .order_by(MaintenanceType.type)
        .all()
    )


def count_children(db: Session, type_id: UUID) -> int:
    return db.query(MaintenanceType).filter(MaintenanceType.parent_id == type_id).count()


def count_stage_references(db: Session, type_id: UUID) -> int:
    return db.query(MaintenanceStage).filter(MaintenanceStage.maintenance_type_id == type_id).count()


def count_record_references(db: Session, type_id: UUID) -> int:
    return db.query(MaintenanceRecord).filter(MaintenanceRecord.maintenance_type_id == type_id).count()


def add(db: Session, node: MaintenanceType) -> MaintenanceType:
    db.add(node)
    db.flush()
    return node


def delete(db: Session, node: MaintenanceType) -> None:
    db.delete(node)
    db.flush()
