from typing import List, Optional
from uuid import UUID

from sqlalchemy import update
from sqlalchemy.orm import Session, Query

from maintrack.models import MaintenancePlan, MaintenanceStage


# ==================== Plans ====================

def get_plan(db: Session, plan_id: UUID) -> Optional[MaintenancePlan]:
    return db.query(MaintenancePlan).filter(MaintenancePlan.id == plan_id).first()


def plans_for_user(db: Session, user_id: UUID) -> Query:
    return db.query(MaintenancePlan).filter(MaintenancePlan.user_id == user_id)


def find_plan_by_name(
    db: Session, user_id: UUID, name: str, exclude_id: Optional[UUID] = None
) -> Optional[MaintenancePlan]:
    query = plans_for_user(db, user_id).filter(MaintenancePlan.name == name)
    if exclude_id is not None:
        query = query.filter(MaintenancePlan.id != exclude_id)
    return query.first()


def add_plan(db: Session, plan: MaintenancePlan) -> MaintenancePlan:
    db.add(plan)
    db.flush()
    return plan


def delete_plan(db: Session, plan: MaintenancePlan) -> None:
    db.delete(plan)
    db.flush()


# ==================== Stages ====================

def get_stage(db: Session, stage_id: UUID) -> Optional[MaintenanceStage]:
    return db.query(MaintenanceStage).filter(MaintenanceStage.id == stage_id).first()


def get_stages_by_ids(db: Session, stage_ids: List[UUID]) -> List[MaintenanceStage]:
    if not stage_ids:
        return []
    return db.query(MaintenanceStage).filter(MaintenanceStage.id.in_(stage_ids)).all()


def stages_for_user(db: Session, user_id: UUID) -> Query:
    return db.query(MaintenanceStage).filter(MaintenanceStage.user_id == user_id)


def stages_of_plan(db: Session, plan_id: UUID) -> List[MaintenanceStage]:
    """All stages of a plan in stored rank order."""
    return (
        db.query(MaintenanceStage)
        .filter(MaintenanceStage.maintenance_plan_id == plan_id)
        .order_by(MaintenanceStage.stage_index, MaintenanceStage.created_at)
        .all()
    )


def count_stages(db: Session, plan_id: UUID) -> int:
    return db.query(MaintenanceStage).filter(MaintenanceStage.maintenance_plan_id == plan_id).count()


def add_stage(db: Session, stage: MaintenanceStage) -> MaintenanceStage:
    db.add(stage)
    db.flush()
    return stage


def delete_stage(db: Session, stage: MaintenanceStage) -> None:
    db.delete(stage)
    db.flush()


def reindex_stages(db: Session, ordered_ids: List[UUID]) -> int:
    """Bulk-assign stage_index = position + 1 following ``ordered_ids``."""
    if not ordered_ids:
        return 0
    db.execute(
        update(MaintenanceStage),
        [{"id": stage_id, "stage_index": position + 1} for position, stage_id in enumerate(ordered_ids)],
    )
    db.flush()
    return len(ordered_ids)
