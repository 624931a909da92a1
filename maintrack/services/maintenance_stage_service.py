"""
Maintenance stages and their ranking inside a plan.

Every write reloads the plan's stages from the database, rejects values that
collide with another stage on either axis, and re-ranks the plan inside the
same transaction.
"""
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from maintrack.core.errors import ErrorCode, MaintrackError
from maintrack.database import transaction
from maintrack.models import MaintenanceStage
from maintrack.repositories import maintenance_plan_repository as repo
from maintrack.schemas.maintenance_plan import MaintenanceStageCreate, MaintenanceStageUpdate
from maintrack.services import stage_ordering
from maintrack.services.maintenance_plan_service import get_owned_plan
from maintrack.services.maintenance_type_service import get_owned as get_owned_type
from maintrack.services.ownership import ensure_owned
from maintrack.services.pagination import paginate
from maintrack.services.stage_ordering import StageSnapshot

logger = logging.getLogger(__name__)


def get_owned_stage(db: Session, stage_id: UUID, user_id: UUID) -> MaintenanceStage:
    return ensure_owned(
        repo.get_stage(db, stage_id), user_id,
        ErrorCode.MAINTENANCE_STAGE_NOT_FOUND, "Maintenance stage",
    )


def list_stages(db: Session, user_id: UUID, limit: int, offset: int, plan_id: Optional[UUID] = None):
    query = repo.stages_for_user(db, user_id)
    if plan_id is not None:
        get_owned_plan(db, plan_id, user_id)
        query = query.filter(MaintenanceStage.maintenance_plan_id == plan_id)
    query = query.order_by(MaintenanceStage.maintenance_plan_id, MaintenanceStage.stage_index)
    return paginate(query, limit, offset)


def _check_values(kilometers: float, days: float) -> None:
    invalid = {}
    if kilometers is None or kilometers < 0:
        invalid["kilometers"] = kilometers
    if days is None or days < 0:
        invalid["days"] = days
    if invalid:
        raise MaintrackError(
            ErrorCode.INVALID_STAGE_VALUE,
            "kilometers and days must be greater than or equal to 0",
            invalid,
        )


def _check_duplicates(
    snapshots: List[StageSnapshot], kilometers: float, days: float, exclude_id: Optional[UUID]
) -> None:
    axis = stage_ordering.find_duplicate_axis(snapshots, kilometers, days, exclude_id=exclude_id)
    if axis == stage_ordering.KILOMETERS:
        raise MaintrackError(
            ErrorCode.DUPLICATE_STAGE_KILOMETERS,
            f"Another stage of this plan already triggers at {kilometers} kilometers",
            {"kilometers": kilometers},
        )
    if axis == stage_ordering.DAYS:
        raise MaintrackError(
            ErrorCode.DUPLICATE_STAGE_DAYS,
            f"Another stage of this plan already triggers at {days} days",
            {"days": days},
        )


def _rerank(db: Session, plan_id: UUID, candidate: Optional[StageSnapshot] = None) -> int:
    snapshots = [StageSnapshot.of(s) for s in repo.stages_of_plan(db, plan_id)]
    ordered_ids = stage_ordering.plan_reindex(snapshots, candidate)
    if not ordered_ids:
        return 0
    count = repo.reindex_stages(db, ordered_ids)
    logger.info(f"Plan {plan_id}: {count} stages re-ranked")
    return count


def create_stage(db: Session, data: MaintenanceStageCreate, user_id: UUID) -> MaintenanceStage:
    plan = get_owned_plan(db, data.maintenance_plan_id, user_id)
    get_owned_type(db, data.maintenance_type_id, user_id)

    _check_values(data.kilometers, data.days)
    kilometers = stage_ordering.round_value(data.kilometers)
    days = stage_ordering.round_value(data.days)

    existing = [StageSnapshot.of(s) for s in repo.stages_of_plan(db, plan.id)]
    _check_duplicates(existing, kilometers, days, exclude_id=None)

    with transaction(db):
        stage = repo.add_stage(db, MaintenanceStage(
            maintenance_plan_id=plan.id,
            maintenance_type_id=data.maintenance_type_id,
            kilometers=kilometers,
            days=days,
            stage_index=len(existing) + 1,
            user_id=user_id,
        ))
        _rerank(db, plan.id)
    db.refresh(stage)
    logger.info(f"Stage created in plan {plan.id}: {kilometers} km / {days} d -> #{stage.stage_index}")
    return stage


def update_stage(db: Session, stage_id: UUID, data: MaintenanceStageUpdate, user_id: UUID) -> MaintenanceStage:
    stage = get_owned_stage(db, stage_id, user_id)
    fields = data.model_dump(exclude_unset=True)

    old_plan_id = stage.maintenance_plan_id
    plan_id = fields.get("maintenance_plan_id") or old_plan_id
    if plan_id != old_plan_id:
        get_owned_plan(db, plan_id, user_id)
    if fields.get("maintenance_type_id") is not None:
        get_owned_type(db, fields["maintenance_type_id"], user_id)

    kilometers = fields.get("kilometers")
    days = fields.get("days")
    kilometers = stage.kilometers if kilometers is None else kilometers
    days = stage.days if days is None else days
    _check_values(kilometers, days)
    kilometers = stage_ordering.round_value(kilometers)
    days = stage_ordering.round_value(days)

    siblings = [StageSnapshot.of(s) for s in repo.stages_of_plan(db, plan_id)]
    _check_duplicates(siblings, kilometers, days, exclude_id=stage.id)

    with transaction(db):
        stage.maintenance_plan_id = plan_id
        if fields.get("maintenance_type_id") is not None:
            stage.maintenance_type_id = fields["maintenance_type_id"]
        stage.kilometers = kilometers
        stage.days = days
        if plan_id != old_plan_id:
            stage.stage_index = len(siblings) + 1
        db.flush()
        _rerank(db, plan_id)
        if plan_id != old_plan_id:
            _rerank(db, old_plan_id)
    db.refresh(stage)
    return stage


def delete_stage(db: Session, stage_id: UUID, user_id: UUID) -> Dict[str, Any]:
    stage = get_owned_stage(db, stage_id, user_id)
    plan_id = stage.maintenance_plan_id
    with transaction(db):
        repo.delete_stage(db, stage)
        _rerank(db, plan_id)
    logger.info(f"Stage {stage_id} deleted from plan {plan_id}")
    return {"id": str(stage_id)}


def reorder_stages(db: Session, new_order: List[UUID], user_id: UUID) -> Dict[str, int]:
    """Assign stage_index following the caller's order, overriding the derived rank."""
    if len(set(new_order)) != len(new_order):
        raise MaintrackError(ErrorCode.VALIDATION_ERROR, "newOrder contains duplicate ids")

    stages = {s.id: s for s in repo.get_stages_by_ids(db, new_order)}
    missing = [str(stage_id) for stage_id in new_order if stage_id not in stages]
    if missing:
        raise MaintrackError(
            ErrorCode.MAINTENANCE_STAGE_NOT_FOUND,
            "Some stages were not found",
            {"missing": missing},
        )
    for stage in stages.values():
        ensure_owned(stage, user_id, ErrorCode.MAINTENANCE_STAGE_NOT_FOUND, "Maintenance stage")

    plan_ids = {stage.maintenance_plan_id for stage in stages.values()}
    if len(plan_ids) != 1:
        raise MaintrackError(
            ErrorCode.STAGES_NOT_IN_SAME_PLAN,
            "All stages must belong to the same maintenance plan",
            {"plans": sorted(str(p) for p in plan_ids)},
        )

    # Ranks stay 1..N only when the whole plan is renumbered
    plan_id = plan_ids.pop()
    plan_stage_ids = {stage.id for stage in repo.stages_of_plan(db, plan_id)}
    if set(new_order) != plan_stage_ids:
        raise MaintrackError(
            ErrorCode.VALIDATION_ERROR,
            "newOrder must list every stage of the plan exactly once",
            {"expected": len(plan_stage_ids), "received": len(new_order)},
        )

    with transaction(db):
        count = repo.reindex_stages(db, list(new_order))
    logger.info(f"Plan {plan_id}: {count} stages reordered manually")
    return {"reordered_count": count}
