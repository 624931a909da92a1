import logging
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from maintrack.core.errors import ErrorCode, MaintrackError, validation_error
from maintrack.database import transaction
from maintrack.models import MaintenancePlan, MaintenanceStage
from maintrack.repositories import maintenance_plan_repository as repo
from maintrack.repositories import equipment_repository
from maintrack.schemas.maintenance_plan import MaintenancePlanCreate, MaintenancePlanUpdate
from maintrack.services.ownership import ensure_owned
from maintrack.services.pagination import paginate

logger = logging.getLogger(__name__)

NAME_MIN_LENGTH = 3
NAME_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000


def get_owned_plan(db: Session, plan_id: UUID, user_id: UUID) -> MaintenancePlan:
    return ensure_owned(
        repo.get_plan(db, plan_id), user_id,
        ErrorCode.MAINTENANCE_PLAN_NOT_FOUND, "Maintenance plan",
    )


def _clean_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if len(name) < NAME_MIN_LENGTH or len(name) > NAME_MAX_LENGTH:
        raise validation_error(
            f"name must be between {NAME_MIN_LENGTH} and {NAME_MAX_LENGTH} characters",
            {"name": name},
        )
    return name


def _clean_description(description: Optional[str]) -> Optional[str]:
    if description is None:
        return None
    description = description.strip()
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise validation_error(f"description must be at most {DESCRIPTION_MAX_LENGTH} characters")
    return description or None


def _ensure_unique_name(db: Session, user_id: UUID, name: str, exclude_id: Optional[UUID] = None) -> None:
    if repo.find_plan_by_name(db, user_id, name, exclude_id=exclude_id):
        raise MaintrackError(
            ErrorCode.MAINTENANCE_PLAN_NAME_EXISTS,
            f"A maintenance plan named '{name}' already exists",
        )


def with_stages(plan: MaintenancePlan) -> Dict[str, Any]:
    stages = list(plan.stages)
    return {
        "id": plan.id,
        "name": plan.name,
        "description": plan.description,
        "user_id": plan.user_id,
        "created_at": plan.created_at,
        "updated_at": plan.updated_at,
        "stage_count": len(stages),
        "maintenance_type_count": len({s.maintenance_type_id for s in stages}),
        "stages": stages,
    }


def list_plans(db: Session, user_id: UUID, limit: int, offset: int, include_empty: bool = True):
    query = repo.plans_for_user(db, user_id).options(
        selectinload(MaintenancePlan.stages).selectinload(MaintenanceStage.maintenance_type)
    )
    if not include_empty:
        query = query.filter(MaintenancePlan.stages.any())
    return paginate(query.order_by(MaintenancePlan.name), limit, offset, transform=with_stages)


def get_plan(db: Session, plan_id: UUID, user_id: UUID) -> Dict[str, Any]:
    return with_stages(get_owned_plan(db, plan_id, user_id))


def create_plan(db: Session, data: MaintenancePlanCreate, user_id: UUID) -> MaintenancePlan:
    name = _clean_name(data.name)
    description = _clean_description(data.description)
    _ensure_unique_name(db, user_id, name)

    with transaction(db):
        plan = repo.add_plan(db, MaintenancePlan(name=name, description=description, user_id=user_id))
    db.refresh(plan)
    logger.info(f"Maintenance plan created: {plan.name} ({plan.id})")
    return plan


def update_plan(db: Session, plan_id: UUID, data: MaintenancePlanUpdate, user_id: UUID) -> MaintenancePlan:
    plan = get_owned_plan(db, plan_id, user_id)
    fields = data.model_dump(exclude_unset=True)

    if "name" in fields:
        fields["name"] = _clean_name(fields["name"])
        _ensure_unique_name(db, user_id, fields["name"], exclude_id=plan.id)
    if "description" in fields:
        fields["description"] = _clean_description(fields["description"])

    with transaction(db):
        for field, value in fields.items():
            setattr(plan, field, value)
        db.flush()
    db.refresh(plan)
    return plan


def can_delete(db: Session, plan_id: UUID, user_id: UUID) -> Dict[str, Any]:
    plan = get_owned_plan(db, plan_id, user_id)
    stage_count = repo.count_stages(db, plan.id)
    equipment_count = equipment_repository.count_by_plan(db, plan.id)

    reason = None
    if stage_count:
        reason = f"The plan still has {stage_count} stage(s)"
    elif equipment_count:
        reason = f"The plan is assigned to {equipment_count} equipment"

    return {
        "id": plan.id,
        "name": plan.name,
        "can_delete": reason is None,
        "stage_count": stage_count,
        "equipment_count": equipment_count,
        "blocking_reason": reason,
    }


def delete_plan(db: Session, plan_id: UUID, user_id: UUID) -> Dict[str, Any]:
    check = can_delete(db, plan_id, user_id)
    if not check["can_delete"]:
        raise MaintrackError(
            ErrorCode.MAINTENANCE_PLAN_HAS_STAGES if check["stage_count"] else ErrorCode.CONFLICT,
            f"Cannot delete maintenance plan: {check['blocking_reason']}",
            {"stage_count": check["stage_count"], "equipment_count": check["equipment_count"]},
        )

    plan = repo.get_plan(db, plan_id)
    with transaction(db):
        repo.delete_plan(db, plan)
    logger.info(f"Maintenance plan deleted: {check['name']} ({plan_id})")
    return {"id": str(plan_id)}
