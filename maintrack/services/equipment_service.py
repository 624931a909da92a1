"""
Equipment CRUD plus the aggregated listings used by the dashboard:
equipment with their records, equipment with pending work, and equipment
with their maintenance plan.
"""
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session, Query, selectinload

from maintrack.core.errors import ErrorCode, MaintrackError, validation_error
from maintrack.database import transaction
from maintrack.models import (
    Equipment,
    MaintenanceRecord,
    MaintenanceActivity,
    MaintenancePlan,
    MaintenanceStage,
    MileageRecord,
    ActivityStatus,
    ActivityPriority,
)
from maintrack.repositories import equipment_repository as repo
from maintrack.repositories import maintenance_record_repository
from maintrack.schemas.equipment import EquipmentCreate, EquipmentUpdate, EquipmentWithRecordsQuery
from maintrack.services.maintenance_plan_service import get_owned_plan
from maintrack.services.ownership import ensure_owned
from maintrack.services.pagination import paginate, validate_window

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "type": Equipment.type,
    "license_plate": Equipment.license_plate,
    "code": Equipment.code,
    "created_at": Equipment.created_at,
}

PENDING_STATUSES = [ActivityStatus.PENDING, ActivityStatus.IN_PROGRESS]


def get_owned_equipment(db: Session, equipment_id: UUID, user_id: UUID) -> Equipment:
    return ensure_owned(
        repo.get_by_id(db, equipment_id), user_id,
        ErrorCode.EQUIPMENT_NOT_FOUND, "Equipment",
    )


def _ensure_unique(db: Session, user_id: UUID, license_plate: Optional[str], code: Optional[str],
                   exclude_id: Optional[UUID] = None) -> None:
    if license_plate is not None and repo.find_by_license_plate(db, user_id, license_plate, exclude_id):
        raise MaintrackError(
            ErrorCode.LICENSE_PLATE_EXISTS,
            f"Equipment with license plate '{license_plate}' already exists",
        )
    if code is not None and repo.find_by_code(db, user_id, code, exclude_id):
        raise MaintrackError(
            ErrorCode.EQUIPMENT_CODE_EXISTS,
            f"Equipment with code '{code}' already exists",
        )


def _strip_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    for key in ("type", "license_plate", "code"):
        if fields.get(key) is not None:
            fields[key] = fields[key].strip()
            if not fields[key]:
                raise validation_error(f"{key} is required")
    return fields


# ==================== CRUD ====================

def list_equipment(db: Session, user_id: UUID, limit: int, offset: int, search: Optional[str] = None):
    query = repo.query_for_user(db, user_id)
    if search:
        term = f"%{search.strip()}%"
        query = query.filter(or_(
            Equipment.type.ilike(term),
            Equipment.license_plate.ilike(term),
            Equipment.code.ilike(term),
        ))
    return paginate(query.order_by(Equipment.created_at.desc()), limit, offset)


def create_equipment(db: Session, data: EquipmentCreate, user_id: UUID) -> Equipment:
    fields = _strip_fields(data.model_dump())
    if fields.get("maintenance_plan_id") is not None:
        get_owned_plan(db, fields["maintenance_plan_id"], user_id)
    _ensure_unique(db, user_id, fields["license_plate"], fields["code"])

    with transaction(db):
        equipment = repo.add(db, Equipment(**fields, user_id=user_id))
    db.refresh(equipment)
    logger.info(f"Equipment created: {equipment.code} / {equipment.license_plate} ({equipment.id})")
    return equipment


def update_equipment(db: Session, equipment_id: UUID, data: EquipmentUpdate, user_id: UUID) -> Equipment:
    equipment = get_owned_equipment(db, equipment_id, user_id)
    fields = _strip_fields(data.model_dump(exclude_unset=True))

    for key in ("type", "license_plate", "code"):
        if key in fields and fields[key] is None:
            raise validation_error(f"{key} cannot be null")
    if fields.get("maintenance_plan_id") is not None:
        get_owned_plan(db, fields["maintenance_plan_id"], user_id)
    _ensure_unique(db, user_id, fields.get("license_plate"), fields.get("code"), exclude_id=equipment.id)

    with transaction(db):
        for field, value in fields.items():
            setattr(equipment, field, value)
        db.flush()
    db.refresh(equipment)
    return equipment


def has_records(db: Session, equipment_id: UUID, user_id: UUID) -> Dict[str, Any]:
    equipment = get_owned_equipment(db, equipment_id, user_id)
    total = repo.count_maintenance_records(db, equipment.id) + repo.count_mileage_records(db, equipment.id)
    return {"equipment_id": equipment.id, "has_records": total > 0}


def delete_equipment(db: Session, equipment_id: UUID, user_id: UUID) -> Dict[str, Any]:
    equipment = get_owned_equipment(db, equipment_id, user_id)
    maintenance = repo.count_maintenance_records(db, equipment.id)
    mileage = repo.count_mileage_records(db, equipment.id)
    if maintenance or mileage:
        raise MaintrackError(
            ErrorCode.EQUIPMENT_HAS_RECORDS,
            "Cannot delete equipment that has maintenance or mileage records",
            {"maintenance_records": maintenance, "mileage_records": mileage},
        )

    with transaction(db):
        repo.delete(db, equipment)
    logger.info(f"Equipment deleted: {equipment_id}")
    return {"id": str(equipment_id)}


# ==================== Aggregated listings ====================

def _parse_enum_values(values: Optional[List[str]], enum_cls, label: str):
    if not values:
        return []
    parsed = []
    for value in values:
        try:
            parsed.append(enum_cls(value))
        except ValueError:
            raise validation_error(
                f"Invalid {label} '{value}'",
                {"allowed": [member.value for member in enum_cls]},
            )
    return parsed


def _activity_condition(statuses, priorities):
    """An activity matches when it satisfies every axis that was given."""
    conditions = []
    if statuses:
        conditions.append(MaintenanceActivity.status.in_(statuses))
    if priorities:
        conditions.append(MaintenanceActivity.priority.in_(priorities))
    return conditions


def _apply_sort(query: Query, sort_by) -> Query:
    if sort_by is None:
        return query.order_by(Equipment.created_at.desc())
    column = SORTABLE_FIELDS.get(sort_by.by)
    if column is None:
        raise MaintrackError(
            ErrorCode.INVALID_SORT_FIELD,
            f"Cannot sort equipment by '{sort_by.by}'",
            {"allowed": sorted(SORTABLE_FIELDS)},
        )
    return query.order_by(column.desc() if sort_by.order == "desc" else column.asc(), Equipment.id)


def equipment_with_records(db: Session, user_id: UUID, params: EquipmentWithRecordsQuery) -> Dict[str, Any]:
    validate_window(params.maintenanceLimit, params.maintenanceOffset)
    validate_window(params.mileageLimit, params.mileageOffset)
    statuses = _parse_enum_values(params.byStatus, ActivityStatus, "status")
    priorities = _parse_enum_values(params.byPriority, ActivityPriority, "priority")
    activity_filter = _activity_condition(statuses, priorities)

    query = repo.query_for_user(db, user_id)
    if activity_filter:
        query = query.filter(
            Equipment.maintenance_records.any(MaintenanceRecord.activities.any(and_(*activity_filter)))
        )
    query = _apply_sort(query, params.sortBy)

    def expand(equipment: Equipment) -> Dict[str, Any]:
        records = maintenance_record_repository.query_for_user(db, user_id).filter(
            MaintenanceRecord.equipment_id == equipment.id
        )
        if activity_filter:
            records = records.filter(MaintenanceRecord.activities.any(and_(*activity_filter)))
        records = records.order_by(MaintenanceRecord.start_datetime.desc())

        mileage = db.query(MileageRecord).filter(
            MileageRecord.equipment_id == equipment.id
        ).order_by(MileageRecord.record_date.desc())

        return {
            **_equipment_fields(equipment),
            "maintenance_records": paginate(records, params.maintenanceLimit, params.maintenanceOffset),
            "mileage_records": paginate(mileage, params.mileageLimit, params.mileageOffset),
        }

    return paginate(query, params.limit, params.offset, transform=expand)


def equipment_with_pending_records(db: Session, user_id: UUID, limit: int, offset: int,
                                   maintenance_limit: int = 10, mileage_limit: int = 30) -> Dict[str, Any]:
    params = EquipmentWithRecordsQuery(
        limit=limit,
        offset=offset,
        maintenanceLimit=maintenance_limit,
        mileageLimit=mileage_limit,
        byStatus=[status.value for status in PENDING_STATUSES],
    )
    return equipment_with_records(db, user_id, params)


def equipment_maintenance_plans(db: Session, user_id: UUID, limit: int, offset: int) -> Dict[str, Any]:
    query = repo.query_for_user(db, user_id).options(
        selectinload(Equipment.maintenance_plan)
        .selectinload(MaintenancePlan.stages)
        .selectinload(MaintenanceStage.maintenance_type)
    ).order_by(Equipment.code)

    def expand(equipment: Equipment) -> Dict[str, Any]:
        plan = equipment.maintenance_plan
        return {
            **_equipment_fields(equipment),
            "maintenance_plan": plan,
            "stages": list(plan.stages) if plan is not None else [],
        }

    return paginate(query, limit, offset, transform=expand)


def _equipment_fields(equipment: Equipment) -> Dict[str, Any]:
    return {
        "id": equipment.id,
        "type": equipment.type,
        "license_plate": equipment.license_plate,
        "code": equipment.code,
        "maintenance_plan_id": equipment.maintenance_plan_id,
        "user_id": equipment.user_id,
        "created_at": equipment.created_at,
        "updated_at": equipment.updated_at,
    }
