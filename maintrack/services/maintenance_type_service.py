"""
Maintenance-type tree bookkeeping.

Each node stores ``level`` (number of ancestors) and ``path`` (the "/"-joined
``type`` chain from the root). Both are kept in sync on create, rename and
re-parent, for the node and its entire subtree.
"""
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from maintrack.core.errors import ErrorCode, MaintrackError, validation_error
from maintrack.database import transaction
from maintrack.models import MaintenanceType
from maintrack.repositories import maintenance_type_repository as repo
from maintrack.schemas.maintenance_type import (
    MaintenanceTypeCreate,
    MaintenanceTypeUpdate,
    MaintenanceTypeNode,
    MaintenanceTypeResponse,
)
from maintrack.services.ownership import ensure_owned
from maintrack.services.pagination import paginate

logger = logging.getLogger(__name__)

PATH_SEPARATOR = "/"


def _clean_type(value: str) -> str:
    value = (value or "").strip()
    if not value:
        raise validation_error("type is required")
    if PATH_SEPARATOR in value:
        raise validation_error(f"type must not contain '{PATH_SEPARATOR}'")
    return value


def _placement(parent: Optional[MaintenanceType], type_name: str):
    if parent is None:
        return 0, type_name
    return parent.level + 1, f"{parent.path}{PATH_SEPARATOR}{type_name}"


def get_owned(db: Session, type_id: UUID, user_id: UUID) -> MaintenanceType:
    return ensure_owned(
        repo.get_by_id(db, type_id), user_id,
        ErrorCode.MAINTENANCE_TYPE_NOT_FOUND, "Maintenance type",
    )


def list_types(db: Session, user_id: UUID, limit: int, offset: int, parent_id: Optional[UUID] = None):
    query = repo.query_for_user(db, user_id)
    if parent_id is not None:
        query = query.filter(MaintenanceType.parent_id == parent_id)
    return paginate(query.order_by(MaintenanceType.path), limit, offset)


def list_children(db: Session, type_id: UUID, user_id: UUID) -> List[MaintenanceType]:
    get_owned(db, type_id, user_id)
    return repo.children_of(db, type_id)


def get_tree(db: Session, user_id: UUID) -> List[MaintenanceTypeNode]:
    """Whole forest of the user's types, built from one query."""
    nodes = repo.query_for_user(db, user_id).order_by(MaintenanceType.level, MaintenanceType.type).all()
    by_id: Dict[UUID, MaintenanceTypeNode] = {}
    roots: List[MaintenanceTypeNode] = []
    for node in nodes:
        summary = MaintenanceTypeResponse.model_validate(node)
        by_id[node.id] = MaintenanceTypeNode(**summary.model_dump(), children=[])
    for node in nodes:
        item = by_id[node.id]
        parent = by_id.get(node.parent_id) if node.parent_id else None
        if parent is None:
            roots.append(item)
        else:
            parent.children.append(item)
    return roots


def create_type(db: Session, data: MaintenanceTypeCreate, user_id: UUID) -> MaintenanceType:
    type_name = _clean_type(data.type)
    parent = None
    if data.parent_id is not None:
        parent = get_owned(db, data.parent_id, user_id)

    level, path = _placement(parent, type_name)
    with transaction(db):
        node = repo.add(db, MaintenanceType(
            type=type_name,
            parent_id=parent.id if parent else None,
            level=level,
            path=path,
            user_id=user_id,
        ))
    db.refresh(node)
    logger.info(f"Maintenance type created: {node.path} ({node.id})")
    return node


def _assert_no_cycle(db: Session, node: MaintenanceType, new_parent: MaintenanceType) -> None:
    """Walk up from the prospective parent; meeting the node means a cycle."""
    seen = set()
    current: Optional[MaintenanceType] = new_parent
    while current is not None:
        if current.id == node.id:
            raise MaintrackError(
                ErrorCode.MAINTENANCE_TYPE_CYCLE,
                "A maintenance type cannot be moved under itself or one of its descendants",
                {"id": str(node.id), "parent_id": str(new_parent.id)},
            )
        if current.id in seen:
            break
        seen.add(current.id)
        current = repo.get_by_id(db, current.parent_id) if current.parent_id else None


def _refresh_subtree(db: Session, node: MaintenanceType) -> int:
    """Recompute level/path below ``node``; returns the number of nodes touched."""
    touched = 0
    stack = [node]
    while stack:
        current = stack.pop()
        for child in repo.children_of(db, current.id):
            child.level, child.path = _placement(current, child.type)
            touched += 1
            stack.append(child)
    db.flush()
    return touched


def update_type(db: Session, type_id: UUID, data: MaintenanceTypeUpdate, user_id: UUID) -> MaintenanceType:
    node = get_owned(db, type_id, user_id)
    fields = data.model_dump(exclude_unset=True)

    type_name = _clean_type(fields["type"]) if fields.get("type") is not None else node.type

    parent = node.parent
    if "parent_id" in fields:
        if fields["parent_id"] is None:
            parent = None
        else:
            parent = get_owned(db, fields["parent_id"], user_id)
            _assert_no_cycle(db, node, parent)

    with transaction(db):
        node.type = type_name
        node.parent_id = parent.id if parent else None
        node.level, node.path = _placement(parent, type_name)
        db.flush()
        touched = _refresh_subtree(db, node)
    db.refresh(node)
    logger.info(f"Maintenance type updated: {node.path} ({node.id}), {touched} descendants re-pathed")
    return node


def delete_type(db: Session, type_id: UUID, user_id: UUID) -> Dict[str, Any]:
    node = get_owned(db, type_id, user_id)

    children = repo.count_children(db, node.id)
    if children:
        raise MaintrackError(
            ErrorCode.MAINTENANCE_TYPE_HAS_CHILDREN,
            "Cannot delete a maintenance type that has child types",
            {"children": children},
        )

    stages = repo.count_stage_references(db, node.id)
    records = repo.count_record_references(db, node.id)
    if stages or records:
        raise MaintrackError(
            ErrorCode.MAINTENANCE_TYPE_IN_USE,
            "Cannot delete a maintenance type used by stages or maintenance records",
            {"stages": stages, "maintenance_records": records},
        )

    path = node.path
    with transaction(db):
        node.activities = []
        repo.delete(db, node)
    logger.info(f"Maintenance type deleted: {path} ({type_id})")
    return {"id": str(type_id)}
