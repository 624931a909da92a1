import logging
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session

from maintrack.core.errors import ErrorCode, MaintrackError, validation_error
from maintrack.database import transaction
from maintrack.models import SparePart
from maintrack.repositories import catalog_repository as repo
from maintrack.schemas.catalog import SparePartCreate, SparePartUpdate
from maintrack.services.ownership import ensure_owned
from maintrack.services.pagination import paginate

logger = logging.getLogger(__name__)


def get_owned_spare_part(db: Session, spare_part_id: UUID, user_id: UUID) -> SparePart:
    return ensure_owned(
        repo.get_spare_part(db, spare_part_id), user_id,
        ErrorCode.SPARE_PART_NOT_FOUND, "Spare part",
    )


def _ensure_unique_code(db: Session, user_id: UUID, factory_code: str, exclude_id: Optional[UUID] = None) -> None:
    if repo.find_spare_part_by_factory_code(db, user_id, factory_code, exclude_id=exclude_id):
        raise MaintrackError(
            ErrorCode.FACTORY_CODE_EXISTS,
            f"A spare part with factory code '{factory_code}' already exists",
        )


def list_spare_parts(db: Session, user_id: UUID, limit: int, offset: int, search: Optional[str] = None,
                     min_price: Optional[float] = None, max_price: Optional[float] = None):
    if min_price is not None and max_price is not None and min_price > max_price:
        raise MaintrackError(
            ErrorCode.INVALID_PRICE_RANGE,
            "min_price must be less than or equal to max_price",
            {"min_price": min_price, "max_price": max_price},
        )

    query = repo.spare_parts_for_user(db, user_id)
    if search:
        term = f"%{search.strip()}%"
        query = query.filter(or_(
            SparePart.name.ilike(term),
            SparePart.factory_code.ilike(term),
            SparePart.description.ilike(term),
        ))
    if min_price is not None:
        query = query.filter(SparePart.price >= min_price)
    if max_price is not None:
        query = query.filter(SparePart.price <= max_price)
    return paginate(query.order_by(SparePart.name), limit, offset)


def create_spare_part(db: Session, data: SparePartCreate, user_id: UUID) -> SparePart:
    fields = data.model_dump()
    fields["factory_code"] = fields["factory_code"].strip()
    fields["name"] = fields["name"].strip()
    if not fields["factory_code"] or not fields["name"]:
        raise validation_error("factory_code and name are required")
    _ensure_unique_code(db, user_id, fields["factory_code"])

    with transaction(db):
        part = repo.add(db, SparePart(**fields, user_id=user_id))
    db.refresh(part)
    logger.info(f"Spare part created: {part.factory_code} ({part.id})")
    return part


def update_spare_part(db: Session, spare_part_id: UUID, data: SparePartUpdate, user_id: UUID) -> SparePart:
    part = get_owned_spare_part(db, spare_part_id, user_id)
    fields = data.model_dump(exclude_unset=True)

    for key in ("factory_code", "name", "price"):
        if key in fields and fields[key] is None:
            raise validation_error(f"{key} cannot be null")
    if "factory_code" in fields:
        fields["factory_code"] = fields["factory_code"].strip()
        _ensure_unique_code(db, user_id, fields["factory_code"], exclude_id=part.id)

    with transaction(db):
        for field, value in fields.items():
            setattr(part, field, value)
        db.flush()
    db.refresh(part)
    return part


def delete_spare_part(db: Session, spare_part_id: UUID, user_id: UUID) -> Dict[str, Any]:
    part = get_owned_spare_part(db, spare_part_id, user_id)
    count = repo.count_spare_part_usage(db, part.id)
    if count:
        raise MaintrackError(
            ErrorCode.SPARE_PART_IN_USE,
            "Cannot delete a spare part used by maintenance records",
            {"usage_count": count},
        )
    with transaction(db):
        repo.delete(db, part)
    logger.info(f"Spare part deleted: {spare_part_id}")
    return {"id": str(spare_part_id)}
