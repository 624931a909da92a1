from typing import Optional, TypeVar
from uuid import UUID

from maintrack.core.errors import ErrorCode, MaintrackError

T = TypeVar("T")


def ensure_owned(row: Optional[T], user_id: UUID, not_found: ErrorCode, label: str) -> T:
    """
    Missing rows are reported as ``not_found`` (404); rows that exist but
    belong to someone else as ACCESS_DENIED (403).
    """
    if row is None:
        raise MaintrackError(not_found, f"{label} not found")
    if row.user_id != user_id:
        raise MaintrackError(
            ErrorCode.ACCESS_DENIED,
            f"You do not have access to this {label.lower()}",
        )
    return row
