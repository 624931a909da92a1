"""
Pagination helpers shared by every list endpoint.

limit > 0 pages the result and pages = ceil(total / limit).
limit == 0 disables paging: every row is returned and pages is 1.
"""
import math
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.orm import Query

from maintrack.core.config import settings
from maintrack.core.errors import validation_error


def validate_window(limit: int, offset: int) -> None:
    if limit < 0 or offset < 0:
        raise validation_error(
            "limit and offset must be non-negative",
            {"limit": limit, "offset": offset},
        )
    if limit > settings.MAX_PAGE_SIZE:
        raise validation_error(
            f"limit must not exceed {settings.MAX_PAGE_SIZE}",
            {"limit": limit},
        )


def page_count(total: int, limit: int) -> int:
    if limit == 0:
        return 1
    return math.ceil(total / limit)


def build_page(items: List[Any], total: int, limit: int, offset: int) -> Dict[str, Any]:
    return {
        "total": total,
        "limit": limit,
        "offset": offset,
        "pages": page_count(total, limit),
        "data": items,
    }


def paginate(
    query: Query,
    limit: int,
    offset: int,
    transform: Optional[Callable[[Any], Any]] = None,
) -> Dict[str, Any]:
    """Run ``query`` for one window and wrap the rows in a page envelope."""
    validate_window(limit, offset)
    total = query.order_by(None).count()
    if limit == 0:
        rows = query.offset(offset).all() if offset else query.all()
    else:
        rows = query.offset(offset).limit(limit).all()
    if transform is not None:
        rows = [transform(row) for row in rows]
    return build_page(rows, total, limit, offset)


def paginate_list(items: List[Any], limit: int, offset: int) -> Dict[str, Any]:
    """Same window semantics over an in-memory list."""
    validate_window(limit, offset)
    window = items[offset:] if limit == 0 else items[offset:offset + limit]
    return build_page(window, len(items), limit, offset)
