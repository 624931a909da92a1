"""
Stage reorder engine.

A plan's stages are ranked by (kilometers, days) ascending; ``stage_index``
stores the 1-based position in that order. These functions are pure: they
work on plain snapshots so the service can decide what to persist.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional
from uuid import UUID

KILOMETERS = "kilometers"
DAYS = "days"


@dataclass(frozen=True)
class StageSnapshot:
    id: UUID
    kilometers: float
    days: float
    stage_index: Optional[int] = None

    @classmethod
    def of(cls, stage) -> "StageSnapshot":
        return cls(
            id=stage.id,
            kilometers=float(stage.kilometers),
            days=float(stage.days),
            stage_index=stage.stage_index,
        )


def round_value(value: float) -> float:
    return round(float(value), 2)


def merge(stages: Iterable[StageSnapshot], candidate: StageSnapshot) -> List[StageSnapshot]:
    """Replace the stage with the candidate's id, or append the candidate."""
    merged = []
    replaced = False
    for stage in stages:
        if stage.id == candidate.id:
            merged.append(candidate)
            replaced = True
        else:
            merged.append(stage)
    if not replaced:
        merged.append(candidate)
    return merged


def sort_stages(stages: Iterable[StageSnapshot]) -> List[StageSnapshot]:
    # sorted() is stable, so ties keep their incoming order
    return sorted(stages, key=lambda s: (s.kilometers, s.days))


def order_changed(sorted_stages: List[StageSnapshot]) -> bool:
    return any(stage.stage_index != position + 1 for position, stage in enumerate(sorted_stages))


def plan_reindex(stages: Iterable[StageSnapshot], candidate: Optional[StageSnapshot] = None) -> List[UUID]:
    """
    Ids in their new order when the stored ranks disagree with the
    (kilometers, days) order, otherwise an empty list.
    """
    merged = merge(stages, candidate) if candidate is not None else list(stages)
    ordered = sort_stages(merged)
    if not order_changed(ordered):
        return []
    return [stage.id for stage in ordered]


def find_duplicate_axis(
    stages: Iterable[StageSnapshot],
    kilometers: float,
    days: float,
    exclude_id: Optional[UUID] = None,
) -> Optional[str]:
    """Name of the axis on which another stage already uses the value, if any."""
    kilometers = round_value(kilometers)
    days = round_value(days)
    others = [s for s in stages if s.id != exclude_id]
    if any(round_value(s.kilometers) == kilometers for s in others):
        return KILOMETERS
    if any(round_value(s.days) == days for s in others):
        return DAYS
    return None
