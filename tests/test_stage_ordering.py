import uuid

from maintrack.services.stage_ordering import (
    DAYS,
    KILOMETERS,
    StageSnapshot,
    find_duplicate_axis,
    merge,
    plan_reindex,
    sort_stages,
)


def snap(km, days, index=None, stage_id=None):
    return StageSnapshot(id=stage_id or uuid.uuid4(), kilometers=km, days=days, stage_index=index)


def test_merge_appends_new_candidate():
    a = snap(5000, 90, 1)
    b = snap(1000, 30)
    assert merge([a], b) == [a, b]


def test_merge_replaces_by_id():
    a = snap(5000, 90, 1)
    edited = snap(7000, 120, 1, stage_id=a.id)
    assert merge([a], edited) == [edited]


def test_sort_is_by_kilometers_then_days():
    a = snap(5000, 90)
    b = snap(5000, 30)
    c = snap(1000, 180)
    assert sort_stages([a, b, c]) == [c, b, a]


def test_sort_is_stable_for_ties():
    a = snap(1000, 30)
    b = snap(1000, 30)
    assert sort_stages([a, b]) == [a, b]
    assert sort_stages([b, a]) == [b, a]


def test_no_reindex_when_order_matches():
    stages = [snap(1000, 30, 1), snap(5000, 90, 2)]
    assert plan_reindex(stages) == []


def test_oil_service_example():
    a = snap(5000, 90, 1)
    b = snap(1000, 30)
    assert plan_reindex([a], b) == [b.id, a.id]


def test_reindex_repacks_gaps():
    a = snap(1000, 30, 1)
    c = snap(9000, 365, 3)
    assert plan_reindex([a, c]) == [a.id, c.id]


def test_duplicate_kilometers_detected():
    stages = [snap(5000, 90, 1)]
    assert find_duplicate_axis(stages, 5000, 120) == KILOMETERS


def test_duplicate_days_detected():
    stages = [snap(5000, 90, 1)]
    assert find_duplicate_axis(stages, 6000, 90) == DAYS


def test_duplicate_check_rounds_to_two_decimals():
    stages = [snap(5000.001, 90, 1)]
    assert find_duplicate_axis(stages, 5000.004, 120) == KILOMETERS


def test_duplicate_check_excludes_edited_stage():
    a = snap(5000, 90, 1)
    assert find_duplicate_axis([a], 5000, 90, exclude_id=a.id) is None
