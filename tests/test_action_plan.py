"""Unit tests for safety_vitals.services.action_plan."""

from datetime import datetime, timezone

from safety_vitals.services.action_plan import build_action_plan, priority_weight


def _action(id_, priority="medium", is_completed=False, updated_at=None):
    return {
        "id": id_,
        "priority": priority,
        "is_completed": is_completed,
        "updated_at": updated_at,
    }


def test_active_sorted_by_priority_with_stable_ties():
    actions = [
        _action("a", "low"),
        _action("b", "high"),
        _action("c", "medium"),
        _action("d", "high"),
    ]
    plan = build_action_plan(actions)
    assert [a["id"] for a in plan.active] == ["b", "d", "c", "a"]
    assert plan.completed == []


def test_completed_sorted_most_recent_first():
    actions = [
        _action("old", is_completed=True, updated_at="2024-01-01T10:00:00+00:00"),
        _action("new", is_completed=True, updated_at="2024-03-01T10:00:00Z"),
        _action("mid", is_completed=True, updated_at=datetime(2024, 2, 1)),
    ]
    plan = build_action_plan(actions)
    assert [a["id"] for a in plan.completed] == ["new", "mid", "old"]
    assert plan.active == []


def test_partition_and_counts():
    actions = [
        _action("open", "high"),
        _action("done", is_completed=True, updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc)),
    ]
    data = build_action_plan(actions).to_dict()
    assert data["active_count"] == 1
    assert data["completed_count"] == 1
    assert data["active"][0]["id"] == "open"
    assert data["completed"][0]["id"] == "done"


def test_input_not_mutated():
    actions = [_action("a", "low"), _action("b", "high")]
    build_action_plan(actions)
    assert [a["id"] for a in actions] == ["a", "b"]


def test_unknown_priority_sorts_last():
    assert priority_weight({"priority": "urgent"}) == 0
    plan = build_action_plan([_action("x", "urgent"), _action("y", "low")])
    assert [a["id"] for a in plan.active] == ["y", "x"]
