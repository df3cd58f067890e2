"""
Action-plan view model.

Splits a survey's actions into what still needs doing and what is done:
  - active:    not completed, highest priority first (ties keep input order)
  - completed: completed, most recently updated first

Accepts Action rows or their ``to_dict()`` form; the input is never mutated.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from safety_vitals.models.action import PRIORITY_WEIGHTS

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _get(action, name):
    if isinstance(action, dict):
        return action.get(name)
    return getattr(action, name, None)


def priority_weight(action) -> int:
    return PRIORITY_WEIGHTS.get(_get(action, "priority"), 0)


def _updated_at(action) -> datetime:
    value = _get(action, "updated_at")
    if value is None:
        return _EPOCH
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


@dataclass
class ActionPlan:
    active: list = field(default_factory=list)
    completed: list = field(default_factory=list)

    def to_dict(self, serialize=None) -> dict:
        serialize = serialize or (lambda a: a if isinstance(a, dict) else a.to_dict())
        return {
            "active": [serialize(a) for a in self.active],
            "completed": [serialize(a) for a in self.completed],
            "active_count": len(self.active),
            "completed_count": len(self.completed),
        }


def build_action_plan(actions) -> ActionPlan:
    """Partition and order ``actions`` for display."""
    active = [a for a in actions if not _get(a, "is_completed")]
    completed = [a for a in actions if _get(a, "is_completed")]
    return ActionPlan(
        active=sorted(active, key=priority_weight, reverse=True),
        completed=sorted(completed, key=_updated_at, reverse=True),
    )
