"""
Safety Vitals
Remediation action models.

Models:
    - Action: a remediation task for one survey dimension in one tier
    - ActionComment: value object stored inside Action.comments (most-recent-first)

Architecture chain: Survey → Action → [ActionComment, ...] / [evidence URL, ...]
"""

from dataclasses import asdict, dataclass, field

from safety_vitals.models import db
from safety_vitals.models.base import OrgScopedModel, isoformat, new_uuid, utcnow


# ── Constants ────────────────────────────────────────────────────────────────

ACTION_TIERS = {"critical", "at_risk"}
PRIORITY_LEVELS = {"low", "medium", "high"}
WORKFLOW_STAGES = {"todo", "in_progress", "review", "done"}

PRIORITY_WEIGHTS = {"high": 3, "medium": 2, "low": 1}


@dataclass
class ActionComment:
    """A single entry of an action's comment thread. Never edited once added."""

    user_id: str
    user_name: str
    content: str
    id: str = field(default_factory=new_uuid)
    created_at: str = field(default_factory=lambda: utcnow().isoformat())

    @classmethod
    def from_dict(cls, data: dict) -> "ActionComment":
        kwargs = {
            "user_id": str(data.get("user_id") or ""),
            "user_name": str(data.get("user_name") or ""),
            "content": str(data.get("content") or ""),
        }
        if data.get("id"):
            kwargs["id"] = str(data["id"])
        if data.get("created_at"):
            kwargs["created_at"] = str(data["created_at"])
        return cls(**kwargs)

    def to_dict(self) -> dict:
        return asdict(self)


class Action(OrgScopedModel):
    """
    A remediation task created from a critical or at-risk survey dimension.

    ``is_completed`` mirrors ``workflow_stage == "done"``; the action service
    keeps the two in step on every update.
    """

    __tablename__ = "actions"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    survey_id = db.Column(
        db.String(36),
        db.ForeignKey("surveys.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    dimension = db.Column(db.String(200), nullable=False)
    tier = db.Column(db.String(20), nullable=False, comment="critical / at_risk")
    title = db.Column(db.String(300), nullable=False)
    description = db.Column(db.Text, nullable=True)
    priority = db.Column(db.String(10), default="medium", nullable=False)
    assigned_to = db.Column(db.String(200), nullable=True)
    target_date = db.Column(db.Date, nullable=True)
    is_completed = db.Column(db.Boolean, default=False, nullable=False)
    workflow_stage = db.Column(db.String(20), nullable=True, comment="todo/in_progress/review/done")
    evidence_urls = db.Column(db.JSON, default=list)
    comments = db.Column(db.JSON, default=list, comment="Serialised ActionComment list, newest first")
    created_by = db.Column(db.String(36), nullable=True)

    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        db.Index("ix_actions_survey_dimension_tier", "survey_id", "dimension", "tier"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "survey_id": self.survey_id,
            "org_id": self.org_id,
            "dimension": self.dimension,
            "tier": self.tier,
            "title": self.title,
            "description": self.description,
            "priority": self.priority,
            "assigned_to": self.assigned_to,
            "target_date": isoformat(self.target_date),
            "is_completed": bool(self.is_completed),
            "workflow_stage": self.workflow_stage,
            "evidence_urls": list(self.evidence_urls or []),
            "comments": list(self.comments or []),
            "created_by": self.created_by,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
        }

    def __repr__(self):
        return f"<Action {self.tier}:{self.dimension} {self.title[:40]}>"
