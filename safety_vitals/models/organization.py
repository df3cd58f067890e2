"""
Safety Vitals
Organization (tenant) models.

Models:
    - Organization: a customer tenant; every survey, response and action belongs to one
    - Subscription: the organization's plan and billing status (one per org)
    - PlanLimit: the limits each plan tier grants
    - OrgLimitOverride: per-org overrides of the plan limits (one per org)
    - Membership: user ↔ organization link with an application role

Architecture chain: Organization → Subscription / OrgLimitOverride / Membership / Survey
"""

from safety_vitals.models import db
from safety_vitals.models.base import isoformat, new_uuid, utcnow


# ── Constants ────────────────────────────────────────────────────────────────

PLAN_TIERS = {"demo", "paid"}
SUBSCRIPTION_STATUSES = {"active", "trialing", "canceled", "past_due"}
MEMBERSHIP_ROLES = {"admin", "member", "demo"}

# Columns an admin may override on OrgLimitOverride
LIMIT_OVERRIDE_FIELDS = (
    "max_surveys",
    "max_questions_per_survey",
    "max_responses_per_survey",
    "allow_create_survey",
    "allow_collect_responses",
    "allow_exports",
    "allow_action_plans",
)

# Used when neither an override nor the plan's plan_limits row sets a value
LIMIT_DEFAULTS = {
    "max_surveys": 10,
    "max_questions_per_survey": 50,
    "max_responses_per_survey": 100,
    "allow_create_survey": True,
    "allow_collect_responses": True,
    "allow_exports": False,
    "allow_action_plans": False,
}


class Organization(db.Model):
    __tablename__ = "organizations"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    name = db.Column(db.String(200), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    subscription = db.relationship(
        "Subscription", uselist=False, back_populates="organization",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    limit_override = db.relationship(
        "OrgLimitOverride", uselist=False, back_populates="organization",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "created_at": isoformat(self.created_at),
        }

    def __repr__(self):
        return f"<Organization {self.name}>"


class Subscription(db.Model):
    __tablename__ = "subscriptions"

    id = db.Column(db.Integer, primary_key=True)
    org_id = db.Column(
        db.String(36),
        db.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    plan = db.Column(db.String(20), default="demo", nullable=False)
    status = db.Column(db.String(20), default="active", nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    organization = db.relationship("Organization", back_populates="subscription")

    def to_dict(self):
        return {
            "org_id": self.org_id,
            "plan": self.plan,
            "status": self.status,
            "updated_at": isoformat(self.updated_at),
        }


class PlanLimit(db.Model):
    """Limits that come with a plan tier. NULL falls back to LIMIT_DEFAULTS."""

    __tablename__ = "plan_limits"

    plan = db.Column(db.String(20), primary_key=True)
    max_surveys = db.Column(db.Integer, nullable=True)
    max_questions_per_survey = db.Column(db.Integer, nullable=True)
    max_responses_per_survey = db.Column(db.Integer, nullable=True)
    allow_create_survey = db.Column(db.Boolean, nullable=True)
    allow_collect_responses = db.Column(db.Boolean, nullable=True)
    allow_exports = db.Column(db.Boolean, nullable=True)
    allow_action_plans = db.Column(db.Boolean, nullable=True)

    def to_dict(self):
        data = {"plan": self.plan}
        for field in LIMIT_OVERRIDE_FIELDS:
            data[field] = getattr(self, field)
        return data


class OrgLimitOverride(db.Model):
    """Admin-set exceptions to the plan limits. NULL means "use the plan default"."""

    __tablename__ = "org_limit_overrides"

    id = db.Column(db.Integer, primary_key=True)
    org_id = db.Column(
        db.String(36),
        db.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    max_surveys = db.Column(db.Integer, nullable=True)
    max_questions_per_survey = db.Column(db.Integer, nullable=True)
    max_responses_per_survey = db.Column(db.Integer, nullable=True)
    allow_create_survey = db.Column(db.Boolean, nullable=True)
    allow_collect_responses = db.Column(db.Boolean, nullable=True)
    allow_exports = db.Column(db.Boolean, nullable=True)
    allow_action_plans = db.Column(db.Boolean, nullable=True)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    organization = db.relationship("Organization", back_populates="limit_override")

    def to_dict(self):
        data = {"org_id": self.org_id, "updated_at": isoformat(self.updated_at)}
        for field in LIMIT_OVERRIDE_FIELDS:
            data[field] = getattr(self, field)
        return data


class Membership(db.Model):
    __tablename__ = "memberships"

    id = db.Column(db.Integer, primary_key=True)
    org_id = db.Column(
        db.String(36),
        db.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = db.Column(db.String(36), nullable=False, index=True)
    role = db.Column(db.String(20), default="member", nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        db.UniqueConstraint("org_id", "user_id", name="uq_membership_org_user"),
    )

    def to_dict(self):
        return {
            "org_id": self.org_id,
            "user_id": self.user_id,
            "role": self.role,
        }
