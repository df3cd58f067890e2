"""
OrgScopedModel — Abstract base class for organization-scoped models.

Models that belong to a single customer organization inherit from
OrgScopedModel instead of db.Model directly, which adds the indexed org_id
foreign key.

Also home of the id/timestamp column defaults used across all tables.
"""

import uuid
from datetime import datetime, timezone

from safety_vitals.models import db


def new_uuid() -> str:
    """Return a fresh UUID4 string (36 chars) for primary keys."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def isoformat(value):
    """Serialise a date/datetime for JSON, passing None through."""
    return value.isoformat() if value else None


class OrgScopedModel(db.Model):
    """Abstract base for org-scoped tables."""
    __abstract__ = True

    org_id = db.Column(
        db.String(36),
        db.ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

