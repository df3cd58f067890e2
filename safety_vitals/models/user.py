"""
Safety Vitals
User models.

Models:
    - User: respondent / member profile (identity lives with the auth provider)
    - AdminUser: platform administrator allowed to use the cross-tenant routes
"""

from safety_vitals.models import db
from safety_vitals.models.base import isoformat, new_uuid, utcnow


# ── Admin capabilities ───────────────────────────────────────────────────────

ADMIN_CAPABILITIES = frozenset({
    "organizations.read",
    "organizations.write",
    "surveys.read",
    "dimensions.write",
    "responses.read",
    "users.read",
})


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    first_name = db.Column(db.String(100), default="")
    last_name = db.Column(db.String(100), default="")
    email = db.Column(db.String(200), nullable=True, index=True)
    role = db.Column(db.String(100), nullable=True, comment="Job role, used for role breakdowns")
    department = db.Column(db.String(100), nullable=True)
    site = db.Column(db.String(100), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "role": self.role,
            "department": self.department,
            "site": self.site,
        }


class AdminUser(db.Model):
    __tablename__ = "admin_users"

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)
    full_name = db.Column(db.String(200), default="")
    email = db.Column(db.String(200), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    capabilities = db.Column(
        db.JSON,
        default=lambda: sorted(ADMIN_CAPABILITIES),
        comment="Subset of ADMIN_CAPABILITIES granted to this admin",
    )
    is_active = db.Column(db.Boolean, default=True)
    last_login_at = db.Column(db.DateTime(timezone=True), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    def has_capability(self, capability: str) -> bool:
        return capability in (self.capabilities or [])

    def to_dict(self):
        return {
            "id": self.id,
            "full_name": self.full_name,
            "email": self.email,
            "capabilities": list(self.capabilities or []),
            "is_active": self.is_active,
            "last_login_at": isoformat(self.last_login_at),
            "created_at": isoformat(self.created_at),
        }

    def __repr__(self):
        return f"<AdminUser {self.email}>"
