"""
Safety Vitals
Outbound email audit log.
"""

from safety_vitals.models import db
from safety_vitals.models.base import isoformat, utcnow


class EmailLog(db.Model):
    """
    Every email handed to the SMTP relay is recorded here, sent or not.
    """

    __tablename__ = "email_logs"

    id = db.Column(db.Integer, primary_key=True)
    recipient_email = db.Column(db.String(255), nullable=False, index=True)
    sender = db.Column(db.String(300), nullable=True, comment='Rendered From header: "Name" <addr>')
    subject = db.Column(db.String(500), nullable=False)
    status = db.Column(db.String(20), default="queued",
                       comment="queued, sent, failed")
    message_id = db.Column(db.String(255), nullable=True)
    error_message = db.Column(db.Text, nullable=True)

    sent_at = db.Column(db.DateTime(timezone=True), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "recipient_email": self.recipient_email,
            "sender": self.sender,
            "subject": self.subject,
            "status": self.status,
            "message_id": self.message_id,
            "error_message": self.error_message,
            "sent_at": isoformat(self.sent_at),
            "created_at": isoformat(self.created_at),
        }

    def __repr__(self):
        return f"<EmailLog {self.id}: {self.subject[:40]} → {self.recipient_email}>"
