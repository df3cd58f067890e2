"""
Safety Vitals
Email Service — transactional mail through the SMTP relay.

Every message is recorded in EmailLog (queued → sent / failed) before the
relay is contacted, so failed sends stay auditable.

Configuration (env vars):
    SMTP_HOST        relay host (default: smtp.sendlayer.net)
    SMTP_PORT        relay port (default: 587, STARTTLS)
    SMTP_USER        relay username   (required)
    SMTP_PASS        relay password   (required)
    SMTP_FROM_NAME   default display name (default: Safety Vitals)
    SMTP_FROM_EMAIL  default from address
"""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr, make_msgid

from email_validator import EmailNotValidError, validate_email
from flask import current_app

from safety_vitals.core.exceptions import ConfigurationError, UpstreamError, ValidationError
from safety_vitals.models import db
from safety_vitals.models.base import utcnow
from safety_vitals.models.email_log import EmailLog

logger = logging.getLogger(__name__)

MISSING_CREDENTIALS = "Server misconfiguration: Missing SMTP Credentials"


def _normalise_recipients(to) -> list[str]:
    recipients = to if isinstance(to, list) else [to]
    normalised = []
    for address in recipients:
        if not isinstance(address, str) or not address.strip():
            raise ValidationError("to is required", details={"to": "required"})
        try:
            normalised.append(validate_email(address.strip(), check_deliverability=False).normalized)
        except EmailNotValidError as exc:
            raise ValidationError(f"Invalid email: {exc}", details={"to": str(exc)}) from exc
    if not normalised:
        raise ValidationError("to is required", details={"to": "required"})
    return normalised


class EmailService:
    """
    SMTP sender with audit logging.

    Usage:
        log = EmailService.send(to="a@b.com", subject="Hi", html="<p>Hi</p>")
        log.message_id
    """

    @staticmethod
    def is_configured() -> bool:
        cfg = current_app.config
        return bool(cfg.get("SMTP_USER") and cfg.get("SMTP_PASS"))

    @classmethod
    def send(
        cls,
        *,
        to,
        subject: str,
        html: str | None = None,
        text: str | None = None,
        from_name: str | None = None,
        from_email: str | None = None,
    ) -> EmailLog:
        """
        Send one message and log it.

        Raises:
            ValidationError: missing recipient / subject / body, bad address.
            ConfigurationError: SMTP_USER or SMTP_PASS not set.
            UpstreamError: the relay refused or the connection failed.
        """
        recipients = _normalise_recipients(to)
        if not isinstance(subject, str) or not subject.strip():
            raise ValidationError("subject is required", details={"subject": "required"})
        if not html and not text:
            raise ValidationError("html or text is required", details={"html": "required"})

        if not cls.is_configured():
            logger.error("Missing SMTP Credentials")
            raise ConfigurationError(MISSING_CREDENTIALS)

        cfg = current_app.config
        sender = formataddr((
            from_name or cfg.get("SMTP_FROM_NAME") or "Safety Vitals",
            from_email or cfg.get("SMTP_FROM_EMAIL"),
        ))

        log = EmailLog(
            recipient_email=", ".join(recipients)[:255],
            sender=sender,
            subject=subject,
            status="queued",
        )
        db.session.add(log)
        db.session.flush()

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = sender
        msg["To"] = ", ".join(recipients)
        msg["Message-ID"] = make_msgid(domain=sender.rpartition("@")[2].rstrip(">") or None)
        if text:
            msg.set_content(text)
            if html:
                msg.add_alternative(html, subtype="html")
        else:
            msg.set_content(html, subtype="html")

        try:
            cls._send_smtp(msg)
        except (smtplib.SMTPException, OSError) as exc:
            log.status = "failed"
            log.error_message = str(exc)[:1000]
            db.session.commit()
            logger.error("Email failed: to=%s error=%s", log.recipient_email, exc)
            raise UpstreamError("Internal Server Error", details=str(exc)) from exc

        log.status = "sent"
        log.message_id = msg["Message-ID"]
        log.sent_at = utcnow()
        db.session.commit()
        logger.info("Message sent: %s", log.message_id)
        return log

    @staticmethod
    def _send_smtp(msg: EmailMessage) -> None:
        """Hand the message to the relay (STARTTLS unless port 465)."""
        cfg = current_app.config
        host = cfg.get("SMTP_HOST")
        port = int(cfg.get("SMTP_PORT") or 587)

        if port == 465:
            smtp_cls = smtplib.SMTP_SSL
        else:
            smtp_cls = smtplib.SMTP
        with smtp_cls(host, port, timeout=30) as smtp:
            if port != 465:
                smtp.starttls()
            smtp.login(cfg["SMTP_USER"], cfg["SMTP_PASS"])
            smtp.send_message(msg)
