from __future__ import annotations

from app.services.notifications import SmtpSender
from app.utils.config import settings


def deliver_email(to: str, subject: str, body: str) -> None:
    """rq job: deliver one queued message over SMTP.

    Failures propagate so rq records the job as failed.
    """
    SmtpSender.from_settings(settings).send(to, subject, body)
