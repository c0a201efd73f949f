from __future__ import annotations

import logging

from app.services.notifications import NotificationSender
from app.services.notifications import templates


logger = logging.getLogger(__name__)


class AuthMailer:
    """Renders the auth emails and delivers them best-effort.

    No method raises: a failed delivery is logged and reported as ``False``.
    """

    def __init__(self, sender: NotificationSender, *, client_url: str,
                 verification_minutes: int = 60, reset_minutes: int = 60) -> None:
        self.sender = sender
        self.client_url = client_url.rstrip("/")
        self.verification_minutes = verification_minutes
        self.reset_minutes = reset_minutes

    def deliver(self, to: str, subject: str, body: str) -> bool:
        try:
            self.sender.send(to, subject, body)
        except Exception:
            logger.exception("Failed to send %r email to %s", subject, to)
            return False
        logger.info("Sent %r email to %s", subject, to)
        return True

    def reset_link(self, token: str) -> str:
        return f"{self.client_url}/reset-password/{token}"

    def send_verification_code(self, email: str, code: str) -> bool:
        body = templates.VERIFICATION_BODY.format(code=code, minutes=self.verification_minutes)
        return self.deliver(email, templates.VERIFICATION_SUBJECT, body)

    def send_welcome(self, email: str, name: str) -> bool:
        return self.deliver(email, templates.WELCOME_SUBJECT, templates.WELCOME_BODY.format(name=name))

    def send_password_reset(self, email: str, token: str) -> bool:
        body = templates.RESET_BODY.format(link=self.reset_link(token), minutes=self.reset_minutes)
        return self.deliver(email, templates.RESET_SUBJECT, body)

    def send_password_reset_success(self, email: str) -> bool:
        return self.deliver(email, templates.RESET_SUCCESS_SUBJECT, templates.RESET_SUCCESS_BODY)
