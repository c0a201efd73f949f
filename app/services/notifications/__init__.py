from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from typing import Protocol

from rq import Queue

from app.utils.base import NotificationBackend
from app.utils.config import Settings


logger = logging.getLogger(__name__)


class NotificationError(Exception):
    """Raised by a sender when a message could not be handed off."""


class NotificationSender(Protocol):
    def send(self, to: str, subject: str, body: str) -> None:
        ...


class ConsoleSender:
    """Writes messages to the log instead of delivering them. Local development only."""

    def send(self, to: str, subject: str, body: str) -> None:
        logger.info("Email to %s | %s\n%s", to, subject, body)


class SmtpSender:
    def __init__(self, host: str, port: int, *, username: str | None = None, password: str | None = None,
                 sender: str, sender_name: str | None = None, use_tls: bool = True, timeout: float = 10.0) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.sender_name = sender_name
        self.use_tls = use_tls
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpSender":
        return cls(
            settings.smtp_host,
            settings.smtp_port,
            username=settings.smtp_user,
            password=settings.smtp_password,
            sender=settings.email_from,
            sender_name=settings.email_from_name,
            use_tls=settings.smtp_use_tls,
        )

    def build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = formataddr((self.sender_name, self.sender)) if self.sender_name else self.sender
        msg["To"] = to
        msg.set_content(body)
        return msg

    def send(self, to: str, subject: str, body: str) -> None:
        msg = self.build_message(to, subject, body)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(f"SMTP delivery to {to} failed: {exc}") from exc


class QueueSender:
    """Hands messages to an rq worker, which delivers them over SMTP."""

    def __init__(self, queue: Queue) -> None:
        self.queue = queue

    def send(self, to: str, subject: str, body: str) -> None:
        from app.services.notifications.jobs import deliver_email

        try:
            self.queue.enqueue(deliver_email, to, subject, body)
        except Exception as exc:
            raise NotificationError(f"Could not enqueue email to {to}: {exc}") from exc


def build_sender(settings: Settings) -> NotificationSender:
    backend = NotificationBackend(settings.notification_backend)
    if backend is NotificationBackend.SMTP:
        return SmtpSender.from_settings(settings)
    if backend is NotificationBackend.RQ:
        from app.connections.redis import get_redis

        return QueueSender(Queue(name=settings.notification_queue, connection=get_redis()))
    return ConsoleSender()
