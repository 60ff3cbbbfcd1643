"""Fire-and-forget failure notifications.

Delivery problems are logged and never propagate: a notification must not
change the outcome of a run.
"""

import smtplib
from email.message import EmailMessage
from typing import Protocol

import httpx

from logvault.logging import LoggerType, get_logger

__all__ = ("Notifier", "NullNotifier", "EmailNotifier", "WebhookNotifier", "create_notifier")


class Notifier(Protocol):
    def notify(self, subject: str, message: str) -> None: ...


class NullNotifier:
    def notify(self, subject: str, message: str) -> None:
        pass


class EmailNotifier:
    def __init__(
        self,
        to_address: str,
        from_address: str = "logvault@localhost",
        smtp_host: str = "localhost",
        smtp_port: int = 25,
        timeout: float = 10.0,
        logger: LoggerType | None = None,
    ):
        self.to_address = to_address
        self.from_address = from_address
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.timeout = timeout
        self.logger = logger or get_logger(__name__)

    def notify(self, subject: str, message: str) -> None:
        email = EmailMessage()
        email["Subject"] = subject
        email["From"] = self.from_address
        email["To"] = self.to_address
        email.set_content(message)

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as smtp:
                smtp.send_message(email)
        except (smtplib.SMTPException, OSError) as e:
            self.logger.warning("notification-failed", target=self.to_address, error=str(e))


class WebhookNotifier:
    def __init__(self, url: str, timeout: float = 10.0, logger: LoggerType | None = None):
        self.url = url
        self.timeout = timeout
        self.logger = logger or get_logger(__name__)

    def notify(self, subject: str, message: str) -> None:
        try:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(self.url, json={"subject": subject, "message": message})
                response.raise_for_status()
        except httpx.HTTPError as e:
            self.logger.warning("notification-failed", target=self.url, error=str(e))


def create_notifier(
    target: str | None,
    *,
    from_address: str = "logvault@localhost",
    smtp_host: str = "localhost",
    smtp_port: int = 25,
) -> Notifier:
    """Create a notifier for an email address or a webhook URL.

    Args:
        target: Email address, http(s) URL, or None to disable notifications

    Raises:
        ValueError: If target is neither an email address nor a URL
    """
    if not target:
        return NullNotifier()
    if target.startswith(("http://", "https://")):
        return WebhookNotifier(target)
    if "@" in target:
        return EmailNotifier(target, from_address=from_address, smtp_host=smtp_host, smtp_port=smtp_port)
    raise ValueError(f"Unsupported notification target: {target!r}")
