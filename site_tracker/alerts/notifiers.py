"""
Notification collaborators.

A notifier delivers one alert; retries and delivery guarantees belong to
the notifier, the alert service only records the outcome.
"""

from abc import ABC, abstractmethod
from email.message import EmailMessage
import logging
import smtplib

from ..config import NotificationConfig
from ..core.entities import AlertEvent
from ..errors import NotificationError

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Delivers alerts to their recipients."""

    @abstractmethod
    def send(self, alert: AlertEvent) -> None:
        """Deliver an alert, raising NotificationError on failure."""
        pass


class LoggingNotifier(Notifier):
    """Logs alerts instead of delivering them and keeps what was sent."""

    def __init__(self):
        self.sent: list[AlertEvent] = []

    def send(self, alert: AlertEvent) -> None:
        logger.info(
            "Alert %s [%s] to %s: %s",
            alert.id, alert.type.value, ", ".join(alert.recipients), alert.title
        )
        self.sent.append(alert)


class SmtpNotifier(Notifier):
    """Sends alerts by email over SMTP."""

    def __init__(self, config: NotificationConfig):
        self.config = config

    def build_message(self, alert: AlertEvent) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = alert.title
        message["From"] = self.config.sender
        message["To"] = ", ".join(alert.recipients)
        message.set_content(alert.message)
        return message

    def send(self, alert: AlertEvent) -> None:
        if not alert.recipients:
            raise NotificationError(f"Alert {alert.id} has no recipients")

        message = self.build_message(alert)
        try:
            with smtplib.SMTP(
                self.config.smtp_host,
                self.config.smtp_port,
                timeout=self.config.timeout
            ) as smtp:
                if self.config.use_tls:
                    smtp.starttls()
                if self.config.smtp_user and self.config.smtp_password:
                    smtp.login(
                        self.config.smtp_user,
                        self.config.smtp_password.get_secret_value()
                    )
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(f"Failed to send alert {alert.id}: {e}") from e

        logger.info("Alert %s emailed to %d recipient(s)", alert.id, len(alert.recipients))


def create_notifier(config: NotificationConfig) -> Notifier:
    """SMTP delivery when enabled, logging otherwise."""
    if config.enabled:
        return SmtpNotifier(config)
    return LoggingNotifier()
