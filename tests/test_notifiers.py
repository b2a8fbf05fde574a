from dataclasses import replace
import smtplib

import pytest

from site_tracker.alerts import LoggingNotifier, SmtpNotifier, create_notifier
from site_tracker.config import NotificationConfig
from site_tracker.core import AlertEvent, AlertType
from site_tracker.errors import NotificationError


@pytest.fixture
def alert():
    return AlertEvent(
        project_id="proj-1",
        type=AlertType.CRITICAL,
        title="Critical status - Pier A",
        message="Immediate action required.",
        recipients=("client@example.com", "director@example.com")
    )


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.sent = []
        self.tls = False
        self.credentials = None
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.tls = True

    def login(self, user, password):
        self.credentials = (user, password)

    def send_message(self, message):
        self.sent.append(message)


class BrokenSMTP(FakeSMTP):

    def send_message(self, message):
        raise smtplib.SMTPRecipientsRefused({})


def test_create_notifier_follows_config():
    assert isinstance(create_notifier(NotificationConfig(enabled=False)), LoggingNotifier)
    assert isinstance(create_notifier(NotificationConfig(enabled=True)), SmtpNotifier)


def test_smtp_message(alert):
    message = SmtpNotifier(NotificationConfig(sender="alerts@example.com")).build_message(alert)

    assert message["Subject"] == "Critical status - Pier A"
    assert message["From"] == "alerts@example.com"
    assert message["To"] == "client@example.com, director@example.com"
    assert message.get_content().strip() == "Immediate action required."


def test_smtp_send(monkeypatch, alert):
    FakeSMTP.instances.clear()
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    config = NotificationConfig(smtp_host="mail.example.com", smtp_user="bot", SMTP_PASSWORD="secret")

    SmtpNotifier(config).send(alert)

    smtp = FakeSMTP.instances[0]
    assert smtp.host == "mail.example.com"
    assert smtp.tls is True
    assert smtp.credentials == ("bot", "secret")
    assert len(smtp.sent) == 1


def test_smtp_failure_raises_notification_error(monkeypatch, alert):
    monkeypatch.setattr(smtplib, "SMTP", BrokenSMTP)

    with pytest.raises(NotificationError):
        SmtpNotifier(NotificationConfig()).send(alert)


def test_alert_without_recipients(alert):
    with pytest.raises(NotificationError):
        SmtpNotifier(NotificationConfig()).send(replace(alert, recipients=()))
