"""
Alerting

- Edge-triggered status alert obligations
- Demobilization and data entry delay alerts
- Manual operator alerts with validated types
- Dispatch to a notification collaborator
"""

from .content import alert_label, render_alert, resolve_recipients
from .obligations import (
    should_alert,
    evaluate_status_sequence,
    make_alert,
    build_alert_obligations,
    build_demobilization_obligations,
    build_data_entry_delay_obligation
)
from .notifiers import Notifier, LoggingNotifier, SmtpNotifier, create_notifier
from .service import AlertService, validate_alert_type

__all__ = [
    "alert_label",
    "render_alert",
    "resolve_recipients",
    "should_alert",
    "evaluate_status_sequence",
    "make_alert",
    "build_alert_obligations",
    "build_demobilization_obligations",
    "build_data_entry_delay_obligation",
    "Notifier",
    "LoggingNotifier",
    "SmtpNotifier",
    "create_notifier",
    "AlertService",
    "validate_alert_type"
]
