"""
Alert Service

Records alerts, creates operator alerts, and hands pending alerts to the
notification collaborator.

Alert types are validated here, at the boundary; anything outside the
enumeration is rejected and never coerced.
"""

from dataclasses import replace
from datetime import datetime
from typing import Iterable, Optional
import logging

from ..config import Settings, get_settings
from ..core.entities import AlertDeliveryStatus, AlertEvent, AlertType
from ..errors import InvalidInputError, NotificationError, RecordNotFoundError, UnknownAlertTypeError
from ..schemas import ManualAlertRequest, parse_request
from ..storage import ProgressStore
from .notifiers import Notifier, create_notifier
from .obligations import make_alert

logger = logging.getLogger(__name__)


def validate_alert_type(value) -> AlertType:
    """Map a caller-supplied alert type onto the enumeration."""
    if isinstance(value, AlertType):
        return value
    if isinstance(value, str):
        for alert_type in AlertType:
            if alert_type.value == value:
                return alert_type
    raise UnknownAlertTypeError(value)


class AlertService:
    """
    Alert bookkeeping over a ProgressStore.

    Manual alerts bypass the edge-trigger rule: every valid request
    records exactly one alert.
    """

    def __init__(
        self,
        store: ProgressStore,
        notifier: Optional[Notifier] = None,
        settings: Optional[Settings] = None
    ):
        self._store = store
        self._settings = settings or get_settings()
        self._notifier = notifier or create_notifier(self._settings.notification)

    @property
    def fallback_recipient(self) -> str:
        return self._settings.notification.fallback_recipient

    def create_manual_alert(self, request) -> AlertEvent:
        """Create an operator alert from a ManualAlertRequest or a dict."""
        if isinstance(request, dict):
            if not request.get("project_id") or not request.get("type"):
                raise InvalidInputError("project_id and type are required")
            request = dict(request, type=validate_alert_type(request["type"]))
        request: ManualAlertRequest = parse_request(ManualAlertRequest, request)

        project = self._store.get_project(request.project_id)
        if project is None:
            raise RecordNotFoundError("Project", request.project_id)

        site = None
        if request.site_id:
            site = self._store.get_site(request.site_id)
            if site is None:
                raise RecordNotFoundError("Site", request.site_id)

        alert = make_alert(
            request.type,
            project,
            site,
            custom_message=request.custom_message,
            fallback_recipient=self.fallback_recipient
        )
        self._store.save_alert(alert)
        logger.info("Manual %s alert %s created for project %s", alert.type.value, alert.id, project.id)
        return alert

    def record_obligations(self, alerts: Iterable[AlertEvent]) -> list[AlertEvent]:
        """Persist alerts produced by the evaluator."""
        recorded = []
        for alert in alerts:
            self._store.save_alert(alert)
            logger.info("%s alert %s recorded for project %s", alert.type.value, alert.id, alert.project_id)
            recorded.append(alert)
        return recorded

    def dispatch_pending(self) -> dict:
        """Deliver every pending alert, oldest first."""
        pending = self.list_alerts(status=AlertDeliveryStatus.PENDING)
        pending.sort(key=lambda a: a.created_at)

        counts = {"sent": 0, "failed": 0}
        for alert in pending:
            try:
                self._notifier.send(alert)
            except NotificationError as e:
                logger.error("Delivery of alert %s failed: %s", alert.id, e)
                self._store.save_alert(replace(alert, delivery_status=AlertDeliveryStatus.FAILED))
                counts["failed"] += 1
                continue

            self._store.save_alert(replace(
                alert,
                delivery_status=AlertDeliveryStatus.SENT,
                sent_at=datetime.now()
            ))
            counts["sent"] += 1

        logger.info("Dispatched %d pending alert(s): %d sent, %d failed",
                    len(pending), counts["sent"], counts["failed"])
        return counts

    def mark_sent(self, alert_id: str) -> AlertEvent:
        """Mark an alert as delivered."""
        alert = self._store.get_alert(alert_id)
        if alert is None:
            raise RecordNotFoundError("Alert", alert_id)

        alert = replace(alert, delivery_status=AlertDeliveryStatus.SENT, sent_at=datetime.now())
        self._store.save_alert(alert)
        return alert

    def list_alerts(
        self,
        status: AlertDeliveryStatus = None,
        project_id: str = None,
        limit: Optional[int] = None,
        offset: int = 0
    ) -> list[AlertEvent]:
        """Alerts newest first, optionally filtered and paginated."""
        alerts = self._store.list_alerts()

        if status is not None:
            alerts = [a for a in alerts if a.delivery_status == status]
        if project_id is not None:
            alerts = [a for a in alerts if a.project_id == project_id]

        alerts.sort(key=lambda a: a.created_at, reverse=True)

        alerts = alerts[offset:]
        if limit is not None:
            alerts = alerts[:limit]
        return alerts

    def summary(self) -> dict:
        """Counts by type and delivery status."""
        alerts = self._store.list_alerts()

        return {
            "total": len(alerts),
            "by_type": {
                alert_type.value: sum(1 for a in alerts if a.type == alert_type)
                for alert_type in AlertType
            },
            "by_delivery_status": {
                status.value: sum(1 for a in alerts if a.delivery_status == status)
                for status in AlertDeliveryStatus
            },
            "oldest_pending": min(
                (a.created_at for a in alerts if a.delivery_status == AlertDeliveryStatus.PENDING),
                default=None
            )
        }
