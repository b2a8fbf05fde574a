"""
Alert Obligations

Decides which alerts a write produces. Status alerts are edge-triggered:
an alert fires only when a site enters `problematic` or `critical`, never
for an unchanged state and never for a transition into `good`.
"""

from datetime import datetime
from typing import Iterable, Optional
import logging

from ..config import ThresholdConfig, get_settings
from ..core.entities import (
    AlertEvent,
    AlertType,
    MonthlyProgressRecord,
    ProgressStatus,
    Project,
    Site
)
from ..evaluation.demobilization import DemobilizationEvaluation
from ..evaluation.status import classify, evaluate_data_entry_delay
from .content import render_alert, resolve_recipients

logger = logging.getLogger(__name__)


ACTIONABLE_STATUSES = {
    ProgressStatus.PROBLEMATIC: AlertType.PROBLEMATIC,
    ProgressStatus.CRITICAL: AlertType.CRITICAL,
}


def _as_status(value) -> Optional[ProgressStatus]:
    if value is None or isinstance(value, ProgressStatus):
        return value
    try:
        return ProgressStatus(value)
    except ValueError:
        logger.warning("Unknown previous status %r, treated as first observation", value)
        return None


def should_alert(new_status, previous_status=None) -> bool:
    """Edge-trigger rule for status alerts."""
    new_status = _as_status(new_status)
    if new_status not in ACTIONABLE_STATUSES:
        return False
    return new_status != _as_status(previous_status)


def evaluate_status_sequence(statuses: Iterable) -> list[int]:
    """Indices of a status sequence at which a status alert fires."""
    fired = []
    previous = None
    for index, status in enumerate(statuses):
        if should_alert(status, previous):
            fired.append(index)
        previous = status
    return fired


def make_alert(
    alert_type: AlertType,
    project: Project,
    site: Optional[Site] = None,
    custom_message: Optional[str] = None,
    month: Optional[str] = None,
    fallback_recipient: Optional[str] = None,
    created_at: Optional[datetime] = None
) -> AlertEvent:
    """Render and address an alert for a project or site."""
    fallback = fallback_recipient or get_settings().notification.fallback_recipient
    title, message = render_alert(
        alert_type,
        project.name,
        site.name if site else None,
        custom_message
    )
    return AlertEvent(
        project_id=project.id,
        site_id=site.id if site else None,
        type=alert_type,
        title=title,
        message=message,
        recipients=resolve_recipients(project, fallback),
        month=month,
        created_at=created_at or datetime.now()
    )


def build_alert_obligations(
    record: MonthlyProgressRecord,
    previous_status,
    project: Project,
    site: Optional[Site] = None,
    thresholds: ThresholdConfig = None,
    fallback_recipient: Optional[str] = None
) -> list[AlertEvent]:
    """
    Alerts owed for a newly written record.

    The record's status is recomputed from its progress; the stored value
    is ignored. With no previous status, an actionable first status alerts.
    """
    status = classify(record.monthly_progress, thresholds)
    previous = _as_status(previous_status)
    if not should_alert(status, previous):
        return []

    logger.info(
        "Site %s entered %s status for %s (previously %s)",
        record.site_id, status.value, record.month,
        previous.value if previous else "none"
    )
    return [
        make_alert(
            ACTIONABLE_STATUSES[status],
            project,
            site,
            month=record.month,
            fallback_recipient=fallback_recipient
        )
    ]


def build_demobilization_obligations(
    evaluation: DemobilizationEvaluation,
    previous_stage: int,
    project: Project,
    site: Optional[Site] = None,
    fallback_recipient: Optional[str] = None
) -> list[AlertEvent]:
    """
    Alerts owed on entering a demobilization stage.

    Stage 1 is already covered by the status alerts; stage 2 raises
    pre-demobilization and stages 3 and 4 raise demobilization once.
    """
    previous_stage = previous_stage or 0
    if evaluation.stage < 2 or evaluation.stage == previous_stage:
        return []
    # 3 -> 4 is still the same demobilized state
    if evaluation.demobilized and previous_stage in (3, 4):
        return []

    return [
        make_alert(
            evaluation.alert_type,
            project,
            site,
            fallback_recipient=fallback_recipient
        )
    ]


def build_data_entry_delay_obligation(
    last_entry_date,
    reference_date,
    project: Project,
    site: Optional[Site] = None,
    threshold_days: int = None,
    fallback_recipient: Optional[str] = None
) -> list[AlertEvent]:
    """
    A data entry delay alert when the site has gone quiet for too long.

    The alert is stamped with `reference_date` when that is a datetime.
    """
    if threshold_days is None:
        threshold_days = get_settings().data_entry.delay_threshold_days

    if not evaluate_data_entry_delay(last_entry_date, reference_date, threshold_days):
        return []

    return [
        make_alert(
            AlertType.DATA_ENTRY_DELAY,
            project,
            site,
            fallback_recipient=fallback_recipient,
            created_at=reference_date if isinstance(reference_date, datetime) else None
        )
    ]
