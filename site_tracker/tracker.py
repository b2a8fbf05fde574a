"""
Progress Tracker

Wires the ledger, the evaluator and the alert service together:
- writing progress records the edge-triggered status alerts and
  demobilization alerts the write owes
- a sweep raises data entry delay alerts for quiet sites
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
import logging

from .alerts.notifiers import Notifier
from .alerts.obligations import (
    build_alert_obligations,
    build_data_entry_delay_obligation,
    build_demobilization_obligations
)
from .alerts.service import AlertService
from .config import Settings, get_settings
from .core.entities import AlertEvent, AlertType, Project, Site
from .errors import RecordNotFoundError
from .evaluation.demobilization import (
    ProjectSummary,
    SiteEvaluation,
    evaluate_demobilization,
    evaluate_site_status,
    summarize_project
)
from .progress import LedgerWrite, ProgressLedger
from .schemas import MonthlyProgressInput, MonthlyProgressUpdate, parse_request
from .storage import ProgressStore

logger = logging.getLogger(__name__)


@dataclass
class TrackingResult:
    """A ledger write together with the alerts it produced."""
    write: LedgerWrite
    alerts: list = field(default_factory=list)
    evaluation: Optional[SiteEvaluation] = None


class ProgressTracker:
    """Entry point for progress writes and alert sweeps."""

    def __init__(
        self,
        store: ProgressStore,
        notifier: Optional[Notifier] = None,
        settings: Optional[Settings] = None
    ):
        self.settings = settings or get_settings()
        self.store = store
        self.ledger = ProgressLedger(store, self.settings.thresholds)
        self.alerts = AlertService(store, notifier, self.settings)

    def submit_progress(self, payload) -> TrackingResult:
        """Record a new month and raise the alerts it owes."""
        entry = parse_request(MonthlyProgressInput, payload)
        previous_stage = self._demobilization_stage(entry.site_id)
        write = self.ledger.record_progress(entry)
        return self._after_write(write, previous_stage)

    def amend_progress(self, payload) -> TrackingResult:
        """Update a month and raise the alerts the change owes."""
        update = parse_request(MonthlyProgressUpdate, payload)
        record = self.store.get_record(update.id)
        if record is None:
            raise RecordNotFoundError("Monthly record", update.id)

        previous_stage = self._demobilization_stage(record.site_id)
        write = self.ledger.update_progress(update)
        return self._after_write(write, previous_stage)

    def remove_progress(self, record_id: str) -> LedgerWrite:
        return self.ledger.delete_progress(record_id)

    def evaluate_site(self, site_id: str, now: datetime = None) -> SiteEvaluation:
        if self.store.get_site(site_id) is None:
            raise RecordNotFoundError("Site", site_id)
        return self._evaluate(site_id, self.ledger.history(site_id), now)

    def evaluate_project(self, project_id: str, now: datetime = None) -> ProjectSummary:
        if self.store.get_project(project_id) is None:
            raise RecordNotFoundError("Project", project_id)
        evaluations = [
            self.evaluate_site(site.id, now)
            for site in self.store.list_sites(project_id)
            if site.is_active
        ]
        return summarize_project(evaluations)

    def check_data_entry_delays(self, now: datetime = None) -> list[AlertEvent]:
        """
        Raise a data entry delay alert for each active site without a
        recent entry. A site is alerted once per quiet period.
        """
        now = now or datetime.now()
        threshold_days = self.settings.data_entry.delay_threshold_days
        raised = []

        for project in self.store.list_projects(active_only=True):
            for site in self.store.list_sites(project.id):
                if not site.is_active:
                    continue

                last_entry = self._last_entry(site)
                if self._already_alerted(site, last_entry):
                    continue

                raised.extend(build_data_entry_delay_obligation(
                    last_entry,
                    now,
                    project,
                    site,
                    threshold_days=threshold_days,
                    fallback_recipient=self.alerts.fallback_recipient
                ))

        if raised:
            logger.info("Data entry sweep raised %d alert(s)", len(raised))
        return self.alerts.record_obligations(raised)

    def _after_write(self, write: LedgerWrite, previous_stage: int) -> TrackingResult:
        site, project = self._site_and_project(write.site_id)
        fallback = self.alerts.fallback_recipient

        obligations = build_alert_obligations(
            write.record,
            write.previous_status,
            project,
            site,
            self.settings.thresholds,
            fallback
        )

        evaluation = self._evaluate(write.site_id, write.history)
        obligations += build_demobilization_obligations(
            evaluation.demobilization,
            previous_stage,
            project,
            site,
            fallback
        )

        return TrackingResult(
            write=write,
            alerts=self.alerts.record_obligations(obligations),
            evaluation=evaluation
        )

    def _evaluate(self, site_id: str, history: list, now: datetime = None) -> SiteEvaluation:
        evaluation = evaluate_site_status(
            history,
            now=now,
            thresholds=self.settings.thresholds,
            config=self.settings.demobilization,
            grace_day=self.settings.data_entry.grace_day_of_month
        )
        evaluation.site_id = site_id
        return evaluation

    def _demobilization_stage(self, site_id: str) -> int:
        history = self.ledger.history(site_id)
        return evaluate_demobilization(history, self.settings.demobilization).stage

    def _site_and_project(self, site_id: str) -> tuple[Site, Project]:
        site = self.store.get_site(site_id)
        if site is None:
            raise RecordNotFoundError("Site", site_id)
        project = self.store.get_project(site.project_id)
        if project is None:
            raise RecordNotFoundError("Project", site.project_id)
        return site, project

    def _last_entry(self, site: Site) -> datetime:
        """Creation time of the latest entry; the site creation when none."""
        records = self.ledger.history(site.id)
        if not records:
            return site.created_at
        return max(r.created_at for r in records)

    def _already_alerted(self, site: Site, since: datetime) -> bool:
        return any(
            a.site_id == site.id
            and a.type == AlertType.DATA_ENTRY_DELAY
            and a.created_at >= since
            for a in self.store.list_alerts()
        )
