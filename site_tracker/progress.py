"""
Progress Ledger

Write paths for monthly progress records. Every write rebuilds the site's
chronological chain:
- total_progress is the running sum of monthly_progress
- delay_rate is target_rate - total_progress
- status is recomputed from monthly_progress

Derived fields supplied by callers are never trusted.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
import logging

from .config import ThresholdConfig, get_settings
from .core.entities import MonthlyProgressRecord, ProgressStatus
from .errors import DuplicateRecordError, RecordNotFoundError
from .evaluation.status import classify, compute_delay_rate
from .schemas import MonthlyProgressInput, MonthlyProgressUpdate, parse_request
from .storage import ProgressStore

logger = logging.getLogger(__name__)


@dataclass
class LedgerWrite:
    """
    Outcome of a write.

    `previous_status` is the status stored for the same site and month
    before the write; None when the month had no record.
    """
    record: Optional[MonthlyProgressRecord] = None
    previous_status: Optional[ProgressStatus] = None
    history: list = field(default_factory=list)
    site_id: str = ""


class ProgressLedger:
    """Validated, chain-consistent writes over a ProgressStore."""

    def __init__(self, store: ProgressStore, thresholds: ThresholdConfig = None):
        self._store = store
        self._thresholds = thresholds or get_settings().thresholds

    @property
    def thresholds(self) -> ThresholdConfig:
        return self._thresholds

    def history(self, site_id: str) -> list[MonthlyProgressRecord]:
        """Chronological records of a site."""
        return self._store.list_records(site_id)

    def record_progress(self, payload) -> LedgerWrite:
        """Add the entry of a new month for a site."""
        entry: MonthlyProgressInput = parse_request(MonthlyProgressInput, payload)

        if self._store.get_site(entry.site_id) is None:
            raise RecordNotFoundError("Site", entry.site_id)
        if self._store.find_record(entry.site_id, entry.month) is not None:
            raise DuplicateRecordError(entry.site_id, entry.month)

        record = MonthlyProgressRecord(
            site_id=entry.site_id,
            month=entry.month,
            monthly_progress=entry.monthly_progress,
            target_rate=entry.target_rate,
            normal_rate=(
                entry.normal_rate if entry.normal_rate is not None
                else self._thresholds.normal_rate
            ),
            observations=entry.observations
        )
        self._store.save_record(record)

        history = self._rebuild(entry.site_id)
        written = next(r for r in history if r.id == record.id)
        logger.info(
            "Recorded %s for site %s: monthly %.2f, total %.2f, %s",
            written.month, written.site_id, written.monthly_progress,
            written.total_progress, written.status.value
        )
        return LedgerWrite(record=written, history=history, site_id=entry.site_id)

    def update_progress(self, payload) -> LedgerWrite:
        """Change an existing entry and rebuild the site's chain."""
        update: MonthlyProgressUpdate = parse_request(MonthlyProgressUpdate, payload)

        record = self._store.get_record(update.id)
        if record is None:
            raise RecordNotFoundError("Monthly record", update.id)
        previous_status = record.status

        for name, value in update.changes().items():
            # Numeric fields cannot be cleared
            if value is None and name != "observations":
                continue
            setattr(record, name, value)
        record.updated_at = datetime.now()
        self._store.save_record(record)

        history = self._rebuild(record.site_id)
        written = next(r for r in history if r.id == record.id)
        logger.info("Updated %s for site %s (%s -> %s)",
                    written.month, written.site_id, previous_status.value, written.status.value)
        return LedgerWrite(
            record=written,
            previous_status=previous_status,
            history=history,
            site_id=record.site_id
        )

    def delete_progress(self, record_id: str) -> LedgerWrite:
        """Remove an entry and rebuild the remaining chain."""
        record = self._store.get_record(record_id)
        if record is None:
            raise RecordNotFoundError("Monthly record", record_id)

        self._store.delete_record(record_id)
        history = self._rebuild(record.site_id)
        logger.info("Deleted %s for site %s", record.month, record.site_id)
        return LedgerWrite(history=history, site_id=record.site_id)

    def _rebuild(self, site_id: str) -> list[MonthlyProgressRecord]:
        """Recompute cumulative totals and derived fields of a site's chain."""
        cumulative = 0.0
        rebuilt = []

        for record in self._store.list_records(site_id):
            cumulative = round(cumulative + (record.monthly_progress or 0.0), 4)
            status = classify(record.monthly_progress, self._thresholds)
            delay_rate = compute_delay_rate(cumulative, record.target_rate)

            if (record.total_progress, record.status, record.delay_rate) != \
                    (cumulative, status, delay_rate):
                record.total_progress = cumulative
                record.status = status
                record.delay_rate = delay_rate
                record.updated_at = datetime.now()
                self._store.save_record(record)

            rebuilt.append(record)

        return rebuilt
