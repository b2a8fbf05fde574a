"""
Demobilization Staging

Examines the cumulative progress of the first four months of a site:

    Month 1: total < 50                         -> stage 1 (insufficient yield)
    Month 2: total < 30                         -> stage 2 (pre-demobilization)
    Month 3: total < 30                         -> stage 3 (demobilization)
    Month 4: month 3 >= 30 and month 4 < 50     -> stage 4 (demobilization)

Later rules override earlier ones. A site is demobilized at stage 3 or 4;
reactivation is a manual decision outside this module.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Optional

from ..config import DemobilizationConfig, ThresholdConfig, get_settings
from ..core.entities import AlertType, MonthlyProgressRecord, ProgressStatus
from .status import classify, detect_missing_current_month


STAGE_LABELS = {
    1: "Alert (insufficient yield)",
    2: "Pre-demobilization",
    3: "Demobilized",
    4: "Demobilized",
}

STAGE_ALERT_TYPES = {
    1: AlertType.PROBLEMATIC,
    2: AlertType.PRE_DEMOBILIZATION,
    3: AlertType.DEMOBILIZATION,
    4: AlertType.DEMOBILIZATION,
}


@dataclass(frozen=True)
class DemobilizationEvaluation:
    """Demobilization stage of a site."""
    stage: int = 0
    demobilized: bool = False
    label: Optional[str] = None
    alert_type: Optional[AlertType] = None


@dataclass
class SiteEvaluation:
    """Snapshot of a site's status over its monthly history."""
    site_id: str = ""
    demobilization: DemobilizationEvaluation = field(default_factory=DemobilizationEvaluation)
    latest_status: Optional[ProgressStatus] = None
    latest_month: Optional[str] = None
    total_progress: Optional[float] = None
    monthly_progress: Optional[float] = None
    missing_data: bool = False
    records: list = field(default_factory=list)

    @property
    def demobilized(self) -> bool:
        return self.demobilization.demobilized


@dataclass
class ProjectSummary:
    """Aggregated site statuses for a project."""
    total_sites: int = 0
    critical_sites: int = 0
    problematic_sites: int = 0
    good_sites: int = 0
    demobilized_sites: int = 0
    missing_data_sites: int = 0
    average_progress: Optional[float] = None


def sort_by_month(records: list[MonthlyProgressRecord]) -> list[MonthlyProgressRecord]:
    """Chronological order; YYYY-MM sorts lexically."""
    return sorted(records, key=lambda r: r.month)


def evaluate_demobilization(
    history: list[MonthlyProgressRecord],
    config: DemobilizationConfig = None
) -> DemobilizationEvaluation:
    """Evaluate the demobilization stage from a chronological history."""
    config = config or get_settings().demobilization
    if not history:
        return DemobilizationEvaluation()

    totals = [r.total_progress for r in history[:4]]
    totals += [None] * (4 - len(totals))
    m1, m2, m3, m4 = totals

    stage = 0
    if m1 is not None and m1 < config.alert_below:
        stage = 1
    if m2 is not None and m2 < config.pre_demobilization_below:
        stage = 2
    if m3 is not None and m3 < config.demobilization_below:
        stage = 3
    if m4 is not None and m3 is not None \
            and m3 >= config.demobilization_below and m4 < config.final_review_below:
        stage = 4

    return DemobilizationEvaluation(
        stage=stage,
        demobilized=stage in (3, 4),
        label=STAGE_LABELS.get(stage),
        alert_type=STAGE_ALERT_TYPES.get(stage)
    )


def evaluate_site_status(
    records: list[MonthlyProgressRecord],
    now: datetime = None,
    thresholds: ThresholdConfig = None,
    config: DemobilizationConfig = None,
    grace_day: int = None
) -> SiteEvaluation:
    """
    Evaluate a site's full monthly history.

    Statuses are recomputed from the progress values; the stored status
    of each record is never trusted. Input records are not modified.
    """
    now = now or datetime.now()
    if grace_day is None:
        grace_day = get_settings().data_entry.grace_day_of_month

    if not records:
        return SiteEvaluation(
            missing_data=detect_missing_current_month([], now, grace_day)
        )

    rows = [
        replace(r, status=classify(r.monthly_progress, thresholds))
        for r in sort_by_month(records)
    ]
    latest = rows[-1]

    return SiteEvaluation(
        site_id=latest.site_id,
        demobilization=evaluate_demobilization(rows, config),
        latest_status=latest.status,
        latest_month=latest.month,
        total_progress=latest.total_progress,
        monthly_progress=latest.monthly_progress,
        missing_data=detect_missing_current_month([r.month for r in rows], now, grace_day),
        records=rows
    )


def summarize_project(evaluations: list[SiteEvaluation]) -> ProjectSummary:
    """Count site statuses and average the latest cumulative progress."""
    summary = ProjectSummary(total_sites=len(evaluations))

    for evaluation in evaluations:
        if evaluation.latest_status == ProgressStatus.CRITICAL:
            summary.critical_sites += 1
        elif evaluation.latest_status == ProgressStatus.PROBLEMATIC:
            summary.problematic_sites += 1
        elif evaluation.latest_status == ProgressStatus.GOOD:
            summary.good_sites += 1

        if evaluation.demobilized:
            summary.demobilized_sites += 1
        if evaluation.missing_data:
            summary.missing_data_sites += 1

    totals = [e.total_progress for e in evaluations if e.total_progress is not None]
    if totals:
        summary.average_progress = round(sum(totals) / len(totals), 2)

    return summary
