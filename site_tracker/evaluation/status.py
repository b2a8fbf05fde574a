"""
Progress Status Evaluation

Pure decision logic over externally supplied progress data:
- Status classification of a monthly progress percentage
- Data entry delay detection
- Missing current-month entry detection

Nothing here performs I/O or keeps state; the functions are safe to call
concurrently from any number of callers.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional
import logging
import math
import numbers

from ..config import ThresholdConfig, get_settings
from ..core.entities import ProgressStatus
from ..core.months import year_month_of

logger = logging.getLogger(__name__)


# Reasons attached to an invalid classification
MISSING = "missing"
NOT_NUMERIC = "not_numeric"
NOT_FINITE = "not_finite"
OUT_OF_RANGE = "out_of_range"
INVALID_DATE = "invalid_date"


@dataclass(frozen=True)
class Classification:
    """
    Outcome of classifying a progress value.

    Invalid input still classifies as critical; `valid` and `reason`
    keep the data error distinguishable from genuinely low progress.
    """
    status: ProgressStatus
    valid: bool = True
    reason: Optional[str] = None
    progress: Optional[float] = None


@dataclass(frozen=True)
class DelayAssessment:
    """Outcome of a data entry delay check."""
    delayed: bool
    days_since_entry: Optional[int] = None
    valid: bool = True
    reason: Optional[str] = None


def default_thresholds() -> ThresholdConfig:
    """Thresholds configured for this deployment."""
    return get_settings().thresholds


def _is_number(value) -> bool:
    # bool is an int subclass but never a measurement
    if isinstance(value, bool):
        return False
    return isinstance(value, (numbers.Real, Decimal))


def _is_nan(value) -> bool:
    if isinstance(value, Decimal):
        return value.is_nan()
    return isinstance(value, float) and math.isnan(value)


def _is_finite(value) -> bool:
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, float):
        return math.isfinite(value)
    return True


def _invalid(reason: str, value) -> Classification:
    logger.warning("Invalid progress value %r (%s), classified as critical", value, reason)
    return Classification(status=ProgressStatus.CRITICAL, valid=False, reason=reason)


def assess_progress(progress, thresholds: ThresholdConfig = None) -> Classification:
    """Classify a progress percentage, flagging invalid input."""
    thresholds = thresholds or default_thresholds()

    if progress is None:
        return _invalid(MISSING, progress)

    if not _is_number(progress):
        return _invalid(NOT_NUMERIC, progress)

    if not _is_finite(progress):
        return _invalid(NOT_FINITE, progress)

    # Compare before float(): large ints overflow it
    if progress < thresholds.min_progress or progress > thresholds.max_progress:
        return _invalid(OUT_OF_RANGE, progress)

    value = float(progress)

    if value < thresholds.critical_below:
        status = ProgressStatus.CRITICAL
    elif value < thresholds.problematic_below:
        status = ProgressStatus.PROBLEMATIC
    else:
        status = ProgressStatus.GOOD

    return Classification(status=status, progress=value)


def classify(progress, thresholds: ThresholdConfig = None) -> ProgressStatus:
    """
    Compute the status of a monthly progress percentage.

        missing / not numeric / out of range  => CRITICAL
        < 30                                  => CRITICAL
        30 - 49.999                           => PROBLEMATIC
        >= 50                                 => GOOD

    Boundaries belong to the upper band. Never raises.
    """
    return assess_progress(progress, thresholds).status


def _as_date(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return None


def assess_data_entry_delay(
    last_entry_date,
    reference_date,
    threshold_days
) -> DelayAssessment:
    """
    Check whether a site went `threshold_days` or more without a new entry.

    A site that never had an entry is delayed. Malformed dates or
    thresholds are reported as delayed with `valid=False`.
    """
    reference = _as_date(reference_date)
    if reference is None:
        logger.warning("Invalid reference date %r for data entry check", reference_date)
        return DelayAssessment(delayed=True, valid=False, reason=INVALID_DATE)

    if not _is_number(threshold_days) or _is_nan(threshold_days):
        logger.warning("Invalid delay threshold %r", threshold_days)
        return DelayAssessment(delayed=True, valid=False, reason=NOT_NUMERIC)

    if last_entry_date is None:
        return DelayAssessment(delayed=True, reason=MISSING)

    last_entry = _as_date(last_entry_date)
    if last_entry is None:
        logger.warning("Invalid last entry date %r for data entry check", last_entry_date)
        return DelayAssessment(delayed=True, valid=False, reason=INVALID_DATE)

    days = (reference - last_entry).days
    return DelayAssessment(
        delayed=days >= max(threshold_days, 0),
        days_since_entry=days
    )


def evaluate_data_entry_delay(last_entry_date, reference_date, threshold_days) -> bool:
    """
    True when no entry was made for at least `threshold_days` days as of
    `reference_date`. Monotonic in the gap.
    """
    return assess_data_entry_delay(last_entry_date, reference_date, threshold_days).delayed


def detect_missing_current_month(
    months: Iterable[str],
    now=None,
    grace_day: int = 5
) -> bool:
    """
    Flag a missing entry for the current month once the grace day has passed.
    """
    now = now or datetime.now()
    current = year_month_of(now)
    if current in set(months):
        return False
    return now.day > grace_day


def compute_delay_rate(total_progress: float, target_rate: float) -> float:
    """Shortfall against the schedule; negative when ahead."""
    return round(float(target_rate) - float(total_progress), 4)
