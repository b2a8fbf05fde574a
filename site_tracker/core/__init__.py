"""
Core domain models for site progress tracking.

Projects own sites, sites report one monthly progress record per month,
and alerts are raised against a project (optionally a single site).
"""

from .entities import (
    ProgressStatus,
    AlertType,
    AlertDeliveryStatus,
    ProjectStatus,
    MonthlyProgressRecord,
    Project,
    Site,
    AlertEvent,
    new_id
)
from .months import (
    parse_year_month,
    to_year_month,
    next_year_month,
    is_year_month,
    year_month_of
)

__all__ = [
    "ProgressStatus",
    "AlertType",
    "AlertDeliveryStatus",
    "ProjectStatus",
    "MonthlyProgressRecord",
    "Project",
    "Site",
    "AlertEvent",
    "new_id",
    "parse_year_month",
    "to_year_month",
    "next_year_month",
    "is_year_month",
    "year_month_of"
]
