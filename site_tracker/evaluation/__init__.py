"""
Progress Evaluation

Pure, stateless decision logic:
- Status classification with configurable thresholds
- Data entry delay and missing-month detection
- Demobilization staging over a site's first months
"""

from .status import (
    Classification,
    DelayAssessment,
    assess_progress,
    classify,
    assess_data_entry_delay,
    evaluate_data_entry_delay,
    detect_missing_current_month,
    compute_delay_rate
)
from .demobilization import (
    DemobilizationEvaluation,
    SiteEvaluation,
    ProjectSummary,
    evaluate_demobilization,
    evaluate_site_status,
    summarize_project,
    sort_by_month
)

__all__ = [
    "Classification",
    "DelayAssessment",
    "assess_progress",
    "classify",
    "assess_data_entry_delay",
    "evaluate_data_entry_delay",
    "detect_missing_current_month",
    "compute_delay_rate",
    "DemobilizationEvaluation",
    "SiteEvaluation",
    "ProjectSummary",
    "evaluate_demobilization",
    "evaluate_site_status",
    "summarize_project",
    "sort_by_month"
]
