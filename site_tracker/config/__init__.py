"""
Configuration Management

Centralized configuration for:
- Status thresholds (critical / problematic / good)
- Demobilization staging thresholds
- Data entry timeliness
- Alert delivery (SMTP, fallback recipient)
"""

from .settings import (
    Settings,
    ThresholdConfig,
    DemobilizationConfig,
    DataEntryConfig,
    NotificationConfig,
    get_settings,
    configure_logging
)

__all__ = [
    "Settings",
    "ThresholdConfig",
    "DemobilizationConfig",
    "DataEntryConfig",
    "NotificationConfig",
    "get_settings",
    "configure_logging"
]
