"""
Error taxonomy.

Pure evaluation functions never raise for numeric input; these errors are
raised at the validation boundary and by the write paths.
"""


class SiteTrackerError(Exception):
    """Base class for all site tracker errors."""


class InvalidInputError(SiteTrackerError, ValueError):
    """Boundary input outside its documented domain."""


class UnknownAlertTypeError(SiteTrackerError, ValueError):
    """Alert type not part of the alert type enumeration."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Unknown alert type: {value!r}")


class DuplicateRecordError(SiteTrackerError):
    """A monthly record already exists for the site and month."""

    def __init__(self, site_id: str, month: str):
        self.site_id = site_id
        self.month = month
        super().__init__(f"A record already exists for site {site_id} and month {month}")


class RecordNotFoundError(SiteTrackerError, LookupError):
    """Unknown record, project, site or alert id."""

    def __init__(self, kind: str, record_id):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} {record_id} not found")


class NotificationError(SiteTrackerError):
    """Delivery of an alert failed."""
