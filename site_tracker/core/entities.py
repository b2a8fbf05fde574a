"""
Core Site Tracking Entities

The persistence collaborator is the system of record for these entities;
the evaluator only reads them and produces new values.

Entities:
- Project: client engagement owning one or more sites
- Site: physical construction location
- MonthlyProgressRecord: one monthly observation of a site's progress
- AlertEvent: notification raised for a project or site
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4


def new_id() -> str:
    """Generate an opaque identifier."""
    return str(uuid4())


class ProgressStatus(str, Enum):
    """
    Tri-state classification of a monthly progress percentage.
    Always derived from the progress value, never authoritative on its own.
    """
    CRITICAL = "critical"
    PROBLEMATIC = "problematic"
    GOOD = "good"


class AlertType(str, Enum):
    """Alert categories accepted by the alerting subsystem."""
    DATA_ENTRY_DELAY = "data_entry_delay"
    PROBLEMATIC = "problematic"
    CRITICAL = "critical"
    PRE_DEMOBILIZATION = "pre_demobilization"
    DEMOBILIZATION = "demobilization"


class AlertDeliveryStatus(str, Enum):
    """Delivery lifecycle of an alert."""
    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"


class ProjectStatus(str, Enum):
    """Project mobilization status."""
    ACTIVE = "active"
    DEMOBILIZED = "demobilized"
    REMOBILIZED = "remobilized"


@dataclass
class Project:
    """
    A client project grouping construction sites.

    Contact emails are the alert recipients for the project and its sites.
    """
    id: str = field(default_factory=new_id)
    organization_id: Optional[str] = None
    name: str = ""
    owner_name: str = ""
    owner_email: str = ""
    client_email: str = ""
    project_director_email: str = ""
    mission_manager_email: str = ""
    status: ProjectStatus = ProjectStatus.ACTIVE
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class Site:
    """A physical construction location belonging to a project."""
    id: str = field(default_factory=new_id)
    project_id: str = ""
    name: str = ""
    code: Optional[str] = None
    address: Optional[str] = None
    project_duration_months: Optional[int] = None
    start_month: Optional[str] = None  # YYYY-MM
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class MonthlyProgressRecord:
    """
    One observation of a site's progress for a calendar month.

    `total_progress` is cumulative over the site's chronological records and
    `status` is recomputed from `monthly_progress` on every write.
    """
    id: str = field(default_factory=new_id)
    site_id: str = ""
    month: str = ""  # YYYY-MM, unique per site

    monthly_progress: float = 0.0
    total_progress: float = 0.0
    target_rate: float = 0.0
    normal_rate: float = 0.0
    delay_rate: float = 0.0

    status: ProgressStatus = ProgressStatus.CRITICAL
    observations: Optional[str] = None

    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class AlertEvent:
    """
    A notification raised for a project or one of its sites.

    Content is fixed at creation. Delivery state changes produce a new
    value through `dataclasses.replace`.
    """
    project_id: str
    type: AlertType
    title: str
    message: str
    recipients: tuple = ()
    site_id: Optional[str] = None
    month: Optional[str] = None
    id: str = field(default_factory=new_id)
    delivery_status: AlertDeliveryStatus = AlertDeliveryStatus.PENDING
    created_at: datetime = field(default_factory=datetime.now)
    sent_at: Optional[datetime] = None
