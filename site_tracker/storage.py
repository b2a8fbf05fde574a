"""
Persistence collaborator.

The evaluator owns no storage. Write paths and the alert service go
through a ProgressStore; InMemoryProgressStore is the reference
implementation used by the demo and the tests.
"""

from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Optional

from .core.entities import AlertEvent, MonthlyProgressRecord, Project, Site


class ProgressStore(ABC):
    """Storage for projects, sites, monthly records and alerts."""

    # Projects and sites

    @abstractmethod
    def get_project(self, project_id: str) -> Optional[Project]:
        pass

    @abstractmethod
    def save_project(self, project: Project) -> Project:
        pass

    @abstractmethod
    def list_projects(self, active_only: bool = False) -> list[Project]:
        pass

    @abstractmethod
    def get_site(self, site_id: str) -> Optional[Site]:
        pass

    @abstractmethod
    def save_site(self, site: Site) -> Site:
        pass

    @abstractmethod
    def list_sites(self, project_id: str = None) -> list[Site]:
        pass

    # Monthly records

    @abstractmethod
    def get_record(self, record_id: str) -> Optional[MonthlyProgressRecord]:
        pass

    @abstractmethod
    def find_record(self, site_id: str, month: str) -> Optional[MonthlyProgressRecord]:
        pass

    @abstractmethod
    def list_records(self, site_id: str) -> list[MonthlyProgressRecord]:
        """Records of a site in chronological order."""
        pass

    @abstractmethod
    def save_record(self, record: MonthlyProgressRecord) -> MonthlyProgressRecord:
        pass

    @abstractmethod
    def delete_record(self, record_id: str) -> bool:
        pass

    # Alerts

    @abstractmethod
    def get_alert(self, alert_id: str) -> Optional[AlertEvent]:
        pass

    @abstractmethod
    def save_alert(self, alert: AlertEvent) -> AlertEvent:
        pass

    @abstractmethod
    def list_alerts(self) -> list[AlertEvent]:
        pass


class InMemoryProgressStore(ProgressStore):
    """Dictionary-backed store. Values are copied on the way in and out."""

    def __init__(self):
        self._projects: dict[str, Project] = {}
        self._sites: dict[str, Site] = {}
        self._records: dict[str, MonthlyProgressRecord] = {}
        self._alerts: dict[str, AlertEvent] = {}

    def get_project(self, project_id: str) -> Optional[Project]:
        project = self._projects.get(project_id)
        return replace(project) if project else None

    def save_project(self, project: Project) -> Project:
        self._projects[project.id] = replace(project)
        return project

    def list_projects(self, active_only: bool = False) -> list[Project]:
        projects = [replace(p) for p in self._projects.values()]
        if active_only:
            projects = [p for p in projects if p.is_active]
        return sorted(projects, key=lambda p: p.name)

    def get_site(self, site_id: str) -> Optional[Site]:
        site = self._sites.get(site_id)
        return replace(site) if site else None

    def save_site(self, site: Site) -> Site:
        self._sites[site.id] = replace(site)
        return site

    def list_sites(self, project_id: str = None) -> list[Site]:
        sites = [replace(s) for s in self._sites.values()]
        if project_id is not None:
            sites = [s for s in sites if s.project_id == project_id]
        return sorted(sites, key=lambda s: s.name)

    def get_record(self, record_id: str) -> Optional[MonthlyProgressRecord]:
        record = self._records.get(record_id)
        return replace(record) if record else None

    def find_record(self, site_id: str, month: str) -> Optional[MonthlyProgressRecord]:
        for record in self._records.values():
            if record.site_id == site_id and record.month == month:
                return replace(record)
        return None

    def list_records(self, site_id: str) -> list[MonthlyProgressRecord]:
        records = [replace(r) for r in self._records.values() if r.site_id == site_id]
        return sorted(records, key=lambda r: r.month)

    def save_record(self, record: MonthlyProgressRecord) -> MonthlyProgressRecord:
        self._records[record.id] = replace(record)
        return record

    def delete_record(self, record_id: str) -> bool:
        if record_id in self._records:
            del self._records[record_id]
            return True
        return False

    def get_alert(self, alert_id: str) -> Optional[AlertEvent]:
        return self._alerts.get(alert_id)

    def save_alert(self, alert: AlertEvent) -> AlertEvent:
        self._alerts[alert.id] = alert
        return alert

    def list_alerts(self) -> list[AlertEvent]:
        return list(self._alerts.values())
