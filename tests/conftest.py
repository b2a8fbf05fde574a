from datetime import datetime
import os

import pytest

from site_tracker.config import Settings, ThresholdConfig, get_settings
from site_tracker.core import Project, Site
from site_tracker.alerts import LoggingNotifier
from site_tracker.storage import InMemoryProgressStore
from site_tracker.tracker import ProgressTracker


ENV_PREFIXES = (
    "THRESHOLD_", "DEMOBILIZATION_", "DATA_ENTRY_", "NOTIFICATION_", "SMTP_",
    "APP_NAME", "DEBUG", "LOG_LEVEL"
)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep the process environment and any .env file out of the settings."""
    for name in list(os.environ):
        if name.upper().startswith(ENV_PREFIXES):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def thresholds():
    return ThresholdConfig()


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def store():
    return InMemoryProgressStore()


@pytest.fixture
def project(store):
    return store.save_project(Project(
        id="proj-1",
        name="Harbour Wall",
        owner_email="owner@example.com",
        client_email="client@example.com",
        project_director_email="director@example.com",
        mission_manager_email="manager@example.com"
    ))


@pytest.fixture
def site(store, project):
    return store.save_site(Site(
        id="site-1",
        project_id=project.id,
        name="Pier A",
        created_at=datetime(2026, 1, 1)
    ))


@pytest.fixture
def notifier():
    return LoggingNotifier()


@pytest.fixture
def tracker(store, notifier, settings, site):
    return ProgressTracker(store, notifier, settings)

