from dataclasses import FrozenInstanceError, replace

import pytest

from site_tracker.alerts import (
    AlertService,
    LoggingNotifier,
    Notifier,
    render_alert,
    resolve_recipients,
    validate_alert_type
)
from site_tracker.core import AlertDeliveryStatus, AlertType, Project
from site_tracker.errors import (
    InvalidInputError,
    NotificationError,
    RecordNotFoundError,
    UnknownAlertTypeError
)
from site_tracker.schemas import ManualAlertRequest


class FailingNotifier(Notifier):

    def send(self, alert):
        raise NotificationError("smtp unavailable")


@pytest.fixture
def service(store, notifier, settings, site):
    return AlertService(store, notifier, settings)


@pytest.mark.parametrize("value", [t.value for t in AlertType])
def test_valid_alert_types(value):
    assert validate_alert_type(value).value == value


@pytest.mark.parametrize("value", ["CRITICAL", "warning", "", None, 3, ["critical"]])
def test_unknown_alert_types_are_rejected(value):
    with pytest.raises(UnknownAlertTypeError):
        validate_alert_type(value)


class TestManualAlerts:

    def test_critical_without_prior_record_creates_one_alert(self, service, store, project):
        alert = service.create_manual_alert({"project_id": project.id, "type": "critical"})

        assert store.list_alerts() == [alert]
        assert alert.type == AlertType.CRITICAL
        assert alert.site_id is None
        assert alert.title == "Critical status"

    def test_repeated_requests_are_never_deduplicated(self, service, store, project):
        for _ in range(3):
            service.create_manual_alert({"project_id": project.id, "type": "critical"})

        assert len(store.list_alerts()) == 3

    def test_custom_message_is_kept_verbatim(self, service, project, site):
        alert = service.create_manual_alert({
            "project_id": project.id,
            "site_id": site.id,
            "type": "demobilization",
            "custom_message": "Crane removed on Friday."
        })

        assert alert.message == "Crane removed on Friday."
        assert alert.title == "Demobilization - Pier A"
        assert alert.site_id == site.id

    def test_accepts_schema_instance(self, service, project):
        request = ManualAlertRequest(project_id=project.id, type=AlertType.DATA_ENTRY_DELAY)

        assert service.create_manual_alert(request).type == AlertType.DATA_ENTRY_DELAY

    def test_unknown_type_is_rejected(self, service, store, project):
        with pytest.raises(UnknownAlertTypeError):
            service.create_manual_alert({"project_id": project.id, "type": "urgent"})

        assert store.list_alerts() == []

    def test_missing_fields_are_rejected(self, service):
        with pytest.raises(InvalidInputError):
            service.create_manual_alert({"type": "critical"})

    def test_unknown_project(self, service):
        with pytest.raises(RecordNotFoundError):
            service.create_manual_alert({"project_id": "nope", "type": "critical"})

    def test_unknown_site(self, service, project):
        with pytest.raises(RecordNotFoundError):
            service.create_manual_alert({"project_id": project.id, "site_id": "nope", "type": "critical"})


class TestDispatch:

    def test_pending_alerts_are_sent(self, service, notifier, project):
        alert = service.create_manual_alert({"project_id": project.id, "type": "problematic"})

        counts = service.dispatch_pending()

        assert counts == {"sent": 1, "failed": 0}
        assert [a.id for a in notifier.sent] == [alert.id]
        stored = service.list_alerts()[0]
        assert stored.delivery_status == AlertDeliveryStatus.SENT
        assert stored.sent_at is not None

    def test_sent_alerts_are_not_dispatched_twice(self, service, notifier, project):
        service.create_manual_alert({"project_id": project.id, "type": "problematic"})
        service.dispatch_pending()

        assert service.dispatch_pending() == {"sent": 0, "failed": 0}
        assert len(notifier.sent) == 1

    def test_failed_delivery_is_recorded(self, store, settings, project):
        service = AlertService(store, FailingNotifier(), settings)
        service.create_manual_alert({"project_id": project.id, "type": "critical"})

        counts = service.dispatch_pending()

        assert counts == {"sent": 0, "failed": 1}
        assert service.list_alerts()[0].delivery_status == AlertDeliveryStatus.FAILED

    def test_alert_content_is_not_mutated(self, service, project):
        alert = service.create_manual_alert({"project_id": project.id, "type": "critical"})
        service.dispatch_pending()

        assert alert.delivery_status == AlertDeliveryStatus.PENDING
        with pytest.raises(FrozenInstanceError):
            alert.message = "changed"

    def test_mark_sent(self, service, project):
        alert = service.create_manual_alert({"project_id": project.id, "type": "critical"})

        assert service.mark_sent(alert.id).delivery_status == AlertDeliveryStatus.SENT

    def test_mark_sent_unknown(self, service):
        with pytest.raises(RecordNotFoundError):
            service.mark_sent("nope")


def test_list_alerts_filters_and_paginates(service, store, project):
    alerts = [
        service.create_manual_alert({"project_id": project.id, "type": "critical"})
        for _ in range(5)
    ]
    store.save_alert(replace(alerts[0], delivery_status=AlertDeliveryStatus.SENT))

    pending = service.list_alerts(status=AlertDeliveryStatus.PENDING)
    page = service.list_alerts(limit=2, offset=1)

    assert len(pending) == 4
    assert len(page) == 2
    everything = service.list_alerts()
    assert [a.created_at for a in everything] == sorted((a.created_at for a in everything), reverse=True)


def test_summary(service, project):
    service.create_manual_alert({"project_id": project.id, "type": "critical"})
    service.create_manual_alert({"project_id": project.id, "type": "data_entry_delay"})

    summary = service.summary()

    assert summary["total"] == 2
    assert summary["by_type"]["critical"] == 1
    assert summary["by_type"]["data_entry_delay"] == 1
    assert summary["by_delivery_status"]["pending"] == 2
    assert summary["oldest_pending"] is not None


class TestContent:

    def test_project_level_message(self):
        title, message = render_alert(AlertType.CRITICAL, "Harbour Wall")

        assert title == "Critical status"
        assert message == 'Project "Harbour Wall" has a critical status. Immediate action required.'

    def test_site_level_message(self):
        title, message = render_alert(AlertType.DATA_ENTRY_DELAY, "Harbour Wall", "Pier A")

        assert title == "Data entry delay - Pier A"
        assert 'site "Pier A" of project "Harbour Wall"' in message

    def test_recipients_are_deduplicated(self):
        project = Project(client_email="a@example.com", project_director_email=" a@example.com ",
                          mission_manager_email="", owner_email="b@example.com")

        assert resolve_recipients(project, "admin@example.com") == ("a@example.com", "b@example.com")

    def test_fallback_recipient(self):
        assert resolve_recipients(Project(), "admin@example.com") == ("admin@example.com",)
