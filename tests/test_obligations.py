from datetime import date

import pytest

from site_tracker.alerts import (
    build_alert_obligations,
    build_data_entry_delay_obligation,
    build_demobilization_obligations,
    evaluate_status_sequence,
    should_alert
)
from site_tracker.core import AlertDeliveryStatus, AlertType, MonthlyProgressRecord, ProgressStatus
from site_tracker.evaluation import DemobilizationEvaluation

GOOD = ProgressStatus.GOOD
PROBLEMATIC = ProgressStatus.PROBLEMATIC
CRITICAL = ProgressStatus.CRITICAL


def record(monthly, status=GOOD):
    return MonthlyProgressRecord(site_id="site-1", month="2026-03",
                                 monthly_progress=monthly, status=status)


def test_sequence_fires_only_on_transitions_into_actionable_states():
    assert evaluate_status_sequence([GOOD, PROBLEMATIC, CRITICAL, CRITICAL, GOOD]) == [1, 2]


def test_sequence_accepts_plain_strings():
    assert evaluate_status_sequence(["critical", "critical", "good", "problematic"]) == [0, 3]


@pytest.mark.parametrize("new, previous, expected", [
    (CRITICAL, None, True),
    (PROBLEMATIC, None, True),
    (GOOD, None, False),
    (CRITICAL, CRITICAL, False),
    (PROBLEMATIC, CRITICAL, True),
    (CRITICAL, PROBLEMATIC, True),
    (GOOD, CRITICAL, False),
    (CRITICAL, "unknown", True),
])
def test_should_alert(new, previous, expected):
    assert should_alert(new, previous) is expected


class TestBuildAlertObligations:

    def test_first_critical_observation_alerts(self, project, site, thresholds):
        alerts = build_alert_obligations(record(10), None, project, site, thresholds)

        assert len(alerts) == 1
        alert = alerts[0]
        assert alert.type == AlertType.CRITICAL
        assert alert.project_id == project.id
        assert alert.site_id == site.id
        assert alert.month == "2026-03"
        assert alert.delivery_status == AlertDeliveryStatus.PENDING
        assert "Pier A" in alert.title

    def test_first_good_observation_is_silent(self, project, site, thresholds):
        assert build_alert_obligations(record(80), None, project, site, thresholds) == []

    def test_unchanged_critical_is_silent(self, project, site, thresholds):
        assert build_alert_obligations(record(10), CRITICAL, project, site, thresholds) == []

    def test_transition_into_problematic(self, project, site, thresholds):
        alerts = build_alert_obligations(record(35), GOOD, project, site, thresholds)

        assert [a.type for a in alerts] == [AlertType.PROBLEMATIC]

    def test_transition_into_good_is_silent(self, project, site, thresholds):
        assert build_alert_obligations(record(70), CRITICAL, project, site, thresholds) == []

    def test_stored_status_is_ignored(self, project, site, thresholds):
        stale = record(10, status=GOOD)

        alerts = build_alert_obligations(stale, GOOD, project, site, thresholds)

        assert [a.type for a in alerts] == [AlertType.CRITICAL]

    def test_recipients_come_from_project(self, project, site, thresholds):
        alert = build_alert_obligations(record(10), None, project, site, thresholds)[0]

        assert alert.recipients == (
            "client@example.com",
            "director@example.com",
            "manager@example.com",
            "owner@example.com",
        )


class TestDemobilizationObligations:

    def test_entering_stage_two(self, project, site):
        evaluation = DemobilizationEvaluation(stage=2, alert_type=AlertType.PRE_DEMOBILIZATION)

        alerts = build_demobilization_obligations(evaluation, 1, project, site)

        assert [a.type for a in alerts] == [AlertType.PRE_DEMOBILIZATION]

    def test_entering_demobilization(self, project, site):
        evaluation = DemobilizationEvaluation(stage=3, demobilized=True,
                                              alert_type=AlertType.DEMOBILIZATION)

        alerts = build_demobilization_obligations(evaluation, 2, project, site)

        assert [a.type for a in alerts] == [AlertType.DEMOBILIZATION]

    def test_unchanged_stage_is_silent(self, project, site):
        evaluation = DemobilizationEvaluation(stage=2, alert_type=AlertType.PRE_DEMOBILIZATION)

        assert build_demobilization_obligations(evaluation, 2, project, site) == []

    def test_stage_three_to_four_is_silent(self, project, site):
        evaluation = DemobilizationEvaluation(stage=4, demobilized=True,
                                              alert_type=AlertType.DEMOBILIZATION)

        assert build_demobilization_obligations(evaluation, 3, project, site) == []

    def test_stage_one_is_left_to_status_alerts(self, project, site):
        evaluation = DemobilizationEvaluation(stage=1, alert_type=AlertType.PROBLEMATIC)

        assert build_demobilization_obligations(evaluation, 0, project, site) == []


class TestDataEntryDelayObligation:

    def test_quiet_site_alerts(self, project, site):
        alerts = build_data_entry_delay_obligation(
            date(2026, 1, 1), date(2026, 3, 1), project, site, threshold_days=35
        )

        assert [a.type for a in alerts] == [AlertType.DATA_ENTRY_DELAY]

    def test_recent_entry_is_silent(self, project, site):
        assert build_data_entry_delay_obligation(
            date(2026, 2, 20), date(2026, 3, 1), project, site, threshold_days=35
        ) == []
