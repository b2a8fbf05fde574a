#!/usr/bin/env python3
"""
Site Tracker - Main Demo

This script walks through the progress evaluation and alerting flow:
1. Status classification thresholds
2. Monthly progress writes with edge-triggered alerts
3. Demobilization staging
4. Manual alerts and dispatch
"""

from datetime import datetime

from site_tracker.alerts import LoggingNotifier, evaluate_status_sequence
from site_tracker.config import configure_logging, get_settings
from site_tracker.core import Project, ProgressStatus, Site
from site_tracker.evaluation import classify
from site_tracker.storage import InMemoryProgressStore
from site_tracker.tracker import ProgressTracker


def run_classification_demo():
    """Show the status bands."""
    print("=" * 60)
    print("STATUS CLASSIFICATION")
    print("=" * 60)
    print()

    thresholds = get_settings().thresholds
    print(f"  critical below {thresholds.critical_below:.0f}%, "
          f"problematic below {thresholds.problematic_below:.0f}%")
    print()
    print(f"{'Monthly progress':<20} {'Status':<12}")
    print("-" * 32)
    for value in [None, -5, 0, 29.9, 30, 49.9, 50, 100, 120]:
        print(f"{str(value):<20} {classify(value).value:<12}")
    print()

    sequence = [
        ProgressStatus.GOOD,
        ProgressStatus.PROBLEMATIC,
        ProgressStatus.CRITICAL,
        ProgressStatus.CRITICAL,
        ProgressStatus.GOOD
    ]
    print("Edge-triggered alerts for", [s.value for s in sequence])
    print("  fire at indices:", evaluate_status_sequence(sequence))
    print()


def run_tracking_demo():
    """Record a few months for two sites and show the alerts produced."""
    print("=" * 60)
    print("PROGRESS TRACKING")
    print("=" * 60)
    print()

    store = InMemoryProgressStore()
    notifier = LoggingNotifier()
    tracker = ProgressTracker(store, notifier)

    project = store.save_project(Project(
        name="Ring Road Extension",
        owner_name="Public Works",
        client_email="client@example.com",
        project_director_email="director@example.com",
        mission_manager_email="manager@example.com"
    ))
    north = store.save_site(Site(project_id=project.id, name="North Interchange"))
    south = store.save_site(Site(project_id=project.id, name="South Bridge"))

    entries = [
        (north, "2026-01", 55.0, 12.5),
        (north, "2026-02", 35.0, 25.0),
        (south, "2026-01", 20.0, 12.5),
        (south, "2026-02", 5.0, 25.0),
        (south, "2026-03", 2.0, 37.5),
    ]

    print(f"{'Site':<20} {'Month':<9} {'Monthly':<9} {'Total':<9} {'Status':<12} {'Alerts'}")
    print("-" * 72)
    for site, month, monthly, target in entries:
        result = tracker.submit_progress({
            "site_id": site.id,
            "month": month,
            "monthly_progress": monthly,
            "target_rate": target
        })
        record = result.write.record
        alert_types = ", ".join(a.type.value for a in result.alerts) or "-"
        print(f"{site.name:<20} {month:<9} {record.monthly_progress:<9.1f} "
              f"{record.total_progress:<9.1f} {record.status.value:<12} {alert_types}")
    print()

    for site in (north, south):
        evaluation = tracker.evaluate_site(site.id)
        print(f"{site.name}: demobilization stage {evaluation.demobilization.stage}"
              f" ({evaluation.demobilization.label or 'none'})")
    print()

    summary = tracker.evaluate_project(project.id)
    print(f"Project summary: {summary.good_sites} good, {summary.problematic_sites} problematic, "
          f"{summary.critical_sites} critical, average total {summary.average_progress}%")
    print()

    return tracker, project, notifier


def run_alert_demo(tracker, project, notifier):
    """Create a manual alert, sweep for quiet sites and dispatch."""
    print("=" * 60)
    print("ALERTS")
    print("=" * 60)
    print()

    alert = tracker.alerts.create_manual_alert({
        "project_id": project.id,
        "type": "critical",
        "custom_message": "Site visit scheduled for next Monday."
    })
    print(f"Manual alert: {alert.title} -> {', '.join(alert.recipients)}")

    quiet = tracker.check_data_entry_delays(now=datetime(2026, 6, 15))
    print(f"Data entry delay alerts: {len(quiet)}")

    counts = tracker.alerts.dispatch_pending()
    print(f"Dispatched: {counts['sent']} sent, {counts['failed']} failed")
    print()

    summary = tracker.alerts.summary()
    for alert_type, count in summary["by_type"].items():
        print(f"  {alert_type:<20} {count}")
    print()


def main():
    """Main entry point."""
    configure_logging()

    print()
    print("+" + "=" * 58 + "+")
    print("|            SITE TRACKER DEMONSTRATION                    |")
    print("+" + "=" * 58 + "+")
    print()

    run_classification_demo()
    tracker, project, notifier = run_tracking_demo()
    run_alert_demo(tracker, project, notifier)

    print("=" * 60)
    print("DEMONSTRATION COMPLETE")
    print("=" * 60)
    print()


if __name__ == "__main__":
    main()
