"""
Alert content templates and recipient resolution.
"""

from typing import Optional

from ..core.entities import AlertType, Project


TYPE_LABELS = {
    AlertType.DATA_ENTRY_DELAY: "Data entry delay",
    AlertType.PROBLEMATIC: "Problematic status",
    AlertType.CRITICAL: "Critical status",
    AlertType.PRE_DEMOBILIZATION: "Pre-demobilization",
    AlertType.DEMOBILIZATION: "Demobilization",
}


def alert_label(alert_type: AlertType) -> str:
    return TYPE_LABELS.get(alert_type, "Alert")


def _subject(project_name: str, site_name: str) -> str:
    if site_name:
        return f'Site "{site_name}" of project "{project_name}"'
    return f'Project "{project_name}"'


def render_alert(
    alert_type: AlertType,
    project_name: str,
    site_name: Optional[str] = None,
    custom_message: Optional[str] = None
) -> tuple[str, str]:
    """Build the (title, message) of an alert."""
    site_name = site_name or ""
    suffix = f" - {site_name}" if site_name else ""
    title = f"{alert_label(alert_type)}{suffix}"

    if custom_message:
        return title, custom_message

    subject = _subject(project_name, site_name)
    if alert_type == AlertType.DATA_ENTRY_DELAY:
        message = f"Progress data for {subject[0].lower()}{subject[1:]} was not entered on time."
    elif alert_type == AlertType.PROBLEMATIC:
        message = f"{subject} has a problematic status and needs particular attention."
    elif alert_type == AlertType.CRITICAL:
        message = f"{subject} has a critical status. Immediate action required."
    elif alert_type == AlertType.PRE_DEMOBILIZATION:
        message = (
            f"{subject} is in pre-demobilization. "
            "Immediate action required to avoid demobilization."
        )
    elif alert_type == AlertType.DEMOBILIZATION:
        message = f"{subject} must be demobilized due to repeated delays."
    else:
        message = f"Alert raised for {subject[0].lower()}{subject[1:]}."

    return title, message


def resolve_recipients(project: Project, fallback: str) -> tuple[str, ...]:
    """
    Project contact emails, blanks dropped and duplicates removed in order.
    Falls back to a single address when the project has none.
    """
    candidates = [
        project.client_email,
        project.project_director_email,
        project.mission_manager_email,
        project.owner_email,
    ]

    recipients = []
    for email in candidates:
        email = (email or "").strip()
        if email and email not in recipients:
            recipients.append(email)

    if not recipients:
        recipients.append(fallback)

    return tuple(recipients)
