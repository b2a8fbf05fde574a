"""
Site Tracker

Monthly progress evaluation and alerting for construction sites:
status classification, demobilization staging, edge-triggered alert
obligations and their dispatch to a notification collaborator.
"""

__version__ = "0.1.0"
