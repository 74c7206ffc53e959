"""
SLA Application Layer
======================

The overdue ticket watchdog and its notification payload.
"""

from helpdesk.sla.application.services import (
    SLAWatchdog,
    overdue_report_event,
    SLA_OVERDUE,
)

__all__ = [
    "SLAWatchdog",
    "overdue_report_event",
    "SLA_OVERDUE",
]
