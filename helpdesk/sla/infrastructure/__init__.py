"""
SLA Infrastructure Layer
=========================

- External: APScheduler wrapper running the watchdog
"""

from helpdesk.sla.infrastructure.external import SLAScheduler

__all__ = ["SLAScheduler"]
