"""
SLA Domain Layer
================

Domain layer for the overdue ticket watchdog.

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from helpdesk.sla.domain.entities import OverdueTicket

__all__ = ["OverdueTicket"]
