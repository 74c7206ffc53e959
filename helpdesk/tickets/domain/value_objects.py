"""
Ticket Value Objects
=====================

Priority to due-by deadline calculation.
"""

from datetime import datetime, timedelta

from helpdesk.config import Priority, SLA_WINDOWS


class SLACalculator:
    """
    Pure functions for SLA calculations.

    The window per priority is fixed policy (``SLA_WINDOWS``); callers
    cannot pass their own.
    """

    @staticmethod
    def window_for(priority: Priority) -> timedelta:
        return SLA_WINDOWS[Priority(priority)]

    @staticmethod
    def calculate_due_at(created_at: datetime, priority: Priority) -> datetime:
        """
        Calculate the due-by instant for a ticket.

        Args:
            created_at: When the ticket was created
            priority: Ticket priority

        Returns:
            created_at plus the priority's SLA window
        """
        return created_at + SLACalculator.window_for(priority)
