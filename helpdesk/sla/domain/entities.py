"""
SLA Domain Entities
====================

What the watchdog reports about a ticket past its due-by instant.
"""

from dataclasses import dataclass
from datetime import datetime

from helpdesk.config import Priority
from helpdesk.shared.infrastructure.notifications import format_timestamp
from helpdesk.tickets.domain import Ticket


@dataclass(frozen=True)
class OverdueTicket:
    """
    One breached ticket, as seen by a single sweep.

    Sweeps keep no memory: the same ticket shows up again on every sweep
    until its status leaves open/in_progress.
    """

    ticket_id: int
    title: str
    priority: Priority
    due_at: datetime

    @classmethod
    def from_ticket(cls, ticket: Ticket) -> "OverdueTicket":
        return cls(
            ticket_id=ticket.id,
            title=ticket.title,
            priority=ticket.priority,
            due_at=ticket.due_at,
        )

    def summary_line(self) -> str:
        return f"#{self.ticket_id} {self.title} ({self.priority.value}) vencido às {format_timestamp(self.due_at)}"
