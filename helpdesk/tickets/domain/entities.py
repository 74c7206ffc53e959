"""
Ticket Domain Entities
=======================

Pure Python domain entities for tickets and their comment threads.

Following Domain-Driven Design principles, these entities contain
business logic and are free of infrastructure concerns.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from helpdesk.config import Priority, TicketStatus, ACTIVE_STATUSES


@dataclass
class Ticket:
    """
    Support ticket.

    ``requester_id`` and ``due_at`` are fixed at creation. Only status and
    assignee change afterwards.
    """

    id: int
    title: str
    content: str
    priority: Priority
    status: TicketStatus
    requester_id: int
    created_at: datetime
    updated_at: datetime
    due_at: datetime
    assignee_id: Optional[int] = None

    # Display names, filled in by listing queries only
    requester_name: Optional[str] = None
    assignee_name: Optional[str] = None

    def __post_init__(self):
        if self.due_at < self.created_at:
            raise ValueError("due_at cannot be before created_at")

    @property
    def is_active(self) -> bool:
        """Open or in progress, i.e. still counting against its SLA."""
        return self.status.value in ACTIVE_STATUSES

    def is_overdue(self, now: datetime) -> bool:
        return self.is_active and self.due_at < now


@dataclass
class Comment:
    """Remark on a ticket. Comments are never edited or deleted."""

    id: int
    ticket_id: int
    author_id: int
    content: str
    created_at: datetime
    author_name: Optional[str] = None
