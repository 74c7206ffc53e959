"""
Ticket Notification Events
===========================

Builds the outbound event announcing a new ticket.
"""

from helpdesk.shared.infrastructure.notifications import (
    COLOR_INFO,
    NotificationEvent,
    format_timestamp,
)
from helpdesk.tickets.domain import Ticket

TICKET_CREATED = "ticket_created"


def ticket_created_event(ticket: Ticket) -> NotificationEvent:
    return NotificationEvent(
        kind=TICKET_CREATED,
        title=f"Novo chamado {ticket.priority.value}: {ticket.title}",
        text=f"{ticket.content}\n\nSLA até: {format_timestamp(ticket.due_at)}",
        summary="Novo chamado",
        theme_color=COLOR_INFO,
        fields={
            "id": ticket.id,
            "title": ticket.title,
            "priority": ticket.priority.value,
            "content": ticket.content,
            "due_at": ticket.due_at.isoformat(),
        },
    )
