"""
Ticket Application Layer
=========================

Contains:
- Services: ticket lifecycle and comment thread use cases
- DTOs: request/response models for the API layer
- Events: outbound notification payloads

This layer depends on the domain layer and repository interfaces,
but not on concrete infrastructure implementations.
"""

from helpdesk.tickets.application.dto import (
    TicketCreateRequest,
    TicketUpdateRequest,
    CommentCreateRequest,
    TicketResponse,
    CommentResponse,
)
from helpdesk.tickets.application.events import ticket_created_event, TICKET_CREATED
from helpdesk.tickets.application.services import (
    TicketService,
    ITicketRepository,
    ICommentRepository,
)

__all__ = [
    # DTOs
    "TicketCreateRequest",
    "TicketUpdateRequest",
    "CommentCreateRequest",
    "TicketResponse",
    "CommentResponse",
    # Events
    "ticket_created_event",
    "TICKET_CREATED",
    # Services
    "TicketService",
    # Repository Interfaces
    "ITicketRepository",
    "ICommentRepository",
]
