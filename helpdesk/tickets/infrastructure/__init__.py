"""
Ticket Infrastructure Layer
============================

Infrastructure implementations for tickets:
- Models: SQLAlchemy ORM models
- Repositories: Data access layer
"""

from helpdesk.tickets.infrastructure.models import TicketModel, CommentModel
from helpdesk.tickets.infrastructure.repositories import (
    SQLAlchemyTicketRepository,
    SQLAlchemyCommentRepository,
)

__all__ = [
    "TicketModel",
    "CommentModel",
    "SQLAlchemyTicketRepository",
    "SQLAlchemyCommentRepository",
]
