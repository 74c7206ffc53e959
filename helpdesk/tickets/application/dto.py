"""
Ticket Application DTOs
========================

Data Transfer Objects for the ticket and comment endpoints.

Field names match what the web frontend reads (``requester_id``,
``due_at``, ``author``...). Request fields are optional so that the
service produces the validation messages.
"""

from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

from helpdesk.tickets.domain import Comment, Ticket


# ========== Type Aliases for Literals ==========
PriorityStr = Literal["P1", "P2", "P3"]
TicketStatusStr = Literal["open", "in_progress", "resolved", "closed"]


# ========== Request DTOs ==========

class TicketCreateRequest(BaseModel):
    """Request model for opening a ticket."""
    title: Optional[str] = Field(None, description="Short summary")
    content: Optional[str] = Field(None, description="Problem description")
    priority: Optional[str] = Field("P3", description="P1 (30 min), P2 (60 min) or P3 (8 h)")


class TicketUpdateRequest(BaseModel):
    """
    Partial update. Only fields present in the body are applied;
    ``assignee_id: null`` unassigns the ticket.
    """
    status: Optional[str] = Field(None, description="open, in_progress, resolved or closed")
    assignee_id: Optional[int] = Field(None, description="User id of the new assignee")

    def changes(self) -> Dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class CommentCreateRequest(BaseModel):
    """Request model for adding a comment."""
    content: Optional[str] = None


# ========== Response DTOs ==========

class TicketResponse(BaseModel):
    """Ticket as returned by the API."""
    id: int
    title: str
    content: str
    priority: PriorityStr
    status: TicketStatusStr
    requester_id: int
    assignee_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    due_at: datetime
    requester: Optional[str] = Field(None, description="Requester display name (listings)")
    assignee: Optional[str] = Field(None, description="Assignee display name (listings)")

    @classmethod
    def from_entity(cls, ticket: Ticket) -> "TicketResponse":
        return cls(
            id=ticket.id,
            title=ticket.title,
            content=ticket.content,
            priority=ticket.priority.value,
            status=ticket.status.value,
            requester_id=ticket.requester_id,
            assignee_id=ticket.assignee_id,
            created_at=ticket.created_at,
            updated_at=ticket.updated_at,
            due_at=ticket.due_at,
            requester=ticket.requester_name,
            assignee=ticket.assignee_name,
        )


class CommentResponse(BaseModel):
    """Comment as returned by the API."""
    id: int
    ticket_id: int
    author_id: int
    content: str
    created_at: datetime
    author: Optional[str] = Field(None, description="Author display name")

    @classmethod
    def from_entity(cls, comment: Comment) -> "CommentResponse":
        return cls(
            id=comment.id,
            ticket_id=comment.ticket_id,
            author_id=comment.author_id,
            content=comment.content,
            created_at=comment.created_at,
            author=comment.author_name,
        )
