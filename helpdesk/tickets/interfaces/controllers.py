"""
Ticket Controllers (API Routes)
================================

FastAPI routes for tickets and their comment threads.

Controllers are thin - they delegate to the ticket service (which commits
its own writes) and map entities to response models.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.identity.domain import Actor
from helpdesk.identity.infrastructure import SQLAlchemyUserRepository
from helpdesk.identity.interfaces import get_current_actor
from helpdesk.infrastructure.database import get_session
from helpdesk.shared.infrastructure.notifications import INotificationPublisher
from helpdesk.tickets.application import (
    CommentCreateRequest,
    CommentResponse,
    TicketCreateRequest,
    TicketResponse,
    TicketService,
    TicketUpdateRequest,
)
from helpdesk.tickets.infrastructure import (
    SQLAlchemyCommentRepository,
    SQLAlchemyTicketRepository,
)

router = APIRouter(prefix="/api/tickets", tags=["Tickets"])


# ========== Example payloads for Swagger ==========

TICKET_RESPONSE_EXAMPLE = {
    "id": 42,
    "title": "VPN não conecta",
    "content": "Desde hoje cedo a VPN recusa a conexão.",
    "priority": "P1",
    "status": "open",
    "requester_id": 7,
    "assignee_id": None,
    "created_at": "2024-01-15T10:00:00Z",
    "updated_at": "2024-01-15T10:00:00Z",
    "due_at": "2024-01-15T10:30:00Z",
    "requester": "Ana",
    "assignee": None
}

COMMENT_RESPONSE_EXAMPLE = {
    "id": 3,
    "ticket_id": 42,
    "author_id": 7,
    "content": "Reiniciei o roteador e continua.",
    "created_at": "2024-01-15T10:05:00Z",
    "author": "Ana"
}


# ========== Dependencies ==========

def get_notifier(request: Request) -> Optional[INotificationPublisher]:
    """Outbound notification channel started by the app lifespan."""
    return getattr(request.app.state, "notifier", None)


async def get_ticket_service(
    session: AsyncSession = Depends(get_session),
    notifier: Optional[INotificationPublisher] = Depends(get_notifier)
) -> TicketService:
    """Get ticket service instance."""
    return TicketService(
        SQLAlchemyTicketRepository(session),
        SQLAlchemyCommentRepository(session),
        SQLAlchemyUserRepository(session),
        notifier=notifier,
    )


# ========== Route Handlers ==========

@router.post(
    "",
    response_model=TicketResponse,
    summary="Open a ticket",
    description="""
    Opens a ticket for the authenticated user.

    **Priority / SLA window**: `P1` 30 minutes, `P2` 60 minutes, `P3` 8 hours (default).
    `due_at` is fixed at creation and never recalculated.
    """,
    responses={
        200: {"content": {"application/json": {"example": TICKET_RESPONSE_EXAMPLE}}},
        400: {"description": "Empty title/content or invalid priority"}
    }
)
async def create_ticket(
    request: TicketCreateRequest,
    actor: Actor = Depends(get_current_actor),
    service: TicketService = Depends(get_ticket_service)
):
    ticket = await service.create_ticket(actor, request.title, request.content, request.priority)
    return TicketResponse.from_entity(ticket)


@router.get(
    "",
    response_model=List[TicketResponse],
    summary="List visible tickets",
    description="Newest first, at most 100. Agents and admins see every ticket; requesters see their own."
)
async def list_tickets(
    actor: Actor = Depends(get_current_actor),
    service: TicketService = Depends(get_ticket_service)
):
    tickets = await service.list_tickets(actor)
    return [TicketResponse.from_entity(ticket) for ticket in tickets]


@router.get(
    "/{ticket_id}",
    response_model=TicketResponse,
    summary="Fetch one ticket",
    responses={403: {"description": "Not visible to this user"}, 404: {"description": "Não encontrado"}}
)
async def get_ticket(
    ticket_id: int,
    actor: Actor = Depends(get_current_actor),
    service: TicketService = Depends(get_ticket_service)
):
    return TicketResponse.from_entity(await service.get_ticket(actor, ticket_id))


@router.patch(
    "/{ticket_id}",
    response_model=TicketResponse,
    summary="Update status/assignee (agent/admin)",
    description="Partial update: omitted fields are left as they are. `assignee_id: null` unassigns.",
    responses={403: {"description": "Requesters cannot update tickets"}, 404: {"description": "Não encontrado"}}
)
async def update_ticket(
    ticket_id: int,
    request: TicketUpdateRequest,
    actor: Actor = Depends(get_current_actor),
    service: TicketService = Depends(get_ticket_service)
):
    ticket = await service.update_ticket(actor, ticket_id, request.changes())
    return TicketResponse.from_entity(ticket)


@router.get(
    "/{ticket_id}/comments",
    response_model=List[CommentResponse],
    summary="List comments",
    responses={200: {"content": {"application/json": {"example": [COMMENT_RESPONSE_EXAMPLE]}}}}
)
async def list_comments(
    ticket_id: int,
    actor: Actor = Depends(get_current_actor),
    service: TicketService = Depends(get_ticket_service)
):
    comments = await service.list_comments(actor, ticket_id)
    return [CommentResponse.from_entity(comment) async for comment in comments]


@router.post(
    "/{ticket_id}/comments",
    response_model=CommentResponse,
    summary="Add a comment",
    responses={200: {"content": {"application/json": {"example": COMMENT_RESPONSE_EXAMPLE}}}}
)
async def add_comment(
    ticket_id: int,
    request: CommentCreateRequest,
    actor: Actor = Depends(get_current_actor),
    service: TicketService = Depends(get_ticket_service)
):
    comment = await service.add_comment(actor, ticket_id, request.content)
    return CommentResponse.from_entity(comment)


# Export router for inclusion in main app
tickets_router = router
