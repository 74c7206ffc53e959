"""
Ticket Application Services
============================

Application services orchestrate business logic and coordinate between
domain entities and repositories.

Every operation asks the access policy first, using the actor handed in
by the auth layer and the ticket's state as read in this same call.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, AsyncIterator, Callable, List, Mapping, Optional

from helpdesk.config import (
    DEFAULT_PRIORITY,
    TICKET_LIST_LIMIT,
    VALID_PRIORITIES,
    VALID_STATUSES,
    Priority,
    TicketStatus,
)
from helpdesk.core import (
    AuthorizationException,
    InternalServiceException,
    RepositoryException,
    ResourceNotFoundException,
    ValidationException,
)
from helpdesk.identity.application import IUserRepository
from helpdesk.identity.domain import Actor
from helpdesk.infrastructure.database import utc_now
from helpdesk.shared.infrastructure.logging import get_logger
from helpdesk.shared.infrastructure.notifications import INotificationPublisher
from helpdesk.tickets.application.events import ticket_created_event
from helpdesk.tickets.domain import (
    Comment,
    SLACalculator,
    Ticket,
    can_list_all,
    can_update,
    can_view,
)

logger = get_logger(__name__)

Clock = Callable[[], datetime]


# ========== Repository Interfaces (Dependency Inversion) ==========

class ITicketRepository(ABC):
    """Interface for ticket data access."""

    @abstractmethod
    async def create(
        self,
        title: str,
        content: str,
        priority: Priority,
        requester_id: int,
        created_at: datetime,
        due_at: datetime
    ) -> Ticket:
        """Insert a new open, unassigned ticket."""

    @abstractmethod
    async def get_by_id(self, ticket_id: int) -> Optional[Ticket]:
        """Get ticket by id."""

    @abstractmethod
    async def list_recent(
        self,
        requester_id: Optional[int] = None,
        limit: int = TICKET_LIST_LIMIT
    ) -> List[Ticket]:
        """Newest first, with requester/assignee display names."""

    @abstractmethod
    async def apply_update(self, ticket_id: int, values: Mapping[str, Any]) -> Optional[Ticket]:
        """Apply a column patch in one statement. None if the ticket is missing."""

    @abstractmethod
    async def list_overdue(self, now: datetime) -> List[Ticket]:
        """Open/in-progress tickets whose due_at is before ``now``."""

    @abstractmethod
    async def commit(self) -> None:
        """Make pending writes durable. Raises RepositoryException."""


class ICommentRepository(ABC):
    """Interface for comment data access."""

    @abstractmethod
    async def create(
        self,
        ticket_id: int,
        author_id: int,
        content: str,
        created_at: datetime
    ) -> Comment:
        """Append a comment."""

    @abstractmethod
    def iter_for_ticket(self, ticket_id: int) -> AsyncIterator[Comment]:
        """Oldest first, with author display names. Reads when iterated."""

    @abstractmethod
    async def commit(self) -> None:
        """Make pending writes durable. Raises RepositoryException."""


# ========== Application Services ==========

class TicketService:
    """
    Ticket lifecycle: creation, listing, lookup and triage updates.

    Also owns the comment thread, since comment access is ticket access.
    """

    def __init__(
        self,
        ticket_repository: ITicketRepository,
        comment_repository: ICommentRepository,
        user_repository: IUserRepository,
        notifier: Optional[INotificationPublisher] = None,
        clock: Clock = utc_now
    ):
        self._tickets = ticket_repository
        self._comments = comment_repository
        self._users = user_repository
        self._notifier = notifier
        self._clock = clock

    # ---------- Tickets ----------

    async def create_ticket(
        self,
        actor: Actor,
        title: Optional[str],
        content: Optional[str],
        priority: Optional[str] = DEFAULT_PRIORITY.value
    ) -> Ticket:
        """
        Open a ticket on behalf of the actor.

        The due-by instant is fixed here from the priority and never
        recomputed. The ticket is committed before the creation notification
        is published; the notification itself is best effort.

        Raises:
            ValidationException: Empty title/content or unknown priority
            InternalServiceException: The ticket could not be stored
        """
        if not title or not title.strip() or not content or not content.strip():
            raise ValidationException("Título e descrição são obrigatórios")
        if priority is None:
            priority = DEFAULT_PRIORITY.value
        if priority not in VALID_PRIORITIES:
            raise ValidationException("Prioridade inválida")

        now = self._clock()
        try:
            ticket = await self._tickets.create(
                title=title,
                content=content,
                priority=Priority(priority),
                requester_id=actor.id,
                created_at=now,
                due_at=SLACalculator.calculate_due_at(now, Priority(priority)),
            )
            await self._tickets.commit()
        except RepositoryException as e:
            logger.error("Ticket creation failed", extra={"requester_id": actor.id, "error": str(e)})
            raise InternalServiceException("Erro ao criar chamado")

        logger.info(
            "Ticket created",
            extra={"ticket_id": ticket.id, "priority": ticket.priority.value, "requester_id": actor.id}
        )
        self._notify_created(ticket)
        return ticket

    async def list_tickets(self, actor: Actor) -> List[Ticket]:
        """Staff see every ticket; requesters see their own."""
        requester_id = None if can_list_all(actor) else actor.id
        return await self._tickets.list_recent(requester_id=requester_id, limit=TICKET_LIST_LIMIT)

    async def get_ticket(self, actor: Actor, ticket_id: int) -> Ticket:
        """
        Raises:
            ResourceNotFoundException: No such ticket
            AuthorizationException: Actor may not see it
        """
        ticket = await self._tickets.get_by_id(ticket_id)
        if ticket is None:
            raise ResourceNotFoundException("Ticket", ticket_id)
        if not can_view(actor, ticket):
            raise AuthorizationException()
        return ticket

    async def update_ticket(self, actor: Actor, ticket_id: int, changes: Mapping[str, Any]) -> Ticket:
        """
        Triage a ticket: change its status and/or assignee.

        Only keys present in ``changes`` are written. Any status may follow
        any other.

        Raises:
            AuthorizationException: Actor is not agent/admin
            ValidationException: Unknown status or assignee
            ResourceNotFoundException: No such ticket
        """
        if not can_update(actor):
            raise AuthorizationException()

        values: dict = {}

        status = changes.get("status")
        if status is not None:
            if status not in VALID_STATUSES:
                raise ValidationException("Status inválido")
            values["status"] = TicketStatus(status).value

        if "assignee_id" in changes:
            assignee_id = changes["assignee_id"]
            if assignee_id is not None and not await self._users.exists(assignee_id):
                raise ValidationException("Responsável inválido")
            values["assignee_id"] = assignee_id

        values["updated_at"] = self._clock()

        ticket = await self._tickets.apply_update(ticket_id, values)
        if ticket is None:
            raise ResourceNotFoundException("Ticket", ticket_id)
        await self._commit(self._tickets, "Ticket update failed")

        logger.info(
            "Ticket updated",
            extra={"ticket_id": ticket_id, "actor_id": actor.id, "fields": sorted(values)}
        )
        return ticket

    # ---------- Comments ----------

    async def list_comments(self, actor: Actor, ticket_id: int) -> AsyncIterator[Comment]:
        """
        Comment thread of a visible ticket, oldest first.

        Access is checked now; the returned iterator reads the thread when
        consumed and can be obtained again for a fresh read.
        """
        await self.get_ticket(actor, ticket_id)
        return self._comments.iter_for_ticket(ticket_id)

    async def add_comment(self, actor: Actor, ticket_id: int, content: Optional[str]) -> Comment:
        """Any actor who can see the ticket may comment on it."""
        if not content or not content.strip():
            raise ValidationException("Comentário vazio")

        await self.get_ticket(actor, ticket_id)

        comment = await self._comments.create(
            ticket_id=ticket_id,
            author_id=actor.id,
            content=content,
            created_at=self._clock(),
        )
        await self._commit(self._comments, "Comment creation failed")
        logger.info("Comment added", extra={"ticket_id": ticket_id, "comment_id": comment.id})
        return comment

    # ---------- Helpers ----------

    async def _commit(self, repository, failure: str) -> None:
        try:
            await repository.commit()
        except RepositoryException as e:
            logger.error(failure, extra={"error": str(e)})
            raise InternalServiceException("Erro interno")

    def _notify_created(self, ticket: Ticket) -> None:
        if self._notifier is None:
            return
        try:
            self._notifier.publish(ticket_created_event(ticket))
        except Exception as e:
            logger.warning(
                "Could not publish ticket notification",
                extra={"ticket_id": ticket.id, "error": str(e)}
            )
