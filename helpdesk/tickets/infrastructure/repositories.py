"""
Ticket Infrastructure Repositories
===================================

Concrete implementations of the ticket and comment repository interfaces
using SQLAlchemy.

Updates are single UPDATE statements; there is no read-modify-write in
application code, so concurrent patches to one ticket are serialized by
the database row lock.
"""

from datetime import datetime
from typing import Any, AsyncIterator, List, Mapping, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from helpdesk.config import ACTIVE_STATUSES, TICKET_LIST_LIMIT, Priority, TicketStatus
from helpdesk.core import RepositoryException
from helpdesk.identity.infrastructure.models import UserModel
from helpdesk.tickets.application import ICommentRepository, ITicketRepository
from helpdesk.tickets.domain import Comment, Ticket
from helpdesk.tickets.infrastructure.models import CommentModel, TicketModel


def _ticket_to_entity(
    model: TicketModel,
    requester_name: Optional[str] = None,
    assignee_name: Optional[str] = None
) -> Ticket:
    return Ticket(
        id=model.id,
        title=model.title,
        content=model.content,
        priority=Priority(model.priority),
        status=TicketStatus(model.status),
        requester_id=model.requester_id,
        assignee_id=model.assignee_id,
        created_at=model.created_at,
        updated_at=model.updated_at,
        due_at=model.due_at,
        requester_name=requester_name,
        assignee_name=assignee_name,
    )


async def _commit(session: AsyncSession) -> None:
    try:
        await session.commit()
    except SQLAlchemyError as e:
        await session.rollback()
        raise RepositoryException(f"Could not commit: {e}")


def _comment_to_entity(model: CommentModel, author_name: Optional[str] = None) -> Comment:
    return Comment(
        id=model.id,
        ticket_id=model.ticket_id,
        author_id=model.author_id,
        content=model.content,
        created_at=model.created_at,
        author_name=author_name,
    )


class SQLAlchemyTicketRepository(ITicketRepository):
    """
    SQLAlchemy implementation of ticket repository.

    Handles persistence of Ticket entities using async SQLAlchemy.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(
        self,
        title: str,
        content: str,
        priority: Priority,
        requester_id: int,
        created_at: datetime,
        due_at: datetime
    ) -> Ticket:
        model = TicketModel(
            title=title,
            content=content,
            priority=priority.value,
            status=TicketStatus.OPEN.value,
            requester_id=requester_id,
            assignee_id=None,
            created_at=created_at,
            updated_at=created_at,
            due_at=due_at,
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise RepositoryException(f"Could not insert ticket: {e}")

        return _ticket_to_entity(model)

    async def get_by_id(self, ticket_id: int) -> Optional[Ticket]:
        model = await self._session.get(TicketModel, ticket_id, populate_existing=True)
        return _ticket_to_entity(model) if model else None

    async def list_recent(
        self,
        requester_id: Optional[int] = None,
        limit: int = TICKET_LIST_LIMIT
    ) -> List[Ticket]:
        requester = aliased(UserModel)
        assignee = aliased(UserModel)

        stmt = (
            select(TicketModel, requester.name, assignee.name)
            .outerjoin(requester, requester.id == TicketModel.requester_id)
            .outerjoin(assignee, assignee.id == TicketModel.assignee_id)
        )
        if requester_id is not None:
            stmt = stmt.where(TicketModel.requester_id == requester_id)

        stmt = stmt.order_by(TicketModel.created_at.desc(), TicketModel.id.desc()).limit(limit)

        result = await self._session.execute(stmt)
        return [
            _ticket_to_entity(model, requester_name, assignee_name)
            for model, requester_name, assignee_name in result.all()
        ]

    async def apply_update(self, ticket_id: int, values: Mapping[str, Any]) -> Optional[Ticket]:
        stmt = (
            update(TicketModel)
            .where(TicketModel.id == ticket_id)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            return None

        return await self.get_by_id(ticket_id)

    async def list_overdue(self, now: datetime) -> List[Ticket]:
        stmt = (
            select(TicketModel)
            .where(TicketModel.status.in_(ACTIVE_STATUSES))
            .where(TicketModel.due_at < now)
            .order_by(TicketModel.due_at.asc(), TicketModel.id.asc())
        )
        result = await self._session.execute(stmt)
        return [_ticket_to_entity(model) for model in result.scalars().all()]

    async def commit(self) -> None:
        await _commit(self._session)


class SQLAlchemyCommentRepository(ICommentRepository):
    """
    SQLAlchemy implementation of comment repository.

    Comments are insert-only.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(
        self,
        ticket_id: int,
        author_id: int,
        content: str,
        created_at: datetime
    ) -> Comment:
        model = CommentModel(
            ticket_id=ticket_id,
            author_id=author_id,
            content=content,
            created_at=created_at,
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise RepositoryException(f"Could not insert comment: {e}")

        return _comment_to_entity(model)

    async def iter_for_ticket(self, ticket_id: int) -> AsyncIterator[Comment]:
        stmt = (
            select(CommentModel, UserModel.name)
            .outerjoin(UserModel, UserModel.id == CommentModel.author_id)
            .where(CommentModel.ticket_id == ticket_id)
            .order_by(CommentModel.created_at.asc(), CommentModel.id.asc())
        )
        result = await self._session.execute(stmt)
        for model, author_name in result.all():
            yield _comment_to_entity(model, author_name)

    async def commit(self) -> None:
        await _commit(self._session)
