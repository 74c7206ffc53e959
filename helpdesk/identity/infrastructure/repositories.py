"""
Identity Infrastructure Repositories
=====================================

SQLAlchemy implementation of the user repository.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.config import Role
from helpdesk.core import ValidationException
from helpdesk.identity.application import IUserRepository
from helpdesk.identity.domain import User
from helpdesk.identity.infrastructure.models import UserModel


def _to_entity(model: UserModel) -> User:
    return User(
        id=model.id,
        email=model.email,
        name=model.name,
        password_hash=model.password_hash,
        role=Role(model.role),
        created_at=model.created_at,
    )


class SQLAlchemyUserRepository(IUserRepository):
    """Handles persistence of User entities using async SQLAlchemy."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, user_id: int) -> Optional[User]:
        model = await self._session.get(UserModel, user_id)
        return _to_entity(model) if model else None

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(UserModel).where(UserModel.email == email)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return _to_entity(model) if model else None

    async def exists(self, user_id: int) -> bool:
        stmt = select(UserModel.id).where(UserModel.id == user_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def create(self, email: str, name: str, password_hash: str, role: Role) -> User:
        model = UserModel(email=email, name=name, password_hash=password_hash, role=role.value)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration for the same e-mail
            await self._session.rollback()
            raise ValidationException("E-mail já cadastrado")
        return _to_entity(model)
