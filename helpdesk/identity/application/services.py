"""
Identity Application Services
==============================

Registration, login and profile lookup.

Credential hashing and token signing are collaborators behind small
interfaces so the service stays free of crypto details.
"""

from abc import ABC, abstractmethod
from typing import Optional

from helpdesk.config import Role, settings
from helpdesk.core import (
    AuthenticationException,
    ResourceNotFoundException,
    ValidationException,
)
from helpdesk.identity.domain import Actor, User
from helpdesk.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

INVALID_CREDENTIALS = "Credenciais inválidas"


# ========== Interfaces (Dependency Inversion) ==========

class IUserRepository(ABC):
    """Interface for user data access."""

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by id."""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by e-mail."""

    @abstractmethod
    async def exists(self, user_id: int) -> bool:
        """Check whether a user id exists."""

    @abstractmethod
    async def create(self, email: str, name: str, password_hash: str, role: Role) -> User:
        """Insert a new user. Raises ValidationException on duplicate e-mail."""


class IPasswordHasher(ABC):
    """Interface for password hashing."""

    @abstractmethod
    def hash(self, password: str) -> str:
        """Hash a plain-text password."""

    @abstractmethod
    def verify(self, password: str, password_hash: str) -> bool:
        """Check a plain-text password against a stored hash."""


class ITokenService(ABC):
    """Interface for session token issuance and validation."""

    @abstractmethod
    def issue(self, user: User) -> str:
        """Issue a session token for a user."""

    @abstractmethod
    def verify(self, token: str) -> Actor:
        """Decode a token into an actor. Raises AuthenticationException."""


# ========== Application Services ==========

class IdentityService:
    """Service for account registration and authentication."""

    def __init__(
        self,
        user_repository: IUserRepository,
        password_hasher: IPasswordHasher,
        token_service: ITokenService
    ):
        self._users = user_repository
        self._hasher = password_hasher
        self._tokens = token_service

    async def register(
        self,
        email: Optional[str],
        name: Optional[str],
        password: Optional[str]
    ) -> User:
        """
        Create a requester account.

        Raises:
            ValidationException: Missing field, short password or e-mail in use
        """
        email = (email or "").strip()
        name = (name or "").strip()
        if not email or not name or not password or len(password) < settings.password_min_length:
            raise ValidationException("Dados inválidos")

        if await self._users.get_by_email(email) is not None:
            raise ValidationException("E-mail já cadastrado")

        user = await self._users.create(
            email=email,
            name=name,
            password_hash=self._hasher.hash(password),
            role=Role.REQUESTER,
        )
        logger.info("User registered", extra={"user_id": user.id})
        return user

    async def login(self, email: Optional[str], password: Optional[str]) -> tuple[str, User]:
        """
        Verify credentials and issue a session token.

        Unknown e-mail and wrong password fail with the same message.
        """
        email = (email or "").strip()
        user = await self._users.get_by_email(email) if email else None
        if user is None or not password or not self._hasher.verify(password, user.password_hash):
            logger.info("Login rejected")
            raise AuthenticationException(INVALID_CREDENTIALS)

        return self._tokens.issue(user), user

    async def get_profile(self, actor: Actor) -> User:
        user = await self._users.get_by_id(actor.id)
        if user is None:
            raise ResourceNotFoundException("User", actor.id)
        return user
