"""
Credential Security
===================

bcrypt password hashing and HS256 session tokens (python-jose).

Token payload: ``{"sub": "<user id>", "email": ..., "role": ..., "exp": ...}``.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt

from helpdesk.config import Role, settings
from helpdesk.core import AuthenticationException
from helpdesk.identity.application import IPasswordHasher, ITokenService
from helpdesk.identity.domain import Actor, User

BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes; newer releases raise instead of truncating
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


class BcryptPasswordHasher(IPasswordHasher):
    """Salted bcrypt hashes (``$2b$`` prefix)."""

    def __init__(self, rounds: int = 10):
        self._rounds = rounds

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self._rounds)).decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
        except ValueError:
            # Malformed stored hash
            return False


class JWTTokenService(ITokenService):
    """Signs and validates bearer tokens."""

    def __init__(
        self,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        expires_delta: Optional[timedelta] = None
    ):
        self._secret = secret or settings.jwt_secret
        self._algorithm = algorithm or settings.jwt_algorithm
        self._expires_delta = expires_delta or timedelta(minutes=settings.jwt_expire_minutes)

    def issue(self, user: User) -> str:
        payload = {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role.value,
            "exp": datetime.now(timezone.utc) + self._expires_delta,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> Actor:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[self._algorithm])
            return Actor(
                id=int(payload["sub"]),
                email=payload["email"],
                role=Role(payload["role"]),
            )
        except (JWTError, KeyError, ValueError, TypeError):
            raise AuthenticationException("Invalid token")
