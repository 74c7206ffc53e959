"""
Identity Infrastructure Layer
==============================

- Models: SQLAlchemy ORM models
- Repositories: Data access layer
- Security: password hashing and session tokens
"""

from helpdesk.identity.infrastructure.models import UserModel
from helpdesk.identity.infrastructure.repositories import SQLAlchemyUserRepository
from helpdesk.identity.infrastructure.security import BcryptPasswordHasher, JWTTokenService

__all__ = [
    "UserModel",
    "SQLAlchemyUserRepository",
    "BcryptPasswordHasher",
    "JWTTokenService",
]
