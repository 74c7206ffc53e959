"""
Identity Dependencies
=====================

FastAPI dependencies resolving the authenticated actor and identity
services. Other modules authenticate through ``get_current_actor``.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.core import AuthenticationException
from helpdesk.identity.application import IdentityService
from helpdesk.identity.domain import Actor
from helpdesk.identity.infrastructure import (
    BcryptPasswordHasher,
    JWTTokenService,
    SQLAlchemyUserRepository,
)
from helpdesk.infrastructure.database import get_session

bearer_scheme = HTTPBearer(auto_error=False)

_token_service: Optional[JWTTokenService] = None


def get_token_service() -> JWTTokenService:
    global _token_service
    if _token_service is None:
        _token_service = JWTTokenService()
    return _token_service


async def get_identity_service(
    session: AsyncSession = Depends(get_session),
    token_service: JWTTokenService = Depends(get_token_service)
) -> IdentityService:
    """Get identity service instance."""
    return IdentityService(
        SQLAlchemyUserRepository(session),
        BcryptPasswordHasher(),
        token_service,
    )


async def get_current_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    token_service: JWTTokenService = Depends(get_token_service)
) -> Actor:
    """Resolve the bearer token into an actor, or fail with 401."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationException("Unauthenticated")
    return token_service.verify(credentials.credentials)
