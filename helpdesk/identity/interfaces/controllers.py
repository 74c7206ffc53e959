"""
Identity Controllers (API Routes)
==================================

Registration, login and profile endpoints.

Controllers are thin - they delegate to the identity service and commit
the session before responding.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.identity.application import (
    IdentityService,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UserResponse,
)
from helpdesk.identity.domain import Actor
from helpdesk.identity.interfaces.dependencies import get_current_actor, get_identity_service
from helpdesk.infrastructure.database import get_session

router = APIRouter(prefix="/api", tags=["Identity"])


USER_RESPONSE_EXAMPLE = {
    "id": 1,
    "email": "a@x.com",
    "name": "A",
    "role": "requester"
}


@router.post(
    "/register",
    response_model=UserResponse,
    summary="Create an account",
    description="Creates a `requester` account. Roles cannot be chosen or changed through the API.",
    responses={
        200: {"content": {"application/json": {"example": USER_RESPONSE_EXAMPLE}}},
        400: {"description": "Missing field, short password or e-mail already registered"}
    }
)
async def register(
    request: RegisterRequest,
    session: AsyncSession = Depends(get_session),
    service: IdentityService = Depends(get_identity_service)
):
    user = await service.register(request.email, request.name, request.password)
    await session.commit()
    return UserResponse.from_entity(user)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Issue a session token",
    responses={401: {"description": "Credenciais inválidas"}}
)
async def login(
    request: LoginRequest,
    service: IdentityService = Depends(get_identity_service)
):
    token, user = await service.login(request.email, request.password)
    return LoginResponse(token=token, user=UserResponse.from_entity(user))


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Fetch own profile",
    responses={200: {"content": {"application/json": {"example": USER_RESPONSE_EXAMPLE}}}}
)
async def me(
    actor: Actor = Depends(get_current_actor),
    service: IdentityService = Depends(get_identity_service)
):
    return UserResponse.from_entity(await service.get_profile(actor))


# Export router for inclusion in main app
identity_router = router
