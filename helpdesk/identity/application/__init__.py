"""
Identity Application Layer
===========================

Services and DTOs for registration, login and profile lookup.
"""

from helpdesk.identity.application.dto import (
    RegisterRequest,
    LoginRequest,
    UserResponse,
    LoginResponse,
)
from helpdesk.identity.application.services import (
    IdentityService,
    IUserRepository,
    IPasswordHasher,
    ITokenService,
    INVALID_CREDENTIALS,
)

__all__ = [
    # DTOs
    "RegisterRequest",
    "LoginRequest",
    "UserResponse",
    "LoginResponse",
    # Services
    "IdentityService",
    # Interfaces
    "IUserRepository",
    "IPasswordHasher",
    "ITokenService",
    "INVALID_CREDENTIALS",
]
