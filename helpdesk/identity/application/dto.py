"""
Identity Application DTOs
==========================

Pydantic models for the register/login/me endpoints.

Request fields are optional at the schema level: missing values are
reported by the service with the same message as empty ones.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from helpdesk.identity.domain import User


RoleStr = Literal["requester", "agent", "admin"]


# ========== Request DTOs ==========

class RegisterRequest(BaseModel):
    """Request model for account registration."""
    email: Optional[str] = Field(None, description="Login e-mail (unique)")
    name: Optional[str] = Field(None, description="Display name")
    password: Optional[str] = Field(None, description="Plain-text password, 6+ characters")


class LoginRequest(BaseModel):
    """Request model for login."""
    email: Optional[str] = None
    password: Optional[str] = None


# ========== Response DTOs ==========

class UserResponse(BaseModel):
    """Public view of a user."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    role: RoleStr

    @classmethod
    def from_entity(cls, user: User) -> "UserResponse":
        return cls(id=user.id, email=user.email, name=user.name, role=user.role.value)


class LoginResponse(BaseModel):
    """Session token plus the logged-in user."""
    token: str = Field(..., description="Bearer token for the Authorization header")
    user: UserResponse
