"""
Identity Domain Entities
=========================

Users and the authenticated actor derived from a session token.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from helpdesk.config import Role


@dataclass
class User:
    """
    Registered user.

    The role is fixed at registration; no operation changes it.
    """

    id: int
    email: str
    name: str
    password_hash: str
    role: Role
    created_at: Optional[datetime] = None

    def to_actor(self) -> "Actor":
        return Actor(id=self.id, email=self.email, role=self.role)


@dataclass(frozen=True)
class Actor:
    """
    Identity performing an operation, as vouched for by the auth layer.

    Authorization decisions trust this record completely and never reload
    the role from storage.
    """

    id: int
    email: str
    role: Role
