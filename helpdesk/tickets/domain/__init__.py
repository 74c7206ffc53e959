"""
Ticket Domain Layer
===================

Contains:
- Entities: Ticket, Comment
- Value Objects: SLACalculator
- Policy: role capabilities and ticket visibility

This layer has no dependencies on infrastructure - pure Python business logic.
"""

from helpdesk.tickets.domain.entities import Ticket, Comment
from helpdesk.tickets.domain.value_objects import SLACalculator
from helpdesk.tickets.domain.policy import (
    Capability,
    ROLE_CAPABILITIES,
    has_capability,
    can_view,
    can_update,
    can_list_all,
)

__all__ = [
    # Entities
    "Ticket",
    "Comment",
    # Value Objects
    "SLACalculator",
    # Policy
    "Capability",
    "ROLE_CAPABILITIES",
    "has_capability",
    "can_view",
    "can_update",
    "can_list_all",
]
