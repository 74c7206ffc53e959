"""
Access Policy
=============

Who may see and change a ticket.

Every authorization decision in the tickets module goes through this file.
The functions are pure and must be evaluated on every request: assignment
can change between two calls, so results are never cached.
"""

from enum import Enum
from typing import Dict, FrozenSet

from helpdesk.config import Role
from helpdesk.identity.domain import Actor
from helpdesk.tickets.domain.entities import Ticket


class Capability(str, Enum):
    """Role-level rights, independent of any particular ticket."""
    VIEW_ALL_TICKETS = "view_all_tickets"
    UPDATE_TICKETS = "update_tickets"


ROLE_CAPABILITIES: Dict[Role, FrozenSet[Capability]] = {
    Role.REQUESTER: frozenset(),
    Role.AGENT: frozenset({Capability.VIEW_ALL_TICKETS, Capability.UPDATE_TICKETS}),
    Role.ADMIN: frozenset({Capability.VIEW_ALL_TICKETS, Capability.UPDATE_TICKETS}),
}


def has_capability(role: Role, capability: Capability) -> bool:
    return capability in ROLE_CAPABILITIES.get(Role(role), frozenset())


def can_view(actor: Actor, ticket: Ticket) -> bool:
    """
    Visibility of a ticket and its comment thread.

    Staff see everything; anyone else sees tickets they requested or are
    assigned to.
    """
    if has_capability(actor.role, Capability.VIEW_ALL_TICKETS):
        return True
    if actor.id == ticket.requester_id:
        return True
    if ticket.assignee_id is not None and actor.id == ticket.assignee_id:
        return True
    return False


def can_update(actor: Actor) -> bool:
    """Status/assignee changes. Ownership does not matter, only the role."""
    return has_capability(actor.role, Capability.UPDATE_TICKETS)


def can_list_all(actor: Actor) -> bool:
    return has_capability(actor.role, Capability.VIEW_ALL_TICKETS)
