"""
Identity Interfaces Layer
==========================

FastAPI routes and the authentication dependency shared by other modules.
"""

from helpdesk.identity.interfaces.controllers import identity_router
from helpdesk.identity.interfaces.dependencies import get_current_actor

__all__ = ["identity_router", "get_current_actor"]
