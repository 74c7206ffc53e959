"""
Ticket Interfaces Layer
=======================

FastAPI route handlers for tickets and comments.
"""

from helpdesk.tickets.interfaces.controllers import tickets_router

__all__ = ["tickets_router"]
