"""
Identity Domain Layer
=====================

Pure Python entities for users and actors. No infrastructure imports.
"""

from helpdesk.identity.domain.entities import User, Actor

__all__ = ["User", "Actor"]
