"""
Identity Module
===============

Bounded context for users and authentication.

Responsibilities:
- Register accounts (role defaults to requester, never self-promoted)
- Verify credentials and issue bearer tokens
- Resolve the authenticated actor for every other module
"""

__version__ = "1.0.0"
