"""
Tickets Module
==============

Bounded context for the ticket lifecycle and comment threads.

Responsibilities:
- Open tickets and derive their due-by instant from the priority
- Decide who may see, update and comment on a ticket
- Triage updates (status, assignee) by agents and admins
- Append-only comment threads
"""

__version__ = "1.0.0"
