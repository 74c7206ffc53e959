"""
SLA Watchdog Module
===================

Bounded context for due-by monitoring.

Responsibilities:
- Sweep open/in-progress tickets every 5 minutes
- Report every ticket past its due-by instant in one notification
- Never crash and never stop scheduling, whatever fails

Due-by instants themselves are fixed by the tickets module at creation.
"""

__version__ = "1.0.0"
