"""
Helpdesk Ticketing Service
==========================

Modular monolith: identity, tickets and the SLA watchdog, each split into
domain / application / infrastructure / interfaces layers.
"""

__version__ = "1.0.0"
