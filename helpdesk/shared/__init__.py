"""
Shared Kernel Module
====================

Shared infrastructure used across all bounded contexts (identity, tickets,
sla).

Architecture Pattern: Modular Monolith
- Each module (identity, tickets, sla) is a bounded context
- Shared kernel contains only generic infrastructure

DO NOT add ticket or SLA business rules to the shared kernel.
"""

__version__ = "1.0.0"
