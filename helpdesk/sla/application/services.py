"""
SLA Application Services
=========================

The watchdog: a periodic sweep that reports every active ticket past its
due-by instant in one batch notification.

It only reads tickets. It talks to the rest of the system through the
database and the notification channel, nothing else.
"""

from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import Callable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from helpdesk.infrastructure.database import utc_now
from helpdesk.shared.infrastructure.logging import get_logger, log_latency
from helpdesk.shared.infrastructure.notifications import (
    COLOR_ALERT,
    INotificationPublisher,
    NotificationEvent,
)
from helpdesk.sla.domain import OverdueTicket
from helpdesk.tickets.application import ITicketRepository

logger = get_logger(__name__)

SLA_OVERDUE = "sla_overdue"

SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession]]
RepositoryFactory = Callable[[AsyncSession], ITicketRepository]


def overdue_report_event(overdue: List[OverdueTicket]) -> NotificationEvent:
    """Single batch event listing every overdue ticket of a sweep."""
    return NotificationEvent(
        kind=SLA_OVERDUE,
        title="Chamados com SLA vencido",
        text="\n".join(entry.summary_line() for entry in overdue),
        summary="SLA vencido",
        theme_color=COLOR_ALERT,
        fields={
            "tickets": [
                {
                    "id": entry.ticket_id,
                    "title": entry.title,
                    "priority": entry.priority.value,
                    "due_at": entry.due_at.isoformat(),
                }
                for entry in overdue
            ]
        },
    )


class SLAWatchdog:
    """
    Detects breached tickets and publishes one report per sweep.

    ``run`` is the scheduler entry point and never raises; ``sweep`` is the
    underlying operation and lets errors through.
    """

    def __init__(
        self,
        session_factory: SessionFactory,
        repository_factory: RepositoryFactory,
        notifier: INotificationPublisher,
        clock: Callable[[], datetime] = utc_now
    ):
        self._session_factory = session_factory
        self._repository_factory = repository_factory
        self._notifier = notifier
        self._clock = clock

    async def sweep(self, now: Optional[datetime] = None) -> List[OverdueTicket]:
        """
        Find active tickets with ``due_at < now`` and report them.

        Args:
            now: Evaluation instant (defaults to the clock)

        Returns:
            The overdue entries that were reported, most overdue first
        """
        now = now or self._clock()

        async with self._session_factory() as session:
            tickets = await self._repository_factory(session).list_overdue(now)

        overdue = [OverdueTicket.from_ticket(ticket) for ticket in tickets if ticket.is_overdue(now)]
        if overdue:
            self._notifier.publish(overdue_report_event(overdue))

        return overdue

    async def run(self) -> None:
        """Scheduled job body. Failures are logged and dropped; the next run happens regardless."""
        try:
            with log_latency(logger, "sla_sweep"):
                overdue = await self.sweep()
        except Exception as e:
            logger.error(
                "SLA sweep failed",
                extra={"error_type": type(e).__name__, "error": str(e)}
            )
            return

        if overdue:
            logger.warning(
                "Overdue tickets reported",
                extra={"count": len(overdue), "ticket_ids": [entry.ticket_id for entry in overdue]}
            )
