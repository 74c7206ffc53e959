"""
Outbound Notifications
======================

Fire-and-forget delivery of notification events to an incoming webhook.

- NotificationEvent: what the core emits (title, text, color hint, fields)
- TeamsWebhookClient: posts events as Office 365 MessageCards, guarded by
  a circuit breaker
- NotificationDispatcher: bounded asyncio queue drained by one sender task,
  so publishers never wait on the network

Delivery failures are logged and dropped. Nothing in here raises into the
code that published the event.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from helpdesk.config import settings
from helpdesk.core import NotificationException
from helpdesk.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)

COLOR_INFO = "0076D7"
COLOR_ALERT = "FF0000"


def format_timestamp(value: datetime) -> str:
    """Human-readable UTC timestamp used in notification texts."""
    return value.astimezone(timezone.utc).strftime("%d/%m/%Y %H:%M UTC")


@dataclass(frozen=True)
class NotificationEvent:
    """Structured event handed to a notification sink."""
    kind: str
    title: str
    text: str
    summary: str
    theme_color: str = COLOR_INFO
    fields: Dict[str, Any] = field(default_factory=dict)


class NotificationSink(ABC):
    """Interface for anything that can deliver a notification event."""

    @abstractmethod
    async def send(self, event: NotificationEvent) -> bool:
        """Attempt delivery. Returns True if the event was delivered."""

    async def close(self) -> None:
        """Release any held resources."""


class CircuitState:
    """Circuit breaker states."""
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreaker:
    """
    Stops hammering a webhook that keeps failing.

    After ``failure_threshold`` consecutive failures the circuit opens and
    requests are rejected for ``recovery_timeout`` seconds, then a single
    trial request is let through.
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0
    ):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._last_failure_time: Optional[float] = None

    @property
    def state(self) -> str:
        if self._state == CircuitState.OPEN and self._last_failure_time is not None:
            if time.monotonic() - self._last_failure_time >= self.recovery_timeout:
                self._state = CircuitState.HALF_OPEN
        return self._state

    def allow_request(self) -> bool:
        return self.state in (CircuitState.CLOSED, CircuitState.HALF_OPEN)

    def record_success(self) -> None:
        self._failure_count = 0
        self._state = CircuitState.CLOSED

    def record_failure(self) -> None:
        self._failure_count += 1
        self._last_failure_time = time.monotonic()

        if self._failure_count >= self.failure_threshold:
            self._state = CircuitState.OPEN
            logger.warning(
                "Circuit breaker opened",
                extra={
                    "failure_count": self._failure_count,
                    "recovery_timeout": self.recovery_timeout
                }
            )


class TeamsWebhookClient(NotificationSink):
    """
    Incoming-webhook client speaking the MessageCard format.

    Each event gets ``max_attempts`` tries (one by default) and then is
    given up on.
    """

    def __init__(
        self,
        webhook_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        max_attempts: Optional[int] = None,
        circuit_breaker: Optional[CircuitBreaker] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._webhook_url = webhook_url if webhook_url is not None else settings.teams_webhook_url
        self._timeout = timeout_seconds or settings.notification_timeout_seconds
        self._max_attempts = max_attempts or settings.notification_max_attempts
        self._circuit_breaker = circuit_breaker or CircuitBreaker()
        self._http_client = http_client

    @property
    def is_configured(self) -> bool:
        return bool(self._webhook_url)

    def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
        return self._http_client

    @staticmethod
    def build_message(event: NotificationEvent) -> Dict[str, Any]:
        """Build the MessageCard payload for an event."""
        return {
            "@type": "MessageCard",
            "@context": "http://schema.org/extensions",
            "summary": event.summary,
            "themeColor": event.theme_color,
            "title": event.title,
            "text": event.text,
        }

    async def _post(self, message: Dict[str, Any]) -> None:
        response = await self._get_client().post(self._webhook_url, json=message)
        if response.status_code >= 300:
            raise NotificationException(
                f"webhook returned {response.status_code}",
                details={"status_code": response.status_code}
            )

    async def send(self, event: NotificationEvent) -> bool:
        if not self.is_configured:
            logger.debug("Webhook URL not configured, skipping notification", extra={"kind": event.kind})
            return False

        if not self._circuit_breaker.allow_request():
            logger.warning("Circuit breaker open, skipping notification", extra={"kind": event.kind})
            return False

        message = self.build_message(event)

        for attempt in range(1, self._max_attempts + 1):
            try:
                await self._post(message)
            except (httpx.HTTPError, NotificationException) as e:
                logger.error(
                    "Notification delivery failed",
                    extra={"kind": event.kind, "attempt": attempt, "error": str(e)}
                )
                continue

            self._circuit_breaker.record_success()
            logger.info("Notification sent", extra={"kind": event.kind})
            return True

        self._circuit_breaker.record_failure()
        return False

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None


class INotificationPublisher(ABC):
    """Interface the core publishes notification events through."""

    @abstractmethod
    def publish(self, event: NotificationEvent) -> bool:
        """Hand off an event for delivery. Must not block or raise."""


class NotificationDispatcher(INotificationPublisher):
    """
    Outbound notification channel.

    ``publish`` only enqueues; a single background task hands events to the
    sink one at a time. A full queue drops the event with a warning.
    """

    def __init__(self, sink: NotificationSink, max_queue_size: Optional[int] = None):
        self._sink = sink
        self._queue: asyncio.Queue[NotificationEvent] = asyncio.Queue(
            maxsize=max_queue_size or settings.notification_queue_size
        )
        self._worker: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def publish(self, event: NotificationEvent) -> bool:
        """Queue an event for delivery. Never blocks, never raises."""
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning("Notification queue full, dropping event", extra={"kind": event.kind})
            return False
        return True

    async def start(self) -> None:
        if self.is_running:
            return
        self._worker = asyncio.create_task(self._run(), name="notification-dispatcher")
        logger.info("Notification dispatcher started")

    async def stop(self, timeout: Optional[float] = None) -> None:
        """Deliver what is already queued, then stop the sender task.

        Waits at most `timeout` seconds for the queue to empty. Events still
        queued after that are dropped.
        """
        if self._worker is None:
            return
        if timeout is None:
            timeout = settings.notification_shutdown_timeout_seconds
        try:
            await asyncio.wait_for(self._queue.join(), timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Notification queue not drained before shutdown",
                extra={"pending": self.pending, "timeout_seconds": timeout}
            )
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None
        await self._sink.close()
        logger.info("Notification dispatcher stopped")

    async def drain(self) -> None:
        """Wait until every queued event has been handed to the sink."""
        await self._queue.join()

    async def _run(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self._sink.send(event)
            except Exception as e:
                logger.error(
                    "Notification sink raised",
                    extra={"kind": event.kind, "error_type": type(e).__name__, "error": str(e)}
                )
            finally:
                self._queue.task_done()
