"""In-process notification delivery queue.

Accepts rendered notifications from business operations and delivers
them one at a time through a mail transport, in the background.

Features:
- Fire-and-forget enqueue (never waits for delivery)
- Single drain loop per queue, started on demand
- Failed jobs go to the tail and are retried up to NOTIFY_MAX_RETRIES attempts
- Pause between deliveries, longer pause after a failed attempt
- Global and per-key statistics through StatisticsLedger

Delivery is best-effort: jobs live in memory only and a failure is never
reported to the caller that enqueued the job, only to the ledger.

Author: Plataforma Docente
Version: 1.0.0
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Awaitable, Callable, Hashable
from typing import Any

from pydantic import ValidationError

from notification_service.clients.base import MailTransport
from notification_service.config import NotificationConfig
from notification_service.core.exceptions import NotificationQueueError
from notification_service.core.logger import get_logger, log_context
from notification_service.delivery.ledger import StatisticsLedger
from notification_service.models.notification import NotificationJob
from notification_service.models.stats import StatisticsSnapshot

logger = get_logger(__name__)


class NotificationQueue:
    """Serial notification queue with retry and statistics.

    The queue must be used from a single asyncio event loop. ``enqueue``
    is synchronous; it checks and sets the draining flag without awaiting,
    so at most one drain task exists at any time.

    Attributes:
        transport: Mail transport used for delivery.
        ledger: Statistics ledger updated by the drain loop.
        max_retries: Delivery attempts per job before it is dropped.
        send_delay: Seconds to wait after each successful delivery.
        retry_delay: Seconds to wait after a failed attempt that will be retried.
        key_field: Job metadata field used as statistics key.
    """

    def __init__(
        self,
        transport: MailTransport,
        config: NotificationConfig | None = None,
        ledger: StatisticsLedger | None = None,
        sleep: Callable[[float], Awaitable[Any]] | None = None,
    ) -> None:
        """Initialize the queue.

        Args:
            transport: Object implementing ``send_email``.
            config: Service configuration (loaded from environment if None).
            ledger: Statistics ledger (a fresh one if None).
            sleep: Coroutine used for the delays (asyncio.sleep if None).
        """
        self.config = config or NotificationConfig()
        self.transport = transport
        self.max_retries = self.config.NOTIFY_MAX_RETRIES
        self.send_delay = self.config.NOTIFY_SEND_DELAY_SECONDS
        self.retry_delay = self.config.NOTIFY_RETRY_DELAY_SECONDS
        self.key_field = self.config.STATS_KEY_FIELD
        self.ledger = ledger or StatisticsLedger(
            max_recent_errors=self.config.STATS_MAX_RECENT_ERRORS,
            max_keys=self.config.STATS_MAX_KEYS,
        )
        self._sleep = sleep or asyncio.sleep

        self._jobs: deque[NotificationJob] = deque()
        self._draining = False
        self._drain_task: asyncio.Task[None] | None = None
        self._closed = False

        logger.info(
            f"Notification queue initialized: max_retries={self.max_retries} | "
            f"send_delay={self.send_delay}s | retry_delay={self.retry_delay}s"
        )

    # =========================================================================
    # Introspection
    # =========================================================================
    @property
    def depth(self) -> int:
        """Number of jobs waiting, including the one being delivered."""
        return len(self._jobs)

    @property
    def draining(self) -> bool:
        return self._draining

    def _key_of(self, job: NotificationJob) -> Hashable | None:
        return job.metadata.get(self.key_field)

    # =========================================================================
    # Public API
    # =========================================================================
    def enqueue(
        self,
        recipients: list[str] | str,
        subject: str,
        body_html: str,
        metadata: dict[str, Any] | None = None,
        body_text: str | None = None,
    ) -> str:
        """Queue a rendered notification for delivery.

        Returns immediately; delivery happens in the background drain task,
        which is started here if it is not already running.

        Args:
            recipients: Recipient address or addresses.
            subject: Subject line.
            body_html: Rendered HTML body (opaque to the queue).
            metadata: Optional metadata, e.g. {"teacher_id": 7, "kind": "grade_recorded"}.
            body_text: Optional plain-text body.

        Returns:
            Job ID, for correlation in logs.

        Raises:
            NotificationQueueError: If the job is invalid, the queue is shut
                down, or no event loop is running.
        """
        if self._closed:
            raise NotificationQueueError("Notification queue is shut down")

        try:
            job = NotificationJob(
                recipients=recipients,
                subject=subject,
                body_html=body_html,
                body_text=body_text,
                metadata=dict(metadata or {}),
            )
        except ValidationError as e:
            raise NotificationQueueError(f"Invalid notification: {e}") from e

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise NotificationQueueError(
                "enqueue() must be called from a running event loop", job_id=job.id
            ) from e

        self._jobs.append(job)
        logger.debug(
            f"Enqueued: {log_context('enqueue', job_id=job.id, recipient=job.recipient_display)} "
            f"| depth={len(self._jobs)}"
        )

        # No await between the check and the set
        if not self._draining:
            self._draining = True
            self._drain_task = loop.create_task(self._drain(), name="notification-drain")

        return job.id

    def get_statistics(self, key: Hashable | None = None) -> StatisticsSnapshot:
        """Snapshot of the global statistics, or of one key's statistics.

        ``queued`` is the live queue depth; for a key, only jobs whose
        metadata carries that key are counted.
        """
        if key is None:
            queued = len(self._jobs)
        else:
            norm = StatisticsLedger.normalize_key(key)
            queued = sum(
                1
                for job in self._jobs
                if StatisticsLedger.normalize_key(self._key_of(job)) == norm
            )
        return self.ledger.snapshot(key, queued=queued, draining=self._draining)

    def reset_statistics(self, key: Hashable | None = None) -> None:
        """Clear global statistics, or one key's statistics. Queue untouched."""
        self.ledger.reset(key)

    def reset_all_statistics(self) -> None:
        """Clear global and every keyed statistics record. Queue untouched."""
        self.ledger.reset_all()

    async def wait_until_idle(self) -> None:
        """Wait until the drain loop has emptied the queue and stopped."""
        while self._drain_task is not None:
            # asyncio.wait does not cancel the task if the waiter is cancelled
            await asyncio.wait({self._drain_task})

    async def shutdown(self) -> int:
        """Stop draining and discard queued jobs.

        Returns:
            Number of undelivered jobs that were discarded.
        """
        self._closed = True
        task = self._drain_task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.wait({task})
        self._draining = False
        self._drain_task = None

        abandoned = len(self._jobs)
        self._jobs.clear()
        if abandoned:
            logger.warning(f"Queue shut down with {abandoned} undelivered notification(s) discarded")
        else:
            logger.info("Queue shut down cleanly")
        return abandoned

    # =========================================================================
    # Drain loop
    # =========================================================================
    def _remove(self, job: NotificationJob) -> NotificationJob:
        """Remove ``job``, normally the head of the queue."""
        if self._jobs and self._jobs[0] is job:
            return self._jobs.popleft()
        self._jobs.remove(job)
        return job

    async def _drain(self) -> None:
        """Deliver jobs one at a time until the queue is empty."""
        logger.debug(f"Drain loop started | depth={len(self._jobs)}")
        try:
            while self._jobs:
                await self._process_head()
        except Exception:
            logger.error(
                f"Drain loop stopped unexpectedly | stranded={len(self._jobs)} "
                f"job(s) wait for the next enqueue",
                exc_info=True,
            )
        finally:
            self._draining = False
            self._drain_task = None
            logger.debug(f"Drain loop idle | depth={len(self._jobs)}")

    async def _process_head(self) -> None:
        """Attempt delivery of the head job and apply the retry policy."""
        job = self._jobs[0]
        key = self._key_of(job)
        ctx = log_context(
            "deliver",
            job_id=job.id,
            recipient=job.recipient_display,
            attempt=f"{job.attempt_count + 1}/{self.max_retries}",
        )

        try:
            await asyncio.to_thread(
                self.transport.send_email,
                list(job.recipients),
                job.subject,
                job.body_html,
                job.body_text,
            )
        except Exception as e:
            job.attempt_count += 1

            if job.attempt_count >= self.max_retries:
                self._remove(job)
                self.ledger.record_failure(
                    e,
                    key=key,
                    recipient=job.recipient_display,
                    subject=job.subject,
                )
                logger.critical(
                    f"PERMANENTLY FAILED: {ctx} | attempts={job.attempt_count} | "
                    f"error={str(e)[:200]}"
                )
                return

            # Rotate to the tail so the jobs behind it get their turn
            self._jobs.append(self._remove(job))
            logger.warning(
                f"SCHEDULED RETRY: {ctx} | error={str(e)[:200]} | "
                f"retry_delay={self.retry_delay}s"
            )
            await self._sleep(self.retry_delay)
            return

        self._remove(job)
        self.ledger.record_success(key)
        logger.info(f"DELIVERED: {ctx} | subject={job.subject[:50]}")
        await self._sleep(self.send_delay)
