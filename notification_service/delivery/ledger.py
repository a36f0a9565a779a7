"""Delivery statistics ledger.

Process-wide counters of sent and failed notifications, the last
successful send and a bounded log of recent errors. One global record
plus lazily created per-key records (e.g. per teacher).

Author: Plataforma Docente
Version: 1.0.0
"""

from __future__ import annotations

from collections import OrderedDict, deque
from collections.abc import Hashable
from dataclasses import dataclass, field
from datetime import datetime

from notification_service.core.logger import get_logger
from notification_service.models.stats import ErrorEntry, StatisticsSnapshot

logger = get_logger(__name__)


@dataclass
class StatisticsRecord:
    """Mutable counters behind one snapshot."""

    max_recent_errors: int
    sent: int = 0
    failed: int = 0
    last_send: datetime | None = None
    recent_errors: deque[ErrorEntry] = field(init=False)

    def __post_init__(self) -> None:
        self.recent_errors = deque(maxlen=self.max_recent_errors)

    def add_success(self, now: datetime) -> None:
        self.sent += 1
        self.last_send = now

    def add_failure(self, entry: ErrorEntry) -> None:
        self.failed += 1
        # deque(maxlen) evicts the oldest entry
        self.recent_errors.append(entry)

    def success_rate(self) -> int:
        total = self.sent + self.failed
        if total == 0:
            return 0
        # Half-up, so 12.5 reports as 13
        return (200 * self.sent + total) // (2 * total)


class StatisticsLedger:
    """Global and per-key delivery statistics.

    Written only by the drain loop and by reset calls, read by anyone.
    All methods are synchronous, so on a single event loop they never
    interleave with each other.

    Keyed records are created on first write. At most ``max_keys`` of them
    are kept; the least recently written key is evicted beyond that.
    """

    def __init__(self, max_recent_errors: int = 10, max_keys: int = 1000) -> None:
        if max_recent_errors < 1:
            raise ValueError("max_recent_errors must be >= 1")
        if max_keys < 1:
            raise ValueError("max_keys must be >= 1")

        self.max_recent_errors = max_recent_errors
        self.max_keys = max_keys
        self._global = StatisticsRecord(max_recent_errors)
        self._by_key: OrderedDict[str, StatisticsRecord] = OrderedDict()

    @staticmethod
    def normalize_key(key: Hashable | None) -> str | None:
        """Map 7 and "7" to the same record."""
        if key is None:
            return None
        return str(key)

    def _keyed(self, key: Hashable) -> StatisticsRecord:
        """Get or lazily create the record for ``key``, marking it recently used."""
        norm = self.normalize_key(key)
        record = self._by_key.get(norm)
        if record is None:
            record = StatisticsRecord(self.max_recent_errors)
            self._by_key[norm] = record
            if len(self._by_key) > self.max_keys:
                evicted, _ = self._by_key.popitem(last=False)
                logger.info(f"Statistics for key {evicted} evicted (max_keys={self.max_keys})")
        else:
            self._by_key.move_to_end(norm)
        return record

    def record_success(self, key: Hashable | None = None) -> None:
        """Count one delivered notification globally and for ``key``."""
        now = datetime.now()
        self._global.add_success(now)
        if key is not None:
            self._keyed(key).add_success(now)

    def record_failure(
        self,
        error: BaseException | str,
        key: Hashable | None = None,
        recipient: str | None = None,
        subject: str | None = None,
    ) -> None:
        """Count one dropped notification and log its error."""
        message = str(error)
        if not message and isinstance(error, BaseException):
            message = type(error).__name__
        entry = ErrorEntry(
            message=message or "Unknown error",
            timestamp=datetime.now(),
            recipient=recipient,
            subject=subject,
        )
        self._global.add_failure(entry)
        if key is not None:
            self._keyed(key).add_failure(entry)

    def has_key(self, key: Hashable) -> bool:
        return self.normalize_key(key) in self._by_key

    def keys(self) -> list[str]:
        """Keys with a live record, least recently used first."""
        return list(self._by_key)

    def snapshot(
        self,
        key: Hashable | None = None,
        queued: int = 0,
        draining: bool = False,
    ) -> StatisticsSnapshot:
        """Build a read-only view of the global record or one keyed record.

        Reading an unknown key returns zeros without creating a record.
        """
        norm = self.normalize_key(key)
        if norm is None:
            record = self._global
        else:
            record = self._by_key.get(norm) or StatisticsRecord(self.max_recent_errors)

        return StatisticsSnapshot(
            key=norm,
            sent=record.sent,
            failed=record.failed,
            queued=queued,
            draining=draining,
            last_send=record.last_send,
            recent_errors=list(record.recent_errors),
            success_rate_percent=record.success_rate(),
        )

    def reset(self, key: Hashable | None = None) -> None:
        """Clear the global record, or drop one keyed record."""
        norm = self.normalize_key(key)
        if norm is None:
            self._global = StatisticsRecord(self.max_recent_errors)
            logger.info("Global notification statistics reset")
        elif self._by_key.pop(norm, None) is not None:
            logger.info(f"Notification statistics reset for key {norm}")

    def reset_all(self) -> None:
        """Clear the global record and every keyed record."""
        self._global = StatisticsRecord(self.max_recent_errors)
        self._by_key.clear()
        logger.info("All notification statistics reset")
