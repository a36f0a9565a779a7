"""Notification statistics models.

Defines the read-only views returned by the statistics ledger.

Author: Plataforma Docente
Created: 2025-11-04
Version: 1.0.0
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ErrorEntry(BaseModel):
    """One failed notification in the recent-errors log.

    Attributes:
        message: Error message from the last delivery attempt.
        timestamp: When the job was given up.
        recipient: Recipient address(es) of the dropped job.
        subject: Subject of the dropped job.
    """

    model_config = ConfigDict(frozen=True)

    message: str = Field(..., description="Error message")
    timestamp: datetime = Field(default_factory=datetime.now)
    recipient: str | None = Field(default=None, description="Recipient address(es)")
    subject: str | None = Field(default=None, description="Subject line")


class StatisticsSnapshot(BaseModel):
    """Point-in-time copy of delivery statistics.

    Attributes:
        key: Statistics key (None for the global view).
        sent: Successfully delivered notifications.
        failed: Notifications dropped after exhausting retries.
        queued: Jobs currently waiting in the queue.
        draining: Whether the drain loop is running.
        last_send: Timestamp of the last successful delivery.
        recent_errors: Most recent failures, oldest first.
        success_rate_percent: sent / (sent + failed) * 100 rounded half-up, 0 if no attempts.
    """

    model_config = ConfigDict(frozen=True)

    key: str | None = Field(default=None, description="Statistics key")
    sent: int = Field(default=0, ge=0, description="Successfully sent")
    failed: int = Field(default=0, ge=0, description="Permanently failed")
    queued: int = Field(default=0, ge=0, description="Waiting in queue")
    draining: bool = Field(default=False, description="Drain loop active")
    last_send: datetime | None = Field(default=None, description="Last successful send")
    recent_errors: list[ErrorEntry] = Field(default_factory=list)
    success_rate_percent: int = Field(default=0, ge=0, le=100, description="Success rate (%)")
