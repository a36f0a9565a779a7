"""API request and response schemas.

Pydantic models for API validation and serialization.

Version: 1.0.0
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, EmailStr, Field

from notification_service.models.notification import NotificationKind
from notification_service.models.stats import ErrorEntry


class NotificationRequest(BaseModel):
    """Request model for POST /notifications endpoint."""

    kind: NotificationKind = Field(..., description="Notification kind (selects the template)")
    to: list[EmailStr] = Field(
        ...,
        min_length=1,
        description="List of recipient email addresses",
    )
    data: dict[str, Any] = Field(
        default_factory=dict,
        description="Template data for the notification kind",
    )
    teacher_id: int | str | None = Field(
        default=None,
        description="Teacher the notification is attributed to in statistics",
    )
    metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Custom metadata for tracking",
    )


class RawNotificationRequest(BaseModel):
    """Request model for POST /notifications/raw endpoint."""

    to: list[EmailStr] = Field(
        ...,
        min_length=1,
        description="List of recipient email addresses",
    )
    subject: str = Field(
        ...,
        min_length=1,
        max_length=998,
        description="Email subject line",
    )
    body_html: str = Field(
        ...,
        min_length=1,
        description="HTML email body",
    )
    body_text: str | None = Field(
        default=None,
        description="Plain-text alternative",
    )
    teacher_id: int | str | None = Field(default=None)
    metadata: dict[str, Any] = Field(default_factory=dict)


class NotificationResponse(BaseModel):
    """Response model for the enqueue endpoints."""

    status: str = Field(description="Request status (accepted)")
    queued: bool = Field(description="Whether the notification was queued")
    job_id: str = Field(description="Queue job ID")
    kind: NotificationKind | None = Field(default=None, description="Notification kind")
    timestamp: datetime = Field(default_factory=lambda: datetime.now())


class StatisticsResponse(BaseModel):
    """Response model for GET /notifications/stats endpoint."""

    sent: int = Field(description="Successfully delivered notifications")
    failed: int = Field(description="Notifications dropped after all retries")
    queued: int = Field(description="Notifications waiting in the queue")
    draining: bool = Field(description="Whether the queue is currently sending")
    last_send: datetime | None = Field(description="Last successful delivery")
    recent_errors: list[ErrorEntry] = Field(description="Most recent failures, oldest first")
    success_rate_percent: int = Field(description="Success rate (%)")
    filtered_by: Literal["global", "teacher"] = Field(description="Statistics scope")
    teacher_id: str | None = Field(default=None, description="Teacher filter, if any")
    timestamp: datetime = Field(default_factory=lambda: datetime.now())


class ResetResponse(BaseModel):
    """Response model for POST /notifications/stats/reset endpoint."""

    detail: str = Field(description="What was reset")
    statistics: StatisticsResponse = Field(description="Statistics after the reset")


class HealthResponse(BaseModel):
    """Response model for GET /health endpoint."""

    status: str = Field(description="Overall service status")
    queue_depth: int = Field(description="Notifications waiting in the queue")
    draining: bool = Field(description="Whether the drain loop is running")
    email_provider: str = Field(description="SMTP configuration status")
    version: str = Field(description="Service version")
    timestamp: datetime = Field(default_factory=lambda: datetime.now())


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str = Field(description="Error description")
