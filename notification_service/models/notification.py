"""Notification data models.

Defines the notification kinds sent by the academic platform, the queued
job record and the output of the template renderer.

Author: Plataforma Docente
Created: 2025-11-04
Version: 1.0.0
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class NotificationKind(str, Enum):
    """Notification kind enumeration.

    Each kind maps to one template and one context model.

    Attributes:
        ATTENDANCE_RECORDED: A student's attendance was recorded.
        ATTENDANCE_UPDATED: A recorded attendance was changed.
        ATTENDANCE_SUMMARY: Per-class attendance summary for a date.
        EVALUATION_ASSIGNED: A new evaluation was assigned to a student.
        EVALUATION_EDITED: An evaluation's details changed.
        EVALUATION_DELETED: An evaluation was removed.
        GRADE_RECORDED: A grade was recorded for an evaluation.
        GRADE_STRUCTURE_CREATED: A partial's grading weights were configured.
    """

    ATTENDANCE_RECORDED = "attendance_recorded"
    ATTENDANCE_UPDATED = "attendance_updated"
    ATTENDANCE_SUMMARY = "attendance_summary"
    EVALUATION_ASSIGNED = "evaluation_assigned"
    EVALUATION_EDITED = "evaluation_edited"
    EVALUATION_DELETED = "evaluation_deleted"
    GRADE_RECORDED = "grade_recorded"
    GRADE_STRUCTURE_CREATED = "grade_structure_created"


class NotificationJob(BaseModel):
    """Queued outbound notification.

    Owned by the NotificationQueue once enqueued. Only the queue mutates
    ``attempt_count``; the body is opaque and never re-rendered.

    Attributes:
        id: Random unique job ID.
        recipients: One or more recipient addresses.
        subject: Subject line.
        body_html: Pre-rendered HTML body.
        body_text: Optional plain-text alternative.
        metadata: Free-form data (teacher_id, kind, ...).
        attempt_count: Failed delivery attempts so far.
        created_at: Enqueue timestamp.
    """

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    recipients: list[str] = Field(..., min_length=1, description="Recipient addresses")
    subject: str = Field(default="", description="Subject line")
    body_html: str = Field(default="", description="Rendered HTML body")
    body_text: str | None = Field(default=None, description="Plain-text body")
    metadata: dict[str, Any] = Field(default_factory=dict)
    attempt_count: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=datetime.now)

    @field_validator("recipients", mode="before")
    @classmethod
    def normalize_recipients(cls, v: Any) -> Any:
        """Accept a single address and drop blank entries."""
        if isinstance(v, str):
            v = [v]
        if isinstance(v, (list, tuple)):
            return [str(r).strip() for r in v if r and str(r).strip()]
        return v

    @property
    def recipient_display(self) -> str:
        """Comma-joined recipients for log lines."""
        return ", ".join(self.recipients)


class RenderedNotification(BaseModel):
    """Template renderer output."""

    kind: NotificationKind
    subject: str
    body_html: str
    body_text: str
