"""Models module for the notification service.

Defines Pydantic v2 data models for notification jobs, statistics,
template contexts and SMTP configuration.
"""

from notification_service.models.context import (
    AttendanceContext,
    AttendanceEntry,
    AttendanceStatus,
    AttendanceSummaryContext,
    EvaluationContext,
    FieldChange,
    GradeRecordedContext,
    GradeStructureContext,
    NotificationContext,
)
from notification_service.models.notification import (
    NotificationJob,
    NotificationKind,
    RenderedNotification,
)
from notification_service.models.smtp_config import SMTPConfig
from notification_service.models.stats import ErrorEntry, StatisticsSnapshot

__all__ = [
    # Enums
    "NotificationKind",
    "AttendanceStatus",
    # Models
    "NotificationJob",
    "RenderedNotification",
    "SMTPConfig",
    "ErrorEntry",
    "StatisticsSnapshot",
    # Context models
    "NotificationContext",
    "AttendanceContext",
    "AttendanceEntry",
    "AttendanceSummaryContext",
    "FieldChange",
    "EvaluationContext",
    "GradeRecordedContext",
    "GradeStructureContext",
]
