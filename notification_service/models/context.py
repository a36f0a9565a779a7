"""Notification template context models.

Pydantic models validating the data payload of each notification kind
before it reaches the Jinja2 templates.

Author: Plataforma Docente
Created: 2025-11-04
Version: 1.0.0
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class AttendanceStatus(str, Enum):
    """Attendance states recorded by teachers."""

    PRESENT = "PRESENTE"
    ABSENT = "AUSENTE"
    LATE = "TARDANZA"


class NotificationContext(BaseModel):
    """Base context model for notification templates.

    Unknown keys are ignored so controllers can pass their domain objects'
    dumps without trimming them first.
    """

    model_config = ConfigDict(extra="ignore")


class AttendanceContext(NotificationContext):
    """Context for attendance recorded/updated notifications.

    Attributes:
        student_name: Student receiving the notification.
        class_name: Class the attendance belongs to.
        attendance_date: Attendance date.
        status: Recorded attendance state.
        previous_status: State before an update (optional).
        description: Teacher's remark or excuse (optional).
    """

    student_name: str = Field(..., min_length=1)
    class_name: str = Field(..., min_length=1)
    attendance_date: date
    status: AttendanceStatus
    previous_status: AttendanceStatus | None = None
    description: str | None = None


class AttendanceEntry(BaseModel):
    """One row of an attendance summary."""

    student_name: str = Field(default="N/A")
    status: AttendanceStatus


class AttendanceSummaryContext(NotificationContext):
    """Context for the per-class attendance summary sent to the teacher.

    Attributes:
        class_name: Class name.
        attendance_date: Session date.
        entries: Attendance rows.
    """

    class_name: str = Field(..., min_length=1)
    attendance_date: date
    entries: list[AttendanceEntry] = Field(default_factory=list)

    def count(self, status: AttendanceStatus) -> int:
        """Number of entries with the given status."""
        return sum(1 for entry in self.entries if entry.status == status)


class FieldChange(BaseModel):
    """A single changed field of an edited evaluation."""

    field: str
    previous: str | None = None
    new: str | None = None


class EvaluationContext(NotificationContext):
    """Context for evaluation assigned/edited/deleted notifications.

    Attributes:
        title: Evaluation title.
        max_score: Maximum score.
        student_name: Student receiving the notification (optional).
        class_name: Class the evaluation belongs to (optional).
        start_date: Opening date (optional).
        close_date: Closing date (optional).
        updated_by: User who made the change (optional).
        changes: Changed fields for edits.
    """

    title: str = Field(..., min_length=1)
    max_score: float = Field(..., ge=0)
    student_name: str | None = None
    class_name: str | None = None
    start_date: datetime | None = None
    close_date: datetime | None = None
    updated_by: str | None = None
    changes: list[FieldChange] = Field(default_factory=list)


class GradeRecordedContext(NotificationContext):
    """Context for a recorded grade.

    Attributes:
        student_name: Student receiving the grade.
        title: Evaluation title.
        score: Obtained score.
        max_score: Maximum score.
        class_name: Class name (optional).
        feedback: Teacher feedback (optional).
    """

    student_name: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    score: float = Field(..., ge=0)
    max_score: float = Field(..., gt=0)
    class_name: str | None = None
    feedback: str | None = None

    @model_validator(mode="after")
    def check_score_range(self) -> GradeRecordedContext:
        """Score cannot exceed the evaluation maximum."""
        if self.score > self.max_score:
            raise ValueError(f"score {self.score} exceeds max_score {self.max_score}")
        return self


class GradeStructureContext(NotificationContext):
    """Context for a newly configured grading structure.

    Attributes:
        class_name: Class name.
        class_code: Class code (optional).
        partial_name: Partial (term) the structure applies to.
        accumulative_weight: Weight of accumulated work (%).
        exam_weight: Weight of the exam (%).
        makeup_weight: Weight of the make-up exam (%), 0 when not used.
        max_partial_score: Maximum score of the partial.
        min_passing_score: Minimum passing score.
        notes: Teacher notes (optional).
    """

    class_name: str = Field(..., min_length=1)
    class_code: str | None = None
    partial_name: str = Field(..., min_length=1)
    accumulative_weight: float = Field(..., ge=0, le=100)
    exam_weight: float = Field(..., ge=0, le=100)
    makeup_weight: float = Field(default=0, ge=0, le=100)
    max_partial_score: float = Field(..., gt=0)
    min_passing_score: float = Field(..., ge=0)
    notes: str | None = None
