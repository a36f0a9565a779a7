"""Jinja2 template renderer for academic notifications.

Turns a notification kind plus its data payload into a subject, an HTML
body and a plain-text body. Templates live in memory (see ``catalog``) so
rendering never touches the filesystem.

Version: 1.0.0
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from jinja2 import DictLoader, Environment, StrictUndefined, TemplateNotFound, select_autoescape
from pydantic import BaseModel, ValidationError

from notification_service.core.exceptions import TemplateRenderError
from notification_service.core.logger import get_logger
from notification_service.models.context import (
    AttendanceContext,
    AttendanceStatus,
    AttendanceSummaryContext,
    EvaluationContext,
    GradeRecordedContext,
    GradeStructureContext,
    NotificationContext,
)
from notification_service.models.notification import NotificationKind, RenderedNotification
from notification_service.templates.catalog import TEMPLATES

logger = get_logger(__name__)

CONTEXT_MODELS: dict[NotificationKind, type[NotificationContext]] = {
    NotificationKind.ATTENDANCE_RECORDED: AttendanceContext,
    NotificationKind.ATTENDANCE_UPDATED: AttendanceContext,
    NotificationKind.ATTENDANCE_SUMMARY: AttendanceSummaryContext,
    NotificationKind.EVALUATION_ASSIGNED: EvaluationContext,
    NotificationKind.EVALUATION_EDITED: EvaluationContext,
    NotificationKind.EVALUATION_DELETED: EvaluationContext,
    NotificationKind.GRADE_RECORDED: GradeRecordedContext,
    NotificationKind.GRADE_STRUCTURE_CREATED: GradeStructureContext,
}

_BADGES = {
    AttendanceStatus.PRESENT: "badge-success",
    AttendanceStatus.ABSENT: "badge-danger",
    AttendanceStatus.LATE: "badge-warning",
}


class TemplateRenderer:
    """Jinja2 renderer for notification templates.

    Pure mapping from ``(kind, data)`` to a RenderedNotification. Holds no
    mutable state after construction, so one instance can be shared.
    """

    def __init__(self, templates: dict[str, str] | None = None) -> None:
        """Initialize template renderer.

        Args:
            templates: Template sources keyed by name (uses the built-in
                catalog if None).
        """
        self.env = self._init_jinja_env(templates if templates is not None else TEMPLATES)
        logger.info(f"Template renderer initialized: {len(self.env.list_templates())} templates")

    def _init_jinja_env(self, templates: dict[str, str]) -> Environment:
        """Initialize Jinja2 environment with custom settings."""
        env = Environment(
            loader=DictLoader(templates),
            autoescape=select_autoescape(enabled_extensions=("html",), default_for_string=False),
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

        env.filters["format_date"] = self._format_date
        env.filters["format_datetime"] = self._format_datetime
        env.filters["format_score"] = self._format_score
        env.globals["AttendanceStatus"] = AttendanceStatus
        env.globals["badge_class"] = self._badge_class

        return env

    def render(
        self, kind: NotificationKind | str, data: BaseModel | dict[str, Any]
    ) -> RenderedNotification:
        """Render subject and bodies for one notification.

        Args:
            kind: Notification kind (enum member or its value).
            data: Payload validated against the kind's context model.

        Returns:
            RenderedNotification with subject, HTML and text bodies.

        Raises:
            TemplateRenderError: If the kind is unknown, the payload is
                invalid or a template fails to render.
        """
        try:
            kind = NotificationKind(kind)
        except ValueError:
            raise TemplateRenderError(f"Unknown notification kind: {kind}") from None

        context = self._build_context(kind, data)
        variables = {**dict(context), "data": context}

        subject = self._render_template(f"{kind.value}.subject", variables)
        body_html = self._render_template(f"{kind.value}.html", variables)
        body_text = self._render_template(f"{kind.value}.txt", variables)

        return RenderedNotification(
            kind=kind,
            subject=" ".join(subject.split()),
            body_html=body_html,
            body_text=body_text.strip(),
        )

    def _build_context(
        self, kind: NotificationKind, data: BaseModel | dict[str, Any]
    ) -> NotificationContext:
        model = CONTEXT_MODELS[kind]
        payload = data.model_dump() if isinstance(data, BaseModel) else data

        try:
            return model.model_validate(payload)
        except ValidationError as e:
            fields = ", ".join(
                ".".join(str(part) for part in err["loc"]) or "payload" for err in e.errors()
            )
            logger.warning(f"Invalid data for {kind.value}: {fields}")
            raise TemplateRenderError(
                f"Invalid data for {kind.value}: {fields}",
                template_name=kind.value,
            ) from e

    def _render_template(self, template_name: str, variables: dict[str, Any]) -> str:
        try:
            logger.debug(f"Rendering template: {template_name}")
            rendered = self.env.get_template(template_name).render(**variables)
            logger.debug(f"Template rendered: {template_name} ({len(rendered)} bytes)")
            return rendered

        except TemplateNotFound:
            logger.error(f"Template not found: {template_name}")
            raise TemplateRenderError(
                f"Template not found: {template_name}",
                template_name=template_name,
            ) from None

        except Exception as e:
            logger.error(f"Failed to render {template_name}: {e}")
            raise TemplateRenderError(
                f"Failed to render {template_name}: {e}",
                template_name=template_name,
            ) from e

    def template_exists(self, kind: NotificationKind, format_type: str = "html") -> bool:
        """Check if a template is available for a notification kind.

        Args:
            kind: Notification kind to check.
            format_type: "html", "text" or "subject".
        """
        ext = {"html": "html", "text": "txt", "subject": "subject"}.get(format_type, format_type)
        return f"{kind.value}.{ext}" in self.env.list_templates()

    @staticmethod
    def _format_date(value: date | datetime | str | None) -> str:
        """Jinja2 filter: dd/mm/YYYY."""
        if value is None or value == "":
            return ""
        if isinstance(value, str):
            return value
        return value.strftime("%d/%m/%Y")

    @staticmethod
    def _format_datetime(value: datetime | date | str | None) -> str:
        """Jinja2 filter: dd/mm/YYYY HH:MM (date only for plain dates)."""
        if value is None or value == "":
            return ""
        if isinstance(value, str):
            return value
        if isinstance(value, datetime):
            return value.strftime("%d/%m/%Y %H:%M")
        return value.strftime("%d/%m/%Y")

    @staticmethod
    def _format_score(value: float | int | None) -> str:
        """Jinja2 filter: drop a trailing ``.0`` from whole scores."""
        if value is None:
            return "N/A"
        if float(value).is_integer():
            return str(int(value))
        return f"{value:.2f}".rstrip("0").rstrip(".")

    @staticmethod
    def _badge_class(status: AttendanceStatus | str) -> str:
        try:
            return _BADGES[AttendanceStatus(status)]
        except ValueError:
            return "badge-info"
