"""Unit tests for template renderer.

Tests rendering of every notification kind, payload validation,
escaping and the custom Jinja2 filters.

Author: Plataforma Docente
Version: 1.0.0
"""

from __future__ import annotations

from datetime import date, datetime

import pytest

from notification_service.core.exceptions import TemplateRenderError
from notification_service.models.context import GradeRecordedContext
from notification_service.models.notification import NotificationKind
from notification_service.templates.renderer import CONTEXT_MODELS, TemplateRenderer


@pytest.fixture
def renderer() -> TemplateRenderer:
    return TemplateRenderer()


SAMPLE_DATA = {
    NotificationKind.ATTENDANCE_RECORDED: {
        "student_name": "Ana Pérez",
        "class_name": "Matemáticas I",
        "attendance_date": "2025-03-14",
        "status": "PRESENTE",
    },
    NotificationKind.ATTENDANCE_UPDATED: {
        "student_name": "Ana Pérez",
        "class_name": "Matemáticas I",
        "attendance_date": "2025-03-14",
        "status": "TARDANZA",
        "previous_status": "AUSENTE",
    },
    NotificationKind.ATTENDANCE_SUMMARY: {
        "class_name": "Matemáticas I",
        "attendance_date": "2025-03-14",
        "entries": [
            {"student_name": "Ana", "status": "PRESENTE"},
            {"student_name": "Luis", "status": "AUSENTE"},
            {"student_name": "Marta", "status": "PRESENTE"},
        ],
    },
    NotificationKind.EVALUATION_ASSIGNED: {
        "title": "Parcial 1",
        "max_score": 20,
        "student_name": "Ana",
        "class_name": "Física",
        "close_date": "2025-04-01T23:59:00",
    },
    NotificationKind.EVALUATION_EDITED: {
        "title": "Parcial 1",
        "max_score": 20,
        "updated_by": "Prof. Ruiz",
        "changes": [{"field": "Fecha de cierre", "previous": "01/04/2025", "new": "05/04/2025"}],
    },
    NotificationKind.EVALUATION_DELETED: {
        "title": "Parcial 1",
        "max_score": 20,
    },
    NotificationKind.GRADE_RECORDED: {
        "student_name": "Luis Gómez",
        "title": "Parcial 1",
        "score": 17.5,
        "max_score": 20,
    },
    NotificationKind.GRADE_STRUCTURE_CREATED: {
        "class_name": "Física",
        "class_code": "FIS-101",
        "partial_name": "Primer Parcial",
        "accumulative_weight": 40,
        "exam_weight": 60,
        "max_partial_score": 20,
        "min_passing_score": 11,
    },
}

EXPECTED_SUBJECTS = {
    NotificationKind.ATTENDANCE_RECORDED: "Asistencia registrada - Matemáticas I",
    NotificationKind.ATTENDANCE_UPDATED: "Asistencia actualizada - Matemáticas I",
    NotificationKind.ATTENDANCE_SUMMARY: "Resumen de asistencia - Matemáticas I",
    NotificationKind.EVALUATION_ASSIGNED: "Nueva evaluación asignada: Parcial 1",
    NotificationKind.EVALUATION_EDITED: "Actualización en la evaluación: Parcial 1",
    NotificationKind.EVALUATION_DELETED: "Evaluación eliminada: Parcial 1",
    NotificationKind.GRADE_RECORDED: "Nota registrada - Parcial 1",
    NotificationKind.GRADE_STRUCTURE_CREATED: "Nueva Estructura de Calificación - Física",
}


class TestRenderAllKinds:
    """Every notification kind renders subject, HTML and text."""

    def test_every_kind_has_context_model_and_templates(self, renderer):
        for kind in NotificationKind:
            assert kind in CONTEXT_MODELS
            for format_type in ("subject", "html", "text"):
                assert renderer.template_exists(kind, format_type), (kind, format_type)

    @pytest.mark.parametrize("kind", list(NotificationKind))
    def test_render_kind(self, renderer, kind):
        rendered = renderer.render(kind, SAMPLE_DATA[kind])

        assert rendered.kind == kind
        assert rendered.subject == EXPECTED_SUBJECTS[kind]
        assert rendered.body_html.startswith("<!DOCTYPE html>")
        assert "Sistema de Gestión Docente" in rendered.body_html
        assert rendered.body_text
        assert "<" not in rendered.body_text

    def test_render_accepts_kind_value(self, renderer):
        rendered = renderer.render("grade_recorded", SAMPLE_DATA[NotificationKind.GRADE_RECORDED])

        assert rendered.kind == NotificationKind.GRADE_RECORDED

    def test_render_accepts_context_model(self, renderer):
        context = GradeRecordedContext(student_name="Luis", title="Quiz", score=8, max_score=10)

        rendered = renderer.render(NotificationKind.GRADE_RECORDED, context)

        assert "8 / 10" in rendered.body_text


class TestRenderContent:
    """Tests for rendered content details."""

    def test_absence_shows_badge_and_notice(self, renderer, attendance_data):
        rendered = renderer.render(NotificationKind.ATTENDANCE_RECORDED, attendance_data)

        assert "badge-danger" in rendered.body_html
        assert "AUSENTE" in rendered.body_html
        assert "inasistencia" in rendered.body_html
        assert "14/03/2025" in rendered.body_html
        assert "Cita médica" in rendered.body_text

    def test_present_has_no_notice(self, renderer, attendance_data):
        attendance_data["status"] = "PRESENTE"

        rendered = renderer.render(NotificationKind.ATTENDANCE_RECORDED, attendance_data)

        assert "badge-success" in rendered.body_html
        assert "inasistencia" not in rendered.body_html

    def test_update_shows_previous_status(self, renderer):
        rendered = renderer.render(
            NotificationKind.ATTENDANCE_UPDATED,
            SAMPLE_DATA[NotificationKind.ATTENDANCE_UPDATED],
        )

        assert "Estado anterior: AUSENTE" in rendered.body_text
        assert "badge-warning" in rendered.body_html

    def test_summary_counts(self, renderer):
        rendered = renderer.render(
            NotificationKind.ATTENDANCE_SUMMARY,
            SAMPLE_DATA[NotificationKind.ATTENDANCE_SUMMARY],
        )

        assert "Presentes: 2" in rendered.body_text
        assert "Ausentes: 1" in rendered.body_text
        assert "Tardanzas: 0" in rendered.body_text
        assert "Total: 3" in rendered.body_text

    def test_grade_score_formatting(self, renderer, grade_data):
        rendered = renderer.render(NotificationKind.GRADE_RECORDED, grade_data)

        assert "17.5 / 20" in rendered.body_text
        assert "Clase: Física" in rendered.body_text

    def test_edited_evaluation_lists_changes(self, renderer):
        rendered = renderer.render(
            NotificationKind.EVALUATION_EDITED,
            SAMPLE_DATA[NotificationKind.EVALUATION_EDITED],
        )

        assert "Fecha de cierre: 01/04/2025 -> 05/04/2025" in rendered.body_text
        assert "Prof. Ruiz" in rendered.body_html

    def test_assigned_evaluation_close_date(self, renderer):
        rendered = renderer.render(
            NotificationKind.EVALUATION_ASSIGNED,
            SAMPLE_DATA[NotificationKind.EVALUATION_ASSIGNED],
        )

        assert "01/04/2025 23:59" in rendered.body_text

    def test_grade_structure_without_makeup(self, renderer):
        rendered = renderer.render(
            NotificationKind.GRADE_STRUCTURE_CREATED,
            SAMPLE_DATA[NotificationKind.GRADE_STRUCTURE_CREATED],
        )

        assert "Acumulativo: 40%" in rendered.body_text
        assert "Examen: 60%" in rendered.body_text
        assert "Reposición" not in rendered.body_text
        assert "FIS-101" in rendered.body_html

    def test_html_body_escapes_user_input(self, renderer, grade_data):
        grade_data["feedback"] = "<script>alert(1)</script>"

        rendered = renderer.render(NotificationKind.GRADE_RECORDED, grade_data)

        assert "<script>" not in rendered.body_html
        assert "&lt;script&gt;" in rendered.body_html
        assert "<script>alert(1)</script>" in rendered.body_text

    def test_subject_is_not_escaped(self, renderer, grade_data):
        grade_data["title"] = "Lab & Proyecto"

        rendered = renderer.render(NotificationKind.GRADE_RECORDED, grade_data)

        assert rendered.subject == "Nota registrada - Lab & Proyecto"


class TestRenderErrors:
    """Tests for render failures."""

    def test_unknown_kind(self, renderer):
        with pytest.raises(TemplateRenderError) as exc_info:
            renderer.render("birthday_greeting", {})

        assert "Unknown notification kind" in str(exc_info.value)

    def test_missing_required_field(self, renderer, attendance_data):
        del attendance_data["class_name"]

        with pytest.raises(TemplateRenderError) as exc_info:
            renderer.render(NotificationKind.ATTENDANCE_RECORDED, attendance_data)

        assert "class_name" in str(exc_info.value)
        assert exc_info.value.template_name == "attendance_recorded"

    def test_invalid_attendance_status(self, renderer, attendance_data):
        attendance_data["status"] = "JUSTIFICADO"

        with pytest.raises(TemplateRenderError):
            renderer.render(NotificationKind.ATTENDANCE_RECORDED, attendance_data)

    def test_score_above_max_rejected(self, renderer, grade_data):
        grade_data["score"] = 25

        with pytest.raises(TemplateRenderError):
            renderer.render(NotificationKind.GRADE_RECORDED, grade_data)

    def test_missing_template(self, grade_data):
        renderer = TemplateRenderer(templates={"grade_recorded.subject": "Nota - {{ title }}"})

        with pytest.raises(TemplateRenderError) as exc_info:
            renderer.render(NotificationKind.GRADE_RECORDED, grade_data)

        assert exc_info.value.template_name == "grade_recorded.html"

    def test_undefined_variable_fails(self, grade_data):
        renderer = TemplateRenderer(templates={
            "grade_recorded.subject": "{{ nonexistent }}",
            "grade_recorded.html": "",
            "grade_recorded.txt": "",
        })

        with pytest.raises(TemplateRenderError) as exc_info:
            renderer.render(NotificationKind.GRADE_RECORDED, grade_data)

        assert "Failed to render" in str(exc_info.value)


class TestFilters:
    """Tests for custom Jinja2 filters."""

    @pytest.mark.parametrize("value,expected", [
        (date(2025, 3, 4), "04/03/2025"),
        (datetime(2025, 3, 4, 9, 5), "04/03/2025"),
        ("2025-03-04", "2025-03-04"),
        (None, ""),
    ])
    def test_format_date(self, value, expected):
        assert TemplateRenderer._format_date(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (datetime(2025, 3, 4, 9, 5), "04/03/2025 09:05"),
        (date(2025, 3, 4), "04/03/2025"),
        (None, ""),
    ])
    def test_format_datetime(self, value, expected):
        assert TemplateRenderer._format_datetime(value) == expected

    @pytest.mark.parametrize("value,expected", [
        (20, "20"),
        (20.0, "20"),
        (17.5, "17.5"),
        (16.25, "16.25"),
        (7.999, "8"),
        (12.004, "12"),
        (None, "N/A"),
    ])
    def test_format_score(self, value, expected):
        assert TemplateRenderer._format_score(value) == expected


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
