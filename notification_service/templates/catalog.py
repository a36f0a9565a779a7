"""Jinja2 sources for every notification kind.

Each kind has three templates: ``<kind>.subject``, ``<kind>.html`` and
``<kind>.txt``. HTML bodies extend ``base.html``. Only ``.html`` templates
are autoescaped.
"""

BASE_HTML = """\
<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <style>
        body { font-family: Arial, sans-serif; background-color: #f4f4f4; margin: 0; padding: 20px; }
        .container { max-width: 600px; margin: 0 auto; background-color: white; border-radius: 8px; overflow: hidden; box-shadow: 0 2px 10px rgba(0,0,0,0.1); }
        .header { background: {{ header_color | default('linear-gradient(135deg, #667eea 0%, #764ba2 100%)') }}; color: white; padding: 30px; text-align: center; }
        .content { padding: 30px; }
        .footer { background-color: #f8f9fa; padding: 20px; text-align: center; color: #666; font-size: 12px; }
        .badge { display: inline-block; padding: 5px 10px; border-radius: 4px; font-size: 12px; font-weight: bold; }
        .badge-success { background-color: #28a745; color: white; }
        .badge-danger { background-color: #dc3545; color: white; }
        .badge-warning { background-color: #ffc107; color: #212529; }
        .badge-info { background-color: #17a2b8; color: white; }
        .info-card { background-color: #f8f9fa; border-left: 4px solid #667eea; padding: 15px; margin: 15px 0; border-radius: 4px; }
        .notice { margin-top: 20px; padding: 15px; background-color: #fff3cd; border-radius: 4px; border-left: 4px solid #ffc107; }
        .change-item { padding: 10px; margin: 5px 0; background-color: #fff3cd; border-radius: 4px; }
        table { width: 100%; border-collapse: collapse; margin: 15px 0; }
        table th, table td { padding: 10px; text-align: left; border-bottom: 1px solid #dee2e6; }
        table th { background-color: #f8f9fa; font-weight: bold; }
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>{% block title %}{% endblock %}</h1>
        </div>
        <div class="content">
            {% block content %}{% endblock %}
        </div>
        <div class="footer">
            <p>Este es un mensaje automático del Sistema de Gestión Docente.</p>
            <p>Por favor, no respondas a este correo.</p>
        </div>
    </div>
</body>
</html>
"""

_ATTENDANCE_CARD = """\
<div class="info-card">
    <p><strong>Clase:</strong> {{ class_name }}</p>
    <p><strong>Fecha:</strong> {{ attendance_date | format_date }}</p>
    {% if previous_status %}
    <p><strong>Estado anterior:</strong> {{ previous_status.value }}</p>
    {% endif %}
    <p><strong>Estado:</strong> <span class="badge {{ badge_class(status) }}">{{ status.value }}</span></p>
    {% if description %}
    <p><strong>Observación:</strong> {{ description }}</p>
    {% endif %}
</div>
{% if status == AttendanceStatus.ABSENT %}
<p class="notice"><strong>Importante:</strong> Tu inasistencia ha sido registrada.
Si tienes una justificación, por favor comunícate con tu docente.</p>
{% elif status == AttendanceStatus.LATE %}
<p class="notice"><strong>Nota:</strong> Tu tardanza ha sido registrada.
Te recomendamos llegar puntual a las próximas clases.</p>
{% endif %}
"""

_ATTENDANCE_TEXT = """\
Hola {{ student_name }},

{{ intro }}

Clase: {{ class_name }}
Fecha: {{ attendance_date | format_date }}
{% if previous_status %}Estado anterior: {{ previous_status.value }}
{% endif %}Estado: {{ status.value }}
{% if description %}Observación: {{ description }}
{% endif %}
"""

TEMPLATES: dict[str, str] = {
    "base.html": BASE_HTML,
    # ------------------------------------------------------------------
    "attendance_recorded.subject": "Asistencia registrada - {{ class_name }}",
    "attendance_recorded.html": """\
{% extends "base.html" %}
{% set header_color = 'linear-gradient(135deg, #4facfe 0%, #00f2fe 100%)' %}
{% block title %}Asistencia Registrada{% endblock %}
{% block content %}
<p>Hola <strong>{{ student_name }}</strong>,</p>
<p>Se ha registrado tu asistencia para la clase.</p>
""" + _ATTENDANCE_CARD + """\
{% endblock %}
""",
    "attendance_recorded.txt": "{% set intro = 'Se ha registrado tu asistencia para la clase.' %}"
    + _ATTENDANCE_TEXT,
    # ------------------------------------------------------------------
    "attendance_updated.subject": "Asistencia actualizada - {{ class_name }}",
    "attendance_updated.html": """\
{% extends "base.html" %}
{% set header_color = 'linear-gradient(135deg, #43e97b 0%, #38f9d7 100%)' %}
{% block title %}Asistencia Actualizada{% endblock %}
{% block content %}
<p>Hola <strong>{{ student_name }}</strong>,</p>
<p>Tu registro de asistencia ha sido actualizado.</p>
""" + _ATTENDANCE_CARD + """\
{% endblock %}
""",
    "attendance_updated.txt": "{% set intro = 'Tu registro de asistencia ha sido actualizado.' %}"
    + _ATTENDANCE_TEXT,
    # ------------------------------------------------------------------
    "attendance_summary.subject": "Resumen de asistencia - {{ class_name }}",
    "attendance_summary.html": """\
{% extends "base.html" %}
{% block title %}Resumen de Asistencia{% endblock %}
{% block content %}
<p>Se registraron las asistencias de la clase <strong>{{ class_name }}</strong>
del {{ attendance_date | format_date }}.</p>
<div class="info-card">
    <p><strong>Presentes:</strong> {{ data.count(AttendanceStatus.PRESENT) }}</p>
    <p><strong>Ausentes:</strong> {{ data.count(AttendanceStatus.ABSENT) }}</p>
    <p><strong>Tardanzas:</strong> {{ data.count(AttendanceStatus.LATE) }}</p>
    <p><strong>Total:</strong> {{ entries | length }}</p>
</div>
{% if entries %}
<table>
    <thead>
        <tr><th>Estudiante</th><th>Estado</th></tr>
    </thead>
    <tbody>
    {% for entry in entries %}
        <tr>
            <td>{{ entry.student_name }}</td>
            <td><span class="badge {{ badge_class(entry.status) }}">{{ entry.status.value }}</span></td>
        </tr>
    {% endfor %}
    </tbody>
</table>
{% endif %}
{% endblock %}
""",
    "attendance_summary.txt": """\
Resumen de asistencia - {{ class_name }} ({{ attendance_date | format_date }})

Presentes: {{ data.count(AttendanceStatus.PRESENT) }}
Ausentes: {{ data.count(AttendanceStatus.ABSENT) }}
Tardanzas: {{ data.count(AttendanceStatus.LATE) }}
Total: {{ entries | length }}
{% for entry in entries %}
- {{ entry.student_name }}: {{ entry.status.value }}
{% endfor %}
""",
    # ------------------------------------------------------------------
    "evaluation_assigned.subject": "Nueva evaluación asignada: {{ title }}",
    "evaluation_assigned.html": """\
{% extends "base.html" %}
{% block title %}Nueva Evaluación{% endblock %}
{% block content %}
<p>Hola <strong>{{ student_name or 'estudiante' }}</strong>,</p>
<p>Se te ha asignado una nueva evaluación en tu clase.</p>
<div class="info-card">
    <p><strong>Título:</strong> {{ title }}</p>
    <p><strong>Clase:</strong> {{ class_name or 'Sin clase asociada' }}</p>
    <p><strong>Nota máxima:</strong> {{ max_score | format_score }}</p>
    {% if start_date %}<p><strong>Fecha de inicio:</strong> {{ start_date | format_datetime }}</p>{% endif %}
    {% if close_date %}<p><strong>Fecha de cierre:</strong> {{ close_date | format_datetime }}</p>{% endif %}
</div>
<p>Por favor ingresa a la plataforma para ver más detalles y completar la evaluación.</p>
{% endblock %}
""",
    "evaluation_assigned.txt": """\
Hola {{ student_name or 'estudiante' }},

Se te ha asignado una nueva evaluación.

Título: {{ title }}
Clase: {{ class_name or 'Sin clase asociada' }}
Nota máxima: {{ max_score | format_score }}
{% if start_date %}Fecha de inicio: {{ start_date | format_datetime }}
{% endif %}{% if close_date %}Fecha de cierre: {{ close_date | format_datetime }}
{% endif %}
""",
    # ------------------------------------------------------------------
    "evaluation_edited.subject": "Actualización en la evaluación: {{ title }}",
    "evaluation_edited.html": """\
{% extends "base.html" %}
{% block title %}Evaluación Actualizada{% endblock %}
{% block content %}
<p>Hola,</p>
<p>Se ha actualizado la evaluación <strong>"{{ title }}"</strong>.</p>
<div class="info-card">
    <p><strong>Evaluación:</strong> {{ title }}</p>
    <p><strong>Nota máxima:</strong> {{ max_score | format_score }}</p>
    {% if close_date %}<p><strong>Fecha de cierre:</strong> {{ close_date | format_datetime }}</p>{% endif %}
    <p><strong>Actualizado por:</strong> {{ updated_by or 'Sistema' }}</p>
</div>
{% if changes %}
<h3>Cambios realizados:</h3>
{% for change in changes %}
<div class="change-item">
    <strong>{{ change.field }}:</strong><br>
    Anterior: <del>{{ change.previous or 'N/A' }}</del><br>
    Nuevo: <strong style="color: #28a745;">{{ change.new or 'N/A' }}</strong>
</div>
{% endfor %}
{% endif %}
<p style="margin-top: 20px; color: #666;">
    Por favor, revisa los cambios y asegúrate de estar al tanto de las actualizaciones.
</p>
{% endblock %}
""",
    "evaluation_edited.txt": """\
Se ha actualizado la evaluación "{{ title }}".

Nota máxima: {{ max_score | format_score }}
{% if close_date %}Fecha de cierre: {{ close_date | format_datetime }}
{% endif %}Actualizado por: {{ updated_by or 'Sistema' }}
{% if changes %}
Cambios realizados:
{% for change in changes %}
- {{ change.field }}: {{ change.previous or 'N/A' }} -> {{ change.new or 'N/A' }}
{% endfor %}
{% endif %}
""",
    # ------------------------------------------------------------------
    "evaluation_deleted.subject": "Evaluación eliminada: {{ title }}",
    "evaluation_deleted.html": """\
{% extends "base.html" %}
{% set header_color = 'linear-gradient(135deg, #f093fb 0%, #f5576c 100%)' %}
{% block title %}Evaluación Eliminada{% endblock %}
{% block content %}
<p>Hola,</p>
<p>Te informamos que la evaluación <strong>"{{ title }}"</strong> ha sido eliminada del sistema.</p>
<div class="info-card" style="border-left-color: #dc3545;">
    <p><strong>Evaluación:</strong> {{ title }}</p>
    <p><strong>Nota máxima:</strong> {{ max_score | format_score }}</p>
    <p><strong>Eliminado por:</strong> {{ updated_by or 'Sistema' }}</p>
</div>
<p style="margin-top: 20px; color: #666;">
    Esta evaluación ya no está disponible en el sistema. Si tienes dudas, contacta con tu docente.
</p>
{% endblock %}
""",
    "evaluation_deleted.txt": """\
La evaluación "{{ title }}" ha sido eliminada del sistema.

Nota máxima: {{ max_score | format_score }}
Eliminado por: {{ updated_by or 'Sistema' }}
""",
    # ------------------------------------------------------------------
    "grade_recorded.subject": "Nota registrada - {{ title }}",
    "grade_recorded.html": """\
{% extends "base.html" %}
{% block title %}Nota Registrada{% endblock %}
{% block content %}
<p>Hola <strong>{{ student_name }}</strong>,</p>
<p>Se ha registrado tu nota para la evaluación <strong>"{{ title }}"</strong>.</p>
<div class="info-card">
    {% if class_name %}<p><strong>Clase:</strong> {{ class_name }}</p>{% endif %}
    <p><strong>Nota:</strong> {{ score | format_score }} / {{ max_score | format_score }}</p>
    {% if feedback %}<p><strong>Retroalimentación:</strong> {{ feedback }}</p>{% endif %}
</div>
{% endblock %}
""",
    "grade_recorded.txt": """\
Hola {{ student_name }},

Se ha registrado tu nota para la evaluación "{{ title }}".

{% if class_name %}Clase: {{ class_name }}
{% endif %}Nota: {{ score | format_score }} / {{ max_score | format_score }}
{% if feedback %}Retroalimentación: {{ feedback }}
{% endif %}
""",
    # ------------------------------------------------------------------
    "grade_structure_created.subject": "Nueva Estructura de Calificación - {{ class_name }}",
    "grade_structure_created.html": """\
{% extends "base.html" %}
{% block title %}Estructura de Calificación Configurada{% endblock %}
{% block content %}
<p>Se ha configurado la estructura de calificación para:</p>
<ul>
    <li><strong>Clase:</strong> {{ class_name }}{% if class_code %} ({{ class_code }}){% endif %}</li>
    <li><strong>Parcial:</strong> {{ partial_name }}</li>
</ul>
<h3>Distribución de Pesos:</h3>
<table>
    <tr><th>Componente</th><th>Porcentaje</th></tr>
    <tr><td>Acumulativo</td><td>{{ accumulative_weight | format_score }}%</td></tr>
    <tr><td>Examen</td><td>{{ exam_weight | format_score }}%</td></tr>
    {% if makeup_weight > 0 %}
    <tr><td>Reposición</td><td>{{ makeup_weight | format_score }}%</td></tr>
    {% endif %}
</table>
<div class="info-card">
    <p><strong>Nota máxima del parcial:</strong> {{ max_partial_score | format_score }} puntos</p>
    <p><strong>Nota mínima de aprobación:</strong> {{ min_passing_score | format_score }} puntos</p>
</div>
{% if notes %}
<p class="notice"><strong>Observaciones:</strong> {{ notes }}</p>
{% endif %}
<p>Esta estructura será utilizada para calcular sus calificaciones en este parcial.</p>
{% endblock %}
""",
    "grade_structure_created.txt": """\
Se ha configurado la estructura de calificación.

Clase: {{ class_name }}{% if class_code %} ({{ class_code }}){% endif %}
Parcial: {{ partial_name }}

Acumulativo: {{ accumulative_weight | format_score }}%
Examen: {{ exam_weight | format_score }}%
{% if makeup_weight > 0 %}Reposición: {{ makeup_weight | format_score }}%
{% endif %}
Nota máxima del parcial: {{ max_partial_score | format_score }} puntos
Nota mínima de aprobación: {{ min_passing_score | format_score }} puntos
{% if notes %}Observaciones: {{ notes }}
{% endif %}
""",
}
