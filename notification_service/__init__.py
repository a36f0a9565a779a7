"""Notification Service - Asynchronous notification delivery for the academic platform.

Sends best-effort emails as side effects of attendance, evaluation and
grading operations:
- Serial in-process delivery queue with retry and pacing
- Global and per-teacher delivery statistics
- Template-based rendering of every notification kind (Jinja2)
- SMTP delivery (Gmail or any STARTTLS server)

Architecture:
    - NotificationQueue (in-memory, one asyncio drain task)
    - StatisticsLedger (counters and recent-error log)
    - TemplateRenderer (Jinja2, in-memory templates)
    - SMTPClient (connection reuse, transient error detection)

Modules:
    - core: Exceptions, logger
    - config: Pydantic v2 settings
    - models: Data models (jobs, statistics, template contexts)
    - clients: Mail transport contract and SMTP client
    - delivery: Notification queue and statistics ledger
    - templates: Notification template rendering (Jinja2)
    - api: FastAPI application

Usage:
    from notification_service import NotificationQueue, SMTPClient, TemplateRenderer

    renderer = TemplateRenderer()
    queue = NotificationQueue(SMTPClient())

    rendered = renderer.render("grade_recorded", {
        "student_name": "Ana Pérez",
        "title": "Parcial 1",
        "score": 17,
        "max_score": 20,
    })
    # Inside a running event loop
    job_id = queue.enqueue(
        ["ana@uni.edu"],
        rendered.subject,
        rendered.body_html,
        metadata={"teacher_id": 7, "kind": "grade_recorded"},
        body_text=rendered.body_text,
    )

    queue.get_statistics(7)

Author: Plataforma Docente
Created: 2025-11-04
Version: 1.0.0
"""

__version__ = "1.0.0"

# Clients
from notification_service.clients import MailTransport, SMTPClient

# Configuration
from notification_service.config import NotificationConfig

# Core utilities
from notification_service.core import (
    NotificationConfigError,
    NotificationQueueError,
    NotificationServiceError,
    TemplateRenderError,
    TransportError,
    get_logger,
)

# Delivery
from notification_service.delivery import NotificationQueue, StatisticsLedger

# Models
from notification_service.models import (
    ErrorEntry,
    NotificationJob,
    NotificationKind,
    RenderedNotification,
    SMTPConfig,
    StatisticsSnapshot,
)

# Templates
from notification_service.templates import TemplateRenderer

__all__ = [
    # Version
    "__version__",
    # Core exceptions
    "NotificationServiceError",
    "NotificationConfigError",
    "NotificationQueueError",
    "TransportError",
    "TemplateRenderError",
    "get_logger",
    # Configuration
    "NotificationConfig",
    # Models
    "NotificationKind",
    "NotificationJob",
    "RenderedNotification",
    "SMTPConfig",
    "ErrorEntry",
    "StatisticsSnapshot",
    # Clients
    "MailTransport",
    "SMTPClient",
    # Delivery
    "NotificationQueue",
    "StatisticsLedger",
    # Templates
    "TemplateRenderer",
]
