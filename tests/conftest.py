"""Pytest configuration and fixtures for notification service tests.

Provides reusable fixtures for unit and integration tests including
mocked configuration, SMTP connections, fake mail transports and the
FastAPI test client.

Author: Plataforma Docente
Version: 1.0.0
"""

from __future__ import annotations

import os
from datetime import date
from typing import Any
from unittest.mock import MagicMock

import pytest

# Set test environment before importing application modules
os.environ.setdefault("SMTP_HOST", "smtp.test.com")
os.environ.setdefault("SMTP_USER", "test@test.com")
os.environ.setdefault("SMTP_PASSWORD", "testpassword")
os.environ.setdefault("SMTP_FROM_EMAIL", "noreply@test.com")
os.environ.setdefault("LOG_TO_FILE", "false")


# =============================================================================
# Configuration Fixtures
# =============================================================================
@pytest.fixture
def mock_config() -> MagicMock:
    """Create a mock NotificationConfig for testing (no delays)."""
    config = MagicMock()
    config.SMTP_HOST = "smtp.test.com"
    config.SMTP_PORT = 587
    config.SMTP_USER = "test@test.com"
    config.SMTP_PASSWORD = "testpassword"
    config.SMTP_FROM_EMAIL = "noreply@test.com"
    config.SMTP_FROM_NAME = "Test Service"
    config.SMTP_USE_TLS = True
    config.SMTP_TIMEOUT = 30
    config.SERVICE_NAME = "notification-service-test"
    config.SERVICE_VERSION = "1.0.0"
    config.API_HOST = "0.0.0.0"
    config.API_PORT = 8002
    config.API_KEY = ""
    config.NOTIFY_MAX_RETRIES = 3
    config.NOTIFY_SEND_DELAY_SECONDS = 1.0
    config.NOTIFY_RETRY_DELAY_SECONDS = 2.0
    config.STATS_MAX_RECENT_ERRORS = 10
    config.STATS_MAX_KEYS = 1000
    config.STATS_KEY_FIELD = "teacher_id"
    config.LOG_LEVEL = "DEBUG"
    config.LOG_TO_FILE = False
    config.validate_smtp_config = MagicMock()
    config.get_smtp_config = MagicMock(return_value={
        "host": "smtp.test.com",
        "port": 587,
        "username": "test@test.com",
        "password": "testpassword",
        "from_email": "noreply@test.com",
        "from_name": "Test Service",
        "use_tls": True,
        "timeout": 30,
    })
    return config


# =============================================================================
# SMTP Client Fixtures
# =============================================================================
@pytest.fixture
def mock_smtp_config():
    """Create an SMTPConfig for testing."""
    from notification_service.models.smtp_config import SMTPConfig
    return SMTPConfig(
        host="smtp.test.com",
        port=587,
        username="test@test.com",
        password="testpassword",
        from_email="noreply@test.com",
        from_name="Test Service",
        use_tls=True,
        timeout=30,
    )


@pytest.fixture
def mock_smtp_connection() -> MagicMock:
    """Create a mock SMTP connection."""
    smtp = MagicMock()
    smtp.noop.return_value = (250, b"OK")
    smtp.send_message.return_value = {}
    smtp.starttls.return_value = (220, b"TLS ready")
    smtp.login.return_value = (235, b"Authentication successful")
    smtp.quit.return_value = (221, b"Bye")
    return smtp


# =============================================================================
# Queue Fixtures
# =============================================================================
class FakeTransport:
    """Mail transport that records calls and fails on demand.

    ``fail_subjects`` maps a subject to the number of times it should fail
    before succeeding (use a large number for "always fails").
    """

    def __init__(self, fail_subjects: dict[str, int] | None = None) -> None:
        self.fail_subjects = dict(fail_subjects or {})
        self.calls: list[str] = []
        self.sent: list[str] = []

    def send_email(self, recipients, subject, body_html, body_text=None) -> None:
        self.calls.append(subject)
        remaining = self.fail_subjects.get(subject, 0)
        if remaining > 0:
            self.fail_subjects[subject] = remaining - 1
            from notification_service.core.exceptions import TransportError
            raise TransportError(f"Simulated failure for {subject}")
        self.sent.append(subject)


class RecordingSleep:
    """Async sleep replacement that records the requested delays."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def make_transport():
    """Factory for FakeTransport with per-subject failure counts."""
    return FakeTransport


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def make_queue(mock_config: MagicMock, recording_sleep: RecordingSleep):
    """Factory building a NotificationQueue with mocked config and recorded sleeps."""
    from notification_service.delivery.notifier import NotificationQueue

    def _make(transport: Any, **overrides: Any) -> NotificationQueue:
        for name, value in overrides.items():
            setattr(mock_config, name, value)
        return NotificationQueue(transport, config=mock_config, sleep=recording_sleep)

    return _make


# =============================================================================
# Template Fixtures
# =============================================================================
@pytest.fixture
def attendance_data() -> dict[str, Any]:
    return {
        "student_name": "Ana Pérez",
        "class_name": "Matemáticas I",
        "attendance_date": date(2025, 3, 14),
        "status": "AUSENTE",
        "description": "Cita médica",
    }


@pytest.fixture
def grade_data() -> dict[str, Any]:
    return {
        "student_name": "Luis Gómez",
        "title": "Parcial 1",
        "score": 17.5,
        "max_score": 20,
        "class_name": "Física",
    }


# =============================================================================
# FastAPI Test Client Fixtures
# =============================================================================
@pytest.fixture
def mock_queue() -> MagicMock:
    """Create a mock NotificationQueue."""
    from notification_service.models.stats import StatisticsSnapshot

    queue = MagicMock()
    queue.enqueue.return_value = "job123"
    queue.depth = 0
    queue.draining = False
    queue.get_statistics.return_value = StatisticsSnapshot(
        sent=8,
        failed=2,
        queued=1,
        draining=True,
        success_rate_percent=80,
    )
    return queue


@pytest.fixture
def test_client(mock_config: MagicMock, mock_queue: MagicMock):
    """Create a FastAPI test client with mocked dependencies."""
    from contextlib import asynccontextmanager
    from fastapi import FastAPI
    from fastapi.testclient import TestClient
    import notification_service.api.main as main_module
    from notification_service.api.main import AppState
    from notification_service.templates.renderer import TemplateRenderer

    # Mock lifespan that does not open SMTP connections
    @asynccontextmanager
    async def mock_lifespan(app: FastAPI):
        main_module.app_state = AppState(
            config=mock_config,
            queue=mock_queue,
            renderer=TemplateRenderer(),
        )
        yield
        main_module.app_state = None

    test_app = FastAPI(
        title="notification-service-test",
        lifespan=mock_lifespan,
    )

    # Copy routes from the real app
    for route in main_module.app.routes:
        test_app.routes.append(route)

    with TestClient(test_app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def authenticated_client(test_client, mock_config: MagicMock):
    """Create a test client with API key authentication."""
    mock_config.API_KEY = "test-api-key-12345"

    class AuthenticatedClient:
        def __init__(self, client):
            self.client = client
            self.headers = {"X-API-Key": "test-api-key-12345"}

        def get(self, url, **kwargs):
            kwargs.setdefault("headers", {}).update(self.headers)
            return self.client.get(url, **kwargs)

        def post(self, url, **kwargs):
            kwargs.setdefault("headers", {}).update(self.headers)
            return self.client.post(url, **kwargs)

    return AuthenticatedClient(test_client)
