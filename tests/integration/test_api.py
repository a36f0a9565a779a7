"""Integration tests for API endpoints.

Tests FastAPI endpoints including authentication, rendering errors,
statistics and error sanitization.

Author: Plataforma Docente
Version: 1.0.0
"""

from __future__ import annotations

import pytest

from notification_service.core.exceptions import NotificationConfigError, NotificationQueueError


@pytest.fixture
def grade_request() -> dict:
    return {
        "kind": "grade_recorded",
        "to": ["luis@uni.edu"],
        "teacher_id": 7,
        "data": {
            "student_name": "Luis Gómez",
            "title": "Parcial 1",
            "score": 17,
            "max_score": 20,
        },
    }


@pytest.fixture
def raw_request() -> dict:
    return {
        "to": ["ana@uni.edu"],
        "subject": "Aviso",
        "body_html": "<p>Clase suspendida</p>",
    }


class TestHealthEndpoint:
    """Tests for GET /health endpoint."""

    def test_health_check_success(self, test_client, mock_queue):
        mock_queue.depth = 4
        mock_queue.draining = True

        response = test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["email_provider"] == "ok"
        assert data["queue_depth"] == 4
        assert data["draining"] is True
        assert "version" in data
        assert "timestamp" in data

    def test_health_check_smtp_not_configured(self, test_client, mock_config):
        mock_config.validate_smtp_config.side_effect = NotificationConfigError("missing")

        response = test_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "degraded"
        assert data["email_provider"] == "not_configured"

    def test_health_check_no_auth_required(self, test_client, mock_config):
        mock_config.API_KEY = "secret-key"

        response = test_client.get("/health")

        assert response.status_code == 200


class TestCreateNotificationEndpoint:
    """Tests for POST /notifications endpoint."""

    def test_create_notification_success(self, test_client, mock_queue, grade_request):
        response = test_client.post("/notifications", json=grade_request)

        assert response.status_code == 202
        data = response.json()
        assert data["status"] == "accepted"
        assert data["queued"] is True
        assert data["job_id"] == "job123"
        assert data["kind"] == "grade_recorded"
        assert "timestamp" in data

    def test_create_notification_renders_and_tags_job(self, test_client, mock_queue, grade_request):
        grade_request["metadata"] = {"source": "grades"}

        test_client.post("/notifications", json=grade_request)

        kwargs = mock_queue.enqueue.call_args.kwargs
        assert kwargs["recipients"] == ["luis@uni.edu"]
        assert kwargs["subject"] == "Nota registrada - Parcial 1"
        assert "17 / 20" in kwargs["body_text"]
        assert kwargs["body_html"].startswith("<!DOCTYPE html>")
        assert kwargs["metadata"] == {
            "source": "grades",
            "kind": "grade_recorded",
            "teacher_id": 7,
        }

    def test_create_notification_without_teacher(self, test_client, mock_queue, grade_request):
        del grade_request["teacher_id"]

        test_client.post("/notifications", json=grade_request)

        assert "teacher_id" not in mock_queue.enqueue.call_args.kwargs["metadata"]

    def test_invalid_template_data_returns_422(self, test_client, mock_queue, grade_request):
        grade_request["data"]["score"] = 30

        response = test_client.post("/notifications", json=grade_request)

        assert response.status_code == 422
        assert "grade_recorded" in response.json()["detail"]
        mock_queue.enqueue.assert_not_called()

    def test_unknown_kind_returns_422(self, test_client, mock_queue, grade_request):
        grade_request["kind"] = "birthday_greeting"

        response = test_client.post("/notifications", json=grade_request)

        assert response.status_code == 422
        mock_queue.enqueue.assert_not_called()

    def test_invalid_email_returns_422(self, test_client, grade_request):
        grade_request["to"] = ["not-an-email"]

        response = test_client.post("/notifications", json=grade_request)

        assert response.status_code == 422

    def test_empty_recipients_returns_422(self, test_client, grade_request):
        grade_request["to"] = []

        response = test_client.post("/notifications", json=grade_request)

        assert response.status_code == 422

    def test_queue_shut_down_returns_503(self, test_client, mock_queue, grade_request):
        mock_queue.enqueue.side_effect = NotificationQueueError("Notification queue is shut down")

        response = test_client.post("/notifications", json=grade_request)

        assert response.status_code == 503

    def test_internal_error_sanitized(self, test_client, mock_queue, grade_request):
        mock_queue.enqueue.side_effect = Exception("smtp.test.com:587 password=hunter2")

        response = test_client.post("/notifications", json=grade_request)

        assert response.status_code == 500
        detail = response.json()["detail"]
        assert "hunter2" not in detail
        assert "smtp.test.com" not in detail


class TestRawNotificationEndpoint:
    """Tests for POST /notifications/raw endpoint."""

    def test_raw_notification_success(self, test_client, mock_queue, raw_request):
        raw_request["teacher_id"] = "12"

        response = test_client.post("/notifications/raw", json=raw_request)

        assert response.status_code == 202
        data = response.json()
        assert data["job_id"] == "job123"
        assert data["kind"] is None
        kwargs = mock_queue.enqueue.call_args.kwargs
        assert kwargs["subject"] == "Aviso"
        assert kwargs["body_html"] == "<p>Clase suspendida</p>"
        assert kwargs["body_text"] is None
        assert kwargs["metadata"] == {"teacher_id": "12"}

    def test_raw_notification_missing_subject(self, test_client, raw_request):
        del raw_request["subject"]

        response = test_client.post("/notifications/raw", json=raw_request)

        assert response.status_code == 422

    def test_raw_notification_missing_body(self, test_client, raw_request):
        del raw_request["body_html"]

        response = test_client.post("/notifications/raw", json=raw_request)

        assert response.status_code == 422


class TestStatisticsEndpoint:
    """Tests for GET /notifications/stats endpoint."""

    def test_global_statistics(self, test_client, mock_queue):
        response = test_client.get("/notifications/stats")

        assert response.status_code == 200
        data = response.json()
        assert data["sent"] == 8
        assert data["failed"] == 2
        assert data["queued"] == 1
        assert data["draining"] is True
        assert data["success_rate_percent"] == 80
        assert data["recent_errors"] == []
        assert data["filtered_by"] == "global"
        assert data["teacher_id"] is None
        mock_queue.get_statistics.assert_called_once_with(None)

    def test_teacher_statistics(self, test_client, mock_queue):
        response = test_client.get("/notifications/stats", params={"teacher_id": "7"})

        assert response.status_code == 200
        data = response.json()
        assert data["filtered_by"] == "teacher"
        assert data["teacher_id"] == "7"
        mock_queue.get_statistics.assert_called_once_with("7")

    def test_statistics_error_sanitized(self, test_client, mock_queue):
        mock_queue.get_statistics.side_effect = Exception("internal ledger state")

        response = test_client.get("/notifications/stats")

        assert response.status_code == 500
        assert "ledger" not in response.json()["detail"]


class TestResetStatisticsEndpoint:
    """Tests for POST /notifications/stats/reset endpoint."""

    def test_reset_global(self, test_client, mock_queue):
        response = test_client.post("/notifications/stats/reset")

        assert response.status_code == 200
        data = response.json()
        assert data["detail"] == "Global notification statistics reset"
        assert data["statistics"]["filtered_by"] == "global"
        mock_queue.reset_statistics.assert_called_once_with()
        mock_queue.reset_all_statistics.assert_not_called()

    def test_reset_teacher(self, test_client, mock_queue):
        response = test_client.post("/notifications/stats/reset", params={"teacher_id": "7"})

        assert response.status_code == 200
        assert response.json()["statistics"]["filtered_by"] == "teacher"
        mock_queue.reset_statistics.assert_called_once_with("7")

    def test_reset_all(self, test_client, mock_queue):
        response = test_client.post(
            "/notifications/stats/reset", params={"all": "true", "teacher_id": "7"}
        )

        assert response.status_code == 200
        assert response.json()["detail"] == "All notification statistics reset"
        mock_queue.reset_all_statistics.assert_called_once_with()
        mock_queue.reset_statistics.assert_not_called()


class TestAPIKeyAuthentication:
    """Tests for API key authentication."""

    def test_auth_disabled_by_default(self, test_client, mock_config, grade_request):
        mock_config.API_KEY = ""

        response = test_client.post("/notifications", json=grade_request)

        assert response.status_code == 202

    def test_auth_required_when_configured(self, test_client, mock_config, grade_request):
        mock_config.API_KEY = "secret-api-key"

        response = test_client.post("/notifications", json=grade_request)

        assert response.status_code == 401
        assert "API key required" in response.json()["detail"]

    def test_auth_failure_with_invalid_key(self, test_client, mock_config, grade_request):
        mock_config.API_KEY = "secret-api-key"

        response = test_client.post(
            "/notifications",
            json=grade_request,
            headers={"X-API-Key": "wrong-key"},
        )

        assert response.status_code == 401
        assert "Invalid API key" in response.json()["detail"]

    def test_authenticated_client(self, authenticated_client, grade_request):
        response = authenticated_client.post("/notifications", json=grade_request)

        assert response.status_code == 202

    @pytest.mark.parametrize("method,path", [
        ("get", "/notifications/stats"),
        ("post", "/notifications/stats/reset"),
    ])
    def test_admin_endpoints_require_auth(self, test_client, mock_config, method, path):
        mock_config.API_KEY = "secret-api-key"

        response = getattr(test_client, method)(path)

        assert response.status_code == 401


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
