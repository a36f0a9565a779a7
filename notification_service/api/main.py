"""Notification Service API.

FastAPI application exposing the notification queue to the academic
platform's business operations and to administrators:
- POST /notifications: Render a notification kind and queue it
- POST /notifications/raw: Queue a pre-rendered notification
- GET /notifications/stats: Global or per-teacher delivery statistics
- POST /notifications/stats/reset: Reset statistics
- GET /health: Service health check

Security features:
- API key authentication
- Sanitized error responses

Author: Plataforma Docente
Version: 1.0.0
"""

from __future__ import annotations

import asyncio
import secrets
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Annotated, Any

from fastapi import Depends, FastAPI, HTTPException, Query, status
from fastapi.security import APIKeyHeader

from notification_service.api.schemas import (
    ErrorResponse,
    HealthResponse,
    NotificationRequest,
    NotificationResponse,
    RawNotificationRequest,
    ResetResponse,
    StatisticsResponse,
)
from notification_service.clients.smtp import SMTPClient
from notification_service.config import NotificationConfig
from notification_service.core.exceptions import (
    NotificationConfigError,
    NotificationQueueError,
    TemplateRenderError,
)
from notification_service.core.logger import get_logger, setup_logging
from notification_service.delivery.notifier import NotificationQueue
from notification_service.models.smtp_config import SMTPConfig
from notification_service.models.stats import StatisticsSnapshot
from notification_service.templates.renderer import TemplateRenderer

logger = get_logger(__name__)


# =============================================================================
# Application State (Dependency Injection)
# =============================================================================
@dataclass
class AppState:
    """Application state container for dependency injection."""

    config: NotificationConfig
    queue: NotificationQueue | None = None
    renderer: TemplateRenderer | None = None
    smtp_client: SMTPClient | None = None


app_state: AppState | None = None


def get_config() -> NotificationConfig:
    """Dependency: Get application configuration."""
    if not app_state or not app_state.config:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return app_state.config


def get_queue() -> NotificationQueue:
    """Dependency: Get the notification queue."""
    if not app_state or not app_state.queue:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return app_state.queue


def get_renderer() -> TemplateRenderer:
    """Dependency: Get the template renderer."""
    if not app_state or not app_state.renderer:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialized",
        )
    return app_state.renderer


# =============================================================================
# API Key Authentication
# =============================================================================
API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


async def verify_api_key(
    api_key: Annotated[str | None, Depends(API_KEY_HEADER)],
    config: Annotated[NotificationConfig, Depends(get_config)],
) -> bool:
    """Verify API key if authentication is enabled.

    Returns True if:
    - API_KEY is not configured (auth disabled)
    - API_KEY matches the provided key
    """
    configured_key = getattr(config, "API_KEY", None)

    if not configured_key:
        return True

    if not api_key:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API key required",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    if not secrets.compare_digest(api_key, configured_key):
        logger.warning("Invalid API key attempt")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )

    return True


# =============================================================================
# Module-level Configuration
# =============================================================================
_config = NotificationConfig()


# =============================================================================
# Lifespan Context Manager
# =============================================================================
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the SMTP client, queue and renderer; drain nothing on exit."""
    global app_state

    app_state = AppState(config=_config)

    setup_logging(
        log_dir=_config.LOG_DIR,
        log_level=_config.LOG_LEVEL,
        enable_file=_config.LOG_TO_FILE,
        settings=_config,
    )

    try:
        _config.validate_smtp_config()
        app_state.smtp_client = SMTPClient(SMTPConfig(**_config.get_smtp_config()))
        app_state.queue = NotificationQueue(app_state.smtp_client, config=_config)
        app_state.renderer = TemplateRenderer()
    except Exception as e:
        logger.error(f"Failed to start API: {e}")
        raise

    yield

    logger.info(f"Shutting down {_config.SERVICE_NAME}...")
    if app_state and app_state.queue:
        await app_state.queue.shutdown()
    if app_state and app_state.smtp_client:
        # Blocks until a send still running in its worker thread finishes
        await asyncio.to_thread(app_state.smtp_client.close)
    logger.info(f"{_config.SERVICE_NAME} stopped")


# =============================================================================
# FastAPI Application
# =============================================================================
def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    application = FastAPI(
        title=_config.SERVICE_NAME,
        description="Notification delivery for the academic management platform",
        version=_config.SERVICE_VERSION,
        lifespan=lifespan,
    )

    return application


app = create_app()


def _statistics_response(
    snapshot: StatisticsSnapshot, teacher_id: str | None
) -> StatisticsResponse:
    return StatisticsResponse(
        sent=snapshot.sent,
        failed=snapshot.failed,
        queued=snapshot.queued,
        draining=snapshot.draining,
        last_send=snapshot.last_send,
        recent_errors=snapshot.recent_errors,
        success_rate_percent=snapshot.success_rate_percent,
        filtered_by="teacher" if teacher_id is not None else "global",
        teacher_id=teacher_id,
    )


def _job_metadata(
    config: NotificationConfig,
    metadata: dict[str, Any],
    teacher_id: int | str | None,
    kind: str | None = None,
) -> dict[str, Any]:
    result = dict(metadata)
    if kind:
        result["kind"] = kind
    if teacher_id is not None:
        result[config.STATS_KEY_FIELD] = teacher_id
    return result


# =============================================================================
# API Endpoints
# =============================================================================
@app.post(
    "/notifications",
    response_model=NotificationResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        422: {"model": ErrorResponse, "description": "Invalid notification data"},
        500: {"model": ErrorResponse, "description": "Server error"},
        503: {"model": ErrorResponse, "description": "Queue unavailable"},
    },
)
async def create_notification(
    request: NotificationRequest,
    queue: Annotated[NotificationQueue, Depends(get_queue)],
    renderer: Annotated[TemplateRenderer, Depends(get_renderer)],
    config: Annotated[NotificationConfig, Depends(get_config)],
    _auth: Annotated[bool, Depends(verify_api_key)],
) -> NotificationResponse:
    """Render a notification and queue it for delivery.

    Returns as soon as the notification is queued; delivery outcome is
    only visible through the statistics endpoint.
    """
    try:
        rendered = renderer.render(request.kind, request.data)
    except TemplateRenderError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from None

    try:
        job_id = queue.enqueue(
            recipients=[str(r) for r in request.to],
            subject=rendered.subject,
            body_html=rendered.body_html,
            body_text=rendered.body_text,
            metadata=_job_metadata(config, request.metadata, request.teacher_id, request.kind.value),
        )

        logger.info(
            f"Notification queued: {job_id} ({request.kind.value}) "
            f"to {len(request.to)} recipient(s)"
        )

        return NotificationResponse(
            status="accepted",
            queued=True,
            job_id=job_id,
            kind=request.kind,
        )

    except NotificationQueueError as e:
        logger.error(f"Notification queue rejected job: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification queue unavailable",
        ) from None
    except Exception as e:
        logger.error(f"Failed to queue notification: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process notification request",
        ) from None


@app.post(
    "/notifications/raw",
    response_model=NotificationResponse,
    status_code=status.HTTP_202_ACCEPTED,
    responses={
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        500: {"model": ErrorResponse, "description": "Server error"},
        503: {"model": ErrorResponse, "description": "Queue unavailable"},
    },
)
async def create_raw_notification(
    request: RawNotificationRequest,
    queue: Annotated[NotificationQueue, Depends(get_queue)],
    config: Annotated[NotificationConfig, Depends(get_config)],
    _auth: Annotated[bool, Depends(verify_api_key)],
) -> NotificationResponse:
    """Queue a notification whose subject and body are already rendered."""
    try:
        job_id = queue.enqueue(
            recipients=[str(r) for r in request.to],
            subject=request.subject,
            body_html=request.body_html,
            body_text=request.body_text,
            metadata=_job_metadata(config, request.metadata, request.teacher_id),
        )
        logger.info(f"Raw notification queued: {job_id} to {len(request.to)} recipient(s)")

        return NotificationResponse(status="accepted", queued=True, job_id=job_id)

    except NotificationQueueError as e:
        logger.error(f"Notification queue rejected job: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Notification queue unavailable",
        ) from None
    except Exception as e:
        logger.error(f"Failed to queue raw notification: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to process notification request",
        ) from None


@app.get(
    "/notifications/stats",
    response_model=StatisticsResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
)
async def get_statistics_endpoint(
    queue: Annotated[NotificationQueue, Depends(get_queue)],
    _auth: Annotated[bool, Depends(verify_api_key)],
    teacher_id: Annotated[str | None, Query(description="Restrict to one teacher")] = None,
) -> StatisticsResponse:
    """Get delivery statistics, globally or for one teacher."""
    try:
        return _statistics_response(queue.get_statistics(teacher_id), teacher_id)

    except Exception as e:
        logger.error(f"Failed to get notification statistics: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to retrieve statistics",
        ) from None


@app.post(
    "/notifications/stats/reset",
    response_model=ResetResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Unauthorized"},
        500: {"model": ErrorResponse, "description": "Server error"},
    },
)
async def reset_statistics_endpoint(
    queue: Annotated[NotificationQueue, Depends(get_queue)],
    _auth: Annotated[bool, Depends(verify_api_key)],
    teacher_id: Annotated[str | None, Query(description="Reset only this teacher")] = None,
    all_keys: Annotated[bool, Query(alias="all", description="Reset global and every teacher")] = False,
) -> ResetResponse:
    """Reset delivery statistics. Queued notifications are not affected."""
    try:
        if all_keys:
            queue.reset_all_statistics()
            detail = "All notification statistics reset"
            teacher_id = None
        elif teacher_id is not None:
            queue.reset_statistics(teacher_id)
            detail = f"Notification statistics reset for teacher {teacher_id}"
        else:
            queue.reset_statistics()
            detail = "Global notification statistics reset"

        logger.info(detail)
        return ResetResponse(
            detail=detail,
            statistics=_statistics_response(queue.get_statistics(teacher_id), teacher_id),
        )

    except Exception as e:
        logger.error(f"Failed to reset notification statistics: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to reset statistics",
        ) from None


@app.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": ErrorResponse, "description": "Service unavailable"}},
)
async def health_check(
    queue: Annotated[NotificationQueue, Depends(get_queue)],
    config: Annotated[NotificationConfig, Depends(get_config)],
) -> HealthResponse:
    """Check service health.

    No authentication required - used by load balancers and monitoring.
    """
    try:
        config.validate_smtp_config()
        smtp_status = "ok"
    except NotificationConfigError:
        smtp_status = "not_configured"

    return HealthResponse(
        status="ok" if smtp_status == "ok" else "degraded",
        queue_depth=queue.depth,
        draining=queue.draining,
        email_provider=smtp_status,
        version=config.SERVICE_VERSION,
    )


# =============================================================================
# Entry Point
# =============================================================================
def run():
    """Run the API server."""
    import uvicorn

    logger.info(f"Starting {_config.SERVICE_NAME} on {_config.API_HOST}:{_config.API_PORT}")
    uvicorn.run(
        "notification_service.api.main:app",
        host=_config.API_HOST,
        port=_config.API_PORT,
        reload=False,
    )


if __name__ == "__main__":
    run()
