"""Core module for the notification service.

Provides exceptions and logging configuration shared by every component.
"""

from notification_service.core.exceptions import (
    NotificationConfigError,
    NotificationQueueError,
    NotificationServiceError,
    TemplateRenderError,
    TransportError,
)
from notification_service.core.logger import (
    get_logger,
    get_logs_directory,
    log_context,
    setup_logging,
)

__all__ = [
    # Exceptions
    "NotificationServiceError",
    "NotificationConfigError",
    "NotificationQueueError",
    "TransportError",
    "TemplateRenderError",
    # Logging
    "get_logger",
    "setup_logging",
    "get_logs_directory",
    "log_context",
]
