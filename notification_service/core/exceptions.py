"""Custom exceptions for the notification service.

Defines specific exception types for the different failure points of the
notification pipeline (configuration, queueing, transport, rendering).

Author: Plataforma Docente
Created: 2025-11-04
Version: 1.0.0
"""


class NotificationServiceError(Exception):
    """Base exception for all notification service errors.

    Allows business-layer callers to catch every notification-related
    error with a single except block.

    Example:
        try:
            rendered = renderer.render(NotificationKind.GRADE_RECORDED, data)
        except NotificationServiceError as e:
            logger.error(f"Notification error: {e}")
    """

    pass


class NotificationConfigError(NotificationServiceError):
    """Exception raised for configuration errors.

    Indicates invalid or missing settings in NotificationConfig, typically
    SMTP credentials that are required before mail can be sent.

    Example:
        raise NotificationConfigError("SMTP_USER environment variable not set")
    """

    pass


class NotificationQueueError(NotificationServiceError):
    """Exception raised when a job cannot be accepted by the queue.

    Raised synchronously from enqueue (bad input, no running event loop).
    Delivery failures are never reported through this exception.

    Attributes:
        job_id (str, optional): ID of the affected job, when one exists.
    """

    def __init__(self, message: str, job_id: str | None = None):
        """Initialize queue error.

        Args:
            message: Error description.
            job_id: Optional ID of the affected job.
        """
        super().__init__(message)
        self.job_id = job_id


class TransportError(NotificationServiceError):
    """Exception raised by a mail transport when a delivery attempt fails.

    Covers connection, authentication, rate-limit and timeout failures.
    The queue consumes it through its retry policy.

    Attributes:
        is_transient (bool): Whether the failure looks temporary.

    Example:
        raise TransportError(
            "Connection timeout to smtp.gmail.com:587",
            is_transient=True
        )
    """

    def __init__(self, message: str, is_transient: bool = False):
        """Initialize transport error.

        Args:
            message: Error description.
            is_transient: Whether error is temporary and retryable.
        """
        super().__init__(message)
        self.is_transient = is_transient


class TemplateRenderError(NotificationServiceError):
    """Exception raised for template rendering failures.

    Raised before a job is enqueued when the data payload does not fit the
    notification kind or the Jinja2 template fails to render.

    Attributes:
        template_name (str, optional): Name of the template that failed.

    Example:
        raise TemplateRenderError(
            "Missing field: class_name",
            template_name="attendance_recorded.html"
        )
    """

    def __init__(self, message: str, template_name: str | None = None):
        """Initialize template render error.

        Args:
            message: Error description.
            template_name: Optional name of the template that failed.
        """
        super().__init__(message)
        self.template_name = template_name
