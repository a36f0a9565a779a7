"""Notification service configuration with Pydantic v2.

Manages SMTP settings, queue tunables, statistics bounds and logging,
loaded from environment variables or .env file.

All settings can be overridden via environment variables.

Author: Plataforma Docente
Created: 2025-11-04
Version: 1.0.0
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from notification_service.core.exceptions import NotificationConfigError


class NotificationConfig(BaseSettings):
    """Notification service configuration.

    Loads settings from environment variables and .env file using Pydantic v2.
    All settings are case-sensitive and strictly validated.

    Attributes:
        SMTP_HOST: SMTP server hostname.
        SMTP_PORT: SMTP server port (1-65535).
        SMTP_USER: SMTP authentication username.
        SMTP_PASSWORD: SMTP authentication password.
        SMTP_FROM_EMAIL: Sender email address.
        SMTP_FROM_NAME: Sender display name.
        SMTP_USE_TLS: Whether to use STARTTLS.
        SMTP_TIMEOUT: SMTP connection timeout in seconds.
        NOTIFY_MAX_RETRIES: Delivery attempts per job before it is dropped.
        NOTIFY_SEND_DELAY_SECONDS: Pause after each successful delivery.
        NOTIFY_RETRY_DELAY_SECONDS: Pause after a failed attempt that will be retried.
        STATS_MAX_RECENT_ERRORS: Size of the recent-errors log per ledger record.
        STATS_MAX_KEYS: Maximum number of keyed statistics records kept (LRU).
        STATS_KEY_FIELD: Job metadata field used as the statistics key.
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        LOG_TO_FILE: Whether to log to file.
        LOG_DIR: Directory for log files.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # ========================================================================
    # Service Configuration
    # ========================================================================
    SERVICE_NAME: str = Field(
        default="notification-service",
        description="Name of the service",
    )
    SERVICE_VERSION: str = Field(
        default="1.0.0",
        description="Service version",
    )
    API_HOST: str = Field(
        default="0.0.0.0",
        description="API server host",
    )
    API_PORT: int = Field(
        default=8002,
        ge=1,
        le=65535,
        description="API server port",
    )
    API_KEY: str = Field(
        default="",
        description="Shared key for the admin endpoints (empty disables auth)",
    )

    # ========================================================================
    # SMTP Configuration
    # ========================================================================
    SMTP_HOST: str = Field(
        default="smtp.gmail.com",
        description="SMTP server hostname",
    )
    SMTP_PORT: int = Field(
        default=587,
        ge=1,
        le=65535,
        description="SMTP server port",
    )
    SMTP_USER: str = Field(
        default="",
        description="SMTP authentication username",
    )
    SMTP_PASSWORD: str = Field(
        default="",
        description="SMTP authentication password",
    )
    SMTP_FROM_EMAIL: str = Field(
        default="noreply@plataforma-docente.edu",
        description="Sender email address",
    )
    SMTP_FROM_NAME: str = Field(
        default="Sistema de Docentes",
        description="Sender display name",
    )
    SMTP_USE_TLS: bool = Field(
        default=True,
        description="Whether to use TLS encryption",
    )
    SMTP_TIMEOUT: int = Field(
        default=30,
        ge=5,
        le=120,
        description="SMTP connection timeout in seconds",
    )

    # ========================================================================
    # Queue Configuration
    # ========================================================================
    NOTIFY_MAX_RETRIES: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Delivery attempts per job before giving up",
    )
    NOTIFY_SEND_DELAY_SECONDS: float = Field(
        default=1.0,
        ge=0,
        le=60,
        description="Pause after each successful delivery",
    )
    NOTIFY_RETRY_DELAY_SECONDS: float = Field(
        default=2.0,
        ge=0,
        le=600,
        description="Pause before moving on after a failed attempt",
    )

    # ========================================================================
    # Statistics Configuration
    # ========================================================================
    STATS_MAX_RECENT_ERRORS: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Recent errors kept per statistics record",
    )
    STATS_MAX_KEYS: int = Field(
        default=1000,
        ge=1,
        description="Keyed statistics records kept before LRU eviction",
    )
    STATS_KEY_FIELD: str = Field(
        default="teacher_id",
        min_length=1,
        description="Job metadata field used as statistics key",
    )

    # ========================================================================
    # Logging Configuration
    # ========================================================================
    LOG_LEVEL: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level",
    )
    LOG_TO_FILE: bool = Field(
        default=True,
        description="Whether to log to file",
    )
    LOG_DIR: str = Field(
        default="./logs",
        description="Directory for log files",
    )

    @field_validator("SMTP_HOST")
    @classmethod
    def validate_smtp_host(cls, v: str) -> str:
        """Validate SMTP host is not empty.

        Raises:
            ValueError: If hostname is empty or whitespace.
        """
        if not v.strip():
            raise ValueError("SMTP_HOST cannot be empty")
        return v.strip()

    @field_validator("SMTP_PASSWORD")
    @classmethod
    def validate_smtp_password(cls, v: str) -> str:
        """Remove spaces from the SMTP password.

        Gmail app passwords are displayed in groups of four ("wrce fmkh xlvn
        jiht") but must be sent without spaces.
        """
        return v.replace(" ", "")

    @field_validator("SMTP_FROM_EMAIL")
    @classmethod
    def validate_from_email(cls, v: str) -> str:
        """Validate from_email is not empty.

        Raises:
            ValueError: If email is empty.
        """
        if not v.strip():
            raise ValueError("SMTP_FROM_EMAIL cannot be empty")
        return v.strip()

    def validate_smtp_config(self) -> None:
        """Validate the SMTP credentials needed to deliver mail.

        Raises:
            NotificationConfigError: If required SMTP settings are missing.
        """
        missing_fields = []

        if not self.SMTP_USER or not self.SMTP_USER.strip():
            missing_fields.append("SMTP_USER")

        if not self.SMTP_PASSWORD or not self.SMTP_PASSWORD.strip():
            missing_fields.append("SMTP_PASSWORD")

        if missing_fields:
            raise NotificationConfigError(
                f"Required SMTP settings missing: {', '.join(missing_fields)}. "
                f"Set these environment variables to enable email delivery."
            )

    def get_smtp_config(self) -> dict[str, str | int | bool]:
        """Get SMTP configuration as a dictionary suitable for SMTPConfig."""
        return {
            "host": self.SMTP_HOST,
            "port": self.SMTP_PORT,
            "username": self.SMTP_USER,
            "password": self.SMTP_PASSWORD,
            "from_email": self.SMTP_FROM_EMAIL,
            "from_name": self.SMTP_FROM_NAME,
            "use_tls": self.SMTP_USE_TLS,
            "timeout": self.SMTP_TIMEOUT,
        }
