"""Centralized logging configuration for the notification service.

Provides the logger factory used by every component, with console and
rotating file handlers and consistent formatting.

Features:
    - Console handler plus optional rotating file handlers
    - Separate error log (notification_service.error.log)
    - Per-module log levels
    - Context prefixes for job-level log lines
    - Startup banner with configuration summary

Author: Plataforma Docente
Created: 2025-11-04
Version: 1.2.0
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from notification_service.config.settings import NotificationConfig

_ROOT_LOGGER: logging.Logger | None = None
_LOG_DIR = Path(__file__).parent.parent / "logs"
_LOG_FORMAT_DETAILED = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
)
_LOG_FORMAT_SIMPLE = "%(asctime)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_MODULE_LEVELS = {
    "notification_service.delivery": logging.DEBUG,
    "notification_service.clients": logging.DEBUG,
    "notification_service.templates": logging.INFO,
    "notification_service.config": logging.INFO,
}

_banner_printed = False

# ============================================================================
# ANSI Color Codes
# ============================================================================
COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "cyan": "\033[36m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "magenta": "\033[35m",
    "red": "\033[31m",
}

_B = COLORS["bold"]
_R = COLORS["reset"]
_C = COLORS["cyan"]
_M = COLORS["magenta"]

# fmt: off
BANNER = f"""
{_B}{_C}  ┌┐┌┌─┐┌┬┐┬┌─┐┬ ┬  {_M}┌─┐┬ ┬┌─┐┬ ┬┌─┐{_R}
{_B}{_C}  ││││ │ │ │├┤ └┬┘  {_M}│─┼┐│ │├┤ │ │├┤ {_R}
{_B}{_C}  ┘└┘└─┘ ┴ ┴└   ┴   {_M}└─┘└└─┘└─┘└─┘└─┘{_R}
"""  # noqa: E501
# fmt: on


def _mask_password(password: str) -> str:
    """Mask password for display, showing only first and last char."""
    if not password:
        return "(not set)"
    if len(password) <= 2:
        return "***"
    return f"{password[0]}{'*' * (len(password) - 2)}{password[-1]}"


def print_banner() -> None:
    """Print the service startup banner once per process."""
    global _banner_printed  # noqa: PLW0603
    if _banner_printed:
        return

    _banner_printed = True
    print(BANNER)
    print(f"{COLORS['dim']}{'─' * 72}{COLORS['reset']}")
    print(
        f"{COLORS['cyan']}{COLORS['bold']}  "
        f"Academic Notification Service{COLORS['reset']}"
    )
    print(f"{COLORS['dim']}{'─' * 72}{COLORS['reset']}\n")


def print_config_summary(settings: "NotificationConfig") -> None:
    """Print a formatted configuration summary organized by categories.

    Args:
        settings: NotificationConfig instance with loaded configuration.
    """
    c = COLORS

    def _line(label: str, value: str, color: str = "cyan") -> None:
        print(f"  {c['dim']}│{c['reset']} {label:<26} {c[color]}{value}{c['reset']}")

    def _header(title: str, color: str) -> None:
        print(f"\n  {c[color]}▶ {title}{c['reset']}")
        print(f"  {c['dim']}├{'─' * 50}{c['reset']}")

    _header("Service Configuration", "green")
    _line("Service Name", settings.SERVICE_NAME)
    _line("Version", settings.SERVICE_VERSION)
    _line("Listen", f"{settings.API_HOST}:{settings.API_PORT}")
    _line("API Key", "enabled" if settings.API_KEY else "disabled")

    _header("SMTP Configuration", "magenta")
    _line("Host", f"{settings.SMTP_HOST}:{settings.SMTP_PORT}")
    _line("User", settings.SMTP_USER or "(not set)", "yellow" if not settings.SMTP_USER else "cyan")
    _line("Password", _mask_password(settings.SMTP_PASSWORD), "yellow" if not settings.SMTP_PASSWORD else "cyan")
    _line("From", f"{settings.SMTP_FROM_NAME} <{settings.SMTP_FROM_EMAIL}>")
    _line("TLS Enabled", str(settings.SMTP_USE_TLS).lower(), "green" if settings.SMTP_USE_TLS else "yellow")
    _line("Timeout", f"{settings.SMTP_TIMEOUT}s")

    _header("Queue Configuration", "cyan")
    _line("Max Attempts", str(settings.NOTIFY_MAX_RETRIES))
    _line("Delay Between Sends", f"{settings.NOTIFY_SEND_DELAY_SECONDS}s")
    _line("Retry Delay", f"{settings.NOTIFY_RETRY_DELAY_SECONDS}s")
    _line("Statistics Key", settings.STATS_KEY_FIELD)
    _line("Recent Errors Kept", str(settings.STATS_MAX_RECENT_ERRORS))

    _header("Logging Configuration", "yellow")
    _line("Level", settings.LOG_LEVEL, "green")
    _line("Log to File", str(settings.LOG_TO_FILE).lower())
    _line("Directory", settings.LOG_DIR)

    print(f"\n{c['dim']}{'─' * 72}{c['reset']}")
    print(
        f"  {c['green']}{c['bold']}✓ Service ready{c['reset']} "
        f"{c['dim']}│{c['reset']} "
        f"Docs: {c['cyan']}http://localhost:{settings.API_PORT}/docs{c['reset']}"
    )
    print(f"{c['dim']}{'─' * 72}{c['reset']}\n")


def setup_logging(
    log_dir: Path | str | None = None,
    log_level: str = "INFO",
    file_level: str = "DEBUG",
    console_level: str = "INFO",
    enable_file: bool = True,
    settings: Optional["NotificationConfig"] = None,
) -> None:
    """Configure root logger with file and console handlers.

    Should be called once at application startup (the API lifespan does).

    Args:
        log_dir: Directory for log files. Defaults to notification_service/logs.
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file_level: File handler level (usually DEBUG for comprehensive logging).
        console_level: Console handler level.
        enable_file: Whether to write logs to files.
        settings: Optional NotificationConfig for printing the configuration summary.
    """
    global _ROOT_LOGGER, _LOG_DIR

    _LOG_DIR = Path(log_dir) if log_dir else Path(__file__).parent.parent / "logs"

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, console_level.upper(), logging.INFO))
    console_handler.setFormatter(logging.Formatter(_LOG_FORMAT_SIMPLE, datefmt=_DATE_FORMAT))
    root_logger.addHandler(console_handler)

    if enable_file:
        _LOG_DIR.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            _LOG_DIR / "notification_service.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(getattr(logging, file_level.upper(), logging.DEBUG))
        file_handler.setFormatter(logging.Formatter(_LOG_FORMAT_DETAILED, datefmt=_DATE_FORMAT))
        root_logger.addHandler(file_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            _LOG_DIR / "notification_service.error.log",
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(logging.Formatter(_LOG_FORMAT_DETAILED, datefmt=_DATE_FORMAT))
        root_logger.addHandler(error_handler)

    for module_name, level in _MODULE_LEVELS.items():
        logging.getLogger(module_name).setLevel(level)

    _ROOT_LOGGER = root_logger

    print_banner()
    if settings:
        print_config_summary(settings)


def get_logger(name: str, log_level: str | None = None) -> logging.Logger:
    """Get a logger instance for a module.

    Args:
        name: Logger name (typically __name__ of calling module).
        log_level: Optional override for the logger level.

    Returns:
        Logger instance ready for use.

    Example:
        logger = get_logger(__name__)
        logger.info("Job abc123 delivered")
    """
    logger = logging.getLogger(name)

    if log_level:
        logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    return logger


def get_logs_directory() -> Path:
    """Get the logs directory path."""
    return _LOG_DIR


def log_context(
    operation: str,
    job_id: str | None = None,
    recipient: str | None = None,
    **kwargs,
) -> str:
    """Format a log context string with job metadata.

    Args:
        operation: Operation name (e.g., "deliver", "retry").
        job_id: Notification job ID if applicable.
        recipient: Recipient address(es) if applicable.
        **kwargs: Additional context key-value pairs.

    Returns:
        Formatted context string for logging.

    Example:
        msg = log_context("deliver", job_id="3f2a", recipient="ana@uni.edu", attempt=2)
        # "#3f2a | deliver | →ana@uni.edu (attempt=2)"
    """
    context_parts = [operation]

    if job_id:
        context_parts.insert(0, f"#{job_id}")

    if recipient:
        context_parts.append(f"→{recipient}")

    context = " | ".join(context_parts)

    if kwargs:
        extra = ", ".join(f"{k}={v}" for k, v in kwargs.items())
        context = f"{context} ({extra})"

    return context
