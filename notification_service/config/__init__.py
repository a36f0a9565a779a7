"""Configuration module for the notification service.

Loads and validates settings from environment variables or .env file.
"""

from notification_service.config.settings import NotificationConfig

__all__ = ["NotificationConfig"]
