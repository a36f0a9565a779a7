"""Clients module for the notification service.

Contains the mail transport contract and its SMTP implementation.
"""

from notification_service.clients.base import MailTransport
from notification_service.clients.smtp import SMTPClient

__all__ = ["MailTransport", "SMTPClient"]
