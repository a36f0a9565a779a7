"""Delivery module for the notification service.

Contains the in-process delivery queue and its statistics ledger.
"""

from notification_service.delivery.ledger import StatisticsLedger
from notification_service.delivery.notifier import NotificationQueue

__all__ = ["NotificationQueue", "StatisticsLedger"]
