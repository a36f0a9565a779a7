"""HTTP API for the notification service."""
