"""Command-line utilities for the notification service."""
