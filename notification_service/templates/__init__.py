"""Templates module for the notification service.

Contains the Jinja2 template catalog and the renderer with its custom filters.
"""

from notification_service.templates.renderer import CONTEXT_MODELS, TemplateRenderer

__all__ = ["CONTEXT_MODELS", "TemplateRenderer"]
