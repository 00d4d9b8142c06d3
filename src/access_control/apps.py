"""App configuration for the access_control Django application.

Loading the app builds the process-wide policy registry and registers the
ABAC system checks.
"""

import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class AccessControlConfig(AppConfig):
    """Application configuration for the access_control app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "access_control"

    def ready(self) -> None:
        """Build the registry before any request is served and register checks."""
        from . import checks  # noqa: F401
        from .matrix import REGISTRY

        logger.debug("Policy registry loaded with %d rules", len(REGISTRY))
