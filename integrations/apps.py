import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class IntegrationsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'integrations'

    def ready(self):
        from .status import integration_status
        for name, enabled in integration_status().items():
            logger.info("%s: %s", name, "ENABLED" if enabled else "DISABLED")
