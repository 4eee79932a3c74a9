import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class CommunityConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'community'

    def ready(self):
        from .storage import create_placeholder_files
        try:
            create_placeholder_files()
        except OSError:
            # a read-only deploy can still serve whatever is already there
            logger.exception("Could not prepare the vault directory")
