from django.apps import AppConfig


class FunnelConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'funnel'
