"""Scheduling app configuration."""
from django.apps import AppConfig


class SchedulingAppConfig(AppConfig):
    """Configuration for scheduling app (availability, booking, appointment lifecycle)."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.scheduling'
    verbose_name = 'Scheduling'
