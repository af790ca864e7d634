"""Intake app configuration."""
from django.apps import AppConfig


class IntakeConfig(AppConfig):
    """Configuration for intake app (form templates and submissions)."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.intake'
    verbose_name = 'Intake'
