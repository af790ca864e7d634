"""
Health check endpoints.

Provides /healthz and /readyz endpoints for monitoring.
"""
import logging
from django.core.exceptions import ImproperlyConfigured
from django.db import DatabaseError, connection
from django.http import JsonResponse
from django.views import View
from django.conf import settings

from apps.core.config import SchedulingConfig

logger = logging.getLogger(__name__)


class HealthzView(View):
    """
    Liveness endpoint. Does not check dependencies.
    """

    def get(self, request):
        health_data = {
            'status': 'ok',
            'version': getattr(settings, 'VERSION', 'unknown'),
        }

        commit_hash = getattr(settings, 'COMMIT_HASH', None)
        if commit_hash:
            health_data['commit'] = commit_hash

        return JsonResponse(health_data, status=200)


class ReadyzView(View):
    """
    Readiness endpoint.

    Ready when the database answers and the scheduling configuration loads.
    """

    def get(self, request):
        checks = {
            'database': self._check_database(),
            'scheduling_config': self._check_scheduling_config(),
        }

        all_healthy = all(checks.values())

        response_data = {
            'status': 'ready' if all_healthy else 'not_ready',
            'checks': checks,
        }

        return JsonResponse(response_data, status=200 if all_healthy else 503)

    def _check_database(self):
        try:
            with connection.cursor() as cursor:
                cursor.execute('SELECT 1')
            return True
        except DatabaseError as e:
            logger.error(
                'Database health check failed',
                extra={
                    'event': 'health_check_failed',
                    'check': 'database',
                    'error': str(e)
                }
            )
            return False

    def _check_scheduling_config(self):
        try:
            SchedulingConfig.from_settings()
            return True
        except ImproperlyConfigured as e:
            logger.error(
                'Scheduling configuration invalid',
                extra={
                    'event': 'health_check_failed',
                    'check': 'scheduling_config',
                    'error': str(e)
                }
            )
            return False
