"""
Metrics instrumentation (Prometheus).
"""
import time
from functools import wraps

from prometheus_client import Counter, Histogram


class MetricsRegistry:
    """
    Central metrics registry for the booking & intake API.

    Provides typed access to all application metrics.
    """

    def __init__(self):
        self._setup_metrics()

    def _setup_metrics(self):
        # ===================================================================
        # Scheduling Metrics
        # ===================================================================
        self.availability_lookups_total = Counter(
            'availability_lookups_total',
            'Availability lookups',
            ['result']  # success, invalid_input, not_found
        )

        self.appointment_bookings_total = Counter(
            'appointment_bookings_total',
            'Appointment booking attempts',
            ['result']  # created, conflict, invalid_input
        )

        self.appointment_booking_duration_seconds = Histogram(
            'appointment_booking_duration_seconds',
            'Duration of the check-and-insert booking transaction',
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5]
        )

        self.appointment_transitions_total = Counter(
            'appointment_transitions_total',
            'Appointment status transitions',
            ['from_status', 'to_status', 'result']
        )

        # ===================================================================
        # Intake Metrics
        # ===================================================================
        self.intake_templates_created_total = Counter(
            'intake_templates_created_total',
            'Intake templates created'
        )

        self.intake_submissions_total = Counter(
            'intake_submissions_total',
            'Intake submissions',
            ['result']  # created, overwritten, validation_failed
        )

    def track_duration(self, histogram_metric):
        """
        Decorator to track function duration.

        Usage:
            @metrics.track_duration(metrics.appointment_booking_duration_seconds)
            def create_appointment(...):
                ...
        """
        def decorator(func):
            @wraps(func)
            def wrapper(*args, **kwargs):
                start_time = time.time()
                try:
                    return func(*args, **kwargs)
                finally:
                    histogram_metric.observe(time.time() - start_time)
            return wrapper
        return decorator


# Global metrics instance
metrics = MetricsRegistry()
