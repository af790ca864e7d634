"""
Scheduling models: appointment and its lifecycle.
"""
import uuid
from django.conf import settings
from django.db import models
from django.db.models import F, Q

from apps.authz.models import RoleChoices
from apps.core.exceptions import InvalidTransition


# ============================================================================
# Enums
# ============================================================================

class AppointmentStatusChoices(models.TextChoices):
    """
    Appointment status with allowed transitions:
    - pending -> confirmed | cancelled
    - confirmed -> completed | cancelled
    - completed, cancelled are terminal states
    """
    PENDING = 'pending', 'Pending'
    CONFIRMED = 'confirmed', 'Confirmed'
    CANCELLED = 'cancelled', 'Cancelled'
    COMPLETED = 'completed', 'Completed'


# ============================================================================
# Appointment
# ============================================================================

class AppointmentQuerySet(models.QuerySet):

    def for_practitioner(self, practitioner_id):
        return self.filter(practitioner_id=practitioner_id)

    def blocking(self):
        """Appointments that occupy the practitioner's calendar (anything not cancelled)."""
        return self.exclude(status=AppointmentStatusChoices.CANCELLED)

    def overlapping(self, start, end):
        """
        Half-open overlap with [start, end): starts_at < end AND ends_at > start.
        Touching endpoints do not overlap.
        """
        return self.filter(
            Q(starts_at__lt=end) &
            Q(ends_at__gt=start)
        )

    def visible_to(self, principal):
        """Client sees own bookings, practitioner own calendar, admin everything."""
        if principal.role == RoleChoices.ADMIN:
            return self
        if principal.role == RoleChoices.PRACTITIONER:
            return self.filter(practitioner_id=principal.id)
        if principal.role == RoleChoices.CLIENT:
            return self.filter(client_id=principal.id)
        return self.none()


class Appointment(models.Model):
    """
    A booked time window between a client and a practitioner.

    Appointments are never deleted; they end in CANCELLED or COMPLETED.
    Only the booking service creates them (always PENDING).
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    practitioner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='practitioner_appointments'
    )
    client = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='client_appointments'
    )
    starts_at = models.DateTimeField()
    ends_at = models.DateTimeField()
    status = models.CharField(
        max_length=20,
        choices=AppointmentStatusChoices.choices,
        default=AppointmentStatusChoices.PENDING
    )
    cancellation_reason = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = AppointmentQuerySet.as_manager()

    class Meta:
        db_table = 'appointment'
        verbose_name = 'Appointment'
        verbose_name_plural = 'Appointments'
        ordering = ['starts_at']
        indexes = [
            models.Index(fields=['practitioner', 'starts_at'], name='idx_appt_practitioner_start'),
            models.Index(fields=['client'], name='idx_appointment_client'),
            models.Index(fields=['status'], name='idx_appointment_status'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(ends_at__gt=F('starts_at')),
                name='appointment_ends_after_start',
            ),
        ]

    # BUSINESS RULE: Allowed status transitions
    _ALLOWED_TRANSITIONS = {
        AppointmentStatusChoices.PENDING: [
            AppointmentStatusChoices.CONFIRMED,
            AppointmentStatusChoices.CANCELLED,
        ],
        AppointmentStatusChoices.CONFIRMED: [
            AppointmentStatusChoices.COMPLETED,
            AppointmentStatusChoices.CANCELLED,
        ],
        AppointmentStatusChoices.CANCELLED: [],  # Terminal state
        AppointmentStatusChoices.COMPLETED: [],  # Terminal state
    }

    def __str__(self):
        return f"Appointment {self.starts_at:%Y-%m-%d %H:%M} ({self.status})"

    @property
    def is_terminal(self):
        return not self._ALLOWED_TRANSITIONS.get(self.status)

    def allowed_transitions(self):
        return list(self._ALLOWED_TRANSITIONS.get(self.status, []))

    def transition_status(self, new_status, reason=None):
        """
        Move to `new_status` if the state machine allows it.

        Does not save. Returns the previous status.

        Raises:
            InvalidTransition: terminal source state or edge not in the table
        """
        allowed = self.allowed_transitions()
        if not allowed:
            raise InvalidTransition(
                f'Appointment is {self.status} (terminal) and cannot change status'
            )

        if new_status not in allowed:
            raise InvalidTransition(
                f'Transition not allowed: {self.status} -> {new_status}. '
                f'Allowed: {", ".join(allowed)}'
            )

        if new_status == AppointmentStatusChoices.CANCELLED and reason:
            self.cancellation_reason = reason

        old_status = self.status
        self.status = new_status
        return old_status
