"""
Scheduling services: availability, conflict-free booking and the
appointment lifecycle.

All functions take the SchedulingConfig explicitly (defaulting to the
process-wide one) and a Principal where the caller's identity matters.
"""
import logging
from datetime import datetime, time, timedelta
from typing import List, Optional

from django.db import transaction
from django.utils import timezone

from apps.authz.models import RoleChoices, User
from apps.core.config import SchedulingConfig
from apps.core.exceptions import (
    Forbidden,
    InvalidInput,
    InvalidTransition,
    NotFound,
    SlotConflict,
)
from apps.core.observability.events import (
    log_appointment_booked,
    log_appointment_transition,
    log_booking_conflict,
)
from apps.core.observability.metrics import metrics
from apps.core.validators import parse_day, parse_instant, parse_uuid
from apps.scheduling.models import Appointment, AppointmentStatusChoices
from apps.scheduling.permissions import can_book, can_transition, can_view_appointment
from apps.scheduling.slots import Slot, generate_slots

logger = logging.getLogger(__name__)


# ============================================================================
# AVAILABILITY
# ============================================================================

class AvailabilityService:
    """
    Bookable slots for one practitioner on one day.

    Slot Generator output minus every slot that overlaps a non-cancelled
    appointment of that practitioner. PENDING appointments block too.
    Read-only.
    """

    @staticmethod
    def get_availability(
        practitioner_id,
        day,
        config: Optional[SchedulingConfig] = None
    ) -> List[Slot]:
        """
        Args:
            practitioner_id: UUID (or string) of a practitioner user
            day: date or 'YYYY-MM-DD'
            config: scheduling configuration (process-wide one by default)

        Raises:
            InvalidInput: malformed practitioner id or day
            NotFound: no active practitioner with that id
        """
        config = config or SchedulingConfig.from_settings()
        try:
            practitioner_id = parse_uuid(practitioner_id, 'practitioner_id')
            day = parse_day(day)
        except InvalidInput:
            metrics.availability_lookups_total.labels(result='invalid_input').inc()
            raise

        if not User.objects.practitioners().filter(pk=practitioner_id).exists():
            metrics.availability_lookups_total.labels(result='not_found').inc()
            raise NotFound('Practitioner not found')

        slots = generate_slots(day, config)
        if not slots:
            return []

        busy = list(
            Appointment.objects
            .for_practitioner(practitioner_id)
            .blocking()
            .overlapping(slots[0].start, slots[-1].end)
            .values_list('starts_at', 'ends_at')
        )

        free = [
            slot for slot in slots
            if not any(slot.overlaps(busy_start, busy_end) for busy_start, busy_end in busy)
        ]

        metrics.availability_lookups_total.labels(result='success').inc()
        logger.debug(
            'Availability resolved',
            extra={
                'event': 'availability_resolved',
                'practitioner_id': str(practitioner_id),
                'date': day.isoformat(),
                'slots_total': len(slots),
                'slots_free': len(free),
            }
        )
        return free


# ============================================================================
# BOOKING
# ============================================================================

def _resolve_client_id(principal, client_id):
    """A client always books for themself; staff must name the client."""
    if principal.role == RoleChoices.CLIENT:
        return principal.id
    if principal.role in (RoleChoices.PRACTITIONER, RoleChoices.ADMIN):
        if client_id in (None, ''):
            raise InvalidInput(
                'client_id is required when booking as practitioner/admin',
                field='client_id'
            )
        return parse_uuid(client_id, 'client_id')
    raise Forbidden('Not allowed to create appointments')


@metrics.track_duration(metrics.appointment_booking_duration_seconds)
def create_appointment(
    *,
    principal,
    practitioner_id,
    starts_at,
    ends_at,
    client_id=None,
    config: Optional[SchedulingConfig] = None
) -> Appointment:
    """
    Turn a requested window into a PENDING appointment, atomically.

    The practitioner's user row is locked (SELECT ... FOR UPDATE) for the
    whole check-then-insert, so concurrent bookings for the same
    practitioner are serialized while different practitioners proceed in
    parallel. A conflicting request fails fast with SlotConflict; the
    caller should re-fetch availability and pick another slot.

    Raises:
        InvalidInput: malformed ids/instants, end <= start, unknown
            practitioner or client
        Forbidden: principal may not book this practitioner/client pair
        SlotConflict: overlap with a non-cancelled appointment
    """
    config = config or SchedulingConfig.from_settings()

    try:
        client_id = _resolve_client_id(principal, client_id)
        practitioner_id = parse_uuid(practitioner_id, 'practitioner_id')
        start = parse_instant(starts_at, config.tz, 'starts_at')
        end = parse_instant(ends_at, config.tz, 'ends_at')
        if end <= start:
            raise InvalidInput('end time must be after start time', field='ends_at')
    except InvalidInput:
        metrics.appointment_bookings_total.labels(result='invalid_input').inc()
        raise

    if not can_book(principal, practitioner_id, client_id):
        raise Forbidden('Practitioners can only book into their own calendar')

    with transaction.atomic():
        # Serializes check-then-insert per practitioner
        practitioner = (
            User.objects.practitioners()
            .select_for_update()
            .filter(pk=practitioner_id)
            .first()
        )
        if practitioner is None:
            metrics.appointment_bookings_total.labels(result='invalid_input').inc()
            raise InvalidInput('Invalid practitioner_id', field='practitioner_id')

        if not User.objects.filter(pk=client_id, is_active=True).exists():
            metrics.appointment_bookings_total.labels(result='invalid_input').inc()
            raise InvalidInput('Invalid client_id', field='client_id')

        conflicting_ids = list(
            Appointment.objects
            .for_practitioner(practitioner_id)
            .blocking()
            .overlapping(start, end)
            .values_list('id', flat=True)
        )
        if conflicting_ids:
            metrics.appointment_bookings_total.labels(result='conflict').inc()
            log_booking_conflict(practitioner_id, start, end, conflicting_ids)
            raise SlotConflict()

        appointment = Appointment.objects.create(
            practitioner=practitioner,
            client_id=client_id,
            starts_at=start,
            ends_at=end,
            status=AppointmentStatusChoices.PENDING,
        )

    metrics.appointment_bookings_total.labels(result='created').inc()
    log_appointment_booked(appointment)
    return appointment


# ============================================================================
# APPOINTMENT RECORDS
# ============================================================================

def list_appointments(principal, status=None, date_from=None, date_to=None,
                      config: Optional[SchedulingConfig] = None):
    """
    Appointments visible to `principal`, ordered by start.

    Optional filters: status, date_from / date_to (inclusive calendar days
    in the clinic time zone, matched on the start instant).
    """
    config = config or SchedulingConfig.from_settings()
    queryset = (
        Appointment.objects
        .visible_to(principal)
        .select_related('client', 'practitioner')
    )

    if status:
        if status not in AppointmentStatusChoices.values:
            raise InvalidInput(
                f'Invalid status. Options: {", ".join(AppointmentStatusChoices.values)}',
                field='status'
            )
        queryset = queryset.filter(status=status)

    if date_from:
        day = parse_day(date_from, field='date_from')
        queryset = queryset.filter(
            starts_at__gte=config.tz.localize(datetime.combine(day, time.min))
        )

    if date_to:
        day = parse_day(date_to, field='date_to')
        queryset = queryset.filter(
            starts_at__lt=config.tz.localize(datetime.combine(day + timedelta(days=1), time.min))
        )

    return queryset.order_by('starts_at')


PUBLIC_UPCOMING_LIMIT = 10


def list_upcoming_appointments(now=None, limit=PUBLIC_UPCOMING_LIMIT):
    """Next appointments starting at or after `now`, soonest first. Unauthenticated listing."""
    now = now or timezone.now()
    return (
        Appointment.objects
        .filter(starts_at__gte=now)
        .select_related('practitioner')
        .order_by('starts_at')[:limit]
    )


def get_appointment(appointment_id, principal) -> Appointment:
    appointment_id = parse_uuid(appointment_id, 'appointment_id')
    appointment = (
        Appointment.objects
        .select_related('client', 'practitioner')
        .filter(pk=appointment_id)
        .first()
    )
    if appointment is None:
        raise NotFound('Appointment not found')
    if not can_view_appointment(principal, appointment):
        raise Forbidden('Not allowed to access this appointment')
    return appointment


def transition_appointment(appointment_id, principal, target_status, reason=None) -> Appointment:
    """
    Apply a lifecycle transition under a row lock.

    Raises:
        InvalidInput: unknown target status
        NotFound: no such appointment
        Forbidden: principal may not drive this transition
        InvalidTransition: edge not allowed by the state machine
    """
    appointment_id = parse_uuid(appointment_id, 'appointment_id')
    if target_status not in AppointmentStatusChoices.values:
        raise InvalidInput(
            f'Invalid status. Options: {", ".join(AppointmentStatusChoices.values)}',
            field='status'
        )

    with transaction.atomic():
        appointment = (
            Appointment.objects
            .select_for_update()
            .filter(pk=appointment_id)
            .first()
        )
        if appointment is None:
            raise NotFound('Appointment not found')

        if not can_transition(principal, appointment, target_status):
            metrics.appointment_transitions_total.labels(
                from_status=appointment.status, to_status=target_status, result='forbidden'
            ).inc()
            raise Forbidden('Not allowed to change this appointment to ' + target_status)

        try:
            from_status = appointment.transition_status(target_status, reason=reason)
        except InvalidTransition:
            metrics.appointment_transitions_total.labels(
                from_status=appointment.status, to_status=target_status, result='invalid'
            ).inc()
            raise

        appointment.save(update_fields=['status', 'cancellation_reason', 'updated_at'])

    metrics.appointment_transitions_total.labels(
        from_status=from_status, to_status=target_status, result='success'
    ).inc()
    log_appointment_transition(appointment, from_status, target_status, principal.role)

    # Reload relations for the response
    return Appointment.objects.select_related('client', 'practitioner').get(pk=appointment.pk)
