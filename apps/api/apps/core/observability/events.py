"""
Domain events logging helpers.

Provides structured event logging for booking and intake operations.
"""
from typing import Dict, Any, Optional
from .logging import get_sanitized_logger, sanitize_dict

logger = get_sanitized_logger(__name__)


def log_domain_event(
    event_name: str,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    entity_ids: Optional[Dict[str, str]] = None,
    result: str = 'success',
    **extra_fields: Any
):
    """
    Log a domain event with structured data.

    Args:
        event_name: Name of the event (e.g., 'appointment_booked')
        entity_type: Type of entity (e.g., 'Appointment')
        entity_id: ID of primary entity
        entity_ids: Dictionary of related entity IDs
        result: Result of operation (success, conflict, failure, ...)
        **extra_fields: Additional fields to log (will be sanitized)

    Example:
        log_domain_event(
            'appointment_booked',
            entity_type='Appointment',
            entity_id=str(appointment.id),
            entity_ids={'practitioner_id': str(appointment.practitioner_id)},
            duration_minutes=30
        )
    """
    event_data = {
        'event': event_name,
        'result': result,
    }

    if entity_type:
        event_data['entity_type'] = entity_type

    if entity_id:
        event_data['entity_id'] = entity_id

    if entity_ids:
        event_data.update(entity_ids)

    event_data.update(sanitize_dict(extra_fields))

    if result in ['failure', 'error']:
        logger.error(f'Domain event: {event_name}', extra=event_data)
    elif result in ['conflict', 'rejected', 'blocked']:
        logger.warning(f'Domain event: {event_name}', extra=event_data)
    else:
        logger.info(f'Domain event: {event_name}', extra=event_data)


def log_appointment_booked(appointment):
    log_domain_event(
        'appointment_booked',
        entity_type='Appointment',
        entity_id=str(appointment.id),
        entity_ids={
            'practitioner_id': str(appointment.practitioner_id),
            'client_id': str(appointment.client_id),
        },
        starts_at=appointment.starts_at.isoformat(),
        ends_at=appointment.ends_at.isoformat(),
    )


def log_booking_conflict(practitioner_id, starts_at, ends_at, conflicting_ids):
    """Log a booking rejected because the window overlaps existing appointments."""
    log_domain_event(
        'appointment_booking_conflict',
        entity_type='Appointment',
        entity_ids={'practitioner_id': str(practitioner_id)},
        result='conflict',
        starts_at=starts_at.isoformat(),
        ends_at=ends_at.isoformat(),
        conflicting_appointment_ids=[str(pk) for pk in conflicting_ids],
    )


def log_appointment_transition(appointment, from_status, to_status, actor_role, result='success'):
    log_domain_event(
        'appointment_transition',
        entity_type='Appointment',
        entity_id=str(appointment.id),
        entity_ids={'practitioner_id': str(appointment.practitioner_id)},
        result=result,
        from_status=from_status,
        to_status=to_status,
        actor_role=actor_role,
    )


def log_intake_template_created(template, field_count):
    log_domain_event(
        'intake_template_created',
        entity_type='IntakeTemplate',
        entity_id=str(template.id),
        field_count=field_count,
        is_active=template.is_active,
    )


def log_intake_template_deactivated(template):
    log_domain_event(
        'intake_template_deactivated',
        entity_type='IntakeTemplate',
        entity_id=str(template.id),
    )


def log_intake_submitted(submission, created):
    log_domain_event(
        'intake_submitted',
        entity_type='IntakeSubmission',
        entity_id=str(submission.id),
        entity_ids={
            'appointment_id': str(submission.appointment_id),
            'template_id': str(submission.template_id),
        },
        operation='create' if created else 'overwrite',
        answer_count=len(submission.answers or {}),
    )


def log_intake_validation_failed(appointment_id, template_id, failed_fields):
    """Log rejected intake answers. Only field ids are logged, never values."""
    log_domain_event(
        'intake_validation_failed',
        entity_type='IntakeSubmission',
        entity_ids={
            'appointment_id': str(appointment_id),
            'template_id': str(template_id),
        },
        result='rejected',
        failed_fields=sorted(failed_fields),
    )
