"""
Intake services: template engine and submission engine.
"""
import logging
from typing import Any, Dict, Optional

from django.db import transaction
from django.utils import timezone

from apps.core.exceptions import Forbidden, InvalidInput, NotFound, ValidationFailed
from apps.core.observability.events import (
    log_intake_submitted,
    log_intake_template_created,
    log_intake_template_deactivated,
    log_intake_validation_failed,
)
from apps.core.observability.metrics import metrics
from apps.core.validators import parse_uuid
from apps.intake.fields import parse_fields, validate_answers
from apps.intake.models import IntakeSubmission, IntakeTemplate
from apps.intake.permissions import can_manage_templates, can_submit_intake, can_view_intake
from apps.scheduling.models import Appointment

logger = logging.getLogger(__name__)


# ============================================================================
# TEMPLATES
# ============================================================================

def create_template(principal, name, fields, description=None, is_active=True) -> IntakeTemplate:
    """
    Persist a new template. Fields are decoded through the typed schema
    first, so a stored template always parses.

    Raises:
        Forbidden: clients cannot manage templates
        InvalidInput: empty name, empty or malformed field list
    """
    if not can_manage_templates(principal):
        raise Forbidden('Clients cannot create templates')

    if not isinstance(name, str) or not name.strip():
        raise InvalidInput('name is required', field='name')

    parsed = parse_fields(fields)

    template = IntakeTemplate.objects.create(
        name=name.strip(),
        description=description or None,
        is_active=is_active,
        fields_schema=[f.to_dict() for f in parsed],
    )

    metrics.intake_templates_created_total.inc()
    log_intake_template_created(template, field_count=len(parsed))
    return template


def resolve_active_template() -> IntakeTemplate:
    """Most recently created active template."""
    template = IntakeTemplate.objects.active().order_by('-created_at').first()
    if template is None:
        raise NotFound('No active intake template found')
    return template


def list_active_templates():
    return IntakeTemplate.objects.active().order_by('created_at')


def deactivate_template(principal, template_id) -> IntakeTemplate:
    if not can_manage_templates(principal):
        raise Forbidden('Clients cannot manage intake templates')

    template_id = parse_uuid(template_id, 'template_id')
    template = IntakeTemplate.objects.filter(pk=template_id).first()
    if template is None:
        raise NotFound('Intake template not found')

    if template.is_active:
        template.is_active = False
        template.save(update_fields=['is_active'])
        log_intake_template_deactivated(template)
    return template


# ============================================================================
# SUBMISSIONS
# ============================================================================

def _get_appointment(appointment_id) -> Appointment:
    appointment_id = parse_uuid(appointment_id, 'appointment_id')
    appointment = (
        Appointment.objects
        .select_related('client')
        .filter(pk=appointment_id)
        .first()
    )
    if appointment is None:
        raise NotFound('Appointment not found')
    return appointment


def get_active_template_with_submission(appointment_id, principal) -> Dict[str, Any]:
    """
    The active template plus the appointment client's submission (or None).

    Returns:
        {'appointment': Appointment, 'template': IntakeTemplate,
         'submission': IntakeSubmission | None}
    """
    appointment = _get_appointment(appointment_id)
    if not can_view_intake(principal, appointment):
        raise Forbidden('Not allowed to access this appointment')

    template = resolve_active_template()
    submission = (
        IntakeSubmission.objects
        .filter(appointment=appointment, client_id=appointment.client_id)
        .first()
    )
    return {
        'appointment': appointment,
        'template': template,
        'submission': submission,
    }


def submit_intake(appointment_id, principal, template_id, answers: Optional[Dict[str, Any]]) -> IntakeSubmission:
    """
    Validate answers against the template and upsert the submission for
    (appointment, appointment's client).

    Answers are stored as sent, extra keys included.

    Raises:
        InvalidInput: malformed ids, answers not an object
        NotFound: unknown appointment or template
        Forbidden: caller is not the appointment's client (or an admin)
        ValidationFailed: missing required or mistyped answers
    """
    if not isinstance(answers, dict):
        raise InvalidInput('answers must be an object', field='answers')
    template_id = parse_uuid(template_id, 'template_id')

    appointment = _get_appointment(appointment_id)
    if not can_submit_intake(principal, appointment):
        raise Forbidden('You are not the client for this appointment')

    template = IntakeTemplate.objects.filter(pk=template_id).first()
    if template is None:
        raise NotFound('Intake template not found')

    errors = validate_answers(template.fields, answers)
    if errors:
        metrics.intake_submissions_total.labels(result='validation_failed').inc()
        log_intake_validation_failed(appointment.id, template.id, errors.keys())
        raise ValidationFailed(errors)

    with transaction.atomic():
        submission, created = IntakeSubmission.objects.update_or_create(
            appointment=appointment,
            client_id=appointment.client_id,
            defaults={
                'template': template,
                'answers': answers,
                'submitted_at': timezone.now(),
            }
        )

    metrics.intake_submissions_total.labels(result='created' if created else 'overwritten').inc()
    log_intake_submitted(submission, created)
    return submission
