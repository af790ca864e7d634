"""
Authorization predicates for intake.

- Client: fills in intake for own appointments
- Practitioner: manages templates, reads intake of own appointments
- Admin: everything, submissions are stored against the appointment's client
"""
from apps.authz.models import RoleChoices
from apps.scheduling.permissions import can_view_appointment


def can_manage_templates(principal) -> bool:
    return principal.role in (RoleChoices.PRACTITIONER, RoleChoices.ADMIN)


def can_view_intake(principal, appointment) -> bool:
    return can_view_appointment(principal, appointment)


def can_submit_intake(principal, appointment) -> bool:
    if principal.role == RoleChoices.ADMIN:
        return True
    if principal.role == RoleChoices.CLIENT:
        return appointment.client_id == principal.id
    return False
