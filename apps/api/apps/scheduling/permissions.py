"""
Authorization predicates for appointments.

Every scheduling operation asks one of these instead of branching on
roles inline.

- Client: books for themself, sees and cancels own appointments
- Practitioner: books into own calendar, sees own calendar,
  confirms/cancels/completes own appointments
- Admin: everything
"""
from apps.authz.models import RoleChoices
from apps.scheduling.models import AppointmentStatusChoices


def can_view_appointment(principal, appointment) -> bool:
    if principal.role == RoleChoices.ADMIN:
        return True
    if principal.role == RoleChoices.PRACTITIONER:
        return appointment.practitioner_id == principal.id
    if principal.role == RoleChoices.CLIENT:
        return appointment.client_id == principal.id
    return False


def can_book(principal, practitioner_id, client_id) -> bool:
    if principal.role == RoleChoices.ADMIN:
        return True
    if principal.role == RoleChoices.PRACTITIONER:
        return practitioner_id == principal.id
    if principal.role == RoleChoices.CLIENT:
        return client_id == principal.id
    return False


def can_transition(principal, appointment, target_status) -> bool:
    """Role/ownership check only; state machine validity is checked separately."""
    if not can_view_appointment(principal, appointment):
        return False
    if principal.role == RoleChoices.CLIENT:
        return target_status == AppointmentStatusChoices.CANCELLED
    return True
