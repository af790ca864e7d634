"""
Role-based DRF permission classes.

These gate whole endpoints by role. Ownership checks (whose appointment
is it?) live in the per-app authorization predicates.
"""
from rest_framework import permissions
from apps.authz.models import RoleChoices


def _role(request):
    if not request.user or not request.user.is_authenticated:
        return None
    return getattr(request.user, 'role', None)


class HasKnownRole(permissions.BasePermission):
    """Authenticated and carrying one of the known roles."""

    def has_permission(self, request, view):
        return _role(request) in RoleChoices.values


class IsPractitionerOrAdmin(permissions.BasePermission):
    """
    Staff-side operations (intake template management).

    - Admin: allowed
    - Practitioner: allowed
    - Client: denied
    """
    message = 'Clients cannot manage intake templates'

    def has_permission(self, request, view):
        return _role(request) in {RoleChoices.PRACTITIONER, RoleChoices.ADMIN}
