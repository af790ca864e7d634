"""
The authenticated actor as seen by the scheduling and intake services.
"""
import uuid
from dataclasses import dataclass

from apps.authz.models import RoleChoices
from apps.core.exceptions import Forbidden
from apps.core.observability.correlation import bind_user


@dataclass(frozen=True)
class Principal:
    """Verified identity (id, role). Trusted as-is; never re-verified here."""
    id: uuid.UUID
    role: str

    @classmethod
    def from_user(cls, user) -> 'Principal':
        if user is None or not getattr(user, 'is_authenticated', False):
            raise Forbidden('Authentication required')
        if user.role not in RoleChoices.values:
            raise Forbidden(f'Unknown role: {user.role}')
        return cls(id=user.id, role=user.role)

    @classmethod
    def from_request(cls, request) -> 'Principal':
        """Principal for a DRF request; also binds it to the log context."""
        bind_user(request.user)
        return cls.from_user(request.user)

    @property
    def is_client(self):
        return self.role == RoleChoices.CLIENT

    @property
    def is_practitioner(self):
        return self.role == RoleChoices.PRACTITIONER

    @property
    def is_admin(self):
        return self.role == RoleChoices.ADMIN
