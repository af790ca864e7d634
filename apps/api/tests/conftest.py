"""
Global test fixtures for pytest.

Provides reusable fixtures for API testing:
- Users and Principals per role
- Authenticated API clients by role
- Appointment / intake template factories
"""
from datetime import datetime

import pytest
import pytz
from rest_framework.test import APIClient

from apps.authz.models import User, RoleChoices
from apps.authz.principal import Principal
from apps.core.config import SchedulingConfig, _load_from_settings
from apps.intake.models import IntakeTemplate
from apps.scheduling.models import Appointment, AppointmentStatusChoices

UTC = pytz.UTC


def create_user_with_role(email, role, first_name='Test', last_name='User'):
    """Helper function to create user with role"""
    return User.objects.create_user(
        email=email,
        password='test123',
        first_name=first_name,
        last_name=last_name,
        role=role,
        is_active=True
    )


# ============================================================================
# Configuration
# ============================================================================

@pytest.fixture(autouse=True)
def _reset_scheduling_config():
    """Settings overrides must not leak through the cached SchedulingConfig."""
    _load_from_settings.cache_clear()
    yield
    _load_from_settings.cache_clear()


@pytest.fixture
def scheduling_config():
    """Default clinic configuration: UTC, 09:00-17:00, 30 minute slots."""
    return SchedulingConfig()


# ============================================================================
# Users
# ============================================================================

@pytest.fixture
def admin_user(db):
    return create_user_with_role('admin@test.com', RoleChoices.ADMIN, 'Ada', 'Admin')


@pytest.fixture
def practitioner_user(db):
    return create_user_with_role('practitioner@test.com', RoleChoices.PRACTITIONER, 'Paula', 'Smith')


@pytest.fixture
def other_practitioner(db):
    return create_user_with_role('other.practitioner@test.com', RoleChoices.PRACTITIONER, 'Oscar', 'Jones')


@pytest.fixture
def client_user(db):
    return create_user_with_role('client@test.com', RoleChoices.CLIENT, 'Carla', 'Client')


@pytest.fixture
def other_client(db):
    return create_user_with_role('other.client@test.com', RoleChoices.CLIENT, 'Otto', 'Client')


# ============================================================================
# Principals
# ============================================================================

@pytest.fixture
def admin_principal(admin_user):
    return Principal.from_user(admin_user)


@pytest.fixture
def practitioner_principal(practitioner_user):
    return Principal.from_user(practitioner_user)


@pytest.fixture
def client_principal(client_user):
    return Principal.from_user(client_user)


@pytest.fixture
def other_client_principal(other_client):
    return Principal.from_user(other_client)


# ============================================================================
# API Clients
# ============================================================================

@pytest.fixture
def api_client():
    """Unauthenticated DRF API client."""
    return APIClient()


def _authenticated(user):
    api = APIClient()
    api.force_authenticate(user=user)
    return api


@pytest.fixture
def admin_api(admin_user):
    return _authenticated(admin_user)


@pytest.fixture
def practitioner_api(practitioner_user):
    return _authenticated(practitioner_user)


@pytest.fixture
def client_api(client_user):
    return _authenticated(client_user)


@pytest.fixture
def other_client_api(other_client):
    return _authenticated(other_client)


# ============================================================================
# Domain objects
# ============================================================================

@pytest.fixture
def appointment(practitioner_user, client_user):
    """PENDING appointment 2024-06-01 10:00-10:30 UTC (inserted directly)."""
    return Appointment.objects.create(
        practitioner=practitioner_user,
        client=client_user,
        starts_at=UTC.localize(datetime(2024, 6, 1, 10, 0)),
        ends_at=UTC.localize(datetime(2024, 6, 1, 10, 30)),
        status=AppointmentStatusChoices.PENDING,
    )


@pytest.fixture
def consent_template(db):
    """Active template with a required consent checkbox."""
    return IntakeTemplate.objects.create(
        name='General intake',
        description='Before your first visit',
        fields_schema=[
            {'id': 'consent', 'label': 'I consent to treatment', 'type': 'checkbox', 'required': True},
            {'id': 'goals', 'label': 'Your goals', 'type': 'textarea', 'required': False},
            {'id': 'age', 'label': 'Age', 'type': 'number', 'required': False},
            {
                'id': 'referral',
                'label': 'How did you hear about us?',
                'type': 'select',
                'required': False,
                'options': ['friend', 'search', 'other'],
            },
        ],
    )
