"""
Availability tests

Service: AvailabilityService.get_availability
Endpoint: GET /api/v1/practitioners/{practitioner_id}/availability/?date=YYYY-MM-DD

CRITICAL: All tests use timezone-aware datetimes (UTC clinic zone)
"""
import uuid
from datetime import date, datetime

import pytest
import pytz

from apps.core.exceptions import InvalidInput, NotFound
from apps.scheduling.models import Appointment, AppointmentStatusChoices
from apps.scheduling.services import AvailabilityService


def utc(year, month, day, hour, minute=0):
    return pytz.UTC.localize(datetime(year, month, day, hour, minute))


def make_appointment(practitioner, client, starts_at, ends_at, status=AppointmentStatusChoices.PENDING):
    return Appointment.objects.create(
        practitioner=practitioner,
        client=client,
        starts_at=starts_at,
        ends_at=ends_at,
        status=status,
    )


@pytest.mark.django_db
class TestAvailabilityService:

    def test_empty_calendar_returns_every_slot(self, practitioner_user, scheduling_config):
        slots = AvailabilityService.get_availability(
            practitioner_user.id, '2024-06-01', scheduling_config
        )
        assert len(slots) == 16

    def test_booked_slot_is_removed(self, practitioner_user, client_user, scheduling_config):
        """E2E: one 10:00-10:30 booking leaves 15 slots, without 10:00."""
        make_appointment(practitioner_user, client_user, utc(2024, 6, 1, 10, 0), utc(2024, 6, 1, 10, 30))

        slots = AvailabilityService.get_availability(
            practitioner_user.id, date(2024, 6, 1), scheduling_config
        )

        assert len(slots) == 15
        assert utc(2024, 6, 1, 10, 0) not in [s.start for s in slots]
        assert utc(2024, 6, 1, 9, 30) in [s.start for s in slots]
        assert utc(2024, 6, 1, 10, 30) in [s.start for s in slots]

    def test_confirmed_first_slot_day_scenario(self, practitioner_user, client_user, scheduling_config):
        """E2E: CONFIRMED 09:00-09:30 leaves 15 slots from 09:30 to 17:00."""
        make_appointment(
            practitioner_user, client_user,
            utc(2024, 6, 1, 9, 0), utc(2024, 6, 1, 9, 30),
            status=AppointmentStatusChoices.CONFIRMED,
        )

        slots = AvailabilityService.get_availability(practitioner_user.id, '2024-06-01', scheduling_config)

        assert len(slots) == 15
        assert slots[0].start == utc(2024, 6, 1, 9, 30)
        assert slots[-1].start == utc(2024, 6, 1, 16, 30)
        assert slots[-1].end == utc(2024, 6, 1, 17, 0)
        assert utc(2024, 6, 1, 9, 0) not in [s.start for s in slots]

    def test_free_slots_never_overlap_booked_intervals(self, practitioner_user, client_user, scheduling_config):
        booked = [
            (utc(2024, 6, 1, 9, 10), utc(2024, 6, 1, 9, 20)),
            (utc(2024, 6, 1, 12, 0), utc(2024, 6, 1, 13, 15)),
            (utc(2024, 6, 1, 16, 45), utc(2024, 6, 1, 18, 0)),
        ]
        for start, end in booked:
            make_appointment(practitioner_user, client_user, start, end)

        slots = AvailabilityService.get_availability(practitioner_user.id, '2024-06-01', scheduling_config)

        for slot in slots:
            for start, end in booked:
                assert not slot.overlaps(start, end)

    def test_cancelled_appointment_frees_slot(self, practitioner_user, client_user, scheduling_config):
        make_appointment(
            practitioner_user, client_user,
            utc(2024, 6, 1, 10, 0), utc(2024, 6, 1, 10, 30),
            status=AppointmentStatusChoices.CANCELLED,
        )

        slots = AvailabilityService.get_availability(practitioner_user.id, '2024-06-01', scheduling_config)

        assert len(slots) == 16

    @pytest.mark.parametrize('blocking_status', [
        AppointmentStatusChoices.PENDING,
        AppointmentStatusChoices.CONFIRMED,
        AppointmentStatusChoices.COMPLETED,
    ])
    def test_non_cancelled_statuses_block(self, practitioner_user, client_user, scheduling_config, blocking_status):
        make_appointment(
            practitioner_user, client_user,
            utc(2024, 6, 1, 14, 0), utc(2024, 6, 1, 14, 30),
            status=blocking_status,
        )

        slots = AvailabilityService.get_availability(practitioner_user.id, '2024-06-01', scheduling_config)

        assert len(slots) == 15

    def test_irregular_appointment_blocks_every_touched_slot(self, practitioner_user, client_user, scheduling_config):
        """10:15-11:05 overlaps 10:00, 10:30 and 11:00 slots."""
        make_appointment(practitioner_user, client_user, utc(2024, 6, 1, 10, 15), utc(2024, 6, 1, 11, 5))

        slots = AvailabilityService.get_availability(practitioner_user.id, '2024-06-01', scheduling_config)
        starts = [s.start for s in slots]

        assert len(slots) == 13
        assert utc(2024, 6, 1, 10, 0) not in starts
        assert utc(2024, 6, 1, 10, 30) not in starts
        assert utc(2024, 6, 1, 11, 0) not in starts
        assert utc(2024, 6, 1, 11, 30) in starts

    def test_other_practitioner_bookings_ignored(
        self, practitioner_user, other_practitioner, client_user, scheduling_config
    ):
        make_appointment(other_practitioner, client_user, utc(2024, 6, 1, 10, 0), utc(2024, 6, 1, 10, 30))

        slots = AvailabilityService.get_availability(practitioner_user.id, '2024-06-01', scheduling_config)

        assert len(slots) == 16

    def test_other_day_bookings_ignored(self, practitioner_user, client_user, scheduling_config):
        make_appointment(practitioner_user, client_user, utc(2024, 6, 2, 10, 0), utc(2024, 6, 2, 10, 30))

        slots = AvailabilityService.get_availability(practitioner_user.id, '2024-06-01', scheduling_config)

        assert len(slots) == 16

    def test_fully_booked_day(self, practitioner_user, client_user, scheduling_config):
        make_appointment(practitioner_user, client_user, utc(2024, 6, 1, 9, 0), utc(2024, 6, 1, 17, 0))

        slots = AvailabilityService.get_availability(practitioner_user.id, '2024-06-01', scheduling_config)

        assert slots == []

    def test_result_is_ascending(self, practitioner_user, client_user, scheduling_config):
        make_appointment(practitioner_user, client_user, utc(2024, 6, 1, 12, 0), utc(2024, 6, 1, 13, 0))

        slots = AvailabilityService.get_availability(practitioner_user.id, '2024-06-01', scheduling_config)
        starts = [s.start for s in slots]

        assert starts == sorted(starts)

    @pytest.mark.parametrize('bad_day', ['2024-13-01', '01/06/2024', '2024-6-1', '', None, 'tomorrow'])
    def test_malformed_day_is_invalid_input(self, practitioner_user, scheduling_config, bad_day):
        with pytest.raises(InvalidInput) as exc:
            AvailabilityService.get_availability(practitioner_user.id, bad_day, scheduling_config)
        assert exc.value.field == 'date'

    def test_unknown_practitioner_is_not_found(self, scheduling_config):
        with pytest.raises(NotFound):
            AvailabilityService.get_availability(uuid.uuid4(), '2024-06-01', scheduling_config)

    def test_client_is_not_a_practitioner(self, client_user, scheduling_config):
        with pytest.raises(NotFound):
            AvailabilityService.get_availability(client_user.id, '2024-06-01', scheduling_config)

    def test_inactive_practitioner_is_not_found(self, practitioner_user, scheduling_config):
        practitioner_user.is_active = False
        practitioner_user.save()

        with pytest.raises(NotFound):
            AvailabilityService.get_availability(practitioner_user.id, '2024-06-01', scheduling_config)


@pytest.mark.django_db
class TestAvailabilityEndpoint:
    """Test GET /api/v1/practitioners/{id}/availability/"""

    def test_public_endpoint_returns_slots(self, api_client, practitioner_user, client_user):
        make_appointment(practitioner_user, client_user, utc(2024, 6, 1, 10, 0), utc(2024, 6, 1, 10, 30))

        response = api_client.get(
            f'/api/v1/practitioners/{practitioner_user.id}/availability/',
            {'date': '2024-06-01'}
        )

        assert response.status_code == 200
        assert len(response.data) == 15
        assert response.data[0] == {
            'start': '2024-06-01T09:00:00+00:00',
            'end': '2024-06-01T09:30:00+00:00',
        }
        assert '2024-06-01T10:00:00+00:00' not in [s['start'] for s in response.data]

    def test_missing_date_returns_400(self, api_client, practitioner_user):
        response = api_client.get(f'/api/v1/practitioners/{practitioner_user.id}/availability/')

        assert response.status_code == 400
        assert response.data['code'] == 'invalid_input'
        assert 'date' in response.data['fields']

    def test_unknown_practitioner_returns_404(self, api_client):
        response = api_client.get(
            f'/api/v1/practitioners/{uuid.uuid4()}/availability/',
            {'date': '2024-06-01'}
        )

        assert response.status_code == 404
        assert response.data['code'] == 'not_found'
