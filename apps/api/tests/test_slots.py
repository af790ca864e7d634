"""
Tests for slot generation and the scheduling configuration object.

Pure functions: no database needed.
"""
from datetime import date, datetime, time

import pytest
import pytz
from django.core.exceptions import ImproperlyConfigured
from django.test import override_settings

from apps.core.config import SchedulingConfig
from apps.core.exceptions import InvalidInput
from apps.scheduling.slots import Slot, generate_slots, intervals_overlap


class TestGenerateSlots:

    def test_default_day_has_sixteen_half_hour_slots(self, scheduling_config):
        slots = generate_slots(date(2024, 6, 1), scheduling_config)

        assert len(slots) == 16
        assert slots[0].start == pytz.UTC.localize(datetime(2024, 6, 1, 9, 0))
        assert slots[-1].end == pytz.UTC.localize(datetime(2024, 6, 1, 17, 0))

    def test_slots_are_contiguous_and_ascending(self, scheduling_config):
        slots = generate_slots(date(2024, 6, 1), scheduling_config)

        for previous, current in zip(slots, slots[1:]):
            assert previous.end == current.start
            assert previous.start < current.start

    def test_every_slot_lasts_exactly_one_duration(self, scheduling_config):
        for slot in generate_slots(date(2024, 6, 1), scheduling_config):
            assert slot.end - slot.start == scheduling_config.slot_duration

    def test_trailing_remainder_is_dropped(self):
        config = SchedulingConfig(
            business_hours_start=time(9, 0),
            business_hours_end=time(10, 45),
            slot_duration_minutes=30,
        )

        slots = generate_slots(date(2024, 6, 1), config)

        assert len(slots) == 3
        assert slots[-1].end.time() == time(10, 30)

    def test_slots_follow_clinic_time_zone(self):
        config = SchedulingConfig(timezone_name='Europe/Paris')

        slots = generate_slots(date(2024, 6, 1), config)

        # CEST is UTC+2 in June
        assert slots[0].start.astimezone(pytz.UTC).hour == 7
        assert slots[0].start.hour == 9

    def test_generation_is_deterministic(self, scheduling_config):
        day = date(2024, 6, 1)
        assert generate_slots(day, scheduling_config) == generate_slots(day, scheduling_config)

    def test_rejects_non_date(self, scheduling_config):
        with pytest.raises(InvalidInput):
            generate_slots('2024-06-01', scheduling_config)


class TestOverlap:

    def test_touching_intervals_do_not_overlap(self):
        a = Slot(
            start=pytz.UTC.localize(datetime(2024, 6, 1, 10, 0)),
            end=pytz.UTC.localize(datetime(2024, 6, 1, 10, 30)),
        )
        assert not a.overlaps(a.end, pytz.UTC.localize(datetime(2024, 6, 1, 11, 0)))
        assert not a.overlaps(pytz.UTC.localize(datetime(2024, 6, 1, 9, 30)), a.start)

    def test_partial_overlap(self):
        assert intervals_overlap(1, 3, 2, 4)
        assert intervals_overlap(2, 4, 1, 3)

    def test_containment_overlaps(self):
        assert intervals_overlap(1, 10, 3, 4)
        assert intervals_overlap(3, 4, 1, 10)

    def test_to_dict_uses_iso_format(self):
        slot = Slot(
            start=pytz.UTC.localize(datetime(2024, 6, 1, 9, 0)),
            end=pytz.UTC.localize(datetime(2024, 6, 1, 9, 30)),
        )
        assert slot.to_dict() == {
            'start': '2024-06-01T09:00:00+00:00',
            'end': '2024-06-01T09:30:00+00:00',
        }


class TestSchedulingConfig:

    def test_defaults(self):
        config = SchedulingConfig()
        assert config.timezone_name == 'UTC'
        assert config.business_hours_start == time(9, 0)
        assert config.business_hours_end == time(17, 0)
        assert config.slot_duration_minutes == 30

    def test_rejects_inverted_window(self):
        with pytest.raises(ImproperlyConfigured):
            SchedulingConfig(business_hours_start=time(17, 0), business_hours_end=time(9, 0))

    def test_rejects_non_positive_duration(self):
        with pytest.raises(ImproperlyConfigured):
            SchedulingConfig(slot_duration_minutes=0)

    @override_settings(SCHEDULING={
        'TIME_ZONE': 'America/New_York',
        'BUSINESS_HOURS_START': '08:00',
        'BUSINESS_HOURS_END': '12:00',
        'SLOT_DURATION_MINUTES': 60,
    })
    def test_from_settings(self):
        config = SchedulingConfig.from_settings()

        assert config.timezone_name == 'America/New_York'
        assert config.business_hours_start == time(8, 0)
        assert config.business_hours_end == time(12, 0)
        assert len(generate_slots(date(2024, 6, 1), config)) == 4

    @override_settings(SCHEDULING={'TIME_ZONE': 'Mars/Olympus_Mons'})
    def test_from_settings_rejects_unknown_time_zone(self):
        with pytest.raises(ImproperlyConfigured):
            SchedulingConfig.from_settings()

    @override_settings(SCHEDULING={'BUSINESS_HOURS_START': '9am'})
    def test_from_settings_rejects_bad_hours(self):
        with pytest.raises(ImproperlyConfigured):
            SchedulingConfig.from_settings()
