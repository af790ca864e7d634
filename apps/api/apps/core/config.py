"""
Process-wide scheduling configuration.

Built once from settings.SCHEDULING and handed explicitly to the
scheduling services, which never read django.conf.settings themselves.
"""
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from functools import lru_cache

import pytz
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


@dataclass(frozen=True)
class SchedulingConfig:
    """Fixed business window and slot size for a single clinic time zone."""
    timezone_name: str = 'UTC'
    business_hours_start: time = time(9, 0)
    business_hours_end: time = time(17, 0)
    slot_duration_minutes: int = 30

    def __post_init__(self):
        if self.slot_duration_minutes <= 0:
            raise ImproperlyConfigured('SLOT_DURATION_MINUTES must be positive')
        if self.business_hours_end <= self.business_hours_start:
            raise ImproperlyConfigured('BUSINESS_HOURS_END must be after BUSINESS_HOURS_START')

    @property
    def tz(self):
        return pytz.timezone(self.timezone_name)

    @property
    def slot_duration(self) -> timedelta:
        return timedelta(minutes=self.slot_duration_minutes)

    @classmethod
    def from_settings(cls) -> 'SchedulingConfig':
        """Return the cached configuration derived from Django settings."""
        return _load_from_settings()


def _parse_hhmm(value: str, name: str) -> time:
    try:
        return datetime.strptime(value, '%H:%M').time()
    except (TypeError, ValueError):
        raise ImproperlyConfigured(f'{name} must use HH:MM format, got {value!r}')


@lru_cache(maxsize=1)
def _load_from_settings() -> SchedulingConfig:
    raw = getattr(settings, 'SCHEDULING', {})
    tz_name = raw.get('TIME_ZONE', 'UTC')
    try:
        pytz.timezone(tz_name)
    except pytz.UnknownTimeZoneError:
        raise ImproperlyConfigured(f'Unknown clinic time zone: {tz_name}')

    return SchedulingConfig(
        timezone_name=tz_name,
        business_hours_start=_parse_hhmm(raw.get('BUSINESS_HOURS_START', '09:00'), 'BUSINESS_HOURS_START'),
        business_hours_end=_parse_hhmm(raw.get('BUSINESS_HOURS_END', '17:00'), 'BUSINESS_HOURS_END'),
        slot_duration_minutes=int(raw.get('SLOT_DURATION_MINUTES', 30)),
    )
