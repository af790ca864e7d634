"""
Input parsing shared by the services.

Each helper raises InvalidInput naming the offending field, so bad
requests are rejected before any store access.
"""
import re
import uuid
from datetime import date, datetime

from django.utils.dateparse import parse_datetime

from apps.core.exceptions import InvalidInput

_DAY_RE = re.compile(r'^\d{4}-\d{2}-\d{2}$')


def parse_uuid(value, field):
    if isinstance(value, uuid.UUID):
        return value
    if value in (None, ''):
        raise InvalidInput(f'{field} is required', field=field)
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise InvalidInput(f'{field} must be a valid UUID', field=field)


def parse_day(value, field='date'):
    """Accept a date or a strict YYYY-MM-DD string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not _DAY_RE.match(value):
        raise InvalidInput('Expected date in YYYY-MM-DD format', field=field)
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise InvalidInput(f'{value} is not a valid calendar day', field=field)


def parse_instant(value, tz, field):
    """
    Accept an aware/naive datetime or an ISO-8601 string.

    Naive values are read as wall-clock time in `tz` (the clinic zone).
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = parse_datetime(value)
        except ValueError:
            parsed = None
        if parsed is None:
            raise InvalidInput(f'{field} must be an ISO-8601 date-time', field=field)
    else:
        raise InvalidInput(f'{field} is required', field=field)

    if parsed.tzinfo is None or parsed.tzinfo.utcoffset(parsed) is None:
        parsed = tz.localize(parsed)
    return parsed
