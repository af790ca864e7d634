"""
Slot generation for a single calendar day.

Pure and deterministic: depends only on the day and the scheduling
configuration, never on stored data.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List

from apps.core.config import SchedulingConfig
from apps.core.exceptions import InvalidInput


def intervals_overlap(a_start, a_end, b_start, b_end) -> bool:
    """Half-open intervals [a_start, a_end) and [b_start, b_end) overlap."""
    return a_start < b_end and a_end > b_start


@dataclass(frozen=True)
class Slot:
    """A candidate bookable window. Never persisted."""
    start: datetime
    end: datetime

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return intervals_overlap(self.start, self.end, start, end)

    def to_dict(self) -> Dict[str, str]:
        return {
            'start': self.start.isoformat(),
            'end': self.end.isoformat(),
        }


def generate_slots(day: date, config: SchedulingConfig) -> List[Slot]:
    """
    Consecutive slots of `config.slot_duration` inside the business window.

    A slot is emitted only if it ends at or before the window end, so a
    trailing remainder shorter than one slot is dropped.
    """
    if not isinstance(day, date) or isinstance(day, datetime):
        raise InvalidInput('A calendar day is required', field='date')

    tz = config.tz
    day_start = tz.localize(datetime.combine(day, config.business_hours_start))
    day_end = tz.localize(datetime.combine(day, config.business_hours_end))
    step = config.slot_duration

    slots = []
    current = day_start
    while current + step <= day_end:
        slot_end = tz.normalize(current + step)
        slots.append(Slot(start=current, end=slot_end))
        current = slot_end

    return slots
