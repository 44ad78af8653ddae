"""Which habits are scheduled on a given UTC calendar date.

Weekdays are indexed Monday=0 ... Sunday=6, the same as ``date.weekday()``.
"""
import re
from datetime import datetime

from errors import InvalidDate
from utils import utc_today

DATE_PATTERN = re.compile(r'[0-9]{4}-[0-9]{2}-[0-9]{2}')


def parse_date(value=None):
    """Resolve an optional 'YYYY-MM-DD' string to a UTC calendar date.

    ``None`` or an empty string means today (UTC).
    """
    if value is None or value == '':
        return utc_today()
    if not isinstance(value, str) or not DATE_PATTERN.fullmatch(value):
        raise InvalidDate()
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise InvalidDate()


def native_to_weekday(native_day):
    # Sunday=0 ... Saturday=6 -> Monday=0 ... Sunday=6
    return (native_day + 6) % 7


def weekday_index(day):
    if isinstance(day, datetime):
        day = day.date()
    return day.weekday()


def normalize_repeats(values):
    """Weekday set from stored repeat values; 3 and "3" name the same day."""
    days = set()
    for value in values or ():
        if isinstance(value, bool):
            continue
        if isinstance(value, int):
            days.add(value)
        elif isinstance(value, str) and value.strip().isdigit():
            days.add(int(value.strip()))
    return days


def is_due(repeats, day):
    return weekday_index(day) in normalize_repeats(repeats)


def completed_on_date(completions, day):
    return any(c.date == day for c in completions)


def due_habits(habits, day):
    return [h for h in habits if is_due(h.repeats, day)]
