"""Recording habit completions: duplicate detection, on-time status and streaks.

All dates are UTC calendar dates. A habit holds at most one completion per
date; recording a second one on the same date is a no-op apart from promoting
``on_time`` from False to True.
"""
from collections import namedtuple
from datetime import timedelta

from flask import current_app, has_app_context

from config import Config
from errors import InvalidTimestamp
from models import HabitCompletion
from utils import parse_timestamp, utc_now


CompletionOutcome = namedtuple('CompletionOutcome', ['completion', 'streak', 'duplicate'])


def tolerance_minutes():
    if has_app_context():
        return current_app.config.get('ON_TIME_TOLERANCE_MINUTES', Config.ON_TIME_TOLERANCE_MINUTES)
    return Config.ON_TIME_TOLERANCE_MINUTES


def resolve_timestamp(requested=None, now=None):
    if requested is None:
        return now or utc_now()
    try:
        return parse_timestamp(requested)
    except (TypeError, ValueError):
        raise InvalidTimestamp()


def minutes_of_day(moment):
    return moment.hour * 60 + moment.minute


def is_on_time(target, moment, tolerance=None):
    """Compare UTC time-of-day only; the target's date is ignored.

    Minute-of-day values are compared as-is, so a 23:50 target and a 00:05
    completion are 1425 minutes apart.
    """
    if tolerance is None:
        tolerance = tolerance_minutes()
    return abs(minutes_of_day(moment) - minutes_of_day(target)) <= tolerance


def compute_streak(dates, today=None):
    """Consecutive days with a completion, counting back from ``today``."""
    days = set(dates)
    cursor = today or utc_now().date()
    streak = 0
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def find_completion_on(completions, day):
    for completion in completions:
        if completion.date == day:
            return completion
    return None


def record_completion(habit, requested_timestamp=None, now=None, tolerance=None):
    """Apply a completion event to ``habit`` in memory and refresh its streak.

    The caller owns the session and commits.
    """
    now = now or utc_now()
    moment = resolve_timestamp(requested_timestamp, now)
    on_time = is_on_time(parse_timestamp(habit.target_time), moment, tolerance)
    day = moment.date()

    existing = find_completion_on(habit.completions, day)
    if existing is not None:
        if on_time and not existing.on_time:
            existing.on_time = True
        completion, duplicate = existing, True
    else:
        completion = HabitCompletion.at(moment, on_time=on_time)
        habit.completions.append(completion)
        duplicate = False

    habit.streak = compute_streak((c.date for c in habit.completions), today=now.date())
    return CompletionOutcome(completion, habit.streak, duplicate)
