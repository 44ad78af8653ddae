import pytest
from datetime import date, datetime, timedelta, timezone
from errors import InvalidTimestamp
from models import Habit, HabitCompletion
from services.completion_tracker import compute_streak, is_on_time, record_completion
from services.recurrence import completed_on_date

NOW = datetime(2024, 1, 15, 21, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


def make_habit(target='2024-01-01T08:00:00.000Z', completions=()):
    habit = Habit(name='Run', target_time=target, repeats=[0, 1, 2, 3, 4, 5, 6])
    for c in completions:
        habit.completions.append(c)
    return habit


def at(day, hour=8, minute=0):
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


def test_same_day_completion_is_duplicate():
    habit = make_habit()
    first = record_completion(habit, '2024-01-15T08:00:00.000Z', now=NOW)
    second = record_completion(habit, '2024-01-15T20:00:00.000Z', now=NOW)

    assert first.duplicate is False
    assert second.duplicate is True
    assert len(habit.completions) == 1
    assert second.completion is first.completion


def test_on_time_within_tolerance():
    target = datetime(2024, 1, 1, 8, 0, tzinfo=timezone.utc)
    assert is_on_time(target, at(TODAY, 8, 25), tolerance=30) is True
    assert is_on_time(target, at(TODAY, 7, 30), tolerance=30) is True
    assert is_on_time(target, at(TODAY, 8, 45), tolerance=30) is False


def test_on_time_ignores_target_date():
    habit = make_habit(target='1999-06-30T08:00:00Z')
    outcome = record_completion(habit, '2024-01-15T08:25:00.000Z', now=NOW, tolerance=30)
    assert outcome.completion.on_time is True


def test_midnight_target_has_no_wraparound():
    target = datetime(2024, 1, 1, 23, 50, tzinfo=timezone.utc)
    assert is_on_time(target, at(TODAY, 0, 5), tolerance=30) is False


def test_duplicate_promotes_on_time_but_never_demotes():
    habit = make_habit()
    late = record_completion(habit, '2024-01-15T10:00:00Z', now=NOW, tolerance=30)
    assert late.completion.on_time is False

    promoted = record_completion(habit, '2024-01-15T08:10:00Z', now=NOW, tolerance=30)
    assert promoted.duplicate is True
    assert promoted.completion.on_time is True

    again_late = record_completion(habit, '2024-01-15T12:00:00Z', now=NOW, tolerance=30)
    assert again_late.completion.on_time is True
    assert len(habit.completions) == 1


def test_invalid_timestamp():
    habit = make_habit()
    with pytest.raises(InvalidTimestamp):
        record_completion(habit, 'not-a-date', now=NOW)
    with pytest.raises(InvalidTimestamp):
        record_completion(habit, '', now=NOW)
    assert len(habit.completions) == 0


def test_missing_timestamp_uses_now():
    habit = make_habit()
    outcome = record_completion(habit, now=NOW)
    assert outcome.completion.timestamp == '2024-01-15T21:00:00.000Z'
    assert outcome.completion.date == TODAY
    assert outcome.streak == 1


def test_streak_counts_consecutive_days_ending_today():
    days = [TODAY, TODAY - timedelta(days=1), TODAY - timedelta(days=2)]
    assert compute_streak(days, today=TODAY) == 3
    assert compute_streak(days[1:], today=TODAY) == 0
    assert compute_streak([TODAY, TODAY - timedelta(days=2)], today=TODAY) == 1
    assert compute_streak([], today=TODAY) == 0


def test_streak_is_pure():
    days = {TODAY, TODAY - timedelta(days=1)}
    assert compute_streak(days, today=TODAY) == compute_streak(days, today=TODAY) == 2


def test_backfilled_completion_extends_streak():
    habit = make_habit(completions=[
        HabitCompletion.at(at(TODAY)),
        HabitCompletion.at(at(TODAY - timedelta(days=2))),
    ])
    outcome = record_completion(habit, at(TODAY - timedelta(days=1)).isoformat(), now=NOW)
    assert outcome.duplicate is False
    assert outcome.streak == 3
    assert habit.streak == 3


def test_duplicate_still_recomputes_streak():
    habit = make_habit(completions=[HabitCompletion.at(at(TODAY - timedelta(days=1)))])
    habit.streak = 99
    outcome = record_completion(habit, at(TODAY - timedelta(days=1), 9).isoformat(), now=NOW)
    assert outcome.duplicate is True
    assert outcome.streak == 0


def test_recorded_completion_is_visible_on_its_date():
    habit = make_habit()
    record_completion(habit, '2024-01-10T06:00:00+02:00', now=NOW)
    assert completed_on_date(habit.completions, date(2024, 1, 10)) is True
