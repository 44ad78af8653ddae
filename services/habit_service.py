import math

from flask import current_app
from sqlalchemy.exc import IntegrityError

from errors import NotFound, Unauthorized
from logging_config import get_logger
from models import db, Habit
from services import notification_service
from services.completion_tracker import record_completion
from services.recurrence import completed_on_date, is_due, normalize_repeats
from utils import utc_today

logger = get_logger(__name__)


def find_habit_for_user(habit_id, user_id):
    habit = db.session.get(Habit, habit_id)
    if habit is None:
        raise NotFound(f'Habit not found with id of {habit_id}')
    if habit.user_id != user_id:
        raise Unauthorized(f'User {user_id} is not authorized to access this habit')
    return habit


def find_habits_due_on(user_id, weekday):
    # repeats is JSON and may hold 3 or "3"; filter after loading
    habits = Habit.query.filter_by(user_id=user_id).order_by(Habit.created_at.desc(), Habit.id.desc()).all()
    return [h for h in habits if weekday in normalize_repeats(h.repeats)]


def create_habit(user, payload):
    habit = Habit(
        name=payload.name,
        created_time=payload.created_time,
        target_time=payload.target_time,
        icon_id=payload.icon_id,
        repeats=payload.repeats,
        user_id=user.id,
    )
    db.session.add(habit)
    db.session.commit()
    logger.info('User %s created habit %s', user.id, habit.id)

    notification_service.dispatch(user.id, notification_service.habit_creation(habit))
    return habit


def mark_habit_done(habit, timestamp=None, now=None):
    """Record a completion and persist it.

    A concurrent request may insert the same (habit, date) first; the unique
    constraint rejects ours and the retry sees it as a duplicate.
    """
    habit_id = habit.id
    try:
        outcome = record_completion(habit, timestamp, now=now)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        logger.info('Concurrent completion for habit %s, retrying as duplicate', habit_id)
        habit = db.session.get(Habit, habit_id)
        db.session.refresh(habit)
        outcome = record_completion(habit, timestamp, now=now)
        db.session.commit()

    if not outcome.duplicate:
        _notify_completion(habit, outcome)
    return outcome


def _notify_completion(habit, outcome):
    notification_service.dispatch(habit.user_id, notification_service.habit_completion(habit, outcome.completion))
    if outcome.streak in current_app.config['STREAK_MILESTONES']:
        notification_service.dispatch(habit.user_id, notification_service.streak_milestone(habit, outcome.streak))


def serialize_habit(habit, on_date=None):
    today = utc_today()
    on_date = on_date or today
    last = habit.last_completion
    return {
        'id': habit.id,
        'name': habit.name,
        'created_time': habit.created_time,
        'target_time': habit.target_time,
        'icon_id': habit.icon_id,
        'repeats': sorted(normalize_repeats(habit.repeats)),
        'streak': habit.streak or 0,
        'user': habit.user_id,
        'completions': [c.to_dict() for c in habit.completions],
        'completed': completed_on_date(habit.completions, on_date),
        'completed_today': completed_on_date(habit.completions, today),
        'due': is_due(habit.repeats, on_date),
        'last_completion': last.to_dict() if last else None,
        'created_at': habit.created_at.isoformat() if habit.created_at else None,
    }


def analysis_metrics(habits):
    """Summary counts over a user's habits; active means scheduled on at least one day."""
    frequencies = [len(normalize_repeats(h.repeats)) for h in habits]
    total = len(frequencies)
    average = sum(frequencies) / total if total else 0
    return {
        'total_habits': total,
        'active_habits': sum(1 for f in frequencies if f > 0),
        # one decimal, halves rounded up
        'average_frequency': math.floor(average * 10 + 0.5) / 10,
    }
