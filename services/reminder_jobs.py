"""Reminder job bodies. An external scheduler (cron) runs them via the CLI."""
from datetime import timedelta

from logging_config import get_logger
from models import User
from services import notification_service
from services.completion_tracker import compute_streak
from services.habit_service import find_habits_due_on
from services.recurrence import completed_on_date, is_due, weekday_index
from utils import parse_timestamp, utc_now

logger = get_logger(__name__)


def _subscribed_users():
    return User.query.filter_by(notifications_enabled=True).order_by(User.id).all()


def _due_today(user, today):
    return find_habits_due_on(user.id, weekday_index(today))


def _pending_today(user, today):
    return [h for h in _due_today(user, today) if not completed_on_date(h.completions, today)]


def morning_reminder(now):
    sent = 0
    for user in _subscribed_users():
        habits = _due_today(user, now.date())
        if habits and notification_service.dispatch(user.id, notification_service.daily_reminder(habits)):
            sent += 1
    return sent


def evening_reminder(now):
    sent = 0
    for user in _subscribed_users():
        habits = _pending_today(user, now.date())
        if habits and notification_service.dispatch(user.id, notification_service.incomplete_reminder(habits)):
            sent += 1
    return sent


def habit_time_reminders(now):
    sent = 0
    for user in _subscribed_users():
        for habit in _pending_today(user, now.date()):
            if parse_timestamp(habit.target_time).hour != now.hour:
                continue
            if notification_service.dispatch(user.id, notification_service.habit_time_reminder(habit)):
                sent += 1
    return sent


def streak_at_risk(now):
    today = now.date()
    yesterday = today - timedelta(days=1)
    sent = 0
    for user in _subscribed_users():
        for habit in _pending_today(user, today):
            current = compute_streak((c.date for c in habit.completions), today=yesterday)
            if current > 0 and notification_service.dispatch(
                    user.id, notification_service.streak_at_risk(habit, current)):
                sent += 1
    return sent


def weekly_stats(user, today):
    """Scheduled vs completed occurrences over the seven days ending today."""
    days = [today - timedelta(days=i) for i in range(6, -1, -1)]
    scheduled = completed = 0
    for habit in user.habits:
        completion_days = {c.date for c in habit.completions}
        for day in days:
            if is_due(habit.repeats, day):
                scheduled += 1
                if day in completion_days:
                    completed += 1
    rate = round(completed / scheduled * 100) if scheduled else 0
    return {'scheduled': scheduled, 'completed': completed, 'completion_rate': rate}


def weekly_progress(now):
    sent = 0
    for user in _subscribed_users():
        stats = weekly_stats(user, now.date())
        if stats['scheduled'] and notification_service.dispatch(
                user.id, notification_service.weekly_progress(stats)):
            sent += 1
    return sent


def motivation(now):
    sent = 0
    for user in _subscribed_users():
        if notification_service.dispatch(user.id, notification_service.motivation()):
            sent += 1
    return sent


JOBS = {
    'morning': morning_reminder,
    'evening': evening_reminder,
    'hourly': habit_time_reminders,
    'streak-risk': streak_at_risk,
    'weekly': weekly_progress,
    'motivation': motivation,
}


def run_job(name, now=None):
    if name not in JOBS:
        raise KeyError(name)
    now = now or utc_now()
    logger.info('Running %s reminder job', name)
    sent = JOBS[name](now)
    logger.info('Reminder job %s sent %d notification(s)', name, sent)
    return sent
