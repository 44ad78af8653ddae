"""In-app notifications: message templates and best-effort delivery."""
import random

from logging_config import get_logger
from models import db, Notification, User
from utils import format_timestamp, utc_now

logger = get_logger(__name__)

MOTIVATION_MESSAGES = [
    "Every small step counts towards your bigger goals! 💪",
    "You're building the best version of yourself, one habit at a time! 🌟",
    "Consistency beats perfection. Keep going! 🔥",
    "Your future self will thank you for today's efforts! 🙏",
    "Small changes today, big results tomorrow! 🎯",
    "You have the power to change your life through habits! ⚡",
    "Every expert was once a beginner. Keep pushing! 🚀",
    "Your habits shape your destiny. Choose wisely! ✨",
]


def _payload(type, title, body, habit_id=None, data=None):
    return {
        'type': type,
        'title': title,
        'body': body,
        'habit_id': habit_id,
        'data': {k: str(v) for k, v in (data or {}).items()},
    }


def habit_creation(habit):
    return _payload(
        'habit_creation',
        'New Habit Created! 🎯',
        f'You\'ve added "{habit.name}" to your routine. Time to start building this habit!',
        habit_id=habit.id,
        data={
            'habitName': habit.name,
            'targetTime': habit.target_time,
            'repeatDays': ','.join(str(d) for d in habit.repeats),
        },
    )


def habit_completion(habit, completion):
    return _payload(
        'habit_completion',
        'Habit Completed! ✅',
        f'Great job completing "{habit.name}"! You\'re building a better you!',
        habit_id=habit.id,
        data={'habitName': habit.name, 'completedAt': completion.timestamp, 'onTime': completion.on_time},
    )


def streak_milestone(habit, milestone):
    return _payload(
        'milestone',
        f'{milestone} Day Milestone! 🏆',
        f'Congratulations! You\'ve maintained "{habit.name}" for {milestone} days! You\'re unstoppable!',
        habit_id=habit.id,
        data={'milestone': milestone, 'habitName': habit.name},
    )


def daily_reminder(habits):
    return _payload(
        'daily_reminder',
        'Your Habits Await! 📋',
        f'You have {len(habits)} habit(s) scheduled for today. Let\'s make today count!',
        data={'habitCount': len(habits), 'habitIds': ','.join(str(h.id) for h in habits)},
    )


def incomplete_reminder(habits):
    names = ', '.join(h.name for h in habits)
    return _payload(
        'incomplete_habits',
        'Don\'t forget your habits! ⏰',
        f'You have {len(habits)} habit(s) to complete: {names}',
        data={'habitCount': len(habits), 'habitIds': ','.join(str(h.id) for h in habits)},
    )


def habit_time_reminder(habit):
    return _payload(
        'habit_reminder',
        f'Time for "{habit.name}"! ⏰',
        'It\'s time to complete your habit. Don\'t let this moment slip away!',
        habit_id=habit.id,
        data={'habitName': habit.name, 'targetTime': habit.target_time},
    )


def streak_at_risk(habit, current_streak):
    return _payload(
        'streak_at_risk',
        'Your Streak is at Risk! ⚠️',
        f'Don\'t break your {current_streak}-day streak with "{habit.name}"! Complete it now!',
        habit_id=habit.id,
        data={'currentStreak': current_streak, 'habitName': habit.name},
    )


def weekly_progress(stats):
    return _payload(
        'weekly_progress',
        'Weekly Progress Report 📊',
        f'You completed {stats["completed"]}/{stats["scheduled"]} habits this week '
        f'({stats["completion_rate"]}% success rate)!',
        data={
            'completedHabits': stats['completed'],
            'totalHabits': stats['scheduled'],
            'completionRate': stats['completion_rate'],
        },
    )


def motivation(message=None):
    return _payload(
        'motivation',
        'Motivation Boost! 💪',
        message or random.choice(MOTIVATION_MESSAGES),
        data={'timestamp': format_timestamp(utc_now())},
    )


def sample_notification():
    return _payload('test', 'Test Notification 🔔', 'Notifications are working for your account.')


def dispatch(user_id, payload):
    """Store a notification for ``user_id``. Never raises.

    Returns the Notification, or None when the user opted out, does not exist,
    or the write failed.
    """
    try:
        user = db.session.get(User, user_id)
        if user is None or not user.notifications_enabled:
            logger.debug('Skipping %s notification for user %s', payload['type'], user_id)
            return None

        notification = Notification(
            user_id=user_id,
            habit_id=payload.get('habit_id'),
            type=payload['type'],
            title=payload['title'],
            message=payload['body'],
            data=payload.get('data'),
        )
        db.session.add(notification)
        db.session.commit()
        logger.info('Sent %s notification to user %s', payload['type'], user_id)
        return notification
    except Exception:
        db.session.rollback()
        logger.exception('Error sending %s notification to user %s', payload.get('type'), user_id)
        return None
