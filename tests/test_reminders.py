import pytest
from datetime import date, datetime, timedelta, timezone
from models import db, HabitCompletion, Notification
from services.reminder_jobs import run_job, weekly_stats

# Monday
NOW = datetime(2024, 1, 15, 8, 0, tzinfo=timezone.utc)
TODAY = NOW.date()


def add_completion(habit, day, hour=8):
    c = HabitCompletion.at(datetime(day.year, day.month, day.day, hour, tzinfo=timezone.utc))
    c.habit_id = habit.id
    db.session.add(c)
    db.session.commit()


def sent(type):
    return Notification.query.filter_by(type=type).all()


def test_morning_reminder_lists_due_habits(auth_client, make_habit):
    _, user = auth_client
    due = make_habit(user, name='Monday', repeats=[0])
    make_habit(user, name='Tuesday', repeats=[1])

    assert run_job('morning', now=NOW) == 1
    notif = sent('daily_reminder')[0]
    assert notif.data['habitIds'] == str(due.id)
    assert '1 habit(s)' in notif.message


def test_morning_reminder_skips_users_without_due_habits(auth_client, make_habit):
    _, user = auth_client
    make_habit(user, repeats=[3])
    assert run_job('morning', now=NOW) == 0


def test_evening_reminder_only_incomplete(auth_client, make_habit):
    _, user = auth_client
    done = make_habit(user, name='Done', repeats=[0])
    make_habit(user, name='Pending', repeats=['0'])
    add_completion(done, TODAY)

    assert run_job('evening', now=NOW) == 1
    notif = sent('incomplete_habits')[0]
    assert 'Pending' in notif.message
    assert 'Done' not in notif.message


def test_hourly_reminder_matches_target_hour(auth_client, make_habit):
    _, user = auth_client
    make_habit(user, name='Eight', target_time='2023-05-01T08:30:00.000Z', repeats=[0])
    make_habit(user, name='Nine', target_time='2023-05-01T09:00:00.000Z', repeats=[0])

    assert run_job('hourly', now=NOW) == 1
    assert sent('habit_reminder')[0].data['habitName'] == 'Eight'


def test_streak_at_risk(auth_client, make_habit):
    _, user = auth_client
    at_risk = make_habit(user, name='Streaky', repeats=[0])
    make_habit(user, name='No streak', repeats=[0])
    add_completion(at_risk, TODAY - timedelta(days=1))
    add_completion(at_risk, TODAY - timedelta(days=2))

    assert run_job('streak-risk', now=NOW) == 1
    notif = sent('streak_at_risk')[0]
    assert notif.habit_id == at_risk.id
    assert notif.data['currentStreak'] == '2'


def test_weekly_stats(auth_client, make_habit):
    _, user = auth_client
    # Mon/Wed/Fri habit: Jan 9-15 window holds Wed 10, Fri 12, Mon 15
    habit = make_habit(user, repeats=[0, 2, 4])
    add_completion(habit, date(2024, 1, 10))
    add_completion(habit, date(2024, 1, 15))
    add_completion(habit, date(2024, 1, 13))  # Saturday, not scheduled

    stats = weekly_stats(user, TODAY)
    assert stats == {'scheduled': 3, 'completed': 2, 'completion_rate': 67}

    assert run_job('weekly', now=NOW) == 1
    assert '2/3' in sent('weekly_progress')[0].message


def test_jobs_skip_opted_out_users(auth_client, make_habit):
    _, user = auth_client
    make_habit(user, repeats=[0])
    user.notifications_enabled = False
    db.session.commit()

    assert run_job('morning', now=NOW) == 0
    assert run_job('motivation', now=NOW) == 0


def test_motivation(auth_client):
    assert run_job('motivation', now=NOW) == 1
    assert len(sent('motivation')) == 1


def test_unknown_job(app):
    with pytest.raises(KeyError):
        run_job('nightly')


def test_cli_runs_job(runner, auth_client, make_habit):
    _, user = auth_client
    make_habit(user, repeats=list(range(7)))
    result = runner.invoke(args=['reminders', 'run', 'morning'])
    assert result.exit_code == 0
    assert 'morning: sent 1 notification(s)' in result.output


def test_cli_lists_jobs(runner):
    result = runner.invoke(args=['reminders', 'list'])
    assert 'streak-risk' in result.output
