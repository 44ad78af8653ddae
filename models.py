from flask_sqlalchemy import SQLAlchemy
from flask_login import UserMixin
from datetime import datetime, timezone
from utils import format_timestamp, utc_date_of

db = SQLAlchemy()


def _utcnow():
    return datetime.now(timezone.utc)


class User(UserMixin, db.Model):
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(150), unique=True, nullable=False)
    password_hash = db.Column(db.String(200), nullable=False)
    date_joined = db.Column(db.DateTime, default=_utcnow)

    # Notification Settings
    notifications_enabled = db.Column(db.Boolean, default=True, nullable=False)

    habits = db.relationship('Habit', backref='user', lazy=True, cascade="all, delete-orphan",
                             order_by="Habit.created_at.desc()")
    notifications = db.relationship('Notification', backref='user', lazy=True, cascade="all, delete-orphan")

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'date_joined': self.date_joined.isoformat() if self.date_joined else None,
            'notifications_enabled': self.notifications_enabled,
        }


class Habit(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    created_time = db.Column(db.String(40), nullable=False)  # client-supplied UTC timestamp
    target_time = db.Column(db.String(40), nullable=False)   # only hour:minute is meaningful
    icon_id = db.Column(db.Integer, nullable=False)
    # Weekday indices, 0=Mon ... 6=Sun. Older rows may hold the string form ("2").
    repeats = db.Column(db.JSON, nullable=False, default=list)
    streak = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=_utcnow)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)

    completions = db.relationship('HabitCompletion', backref='habit', lazy=True,
                                  cascade="all, delete-orphan", order_by="HabitCompletion.id")

    @property
    def last_completion(self):
        return self.completions[-1] if self.completions else None


class HabitCompletion(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    habit_id = db.Column(db.Integer, db.ForeignKey('habit.id'), nullable=False, index=True)
    timestamp = db.Column(db.String(40), nullable=False)
    date = db.Column(db.Date, nullable=False)  # UTC calendar date of timestamp
    on_time = db.Column(db.Boolean, default=False, nullable=False)

    __table_args__ = (db.UniqueConstraint('habit_id', 'date', name='_habit_date_uc'),)

    @classmethod
    def at(cls, moment, on_time=False):
        return cls(timestamp=format_timestamp(moment), date=utc_date_of(moment), on_time=on_time)

    def to_dict(self):
        return {
            'id': self.id,
            'timestamp': self.timestamp,
            'on_time': bool(self.on_time),
        }


class Notification(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(40), default='general')
    title = db.Column(db.String(200), nullable=False)
    message = db.Column(db.Text, nullable=False)
    data = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=_utcnow)
    is_read = db.Column(db.Boolean, default=False)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    habit_id = db.Column(db.Integer, db.ForeignKey('habit.id', ondelete='SET NULL'), nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'title': self.title,
            'message': self.message,
            'habit_id': self.habit_id,
            'data': self.data or {},
            'is_read': self.is_read,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
