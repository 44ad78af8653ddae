import pytest
from app import create_app
from config import TestConfig
from models import db, User
from werkzeug.security import generate_password_hash


@pytest.fixture
def app():
    flask_app = create_app(TestConfig)
    with flask_app.app_context():
        db.create_all()
        yield flask_app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_client(client):
    user = User(username='testuser', password_hash=generate_password_hash('password', method='scrypt'))
    db.session.add(user)
    db.session.commit()

    client.post('/api/v1/auth/login', json={'username': 'testuser', 'password': 'password'})
    return client, user


@pytest.fixture
def other_user(app):
    user = User(username='someone_else', password_hash=generate_password_hash('password', method='scrypt'))
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def runner(app):
    return app.test_cli_runner()


@pytest.fixture
def habit_json():
    return _habit_json


def _habit_json(**overrides):
    body = {
        'name': 'Drink Water',
        'created_time': '2024-01-01T00:00:00.000Z',
        'target_time': '2024-01-01T08:00:00.000Z',
        'icon_id': 3,
        'repeats': [0, 1, 2, 3, 4, 5, 6],
    }
    body.update(overrides)
    return body


@pytest.fixture
def make_habit():
    from models import Habit

    def _make(user, **overrides):
        fields = {
            'name': 'Run',
            'created_time': '2024-01-01T00:00:00.000Z',
            'target_time': '2024-01-01T08:00:00.000Z',
            'icon_id': 1,
            'repeats': [0, 1, 2, 3, 4, 5, 6],
            'user_id': user.id,
        }
        fields.update(overrides)
        habit = Habit(**fields)
        db.session.add(habit)
        db.session.commit()
        return habit
    return _make
