import os
from dotenv import load_dotenv

load_dotenv()


def _database_uri():
    uri = os.environ.get('SQLALCHEMY_DATABASE_URI') or os.environ.get('DATABASE_URL') or 'sqlite:///db.sqlite3'
    if uri.startswith('postgres://'):
        uri = uri.replace('postgres://', 'postgresql://', 1)
    return uri


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev_key_change_in_prod')
    SQLALCHEMY_DATABASE_URI = _database_uri()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Window around the target time-of-day in which a completion counts as on time
    ON_TIME_TOLERANCE_MINUTES = int(os.environ.get('ON_TIME_TOLERANCE_MINUTES', 30))
    STREAK_MILESTONES = (7, 14, 30, 50, 100, 365)

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FORMAT = os.environ.get('LOG_FORMAT', 'text')  # text, json


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    LOG_LEVEL = 'WARNING'
