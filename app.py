import click
from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from config import Config
from errors import ApiError
from extensions import migrate, login_manager
from logging_config import setup_logging
from models import db, User


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logger = setup_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    from auth import auth
    from routes import habits_bp, notifications_bp
    app.register_blueprint(auth)
    app.register_blueprint(habits_bp)
    app.register_blueprint(notifications_bp)

    register_error_handlers(app)
    register_commands(app)

    logger.info('App created with database %s', _masked_url(app.config['SQLALCHEMY_DATABASE_URI']))
    return app


def _masked_url(url):
    if not url:
        return "None"
    if '@' in url:
        return "...@" + url.split('@')[-1]
    return url


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({'success': False, 'error': 'Not authorized to access this route'}), 401


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'success': False, 'error': error.description}), error.code

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(error):
        db.session.rollback()
        app.logger.exception('Database error')
        return jsonify({'success': False, 'error': 'Server Error'}), 500


def register_commands(app):
    from services.reminder_jobs import JOBS, run_job

    @app.cli.command('init-db')
    def init_db():
        """Create all tables."""
        db.create_all()
        click.echo('Database tables created.')

    @app.cli.group()
    def reminders():
        """Reminder notification jobs."""

    @reminders.command('list')
    def list_jobs():
        for name in JOBS:
            click.echo(name)

    @reminders.command('run')
    @click.argument('job', type=click.Choice(sorted(JOBS)))
    def run(job):
        sent = run_job(job)
        click.echo(f'{job}: sent {sent} notification(s)')


if __name__ == '__main__':
    create_app().run(debug=True)
