from flask import Blueprint

habits_bp = Blueprint('habits', __name__, url_prefix='/api/v1/habits')
notifications_bp = Blueprint('notifications', __name__, url_prefix='/api/v1/notifications')

from . import habits, notifications
