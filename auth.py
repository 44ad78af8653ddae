from flask import Blueprint, request, jsonify
from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import login_user, logout_user, login_required, current_user
from errors import ValidationError
from logging_config import get_logger
from models import db, User
from schemas import CredentialsPayload

auth = Blueprint('auth', __name__, url_prefix='/api/v1/auth')
logger = get_logger(__name__)


@auth.route('/register', methods=['POST'])
def register():
    payload = CredentialsPayload.from_json(request.get_json(silent=True))
    if User.query.filter_by(username=payload.username).first():
        raise ValidationError('Username already exists', field='username')

    user = User(username=payload.username, password_hash=generate_password_hash(payload.password, method='scrypt'))
    db.session.add(user)
    db.session.commit()
    login_user(user)
    logger.info('Registered user %s', user.id)
    return jsonify({'success': True, 'data': user.to_dict()}), 201


@auth.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    username = data.get('username')
    password = data.get('password')
    user = User.query.filter_by(username=username).first() if isinstance(username, str) else None
    if user and isinstance(password, str) and check_password_hash(user.password_hash, password):
        login_user(user)
        return jsonify({'success': True, 'data': user.to_dict()})
    return jsonify({'success': False, 'error': 'Invalid username or password'}), 401


@auth.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'success': True})


@auth.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify({'success': True, 'data': current_user.to_dict()})
