from flask import request, jsonify
from flask_login import login_required, current_user
from . import notifications_bp
from errors import NotFound, Unauthorized
from models import db, Notification
from schemas import PreferencesPayload
from services import notification_service


@notifications_bp.route('', methods=['GET'])
@login_required
def get_notifications():
    query = Notification.query.filter_by(user_id=current_user.id)
    if request.args.get('all') != '1':
        query = query.filter_by(is_read=False)
    notifications = query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()
    return jsonify({
        'success': True,
        'count': len(notifications),
        'data': [n.to_dict() for n in notifications],
    })


@notifications_bp.route('/<int:notif_id>/read', methods=['POST'])
@login_required
def mark_notification_read(notif_id):
    notif = db.session.get(Notification, notif_id)
    if notif is None:
        raise NotFound(f'Notification not found with id of {notif_id}')
    if notif.user_id != current_user.id:
        raise Unauthorized()
    notif.is_read = True
    db.session.commit()
    return jsonify({'success': True, 'data': notif.to_dict()})


@notifications_bp.route('/read_all', methods=['POST'])
@login_required
def mark_all_read():
    updated = Notification.query.filter_by(user_id=current_user.id, is_read=False).update({'is_read': True})
    db.session.commit()
    return jsonify({'success': True, 'updated': updated})


@notifications_bp.route('/preferences', methods=['GET'])
@login_required
def get_preferences():
    return jsonify({'success': True, 'data': {'notifications_enabled': current_user.notifications_enabled}})


@notifications_bp.route('/preferences', methods=['PUT'])
@login_required
def update_preferences():
    payload = PreferencesPayload.from_json(request.get_json(silent=True))
    current_user.notifications_enabled = payload.notifications_enabled
    db.session.commit()
    return jsonify({'success': True, 'data': {'notifications_enabled': current_user.notifications_enabled}})


@notifications_bp.route('/test', methods=['POST'])
@login_required
def send_test_notification():
    notif = notification_service.dispatch(current_user.id, notification_service.sample_notification())
    if notif is None:
        return jsonify({'success': False, 'error': 'Notification was not delivered'}), 409
    return jsonify({'success': True, 'data': notif.to_dict()}), 201
