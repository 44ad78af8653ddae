from flask import request, jsonify
from flask_login import login_required, current_user
from . import habits_bp
from models import Habit
from schemas import HabitPayload, CompletionPayload
from services.habit_service import (
    analysis_metrics, create_habit, find_habit_for_user, find_habits_due_on, mark_habit_done, serialize_habit,
)
from services.recurrence import parse_date, weekday_index


@habits_bp.route('', methods=['GET'])
@login_required
def list_habits():
    # Habits scheduled on ?date=YYYY-MM-DD (UTC), today by default
    day = parse_date(request.args.get('date'))
    habits = find_habits_due_on(current_user.id, weekday_index(day))
    data = [serialize_habit(h, on_date=day) for h in habits]
    return jsonify({
        'success': True,
        'date': day.isoformat(),
        'count': len(data),
        'data': data,
    })


@habits_bp.route('', methods=['POST'])
@login_required
def add_habit():
    payload = HabitPayload.from_json(request.get_json(silent=True))
    habit = create_habit(current_user, payload)
    return jsonify({'success': True, 'data': serialize_habit(habit)}), 201


@habits_bp.route('/analysis', methods=['GET'])
@login_required
def habit_analysis():
    habits = Habit.query.filter_by(user_id=current_user.id).all()
    return jsonify({'success': True, 'data': {'metrics': analysis_metrics(habits)}})


@habits_bp.route('/<int:habit_id>', methods=['GET'])
@login_required
def get_habit(habit_id):
    habit = find_habit_for_user(habit_id, current_user.id)
    return jsonify({'success': True, 'data': serialize_habit(habit)})


@habits_bp.route('/<int:habit_id>/mark', methods=['POST'])
@login_required
def mark_habit(habit_id):
    habit = find_habit_for_user(habit_id, current_user.id)
    payload = CompletionPayload.from_json(request.get_json(silent=True))
    outcome = mark_habit_done(habit, payload.timestamp)

    return jsonify({
        'success': True,
        'data': {
            'habit_id': habit.id,
            'completion': outcome.completion.to_dict(),
            'streak': outcome.streak,
            'duplicate': outcome.duplicate,
        },
    }), 200 if outcome.duplicate else 201
