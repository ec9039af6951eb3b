"""Completion code routes (generate, view, redeem)."""

from flask import request, jsonify, current_app
from flask_limiter.util import get_remote_address
from errands import limiter
from errands.exceptions import InvalidOrExpiredCode
from errands.routes.tasks import tasks_bp
from errands.services import completion as completion_service
from errands.utils import token_required, get_user_from_request


def _redeem_rate_key():
    """Rate-limit bucket per (task, caller); anonymous callers fall back to IP."""
    task_id = (request.view_args or {}).get('task_id')
    caller = get_user_from_request() or get_remote_address()
    return f'redeem:{task_id}:{caller}'


def _redeem_rate_limit():
    return current_app.config['REDEEM_RATE_LIMIT']


@tasks_bp.route('/<int:task_id>/completion-code', methods=['POST'])
@token_required
def generate_completion_code(current_user_id, task_id):
    """Creator gets the active code for a task, minting one if needed."""
    completion_code = completion_service.generate_completion_code(task_id, user_id=current_user_id)
    return jsonify({
        'code': completion_code.code,
        'expires_at': completion_code.expires_at.isoformat()
    }), 200


@tasks_bp.route('/<int:task_id>/completion-code', methods=['GET'])
@token_required
def get_completion_code(current_user_id, task_id):
    completion_code = completion_service.get_active_code(task_id, user_id=current_user_id)
    if not completion_code:
        return jsonify({'completion_code': None}), 200
    return jsonify({'completion_code': completion_code.to_dict()}), 200


@tasks_bp.route('/<int:task_id>/completion-code/redeem', methods=['POST'])
@limiter.limit(_redeem_rate_limit, key_func=_redeem_rate_key)
@token_required
def redeem_completion_code(current_user_id, task_id):
    """Runner submits the code the creator gave them; completes the task."""
    data = request.get_json(silent=True) or {}
    code = data.get('code')
    if not code:
        return jsonify({'error': 'Please enter the completion code'}), 400

    if not completion_service.redeem_completion_code(code, task_id, user_id=current_user_id):
        return jsonify({'error': InvalidOrExpiredCode.default_message}), 400

    return jsonify({
        'message': 'Task completed successfully!',
        'task_id': task_id,
        'status': 'completed'
    }), 200
