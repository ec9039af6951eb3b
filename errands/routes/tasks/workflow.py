"""Task workflow/lifecycle routes owned by the tracking core (start, cancel)."""

from flask import jsonify
from errands.routes.tasks import tasks_bp
from errands.services import task_state
from errands.utils import token_required


@tasks_bp.route('/<int:task_id>/start', methods=['POST'])
@token_required
def start_task(current_user_id, task_id):
    """Runner starts the errand; location tracking begins."""
    task = task_state.start_task(task_id, current_user_id)
    return jsonify({
        'message': 'Task started. Location tracking is on.',
        'task': task.to_dict()
    }), 200


@tasks_bp.route('/<int:task_id>/cancel', methods=['POST'])
@token_required
def cancel_task(current_user_id, task_id):
    """Cancel a task (only creator can cancel, only if not yet completed)."""
    task = task_state.cancel_task(task_id, current_user_id)
    return jsonify({
        'message': 'Task has been cancelled.',
        'task': task.to_dict()
    }), 200
