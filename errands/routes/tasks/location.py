"""Runner location routes (report position, latest position, trail)."""

from flask import jsonify
from errands.routes.tasks import tasks_bp
from errands.routes.tasks.helpers import get_position_payload, get_history_limit
from errands.services import location as location_service
from errands.utils import token_required


@tasks_bp.route('/<int:task_id>/location', methods=['POST'])
@token_required
def report_location(current_user_id, task_id):
    """Assigned runner reports their current position."""
    sample, alert = location_service.record_location(task_id, current_user_id, get_position_payload())

    return jsonify({
        'location': sample.to_dict(),
        'proximity_alert': alert.to_dict() if alert else None
    }), 201


@tasks_bp.route('/<int:task_id>/location', methods=['GET'])
@token_required
def get_latest_location(current_user_id, task_id):
    """Latest runner position for the creator's map."""
    sample = location_service.get_latest_location(task_id, user_id=current_user_id)
    return jsonify({'location': sample.to_dict() if sample else None}), 200


@tasks_bp.route('/<int:task_id>/location/history', methods=['GET'])
@token_required
def get_location_history(current_user_id, task_id):
    """Runner trail, newest first.

    Query params:
        - limit: Max samples (default 100, max 500)
    """
    samples = location_service.get_location_history(
        task_id,
        limit=get_history_limit(),
        user_id=current_user_id
    )
    return jsonify({
        'locations': [s.to_dict() for s in samples],
        'total': len(samples)
    }), 200
