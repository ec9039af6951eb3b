"""Proximity alert listing for a task."""

from flask import jsonify
from errands.routes.tasks import tasks_bp
from errands.services.proximity import get_proximity_alerts
from errands.utils import token_required


@tasks_bp.route('/<int:task_id>/proximity-alerts', methods=['GET'])
@token_required
def list_proximity_alerts(current_user_id, task_id):
    alerts = get_proximity_alerts(task_id, user_id=current_user_id)
    return jsonify({
        'alerts': [a.to_dict() for a in alerts],
        'total': len(alerts)
    }), 200
