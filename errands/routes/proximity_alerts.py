"""Proximity alert routes (acknowledgement)."""

from flask import Blueprint, jsonify
from errands.services.proximity import acknowledge_proximity_alert
from errands.utils import token_required

proximity_alerts_bp = Blueprint('proximity_alerts', __name__)


@proximity_alerts_bp.route('/<int:alert_id>/acknowledge', methods=['POST'])
@token_required
def acknowledge_alert(current_user_id, alert_id):
    """Runner or creator dismisses a proximity alert."""
    alert = acknowledge_proximity_alert(alert_id, current_user_id)
    return jsonify({'alert': alert.to_dict()}), 200
