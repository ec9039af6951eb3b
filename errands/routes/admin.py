"""Admin routes for platform settings."""

from flask import Blueprint, jsonify, request
from errands.services import settings as settings_service
from errands.utils import admin_required

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/settings', methods=['GET'])
@admin_required
def get_settings(current_user_id):
    """All admin settings, with defaults for the ones never set."""
    return jsonify({'settings': settings_service.get_settings()}), 200


@admin_bp.route('/settings', methods=['PUT'])
@admin_required
def update_settings(current_user_id):
    """Update one or more settings.

    Body: {"settings": {"proximity_alert_distance": 150}}
    """
    data = request.get_json(silent=True) or {}
    updates = data.get('settings')
    if not isinstance(updates, dict) or not updates:
        return jsonify({'error': 'settings must be a non-empty object'}), 400

    updated = settings_service.update_settings(updates, updated_by_id=current_user_id)
    return jsonify({'settings': [setting.to_dict() for setting in updated]}), 200
