"""Shared helper functions for task routes."""

from flask import request
from errands.services.location import DEFAULT_HISTORY_LIMIT

POSITION_FIELDS = ('latitude', 'longitude', 'accuracy', 'heading', 'speed', 'recorded_at')


def get_position_payload():
    """Pick the position fields out of the JSON body.

    Fields may also be nested under 'coords', as in a browser GeolocationPosition.
    """
    data = request.get_json(silent=True) or {}
    coords = data.get('coords') if isinstance(data.get('coords'), dict) else data
    position = {field: coords.get(field) for field in POSITION_FIELDS}
    if position['recorded_at'] is None:
        position['recorded_at'] = data.get('recorded_at')
    return position


def get_history_limit():
    return request.args.get('limit', DEFAULT_HISTORY_LIMIT, type=int)
