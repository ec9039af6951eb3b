"""Shared authentication utilities.

Tokens are issued by the identity provider; this service only verifies
them. Every token is an HS256 JWT carrying a `user_id` claim.
"""

from functools import wraps
from flask import request, jsonify, current_app
import jwt


def _get_secret_key():
    """Get JWT secret from Flask app config (single source of truth)."""
    return current_app.config['JWT_SECRET_KEY']


def _extract_token(auth_header):
    # Support both "Bearer <token>" and raw token formats
    return auth_header.split(' ')[1] if ' ' in auth_header else auth_header


def get_user_from_token(token):
    """Return the user_id in a token, or None if it is missing or invalid."""
    if not token:
        return None
    try:
        payload = jwt.decode(_extract_token(token), _get_secret_key(), algorithms=['HS256'])
    except jwt.InvalidTokenError:
        return None
    return payload.get('user_id')


def get_user_from_request():
    """User id from the current request's Authorization header, if valid."""
    return get_user_from_token(request.headers.get('Authorization'))


def token_required(f):
    """
    Decorator to require valid JWT token.

    Extracts user_id from JWT token and passes it as the first argument
    to the decorated function.

    Usage:
        @tasks_bp.route('/<int:task_id>/location', methods=['POST'])
        @token_required
        def post_location(current_user_id, task_id):
            ...
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        auth_header = request.headers.get('Authorization')

        if not auth_header:
            return jsonify({'error': 'Token is missing'}), 401

        try:
            payload = jwt.decode(_extract_token(auth_header), _get_secret_key(), algorithms=['HS256'])
            current_user_id = payload['user_id']
        except jwt.ExpiredSignatureError:
            return jsonify({'error': 'Token has expired'}), 401
        except (jwt.InvalidTokenError, KeyError):
            return jsonify({'error': 'Token is invalid'}), 401

        return f(current_user_id, *args, **kwargs)
    return decorated


def admin_required(f):
    """Decorator that combines token_required + admin check."""
    @wraps(f)
    @token_required
    def decorated(current_user_id, *args, **kwargs):
        from errands import db
        from errands.models import User

        user = db.session.get(User, current_user_id)
        if not user or not user.is_admin:
            return jsonify({'error': 'Admin access required'}), 403
        return f(current_user_id, *args, **kwargs)
    return decorated
