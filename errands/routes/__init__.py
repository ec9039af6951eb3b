"""Routes package for the errands backend."""

import logging
from flask import jsonify
from errands import db
from errands.exceptions import TrackingError

logger = logging.getLogger(__name__)


def register_routes(app):
    """Register all route blueprints and error handlers with the application."""
    from .tasks import tasks_bp
    from .proximity_alerts import proximity_alerts_bp
    from .admin import admin_bp

    app.register_blueprint(tasks_bp, url_prefix='/api/tasks')
    app.register_blueprint(proximity_alerts_bp, url_prefix='/api/proximity-alerts')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')

    @app.errorhandler(TrackingError)
    def handle_tracking_error(e):
        db.session.rollback()
        logger.info(f'{type(e).__name__}: {e.message}')
        return jsonify(e.to_dict()), e.status_code

    @app.errorhandler(429)
    def handle_rate_limited(e):
        return jsonify({'error': 'Too many attempts. Please try again later.'}), 429
