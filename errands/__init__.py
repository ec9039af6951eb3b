from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_socketio import SocketIO
import logging
import os
from dotenv import load_dotenv

load_dotenv()

db = SQLAlchemy()
migrate = Migrate()
limiter = Limiter(key_func=get_remote_address)
socketio = SocketIO()

logger = logging.getLogger(__name__)


def _env_flag(name, default):
    """Read a boolean flag from the environment."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in ('true', '1', 'yes')


def create_app(config_name='development'):
    app = Flask(__name__)

    # Config
    database_url = os.getenv('DATABASE_URL', 'sqlite:///errands.db')
    # Render/Heroku still hand out postgres:// URLs
    if database_url.startswith('postgres://'):
        database_url = database_url.replace('postgres://', 'postgresql://', 1)
    redis_url = os.getenv('REDIS_URL')

    app.config['SQLALCHEMY_DATABASE_URI'] = database_url
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    if database_url.startswith('sqlite'):
        # Concurrent redemptions wait on SQLite's write lock instead of failing
        app.config['SQLALCHEMY_ENGINE_OPTIONS'] = {
            'connect_args': {'check_same_thread': False, 'timeout': 30}
        }
    app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    app.config['TESTING'] = config_name == 'testing'

    # Rate limiting (Redis shared across workers, memory otherwise)
    app.config['RATELIMIT_STORAGE_URI'] = redis_url if redis_url and config_name != 'testing' else 'memory://'
    app.config['RATELIMIT_HEADERS_ENABLED'] = True
    app.config['REDEEM_RATE_LIMIT'] = os.getenv('REDEEM_RATE_LIMIT', '5 per minute')

    # Tracking behaviour
    app.config['AUTO_GENERATE_COMPLETION_CODE'] = _env_flag('AUTO_GENERATE_COMPLETION_CODE', True)

    logging.basicConfig(
        level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    limiter.init_app(app)
    CORS(app)
    socketio.init_app(
        app,
        cors_allowed_origins='*',
        message_queue=redis_url if config_name != 'testing' else None,
        async_mode=os.getenv('SOCKETIO_ASYNC_MODE') or ('threading' if config_name == 'testing' else None)
    )

    # Create tables with error handling
    with app.app_context():
        from errands import models  # noqa: F401
        try:
            db.create_all()
        except Exception as e:
            logger.warning(f"Could not create database tables: {e}")

    # Register routes and socket handlers
    from errands.routes import register_routes
    register_routes(app)

    from errands.socket_events import register_socket_events
    register_socket_events(socketio)

    # Health check
    @app.route('/health', methods=['GET'])
    def health():
        return {'status': 'ok'}, 200

    return app
