"""
Gevent-patched application entrypoint.

gevent.monkey.patch_all() must run BEFORE any socket/SSL imports so the
Redis message queue and Socket.IO server share the same event loop.

Run with:
    gunicorn -k gevent -w 1 patched_app:wsgi_app
"""

# Monkey-patch FIRST, before ANY other imports
from gevent import monkey
monkey.patch_all()

# Now safe to import the app
from errands import create_app  # noqa: E402

# Create the application instance
application = create_app()

# For compatibility, also expose as 'app'
app = application

# socketio.init_app() already installed the Socket.IO middleware on the app
wsgi_app = application
