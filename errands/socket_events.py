"""WebSocket events for live task tracking."""

from flask_socketio import emit, join_room, leave_room
from flask import request
from errands import db
from errands.models import Task
from errands.services.events import task_room, user_room
from errands.utils import get_user_from_token
import logging

logger = logging.getLogger(__name__)


def register_socket_events(socketio):
    """Register all Socket.IO event handlers."""

    @socketio.on('connect')
    def handle_connect(auth=None):
        """Authenticate the socket and join the user's private room."""
        token = None
        if auth and isinstance(auth, dict):
            token = auth.get('token')
        elif request.args.get('token'):
            token = request.args.get('token')

        user_id = get_user_from_token(token)
        if not user_id:
            logger.warning('Socket connection with missing or invalid token')
            return False

        join_room(user_room(user_id))
        logger.info(f'User {user_id} connected: {request.sid}')
        emit('connected', {'user_id': user_id})
        return True

    @socketio.on('join_task')
    def handle_join_task(data):
        """Subscribe to a task's tracking events (creator or runner only)."""
        data = data or {}
        task_id = data.get('task_id')
        user_id = get_user_from_token(data.get('token'))

        if not user_id or not task_id:
            emit('error', {'message': 'Missing token or task_id'})
            return

        task = db.session.get(Task, task_id)
        if not task:
            emit('error', {'message': 'Task not found'})
            return

        if not task.is_participant(user_id):
            emit('error', {'message': 'Access denied'})
            return

        join_room(task_room(task_id))
        logger.info(f'User {user_id} joined task {task_id}')
        emit('joined_task', {'task_id': task_id})

    @socketio.on('leave_task')
    def handle_leave_task(data):
        task_id = (data or {}).get('task_id')
        if not task_id:
            return

        leave_room(task_room(task_id))
        emit('left_task', {'task_id': task_id})
