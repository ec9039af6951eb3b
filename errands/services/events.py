"""Real-time event fan-out for tracking updates.

Events go to Socket.IO rooms; the frontend turns them into map updates
and toasts. Emission failures are logged and never fail the request
that produced the event.
"""

import logging
from errands import socketio
from errands.models import TaskStatus

logger = logging.getLogger(__name__)

LOCATION_UPDATED = 'location_updated'
PROXIMITY_ALERT = 'proximity_alert'
COMPLETION_CODE_GENERATED = 'completion_code_generated'
TASK_COMPLETED = 'task_completed'
TASK_STATUS_CHANGED = 'task_status_changed'


def task_room(task_id):
    return f'task_{task_id}'


def user_room(user_id):
    return f'user_{user_id}'


def emit_safe(event, payload, room):
    """Emit an event to a room, swallowing transport errors."""
    try:
        socketio.emit(event, payload, room=room)
        logger.debug(f'Emitted {event} to {room}')
    except Exception as e:
        logger.error(f'Emit {event} to {room} failed (non-critical): {e}')


def location_updated(sample):
    emit_safe(LOCATION_UPDATED, {
        'task_id': sample.task_id,
        'location': sample.to_dict()
    }, task_room(sample.task_id))


def proximity_alert_created(alert):
    emit_safe(PROXIMITY_ALERT, {
        'task_id': alert.task_id,
        'alert': alert.to_dict()
    }, task_room(alert.task_id))


def completion_code_generated(task, completion_code):
    # The code itself only ever goes to the creator
    emit_safe(COMPLETION_CODE_GENERATED, {
        'task_id': task.id,
        'completion_code': completion_code.to_dict()
    }, user_room(task.creator_id))


def task_status_changed(task, previous_status):
    payload = {
        'task_id': task.id,
        'status': task.status,
        'previous_status': previous_status
    }
    emit_safe(TASK_STATUS_CHANGED, payload, task_room(task.id))
    if task.status == TaskStatus.COMPLETED:
        emit_safe(TASK_COMPLETED, payload, task_room(task.id))
