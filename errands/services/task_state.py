"""Task lifecycle transitions.

posted -> accepted -> in_progress -> completed, with cancellation allowed
from any non-terminal state. Completion is reached only through a
redeemed completion code (see services.completion).
"""

import logging
from datetime import datetime
from sqlalchemy import update
from errands import db
from errands.exceptions import InvalidTransition, NotTaskParticipant, TaskNotFound
from errands.models import Task, TaskStatus
from errands.services import events

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    TaskStatus.POSTED: {TaskStatus.ACCEPTED, TaskStatus.CANCELLED},
    TaskStatus.ACCEPTED: {TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED, TaskStatus.CANCELLED},
    TaskStatus.IN_PROGRESS: {TaskStatus.COMPLETED, TaskStatus.CANCELLED},
    TaskStatus.COMPLETED: set(),
    TaskStatus.CANCELLED: set(),
}

# Timestamp column stamped when a task enters a status
_STATUS_TIMESTAMPS = {
    TaskStatus.ACCEPTED: 'accepted_at',
    TaskStatus.IN_PROGRESS: 'started_at',
    TaskStatus.COMPLETED: 'completed_at',
    TaskStatus.CANCELLED: 'cancelled_at',
}


def can_transition(current_status, target_status):
    return target_status in ALLOWED_TRANSITIONS.get(current_status, set())


def get_task(task_id):
    task = db.session.get(Task, task_id)
    if task is None:
        raise TaskNotFound()
    return task


def _apply(task, target_status, now=None):
    if not can_transition(task.status, target_status):
        raise InvalidTransition(task.status, target_status)
    now = now or datetime.utcnow()
    previous = task.status
    task.status = target_status
    setattr(task, _STATUS_TIMESTAMPS[target_status], now)
    task.updated_at = now
    return previous


def accept_task(task_id, runner_id):
    """Assign a runner (posted -> accepted). Driven by the bidding flow."""
    task = get_task(task_id)
    if runner_id == task.creator_id:
        raise NotTaskParticipant('Task creators cannot run their own tasks')
    previous = _apply(task, TaskStatus.ACCEPTED)
    task.runner_id = runner_id
    db.session.commit()

    logger.info(f'Task {task.id} accepted by runner {runner_id}')
    events.task_status_changed(task, previous)
    return task


def start_task(task_id, user_id):
    """Runner starts the errand (accepted -> in_progress); tracking begins."""
    task = get_task(task_id)
    if task.runner_id != user_id:
        raise NotTaskParticipant('Only the assigned runner can start this task')
    previous = _apply(task, TaskStatus.IN_PROGRESS)
    db.session.commit()

    logger.info(f'Task {task.id} started by runner {user_id}')
    events.task_status_changed(task, previous)
    return task


def cancel_task(task_id, user_id):
    """Creator cancels a task that has not reached a terminal state."""
    task = get_task(task_id)
    if task.creator_id != user_id:
        raise NotTaskParticipant('Only the task creator can cancel')
    previous = _apply(task, TaskStatus.CANCELLED)
    db.session.commit()

    logger.info(f'Task {task.id} cancelled by creator {user_id} (was {previous})')
    events.task_status_changed(task, previous)
    return task


def mark_completed(task_id, now):
    """Flip a trackable task to completed inside the caller's transaction.

    Conditional UPDATE: returns False if the task already left
    accepted/in_progress. The caller owns commit/rollback.
    """
    result = db.session.execute(
        update(Task)
        .where(Task.id == task_id, Task.status.in_(TaskStatus.TRACKABLE))
        .values(status=TaskStatus.COMPLETED, completed_at=now, updated_at=now)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1
