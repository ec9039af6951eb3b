"""Completion code manager.

Per task a code goes NoCode -> Active -> Used, or Active -> Expired, after
which a fresh code may be generated. Redeeming a code and completing the
task happen in one transaction; the code row is claimed with a conditional
UPDATE so that concurrent redemptions of the same code have exactly one
winner.
"""

import logging
from datetime import datetime
from errands import db
from errands.exceptions import (
    ConcurrentRedemptionConflict,
    InvalidOrExpiredCode,
    NotTaskParticipant,
    TaskNotTrackable,
)
from errands.models import CompletionCode, Task
from errands.models.completion_code import CODE_LENGTH
from errands.services import events
from errands.services.task_state import get_task, mark_completed

logger = logging.getLogger(__name__)


def generate_completion_code(task_id, user_id=None):
    """
    Return the task's active completion code, minting one if none exists.

    Idempotent: while a code is unused and unexpired, every call returns it,
    so the creator is never shown two different valid codes.

    Args:
        task_id: Task to generate the code for
        user_id: Caller; must be the creator when given. The automatic
            path on a proximity alert passes the creator explicitly.

    Raises:
        TaskNotFound, NotTaskParticipant, TaskNotTrackable
    """
    task = get_task(task_id)
    if user_id is not None and user_id != task.creator_id:
        raise NotTaskParticipant('Only the task creator can generate a completion code')
    # Serializes concurrent generators on databases with row locks; status is re-read under the lock
    task = db.session.query(Task).filter(Task.id == task.id).with_for_update().populate_existing().one()
    if not task.is_trackable:
        message = f'Cannot generate a completion code for a {task.status} task'
        db.session.rollback()
        raise TaskNotTrackable(message)

    now = datetime.utcnow()
    existing = CompletionCode.active_for_task(task.id, now)
    if existing is not None:
        db.session.rollback()
        return existing

    try:
        completion_code = CompletionCode.mint(task.id, generated_by_id=task.creator_id, now=now)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info(f'Completion code generated for task {task.id}, expires {completion_code.expires_at.isoformat()}')
    events.completion_code_generated(task, completion_code)
    return completion_code


def get_active_code(task_id, user_id=None):
    """The task's active code (or None). Only the creator may see it."""
    task = get_task(task_id)
    if user_id is not None and user_id != task.creator_id:
        raise NotTaskParticipant('Only the task creator can view the completion code')
    return CompletionCode.active_for_task(task.id)


def _redeem(code, task_id, user_id, now):
    normalized = CompletionCode.normalize(code)
    if not normalized or len(normalized) != CODE_LENGTH:
        raise InvalidOrExpiredCode()

    task = db.session.get(Task, task_id)
    if task is None:
        raise InvalidOrExpiredCode()
    if user_id is not None and user_id != task.runner_id:
        raise NotTaskParticipant('Only the assigned runner can redeem a completion code')

    candidate = CompletionCode.find_redeemable(task.id, normalized, now)
    if candidate is None:
        raise InvalidOrExpiredCode()
    previous_status = task.status

    try:
        if not CompletionCode.claim(candidate.id, user_id, now):
            raise ConcurrentRedemptionConflict()
        # Task may have been cancelled since the code was minted
        if not mark_completed(task.id, now):
            raise ConcurrentRedemptionConflict()
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return task, previous_status


def redeem_completion_code(code, task_id, user_id=None):
    """
    Redeem a completion code and complete the task.

    Returns:
        bool: True for the single successful redemption; False when the
        code is wrong, used, expired, or lost a concurrent race. Callers
        show the same generic message for every False.

    Raises:
        NotTaskParticipant: user_id given and not the assigned runner
    """
    now = datetime.utcnow()
    try:
        task, previous_status = _redeem(code, task_id, user_id, now)
    except InvalidOrExpiredCode as e:
        db.session.rollback()
        logger.info(f'Completion code rejected for task {task_id} (user {user_id}): {type(e).__name__}')
        return False

    logger.info(f'Task {task_id} completed via completion code (runner {user_id})')
    db.session.refresh(task)
    events.task_status_changed(task, previous_status)
    return True
