"""Proximity evaluator.

Alerts are edge-triggered: one alert when the runner goes from outside (or
unknown) to inside the alert radius, none while they stay inside, and a new
one only after they have left the radius and come back.
"""

import logging
from datetime import datetime
from flask import current_app
from sqlalchemy.exc import IntegrityError
from errands import db
from errands.exceptions import (
    AlertNotFound,
    MissingPickupLocation,
    NotTaskParticipant,
    TrackingError,
)
from errands.models import ProximityAlert, ProximityState
from errands.services import events
from errands.services.geo import distance_meters
from errands.services.settings import get_proximity_threshold
from errands.services.task_state import get_task

logger = logging.getLogger(__name__)


def get_state(task_id):
    """Current ProximityState row, or None when nothing was evaluated yet."""
    return db.session.get(ProximityState, task_id)


def is_out_of_order(task_id, recorded_at):
    """True if a sample is older than the last one evaluated for the task."""
    state = get_state(task_id)
    return bool(state and state.last_sample_at and recorded_at < state.last_sample_at)


def _create_state(task_id):
    """Insert the task's first ProximityState, or load the one a concurrent sample just created."""
    try:
        with db.session.begin_nested():
            state = ProximityState(task_id=task_id, state=ProximityState.OUTSIDE)
            db.session.add(state)
    except IntegrityError:
        logger.info(f'Proximity state for task {task_id} created concurrently, reloading')
        state = get_state(task_id)
    return state


def evaluate_proximity(task, sample):
    """
    Evaluate a new location sample against the task's pickup point.

    Updates the task's proximity state and, on a rising edge, adds a new
    ProximityAlert to the session. The caller commits.

    Args:
        task: Task the sample belongs to
        sample: LocationSample just recorded

    Returns:
        ProximityAlert or None

    Raises:
        MissingPickupLocation: task has no pickup coordinate
    """
    if not task.has_pickup:
        raise MissingPickupLocation()

    distance = distance_meters(
        sample.latitude, sample.longitude,
        task.pickup_latitude, task.pickup_longitude
    )
    # Re-read every time, operators change it live
    threshold = get_proximity_threshold()

    state = get_state(task.id)
    if state is None:
        state = _create_state(task.id)
    was_inside = state.is_inside

    state.last_distance = distance
    state.last_sample_at = sample.recorded_at
    state.updated_at = datetime.utcnow()

    if distance > threshold:
        state.state = ProximityState.OUTSIDE
        return None

    state.state = ProximityState.INSIDE
    if was_inside:
        return None

    alert = ProximityAlert(
        task_id=task.id,
        runner_id=sample.runner_id,
        creator_id=task.creator_id,
        distance=distance,
        alert_sent_at=datetime.utcnow()
    )
    db.session.add(alert)
    logger.info(f'Runner {sample.runner_id} within {threshold}m of pickup for task {task.id} ({distance:.1f}m)')
    return alert


def handle_new_alert(task, alert):
    """Publish a committed alert and mint the creator's completion code."""
    events.proximity_alert_created(alert)

    if not current_app.config.get('AUTO_GENERATE_COMPLETION_CODE', True):
        return None

    from errands.services.completion import generate_completion_code
    try:
        return generate_completion_code(task.id, task.creator_id)
    except TrackingError as e:
        logger.warning(f'Could not generate completion code for task {task.id} after proximity alert: {e}')
        return None


def get_proximity_alerts(task_id, user_id=None):
    """All alerts for a task, newest first. Participants only."""
    task = get_task(task_id)
    if user_id is not None and not task.is_participant(user_id):
        raise NotTaskParticipant()
    return ProximityAlert.query.filter_by(task_id=task.id).order_by(
        ProximityAlert.alert_sent_at.desc(),
        ProximityAlert.id.desc()
    ).all()


def acknowledge_proximity_alert(alert_id, user_id):
    """Flip the caller's acknowledgement flag on an alert."""
    alert = db.session.get(ProximityAlert, alert_id)
    if alert is None:
        raise AlertNotFound()

    if user_id == alert.runner_id:
        alert.acknowledged_by_runner = True
    elif user_id == alert.creator_id:
        alert.acknowledged_by_creator = True
    else:
        raise NotTaskParticipant()

    db.session.commit()
    return alert
