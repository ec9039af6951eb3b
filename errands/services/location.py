"""Location ingestion service.

The only write path for runner positions. Samples are append-only: there is
no update or delete, so the trail stays usable for audits and disputes.
"""

import logging
import math
from datetime import datetime, timezone
from errands import db
from errands.exceptions import (
    InvalidCoordinate,
    MissingPickupLocation,
    NotTaskParticipant,
    TaskNotTrackable,
)
from errands.models import LocationSample
from errands.services import events
from errands.services.geo import validate_coordinate
from errands.services.proximity import evaluate_proximity, handle_new_alert, is_out_of_order
from errands.services.task_state import get_task

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 100
MAX_HISTORY_LIMIT = 500


def _optional_measure(value, name, minimum=0.0, maximum=None):
    """Validate an optional non-negative reading (accuracy, speed, heading)."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidCoordinate(f'{name} must be a number')
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidCoordinate(f'{name} must be a number')
    if not math.isfinite(number) or number < minimum:
        raise InvalidCoordinate(f'{name} must be at least {minimum:g}')
    if maximum is not None and number >= maximum:
        raise InvalidCoordinate(f'{name} must be less than {maximum:g}')
    return number


def _parse_recorded_at(value, now):
    """Device timestamp as naive UTC, clamped to now. Defaults to now."""
    if value is None:
        return now
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        except ValueError:
            raise InvalidCoordinate('recorded_at must be an ISO-8601 timestamp')
    if not isinstance(value, datetime):
        raise InvalidCoordinate('recorded_at must be an ISO-8601 timestamp')
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    # A clock running ahead must not block every later sample from evaluation
    return min(value, now)


def _check_participant(task, user_id):
    if user_id is not None and not task.is_participant(user_id):
        raise NotTaskParticipant()


def record_location(task_id, runner_id, position):
    """
    Append a runner position and evaluate proximity.

    Args:
        task_id: Task being run
        runner_id: Authenticated caller; must be the task's assigned runner
        position: dict with latitude, longitude and optional accuracy,
            heading, speed, recorded_at

    Returns:
        tuple: (LocationSample, ProximityAlert or None)

    Raises:
        TaskNotFound, NotTaskParticipant, TaskNotTrackable, InvalidCoordinate
    """
    task = get_task(task_id)
    if task.runner_id is None or task.runner_id != runner_id:
        raise NotTaskParticipant('Only the assigned runner can report a location')
    if not task.is_trackable:
        raise TaskNotTrackable(f'Location tracking is not available for a {task.status} task')

    position = position or {}
    latitude, longitude = validate_coordinate(position.get('latitude'), position.get('longitude'))
    accuracy = _optional_measure(position.get('accuracy'), 'accuracy')
    heading = _optional_measure(position.get('heading'), 'heading', maximum=360)
    speed = _optional_measure(position.get('speed'), 'speed')
    now = datetime.utcnow()
    recorded_at = _parse_recorded_at(position.get('recorded_at'), now)

    sample = LocationSample(
        task_id=task.id,
        runner_id=runner_id,
        latitude=latitude,
        longitude=longitude,
        accuracy=accuracy,
        heading=heading,
        speed=speed,
        recorded_at=recorded_at,
        created_at=now
    )

    alert = None
    try:
        db.session.add(sample)
        if is_out_of_order(task.id, recorded_at):
            logger.info(f'Out-of-order sample for task {task.id} ({recorded_at.isoformat()}), stored without evaluation')
        else:
            try:
                alert = evaluate_proximity(task, sample)
            except MissingPickupLocation:
                logger.info(f'Task {task.id} has no pickup location, skipping proximity evaluation')
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    events.location_updated(sample)
    if alert is not None:
        handle_new_alert(task, alert)
    return sample, alert


def ingest_location(task_id, runner_id, position):
    """Append a runner position; returns the stored LocationSample."""
    sample, _ = record_location(task_id, runner_id, position)
    return sample


def get_latest_location(task_id, user_id=None):
    """Most recent sample for a task (or None). Participants only."""
    task = get_task(task_id)
    _check_participant(task, user_id)
    return LocationSample.query.filter_by(task_id=task.id).order_by(
        LocationSample.recorded_at.desc(),
        LocationSample.id.desc()
    ).first()


def get_location_history(task_id, limit=DEFAULT_HISTORY_LIMIT, user_id=None):
    """Newest-first trail for a task, at most MAX_HISTORY_LIMIT samples."""
    task = get_task(task_id)
    _check_participant(task, user_id)
    limit = max(1, min(int(limit or DEFAULT_HISTORY_LIMIT), MAX_HISTORY_LIMIT))
    return LocationSample.query.filter_by(task_id=task.id).order_by(
        LocationSample.recorded_at.desc(),
        LocationSample.id.desc()
    ).limit(limit).all()
