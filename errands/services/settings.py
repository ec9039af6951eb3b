"""Admin settings store.

Settings are read on every use rather than cached, so operators can change
them live from the back-office.
"""

import logging
import math
from datetime import datetime
from errands import db
from errands.exceptions import InvalidSetting
from errands.models import AdminSetting

logger = logging.getLogger(__name__)

PROXIMITY_ALERT_DISTANCE = 'proximity_alert_distance'
DEFAULT_PROXIMITY_ALERT_DISTANCE = 100  # meters
MAX_PROXIMITY_ALERT_DISTANCE = 10000


def _validate_distance(value):
    # The back-office form posts numbers as strings
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            raise InvalidSetting(f'{PROXIMITY_ALERT_DISTANCE} must be a number of meters')
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidSetting(f'{PROXIMITY_ALERT_DISTANCE} must be a number of meters')
    try:
        value = float(value)
    except OverflowError:
        raise InvalidSetting(f'{PROXIMITY_ALERT_DISTANCE} must be a number of meters')
    if not math.isfinite(value):
        raise InvalidSetting(f'{PROXIMITY_ALERT_DISTANCE} must be a number of meters')
    # Whole meters; range is checked on what will actually be stored
    meters = int(round(value))
    if meters < 1 or meters > MAX_PROXIMITY_ALERT_DISTANCE:
        raise InvalidSetting(
            f'{PROXIMITY_ALERT_DISTANCE} must be between 1 and {MAX_PROXIMITY_ALERT_DISTANCE} meters'
        )
    return meters


# key -> (default, validator)
KNOWN_SETTINGS = {
    PROXIMITY_ALERT_DISTANCE: (DEFAULT_PROXIMITY_ALERT_DISTANCE, _validate_distance),
}


def get_setting(key, default=None):
    """Return the stored value for a setting, or default if unset."""
    setting = db.session.get(AdminSetting, key)
    if setting is None or setting.value is None:
        return default
    return setting.value


def get_settings():
    """All settings as a dict, with defaults filled in for known keys."""
    settings = {key: default for key, (default, _) in KNOWN_SETTINGS.items()}
    for setting in AdminSetting.query.all():
        settings[setting.key] = setting.value
    return settings


def _clean(key, value):
    """Normalized (key, value); known keys are validated."""
    if not isinstance(key, str) or not key.strip():
        raise InvalidSetting('Setting key is required')
    key = key.strip()
    if key in KNOWN_SETTINGS:
        _, validator = KNOWN_SETTINGS[key]
        value = validator(value)
    return key, value


def _store(key, value, updated_by_id, now):
    setting = db.session.get(AdminSetting, key)
    if setting is None:
        setting = AdminSetting(key=key)
        db.session.add(setting)
    setting.value = value
    setting.updated_by_id = updated_by_id
    setting.updated_at = now
    return setting


def update_setting(key, value, updated_by_id=None):
    """Upsert a setting. Known keys are validated before being stored."""
    return update_settings({key: value}, updated_by_id=updated_by_id)[0]


def update_settings(updates, updated_by_id=None):
    """
    Upsert several settings in one transaction.

    Every entry is validated before anything is written, so one bad value
    leaves all settings untouched.

    Returns:
        list: the stored AdminSetting rows, in input order
    """
    cleaned = [_clean(key, value) for key, value in updates.items()]

    now = datetime.utcnow()
    try:
        stored = [_store(key, value, updated_by_id, now) for key, value in cleaned]
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    for key, value in cleaned:
        logger.info(f'Setting {key} updated to {value!r} by user {updated_by_id}')
    return stored


def get_proximity_threshold():
    """Current proximity alert radius in meters.

    Bad stored values fall back to the default instead of breaking tracking.
    """
    value = get_setting(PROXIMITY_ALERT_DISTANCE, DEFAULT_PROXIMITY_ALERT_DISTANCE)
    try:
        return _validate_distance(value)
    except InvalidSetting:
        logger.warning(
            f'Ignoring invalid {PROXIMITY_ALERT_DISTANCE}={value!r}, '
            f'using default {DEFAULT_PROXIMITY_ALERT_DISTANCE}m'
        )
        return DEFAULT_PROXIMITY_ALERT_DISTANCE
