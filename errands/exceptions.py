"""Domain errors for runner tracking and task completion.

Every error carries the HTTP status the API answers with, so routes can
let them propagate to the blueprint error handler.
"""


class TrackingError(Exception):
    """Base error for the tracking/completion core."""

    status_code = 400
    default_message = 'Tracking request failed'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {'error': self.message}


class InvalidCoordinate(TrackingError):
    """Malformed geodata: out-of-range or non-numeric coordinates."""

    default_message = 'Invalid coordinate'


class TaskNotFound(TrackingError):
    status_code = 404
    default_message = 'Task not found'


class AlertNotFound(TrackingError):
    status_code = 404
    default_message = 'Proximity alert not found'


class NotTaskParticipant(TrackingError):
    """Caller is not the creator/runner the operation requires."""

    status_code = 403
    default_message = 'You are not allowed to perform this action on this task'


class TaskNotTrackable(TrackingError):
    """Task is in a pre-acceptance or terminal state."""

    status_code = 409
    default_message = 'Task is not in a trackable state'


class InvalidTransition(TrackingError):
    status_code = 409

    def __init__(self, current_status, target_status):
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(f"Cannot move task from '{current_status}' to '{target_status}'")


class MissingPickupLocation(TrackingError):
    """Task has no geocoded pickup point; proximity cannot be evaluated."""

    default_message = 'Task has no pickup location'


class InvalidOrExpiredCode(TrackingError):
    """Wrong, used or expired completion code.

    The message never says which, so a guesser learns nothing.
    """

    default_message = 'Invalid or expired completion code'


class ConcurrentRedemptionConflict(InvalidOrExpiredCode):
    """Lost the compare-and-swap on a completion code row."""


class InvalidSetting(TrackingError):
    default_message = 'Invalid setting value'
