"""Database models for runner tracking and task completion."""

from .user import User
from .task import Task, TaskStatus
from .location_sample import LocationSample
from .proximity import ProximityAlert, ProximityState
from .completion_code import CompletionCode
from .admin_setting import AdminSetting

__all__ = [
    'User',
    'Task',
    'TaskStatus',
    'LocationSample',
    'ProximityAlert',
    'ProximityState',
    'CompletionCode',
    'AdminSetting',
]
