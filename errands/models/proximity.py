"""Proximity alert and per-task proximity state models."""

from datetime import datetime
from errands import db


class ProximityAlert(db.Model):
    """Runner came within the alert radius of the pickup point."""

    __tablename__ = 'proximity_alerts'

    id = db.Column(db.Integer, primary_key=True)
    task_id = db.Column(db.Integer, db.ForeignKey('tasks.id'), nullable=False, index=True)
    runner_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    creator_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    distance = db.Column(db.Float, nullable=False)  # meters, measured at alert time
    alert_sent_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    acknowledged_by_runner = db.Column(db.Boolean, default=False, nullable=False)
    acknowledged_by_creator = db.Column(db.Boolean, default=False, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'task_id': self.task_id,
            'runner_id': self.runner_id,
            'creator_id': self.creator_id,
            'distance': round(self.distance, 1),
            'alert_sent_at': self.alert_sent_at.isoformat(),
            'acknowledged_by_runner': self.acknowledged_by_runner,
            'acknowledged_by_creator': self.acknowledged_by_creator,
        }

    def __repr__(self):
        return f'<ProximityAlert {self.id} task={self.task_id} {self.distance:.0f}m>'


class ProximityState(db.Model):
    """Last known inside/outside state of a task's runner.

    A missing row means the state is unknown (nothing evaluated yet).
    """

    __tablename__ = 'proximity_states'

    INSIDE = 'inside'
    OUTSIDE = 'outside'

    task_id = db.Column(db.Integer, db.ForeignKey('tasks.id'), primary_key=True)
    state = db.Column(db.String(10), nullable=False)
    last_distance = db.Column(db.Float, nullable=True)
    last_sample_at = db.Column(db.DateTime, nullable=True)  # recorded_at of the last evaluated sample
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    @property
    def is_inside(self):
        return self.state == self.INSIDE

    def __repr__(self):
        return f'<ProximityState task={self.task_id} {self.state}>'
