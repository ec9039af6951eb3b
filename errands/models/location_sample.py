"""Location sample model: the append-only GPS trail of a task's runner."""

from datetime import datetime
from errands import db


class LocationSample(db.Model):
    """One reported runner position for a task. Never updated."""

    __tablename__ = 'location_samples'

    id = db.Column(db.Integer, primary_key=True)
    task_id = db.Column(db.Integer, db.ForeignKey('tasks.id'), nullable=False, index=True)
    runner_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)
    accuracy = db.Column(db.Float, nullable=True)  # meters
    heading = db.Column(db.Float, nullable=True)  # degrees from north
    speed = db.Column(db.Float, nullable=True)  # m/s
    recorded_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)  # device clock
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)  # insert time

    __table_args__ = (
        db.Index('ix_location_samples_task_recorded', 'task_id', 'recorded_at'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'task_id': self.task_id,
            'runner_id': self.runner_id,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'accuracy': self.accuracy,
            'heading': self.heading,
            'speed': self.speed,
            'recorded_at': self.recorded_at.isoformat(),
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f'<LocationSample task={self.task_id} ({self.latitude}, {self.longitude})>'
