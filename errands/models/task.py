"""Task model (the subset of the work order the tracking core touches)."""

from datetime import datetime
from errands import db


class TaskStatus:
    POSTED = 'posted'
    ACCEPTED = 'accepted'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

    ALL = (POSTED, ACCEPTED, IN_PROGRESS, COMPLETED, CANCELLED)
    # Statuses in which the runner is tracked and codes may be minted
    TRACKABLE = (ACCEPTED, IN_PROGRESS)
    TERMINAL = (COMPLETED, CANCELLED)


class Task(db.Model):
    """Errand posted by a creator and fulfilled by a runner."""

    __tablename__ = 'tasks'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    status = db.Column(db.String(20), default=TaskStatus.POSTED, nullable=False, index=True)
    creator_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    runner_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True, index=True)
    pickup_address = db.Column(db.String(255), nullable=True)
    pickup_latitude = db.Column(db.Float, nullable=True)
    pickup_longitude = db.Column(db.Float, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    accepted_at = db.Column(db.DateTime, nullable=True)
    started_at = db.Column(db.DateTime, nullable=True)
    completed_at = db.Column(db.DateTime, nullable=True)
    cancelled_at = db.Column(db.DateTime, nullable=True)

    @property
    def has_pickup(self):
        return self.pickup_latitude is not None and self.pickup_longitude is not None

    @property
    def is_trackable(self):
        return self.status in TaskStatus.TRACKABLE

    def is_participant(self, user_id):
        return user_id is not None and user_id in (self.creator_id, self.runner_id)

    def to_dict(self):
        """Convert task to dictionary."""
        return {
            'id': self.id,
            'title': self.title,
            'status': self.status,
            'creator_id': self.creator_id,
            'runner_id': self.runner_id,
            'pickup_address': self.pickup_address,
            'pickup_latitude': self.pickup_latitude,
            'pickup_longitude': self.pickup_longitude,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat(),
            'accepted_at': self.accepted_at.isoformat() if self.accepted_at else None,
            'started_at': self.started_at.isoformat() if self.started_at else None,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'cancelled_at': self.cancelled_at.isoformat() if self.cancelled_at else None,
        }

    def __repr__(self):
        return f'<Task {self.id}: {self.status}>'
