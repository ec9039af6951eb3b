"""User model.

Accounts are owned by the identity provider; this table only holds what
tasks and admin checks reference.
"""

from datetime import datetime
from errands import db


class User(db.Model):
    """Marketplace user (creator, runner, or admin)."""

    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    first_name = db.Column(db.String(80), nullable=True)
    is_admin = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    created_tasks = db.relationship('Task', backref='creator', lazy=True, foreign_keys='Task.creator_id')
    running_tasks = db.relationship('Task', backref='runner', lazy=True, foreign_keys='Task.runner_id')

    def to_dict(self):
        """Convert user to dictionary."""
        return {
            'id': self.id,
            'username': self.username,
            'first_name': self.first_name,
            'is_admin': self.is_admin,
            'created_at': self.created_at.isoformat(),
        }

    def __repr__(self):
        return f'<User {self.username}>'
