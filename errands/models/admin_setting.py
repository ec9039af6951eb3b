"""Admin key/value settings editable from the back-office."""

from datetime import datetime
from errands import db


class AdminSetting(db.Model):
    __tablename__ = 'admin_settings'

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.JSON, nullable=True)
    updated_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def to_dict(self):
        return {
            'key': self.key,
            'value': self.value,
            'updated_by_id': self.updated_by_id,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<AdminSetting {self.key}={self.value!r}>'
