"""Completion code model for the out-of-band handoff confirmation."""

import secrets
from datetime import datetime, timedelta
from sqlalchemy import update
from errands import db

# No I/O/0/1 so codes survive being read aloud; 32 symbols, 5 bits each
CODE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'
CODE_LENGTH = 6
CODE_TTL_HOURS = 24


class CompletionCode(db.Model):
    """Short-lived single-use code that authorizes completing a task."""

    __tablename__ = 'completion_codes'

    id = db.Column(db.Integer, primary_key=True)
    task_id = db.Column(db.Integer, db.ForeignKey('tasks.id'), nullable=False, index=True)
    code = db.Column(db.String(CODE_LENGTH), nullable=False)
    generated_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    used_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    generated_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)
    used_at = db.Column(db.DateTime, nullable=True)
    is_used = db.Column(db.Boolean, default=False, nullable=False)

    __table_args__ = (
        db.Index('ix_completion_codes_task_code', 'task_id', 'code'),
    )

    @staticmethod
    def new_code_value():
        """Random human-shareable code from the unambiguous alphabet."""
        return ''.join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))

    @staticmethod
    def normalize(code):
        """Trim and upper-case user input; returns None for non-strings."""
        if not isinstance(code, str):
            return None
        return code.strip().upper()

    @classmethod
    def mint(cls, task_id, generated_by_id=None, now=None):
        """Create (but do not commit) a fresh code for a task."""
        now = now or datetime.utcnow()
        completion_code = cls(
            task_id=task_id,
            code=cls.new_code_value(),
            generated_by_id=generated_by_id,
            generated_at=now,
            expires_at=now + timedelta(hours=CODE_TTL_HOURS),
        )
        db.session.add(completion_code)
        return completion_code

    @classmethod
    def active_for_task(cls, task_id, now=None):
        """Return the task's unused, unexpired code, if any."""
        now = now or datetime.utcnow()
        return cls.query.filter(
            cls.task_id == task_id,
            cls.is_used == False,  # noqa: E712
            cls.expires_at > now
        ).order_by(cls.generated_at.desc(), cls.id.desc()).first()

    @classmethod
    def find_redeemable(cls, task_id, code, now=None):
        """Look up a code by (task_id, code); only unused, unexpired rows match."""
        now = now or datetime.utcnow()
        return cls.query.filter(
            cls.task_id == task_id,
            cls.code == code,
            cls.is_used == False,  # noqa: E712
            cls.expires_at > now
        ).first()

    @classmethod
    def claim(cls, code_id, used_by_id, now):
        """Atomically mark a code used.

        Compare-and-swap on is_used/expires_at: returns True only for the
        single caller whose UPDATE actually flipped the row.
        """
        result = db.session.execute(
            update(cls)
            .where(
                cls.id == code_id,
                cls.is_used == False,  # noqa: E712
                cls.expires_at > now
            )
            .values(is_used=True, used_at=now, used_by_id=used_by_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def is_active(self, now=None):
        now = now or datetime.utcnow()
        return not self.is_used and now < self.expires_at

    def to_dict(self):
        return {
            'task_id': self.task_id,
            'code': self.code,
            'generated_at': self.generated_at.isoformat(),
            'expires_at': self.expires_at.isoformat(),
            'is_used': self.is_used,
            'used_at': self.used_at.isoformat() if self.used_at else None,
        }

    def __repr__(self):
        return f'<CompletionCode task={self.task_id} used={self.is_used} expires_at={self.expires_at}>'
