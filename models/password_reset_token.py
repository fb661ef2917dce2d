"""Single-use password reset tokens."""

from datetime import datetime
from typing import Optional

from . import db


class PasswordResetToken(db.Model):
    """A time-boxed random token permitting one password change."""

    __tablename__ = "password_reset_tokens"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    token = db.Column(db.String(128), unique=True, nullable=False, index=True)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)
    used = db.Column(
        db.Boolean,
        nullable=False,
        default=False,
        server_default=db.false(),
        index=True,
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    user = db.relationship("User", back_populates="reset_tokens")

    @classmethod
    def find_valid(cls, token: str, now: Optional[datetime] = None):
        """Return the unused, unexpired row for ``token`` or ``None``."""

        now = now or datetime.utcnow()
        return cls.query.filter(
            cls.token == token,
            cls.used.is_(False),
            cls.expires_at > now,
        ).first()

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.utcnow()
        return not self.used and self.expires_at > now

    def mark_used(self) -> None:
        self.used = True

    def __repr__(self) -> str:
        return f"<PasswordResetToken id={self.id} user_id={self.user_id} used={self.used}>"
