"""User model definition."""

from datetime import datetime

from werkzeug.security import check_password_hash, generate_password_hash

from . import db


USER_ROLES = ("admin", "editor", "viewer")
DEFAULT_ROLE = "viewer"


class User(db.Model):
    """Represents an account that can sign in to the portfolio console."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(
        db.Enum(*USER_ROLES, name="user_role"),
        nullable=False,
        default=DEFAULT_ROLE,
        server_default=db.text(f"'{DEFAULT_ROLE}'"),
        index=True,
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    reset_tokens = db.relationship(
        "PasswordResetToken",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    blogs = db.relationship(
        "Blog", back_populates="author", cascade="all, delete-orphan"
    )

    def set_password(self, password: str) -> None:
        """Hash and store the password."""

        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        return check_password_hash(self.password_hash, password)

    def to_summary(self) -> dict:
        """Public fields returned alongside tokens and registrations."""

        return {"id": self.id, "name": self.name, "email": self.email, "role": self.role}

    def to_dict(self) -> dict:
        data = self.to_summary()
        data["created_at"] = self.created_at.isoformat() if self.created_at else None
        return data

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"
