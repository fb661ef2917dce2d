"""Contact form submission model."""

from datetime import datetime

from . import db


CONTACT_ROLES = ("admin", "editor", "viewer", "banned")
ASSIGNABLE_CONTACT_ROLES = ("editor", "viewer")


class ContactSubmission(db.Model):
    """A message left through the public contact form."""

    __tablename__ = "contact_submissions"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False, index=True)
    subject = db.Column(db.String(255), nullable=False)
    message = db.Column(db.Text, nullable=False)
    role = db.Column(
        db.Enum(*CONTACT_ROLES, name="contact_role"),
        nullable=False,
        default="viewer",
        server_default=db.text("'viewer'"),
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "subject": self.subject,
            "message": self.message,
            "role": self.role,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
