"""Recommendation model."""

from datetime import datetime

from . import db


class Recommendation(db.Model):
    """A testimonial submitted publicly and shown once approved."""

    __tablename__ = "recommendations"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    position = db.Column(db.String(255), nullable=False)
    company = db.Column(db.String(255), nullable=False)
    recommendation = db.Column(db.Text, nullable=False)
    approved = db.Column(
        db.Boolean, nullable=False, default=False, server_default=db.false()
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "position": self.position,
            "company": self.company,
            "recommendation": self.recommendation,
            "approved": self.approved,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
