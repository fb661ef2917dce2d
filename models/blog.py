"""Blog post model."""

from datetime import datetime

from . import db


CONTENT_TYPES = ("plain", "markdown", "html")


class Blog(db.Model):
    """A blog post written by an editor or administrator."""

    __tablename__ = "blogs"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    content_type = db.Column(
        db.Enum(*CONTENT_TYPES, name="blog_content_type"),
        nullable=False,
        default="plain",
        server_default=db.text("'plain'"),
    )
    author_id = db.Column(
        db.Integer, db.ForeignKey("users.id"), nullable=False, index=True
    )
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(
        db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    author = db.relationship("User", back_populates="blogs")

    def to_dict(self) -> dict:
        """Serialize the post with its author's display name."""

        return {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "content_type": self.content_type,
            "author_id": self.author_id,
            "author_name": self.author.name if self.author else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
