"""Database initialization and model exports."""

from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()

# Import models to register them with SQLAlchemy metadata.
from .user import User  # noqa: E402,F401
from .password_reset_token import PasswordResetToken  # noqa: E402,F401
from .blog import Blog  # noqa: E402,F401
from .recommendation import Recommendation  # noqa: E402,F401
from .contact_submission import ContactSubmission  # noqa: E402,F401

__all__ = [
    "db",
    "User",
    "PasswordResetToken",
    "Blog",
    "Recommendation",
    "ContactSubmission",
]
