"""HTTP errors carrying machine-readable codes for the JSON envelope."""

from __future__ import annotations

from werkzeug.exceptions import (
    BadRequest,
    Conflict,
    Forbidden,
    InternalServerError,
    NotFound,
    Unauthorized,
)


class MissingFields(BadRequest):
    error_code = "MISSING_FIELDS"


class MissingCredentials(BadRequest):
    error_code = "MISSING_CREDENTIALS"


class InvalidEmail(BadRequest):
    error_code = "INVALID_EMAIL"


class WeakPassword(BadRequest):
    error_code = "WEAK_PASSWORD"


class InvalidRole(BadRequest):
    error_code = "INVALID_ROLE"


class InvalidOrExpiredToken(BadRequest):
    error_code = "INVALID_OR_EXPIRED"


class InvalidCredentials(Unauthorized):
    error_code = "INVALID_CREDENTIALS"


class MissingToken(Unauthorized):
    error_code = "MISSING_TOKEN"


class InvalidToken(Forbidden):
    error_code = "INVALID_TOKEN"


class AdminRequired(Forbidden):
    error_code = "ADMIN_REQUIRED"


class EditorRequired(Forbidden):
    error_code = "EDITOR_REQUIRED"


class NotOwner(Forbidden):
    error_code = "NOT_OWNER"


class ResourceNotFound(NotFound):
    error_code = "NOT_FOUND"


class EmailExists(Conflict):
    error_code = "EMAIL_EXISTS"


class DatabaseError(InternalServerError):
    error_code = "DB_ERROR"

    description = "Database operation failed."


def error_code_for(error: Exception) -> str | None:
    """Return the machine-readable code attached to ``error``, if any."""

    return getattr(error, "error_code", None)
