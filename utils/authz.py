"""Role checks layered on top of flask-jwt-extended bearer tokens."""

from __future__ import annotations

from functools import wraps
from typing import Callable

from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request
from werkzeug.exceptions import Forbidden

from utils.errors import AdminRequired, EditorRequired, InvalidToken


def role_required(
    *roles: str,
    error: type[Forbidden] = Forbidden,
    message: str = "Insufficient role.",
) -> Callable:
    """Require a verified bearer token whose ``role`` claim is in ``roles``.

    Token problems are answered by the JWT error loaders: 401 when the header
    is missing, 403 when the token is malformed, forged or expired.
    """

    allowed = frozenset(roles)

    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            if get_jwt().get("role") not in allowed:
                raise error(message)
            return fn(*args, **kwargs)

        return wrapper

    return decorator


admin_required = role_required(
    "admin", error=AdminRequired, message="Admin access required."
)
editor_required = role_required(
    "admin", "editor", error=EditorRequired, message="Editor or admin access required."
)


def current_user_id() -> int:
    identity = get_jwt_identity()
    try:
        return int(identity)
    except (TypeError, ValueError):
        raise InvalidToken("Invalid token payload.")


def current_role() -> str | None:
    return get_jwt().get("role")
