"""Registration, credential checks and bearer token issuance."""

from __future__ import annotations

from flask import current_app
from flask_jwt_extended import create_access_token
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from models import db
from models.user import DEFAULT_ROLE, User
from utils.errors import EmailExists, InvalidCredentials, InvalidEmail, WeakPassword
from utils.request_validation import is_valid_email, normalize_email


def find_user_by_email(email: str) -> User | None:
    """Case-insensitive lookup of a user by email."""

    return User.query.filter(func.lower(User.email) == normalize_email(email)).first()


def check_password_strength(password: str) -> None:
    min_length = current_app.config.get("PASSWORD_MIN_LENGTH", 8)
    if len(password) < min_length:
        raise WeakPassword(f"Password must be at least {min_length} characters.")


def register_user(name: str, email: str, password: str) -> User:
    """Create a ``viewer`` account, rejecting duplicate emails."""

    email = normalize_email(email)
    if not is_valid_email(email):
        raise InvalidEmail("Invalid email format.")
    check_password_strength(password)

    if find_user_by_email(email) is not None:
        raise EmailExists("Email already in use.")

    user = User(name=name, email=email, role=DEFAULT_ROLE)
    user.set_password(password)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        # Lost a race against a concurrent registration for the same email.
        db.session.rollback()
        raise EmailExists("Email already in use.")

    current_app.logger.info("Registered user %s", user.id)
    return user


def authenticate(email: str, password: str) -> User:
    """Return the user for valid credentials or raise a uniform 401."""

    user = find_user_by_email(email)
    if user is None or not user.check_password(password):
        current_app.logger.info("Failed login attempt")
        raise InvalidCredentials("Invalid credentials.")
    return user


def issue_access_token(user: User) -> str:
    """Sign a bearer token carrying the user's id, email, role and name."""

    return create_access_token(
        identity=str(user.id),
        additional_claims={
            "id": user.id,
            "email": user.email,
            "role": user.role,
            "name": user.name,
        },
    )
