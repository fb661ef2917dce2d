"""Issuance, validation and redemption of password reset tokens."""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.password_reset_token import PasswordResetToken
from models.user import User
from services.auth import check_password_strength, find_user_by_email
from services.mailer import mailer
from services.notifications import password_reset_email
from utils.errors import DatabaseError, InvalidOrExpiredToken

TOKEN_BYTES = 32
GENERIC_RESET_MESSAGE = "If an account exists, a reset link has been sent."


def _token_ttl() -> timedelta:
    return current_app.config.get("PASSWORD_RESET_TOKEN_TTL", timedelta(hours=1))


def build_reset_url(token: str) -> str:
    base = current_app.config.get("FRONTEND_URL", "").rstrip("/")
    return f"{base}/reset-password/{token}"


def request_password_reset(email: str) -> PasswordResetToken | None:
    """Issue a reset token for ``email`` if such an account exists.

    Returns the stored token row, or ``None`` when no account matches. The
    caller must respond identically in both cases.
    """

    user = find_user_by_email(email)
    if user is None:
        return None

    reset_token = PasswordResetToken(
        user_id=user.id,
        token=secrets.token_hex(TOKEN_BYTES),
        expires_at=datetime.utcnow() + _token_ttl(),
    )
    db.session.add(reset_token)
    db.session.commit()
    current_app.logger.info("Issued password reset token for user %s", user.id)

    message = password_reset_email(
        mailer, user.email, user.name, build_reset_url(reset_token.token), _token_ttl()
    )
    mailer.dispatch(message)
    return reset_token


def find_valid_token(token: str) -> PasswordResetToken | None:
    if not token:
        return None
    return PasswordResetToken.find_valid(token)


def reset_password(token: str, new_password: str) -> None:
    """Set a new password and consume ``token`` in one transaction."""

    check_password_strength(new_password)

    reset_token = find_valid_token(token)
    if reset_token is None:
        raise InvalidOrExpiredToken("Invalid or expired token.")
    token_id, user_id = reset_token.id, reset_token.user_id

    try:
        # Claim the row only if it is still unused; a concurrent redemption
        # leaves nothing to update.
        claimed = PasswordResetToken.query.filter(
            PasswordResetToken.id == token_id,
            PasswordResetToken.used.is_(False),
            PasswordResetToken.expires_at > datetime.utcnow(),
        ).update({"used": True}, synchronize_session=False)
        if claimed != 1:
            db.session.rollback()
            raise InvalidOrExpiredToken("Invalid or expired token.")

        db.session.get(User, user_id).set_password(new_password)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception("Password reset failed for token %s", token_id)
        raise DatabaseError("Failed to reset password.") from exc

    current_app.logger.info("Password reset completed for user %s", user_id)


def purge_stale_tokens(now: datetime | None = None) -> int:
    """Delete used or expired reset tokens and return how many were removed."""

    now = now or datetime.utcnow()
    removed = PasswordResetToken.query.filter(
        or_(
            PasswordResetToken.used.is_(True),
            PasswordResetToken.expires_at <= now,
        )
    ).delete(synchronize_session=False)
    db.session.commit()
    current_app.logger.info("Purged %s stale password reset tokens", removed)
    return removed
