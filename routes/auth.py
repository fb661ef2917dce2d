"""Authentication blueprint: register, login and password reset."""

from __future__ import annotations
from http import HTTPStatus

from flask import Blueprint, jsonify, request

from services.auth import authenticate, issue_access_token, register_user
from services.password_reset import (
    GENERIC_RESET_MESSAGE,
    find_valid_token,
    request_password_reset,
    reset_password,
)
from utils.errors import InvalidEmail, MissingCredentials, MissingFields, WeakPassword
from utils.request_validation import (
    clean_text,
    is_valid_email,
    normalize_email,
    parse_json_request,
)

auth_bp = Blueprint("auth", __name__)


@auth_bp.route("/register", methods=["POST"])
def register() -> tuple:
    """Register a new viewer account from a name, email and password."""
    payload = parse_json_request(request, required_keys=("name", "email", "password"))
    name = clean_text(payload.get("name"))
    if not name:
        raise MissingFields("Name, email, and password required.")
    password = payload.get("password")
    if not isinstance(password, str):
        raise WeakPassword("Password must be a string.")

    user = register_user(name, normalize_email(payload.get("email")), password)

    return (
        jsonify(
            {
                "success": True,
                "message": "User registered successfully.",
                "user": user.to_summary(),
            }
        ),
        HTTPStatus.CREATED,
    )


@auth_bp.route("/login", methods=["POST"])
def login() -> tuple:
    """Authenticate a user and return a signed bearer token."""
    payload = parse_json_request(
        request,
        required_keys=("email", "password"),
        missing_error=MissingCredentials,
    )
    password = payload.get("password")
    if not isinstance(password, str):
        raise MissingCredentials("Email and password required.")

    user = authenticate(normalize_email(payload.get("email")), password)

    return (
        jsonify(
            {
                "success": True,
                "token": issue_access_token(user),
                "user": user.to_summary(),
            }
        ),
        HTTPStatus.OK,
    )


@auth_bp.route("/password-reset", methods=["POST"])
def request_reset() -> tuple:
    """Start a password reset; the answer never reveals whether the email exists."""
    payload = parse_json_request(request, missing_error=InvalidEmail)
    email = normalize_email(payload.get("email"))
    if not is_valid_email(email):
        raise InvalidEmail("Valid email required.")

    request_password_reset(email)

    return (
        jsonify({"success": True, "message": GENERIC_RESET_MESSAGE}),
        HTTPStatus.OK,
    )


@auth_bp.route("/password-reset/<token>", methods=["GET"])
def validate_reset_token(token: str) -> tuple:
    """Report whether a reset token can still be used, without consuming it."""
    if find_valid_token(token) is None:
        return (
            jsonify(
                {
                    "success": False,
                    "valid": False,
                    "error": "Invalid or expired token",
                    "code": "INVALID_OR_EXPIRED",
                }
            ),
            HTTPStatus.BAD_REQUEST,
        )

    return (
        jsonify({"success": True, "valid": True, "message": "Token is valid"}),
        HTTPStatus.OK,
    )


@auth_bp.route("/password-reset/<token>", methods=["POST"])
def submit_reset(token: str) -> tuple:
    """Consume a reset token and set the new password."""
    payload = parse_json_request(request, missing_error=WeakPassword)
    password = payload.get("password")
    if not isinstance(password, str):
        raise WeakPassword("Password is required.")

    reset_password(token, password)

    return (
        jsonify({"success": True, "message": "Password reset successful"}),
        HTTPStatus.OK,
    )
