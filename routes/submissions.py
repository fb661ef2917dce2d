"""Public contact and recommendation submissions."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request

from models import db
from models.contact_submission import ContactSubmission
from models.recommendation import Recommendation
from services.mailer import mailer
from services.notifications import contact_email, recommendation_email
from utils.errors import InvalidEmail, MissingFields
from utils.request_validation import clean_text, is_valid_email, parse_json_request

submissions_bp = Blueprint("submissions", __name__)

CONTACT_FIELDS = ("name", "email", "subject", "message")
RECOMMENDATION_FIELDS = ("name", "position", "company", "recommendation")


def _require_text_fields(payload: dict, fields: tuple[str, ...]) -> dict[str, str]:
    values = {field: clean_text(payload.get(field)) for field in fields}
    missing = [field for field, value in values.items() if not value]
    if missing:
        raise MissingFields(
            "All fields are required: {}.".format(", ".join(fields))
        )
    return values


@submissions_bp.route("/contact", methods=["POST"])
def submit_contact():
    """Store a contact message and notify the site owner."""

    payload = parse_json_request(request)
    values = _require_text_fields(payload, CONTACT_FIELDS)
    if not is_valid_email(values["email"]):
        raise InvalidEmail("Invalid email format.")

    submission = ContactSubmission(**values)
    db.session.add(submission)
    db.session.commit()

    receiver = current_app.config.get("CONTACT_RECEIVER")
    if receiver:
        mailer.dispatch(
            contact_email(
                mailer,
                receiver,
                values["name"],
                values["email"],
                values["subject"],
                values["message"],
            )
        )

    return (
        jsonify(
            {
                "success": True,
                "message": "Message received successfully",
                "id": submission.id,
            }
        ),
        HTTPStatus.CREATED,
    )


@submissions_bp.route("/recommendations", methods=["POST"])
def submit_recommendation():
    """Store an unapproved recommendation for admin review."""

    payload = parse_json_request(request)
    values = _require_text_fields(payload, RECOMMENDATION_FIELDS)

    recommendation = Recommendation(**values, approved=False)
    db.session.add(recommendation)
    db.session.commit()

    receiver = current_app.config.get("ADMIN_NOTIFY_EMAIL")
    if receiver:
        admin_url = current_app.config.get("FRONTEND_URL", "").rstrip("/") + "/admin"
        mailer.dispatch(
            recommendation_email(
                mailer,
                receiver,
                values["name"],
                values["position"],
                values["company"],
                admin_url,
            )
        )

    return (
        jsonify(
            {
                "success": True,
                "message": "Recommendation submitted successfully",
                "id": recommendation.id,
            }
        ),
        HTTPStatus.CREATED,
    )
