"""Admin console: user roles, moderation queues and blog authoring."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, current_app, jsonify, request
from werkzeug.exceptions import BadRequest

from models import db
from models.blog import CONTENT_TYPES, Blog
from models.contact_submission import ASSIGNABLE_CONTACT_ROLES, ContactSubmission
from models.recommendation import Recommendation
from models.user import USER_ROLES, User
from utils.authz import admin_required, current_role, current_user_id, editor_required
from utils.errors import InvalidRole, MissingFields, NotOwner, ResourceNotFound
from utils.request_validation import clean_text, parse_json_request

admin_bp = Blueprint("admin", __name__)


def _get_or_404(model, object_id: int, label: str):
    instance = db.session.get(model, object_id)
    if instance is None:
        raise ResourceNotFound(f"{label} not found.")
    return instance


def _parse_role(payload: dict, allowed: tuple[str, ...]) -> str:
    role = clean_text(payload.get("role")).lower()
    if role not in allowed:
        choices = ", ".join(f"'{value}'" for value in allowed)
        raise InvalidRole(f"Invalid role value. Allowed values: {choices}")
    return role


# Users


@admin_bp.route("/users", methods=["GET"])
@admin_required
def list_users():
    users = User.query.order_by(User.created_at.desc(), User.id.desc()).all()
    return jsonify({"success": True, "data": [user.to_dict() for user in users]})


@admin_bp.route("/users/<int:user_id>", methods=["PUT"])
@admin_required
def update_user_role(user_id: int):
    """Change a user's role; only administrators may do this."""

    payload = parse_json_request(request)
    role = _parse_role(payload, USER_ROLES)
    user = _get_or_404(User, user_id, "User")

    user.role = role
    db.session.commit()
    current_app.logger.info(
        "User %s role set to %s by admin %s", user.id, role, current_user_id()
    )

    return jsonify(
        {
            "success": True,
            "message": "User role updated successfully",
            "data": {"id": user.id, "role": user.role},
        }
    )


@admin_bp.route("/users/<int:user_id>", methods=["DELETE"])
@admin_required
def delete_user(user_id: int):
    user = _get_or_404(User, user_id, "User")
    db.session.delete(user)
    db.session.commit()
    current_app.logger.info("User %s deleted by admin %s", user_id, current_user_id())

    return jsonify(
        {
            "success": True,
            "message": "User deleted successfully",
            "data": {"id": user_id},
        }
    )


# Recommendations


@admin_bp.route("/recommendations", methods=["GET"])
@admin_required
def list_recommendations():
    recommendations = Recommendation.query.order_by(
        Recommendation.created_at.desc(), Recommendation.id.desc()
    ).all()
    return jsonify({"success": True, "data": [item.to_dict() for item in recommendations]})


@admin_bp.route("/recommendations/<int:recommendation_id>", methods=["PUT"])
@admin_required
def update_recommendation(recommendation_id: int):
    """Edit a recommendation or toggle its approval."""

    payload = parse_json_request(request)
    recommendation = _get_or_404(Recommendation, recommendation_id, "Recommendation")

    for field in ("name", "position", "company", "recommendation"):
        if field in payload:
            value = clean_text(payload.get(field))
            if not value:
                raise BadRequest(f"{field} must not be empty.")
            setattr(recommendation, field, value)
    if "approved" in payload:
        if not isinstance(payload["approved"], bool):
            raise BadRequest("approved must be a boolean.")
        recommendation.approved = payload["approved"]

    db.session.commit()
    return jsonify(
        {
            "success": True,
            "message": "Recommendation updated",
            "data": recommendation.to_dict(),
        }
    )


@admin_bp.route("/recommendations/<int:recommendation_id>", methods=["DELETE"])
@admin_required
def delete_recommendation(recommendation_id: int):
    recommendation = _get_or_404(Recommendation, recommendation_id, "Recommendation")
    db.session.delete(recommendation)
    db.session.commit()
    return jsonify({"success": True, "message": "Recommendation deleted"})


# Contacts


@admin_bp.route("/contacts", methods=["GET"])
@admin_required
def list_contacts():
    contacts = ContactSubmission.query.order_by(
        ContactSubmission.created_at.desc(), ContactSubmission.id.desc()
    ).all()
    return jsonify({"success": True, "data": [contact.to_dict() for contact in contacts]})


@admin_bp.route("/contacts/<int:contact_id>", methods=["PUT"])
@admin_required
def update_contact_role(contact_id: int):
    payload = parse_json_request(request)
    role = _parse_role(payload, ASSIGNABLE_CONTACT_ROLES)
    contact = _get_or_404(ContactSubmission, contact_id, "Contact")

    contact.role = role
    db.session.commit()
    return jsonify(
        {
            "success": True,
            "message": "Contact role updated successfully",
            "role": contact.role,
        }
    )


@admin_bp.route("/contacts/<int:contact_id>", methods=["DELETE"])
@admin_required
def delete_contact(contact_id: int):
    contact = _get_or_404(ContactSubmission, contact_id, "Contact")
    db.session.delete(contact)
    db.session.commit()
    return jsonify({"success": True, "message": "Contact deleted"})


# Blogs


def _parse_content_type(payload: dict) -> str:
    content_type = clean_text(payload.get("contentType") or payload.get("content_type")) or "plain"
    if content_type not in CONTENT_TYPES:
        raise BadRequest(f"contentType must be one of: {', '.join(CONTENT_TYPES)}.")
    return content_type


def _get_owned_blog(blog_id: int, action: str) -> Blog:
    """Editors may only touch their own posts; admins may touch any."""

    blog = _get_or_404(Blog, blog_id, "Blog")
    if current_role() != "admin" and blog.author_id != current_user_id():
        raise NotOwner(f"You can only {action} your own blogs.")
    return blog


@admin_bp.route("/blogs", methods=["POST"])
@editor_required
def create_blog():
    payload = parse_json_request(request)
    title = clean_text(payload.get("title"))
    content = payload.get("content") if isinstance(payload.get("content"), str) else ""
    if not title or not content.strip():
        raise MissingFields("Title and content required.")

    blog = Blog(
        title=title,
        content=content,
        content_type=_parse_content_type(payload),
        author_id=current_user_id(),
    )
    db.session.add(blog)
    db.session.commit()

    return (
        jsonify({"success": True, "message": "Blog created", "data": blog.to_dict()}),
        HTTPStatus.CREATED,
    )


@admin_bp.route("/blogs/<int:blog_id>", methods=["PUT"])
@editor_required
def update_blog(blog_id: int):
    payload = parse_json_request(request)
    blog = _get_owned_blog(blog_id, "edit")

    if "title" in payload:
        title = clean_text(payload.get("title"))
        if not title:
            raise BadRequest("title must not be empty.")
        blog.title = title
    if "content" in payload:
        content = payload.get("content")
        if not isinstance(content, str) or not content.strip():
            raise BadRequest("content must not be empty.")
        blog.content = content
    if "contentType" in payload or "content_type" in payload:
        blog.content_type = _parse_content_type(payload)

    db.session.commit()
    return jsonify({"success": True, "message": "Blog updated", "data": blog.to_dict()})


@admin_bp.route("/blogs/<int:blog_id>", methods=["DELETE"])
@editor_required
def delete_blog(blog_id: int):
    blog = _get_owned_blog(blog_id, "delete")
    db.session.delete(blog)
    db.session.commit()
    return jsonify({"success": True, "message": "Blog deleted"})
