"""Tests for the bearer token gate and the admin console."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt as pyjwt
import pytest
from flask_jwt_extended import create_access_token

from models import db
from models.blog import Blog
from models.contact_submission import ContactSubmission
from models.password_reset_token import PasswordResetToken
from models.recommendation import Recommendation
from models.user import User
from tests.helpers import auth_headers, create_user, login


@pytest.fixture()
def admin_token(app, client) -> str:
    create_user(app, "admin@x.com", role="admin", name="Admin")
    return login(client, "admin@x.com")


@pytest.fixture()
def editor_token(app, client) -> str:
    create_user(app, "editor@x.com", role="editor", name="Editor")
    return login(client, "editor@x.com")


@pytest.fixture()
def viewer_token(app, client) -> str:
    create_user(app, "viewer@x.com", name="Viewer")
    return login(client, "viewer@x.com")


def test_missing_token_is_401(client):
    response = client.get("/api/admin/users")

    assert response.status_code == 401
    assert response.get_json()["code"] == "MISSING_TOKEN"


@pytest.mark.parametrize("header", ["Token xyz", "Bearer", "Basic dXNlcjpwYXNz"])
def test_malformed_authorization_header_is_403(client, header):
    response = client.get("/api/admin/users", headers={"Authorization": header})

    assert response.status_code == 403
    assert response.get_json()["code"] == "INVALID_TOKEN"


def test_forged_token_is_403(client):
    response = client.get("/api/admin/users", headers=auth_headers("not.a.jwt"))

    assert response.status_code == 403
    assert response.get_json()["code"] == "INVALID_TOKEN"


def test_token_signed_with_other_secret_is_403(client):
    now = datetime.now(timezone.utc)
    forged = pyjwt.encode(
        {"sub": "1", "type": "access", "role": "admin", "iat": now, "exp": now + timedelta(hours=1)},
        "a-completely-different-secret-key-value",
        algorithm="HS256",
    )

    response = client.get("/api/admin/users", headers=auth_headers(forged))

    assert response.status_code == 403
    assert response.get_json()["code"] == "INVALID_TOKEN"


def test_expired_token_is_403(client, app):
    with app.app_context():
        token = create_access_token(
            identity="1",
            additional_claims={"role": "admin"},
            expires_delta=timedelta(seconds=-1),
        )

    response = client.get("/api/admin/users", headers=auth_headers(token))

    assert response.status_code == 403
    assert response.get_json()["code"] == "INVALID_TOKEN"


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/api/admin/users"),
        ("get", "/api/admin/contacts"),
        ("get", "/api/admin/recommendations"),
        ("delete", "/api/admin/users/1"),
    ],
)
def test_admin_routes_reject_editors(client, editor_token, method, path):
    response = getattr(client, method)(path, headers=auth_headers(editor_token))

    assert response.status_code == 403
    assert response.get_json()["code"] == "ADMIN_REQUIRED"


def test_blog_routes_reject_viewers(client, viewer_token):
    response = client.post(
        "/api/admin/blogs",
        json={"title": "t", "content": "c"},
        headers=auth_headers(viewer_token),
    )

    assert response.status_code == 403
    assert response.get_json()["code"] == "EDITOR_REQUIRED"


def test_admin_lists_users(client, admin_token, viewer_token):
    response = client.get("/api/admin/users", headers=auth_headers(admin_token))

    assert response.status_code == 200
    data = response.get_json()["data"]
    assert {user["email"] for user in data} == {"admin@x.com", "viewer@x.com"}
    assert all("password_hash" not in user for user in data)


def test_admin_updates_user_role(client, app, admin_token):
    user_id = create_user(app, "someone@x.com")

    response = client.put(
        f"/api/admin/users/{user_id}",
        json={"role": "editor"},
        headers=auth_headers(admin_token),
    )

    assert response.status_code == 200
    assert response.get_json()["data"] == {"id": user_id, "role": "editor"}
    with app.app_context():
        assert db.session.get(User, user_id).role == "editor"


def test_role_change_applies_on_next_login(client, app, admin_token):
    user_id = create_user(app, "someone@x.com")
    client.put(
        f"/api/admin/users/{user_id}",
        json={"role": "editor"},
        headers=auth_headers(admin_token),
    )

    token = login(client, "someone@x.com")
    response = client.post(
        "/api/admin/blogs",
        json={"title": "Hello", "content": "World"},
        headers=auth_headers(token),
    )

    assert response.status_code == 201


def test_admin_update_role_validation(client, app, admin_token):
    user_id = create_user(app, "someone@x.com")

    bad_role = client.put(
        f"/api/admin/users/{user_id}",
        json={"role": "owner"},
        headers=auth_headers(admin_token),
    )
    missing = client.put(
        "/api/admin/users/9999",
        json={"role": "viewer"},
        headers=auth_headers(admin_token),
    )

    assert bad_role.status_code == 400
    assert bad_role.get_json()["code"] == "INVALID_ROLE"
    assert missing.status_code == 404
    assert missing.get_json()["code"] == "NOT_FOUND"


def test_admin_deletes_user_and_their_tokens(client, app, admin_token):
    user_id = create_user(app, "someone@x.com")
    client.post("/api/password-reset", json={"email": "someone@x.com"})

    response = client.delete(f"/api/admin/users/{user_id}", headers=auth_headers(admin_token))

    assert response.status_code == 200
    assert response.get_json()["data"] == {"id": user_id}
    with app.app_context():
        assert db.session.get(User, user_id) is None
        assert PasswordResetToken.query.filter_by(user_id=user_id).count() == 0

    again = client.delete(f"/api/admin/users/{user_id}", headers=auth_headers(admin_token))
    assert again.status_code == 404


def test_admin_moderates_recommendations(client, app, admin_token):
    with app.app_context():
        item = Recommendation(
            name="Bob", position="CTO", company="Acme", recommendation="Great work"
        )
        db.session.add(item)
        db.session.commit()
        item_id = item.id

    listed = client.get("/api/admin/recommendations", headers=auth_headers(admin_token))
    assert [row["id"] for row in listed.get_json()["data"]] == [item_id]

    approved = client.put(
        f"/api/admin/recommendations/{item_id}",
        json={"approved": True},
        headers=auth_headers(admin_token),
    )
    assert approved.status_code == 200
    assert approved.get_json()["data"]["approved"] is True

    deleted = client.delete(
        f"/api/admin/recommendations/{item_id}", headers=auth_headers(admin_token)
    )
    assert deleted.status_code == 200
    with app.app_context():
        assert Recommendation.query.count() == 0


def test_admin_moderates_contacts(client, app, admin_token):
    with app.app_context():
        contact = ContactSubmission(
            name="Eve", email="eve@x.com", subject="Hi", message="Hello there"
        )
        db.session.add(contact)
        db.session.commit()
        contact_id = contact.id

    promoted = client.put(
        f"/api/admin/contacts/{contact_id}",
        json={"role": "editor"},
        headers=auth_headers(admin_token),
    )
    rejected = client.put(
        f"/api/admin/contacts/{contact_id}",
        json={"role": "admin"},
        headers=auth_headers(admin_token),
    )

    assert promoted.status_code == 200
    assert promoted.get_json()["role"] == "editor"
    assert rejected.status_code == 400
    assert rejected.get_json()["code"] == "INVALID_ROLE"

    assert client.delete(
        f"/api/admin/contacts/{contact_id}", headers=auth_headers(admin_token)
    ).status_code == 200
    assert client.delete(
        f"/api/admin/contacts/{contact_id}", headers=auth_headers(admin_token)
    ).status_code == 404


def test_editor_creates_and_edits_own_blog(client, app, editor_token):
    created = client.post(
        "/api/admin/blogs",
        json={"title": "First", "content": "Body", "contentType": "markdown"},
        headers=auth_headers(editor_token),
    )
    assert created.status_code == 201
    blog = created.get_json()["data"]
    assert blog["author_name"] == "Editor"
    assert blog["content_type"] == "markdown"

    updated = client.put(
        f"/api/admin/blogs/{blog['id']}",
        json={"title": "Renamed"},
        headers=auth_headers(editor_token),
    )
    assert updated.status_code == 200
    assert updated.get_json()["data"]["title"] == "Renamed"


def test_editor_cannot_touch_other_authors_blog(client, app, editor_token, admin_token):
    created = client.post(
        "/api/admin/blogs",
        json={"title": "Admin post", "content": "Body"},
        headers=auth_headers(admin_token),
    )
    blog_id = created.get_json()["data"]["id"]

    edit = client.put(
        f"/api/admin/blogs/{blog_id}",
        json={"title": "Hijacked"},
        headers=auth_headers(editor_token),
    )
    delete = client.delete(f"/api/admin/blogs/{blog_id}", headers=auth_headers(editor_token))

    assert edit.status_code == 403
    assert edit.get_json()["code"] == "NOT_OWNER"
    assert delete.status_code == 403
    with app.app_context():
        assert db.session.get(Blog, blog_id).title == "Admin post"


def test_admin_can_delete_any_blog(client, app, editor_token, admin_token):
    created = client.post(
        "/api/admin/blogs",
        json={"title": "Editor post", "content": "Body"},
        headers=auth_headers(editor_token),
    )
    blog_id = created.get_json()["data"]["id"]

    response = client.delete(f"/api/admin/blogs/{blog_id}", headers=auth_headers(admin_token))

    assert response.status_code == 200
    assert client.delete(
        f"/api/admin/blogs/{blog_id}", headers=auth_headers(admin_token)
    ).status_code == 404


def test_blog_requires_title_and_content(client, editor_token):
    response = client.post(
        "/api/admin/blogs",
        json={"title": "Only a title"},
        headers=auth_headers(editor_token),
    )

    assert response.status_code == 400
    assert response.get_json()["code"] == "MISSING_FIELDS"
