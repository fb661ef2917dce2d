"""Helpers shared by the test modules."""

from __future__ import annotations

from flask import Flask
from flask.testing import FlaskClient

from models import db
from models.user import User


def create_user(
    app: Flask,
    email: str,
    password: str = "password123",
    *,
    name: str = "Test User",
    role: str = "viewer",
) -> int:
    """Persist a user and return its id."""

    with app.app_context():
        user = User(name=name, email=email, role=role)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        return user.id


def login(client: FlaskClient, email: str, password: str = "password123") -> str:
    response = client.post("/api/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.get_json()
    return response.get_json()["token"]


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
