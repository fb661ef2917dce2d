"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from services.mailer import mailer as app_mailer  # noqa: E402


class _BaseTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    FRONTEND_URL = "https://portfolio.example"
    CORS_ORIGINS = ["https://portfolio.example"]
    RATELIMIT_KEY_PREFIX = ""
    MAIL_SUPPRESS_SEND = True
    MAIL_ASYNC = False
    MAIL_DEFAULT_SENDER = "Portfolio System <noreply@portfolio.example>"
    CONTACT_RECEIVER = "owner@portfolio.example"
    ADMIN_NOTIFY_EMAIL = "owner@portfolio.example"


def build_app(**overrides) -> Flask:
    """Create an application with test configuration and a fresh schema."""

    class TestConfig(_BaseTestConfig):
        pass

    for key, value in overrides.items():
        setattr(TestConfig, key, value)

    application = create_app(TestConfig)
    with application.app_context():
        db.create_all()
    return application


@pytest.fixture()
def app() -> Flask:
    """Create a Flask application instance for tests."""

    application = build_app()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def mailer(app: Flask):
    """The application's mailer, collecting messages instead of sending them."""

    return app_mailer
