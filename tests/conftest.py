"""Shared pytest fixtures for the rental API tests."""

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
from utils.email import mail  # noqa: E402


class _BaseTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = "test-secret-key-that-is-long-enough-for-hs256"
    GOOGLE_CLIENT_ID = "test-client-id.apps.googleusercontent.com"
    MAIL_DEFAULT_SENDER = "support@example.com"
    OTP_TTL_MINUTES = 60


@pytest.fixture()
def upload_dir(tmp_path) -> Path:
    """Directory that receives listing photos during a test."""

    return tmp_path / "uploads"


@pytest.fixture()
def app(upload_dir: Path) -> Flask:
    """Create a Flask application backed by a fresh in-memory database."""

    class TestConfig(_BaseTestConfig):
        UPLOAD_DIR = str(upload_dir)

    application = create_app(TestConfig)

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def mail_outbox(app: Flask):
    """Capture emails sent while the test runs; nothing leaves the process."""

    with mail.record_messages() as outbox:
        yield outbox
