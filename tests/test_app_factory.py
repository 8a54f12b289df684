"""Tests for the Flask application factory."""
from __future__ import annotations


def test_health_endpoint_returns_ok(client, upload_dir):
    """The health endpoint should respond with an OK payload and create uploads dir."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}
    # uploads dir is configured via TestConfig in conftest and created on app init
    assert upload_dir.is_dir()


def test_blueprints_registered(app):
    """Application factory should register every API blueprint under /api."""
    assert {"auth", "properties", "bookings"}.issubset(app.blueprints.keys())

    rules = {rule.rule for rule in app.url_map.iter_rules()}
    assert "/api/auth/signup" in rules
    assert "/api/property" in rules
    assert "/api/booking" in rules


def test_uploaded_files_are_served(app, client):
    path = f"{app.config['UPLOAD_DIR']}/photo.png"
    with open(path, "wb") as handle:
        handle.write(b"fake-png")

    response = client.get("/uploads/photo.png")

    assert response.status_code == 200
    assert response.data == b"fake-png"
    response.close()
