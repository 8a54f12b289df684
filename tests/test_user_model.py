"""Tests for the User model helpers."""

from datetime import datetime, timedelta

from models import db
from models.user import ADMIN, HOST, RENTER, User, UserRole


def test_password_helpers(app):
    """Passwords are stored hashed and verified against the hash."""

    with app.app_context():
        user = User(email="helper@example.com", first_name="Hel", last_name="Per")
        assert user.check_password("anything") is False

        user.set_password("password123")
        db.session.add(user)
        db.session.commit()

        assert user.password_hash != "password123"
        assert user.check_password("password123") is True
        assert user.check_password("password124") is False


def test_one_time_code_lifecycle():
    user = User(email="otp@example.com", first_name="O", last_name="Tp")
    issued_at = datetime(2024, 5, 1, 12, 0)

    otp = user.issue_otp(60, now=issued_at)

    assert len(otp) == 6
    assert user.otp_expires_at == issued_at + timedelta(hours=1)
    assert user.otp_matches(otp.lower(), now=issued_at + timedelta(minutes=59))
    assert not user.otp_matches("000000" if otp != "000000" else "111111", now=issued_at)
    assert not user.otp_matches(otp, now=issued_at + timedelta(hours=1))

    user.clear_otp()
    assert user.otp is None
    assert not user.otp_matches(otp, now=issued_at)


def test_role_helpers_and_serialization(app):
    with app.app_context():
        user = User(email="roles@example.com", first_name="Ro", last_name="Les")
        user.set_password("secret")
        user.roles.append(UserRole(role=HOST))
        user.roles.append(UserRole(role=ADMIN))
        db.session.add(user)
        db.session.commit()

        assert user.role_names == [HOST, ADMIN]
        assert user.has_role(ADMIN)
        assert user.has_role(RENTER, HOST)
        assert not user.has_role(RENTER)

        data = user.to_dict()
        assert data["email"] == "roles@example.com"
        assert data["firstName"] == "Ro"
        assert data["roles"] == [HOST, ADMIN]
        assert "password_hash" not in data
        assert "otp" not in data
        assert data["createdAt"]


def test_deleting_user_removes_roles(app):
    with app.app_context():
        user = User(email="gone@example.com", first_name="Go", last_name="Ne")
        user.roles.append(UserRole(role=RENTER))
        db.session.add(user)
        db.session.commit()
        user_id = user.id

        db.session.delete(user)
        db.session.commit()

        assert UserRole.query.filter_by(user_id=user_id).count() == 0
