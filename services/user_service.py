"""User accounts: signup, login, password reset and role management."""

from __future__ import annotations

from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from werkzeug.exceptions import BadRequest, Conflict, NotFound, Unauthorized

from models.booking import Booking
from models.property import Property
from models.user import HOST, RENTER, User, UserRole
from services.reporting import monthly_counts
from utils import security
from utils.email import send_password_reset_email
from utils.transactions import atomic


def normalize_email(raw_email: str | None) -> str:
    """Normalize an email string by stripping whitespace and lowering case."""
    return (raw_email or "").strip().lower()


def find_user_by_email(session: Session, email: str) -> User | None:
    return (
        session.query(User)
        .filter(func.lower(User.email) == normalize_email(email))
        .first()
    )


def get_user_or_404(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def list_users(session: Session) -> list[User]:
    return session.query(User).order_by(User.id).all()


def _create_renter(session: Session, user: User) -> User:
    """Persist ``user`` together with the default RENTER role in one unit."""

    user.roles.append(UserRole(role=RENTER))
    try:
        with atomic(session):
            session.add(user)
    except IntegrityError as error:
        raise Conflict("User already exists") from error
    return user


def signup(
    session: Session,
    first_name: str,
    last_name: str,
    email: str,
    password: str,
) -> tuple[User, str]:
    """Register a renter account and return it with an access token."""

    email = normalize_email(email)
    if find_user_by_email(session, email) is not None:
        current_app.logger.warning("Signup rejected, email already registered: %s", email)
        raise Conflict("User already exists")

    user = User(email=email, first_name=first_name, last_name=last_name)
    user.set_password(password)
    user = _create_renter(session, user)
    current_app.logger.info("User %s signed up", user.id)
    return user, security.issue_token(user)


def login(session: Session, email: str, password: str) -> tuple[User, str]:
    user = find_user_by_email(session, email)
    if user is None or not user.check_password(password):
        current_app.logger.warning("Failed login for %s", normalize_email(email))
        raise Unauthorized("Invalid email or password.")
    return user, security.issue_token(user)


def google_authenticate(session: Session, token: str | None) -> tuple[User, str]:
    """Sign a user in with a Google ID token, creating the account if needed."""

    payload = security.verify_google_id_token(token)

    email = normalize_email(payload.get("email"))
    if not email:
        raise Unauthorized("Email not found in Google token")

    given_name = payload.get("given_name")
    family_name = payload.get("family_name")
    if not given_name or not family_name:
        raise Unauthorized("Names not found in Google token")

    user = find_user_by_email(session, email)
    if user is None:
        try:
            user = _create_renter(
                session,
                User(email=email, first_name=given_name, last_name=family_name),
            )
        except Conflict:
            # Created by a concurrent request; use that account.
            user = find_user_by_email(session, email)
            if user is None:
                raise
        else:
            current_app.logger.info("User %s created through Google sign-in", user.id)

    return user, security.issue_token(user)


def request_password_reset(session: Session, email: str) -> None:
    """Store a fresh one-time code on the user and email it to them."""

    user = find_user_by_email(session, email)
    if user is None:
        raise NotFound("User not found")

    ttl = int(current_app.config.get("OTP_TTL_MINUTES", 60))
    otp = user.issue_otp(ttl)
    session.commit()

    send_password_reset_email(user.email, user.first_name, otp, ttl)
    current_app.logger.info("Password reset code issued for user %s", user.id)


def reset_password(session: Session, email: str, otp: str, new_password: str) -> None:
    user = find_user_by_email(session, email)
    if user is None:
        raise NotFound("User not found")

    if not user.otp_matches(otp):
        current_app.logger.warning("Invalid or expired reset code for user %s", user.id)
        raise BadRequest("Invalid or expired OTP")

    user.set_password(new_password)
    user.clear_otp()
    session.commit()
    current_app.logger.info("Password reset for user %s", user.id)


def delete_user(session: Session, user_id: int) -> None:
    """Delete a user and their role rows as one unit."""

    user = get_user_or_404(session, user_id)

    owns_listings = session.query(Property.id).filter(Property.user_id == user.id).first()
    has_bookings = session.query(Booking.id).filter(Booking.user_id == user.id).first()
    if owns_listings or has_bookings:
        raise Conflict("User still owns properties or bookings.")

    # Role rows are removed by the delete-orphan cascade before the user row.
    with atomic(session):
        session.delete(user)
    current_app.logger.info("User %s deleted", user_id)


def toggle_user_role(session: Session, user_id: int) -> UserRole:
    """Flip the user's HOST/RENTER role. ADMIN rows are left alone."""

    user = get_user_or_404(session, user_id)
    record = next((item for item in user.roles if item.role in (HOST, RENTER)), None)
    if record is None:
        raise NotFound("User has no host or renter role")

    record.role = RENTER if record.role == HOST else HOST
    session.commit()
    current_app.logger.info("User %s role changed to %s", user.id, record.role)
    return record


def users_count_by_month(session: Session, year: int) -> list[int]:
    return monthly_counts(session.query(User), User.created_at, year)
