"""Authentication blueprint: accounts, sign-in, password reset and roles."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, request

from models import db
from models.user import ADMIN, User
from services import user_service
from utils.request_validation import parse_json_request
from utils.responses import envelope
from utils.security import role_required

auth_bp = Blueprint("auth", __name__)


def _auth_data(user: User, token: str) -> dict:
    return {
        "token": token,
        "id": user.id,
        "email": user.email,
        "firstName": user.first_name,
        "lastName": user.last_name,
        "roles": user.role_names,
    }


@auth_bp.route("/signup", methods=["POST"])
def signup() -> tuple:
    """Register a new renter account."""
    payload = parse_json_request(
        request, required_keys=("firstName", "lastName", "email", "password")
    )
    user, token = user_service.signup(
        db.session,
        first_name=str(payload["firstName"]).strip(),
        last_name=str(payload["lastName"]).strip(),
        email=str(payload["email"]),
        password=str(payload["password"]),
    )
    return envelope("User created successfully", _auth_data(user, token), HTTPStatus.CREATED)


@auth_bp.route("/signin", methods=["POST"])
def signin() -> tuple:
    """Authenticate with email and password."""
    payload = parse_json_request(request, required_keys=("email", "password"))
    user, token = user_service.login(
        db.session, str(payload["email"]), str(payload["password"])
    )
    return envelope("Login successful", _auth_data(user, token))


@auth_bp.route("/google-authenticate", methods=["POST"])
def google_authenticate() -> tuple:
    payload = parse_json_request(request)
    user, token = user_service.google_authenticate(db.session, payload.get("token"))
    return envelope("Google authentication successful", _auth_data(user, token))


@auth_bp.route("/request-password-reset", methods=["POST"])
def request_password_reset() -> tuple:
    payload = parse_json_request(request, required_keys=("email",))
    user_service.request_password_reset(db.session, str(payload["email"]))
    return envelope("OTP sent to your email", include_data=False)


@auth_bp.route("/reset-password", methods=["POST"])
def reset_password() -> tuple:
    payload = parse_json_request(request, required_keys=("email", "otp", "newPassword"))
    user_service.reset_password(
        db.session,
        str(payload["email"]),
        str(payload["otp"]),
        str(payload["newPassword"]),
    )
    return envelope("Password reset successfully", include_data=False)


@auth_bp.route("/users", methods=["GET"])
def list_users() -> tuple:
    users = user_service.list_users(db.session)
    return envelope("Users fetched successfully", [user.to_dict() for user in users])


@auth_bp.route("/delete/<int:user_id>", methods=["DELETE"])
@role_required()
def delete_user(user_id: int) -> tuple:
    user_service.delete_user(db.session, user_id)
    return envelope("User deleted successfully", include_data=False)


@auth_bp.route("/update/<int:user_id>", methods=["PUT"])
@role_required(ADMIN)
def update_user_role(user_id: int) -> tuple:
    """Toggle a user between the HOST and RENTER roles."""
    record = user_service.toggle_user_role(db.session, user_id)
    return envelope("User role updated successfully", record.to_dict())


@auth_bp.route("/user/count-by-month/<int:year>", methods=["GET"])
def users_count_by_month(year: int) -> tuple:
    counts = user_service.users_count_by_month(db.session, year)
    return envelope("Users count by month fetched successfully", counts)
