"""Token issuance, role gates and federated identity verification."""

from __future__ import annotations

from functools import wraps

from flask import current_app, g, jsonify
from flask_jwt_extended import JWTManager, create_access_token, current_user, jwt_required
from google.auth import exceptions as google_exceptions
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token
from werkzeug.exceptions import Forbidden, Unauthorized

from models import db
from models.user import User
from utils.responses import error_payload

jwt = JWTManager()


def issue_token(user: User) -> str:
    """Return a signed access token for ``user``.

    Every login path uses this helper so tokens always carry the same claims:
    the user id as subject and the email as an extra claim.
    """

    return create_access_token(identity=str(user.id), additional_claims={"email": user.email})


@jwt.user_lookup_loader
def _load_user(_jwt_header, jwt_data) -> User | None:
    try:
        user_id = int(jwt_data["sub"])
    except (KeyError, TypeError, ValueError):
        return None
    return db.session.get(User, user_id)


def _unauthorized(message: str):
    payload = error_payload(401, message, "Unauthorized", g.get("request_id"))
    return jsonify(payload), 401


@jwt.unauthorized_loader
def _missing_token(_reason: str):
    return _unauthorized("Missing authorization token.")


@jwt.invalid_token_loader
def _invalid_token(_reason: str):
    return _unauthorized("Invalid authorization token.")


@jwt.expired_token_loader
def _expired_token(_jwt_header, _jwt_payload):
    return _unauthorized("Authorization token has expired.")


@jwt.user_lookup_error_loader
def _unknown_user(_jwt_header, _jwt_payload):
    return _unauthorized("User account not found.")


def role_required(*roles: str):
    """Require a valid token whose user currently holds one of ``roles``.

    Roles are read from the database on every request, never from the token.
    With no roles given any authenticated user passes.
    """

    def decorator(fn):
        @wraps(fn)
        @jwt_required()
        def wrapper(*args, **kwargs):
            user = current_user
            if roles and not user.has_role(*roles):
                current_app.logger.warning(
                    "User %s denied access to %s (requires %s)",
                    user.id,
                    fn.__name__,
                    ", ".join(roles),
                )
                raise Forbidden("You do not have permission to perform this action.")
            return fn(*args, **kwargs)

        return wrapper

    return decorator


def verify_google_id_token(token: str | None) -> dict:
    """Verify a Google ID token against the configured client id."""

    audience = current_app.config.get("GOOGLE_CLIENT_ID")
    if not audience:
        current_app.logger.error("GOOGLE_CLIENT_ID is not configured")
        raise Unauthorized("Google sign-in is not configured.")
    if not token:
        raise Unauthorized("Invalid Google token")

    try:
        payload = id_token.verify_oauth2_token(token, google_requests.Request(), audience)
    except (ValueError, google_exceptions.GoogleAuthError) as error:
        current_app.logger.warning("Google token verification failed: %s", error)
        raise Unauthorized("Invalid Google token") from error

    if not payload:
        raise Unauthorized("Invalid Google token")
    return payload
