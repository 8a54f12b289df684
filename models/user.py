"""User and role model definitions."""

import secrets
from datetime import datetime, timedelta
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from utils.dates import utcnow

from . import db


ADMIN = "ADMIN"
HOST = "HOST"
RENTER = "RENTER"
ROLES = (ADMIN, HOST, RENTER)


class User(db.Model):
    """Represents a platform user."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    first_name = db.Column(db.String(120), nullable=False)
    last_name = db.Column(db.String(120), nullable=False)
    # Empty for accounts created through Google sign-in.
    password_hash = db.Column(db.String(255), nullable=True)
    otp = db.Column(db.String(6), nullable=True)
    otp_expires_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    roles = db.relationship(
        "UserRole",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="UserRole.id",
    )

    def set_password(self, password: str) -> None:
        """Hash and store the password."""

        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def role_names(self) -> list[str]:
        return [record.role for record in self.roles]

    def has_role(self, *roles: str) -> bool:
        return any(name in roles for name in self.role_names)

    def issue_otp(self, ttl_minutes: int, now: Optional[datetime] = None) -> str:
        """Generate a six character hexadecimal one-time code and store it."""

        now = now or utcnow()
        self.otp = secrets.token_hex(3).upper()
        self.otp_expires_at = now + timedelta(minutes=ttl_minutes)
        return self.otp

    def otp_matches(self, otp: str, now: Optional[datetime] = None) -> bool:
        """Return True if ``otp`` equals the stored code and has not expired."""

        if not self.otp or not self.otp_expires_at:
            return False
        now = now or utcnow()
        if now >= self.otp_expires_at:
            return False
        return secrets.compare_digest(self.otp, (otp or "").strip().upper())

    def clear_otp(self) -> None:
        self.otp = None
        self.otp_expires_at = None

    def to_dict(self, include_roles: bool = True) -> dict:
        """Serialize the user without credentials."""

        data = {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_roles:
            data["roles"] = self.role_names
        return data

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"


class UserRole(db.Model):
    """A role held by a user."""

    __tablename__ = "user_roles"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role = db.Column(
        db.Enum(*ROLES, name="user_role_enum"),
        nullable=False,
        default=RENTER,
    )

    user = db.relationship("User", back_populates="roles")

    def to_dict(self) -> dict:
        return {"id": self.id, "userId": self.user_id, "role": self.role}

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<UserRole user_id={self.user_id} role={self.role}>"
