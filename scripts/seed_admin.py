"""Seed an administrator user."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app  # noqa: E402
from models import db  # noqa: E402
from models.user import ADMIN, User, UserRole  # noqa: E402

ADMIN_EMAIL = "admin@gmail.com"
ADMIN_PASSWORD = "abc123"


def main() -> None:
    app = create_app()
    with app.app_context():
        admin = User.query.filter_by(email=ADMIN_EMAIL).first()
        if admin is None:
            admin = User(email=ADMIN_EMAIL, first_name="LaLa", last_name="Homes Admin")
            db.session.add(admin)
            action = "created"
        else:
            action = "updated"
        admin.set_password(ADMIN_PASSWORD)
        if not admin.has_role(ADMIN):
            admin.roles.append(UserRole(role=ADMIN))
        db.session.commit()
        print(f"Admin user {action}: {ADMIN_EMAIL}")


if __name__ == "__main__":
    main()
