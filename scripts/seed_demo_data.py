"""Seed a demo host, renter, listings and bookings."""

import sys
from datetime import timedelta
from decimal import Decimal
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app  # noqa: E402
from models import db  # noqa: E402
from models.booking import CONFIRMED, PENDING, Booking  # noqa: E402
from models.property import Property  # noqa: E402
from models.user import HOST, RENTER, User, UserRole  # noqa: E402
from services.booking_service import count_nights  # noqa: E402
from utils.dates import utcnow  # noqa: E402


def get_or_create_user(email: str, first_name: str, last_name: str, role: str, password: str) -> User:
    user = User.query.filter_by(email=email).first()
    if user is None:
        user = User(email=email, first_name=first_name, last_name=last_name)
        db.session.add(user)
    user.set_password(password)
    if not user.roles:
        user.roles.append(UserRole(role=role))
    else:
        user.roles[0].role = role
    return user


LISTINGS = [
    {
        "title": "Lakeside Cabin",
        "location": "Kibuye, Rwanda",
        "description": "Two bedroom cabin with a private dock on Lake Kivu.",
        "price_per_night": Decimal("120.00"),
        "bedrooms": 2,
        "bathrooms": 1,
        "size": "85 m2",
        "pet_friendly": True,
        "gallery": [],
    },
    {
        "title": "City Loft",
        "location": "Kigali, Rwanda",
        "description": "Bright loft a short walk from the convention centre.",
        "price_per_night": Decimal("75.50"),
        "bedrooms": 1,
        "bathrooms": 1,
        "size": "48 m2",
        "pet_friendly": False,
        "gallery": [],
    },
]


def main() -> None:
    app = create_app()
    with app.app_context():
        host = get_or_create_user("host@example.com", "Hana", "Host", HOST, "HostPass123")
        renter = get_or_create_user("renter@example.com", "Remy", "Renter", RENTER, "RenterPass123")
        db.session.flush()

        listings = []
        for data in LISTINGS:
            listing = Property.query.filter_by(title=data["title"], user_id=host.id).first()
            if listing is None:
                listing = Property(user_id=host.id, **data)
                db.session.add(listing)
            else:
                for key, value in data.items():
                    setattr(listing, key, value)
            listings.append(listing)
        db.session.flush()

        check_in = utcnow() + timedelta(days=14)
        for listing, status, nights in ((listings[0], CONFIRMED, 3), (listings[1], PENDING, 2)):
            check_out = check_in + timedelta(days=nights)
            booking = Booking.query.filter_by(user_id=renter.id, property_id=listing.id).first()
            if booking is None:
                booking = Booking(user_id=renter.id, property_id=listing.id)
                db.session.add(booking)
            booking.check_in_date = check_in
            booking.check_out_date = check_out
            booking.booking_status = status
            booking.total_price = listing.price_per_night * count_nights(check_in, check_out)
        db.session.commit()

        print("Seed data inserted: host, renter, listings, bookings.")


if __name__ == "__main__":
    main()
