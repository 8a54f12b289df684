"""Tests for the booking endpoints."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest
from flask.testing import FlaskClient
from flask_jwt_extended import create_access_token

from models import db
from models.booking import CANCELLED, CONFIRMED, PENDING, Booking
from models.property import Property
from models.user import HOST, RENTER, User, UserRole
from services import booking_service


def _create_user(email: str, role: str = RENTER) -> int:
    user = User(email=email, first_name="Test", last_name="User")
    user.set_password("Passw0rd!")
    user.roles.append(UserRole(role=role))
    db.session.add(user)
    db.session.commit()
    return user.id


def _create_property(owner_id: int, price=100) -> int:
    listing = Property(
        user_id=owner_id,
        title="Cabin",
        location="Musanze",
        description="Cabin by the lake",
        price_per_night=price,
    )
    db.session.add(listing)
    db.session.commit()
    return listing.id


def _create_booking(
    user_id: int,
    property_id: int,
    status: str = PENDING,
    created_at: datetime | None = None,
) -> int:
    booking = Booking(
        user_id=user_id,
        property_id=property_id,
        check_in_date=datetime(2024, 6, 1),
        check_out_date=datetime(2024, 6, 3),
        booking_status=status,
        total_price=200,
    )
    if created_at is not None:
        booking.created_at = created_at
    db.session.add(booking)
    db.session.commit()
    return booking.id


def _auth_headers(app, user_id: int) -> dict[str, str]:
    with app.app_context():
        token = create_access_token(identity=str(user_id))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def listing(app):
    """A host with one 100-per-night property and a renter."""

    with app.app_context():
        host_id = _create_user("host@example.com", role=HOST)
        renter_id = _create_user("renter@example.com")
        property_id = _create_property(host_id)
    return {"host_id": host_id, "renter_id": renter_id, "property_id": property_id}


def test_create_booking_prices_by_night(app, client: FlaskClient, listing):
    response = client.post(
        "/api/booking",
        json={
            "propertyId": listing["property_id"],
            "checkInDate": "2024-06-01",
            "checkOutDate": "2024-06-04",
        },
        headers=_auth_headers(app, listing["renter_id"]),
    )

    assert response.status_code == 201
    payload = response.get_json()
    assert payload["message"] == "Booking created successfully"
    data = payload["data"]
    assert data["totalPrice"] == 300.0
    assert data["bookingStatus"] == PENDING
    assert data["userId"] == listing["renter_id"]
    assert data["checkInDate"] == "2024-06-01T00:00:00"


def test_second_booking_for_same_property_moves_dates(app, client: FlaskClient, listing):
    headers = _auth_headers(app, listing["renter_id"])
    first = client.post(
        "/api/booking",
        json={
            "propertyId": listing["property_id"],
            "checkInDate": "2024-06-01",
            "checkOutDate": "2024-06-04",
        },
        headers=headers,
    )
    second = client.post(
        "/api/booking",
        json={
            "propertyId": listing["property_id"],
            "checkInDate": "2024-07-10T14:00:00Z",
            "checkOutDate": "2024-07-20T10:00:00Z",
        },
        headers=headers,
    )

    assert first.status_code == 201
    assert second.status_code == 200
    assert second.get_json()["message"] == "Booking updated successfully"
    data = second.get_json()["data"]
    assert data["id"] == first.get_json()["data"]["id"]
    assert data["checkInDate"] == "2024-07-10T14:00:00"
    assert data["totalPrice"] == 300.0
    with app.app_context():
        assert Booking.query.count() == 1


def test_create_booking_for_missing_property(app, client: FlaskClient, listing):
    response = client.post(
        "/api/booking",
        json={"propertyId": 999, "checkInDate": "2024-06-01", "checkOutDate": "2024-06-02"},
        headers=_auth_headers(app, listing["renter_id"]),
    )

    assert response.status_code == 404
    assert response.get_json()["message"] == "Property not found"


@pytest.mark.parametrize(
    "payload",
    [
        {"propertyId": 1, "checkInDate": "2024-06-01"},
        {"propertyId": "abc", "checkInDate": "2024-06-01", "checkOutDate": "2024-06-02"},
        {"propertyId": 1, "checkInDate": "June first", "checkOutDate": "2024-06-02"},
    ],
)
def test_create_booking_validation(app, client: FlaskClient, listing, payload):
    response = client.post(
        "/api/booking", json=payload, headers=_auth_headers(app, listing["renter_id"])
    )

    assert response.status_code == 400
    with app.app_context():
        assert Booking.query.count() == 0


def test_create_booking_requires_token(client: FlaskClient, listing):
    response = client.post(
        "/api/booking",
        json={
            "propertyId": listing["property_id"],
            "checkInDate": "2024-06-01",
            "checkOutDate": "2024-06-02",
        },
    )

    assert response.status_code == 401


def test_get_list_and_my_bookings(app, client: FlaskClient, listing):
    with app.app_context():
        other_id = _create_user("other@example.com")
        mine = _create_booking(listing["renter_id"], listing["property_id"])
        _create_booking(other_id, listing["property_id"])

    single = client.get(f"/api/booking/{mine}")
    everything = client.get("/api/booking")
    my = client.get("/api/booking/my", headers=_auth_headers(app, listing["renter_id"]))
    missing = client.get("/api/booking/999")

    assert single.status_code == 200
    assert single.get_json()["message"] == "Booking found"
    prop = single.get_json()["data"]["property"]
    assert prop["id"] == listing["property_id"]
    assert prop["user"]["email"] == "host@example.com"

    assert len(everything.get_json()["data"]) == 2
    assert [item["id"] for item in my.get_json()["data"]] == [mine]
    assert missing.status_code == 404


def test_host_moves_booking_through_states(app, client: FlaskClient, listing):
    with app.app_context():
        booking_id = _create_booking(listing["renter_id"], listing["property_id"])
    headers = _auth_headers(app, listing["host_id"])
    url = f"/api/booking/{booking_id}"

    confirmed = client.put(url, json={"bookingStatus": "Confirmed"}, headers=headers)
    cancelled = client.put(url, json={"bookingStatus": "CANCELLED"}, headers=headers)
    reopened = client.put(url, json={"bookingStatus": "pending"}, headers=headers)

    assert confirmed.status_code == 200
    assert confirmed.get_json()["data"]["bookingStatus"] == CONFIRMED
    assert cancelled.status_code == 200
    assert cancelled.get_json()["data"]["bookingStatus"] == CANCELLED
    assert reopened.status_code == 400
    assert "Cannot change booking status" in reopened.get_json()["message"]
    with app.app_context():
        assert db.session.get(Booking, booking_id).booking_status == CANCELLED


def test_unknown_status_is_rejected(app, client: FlaskClient, listing):
    with app.app_context():
        booking_id = _create_booking(listing["renter_id"], listing["property_id"])

    response = client.put(
        f"/api/booking/{booking_id}",
        json={"bookingStatus": "done"},
        headers=_auth_headers(app, listing["host_id"]),
    )

    assert response.status_code == 400
    assert "bookingStatus must be one of" in response.get_json()["message"]


def test_only_the_listing_host_changes_status(app, client: FlaskClient, listing):
    with app.app_context():
        other_host = _create_user("otherhost@example.com", role=HOST)
        booking_id = _create_booking(listing["renter_id"], listing["property_id"])
    url = f"/api/booking/{booking_id}"

    as_other_host = client.put(
        url, json={"bookingStatus": CONFIRMED}, headers=_auth_headers(app, other_host)
    )
    as_renter = client.put(
        url, json={"bookingStatus": CONFIRMED}, headers=_auth_headers(app, listing["renter_id"])
    )
    missing = client.put(
        "/api/booking/999",
        json={"bookingStatus": CONFIRMED},
        headers=_auth_headers(app, listing["host_id"]),
    )

    assert as_other_host.status_code == 403
    assert as_renter.status_code == 403
    assert missing.status_code == 404
    with app.app_context():
        assert db.session.get(Booking, booking_id).booking_status == PENDING


def test_delete_booking(app, client: FlaskClient, listing):
    with app.app_context():
        booking_id = _create_booking(listing["renter_id"], listing["property_id"])

    deleted = client.delete(f"/api/booking/{booking_id}")
    again = client.delete(f"/api/booking/{booking_id}")

    assert deleted.status_code == 200
    assert deleted.get_json()["message"] == "Booking deleted successfully"
    assert again.status_code == 404


def test_host_booking_counts_by_month(app, client: FlaskClient, listing):
    with app.app_context():
        other_listing = _create_property(listing["host_id"], price=80)
        renters = [_create_user(f"r{index}@example.com") for index in range(5)]
        _create_booking(renters[0], listing["property_id"], CONFIRMED, datetime(2024, 1, 15))
        _create_booking(renters[1], listing["property_id"], CONFIRMED, datetime(2024, 1, 31, 23, 59))
        _create_booking(renters[2], other_listing, CONFIRMED, datetime(2024, 9, 2))
        _create_booking(renters[3], listing["property_id"], CONFIRMED, datetime(2025, 1, 1))
        _create_booking(renters[4], listing["property_id"], PENDING, datetime(2024, 3, 3))
        _create_booking(renters[0], other_listing, PENDING, datetime(2024, 3, 9))

        outsider = _create_user("outsider@example.com", role=HOST)
        outsider_listing = _create_property(outsider)
        _create_booking(renters[1], outsider_listing, CONFIRMED, datetime(2024, 1, 5))

    headers = _auth_headers(app, listing["host_id"])
    confirmed = client.get("/api/booking/booking/host/2024", headers=headers)
    pending = client.get("/api/booking/booking/host/2024/unconfirmed", headers=headers)

    assert confirmed.status_code == 200
    assert confirmed.get_json()["data"] == [2, 0, 0, 0, 0, 0, 0, 0, 1, 0, 0, 0]
    assert pending.get_json()["data"] == [0, 0, 2, 0, 0, 0, 0, 0, 0, 0, 0, 0]


def test_host_without_properties_gets_404_for_counts(app, client: FlaskClient):
    with app.app_context():
        host_id = _create_user("empty@example.com", role=HOST)

    response = client.get("/api/booking/booking/host/2024", headers=_auth_headers(app, host_id))

    assert response.status_code == 404
    assert response.get_json()["message"] == "No properties found for the user"


def test_concurrent_duplicate_booking_updates_existing_row(app, listing, monkeypatch):
    original_find = booking_service._find_for_pair
    lookups = []

    def find_after_competing_insert(session, user_id, property_id):
        lookups.append(property_id)
        if len(lookups) == 1:
            # Another request for the same pair commits between lookup and insert.
            session.add(
                Booking(
                    user_id=user_id,
                    property_id=property_id,
                    check_in_date=datetime(2024, 5, 1),
                    check_out_date=datetime(2024, 5, 3),
                    total_price=Decimal("200.00"),
                )
            )
            session.commit()
            return None
        return original_find(session, user_id, property_id)

    monkeypatch.setattr(booking_service, "_find_for_pair", find_after_competing_insert)

    with app.app_context():
        booking, created = booking_service.create_booking(
            db.session,
            listing["renter_id"],
            {
                "propertyId": listing["property_id"],
                "checkInDate": "2024-06-01",
                "checkOutDate": "2024-06-04",
            },
        )

        assert created is False
        assert Booking.query.count() == 1
        assert booking.check_in_date == datetime(2024, 6, 1)
        assert booking.check_out_date == datetime(2024, 6, 4)
        assert booking.total_price == Decimal("200.00")
        assert booking.booking_status == PENDING
    assert len(lookups) == 2
