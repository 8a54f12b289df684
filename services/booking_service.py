"""Bookings: one row per (renter, property), priced by the night."""

from __future__ import annotations

import math
from datetime import datetime
from decimal import Decimal

from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload
from werkzeug.exceptions import BadRequest, Forbidden, NotFound

from models.booking import BOOKING_STATUSES, CONFIRMED, PENDING, Booking, normalize_status
from models.property import Property
from models.user import User
from services.reporting import monthly_counts
from utils.dates import parse_datetime
from utils.request_validation import parse_decimal, parse_optional_int

SECONDS_PER_DAY = 24 * 60 * 60


def count_nights(check_in: datetime, check_out: datetime) -> int:
    """Whole nights between two instants, rounding partial days up."""

    seconds = abs((check_out - check_in).total_seconds())
    return math.ceil(seconds / SECONDS_PER_DAY)


def clean_booking_request(data: dict) -> tuple[int, datetime, datetime]:
    errors: list[str] = []

    property_id = parse_optional_int(data.get("propertyId"), "propertyId", errors)
    if property_id is None and not errors:
        errors.append("propertyId is required")

    dates = {}
    for field in ("checkInDate", "checkOutDate"):
        value = parse_datetime(data.get(field))
        if value is None:
            errors.append(f"{field} must be an ISO 8601 date")
        dates[field] = value

    if errors:
        raise BadRequest("; ".join(errors))
    return property_id, dates["checkInDate"], dates["checkOutDate"]


def _find_for_pair(session: Session, user_id: int, property_id: int) -> Booking | None:
    return (
        session.query(Booking)
        .filter(Booking.user_id == user_id, Booking.property_id == property_id)
        .first()
    )


def _reschedule(session: Session, booking: Booking, check_in: datetime, check_out: datetime) -> Booking:
    # Only the dates move; price and status stay as originally booked.
    booking.check_in_date = check_in
    booking.check_out_date = check_out
    session.commit()
    current_app.logger.info("Booking %s rescheduled by user %s", booking.id, booking.user_id)
    return booking


def _nightly_rate(listing: Property) -> Decimal:
    rate = parse_decimal(listing.price_per_night)
    if rate is None:
        raise BadRequest("Invalid property price per night")
    return rate


def create_booking(session: Session, user_id: int, data: dict) -> tuple[Booking, bool]:
    """Book a property for ``user_id``, or move the dates of their existing booking.

    Returns the booking and whether a new row was created.
    """

    property_id, check_in, check_out = clean_booking_request(data)

    existing = _find_for_pair(session, user_id, property_id)
    if existing is not None:
        return _reschedule(session, existing, check_in, check_out), False

    listing = session.get(Property, property_id)
    if listing is None:
        raise NotFound("Property not found")

    nights = count_nights(check_in, check_out)
    total = (_nightly_rate(listing) * nights).quantize(Decimal("0.01"))

    booking = Booking(
        user_id=user_id,
        property_id=property_id,
        check_in_date=check_in,
        check_out_date=check_out,
        booking_status=PENDING,
        total_price=total,
    )
    session.add(booking)
    try:
        session.commit()
    except IntegrityError:
        # A concurrent request inserted the same (user, property) pair first.
        session.rollback()
        existing = _find_for_pair(session, user_id, property_id)
        if existing is None:
            raise
        return _reschedule(session, existing, check_in, check_out), False

    current_app.logger.info(
        "Booking %s created by user %s for property %s (%s nights)",
        booking.id,
        user_id,
        property_id,
        nights,
    )
    return booking, True


def get_booking_or_404(session: Session, booking_id: int) -> Booking:
    booking = (
        session.query(Booking)
        .options(selectinload(Booking.property).selectinload(Property.owner))
        .filter(Booking.id == booking_id)
        .first()
    )
    if booking is None:
        raise NotFound("Booking not found")
    return booking


def list_bookings(session: Session) -> list[Booking]:
    return session.query(Booking).order_by(Booking.id).all()


def list_renter_bookings(session: Session, user_id: int) -> list[Booking]:
    return (
        session.query(Booking)
        .options(selectinload(Booking.property).selectinload(Property.owner))
        .filter(Booking.user_id == user_id)
        .order_by(Booking.id)
        .all()
    )


def update_booking_status(session: Session, booking_id: int, user: User, raw_status) -> Booking:
    """Move a booking to a new status on behalf of the property's host."""

    status = normalize_status(raw_status)
    if status is None:
        raise BadRequest(
            "bookingStatus must be one of: {}.".format(", ".join(BOOKING_STATUSES))
        )

    booking = get_booking_or_404(session, booking_id)
    if booking.property is None or booking.property.user_id != user.id:
        raise Forbidden("You do not host the property for this booking.")

    if not booking.can_transition_to(status):
        raise BadRequest(
            f"Cannot change booking status from {booking.booking_status} to {status}."
        )

    previous = booking.booking_status
    booking.booking_status = status
    session.commit()
    current_app.logger.info("Booking %s status %s -> %s", booking.id, previous, status)
    return booking


def delete_booking(session: Session, booking_id: int) -> None:
    booking = session.get(Booking, booking_id)
    if booking is None:
        raise NotFound("Booking not found")
    session.delete(booking)
    session.commit()
    current_app.logger.info("Booking %s deleted", booking_id)


def _host_bookings_by_month(session: Session, host_id: int, year: int, status: str) -> list[int]:
    property_ids = [
        row[0] for row in session.query(Property.id).filter(Property.user_id == host_id).all()
    ]
    if not property_ids:
        raise NotFound("No properties found for the user")

    query = session.query(Booking).filter(
        Booking.property_id.in_(property_ids),
        Booking.booking_status == status,
    )
    return monthly_counts(query, Booking.created_at, year)


def confirmed_bookings_by_month(session: Session, host_id: int, year: int) -> list[int]:
    return _host_bookings_by_month(session, host_id, year, CONFIRMED)


def pending_bookings_by_month(session: Session, host_id: int, year: int) -> list[int]:
    return _host_bookings_by_month(session, host_id, year, PENDING)
