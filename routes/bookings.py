"""Bookings blueprint."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, request
from flask_jwt_extended import current_user

from models import db
from models.user import HOST
from services import booking_service
from utils.request_validation import parse_json_request
from utils.responses import envelope
from utils.security import role_required

bookings_bp = Blueprint("bookings", __name__)


@bookings_bp.route("/booking/host/<int:year>", methods=["GET"])
@role_required(HOST)
def confirmed_bookings_by_month(year: int) -> tuple:
    counts = booking_service.confirmed_bookings_by_month(db.session, current_user.id, year)
    return envelope("Confirmed booking count by month fetched successfully", counts)


@bookings_bp.route("/booking/host/<int:year>/unconfirmed", methods=["GET"])
@role_required(HOST)
def pending_bookings_by_month(year: int) -> tuple:
    counts = booking_service.pending_bookings_by_month(db.session, current_user.id, year)
    return envelope("Unconfirmed booking count by month fetched successfully", counts)


@bookings_bp.route("", methods=["POST"])
@role_required()
def create_booking() -> tuple:
    """Book a property, or move the dates of the caller's existing booking for it."""

    payload = parse_json_request(request, required_keys=("propertyId", "checkInDate", "checkOutDate"))
    booking, created = booking_service.create_booking(db.session, current_user.id, payload)
    if created:
        return envelope("Booking created successfully", booking.to_dict(), HTTPStatus.CREATED)
    return envelope("Booking updated successfully", booking.to_dict())


@bookings_bp.route("/my", methods=["GET"])
@role_required()
def my_bookings() -> tuple:
    bookings = booking_service.list_renter_bookings(db.session, current_user.id)
    return envelope(
        "bookings fetched successfully",
        [booking.to_dict(include_property=True) for booking in bookings],
    )


@bookings_bp.route("", methods=["GET"])
def list_bookings() -> tuple:
    bookings = booking_service.list_bookings(db.session)
    return envelope("Bookings fetched successfully", [booking.to_dict() for booking in bookings])


@bookings_bp.route("/<int:booking_id>", methods=["GET"])
def get_booking(booking_id: int) -> tuple:
    booking = booking_service.get_booking_or_404(db.session, booking_id)
    return envelope("Booking found", booking.to_dict(include_property=True))


@bookings_bp.route("/<int:booking_id>", methods=["PUT"])
@role_required(HOST)
def update_booking_status(booking_id: int) -> tuple:
    payload = parse_json_request(request, required_keys=("bookingStatus",))
    booking = booking_service.update_booking_status(
        db.session, booking_id, current_user, payload["bookingStatus"]
    )
    return envelope("Booking status updated successfully", booking.to_dict())


@bookings_bp.route("/<int:booking_id>", methods=["DELETE"])
def delete_booking(booking_id: int) -> tuple:
    booking_service.delete_booking(db.session, booking_id)
    return envelope("Booking deleted successfully")
