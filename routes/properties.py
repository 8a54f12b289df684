"""Property listings blueprint."""

from __future__ import annotations

from http import HTTPStatus

from flask import Blueprint, request
from flask_jwt_extended import current_user

from models import db
from models.user import ADMIN, HOST
from services import property_service
from utils.request_validation import parse_form_or_json
from utils.responses import envelope
from utils.security import role_required
from utils.uploads import attach_property_media, remove_stored_media

properties_bp = Blueprint("properties", __name__)


def _listing_fields() -> tuple[dict, list[str]]:
    """Read listing fields from JSON or multipart form, storing uploaded photos."""

    data = parse_form_or_json(request)
    stored = attach_property_media(request, data)
    return data, stored


def _with_upload_cleanup(stored: list[str], operation):
    try:
        return operation()
    except Exception:
        remove_stored_media(stored)
        raise


@properties_bp.route("/my", methods=["GET"])
@role_required(HOST)
def my_properties() -> tuple:
    listings = property_service.list_owner_properties(db.session, current_user.id)
    return envelope(
        "properties fetched successfully",
        [listing.to_dict(include_bookings=True, include_booking_users=True) for listing in listings],
    )


@properties_bp.route("/properties/host/<int:year>", methods=["GET"])
@role_required(HOST)
def host_properties_by_month(year: int) -> tuple:
    counts = property_service.host_properties_by_month(db.session, current_user.id, year)
    return envelope("Properties count by month fetched successfully", counts)


@properties_bp.route("/all/all/<int:year>", methods=["GET"])
@role_required(ADMIN)
def properties_by_month(year: int) -> tuple:
    counts = property_service.properties_by_month(db.session, year)
    return envelope("Property count by month fetched successfully", counts)


@properties_bp.route("", methods=["GET"])
def list_properties() -> tuple:
    listings = property_service.list_properties(db.session)
    return envelope(
        "properties fetched successfully",
        [
            listing.to_dict(include_bookings=True, include_booking_users=True, include_owner=True)
            for listing in listings
        ],
    )


@properties_bp.route("/<int:property_id>", methods=["GET"])
def get_property(property_id: int) -> tuple:
    listing = property_service.get_property_or_404(db.session, property_id)
    return envelope(
        "property fetched successfully",
        listing.to_dict(include_bookings=True, include_owner=True),
    )


@properties_bp.route("", methods=["POST"])
@role_required(HOST)
def create_property() -> tuple:
    """Create a listing owned by the calling host."""

    data, stored = _listing_fields()
    listing = _with_upload_cleanup(
        stored,
        lambda: property_service.create_property(db.session, current_user.id, data),
    )
    return envelope("Property created successfully", listing.to_dict(), HTTPStatus.CREATED)


@properties_bp.route("/<int:property_id>", methods=["PUT"])
@role_required(HOST)
def update_property(property_id: int) -> tuple:
    data, stored = _listing_fields()
    listing = _with_upload_cleanup(
        stored,
        lambda: property_service.update_property(db.session, property_id, current_user, data),
    )
    return envelope("Property updated successfully", listing.to_dict())


@properties_bp.route("/<int:property_id>", methods=["DELETE"])
@role_required(HOST)
def delete_property(property_id: int) -> tuple:
    property_service.delete_property(db.session, property_id, current_user)
    return envelope("Property deleted successfully")
