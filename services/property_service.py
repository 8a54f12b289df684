"""Property listings owned by hosts."""

from __future__ import annotations

from flask import current_app
from sqlalchemy.orm import Session, selectinload
from werkzeug.exceptions import BadRequest, Forbidden, NotFound

from models.booking import Booking
from models.property import Property
from models.user import User
from services.reporting import monthly_counts
from utils.request_validation import parse_bool, parse_decimal, parse_optional_int
from utils.uploads import remove_stored_media

REQUIRED_FIELDS = ("title", "location", "description", "pricePerNight")
TEXT_FIELDS = {"title": "title", "location": "location", "description": "description"}


def _clean_gallery(value, errors: list[str]) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        errors.append("gallery must be a list of strings")
        return []
    return [item.strip() for item in value if item.strip()]


def clean_property_fields(data: dict, partial: bool = False) -> dict:
    """Validate request fields and map them onto Property attributes."""

    errors: list[str] = []
    cleaned: dict = {}

    if not partial:
        for field in REQUIRED_FIELDS:
            if data.get(field) is None or str(data.get(field)).strip() == "":
                errors.append(f"{field} is required")

    for key, attr in TEXT_FIELDS.items():
        if key not in data or data[key] is None:
            continue
        text = str(data[key]).strip()
        if text:
            cleaned[attr] = text
        elif partial:
            errors.append(f"{key} must not be empty")

    if "pricePerNight" in data and data["pricePerNight"] not in (None, ""):
        price = parse_decimal(data["pricePerNight"])
        if price is None or price < 0:
            errors.append("pricePerNight must be a non-negative number")
        else:
            cleaned["price_per_night"] = price
    elif partial and "pricePerNight" in data:
        errors.append("pricePerNight must not be empty")

    for key in ("bedrooms", "bathrooms"):
        if key in data:
            value = parse_optional_int(data[key], key, errors)
            if value is not None and value < 0:
                errors.append(f"{key} must not be negative")
            cleaned[key] = value

    if "size" in data:
        size = "" if data["size"] is None else str(data["size"]).strip()
        cleaned["size"] = size or None

    if "petFriendly" in data:
        parsed = parse_bool(data["petFriendly"])
        if parsed is None:
            errors.append("petFriendly must be boolean")
        else:
            cleaned["pet_friendly"] = parsed

    if "thumbnail" in data:
        thumbnail = data["thumbnail"]
        if thumbnail is not None and not isinstance(thumbnail, str):
            errors.append("thumbnail must be a string")
        else:
            cleaned["thumbnail"] = (thumbnail or "").strip() or None

    if "gallery" in data:
        cleaned["gallery"] = _clean_gallery(data["gallery"], errors)

    if errors:
        raise BadRequest("; ".join(errors))
    return cleaned


def _with_relations(query):
    return query.options(
        selectinload(Property.owner),
        selectinload(Property.bookings).selectinload(Booking.renter),
    )


def get_property_or_404(session: Session, property_id: int) -> Property:
    listing = _with_relations(session.query(Property)).filter(Property.id == property_id).first()
    if listing is None:
        raise NotFound("Property not found")
    return listing


def _require_owner(listing: Property, user: User) -> None:
    if listing.user_id != user.id:
        current_app.logger.warning(
            "User %s attempted to modify property %s owned by %s",
            user.id,
            listing.id,
            listing.user_id,
        )
        raise Forbidden("You do not own this property.")


def create_property(session: Session, owner_id: int, data: dict) -> Property:
    fields = clean_property_fields(data)
    fields.setdefault("gallery", [])
    listing = Property(user_id=owner_id, **fields)
    session.add(listing)
    session.commit()
    current_app.logger.info("Property %s created by user %s", listing.id, owner_id)
    return listing


def list_properties(session: Session) -> list[Property]:
    return _with_relations(session.query(Property)).order_by(Property.id).all()


def list_owner_properties(session: Session, user_id: int) -> list[Property]:
    return (
        _with_relations(session.query(Property))
        .filter(Property.user_id == user_id)
        .order_by(Property.id)
        .all()
    )


def update_property(session: Session, property_id: int, user: User, data: dict) -> Property:
    """Apply a partial update on behalf of the listing's owner."""

    listing = get_property_or_404(session, property_id)
    _require_owner(listing, user)
    fields = clean_property_fields(data, partial=True)

    replaced: list[str | None] = []
    if "thumbnail" in fields and fields["thumbnail"] != listing.thumbnail:
        replaced.append(listing.thumbnail)
    if "gallery" in fields:
        kept = set(fields["gallery"])
        replaced.extend(item for item in (listing.gallery or []) if item not in kept)

    for attr, value in fields.items():
        setattr(listing, attr, value)
    session.commit()

    remove_stored_media(replaced)
    current_app.logger.info("Property %s updated by user %s", listing.id, user.id)
    return listing


def delete_property(session: Session, property_id: int, user: User) -> None:
    listing = get_property_or_404(session, property_id)
    _require_owner(listing, user)

    media = [listing.thumbnail, *(listing.gallery or [])]
    session.delete(listing)
    session.commit()

    remove_stored_media(media)
    current_app.logger.info("Property %s deleted by user %s", property_id, user.id)


def host_properties_by_month(session: Session, user_id: int, year: int) -> list[int]:
    query = session.query(Property).filter(Property.user_id == user_id)
    return monthly_counts(query, Property.created_at, year)


def properties_by_month(session: Session, year: int) -> list[int]:
    return monthly_counts(session.query(Property), Property.created_at, year)
