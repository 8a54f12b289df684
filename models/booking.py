"""Booking model and its status state machine."""

from decimal import Decimal

from utils.dates import utcnow

from . import db


PENDING = "pending"
CONFIRMED = "confirmed"
CANCELLED = "cancelled"
BOOKING_STATUSES = (PENDING, CONFIRMED, CANCELLED)

# Legal moves out of each status. Re-applying the current status is a no-op.
BOOKING_TRANSITIONS = {
    PENDING: {CONFIRMED, CANCELLED},
    CONFIRMED: {CANCELLED},
    CANCELLED: set(),
}


def normalize_status(raw: object) -> str | None:
    """Return the canonical status for ``raw`` or None if it is unknown."""

    if not isinstance(raw, str):
        return None
    value = raw.strip().lower()
    if value == "canceled":
        value = CANCELLED
    return value if value in BOOKING_STATUSES else None


class Booking(db.Model):
    """A renter's stay at a property. One row per (renter, property) pair."""

    __tablename__ = "bookings"
    __table_args__ = (
        db.UniqueConstraint("user_id", "property_id", name="uq_bookings_user_property"),
    )

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    property_id = db.Column(
        db.Integer,
        db.ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    check_in_date = db.Column(db.DateTime, nullable=False)
    check_out_date = db.Column(db.DateTime, nullable=False)
    booking_status = db.Column(
        db.Enum(*BOOKING_STATUSES, name="booking_status_enum"),
        nullable=False,
        default=PENDING,
        server_default=db.text("'pending'"),
    )
    total_price = db.Column(db.Numeric(12, 2), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    renter = db.relationship("User", backref=db.backref("bookings", lazy="dynamic"))
    property = db.relationship("Property", back_populates="bookings")

    def can_transition_to(self, status: str) -> bool:
        if status == self.booking_status:
            return True
        return status in BOOKING_TRANSITIONS.get(self.booking_status, set())

    def to_dict(self, include_user: bool = False, include_property: bool = False) -> dict:
        """Serialize the booking, optionally embedding the renter or property."""

        total = (
            float(self.total_price)
            if isinstance(self.total_price, Decimal)
            else self.total_price
        )
        data = {
            "id": self.id,
            "userId": self.user_id,
            "propertyId": self.property_id,
            "checkInDate": self.check_in_date.isoformat() if self.check_in_date else None,
            "checkOutDate": self.check_out_date.isoformat() if self.check_out_date else None,
            "bookingStatus": self.booking_status,
            "totalPrice": total,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_user:
            data["user"] = self.renter.to_dict() if self.renter else None
        if include_property:
            data["property"] = (
                self.property.to_dict(include_owner=True) if self.property else None
            )
        return data

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Booking id={self.id} status={self.booking_status}>"
