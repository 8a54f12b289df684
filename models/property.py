"""Property listing model."""

from decimal import Decimal

from utils.dates import utcnow

from . import db


class Property(db.Model):
    """A rental property listed by a host."""

    __tablename__ = "properties"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    title = db.Column(db.String(200), nullable=False)
    location = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    price_per_night = db.Column(db.Numeric(10, 2), nullable=False)
    bedrooms = db.Column(db.Integer, nullable=True)
    bathrooms = db.Column(db.Integer, nullable=True)
    size = db.Column(db.String(64), nullable=True)
    thumbnail = db.Column(db.String(512), nullable=True)
    gallery = db.Column(db.JSON, nullable=False, default=list)
    pet_friendly = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    owner = db.relationship("User", backref=db.backref("properties", lazy="dynamic"))
    bookings = db.relationship(
        "Booking",
        back_populates="property",
        cascade="all, delete-orphan",
        order_by="Booking.id",
    )

    def to_dict(
        self,
        include_bookings: bool = False,
        include_booking_users: bool = False,
        include_owner: bool = False,
    ) -> dict:
        """Serialize the property, optionally embedding related rows."""

        price = (
            float(self.price_per_night)
            if isinstance(self.price_per_night, Decimal)
            else self.price_per_night
        )
        data = {
            "id": self.id,
            "userId": self.user_id,
            "title": self.title,
            "location": self.location,
            "description": self.description,
            "pricePerNight": price,
            "bedrooms": self.bedrooms,
            "bathrooms": self.bathrooms,
            "size": self.size,
            "thumbnail": self.thumbnail,
            "gallery": list(self.gallery or []),
            "petFriendly": self.pet_friendly,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_bookings:
            data["bookings"] = [
                booking.to_dict(include_user=include_booking_users)
                for booking in self.bookings
            ]
        if include_owner:
            data["user"] = self.owner.to_dict() if self.owner else None
        return data

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Property id={self.id} user_id={self.user_id}>"
