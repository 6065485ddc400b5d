"""Fulfillment domain models.

Booking (test drive) and Rental requests. Both start ``Pending``, carry the
``hide_from_dealer`` overlay, and denormalize the listing label and the
requesting user's name/email so the record stays readable if the source
rows change later.
"""

import uuid
from datetime import date, time
from enum import Enum

from sqlmodel import Field, SQLModel

from autosphere.core.mixins import TimestampMixin


class FulfillmentKind(str, Enum):
    booking = "booking"
    rental = "rental"


class BookingStatus(str, Enum):
    pending = "Pending"
    confirmed = "Confirmed"
    cancelled = "Cancelled"


class RentalStatus(str, Enum):
    pending = "Pending"
    accepted = "Accepted"
    cancelled = "Cancelled"


class FulfillmentBase(SQLModel):
    """Columns shared by bookings and rentals."""

    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    dealer_id: uuid.UUID | None = Field(default=None, index=True)
    listing_id: uuid.UUID = Field(index=True)
    location: str = Field(default="", max_length=200)
    hide_from_dealer: bool = Field(default=False)

    listing_label: str = Field(max_length=200)
    user_name: str = Field(max_length=120)
    user_email: str = Field(max_length=255)


class Booking(TimestampMixin, FulfillmentBase, table=True):
    __tablename__: str = "bookings"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    scheduled_date: date
    scheduled_time: time
    status: BookingStatus = Field(default=BookingStatus.pending, max_length=20)


class Rental(TimestampMixin, FulfillmentBase, table=True):
    __tablename__: str = "rentals"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    start_date: date
    duration: int = Field(ge=1)
    total_price: float = Field(default=0, ge=0)
    security_option: str = Field(default="", max_length=60)
    status: RentalStatus = Field(default=RentalStatus.pending, max_length=20)
