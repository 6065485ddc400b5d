"""Fulfillment domain schemas."""

import uuid
from datetime import date, time

from pydantic import Field
from sqlmodel import SQLModel

from autosphere.core.mixins import TimestampReadMixin
from autosphere.fulfillment.models import BookingStatus, RentalStatus


class BookingCreate(SQLModel):
    listing_id: uuid.UUID
    scheduled_date: date
    scheduled_time: time
    location: str = Field(default="", max_length=200)


class RentalCreate(SQLModel):
    listing_id: uuid.UUID
    start_date: date
    duration: int = Field(ge=1, description="Rental length in days")
    location: str = Field(default="", max_length=200)
    total_price: float = Field(default=0, ge=0)
    security_option: str = Field(default="", max_length=60)


class FulfillmentRead(TimestampReadMixin):
    id: uuid.UUID
    user_id: uuid.UUID
    dealer_id: uuid.UUID | None
    listing_id: uuid.UUID
    location: str
    hide_from_dealer: bool
    listing_label: str
    user_name: str
    user_email: str


class BookingRead(FulfillmentRead):
    scheduled_date: date
    scheduled_time: time
    status: BookingStatus


class RentalRead(FulfillmentRead):
    start_date: date
    duration: int
    total_price: float
    security_option: str
    status: RentalStatus


class HideFromDealerRequest(SQLModel):
    hidden: bool
