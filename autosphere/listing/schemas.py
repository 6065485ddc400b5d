"""Listing domain schemas.

Listings are read through a union tagged by ``status``. Fields that only
exist in one state are required in that state's model, so a rejected
listing without a reason or an archived one without an archiver cannot be
serialized.
"""

import uuid
from typing import Annotated, Literal

from pydantic import Field, TypeAdapter
from sqlmodel import SQLModel

from autosphere.core.mixins import TimestampReadMixin
from autosphere.listing.models import (
    ArchivedBy,
    BodyType,
    Category,
    Fuel,
    Listing,
    Transmission,
)


class ListingFields(SQLModel):
    """Editable vehicle fields. Status is never editable directly."""

    make: str = Field(min_length=1, max_length=60)
    model: str = Field(min_length=1, max_length=60)
    year: int = Field(ge=1886, le=2100)
    price: float = Field(ge=0)
    body_type: BodyType = BodyType.luxury
    transmission: Transmission = Transmission.automatic
    fuel: Fuel = Fuel.petrol
    mileage: int = Field(default=0, ge=0)
    hp: int = Field(default=0, ge=0)
    acceleration: str = Field(default="", max_length=20)
    description: str = ""
    features: list[str] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)


class ListingCreate(ListingFields):
    pass


class ListingUpdate(SQLModel):
    make: str | None = Field(default=None, min_length=1, max_length=60)
    model: str | None = Field(default=None, min_length=1, max_length=60)
    year: int | None = Field(default=None, ge=1886, le=2100)
    price: float | None = Field(default=None, ge=0)
    body_type: BodyType | None = None
    transmission: Transmission | None = None
    fuel: Fuel | None = None
    mileage: int | None = Field(default=None, ge=0)
    hp: int | None = Field(default=None, ge=0)
    acceleration: str | None = Field(default=None, max_length=20)
    description: str | None = None
    features: list[str] | None = None
    categories: list[Category] | None = None
    images: list[str] | None = None


class RejectRequest(SQLModel):
    reason: str


class ListingReadBase(ListingFields, TimestampReadMixin):
    id: uuid.UUID
    dealer_id: uuid.UUID | None
    is_suspended: bool
    is_featured: bool


class PendingListing(ListingReadBase):
    status: Literal["pending"]


class ApprovedListing(ListingReadBase):
    status: Literal["approved"]


class RejectedListing(ListingReadBase):
    status: Literal["rejected"]
    moderation_reason: str = Field(min_length=1)


class ArchivedListing(ListingReadBase):
    status: Literal["archived"]
    archived_by: ArchivedBy


ListingRead = Annotated[
    PendingListing | ApprovedListing | RejectedListing | ArchivedListing,
    Field(discriminator="status"),
]

_listing_read = TypeAdapter(ListingRead)


def to_read(listing: Listing) -> ListingRead:
    """Project a stored listing onto its status-specific read model."""
    return _listing_read.validate_python(listing.model_dump(mode="json"))


def to_read_list(listings: list[Listing]) -> list[ListingRead]:
    return [to_read(listing) for listing in listings]

