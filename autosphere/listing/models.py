"""Listing domain models.

A Listing is a vehicle offered for sale or rent. Its publication lifecycle is
governed by ``autosphere.listing.machine``; ``is_suspended`` is an independent
visibility overlay.
"""

import uuid
from enum import Enum

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from autosphere.core.mixins import TimestampMixin


class ListingStatus(str, Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    archived = "archived"


class ArchivedBy(str, Enum):
    """Who archived a listing. Admin archives are locked against dealers."""

    dealer = "dealer"
    admin = "admin"


class Category(str, Enum):
    new = "New"
    pre_owned = "Pre-Owned"
    rental = "Rental"
    auction = "Auction"


class BodyType(str, Enum):
    luxury = "Luxury"
    sports = "Sports"
    suv = "SUV"
    classic = "Classic"


class Transmission(str, Enum):
    automatic = "Automatic"
    manual = "Manual"


class Fuel(str, Enum):
    petrol = "Petrol"
    electric = "Electric"
    hybrid = "Hybrid"


class Listing(TimestampMixin, SQLModel, table=True):
    """Listing database model.

    ``dealer_id`` is NULL for platform-sourced inventory added by an admin.
    ``moderation_reason`` is set only while rejected, ``archived_by`` only
    while archived.
    """

    __tablename__: str = "listings"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    make: str = Field(max_length=60)
    model: str = Field(max_length=60)
    year: int
    price: float = Field(ge=0)
    body_type: BodyType = Field(default=BodyType.luxury, max_length=20)
    transmission: Transmission = Field(default=Transmission.automatic, max_length=20)
    fuel: Fuel = Field(default=Fuel.petrol, max_length=20)
    mileage: int = Field(default=0, ge=0)
    hp: int = Field(default=0, ge=0)
    acceleration: str = Field(default="", max_length=20)
    description: str = Field(default="")
    features: list[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    categories: list[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    images: list[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )

    dealer_id: uuid.UUID | None = Field(
        default=None, foreign_key="users.id", index=True
    )
    status: ListingStatus = Field(
        default=ListingStatus.pending, max_length=20, index=True
    )
    moderation_reason: str | None = Field(default=None, max_length=500)
    archived_by: ArchivedBy | None = Field(default=None, max_length=20)
    is_suspended: bool = Field(default=False)
    is_featured: bool = Field(default=False)

    @property
    def label(self) -> str:
        return f"{self.year} {self.make} {self.model}"
