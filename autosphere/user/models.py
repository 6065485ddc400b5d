"""User domain models.

SQLModel table definition for User, including role, verification and KYC
clearance state.
"""

import uuid
from enum import Enum
from typing import Any

from pydantic import EmailStr
from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from autosphere.core.mixins import TimestampMixin


class UserRole(str, Enum):
    """Marketplace actor roles."""

    buyer = "buyer"
    dealer = "dealer"
    admin = "admin"


class KycStatus(str, Enum):
    """Identity verification status.

    - none: no packet ever submitted
    - pending: packet awaiting admin review
    - approved: documents accepted, user verified
    - rejected: documents declined, user may resubmit
    """

    none = "none"
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


def default_security_settings() -> dict[str, bool]:
    return {"two_factor_enabled": False, "login_alerts": True}


class User(TimestampMixin, SQLModel, table=True):
    """User database model.

    Note: external_id is internal-only (Firebase UID) and should
    never be exposed in API responses. Passwords live with the identity
    provider and are never stored here.
    """

    __tablename__: str = "users"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    external_id: str = Field(index=True, unique=True)
    # Stored lower-cased; uniqueness is case-insensitive.
    email: EmailStr = Field(index=True, unique=True, max_length=255)
    first_name: str = Field(default="", max_length=50)
    last_name: str = Field(default="", max_length=50)
    role: UserRole = Field(default=UserRole.buyer, max_length=20)
    is_suspended: bool = Field(default=False)

    is_verified: bool = Field(default=False)
    verification_override: bool = Field(default=False)
    kyc_status: KycStatus = Field(default=KycStatus.none, max_length=20)
    kyc_documents: dict[str, Any] | None = Field(
        default=None, sa_column=Column(JSON, nullable=True)
    )
    kyc_rejection_reason: str | None = Field(default=None, max_length=500)

    favorites: list[str] = Field(
        default_factory=list, sa_column=Column(JSON, nullable=False)
    )
    security_settings: dict[str, bool] = Field(
        default_factory=default_security_settings,
        sa_column=Column(JSON, nullable=False),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip() or self.email

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin
