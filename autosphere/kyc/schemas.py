"""KYC domain schemas."""

import uuid
from typing import Any

from pydantic import Field
from sqlmodel import SQLModel

from autosphere.user.models import KycStatus, UserRole


class KycSubmission(SQLModel):
    """Blob URLs for the three identity artifacts.

    Upload each file through ``POST /uploads`` first. Completeness is
    checked by the clearance machine so a partial packet gets a 400 that
    names what is missing.
    """

    front: str | None = Field(default=None, description="ID front image URL")
    back: str | None = Field(default=None, description="ID back image URL")
    selfie: str | None = Field(default=None, description="Live selfie image URL")


class KycRejectRequest(SQLModel):
    reason: str


class KycRead(SQLModel):
    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    role: UserRole
    is_verified: bool
    kyc_status: KycStatus
    kyc_documents: dict[str, Any] | None
    kyc_rejection_reason: str | None
