"""User domain schemas.

Request and response schemas for profile and account operations.

Security notes:
- external_id (Firebase UID) is internal-only, never exposed in responses
- UserUpdateMe is restricted to prevent privilege escalation
- Suspension, verification and role changes go through admin endpoints
"""

import uuid

from pydantic import EmailStr, Field
from sqlmodel import SQLModel

from autosphere.core.mixins import TimestampReadMixin
from autosphere.user.models import KycStatus, UserRole


class UserBase(SQLModel):
    """Profile fields safe to return to the user themselves."""

    email: EmailStr
    first_name: str
    last_name: str
    role: UserRole
    is_verified: bool
    kyc_status: KycStatus


class UserPublicRead(UserBase, TimestampReadMixin):
    """Response schema for /me endpoints."""

    id: uuid.UUID
    favorites: list[str]
    security_settings: dict[str, bool]


class UserRead(UserPublicRead):
    """Full response schema for admin contexts."""

    is_suspended: bool
    verification_override: bool
    kyc_rejection_reason: str | None


class UserCreate(SQLModel):
    """Admin-provisioned account. Any role, admins included.

    ``is_verified`` grants verification up front, recorded as an admin
    override.
    """

    email: EmailStr
    password: str = Field(min_length=8)
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    role: UserRole = UserRole.buyer
    is_verified: bool = False


class UserUpdateMe(SQLModel):
    """Schema for users updating their own profile.

    Users cannot modify: email, role, verification or suspension state.
    """

    first_name: str | None = Field(default=None, min_length=1, max_length=50)
    last_name: str | None = Field(default=None, min_length=1, max_length=50)


class SecuritySettingsUpdate(SQLModel):
    two_factor_enabled: bool | None = None
    login_alerts: bool | None = None


class RoleUpdate(SQLModel):
    role: UserRole


class BulkAccountResult(SQLModel):
    """Number of accounts changed by a bulk admin action."""

    count: int
