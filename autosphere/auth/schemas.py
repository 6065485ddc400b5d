"""Auth domain schemas.

Request and response schemas for registration, login and password changes.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator

from autosphere.user.models import UserRole


class AuthRegister(BaseModel):
    """Request schema for user registration.

    Self-registration can create buyers and dealers; admins are provisioned
    by another admin through ``POST /users``.
    """

    email: EmailStr
    password: str = Field(min_length=8)
    first_name: str = Field(min_length=1, max_length=50)
    last_name: str = Field(min_length=1, max_length=50)
    role: UserRole = UserRole.buyer

    @field_validator("role")
    @classmethod
    def reject_admin(cls, value: UserRole) -> UserRole:
        if value == UserRole.admin:
            raise ValueError("Only buyer and dealer accounts can self-register")
        return value


class EmailPasswordLoginRequest(BaseModel):
    email: EmailStr
    password: str


class AuthMessage(BaseModel):
    """Generic auth message response."""

    message: str


class UpdatePasswordRequest(BaseModel):
    current_password: str
    new_password: str = Field(min_length=8)
