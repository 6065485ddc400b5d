"""Inquiry domain schemas."""

import uuid

from pydantic import EmailStr, Field
from sqlmodel import SQLModel

from autosphere.core.mixins import TimestampReadMixin


class InquiryCreate(SQLModel):
    name: str = Field(min_length=1, max_length=120)
    email: EmailStr
    phone: str = Field(default="", max_length=40)
    interest: str | None = Field(
        default=None, max_length=200, description="Listing label, if any"
    )
    message: str = Field(min_length=1)


class InquiryRead(InquiryCreate, TimestampReadMixin):
    id: uuid.UUID
    user_id: uuid.UUID | None
