"""Inquiry domain models.

Contact-form and "Inquire Now" messages, reviewed by admins.
"""

import uuid

from pydantic import EmailStr
from sqlmodel import Field, SQLModel

from autosphere.core.mixins import TimestampMixin


class Inquiry(TimestampMixin, SQLModel, table=True):
    __tablename__: str = "inquiries"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    name: str = Field(max_length=120)
    email: EmailStr = Field(max_length=255)
    phone: str = Field(default="", max_length=40)
    interest: str | None = Field(default=None, max_length=200)
    message: str
    user_id: uuid.UUID | None = Field(default=None, foreign_key="users.id")
