"""Notification domain schemas."""

import uuid
from datetime import datetime

from pydantic import Field, field_serializer, field_validator
from sqlmodel import SQLModel

from autosphere.core.mixins import TimestampReadMixin, format_utc
from autosphere.notification.models import Audience, NotificationType


class NotificationRead(SQLModel):
    id: uuid.UUID
    title: str
    message: str
    type: NotificationType
    read: bool
    time: datetime

    @field_serializer("time")
    def serialize_time(self, value: datetime) -> str:
        return format_utc(value)


class FeedUpdate(SQLModel):
    """Result of a bulk feed operation."""

    count: int


class MessageContent(SQLModel):
    title: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1)
    type: NotificationType = NotificationType.info


class BroadcastCreate(MessageContent):
    audience: Audience

    @field_validator("audience")
    @classmethod
    def reject_direct(cls, value: Audience) -> Audience:
        if value == Audience.direct:
            raise ValueError("Use a direct message to address a single user")
        return value


class DirectMessageCreate(MessageContent):
    recipient_id: uuid.UUID


class MessageUpdate(SQLModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    message: str | None = Field(default=None, min_length=1)
    type: NotificationType | None = None


class MessageLogRead(TimestampReadMixin):
    id: uuid.UUID
    audience: Audience
    recipient_id: uuid.UUID | None
    sender_id: uuid.UUID
    title: str
    message: str
    type: NotificationType
    recipient_count: int
