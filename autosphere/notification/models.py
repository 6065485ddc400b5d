"""Notification domain models.

``Notification`` rows make up each user's fire-and-forget feed.
``MessageLogEntry`` rows are the durable, editable history of admin
broadcasts and direct messages.
"""

import uuid
from datetime import datetime
from enum import Enum

from sqlmodel import Field, SQLModel

from autosphere.core.mixins import TimestampMixin, utc_now


class NotificationType(str, Enum):
    info = "info"
    success = "success"
    warning = "warning"


class Audience(str, Enum):
    """Broadcast target sets."""

    all_users = "all_users"
    dealers = "dealers"
    direct = "direct"


class Notification(SQLModel, table=True):
    __tablename__: str = "notifications"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    recipient_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    title: str = Field(max_length=200)
    message: str
    type: NotificationType = Field(default=NotificationType.info, max_length=20)
    read: bool = Field(default=False)
    time: datetime = Field(default_factory=utc_now, index=True)


class MessageLogEntry(TimestampMixin, SQLModel, table=True):
    """Message history entry for an admin broadcast or direct message.

    ``recipient_id`` is set only for direct messages. Editing an entry does
    not touch notifications already delivered.
    """

    __tablename__: str = "message_log"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    audience: Audience = Field(max_length=20, index=True)
    recipient_id: uuid.UUID | None = Field(default=None, foreign_key="users.id")
    sender_id: uuid.UUID = Field(foreign_key="users.id")
    title: str = Field(max_length=200)
    message: str
    type: NotificationType = Field(default=NotificationType.info, max_length=20)
    recipient_count: int = Field(default=0, ge=0)
