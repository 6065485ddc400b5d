"""Timestamp columns shared by the marketplace tables.

Stored at whole-second precision in UTC. SQLite hands them back naive, so
responses go through ``format_utc`` to get a ``Z`` suffix either way.
"""

from datetime import UTC, datetime

from pydantic import field_serializer
from sqlalchemy import text
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    return datetime.now(UTC).replace(microsecond=0)


def format_utc(value: datetime) -> str:
    """ISO 8601 with a ``Z`` suffix. Naive values are taken as UTC."""
    value = value.astimezone(UTC) if value.tzinfo else value.replace(tzinfo=UTC)
    return value.replace(microsecond=0).isoformat().replace("+00:00", "Z")


class TimestampMixin:
    """``created_at`` / ``updated_at`` for ``table=True`` models.

    ``updated_at`` is refreshed on every UPDATE, including status patches
    issued by the entity store.
    """

    created_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={"server_default": text("CURRENT_TIMESTAMP")},
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        sa_column_kwargs={
            "server_default": text("CURRENT_TIMESTAMP"),
            "onupdate": utc_now,
        },
    )


class TimestampReadMixin(SQLModel):
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def serialize_timestamps(self, value: datetime) -> str:
        return format_utc(value)
