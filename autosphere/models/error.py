"""Error body documented in the OpenAPI schema."""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Every error has ``type`` and ``message``.

    Domain errors add context: ``reason`` on authorization denials,
    ``current``/``target`` on refused state transitions and ``missing`` on
    incomplete KYC packets.
    """

    type: str
    message: str
    reason: str | None = None
    current: str | None = None
    target: str | None = None
    missing: list[str] | None = None
