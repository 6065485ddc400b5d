"""Access domain exceptions.

Authorization denials carry an enumerated reason so callers can branch on
it instead of parsing a message.
"""

from enum import Enum
from typing import Any

from autosphere.core.exceptions import AppException


class DenyReason(str, Enum):
    not_owner = "not_owner"
    wrong_role = "wrong_role"
    record_locked = "record_locked"
    not_verified = "not_verified"
    suspended = "suspended"


_MESSAGES: dict[DenyReason, str] = {
    DenyReason.not_owner: "You can only act on your own records",
    DenyReason.wrong_role: "Your role does not permit this action",
    DenyReason.record_locked: "This record is locked by an administrator",
    DenyReason.not_verified: "Identity verification is required for this action",
    DenyReason.suspended: "Your account is suspended",
}


class AuthorizationDenied(AppException):
    """Raised when the authorization matrix denies an action."""

    status_code = 403
    error_type = "authorization_denied"

    def __init__(self, reason: DenyReason, message: str | None = None):
        self.reason = reason
        super().__init__(message or _MESSAGES[reason])

    @property
    def context(self) -> dict[str, Any]:
        return {"reason": self.reason.value}
