"""KYC clearance state machine.

    none | rejected | approved -> pending  (submit a complete packet)
    pending -> approved | rejected

Approval sets ``is_verified``; rejection clears it along with any admin
override. While a packet is pending a new one cannot be submitted.
Resubmission after a decision is unlimited.
"""

from datetime import UTC, datetime
from typing import Any

from autosphere.core.exceptions import (
    InvalidTransitionError,
    MissingReasonError,
    ValidationFailed,
)
from autosphere.core.mixins import format_utc
from autosphere.notification.effects import NotifyAdmins, NotifyUser, Transition
from autosphere.notification.models import NotificationType
from autosphere.user.models import KycStatus, User

ENTITY = "KYC"
STATUS_FIELD = "kyc_status"
REQUIRED_ARTIFACTS = ("front", "back", "selfie")


class IncompleteKycPacketError(ValidationFailed):
    """Raised when a packet lacks one of the three required artifacts."""

    error_type = "incomplete_kyc_packet"

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(
            "ID front, ID back and a live selfie are all required "
            f"(missing: {', '.join(missing)})"
        )

    @property
    def context(self) -> dict[str, Any]:
        return {"missing": self.missing}


def submit(user: User, artifacts: dict[str, str | None]) -> Transition:
    if user.kyc_status == KycStatus.pending:
        raise InvalidTransitionError(ENTITY, KycStatus.pending.value, "pending")
    missing = [
        name for name in REQUIRED_ARTIFACTS if not (artifacts.get(name) or "").strip()
    ]
    if missing:
        raise IncompleteKycPacketError(missing)

    documents: dict[str, Any] = {
        name: artifacts[name].strip() for name in REQUIRED_ARTIFACTS
    }
    documents["submitted_at"] = format_utc(datetime.now(UTC))
    return Transition(
        changes={
            STATUS_FIELD: KycStatus.pending,
            "kyc_documents": documents,
            "kyc_rejection_reason": None,
            "is_verified": user.verification_override,
        },
        effects=[
            NotifyAdmins(
                "New KYC Submission",
                f"{user.full_name} submitted identity documents for review.",
            )
        ],
        status_field=STATUS_FIELD,
    )


def approve(user: User) -> Transition:
    if user.kyc_status != KycStatus.pending:
        raise InvalidTransitionError(
            ENTITY, user.kyc_status.value, KycStatus.approved.value
        )
    return Transition(
        changes={
            STATUS_FIELD: KycStatus.approved,
            "is_verified": True,
            "kyc_rejection_reason": None,
        },
        effects=[
            NotifyUser(
                user.id,
                "Identity Verified",
                "Your identity documents have been approved. "
                "Your account is now verified.",
                NotificationType.success,
            )
        ],
        status_field=STATUS_FIELD,
    )


def reject(user: User, reason: str) -> Transition:
    reason = (reason or "").strip()
    if not reason:
        raise MissingReasonError("A rejection reason is required")
    if user.kyc_status != KycStatus.pending:
        raise InvalidTransitionError(
            ENTITY, user.kyc_status.value, KycStatus.rejected.value
        )
    return Transition(
        changes={
            STATUS_FIELD: KycStatus.rejected,
            "is_verified": False,
            "verification_override": False,
            "kyc_rejection_reason": reason,
        },
        effects=[
            NotifyUser(
                user.id,
                "KYC Action Required",
                f"Your identity verification was declined: {reason}. "
                "Please resubmit valid assets.",
                NotificationType.warning,
            )
        ],
        status_field=STATUS_FIELD,
    )
