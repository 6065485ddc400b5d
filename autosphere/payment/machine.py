"""Payment verification state machine.

    Pending -> Verified | Rejected

Both outcomes are terminal. A decision on a settled payment is refused
before anything is written.
"""

from autosphere.core.exceptions import ValidationFailed
from autosphere.notification.effects import NotifyUser, Transition
from autosphere.notification.models import NotificationType
from autosphere.payment.models import Payment, PaymentStatus


class PaymentAlreadySettledError(ValidationFailed):
    """Raised when a verified or rejected payment is decided again."""

    error_type = "payment_already_settled"

    def __init__(self, status: PaymentStatus):
        self.status = status
        super().__init__(f"Payment is already {status.value.lower()}")

    @property
    def context(self):
        return {"current": self.status.value}


def _settle(payment: Payment, outcome: PaymentStatus) -> Transition:
    if payment.status != PaymentStatus.pending:
        raise PaymentAlreadySettledError(payment.status)
    return Transition(
        changes={"status": outcome},
        effects=[
            NotifyUser(
                payment.user_id,
                f"Payment {outcome.value}",
                "Your transaction proof has been "
                f"{outcome.value.lower()} by our finance team.",
                NotificationType.success
                if outcome == PaymentStatus.verified
                else NotificationType.warning,
            )
        ],
    )


def verify(payment: Payment) -> Transition:
    return _settle(payment, PaymentStatus.verified)


def reject(payment: Payment) -> Transition:
    return _settle(payment, PaymentStatus.rejected)
