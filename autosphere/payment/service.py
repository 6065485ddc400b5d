"""Payment operations.

A payment must point at an existing listing (purchase) or at one of the
payer's own rentals (rental) when it is submitted. The item description is
copied onto the payment so it stays auditable if the item is deleted.
"""

import logging
import uuid

from autosphere.access.exceptions import AuthorizationDenied, DenyReason
from autosphere.access.policy import Action, Actor, require
from autosphere.access.visibility import payment_view
from autosphere.core.exceptions import ValidationFailed
from autosphere.notification.dispatcher import commit_transition, dispatch
from autosphere.notification.effects import NotifyAdmins
from autosphere.payment import machine
from autosphere.payment.models import Payment, PaymentItemType, PaymentStatus
from autosphere.payment.schemas import PaymentCreate, PaymentStats
from autosphere.store.adapter import Collection, EntityStore, RecordNotFoundError

logger = logging.getLogger(__name__)

ENTITY = "Payment"


class UnknownPaymentItemError(ValidationFailed):
    """Raised when a payment references an item that does not exist."""

    error_type = "unknown_payment_item"

    def __init__(self, item_type: PaymentItemType):
        super().__init__(
            f"The referenced {item_type.value.lower()} item does not exist"
        )


def describe_item(
    store: EntityStore, actor: Actor, item_type: PaymentItemType, item_id: uuid.UUID
) -> str:
    """Resolve a payment's item and return its display description."""
    collection = (
        Collection.listings
        if item_type == PaymentItemType.purchase
        else Collection.rentals
    )
    try:
        item = store.get_one(collection, item_id)
    except RecordNotFoundError as e:
        raise UnknownPaymentItemError(item_type) from e

    if item_type == PaymentItemType.purchase:
        return f"Purchase: {item.label}"
    if item.user_id != actor.id:
        raise AuthorizationDenied(
            DenyReason.not_owner, "You can only pay for your own rentals"
        )
    return f"Rental: {item.listing_label} ({item.duration} days)"


def create_payment(store: EntityStore, actor: Actor, data: PaymentCreate) -> Payment:
    """Record a proof of payment and alert every admin."""
    require(actor, Action.create_payment)
    description = describe_item(store, actor, data.item_type, data.item_id)
    user = store.get_one(Collection.users, actor.id)
    payment = Payment(
        **data.model_dump(),
        user_id=actor.id,
        user_name=user.full_name,
        item_description=description,
    )
    store.push_new(Collection.payments, payment)
    logger.info(
        "Payment %s submitted for %s",
        payment.id,
        description,
        extra={"event": "payment_created", "record_id": payment.id},
    )
    dispatch(
        store,
        [
            NotifyAdmins(
                "New Payment Submitted",
                f"{user.full_name} submitted a {payment.method.value} payment of "
                f"{payment.amount:,.2f} for {description}.",
            )
        ],
    )
    return payment


def get_payment(store: EntityStore, actor: Actor, payment_id: uuid.UUID) -> Payment:
    payment = store.get_one(Collection.payments, payment_id)
    require(actor, Action.view_payment, payment)
    return payment


def list_payments(store: EntityStore, actor: Actor) -> list[Payment]:
    return payment_view(actor, store.get(Collection.payments))


def _decide(
    store: EntityStore, actor: Actor, payment_id: uuid.UUID, step
) -> Payment:
    payment = store.get_one(Collection.payments, payment_id)
    require(actor, Action.decide_payment, payment)
    return commit_transition(
        store, Collection.payments, payment, step(payment), actor, ENTITY
    )


def verify_payment(store: EntityStore, actor: Actor, payment_id: uuid.UUID) -> Payment:
    return _decide(store, actor, payment_id, machine.verify)


def reject_payment(store: EntityStore, actor: Actor, payment_id: uuid.UUID) -> Payment:
    return _decide(store, actor, payment_id, machine.reject)


def verified_volume(store: EntityStore) -> float:
    """Total amount of verified payments, summed from source on every call."""
    verified = store.get(Collection.payments, Payment.status == PaymentStatus.verified)
    return sum(payment.amount for payment in verified)


def payment_stats(store: EntityStore, actor: Actor) -> PaymentStats:
    require(actor, Action.decide_payment)
    pending = store.get(Collection.payments, Payment.status == PaymentStatus.pending)
    return PaymentStats(
        verified_volume=verified_volume(store), pending_count=len(pending)
    )
