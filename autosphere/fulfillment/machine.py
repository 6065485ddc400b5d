"""Fulfillment state machine for bookings (test drives) and rentals.

    Pending -> Confirmed/Accepted | Cancelled
    Confirmed/Accepted | Cancelled -> Pending (admin revert)

Bookings and rentals share the vocabulary; only the name of the positive
outcome differs. ``hide_from_dealer`` is not part of this machine.
"""

from autosphere.core.exceptions import InvalidTransitionError
from autosphere.fulfillment.models import (
    Booking,
    BookingStatus,
    FulfillmentKind,
    Rental,
    RentalStatus,
)
from autosphere.notification.effects import NotifyUser, Transition
from autosphere.notification.models import NotificationType

_STATUS = {
    FulfillmentKind.booking: BookingStatus,
    FulfillmentKind.rental: RentalStatus,
}

_ACCEPTED = {
    FulfillmentKind.booking: BookingStatus.confirmed,
    FulfillmentKind.rental: RentalStatus.accepted,
}

_NOUN = {
    FulfillmentKind.booking: "Test Drive",
    FulfillmentKind.rental: "Rental",
}


def kind_of(record: Booking | Rental) -> FulfillmentKind:
    if isinstance(record, Booking):
        return FulfillmentKind.booking
    return FulfillmentKind.rental


def entity_name(kind: FulfillmentKind) -> str:
    return kind.value.capitalize()


def _move(record: Booking | Rental, target) -> Transition:
    kind = kind_of(record)
    statuses = _STATUS[kind]
    pending = statuses.pending
    if target == pending:
        allowed = record.status != pending
    else:
        allowed = record.status == pending
    if not allowed:
        raise InvalidTransitionError(
            entity_name(kind), record.status.value, target.value
        )

    noun = _NOUN[kind]
    if target == pending:
        title = f"{noun} Pending"
        message = (
            f"Your {noun.lower()} for {record.listing_label} is back under review."
        )
        type = NotificationType.info
    else:
        title = f"{noun} {target.value}"
        message = (
            f"Your {noun.lower()} for {record.listing_label} has been "
            f"{target.value.lower()} by administration."
        )
        type = (
            NotificationType.success
            if target == _ACCEPTED[kind]
            else NotificationType.warning
        )

    return Transition(
        changes={"status": target},
        effects=[NotifyUser(record.user_id, title, message, type)],
    )


def accept(record: Booking | Rental) -> Transition:
    """Confirm a booking or accept a rental."""
    return _move(record, _ACCEPTED[kind_of(record)])


def cancel(record: Booking | Rental) -> Transition:
    return _move(record, _STATUS[kind_of(record)].cancelled)


def revert(record: Booking | Rental) -> Transition:
    """Send a decided request back to Pending to correct a mistake."""
    return _move(record, _STATUS[kind_of(record)].pending)
