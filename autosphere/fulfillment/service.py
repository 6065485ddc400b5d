"""Booking and rental operations.

Requests can only be made against publicly visible listings. Listing and
requester details are copied onto the record at creation so it stays
readable after the source rows change.
"""

import logging
import uuid

from autosphere.access.policy import Action, Actor, can_view_fulfillment, require
from autosphere.access.visibility import (
    fulfillment_view,
    is_public,
    set_hide_from_dealer,
)
from autosphere.core.exceptions import ValidationFailed
from autosphere.fulfillment import machine
from autosphere.fulfillment.models import Booking, FulfillmentKind, Rental
from autosphere.fulfillment.schemas import BookingCreate, RentalCreate
from autosphere.listing.models import Listing
from autosphere.notification.dispatcher import commit_transition, dispatch
from autosphere.notification.effects import NotifyAdmins, Transition
from autosphere.store.adapter import Collection, EntityStore, Listener, Subscription
from autosphere.user.models import User

logger = logging.getLogger(__name__)

COLLECTIONS: dict[FulfillmentKind, Collection] = {
    FulfillmentKind.booking: Collection.bookings,
    FulfillmentKind.rental: Collection.rentals,
}


class ListingUnavailableError(ValidationFailed):
    """Raised when a request targets a listing outside public inventory."""

    error_type = "listing_unavailable"

    def __init__(self, message: str = "This listing is not available"):
        super().__init__(message)


def _available_listing(store: EntityStore, listing_id: uuid.UUID) -> Listing:
    listing = store.get_one(Collection.listings, listing_id)
    if not is_public(listing):
        raise ListingUnavailableError()
    return listing


def _denormalized(listing: Listing, user: User) -> dict:
    return {
        "user_id": user.id,
        "dealer_id": listing.dealer_id,
        "listing_label": listing.label,
        "user_name": user.full_name,
        "user_email": user.email,
    }


def create_booking(store: EntityStore, actor: Actor, data: BookingCreate) -> Booking:
    """Request a test drive. Every admin is notified."""
    require(actor, Action.create_booking)
    listing = _available_listing(store, data.listing_id)
    user = store.get_one(Collection.users, actor.id)
    booking = Booking(**data.model_dump(), **_denormalized(listing, user))
    store.push_new(Collection.bookings, booking)
    logger.info(
        "Booking %s created for listing %s",
        booking.id,
        listing.id,
        extra={"event": "booking_created", "record_id": booking.id},
    )
    dispatch(
        store,
        [
            NotifyAdmins(
                "New Test Drive Request",
                f"{user.full_name} requested a test drive of {listing.label} "
                f"on {booking.scheduled_date.isoformat()}.",
            )
        ],
    )
    return booking


def create_rental(store: EntityStore, actor: Actor, data: RentalCreate) -> Rental:
    """Request a rental. Every admin is notified."""
    require(actor, Action.create_rental)
    listing = _available_listing(store, data.listing_id)
    user = store.get_one(Collection.users, actor.id)
    rental = Rental(**data.model_dump(), **_denormalized(listing, user))
    store.push_new(Collection.rentals, rental)
    logger.info(
        "Rental %s created for listing %s",
        rental.id,
        listing.id,
        extra={"event": "rental_created", "record_id": rental.id},
    )
    dispatch(
        store,
        [
            NotifyAdmins(
                "New Rental Request",
                f"{user.full_name} requested {listing.label} for "
                f"{rental.duration} day(s) from {rental.start_date.isoformat()}.",
            )
        ],
    )
    return rental


def get_record(
    store: EntityStore, actor: Actor, kind: FulfillmentKind, record_id: uuid.UUID
) -> Booking | Rental:
    record = store.get_one(COLLECTIONS[kind], record_id)
    require(actor, Action.view_fulfillment, record)
    return record


def list_records(
    store: EntityStore, actor: Actor, kind: FulfillmentKind
) -> list[Booking | Rental]:
    """Requests visible to the actor, newest first."""
    return fulfillment_view(actor, store.get(COLLECTIONS[kind]))


def watch(
    store: EntityStore, actor: Actor, kind: FulfillmentKind, listener: Listener
) -> Subscription:
    """Live per-role view; re-emitted in full after every write."""
    if actor.is_admin:
        return store.subscribe(COLLECTIONS[kind], listener)
    return store.subscribe(
        COLLECTIONS[kind],
        listener,
        predicate=lambda record: can_view_fulfillment(actor, record),
    )


def _decide(
    store: EntityStore,
    actor: Actor,
    kind: FulfillmentKind,
    record_id: uuid.UUID,
    step,
) -> Booking | Rental:
    record = store.get_one(COLLECTIONS[kind], record_id)
    require(actor, Action.decide_fulfillment, record)
    transition: Transition = step(record)
    return commit_transition(
        store,
        COLLECTIONS[kind],
        record,
        transition,
        actor,
        machine.entity_name(kind),
    )


def accept(
    store: EntityStore, actor: Actor, kind: FulfillmentKind, record_id: uuid.UUID
) -> Booking | Rental:
    return _decide(store, actor, kind, record_id, machine.accept)


def cancel(
    store: EntityStore, actor: Actor, kind: FulfillmentKind, record_id: uuid.UUID
) -> Booking | Rental:
    return _decide(store, actor, kind, record_id, machine.cancel)


def revert(
    store: EntityStore, actor: Actor, kind: FulfillmentKind, record_id: uuid.UUID
) -> Booking | Rental:
    return _decide(store, actor, kind, record_id, machine.revert)


def set_hidden(
    store: EntityStore,
    actor: Actor,
    kind: FulfillmentKind,
    record_id: uuid.UUID,
    hidden: bool,
) -> Booking | Rental:
    record = store.get_one(COLLECTIONS[kind], record_id)
    return set_hide_from_dealer(store, actor, COLLECTIONS[kind], record, hidden)
