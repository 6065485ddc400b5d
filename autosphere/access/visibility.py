"""Visibility overlay.

Two admin-only flags that hide a record without touching its status:
``hide_from_dealer`` on bookings and rentals, ``is_suspended`` on listings.
The projections below filter full snapshots per caller using the same
ownership predicates as the authorization matrix.
"""

import logging
from collections.abc import Iterable
from typing import Any

from autosphere.access.policy import (
    Action,
    Actor,
    can_view_fulfillment,
    owns_request,
    require,
)
from autosphere.fulfillment.models import Booking, Rental
from autosphere.listing.models import Listing, ListingStatus
from autosphere.notification.dispatcher import dispatch
from autosphere.notification.effects import NotifyUser
from autosphere.notification.models import NotificationType
from autosphere.store.adapter import Collection, EntityStore

logger = logging.getLogger(__name__)


def is_public(listing: Listing) -> bool:
    """Public inventory is approved listings that are not suspended."""
    return listing.status == ListingStatus.approved and not listing.is_suspended


def public_listings(listings: Iterable[Listing]) -> list[Listing]:
    return [listing for listing in listings if is_public(listing)]


def fulfillment_view(actor: Actor, records: Iterable[Any]) -> list[Any]:
    """Bookings or rentals the actor may see.

    Admins see everything, buyers their own requests, dealers requests
    against their inventory that are not hidden from them.
    """
    if actor.is_admin:
        return list(records)
    return [record for record in records if can_view_fulfillment(actor, record)]


def payment_view(actor: Actor, payments: Iterable[Any]) -> list[Any]:
    if actor.is_admin:
        return list(payments)
    return [payment for payment in payments if owns_request(actor, payment)]


def set_hide_from_dealer(
    store: EntityStore,
    actor: Actor,
    collection: Collection,
    record: Booking | Rental,
    hidden: bool,
) -> Booking | Rental:
    """Hide or reveal a booking/rental for its dealer. Status is untouched."""
    require(actor, Action.hide_fulfillment, record)
    updated = store.patch(collection, record.id, {"hide_from_dealer": hidden})
    logger.info(
        "%s %s hide_from_dealer=%s",
        collection.value,
        record.id,
        hidden,
        extra={
            "event": "overlay",
            "collection": collection.value,
            "record_id": record.id,
            "actor_id": actor.id,
        },
    )
    return updated


def set_listing_suspended(
    store: EntityStore, actor: Actor, listing: Listing, suspended: bool
) -> Listing:
    """Suspend or reinstate a listing without changing its moderation status."""
    require(actor, Action.suspend_listing, listing)
    updated = store.patch(
        Collection.listings, listing.id, {"is_suspended": suspended}
    )
    logger.info(
        "Listing %s is_suspended=%s",
        listing.id,
        suspended,
        extra={
            "event": "overlay",
            "collection": Collection.listings.value,
            "record_id": listing.id,
            "actor_id": actor.id,
        },
    )
    if listing.dealer_id is not None:
        if suspended:
            effect = NotifyUser(
                listing.dealer_id,
                "Listing Suspended",
                f"Your listing {listing.label} has been hidden from public "
                "inventory by administration.",
                NotificationType.warning,
            )
        else:
            effect = NotifyUser(
                listing.dealer_id,
                "Listing Reinstated",
                f"Your listing {listing.label} is visible in public inventory again.",
                NotificationType.success,
            )
        dispatch(store, [effect])
    return updated
