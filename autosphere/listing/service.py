"""Listing operations.

One function per named operation. Each checks the authorization matrix,
asks the moderation machine for a transition, commits it and dispatches
its notifications.
"""

import logging
import uuid
from typing import Any

from autosphere.access.policy import Action, Actor, owns_listing, require
from autosphere.access.visibility import is_public, set_listing_suspended
from autosphere.listing import machine
from autosphere.listing.models import ArchivedBy, Listing, ListingStatus
from autosphere.listing.schemas import ListingCreate, ListingUpdate
from autosphere.notification.dispatcher import commit_transition, dispatch
from autosphere.notification.effects import NotifyAdmins, Transition
from autosphere.store.adapter import (
    Collection,
    EntityStore,
    Listener,
    RecordNotFoundError,
    Subscription,
)
from autosphere.user.models import UserRole

logger = logging.getLogger(__name__)


def _transition(
    store: EntityStore, actor: Actor, listing: Listing, transition: Transition
) -> Listing:
    return commit_transition(
        store, Collection.listings, listing, transition, actor, machine.ENTITY
    )


def create_listing(store: EntityStore, actor: Actor, data: ListingCreate) -> Listing:
    """Create a listing.

    Dealer submissions start pending and alert every admin; admin inventory
    is platform-sourced (no dealer) and goes live immediately.
    """
    require(actor, Action.create_listing)
    listing = Listing(
        **data.model_dump(),
        dealer_id=None if actor.is_admin else actor.id,
        status=machine.initial_status(actor.role),
    )
    store.push_new(Collection.listings, listing)
    logger.info(
        "Listing %s created as %s",
        listing.id,
        listing.status.value,
        extra={
            "event": "listing_created",
            "record_id": listing.id,
            "actor_id": actor.id,
        },
    )
    if listing.status == ListingStatus.pending:
        dispatch(
            store,
            [
                NotifyAdmins(
                    "New Listing Submitted",
                    f"{listing.label} is awaiting moderation.",
                )
            ],
        )
    return listing


def get_listing(store: EntityStore, listing_id: uuid.UUID) -> Listing:
    return store.get_one(Collection.listings, listing_id)


def get_visible_listing(
    store: EntityStore, actor: Actor | None, listing_id: uuid.UUID
) -> Listing:
    """Fetch a listing as ``actor`` may see it.

    Non-public listings exist only for their dealer and for admins; anyone
    else gets a not-found.
    """
    listing = get_listing(store, listing_id)
    if is_public(listing):
        return listing
    if actor is not None and (actor.is_admin or owns_listing(actor, listing)):
        return listing
    raise RecordNotFoundError(Collection.listings, listing_id)


def list_public(store: EntityStore, featured: bool | None = None) -> list[Listing]:
    where: list[Any] = [
        Listing.status == ListingStatus.approved,
        Listing.is_suspended == False,  # noqa: E712
    ]
    if featured is not None:
        where.append(Listing.is_featured == featured)
    return store.get(Collection.listings, *where)


def list_for_dealer(store: EntityStore, actor: Actor) -> list[Listing]:
    return store.get(Collection.listings, Listing.dealer_id == actor.id)


def list_all(
    store: EntityStore, actor: Actor, status: ListingStatus | None = None
) -> list[Listing]:
    """Admin view of every listing, optionally filtered by status."""
    require(actor, Action.review_listings)
    if status is None:
        return store.get(Collection.listings)
    return store.get(Collection.listings, Listing.status == status)


def watch_public(store: EntityStore, listener: Listener) -> Subscription:
    """Live view of public inventory; every emission is the full set."""
    return store.subscribe(Collection.listings, listener, predicate=is_public)


def update_listing(
    store: EntityStore, actor: Actor, listing_id: uuid.UUID, data: ListingUpdate
) -> Listing:
    """Edit non-status fields. Moderation state is never touched here.

    Fields sent as ``null`` are left as they are.
    """
    listing = get_listing(store, listing_id)
    require(actor, Action.edit_listing, listing)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        return listing
    return store.patch(Collection.listings, listing.id, changes)


def approve_listing(
    store: EntityStore, actor: Actor, listing_id: uuid.UUID
) -> Listing:
    listing = get_listing(store, listing_id)
    require(actor, Action.moderate_listing, listing)
    return _transition(store, actor, listing, machine.approve(listing))


def reject_listing(
    store: EntityStore, actor: Actor, listing_id: uuid.UUID, reason: str
) -> Listing:
    listing = get_listing(store, listing_id)
    require(actor, Action.moderate_listing, listing)
    return _transition(store, actor, listing, machine.reject(listing, reason))


def archive_listing(
    store: EntityStore, actor: Actor, listing_id: uuid.UUID
) -> Listing:
    listing = get_listing(store, listing_id)
    require(actor, Action.archive_listing, listing)
    by = ArchivedBy.admin if actor.role == UserRole.admin else ArchivedBy.dealer
    return _transition(store, actor, listing, machine.archive(listing, by))


def restore_listing(
    store: EntityStore, actor: Actor, listing_id: uuid.UUID
) -> Listing:
    listing = get_listing(store, listing_id)
    require(actor, Action.restore_listing, listing)
    return _transition(store, actor, listing, machine.restore(listing))


def suspend_listing(
    store: EntityStore, actor: Actor, listing_id: uuid.UUID, suspended: bool
) -> Listing:
    listing = get_listing(store, listing_id)
    return set_listing_suspended(store, actor, listing, suspended)


def feature_listing(
    store: EntityStore, actor: Actor, listing_id: uuid.UUID, featured: bool
) -> Listing:
    listing = get_listing(store, listing_id)
    require(actor, Action.feature_listing, listing)
    return store.patch(Collection.listings, listing.id, {"is_featured": featured})


def delete_listing(store: EntityStore, actor: Actor, listing_id: uuid.UUID) -> None:
    """Hard-delete a listing. Payments keep their denormalized description."""
    listing = get_listing(store, listing_id)
    require(actor, Action.delete_listing, listing)
    store.delete(Collection.listings, listing.id)
    logger.info(
        "Listing %s deleted",
        listing_id,
        extra={
            "event": "listing_deleted",
            "record_id": listing_id,
            "actor_id": actor.id,
        },
    )
