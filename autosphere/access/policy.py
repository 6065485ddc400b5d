"""Authorization matrix.

``authorize(actor, action, target)`` is a pure function of its arguments: it
reads nothing but the actor snapshot and the target record, so the same call
always produces the same decision. ``require`` is the raising variant used
by services before they touch a state machine.

The ownership predicates at the bottom are shared with the read-side
projections in ``autosphere.access.visibility``, so one rule decides both
what a caller may see and what it may change.
"""

import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any

from autosphere.access.exceptions import AuthorizationDenied, DenyReason
from autosphere.listing.models import ArchivedBy, ListingStatus
from autosphere.user.models import User, UserRole


@dataclass(frozen=True)
class Actor:
    """Who is performing an operation, captured once per request."""

    id: uuid.UUID
    role: UserRole
    is_verified: bool = False
    is_suspended: bool = False

    @classmethod
    def from_user(cls, user: User) -> "Actor":
        return cls(
            id=user.id,
            role=user.role,
            is_verified=user.is_verified,
            is_suspended=user.is_suspended,
        )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

    @property
    def is_dealer(self) -> bool:
        return self.role == UserRole.dealer


class Action(str, Enum):
    # listings
    review_listings = "review_listings"
    create_listing = "create_listing"
    edit_listing = "edit_listing"
    archive_listing = "archive_listing"
    restore_listing = "restore_listing"
    moderate_listing = "moderate_listing"
    suspend_listing = "suspend_listing"
    feature_listing = "feature_listing"
    delete_listing = "delete_listing"
    # bookings / rentals
    create_booking = "create_booking"
    create_rental = "create_rental"
    decide_fulfillment = "decide_fulfillment"
    hide_fulfillment = "hide_fulfillment"
    view_fulfillment = "view_fulfillment"
    # payments
    create_payment = "create_payment"
    decide_payment = "decide_payment"
    view_payment = "view_payment"
    # identity
    submit_kyc = "submit_kyc"
    review_kyc = "review_kyc"
    update_profile = "update_profile"
    toggle_favorite = "toggle_favorite"
    upload_file = "upload_file"
    # messaging
    manage_notifications = "manage_notifications"
    send_inquiry = "send_inquiry"
    manage_inquiries = "manage_inquiries"
    broadcast = "broadcast"
    # accounts
    manage_users = "manage_users"


READ_ACTIONS: frozenset[Action] = frozenset(
    {Action.review_listings, Action.view_fulfillment, Action.view_payment}
)

ADMIN_ONLY: frozenset[Action] = frozenset(
    {
        Action.review_listings,
        Action.moderate_listing,
        Action.suspend_listing,
        Action.feature_listing,
        Action.delete_listing,
        Action.decide_fulfillment,
        Action.hide_fulfillment,
        Action.decide_payment,
        Action.review_kyc,
        Action.manage_inquiries,
        Action.broadcast,
        Action.manage_users,
    }
)

# Actions every role may take on records that are its own.
SELF_SERVICE: frozenset[Action] = frozenset(
    {
        Action.submit_kyc,
        Action.update_profile,
        Action.toggle_favorite,
        Action.manage_notifications,
    }
)


@dataclass(frozen=True)
class Allow:
    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Deny:
    reason: DenyReason

    def __bool__(self) -> bool:
        return False


Decision = Allow | Deny

ALLOW = Allow()


def authorize(actor: Actor, action: Action, target: Any = None) -> Decision:
    """Decide whether ``actor`` may perform ``action`` on ``target``.

    ``target`` is the record being acted on (a Listing, Booking, Rental,
    Payment, Notification or User), or None for collection-level actions
    such as creating a new record.
    """
    if actor.is_suspended and action not in READ_ACTIONS:
        return Deny(DenyReason.suspended)
    if actor.is_admin:
        return ALLOW
    if action in ADMIN_ONLY:
        return Deny(DenyReason.wrong_role)
    if action in (Action.send_inquiry, Action.upload_file):
        return ALLOW
    if action in SELF_SERVICE:
        return _self_service(actor, target)

    match action:
        case Action.create_listing:
            if not actor.is_dealer:
                return Deny(DenyReason.wrong_role)
            if not actor.is_verified:
                return Deny(DenyReason.not_verified)
            return ALLOW
        case Action.edit_listing | Action.archive_listing:
            if not actor.is_dealer:
                return Deny(DenyReason.wrong_role)
            if not owns_listing(actor, target):
                return Deny(DenyReason.not_owner)
            return ALLOW
        case Action.restore_listing:
            return _dealer_restore(actor, target)
        case Action.create_booking | Action.create_rental | Action.create_payment:
            if actor.role != UserRole.buyer:
                return Deny(DenyReason.wrong_role)
            if target is not None and not owns_request(actor, target):
                return Deny(DenyReason.not_owner)
            return ALLOW
        case Action.view_fulfillment:
            return _view_fulfillment(actor, target)
        case Action.view_payment:
            if not owns_request(actor, target):
                return Deny(DenyReason.not_owner)
            return ALLOW
    return Deny(DenyReason.wrong_role)


def require(actor: Actor, action: Action, target: Any = None) -> None:
    """Raise ``AuthorizationDenied`` unless ``authorize`` allows the action."""
    decision = authorize(actor, action, target)
    if isinstance(decision, Deny):
        raise AuthorizationDenied(decision.reason)


def _self_service(actor: Actor, target: Any) -> Decision:
    if target is None:
        return ALLOW
    owner_id = getattr(target, "recipient_id", None) or getattr(target, "id", None)
    if owner_id != actor.id:
        return Deny(DenyReason.not_owner)
    return ALLOW


def _dealer_restore(actor: Actor, listing: Any) -> Decision:
    if not actor.is_dealer:
        return Deny(DenyReason.wrong_role)
    if not owns_listing(actor, listing):
        return Deny(DenyReason.not_owner)
    if listing.archived_by == ArchivedBy.admin:
        return Deny(DenyReason.record_locked)
    if listing.status == ListingStatus.rejected:
        return Deny(DenyReason.wrong_role)
    return ALLOW


def _view_fulfillment(actor: Actor, record: Any) -> Decision:
    if owns_request(actor, record):
        return ALLOW
    if actor.is_dealer and record.dealer_id == actor.id:
        if record.hide_from_dealer:
            return Deny(DenyReason.record_locked)
        return ALLOW
    return Deny(DenyReason.not_owner)


# --- ownership predicates ---


def owns_listing(actor: Actor, listing: Any) -> bool:
    return listing is not None and listing.dealer_id == actor.id


def owns_request(actor: Actor, record: Any) -> bool:
    """True when ``record`` (booking, rental or payment) was made by actor."""
    return record is not None and record.user_id == actor.id


def can_view_fulfillment(actor: Actor, record: Any) -> bool:
    return bool(authorize(actor, Action.view_fulfillment, record))
