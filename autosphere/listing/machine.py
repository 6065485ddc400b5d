"""Listing moderation state machine.

    pending  -> approved | rejected
    approved -> archived (by dealer or admin)
    archived -> approved (restore)
    rejected -> approved (restore, admin only)

The machine checks only the source state and required inputs. Who may call
each transition is decided beforehand by ``autosphere.access.policy``.
"""

from autosphere.core.exceptions import InvalidTransitionError, MissingReasonError
from autosphere.listing.models import ArchivedBy, Listing, ListingStatus
from autosphere.notification.effects import Effect, NotifyUser, Transition
from autosphere.notification.models import NotificationType
from autosphere.user.models import UserRole

ENTITY = "Listing"


def initial_status(role: UserRole) -> ListingStatus:
    """Admin inventory skips moderation; dealer submissions wait for it."""
    if role == UserRole.admin:
        return ListingStatus.approved
    return ListingStatus.pending


def _ensure(listing: Listing, allowed: set[ListingStatus], target: ListingStatus):
    if listing.status not in allowed:
        raise InvalidTransitionError(ENTITY, listing.status.value, target.value)


def _notify_dealer(
    listing: Listing, title: str, message: str, type: NotificationType
) -> list[Effect]:
    if listing.dealer_id is None:
        return []
    return [NotifyUser(listing.dealer_id, title, message, type)]


def approve(listing: Listing) -> Transition:
    _ensure(listing, {ListingStatus.pending}, ListingStatus.approved)
    return Transition(
        changes={
            "status": ListingStatus.approved,
            "moderation_reason": None,
            "archived_by": None,
        },
        effects=_notify_dealer(
            listing,
            "Listing Approved",
            f"Your listing {listing.label} has been approved and is now live.",
            NotificationType.success,
        ),
    )


def reject(listing: Listing, reason: str) -> Transition:
    reason = (reason or "").strip()
    if not reason:
        raise MissingReasonError("A rejection reason is required")
    _ensure(listing, {ListingStatus.pending}, ListingStatus.rejected)
    return Transition(
        changes={
            "status": ListingStatus.rejected,
            "moderation_reason": reason,
            "archived_by": None,
        },
        effects=_notify_dealer(
            listing,
            "Listing Rejected",
            f"Your listing {listing.label} was rejected: {reason}",
            NotificationType.warning,
        ),
    )


def archive(listing: Listing, by: ArchivedBy) -> Transition:
    _ensure(listing, {ListingStatus.approved}, ListingStatus.archived)
    return Transition(
        changes={"status": ListingStatus.archived, "archived_by": by},
        effects=_notify_dealer(
            listing,
            "Listing Archived",
            f"Your listing {listing.label} has been archived"
            + (" by administration." if by == ArchivedBy.admin else "."),
            NotificationType.info,
        ),
    )


def restore(listing: Listing) -> Transition:
    _ensure(
        listing,
        {ListingStatus.archived, ListingStatus.rejected},
        ListingStatus.approved,
    )
    return Transition(
        changes={
            "status": ListingStatus.approved,
            "moderation_reason": None,
            "archived_by": None,
        },
        effects=_notify_dealer(
            listing,
            "Listing Restored",
            f"Your listing {listing.label} is live again.",
            NotificationType.success,
        ),
    )
