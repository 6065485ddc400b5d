"""Tests for booking and rental operations."""

from datetime import date, time

import pytest

from autosphere.access.exceptions import AuthorizationDenied, DenyReason
from autosphere.access.policy import Actor
from autosphere.core.exceptions import InvalidTransitionError
from autosphere.fulfillment import service
from autosphere.fulfillment.models import (
    BookingStatus,
    FulfillmentKind,
    Rental,
    RentalStatus,
)
from autosphere.fulfillment.schemas import BookingCreate, RentalCreate
from autosphere.listing.models import Listing, ListingStatus
from autosphere.notification.models import Notification
from autosphere.store.adapter import Collection, EntityStore
from autosphere.user.models import User

RENTAL = FulfillmentKind.rental


def _rent(store: EntityStore, buyer: User, listing: Listing) -> Rental:
    return service.create_rental(
        store,
        Actor.from_user(buyer),
        RentalCreate(
            listing_id=listing.id,
            start_date=date(2024, 6, 1),
            duration=3,
            total_price=1500,
        ),
    )


def _titles(store: EntityStore, user: User) -> list[str]:
    notes = store.get(Collection.notifications, Notification.recipient_id == user.id)
    return [note.title for note in notes]


def test_rental_accept_reaches_dealer_view(
    store: EntityStore, buyer: User, verified_dealer: User, admin: User, listing
):
    """Test an accepted rental is visible live in the dealer's own view."""
    dealer = Actor.from_user(verified_dealer)
    emissions: list[list[Rental]] = []
    subscription = service.watch(store, dealer, RENTAL, emissions.append)

    rental = _rent(store, buyer, listing)
    assert rental.status == RentalStatus.pending
    assert rental.hide_from_dealer is False
    assert rental.dealer_id == verified_dealer.id

    accepted = service.accept(store, Actor.from_user(admin), RENTAL, rental.id)
    subscription.close()

    assert accepted.status == RentalStatus.accepted
    assert "Rental Accepted" in _titles(store, buyer)
    assert [(r.id, r.status) for r in emissions[-1]] == [
        (rental.id, RentalStatus.accepted)
    ]


def test_hidden_rental_leaves_dealer_view_only(
    store: EntityStore, buyer: User, verified_dealer: User, admin: User, listing
):
    """Test hiding removes the record for the dealer and keeps its status."""
    admin_actor = Actor.from_user(admin)
    dealer = Actor.from_user(verified_dealer)
    rental = _rent(store, buyer, listing)
    service.accept(store, admin_actor, RENTAL, rental.id)
    emissions: list[list[Rental]] = []
    subscription = service.watch(store, dealer, RENTAL, emissions.append)

    hidden = service.set_hidden(store, admin_actor, RENTAL, rental.id, True)
    subscription.close()

    assert hidden.status == RentalStatus.accepted
    assert hidden.hide_from_dealer is True
    assert emissions[0] != [] and emissions[-1] == []
    assert service.list_records(store, dealer, RENTAL) == []
    buyer_view = service.list_records(store, Actor.from_user(buyer), RENTAL)
    assert [r.id for r in buyer_view] == [rental.id]
    with pytest.raises(AuthorizationDenied) as exc_info:
        service.get_record(store, dealer, RENTAL, rental.id)
    assert exc_info.value.reason == DenyReason.record_locked


def test_hide_is_orthogonal_to_later_transitions(
    store: EntityStore, buyer: User, admin: User, listing
):
    admin_actor = Actor.from_user(admin)
    rental = _rent(store, buyer, listing)
    service.set_hidden(store, admin_actor, RENTAL, rental.id, True)

    cancelled = service.cancel(store, admin_actor, RENTAL, rental.id)
    reverted = service.revert(store, admin_actor, RENTAL, rental.id)

    assert cancelled.hide_from_dealer is True
    assert reverted.status == RentalStatus.pending
    assert reverted.hide_from_dealer is True


def test_create_notifies_admins_and_copies_details(
    store: EntityStore, buyer: User, admin: User, listing
):
    booking = service.create_booking(
        store,
        Actor.from_user(buyer),
        BookingCreate(
            listing_id=listing.id,
            scheduled_date=date(2024, 6, 1),
            scheduled_time=time(14, 0),
            location="Showroom",
        ),
    )

    assert booking.status == BookingStatus.pending
    assert booking.listing_label == listing.label
    assert booking.user_email == buyer.email
    assert _titles(store, admin) == ["New Test Drive Request"]


@pytest.mark.parametrize(
    ("status", "suspended"),
    [(ListingStatus.pending, False), (ListingStatus.approved, True)],
    ids=["pending", "suspended"],
)
def test_request_requires_public_listing(
    store: EntityStore,
    buyer: User,
    verified_dealer: User,
    make_listing,
    status: ListingStatus,
    suspended: bool,
):
    listing = make_listing(verified_dealer, status=status, is_suspended=suspended)

    with pytest.raises(service.ListingUnavailableError):
        _rent(store, buyer, listing)

    assert store.get(Collection.rentals) == []


def test_dealers_cannot_request_or_decide(
    store: EntityStore, buyer: User, verified_dealer: User, listing
):
    dealer = Actor.from_user(verified_dealer)
    rental = _rent(store, buyer, listing)

    with pytest.raises(AuthorizationDenied):
        _rent(store, verified_dealer, listing)
    with pytest.raises(AuthorizationDenied) as exc_info:
        service.accept(store, dealer, RENTAL, rental.id)

    assert exc_info.value.reason == DenyReason.wrong_role


def test_double_accept_is_invalid(
    store: EntityStore, buyer: User, admin: User, listing
):
    admin_actor = Actor.from_user(admin)
    rental = _rent(store, buyer, listing)
    service.accept(store, admin_actor, RENTAL, rental.id)

    with pytest.raises(InvalidTransitionError):
        service.accept(store, admin_actor, RENTAL, rental.id)


def test_buyers_see_only_their_own(
    store: EntityStore, buyer: User, other_buyer: User, listing
):
    mine = _rent(store, buyer, listing)
    _rent(store, other_buyer, listing)

    visible = service.list_records(store, Actor.from_user(buyer), RENTAL)

    assert [r.id for r in visible] == [mine.id]
    with pytest.raises(AuthorizationDenied):
        service.get_record(store, Actor.from_user(other_buyer), RENTAL, mine.id)
