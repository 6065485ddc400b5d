"""Tests for payment operations."""

import uuid
from datetime import date

import pytest
from hypothesis import given
from hypothesis import settings as hypothesis_settings
from hypothesis import strategies as st
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from autosphere.access.exceptions import AuthorizationDenied, DenyReason
from autosphere.access.policy import Actor
from autosphere.fulfillment import service as fulfillment_service
from autosphere.fulfillment.schemas import RentalCreate
from autosphere.notification.models import Notification
from autosphere.payment import service
from autosphere.payment.machine import PaymentAlreadySettledError
from autosphere.payment.models import (
    Payment,
    PaymentItemType,
    PaymentMethod,
    PaymentStatus,
)
from autosphere.payment.schemas import PaymentCreate
from autosphere.store.adapter import ChangeFeed, Collection, EntityStore
from autosphere.user.models import User, UserRole


def _purchase(listing, amount: float = 215000) -> PaymentCreate:
    return PaymentCreate(
        item_type=PaymentItemType.purchase,
        item_id=listing.id,
        amount=amount,
        method=PaymentMethod.bank_transfer,
        reference_id="RCPT-2024-001",
    )


def test_rejected_payment_is_terminal(
    store: EntityStore, buyer: User, admin: User, listing
):
    admin_actor = Actor.from_user(admin)
    payment = service.create_payment(store, Actor.from_user(buyer), _purchase(listing))
    assert payment.status == PaymentStatus.pending
    assert payment.item_description == f"Purchase: {listing.label}"

    rejected = service.reject_payment(store, admin_actor, payment.id)
    assert rejected.status == PaymentStatus.rejected

    with pytest.raises(PaymentAlreadySettledError):
        service.verify_payment(store, admin_actor, payment.id)
    stored = store.get_one(Collection.payments, payment.id)
    assert stored.status == PaymentStatus.rejected


def test_submission_alerts_admins_and_decision_alerts_payer(
    store: EntityStore, buyer: User, admin: User, listing
):
    payment = service.create_payment(store, Actor.from_user(buyer), _purchase(listing))
    service.verify_payment(store, Actor.from_user(admin), payment.id)

    def titles(user: User) -> list[str]:
        notes = store.get(
            Collection.notifications, Notification.recipient_id == user.id
        )
        return [note.title for note in notes]

    assert titles(admin) == ["New Payment Submitted"]
    assert titles(buyer) == ["Payment Verified"]


def test_unknown_purchase_item(store: EntityStore, buyer: User, listing):
    data = _purchase(listing)
    store.delete(Collection.listings, listing.id)

    with pytest.raises(service.UnknownPaymentItemError) as exc_info:
        service.create_payment(store, Actor.from_user(buyer), data)

    assert exc_info.value.status_code == 400
    assert store.get(Collection.payments) == []


def test_rental_payment_must_be_own_rental(
    store: EntityStore, buyer: User, other_buyer: User, listing
):
    rental = fulfillment_service.create_rental(
        store,
        Actor.from_user(buyer),
        RentalCreate(listing_id=listing.id, start_date=date(2024, 6, 1), duration=3),
    )
    data = PaymentCreate(
        item_type=PaymentItemType.rental,
        item_id=rental.id,
        amount=1500,
        method=PaymentMethod.card,
        reference_id="TX-1",
    )

    with pytest.raises(AuthorizationDenied) as exc_info:
        service.create_payment(store, Actor.from_user(other_buyer), data)
    assert exc_info.value.reason == DenyReason.not_owner

    payment = service.create_payment(store, Actor.from_user(buyer), data)
    assert payment.item_description == f"Rental: {listing.label} (3 days)"


def test_description_survives_listing_deletion(
    store: EntityStore, buyer: User, admin: User, listing
):
    payment = service.create_payment(store, Actor.from_user(buyer), _purchase(listing))
    store.delete(Collection.listings, listing.id)

    stored = service.get_payment(store, Actor.from_user(buyer), payment.id)

    assert stored.item_description == f"Purchase: {listing.label}"


def test_dealer_and_suspended_buyer_cannot_submit(
    store: EntityStore, verified_dealer: User, make_user, listing
):
    suspended = make_user(UserRole.buyer, is_suspended=True)

    with pytest.raises(AuthorizationDenied) as dealer_exc:
        service.create_payment(
            store, Actor.from_user(verified_dealer), _purchase(listing)
        )
    with pytest.raises(AuthorizationDenied) as suspended_exc:
        service.create_payment(store, Actor.from_user(suspended), _purchase(listing))

    assert dealer_exc.value.reason == DenyReason.wrong_role
    assert suspended_exc.value.reason == DenyReason.suspended


def test_list_payments_by_role(
    store: EntityStore, buyer: User, other_buyer: User, admin: User, listing
):
    mine = service.create_payment(store, Actor.from_user(buyer), _purchase(listing))
    service.create_payment(store, Actor.from_user(other_buyer), _purchase(listing))

    own = service.list_payments(store, Actor.from_user(buyer))
    assert [p.id for p in own] == [mine.id]
    assert len(service.list_payments(store, Actor.from_user(admin))) == 2
    with pytest.raises(AuthorizationDenied):
        service.get_payment(store, Actor.from_user(other_buyer), mine.id)


def test_stats(store: EntityStore, buyer: User, admin: User, listing):
    admin_actor = Actor.from_user(admin)
    buyer_actor = Actor.from_user(buyer)
    first = service.create_payment(store, buyer_actor, _purchase(listing, 1000))
    second = service.create_payment(store, buyer_actor, _purchase(listing, 250.5))
    service.create_payment(store, buyer_actor, _purchase(listing, 99))
    service.verify_payment(store, admin_actor, first.id)
    service.verify_payment(store, admin_actor, second.id)

    stats = service.payment_stats(store, admin_actor)

    assert stats.verified_volume == 1250.5
    assert stats.pending_count == 1
    with pytest.raises(AuthorizationDenied):
        service.payment_stats(store, buyer_actor)


@hypothesis_settings(max_examples=25, deadline=None)
@given(
    rows=st.lists(
        st.tuples(
            st.integers(min_value=1, max_value=1_000_000),
            st.sampled_from(PaymentStatus),
        ),
        max_size=12,
    )
)
def test_verified_volume_is_a_pure_sum(rows):
    """Property: the volume is the sum of verified amounts, however often read."""
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        store = EntityStore(session, feed=ChangeFeed())
        for n, (amount, status) in enumerate(rows):
            store.push_new(
                Collection.payments,
                Payment(
                    user_id=uuid.uuid4(),
                    user_name="Buyer",
                    item_type=PaymentItemType.purchase,
                    item_id=uuid.uuid4(),
                    item_description="Purchase",
                    amount=amount,
                    method=PaymentMethod.crypto,
                    reference_id=f"0x{n:04x}",
                    status=status,
                ),
            )

        expected = sum(a for a, s in rows if s == PaymentStatus.verified)
        assert service.verified_volume(store) == expected
        assert service.verified_volume(store) == expected
