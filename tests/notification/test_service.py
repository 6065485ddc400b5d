"""Tests for the notification feed and admin messaging."""

import pytest

from autosphere.access.exceptions import AuthorizationDenied, DenyReason
from autosphere.access.policy import Actor
from autosphere.notification import service
from autosphere.notification.dispatcher import dispatch
from autosphere.notification.effects import NotifyUser
from autosphere.notification.models import Audience, NotificationType
from autosphere.notification.schemas import (
    BroadcastCreate,
    DirectMessageCreate,
    MessageUpdate,
)
from autosphere.store.adapter import Collection, EntityStore
from autosphere.user.models import User


def _notify(store: EntityStore, user: User, count: int = 1) -> None:
    dispatch(store, [NotifyUser(user.id, f"Note {n}", "m") for n in range(count)])


def test_feed_is_private(store: EntityStore, buyer: User, other_buyer: User):
    _notify(store, buyer, 2)
    _notify(store, other_buyer)

    feed = service.list_feed(store, Actor.from_user(buyer))

    assert len(feed) == 2
    assert all(n.recipient_id == buyer.id for n in feed)


def test_mark_read_own_only(store: EntityStore, buyer: User, other_buyer: User):
    _notify(store, buyer)
    note = service.list_feed(store, Actor.from_user(buyer))[0]

    with pytest.raises(AuthorizationDenied) as exc_info:
        service.mark_read(store, Actor.from_user(other_buyer), note.id)
    assert exc_info.value.reason == DenyReason.not_owner

    assert service.mark_read(store, Actor.from_user(buyer), note.id).read is True


def test_mark_all_read_and_clear(store: EntityStore, buyer: User, other_buyer: User):
    me = Actor.from_user(buyer)
    _notify(store, buyer, 3)
    _notify(store, other_buyer)

    assert service.mark_all_read(store, me) == 3
    assert service.mark_all_read(store, me) == 0
    assert service.clear_feed(store, me) == 3
    assert service.list_feed(store, me) == []
    assert len(store.get(Collection.notifications)) == 1


def test_watch_feed_emits_only_own(store: EntityStore, buyer: User, other_buyer: User):
    emissions: list[list] = []
    subscription = service.watch_feed(store, Actor.from_user(buyer), emissions.append)

    _notify(store, other_buyer)
    _notify(store, buyer)
    subscription.close()

    assert emissions[0] == []
    assert [n.recipient_id for n in emissions[-1]] == [buyer.id]


def test_broadcast_to_dealers(
    store: EntityStore, admin: User, buyer: User, dealer: User, verified_dealer: User
):
    entry = service.send_broadcast(
        store,
        Actor.from_user(admin),
        BroadcastCreate(
            audience=Audience.dealers,
            title="Inventory Audit",
            message="Please refresh your photos.",
            type=NotificationType.warning,
        ),
    )

    assert entry.recipient_count == 2
    assert entry.sender_id == admin.id
    assert service.list_feed(store, Actor.from_user(buyer)) == []
    dealer_feed = service.list_feed(store, Actor.from_user(dealer))
    assert [n.title for n in dealer_feed] == ["Inventory Audit"]


def test_broadcast_rejects_direct_audience():
    with pytest.raises(ValueError):
        BroadcastCreate(audience=Audience.direct, title="t", message="m")


def test_direct_message_and_log(store: EntityStore, admin: User, buyer: User):
    admin_actor = Actor.from_user(admin)
    entry = service.send_direct(
        store,
        admin_actor,
        DirectMessageCreate(recipient_id=buyer.id, title="Hello", message="Welcome"),
    )

    assert entry.audience == Audience.direct
    assert entry.recipient_id == buyer.id
    assert entry.recipient_count == 1
    log = service.list_messages(store, admin_actor, Audience.direct)
    assert [e.id for e in log] == [entry.id]


def test_editing_log_leaves_delivered_text(
    store: EntityStore, admin: User, buyer: User
):
    admin_actor = Actor.from_user(admin)
    entry = service.send_direct(
        store,
        admin_actor,
        DirectMessageCreate(recipient_id=buyer.id, title="Hello", message="Welcome"),
    )

    edited = service.edit_message(
        store, admin_actor, entry.id, MessageUpdate(title="Hi there")
    )
    service.delete_message(store, admin_actor, entry.id)

    assert edited.title == "Hi there"
    assert service.list_messages(store, admin_actor) == []
    delivered = service.list_feed(store, Actor.from_user(buyer))
    assert [n.title for n in delivered] == ["Hello"]


def test_messaging_is_admin_only(store: EntityStore, dealer: User, buyer: User):
    with pytest.raises(AuthorizationDenied):
        service.send_direct(
            store,
            Actor.from_user(dealer),
            DirectMessageCreate(recipient_id=buyer.id, title="t", message="m"),
        )
