"""Notification feed and admin messaging operations.

Per-user notifications are fire-and-forget: recipients may mark them read
or clear them, nobody edits them. Admin broadcasts and direct messages are
also recorded in the message log, which admins may edit or delete later
without touching what was already delivered.
"""

import logging
import uuid

from autosphere.access.policy import Action, Actor, require
from autosphere.notification.dispatcher import dispatch
from autosphere.notification.effects import NotifyAudience, NotifyUser
from autosphere.notification.models import (
    Audience,
    MessageLogEntry,
    Notification,
)
from autosphere.notification.schemas import (
    BroadcastCreate,
    DirectMessageCreate,
    MessageUpdate,
)
from autosphere.store.adapter import Collection, EntityStore, Listener, Subscription

logger = logging.getLogger(__name__)


# --- recipient feed ---


def list_feed(store: EntityStore, actor: Actor) -> list[Notification]:
    """The caller's notifications, newest first."""
    return store.get(Collection.notifications, Notification.recipient_id == actor.id)


def watch_feed(store: EntityStore, actor: Actor, listener: Listener) -> Subscription:
    return store.subscribe(
        Collection.notifications,
        listener,
        predicate=lambda notification: notification.recipient_id == actor.id,
    )


def mark_read(
    store: EntityStore, actor: Actor, notification_id: uuid.UUID
) -> Notification:
    notification = store.get_one(Collection.notifications, notification_id)
    require(actor, Action.manage_notifications, notification)
    if notification.read:
        return notification
    return store.patch(Collection.notifications, notification.id, {"read": True})


def mark_all_read(store: EntityStore, actor: Actor) -> int:
    """Mark every unread notification of the caller as read, one at a time."""
    require(actor, Action.manage_notifications)
    unread = store.get(
        Collection.notifications,
        Notification.recipient_id == actor.id,
        Notification.read == False,  # noqa: E712
    )
    for notification in unread:
        store.patch(Collection.notifications, notification.id, {"read": True})
    return len(unread)


def clear_feed(store: EntityStore, actor: Actor) -> int:
    require(actor, Action.manage_notifications)
    return store.delete_where(
        Collection.notifications, Notification.recipient_id == actor.id
    )


# --- admin messaging ---


def _log(
    store: EntityStore,
    actor: Actor,
    audience: Audience,
    content: BroadcastCreate | DirectMessageCreate,
    recipient_count: int,
    recipient_id: uuid.UUID | None = None,
) -> MessageLogEntry:
    entry = MessageLogEntry(
        audience=audience,
        recipient_id=recipient_id,
        sender_id=actor.id,
        title=content.title,
        message=content.message,
        type=content.type,
        recipient_count=recipient_count,
    )
    store.push_new(Collection.message_log, entry)
    logger.info(
        "Message %s sent to %s (%d recipients)",
        entry.id,
        audience.value,
        recipient_count,
        extra={"event": "message_sent", "record_id": entry.id, "actor_id": actor.id},
    )
    return entry


def send_broadcast(
    store: EntityStore, actor: Actor, data: BroadcastCreate
) -> MessageLogEntry:
    """Fan a message out to every user or every dealer and log it."""
    require(actor, Action.broadcast)
    delivered = dispatch(
        store, [NotifyAudience(data.audience, data.title, data.message, data.type)]
    )
    return _log(store, actor, data.audience, data, delivered)


def send_direct(
    store: EntityStore, actor: Actor, data: DirectMessageCreate
) -> MessageLogEntry:
    """Message a single user and log it."""
    require(actor, Action.broadcast)
    recipient = store.get_one(Collection.users, data.recipient_id)
    delivered = dispatch(
        store, [NotifyUser(recipient.id, data.title, data.message, data.type)]
    )
    return _log(store, actor, Audience.direct, data, delivered, recipient.id)


def list_messages(
    store: EntityStore, actor: Actor, audience: Audience | None = None
) -> list[MessageLogEntry]:
    require(actor, Action.broadcast)
    if audience is None:
        return store.get(Collection.message_log)
    return store.get(Collection.message_log, MessageLogEntry.audience == audience)


def edit_message(
    store: EntityStore, actor: Actor, message_id: uuid.UUID, data: MessageUpdate
) -> MessageLogEntry:
    """Edit a log entry. Notifications already delivered keep their text."""
    entry = store.get_one(Collection.message_log, message_id)
    require(actor, Action.broadcast, entry)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        return entry
    return store.patch(Collection.message_log, entry.id, changes)


def delete_message(store: EntityStore, actor: Actor, message_id: uuid.UUID) -> None:
    entry = store.get_one(Collection.message_log, message_id)
    require(actor, Action.broadcast, entry)
    store.delete(Collection.message_log, entry.id)
