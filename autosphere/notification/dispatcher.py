"""Notification dispatcher.

The one place effects are executed. Delivery is best-effort: the triggering
state change is already committed when ``dispatch`` runs, so a failed
notification write is logged and skipped, never raised or rolled back.
"""

import logging
import uuid
from collections.abc import Iterable
from typing import Any

from autosphere.access.policy import Actor
from autosphere.notification.effects import (
    Effect,
    NotifyAdmins,
    NotifyAudience,
    NotifyUser,
    Transition,
)
from autosphere.notification.models import Audience, Notification
from autosphere.store.adapter import Collection, EntityStore
from autosphere.user.models import User, UserRole

logger = logging.getLogger(__name__)


def resolve_recipients(store: EntityStore, effect: Effect) -> list[uuid.UUID]:
    """Return the user ids an effect addresses."""
    match effect:
        case NotifyUser(recipient_id=recipient_id):
            return [recipient_id]
        case NotifyAdmins():
            users = store.get(Collection.users, User.role == UserRole.admin)
        case NotifyAudience(audience=Audience.dealers):
            users = store.get(Collection.users, User.role == UserRole.dealer)
        case NotifyAudience(audience=Audience.all_users):
            users = store.get(Collection.users)
        case _:
            raise ValueError(f"Cannot resolve recipients for {effect!r}")
    return [user.id for user in users]


def dispatch(store: EntityStore, effects: Iterable[Effect]) -> int:
    """Write one notification per recipient of each effect.

    Returns how many notifications were delivered. Failures are logged per
    recipient (and per effect when recipients cannot be resolved) and do not
    stop the remaining deliveries.
    """
    delivered = 0
    for effect in effects:
        try:
            recipients = resolve_recipients(store, effect)
        except Exception:
            logger.exception(
                "Notification fan-out failed for %s",
                type(effect).__name__,
                extra={"event": "notification_failed"},
            )
            continue

        for recipient_id in recipients:
            notification = Notification(
                recipient_id=recipient_id,
                title=effect.title,
                message=effect.message,
                type=effect.type,
            )
            try:
                store.push_new(Collection.notifications, notification)
            except Exception:
                store.session.rollback()
                logger.warning(
                    "Notification to %s failed: %s",
                    recipient_id,
                    effect.title,
                    exc_info=True,
                    extra={"event": "notification_failed", "record_id": recipient_id},
                )
                continue
            delivered += 1
    return delivered


def commit_transition(
    store: EntityStore,
    collection: Collection,
    record: Any,
    transition: Transition,
    actor: Actor,
    entity: str,
) -> Any:
    """Persist a transition's changes, log it, then run its effects.

    Only the changed fields of the one record are written. Effects run after
    the write has committed; their failure does not affect the result.
    """
    previous = getattr(record, transition.status_field)
    updated = store.patch(collection, record.id, transition.changes)
    if transition.target is not None:
        logger.info(
            "%s %s %s -> %s",
            entity,
            record.id,
            _label(previous),
            _label(getattr(updated, transition.status_field)),
            extra={
                "event": "transition",
                "collection": collection.value,
                "record_id": record.id,
                "actor_id": actor.id,
            },
        )
    dispatch(store, transition.effects)
    return updated


def _label(value: Any) -> str:
    return getattr(value, "value", str(value))
