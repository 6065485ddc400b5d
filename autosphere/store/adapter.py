"""Entity store adapter.

Typed read/write/subscribe access to the marketplace collections on top of a
SQLModel ``Session``. The adapter owns no business rules: every write is a
targeted update of one record keyed by id, committed on its own, and every
committed write re-emits the full current snapshot to the collection's live
subscribers.

Storage failures surface as ``StoreUnavailableError``; a missing record
surfaces as a collection-specific ``NotFoundError``.
"""

import logging
import threading
import uuid
from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlmodel import Session, SQLModel, select

from autosphere.core.exceptions import (
    ConflictError,
    NotFoundError,
    StoreUnavailableError,
)
from autosphere.fulfillment.models import Booking, Rental
from autosphere.inquiry.models import Inquiry
from autosphere.listing.models import Listing
from autosphere.notification.models import MessageLogEntry, Notification
from autosphere.payment.models import Payment
from autosphere.user.models import User

logger = logging.getLogger(__name__)


class Collection(str, Enum):
    listings = "listings"
    users = "users"
    bookings = "bookings"
    rentals = "rentals"
    payments = "payments"
    notifications = "notifications"
    message_log = "message_log"
    inquiries = "inquiries"


@dataclass(frozen=True)
class CollectionSpec:
    model: type[SQLModel]
    label: str
    # Newest first, matching every list view.
    order_by: str = "created_at"


COLLECTIONS: dict[Collection, CollectionSpec] = {
    Collection.listings: CollectionSpec(Listing, "Listing"),
    Collection.users: CollectionSpec(User, "User"),
    Collection.bookings: CollectionSpec(Booking, "Booking"),
    Collection.rentals: CollectionSpec(Rental, "Rental"),
    Collection.payments: CollectionSpec(Payment, "Payment"),
    Collection.notifications: CollectionSpec(Notification, "Notification", "time"),
    Collection.message_log: CollectionSpec(MessageLogEntry, "Message"),
    Collection.inquiries: CollectionSpec(Inquiry, "Inquiry"),
}


class RecordNotFoundError(NotFoundError):
    """Raised when a keyed record does not exist (or vanished)."""

    def __init__(self, collection: Collection, record_id: uuid.UUID | str):
        meta = COLLECTIONS[collection]
        self.collection = collection
        self.record_id = record_id
        self.error_type = f"{meta.label.lower()}_not_found"
        super().__init__(f"{meta.label} not found")


Predicate = Callable[[Any], bool]
Listener = Callable[[list[Any]], None]


@dataclass(eq=False)
class Subscription:
    """A live view of one collection.

    The listener receives the complete (optionally filtered) snapshot, never
    a diff. Call ``close()`` to stop receiving emissions.
    """

    collection: Collection
    listener: Listener
    predicate: Predicate | None = None
    feed: "ChangeFeed | None" = field(default=None, repr=False)

    def emit(self, records: Iterable[Any]) -> None:
        if self.predicate is not None:
            records = [r for r in records if self.predicate(r)]
        self.listener(list(records))

    def close(self) -> None:
        if self.feed is not None:
            self.feed.remove(self)
            self.feed = None


class ChangeFeed:
    """In-process registry of live subscriptions, keyed by collection."""

    def __init__(self) -> None:
        self._subscriptions: dict[Collection, list[Subscription]] = defaultdict(list)
        self._lock = threading.Lock()

    def add(self, subscription: Subscription) -> None:
        with self._lock:
            self._subscriptions[subscription.collection].append(subscription)
        subscription.feed = self

    def remove(self, subscription: Subscription) -> None:
        with self._lock:
            subs = self._subscriptions.get(subscription.collection, [])
            if subscription in subs:
                subs.remove(subscription)

    def subscribers(self, collection: Collection) -> list[Subscription]:
        with self._lock:
            return list(self._subscriptions.get(collection, []))

    def publish(self, collection: Collection, snapshot: list[Any]) -> None:
        """Send the full snapshot to every subscriber of ``collection``.

        A failing listener is logged and skipped; it never affects the write
        that triggered the emission.
        """
        for subscription in self.subscribers(collection):
            try:
                subscription.emit(snapshot)
            except Exception:
                logger.exception(
                    "Subscriber failed for %s",
                    collection.value,
                    extra={
                        "event": "subscription_failed",
                        "collection": collection.value,
                    },
                )


change_feed = ChangeFeed()


class EntityStore:
    """Collection-oriented access to the database for one unit of work."""

    def __init__(self, session: Session, feed: ChangeFeed | None = None):
        self.session = session
        self.feed = feed if feed is not None else change_feed

    # --- reads ---

    def get(
        self,
        collection: Collection,
        *where: Any,
        predicate: Predicate | None = None,
    ) -> list[Any]:
        """Return a snapshot of ``collection``, newest first.

        ``where`` takes SQL criteria; ``predicate`` is applied in Python after
        loading, which is what live subscriptions use.
        """
        meta = COLLECTIONS[collection]
        statement = select(meta.model)
        for criterion in where:
            statement = statement.where(criterion)
        statement = statement.order_by(getattr(meta.model, meta.order_by).desc())
        try:
            records = list(self.session.exec(statement).all())
        except (OperationalError, DBAPIError) as e:
            raise StoreUnavailableError() from e
        if predicate is not None:
            records = [r for r in records if predicate(r)]
        return records

    def get_one(self, collection: Collection, record_id: uuid.UUID) -> Any:
        meta = COLLECTIONS[collection]
        try:
            record = self.session.get(meta.model, record_id)
        except (OperationalError, DBAPIError) as e:
            raise StoreUnavailableError() from e
        if record is None:
            raise RecordNotFoundError(collection, record_id)
        return record

    def find(self, collection: Collection, *where: Any) -> Any | None:
        """Return the first record matching ``where``, or None."""
        meta = COLLECTIONS[collection]
        statement = select(meta.model)
        for criterion in where:
            statement = statement.where(criterion)
        try:
            return self.session.exec(statement).first()
        except (OperationalError, DBAPIError) as e:
            raise StoreUnavailableError() from e

    # --- writes ---

    def put(self, collection: Collection, record: SQLModel) -> Any:
        """Write a whole record (insert or replace) and return it refreshed."""
        self.session.add(record)
        self._commit(collection)
        self.session.refresh(record)
        return record

    def push_new(self, collection: Collection, record: SQLModel) -> uuid.UUID:
        """Insert a new record and return its generated id."""
        return self.put(collection, record).id

    def patch(
        self, collection: Collection, record_id: uuid.UUID, fields: dict[str, Any]
    ) -> Any:
        """Apply a partial update to one record and return it refreshed."""
        record = self.get_one(collection, record_id)
        for key, value in fields.items():
            setattr(record, key, value)
        return self.put(collection, record)

    def delete(self, collection: Collection, record_id: uuid.UUID) -> None:
        record = self.get_one(collection, record_id)
        self.session.delete(record)
        self._commit(collection)

    def delete_where(self, collection: Collection, *where: Any) -> int:
        """Delete every record matching ``where`` in one commit."""
        records = self.get(collection, *where)
        for record in records:
            self.session.delete(record)
        self._commit(collection)
        return len(records)

    # --- live views ---

    def subscribe(
        self,
        collection: Collection,
        listener: Listener,
        predicate: Predicate | None = None,
    ) -> Subscription:
        """Register a live view and immediately emit the current snapshot."""
        subscription = Subscription(collection, listener, predicate)
        self.feed.add(subscription)
        subscription.emit(self.get(collection))
        return subscription

    def _commit(self, collection: Collection) -> None:
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise ConflictError(
                f"Write to {collection.value} conflicts with an existing record"
            ) from e
        except (OperationalError, DBAPIError) as e:
            self.session.rollback()
            logger.error(
                "Write to %s failed: %s",
                collection.value,
                type(e).__name__,
                extra={
                    "event": "store_write_failed",
                    "collection": collection.value,
                },
            )
            raise StoreUnavailableError() from e
        if self.feed.subscribers(collection):
            self.feed.publish(collection, self.get(collection))
