"""Inquiry operations.

Inquiries are contact-form messages. They have no lifecycle: an admin
reads them and deletes them when handled.
"""

import logging
import uuid

from autosphere.access.policy import Action, Actor, require
from autosphere.inquiry.models import Inquiry
from autosphere.inquiry.schemas import InquiryCreate
from autosphere.notification.dispatcher import dispatch
from autosphere.notification.effects import NotifyAdmins
from autosphere.store.adapter import Collection, EntityStore

logger = logging.getLogger(__name__)


def create_inquiry(
    store: EntityStore, actor: Actor | None, data: InquiryCreate
) -> Inquiry:
    """Store an inquiry and tell every admin about it.

    Anonymous senders are allowed; signed-in senders are linked to their
    account and refused while suspended.
    """
    if actor is not None:
        require(actor, Action.send_inquiry)
    inquiry = Inquiry(
        **data.model_dump(), user_id=actor.id if actor is not None else None
    )
    store.push_new(Collection.inquiries, inquiry)
    logger.info(
        "Inquiry %s received",
        inquiry.id,
        extra={"event": "inquiry_created", "record_id": inquiry.id},
    )

    subject = f" about {inquiry.interest}" if inquiry.interest else ""
    dispatch(
        store,
        [NotifyAdmins("New Inquiry", f"{inquiry.name} sent an inquiry{subject}.")],
    )
    return inquiry


def list_inquiries(store: EntityStore, actor: Actor) -> list[Inquiry]:
    require(actor, Action.manage_inquiries)
    return store.get(Collection.inquiries)


def get_inquiry(store: EntityStore, actor: Actor, inquiry_id: uuid.UUID) -> Inquiry:
    require(actor, Action.manage_inquiries)
    return store.get_one(Collection.inquiries, inquiry_id)


def delete_inquiry(store: EntityStore, actor: Actor, inquiry_id: uuid.UUID) -> None:
    require(actor, Action.manage_inquiries)
    store.delete(Collection.inquiries, inquiry_id)
    logger.info(
        "Inquiry %s deleted",
        inquiry_id,
        extra={
            "event": "inquiry_deleted",
            "record_id": inquiry_id,
            "actor_id": actor.id,
        },
    )
