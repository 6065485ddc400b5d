"""KYC operations."""

import uuid

from autosphere.access.policy import Action, Actor, require
from autosphere.kyc import machine
from autosphere.kyc.schemas import KycSubmission
from autosphere.notification.dispatcher import commit_transition
from autosphere.notification.effects import Transition
from autosphere.store.adapter import Collection, EntityStore
from autosphere.user.models import KycStatus, User


def _commit(
    store: EntityStore, actor: Actor, user: User, transition: Transition
) -> User:
    return commit_transition(
        store, Collection.users, user, transition, actor, machine.ENTITY
    )


def get_status(store: EntityStore, actor: Actor) -> User:
    return store.get_one(Collection.users, actor.id)


def submit_kyc(store: EntityStore, actor: Actor, packet: KycSubmission) -> User:
    """Submit the caller's identity packet for review."""
    user = store.get_one(Collection.users, actor.id)
    require(actor, Action.submit_kyc, user)
    return _commit(store, actor, user, machine.submit(user, packet.model_dump()))


def review_queue(store: EntityStore, actor: Actor) -> list[User]:
    """Users whose packets await a decision. Admin only."""
    require(actor, Action.review_kyc)
    return store.get(Collection.users, User.kyc_status == KycStatus.pending)


def approve_kyc(store: EntityStore, actor: Actor, user_id: uuid.UUID) -> User:
    user = store.get_one(Collection.users, user_id)
    require(actor, Action.review_kyc, user)
    return _commit(store, actor, user, machine.approve(user))


def reject_kyc(
    store: EntityStore, actor: Actor, user_id: uuid.UUID, reason: str
) -> User:
    user = store.get_one(Collection.users, user_id)
    require(actor, Action.review_kyc, user)
    return _commit(store, actor, user, machine.reject(user, reason))
