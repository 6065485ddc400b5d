"""User profile and account operations.

Self-service changes (profile, favorites, security flags) and the admin
account actions. Every admin action notifies the affected user.
"""

import logging
import uuid

from autosphere.access.policy import Action, Actor, require
from autosphere.access.visibility import public_listings
from autosphere.auth.service import FirebaseAuthServiceProtocol
from autosphere.core.exceptions import AppException, BadRequestError
from autosphere.listing.models import Listing
from autosphere.notification.dispatcher import dispatch
from autosphere.notification.effects import NotifyUser
from autosphere.notification.models import NotificationType
from autosphere.store.adapter import Collection, EntityStore
from autosphere.user.exceptions import EmailExistsError
from autosphere.user.models import User, UserRole
from autosphere.user.schemas import SecuritySettingsUpdate, UserCreate, UserUpdateMe

logger = logging.getLogger(__name__)


def provision_account(
    store: EntityStore,
    identity: FirebaseAuthServiceProtocol,
    *,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: UserRole,
    verified: bool = False,
) -> User:
    """Create the Firebase user and the local user in one step.

    Emails are unique case-insensitively. A verified account is marked as
    an admin override since it never went through KYC. If the local write
    fails the Firebase user is deleted so the email can be used again.
    """
    email = email.lower()
    if store.find(Collection.users, User.email == email) is not None:
        raise EmailExistsError()

    firebase_user = identity.create_user(
        email=email,
        password=password,
        display_name=f"{first_name} {last_name}",
    )

    user = User(
        external_id=firebase_user.uid,
        email=email,
        first_name=first_name,
        last_name=last_name,
        role=role,
        is_verified=verified,
        verification_override=verified,
    )
    try:
        store.push_new(Collection.users, user)
    except AppException:
        identity.delete_user(firebase_user.uid)
        raise
    return user


def _own_record(store: EntityStore, actor: Actor, action: Action) -> User:
    user = store.get_one(Collection.users, actor.id)
    require(actor, action, user)
    return user


def get_profile(store: EntityStore, actor: Actor) -> User:
    return store.get_one(Collection.users, actor.id)


def update_profile(store: EntityStore, actor: Actor, data: UserUpdateMe) -> User:
    _own_record(store, actor, Action.update_profile)
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    return store.patch(Collection.users, actor.id, changes)


def update_security_settings(
    store: EntityStore, actor: Actor, data: SecuritySettingsUpdate
) -> User:
    user = _own_record(store, actor, Action.update_profile)
    settings = {**user.security_settings, **data.model_dump(exclude_none=True)}
    return store.patch(Collection.users, actor.id, {"security_settings": settings})


def toggle_favorite(store: EntityStore, actor: Actor, listing_id: uuid.UUID) -> User:
    """Add a listing to the caller's garage, or remove it if already saved."""
    user = _own_record(store, actor, Action.toggle_favorite)
    key = str(listing_id)
    if key in user.favorites:
        favorites = [item for item in user.favorites if item != key]
    else:
        store.get_one(Collection.listings, listing_id)
        favorites = [*user.favorites, key]
    return store.patch(Collection.users, actor.id, {"favorites": favorites})


def list_favorites(store: EntityStore, actor: Actor) -> list[Listing]:
    """Saved listings that are still in public inventory."""
    user = store.get_one(Collection.users, actor.id)
    saved = set(user.favorites)
    listings = store.get(Collection.listings)
    return [item for item in public_listings(listings) if str(item.id) in saved]


# --- admin account actions ---


def list_users(
    store: EntityStore, actor: Actor, role: UserRole | None = None
) -> list[User]:
    require(actor, Action.manage_users)
    if role is None:
        return store.get(Collection.users)
    return store.get(Collection.users, User.role == role)


def create_user(
    store: EntityStore,
    actor: Actor,
    identity: FirebaseAuthServiceProtocol,
    data: UserCreate,
) -> User:
    """Provision an account of any role on someone else's behalf."""
    require(actor, Action.manage_users)
    user = provision_account(
        store,
        identity,
        email=data.email,
        password=data.password,
        first_name=data.first_name,
        last_name=data.last_name,
        role=data.role,
        verified=data.is_verified,
    )
    dispatch(
        store,
        [
            NotifyUser(
                user.id,
                "Welcome to AutoSphere",
                "An administrator created your account.",
                NotificationType.info,
            )
        ],
    )
    logger.info(
        "Admin provisioned %s account %s",
        user.role.value,
        user.id,
        extra={
            "event": "user_provisioned",
            "record_id": user.id,
            "actor_id": actor.id,
        },
    )
    return user


def get_user(store: EntityStore, actor: Actor, user_id: uuid.UUID) -> User:
    require(actor, Action.manage_users)
    return store.get_one(Collection.users, user_id)


def _managed_user(store: EntityStore, actor: Actor, user_id: uuid.UUID) -> User:
    require(actor, Action.manage_users)
    if user_id == actor.id:
        raise BadRequestError("Admins cannot change their own account state")
    return store.get_one(Collection.users, user_id)


def _account_changed(
    store: EntityStore,
    actor: Actor,
    user: User,
    fields: dict,
    notice: NotifyUser,
) -> User:
    user = store.patch(Collection.users, user.id, fields)
    logger.info(
        "User %s updated by %s: %s",
        user.id,
        actor.id,
        ", ".join(sorted(fields)),
        extra={
            "event": "account_updated",
            "record_id": user.id,
            "actor_id": actor.id,
        },
    )
    dispatch(store, [notice])
    return user


def set_suspended(
    store: EntityStore, actor: Actor, user_id: uuid.UUID, suspended: bool
) -> User:
    user = _managed_user(store, actor, user_id)
    if suspended:
        notice = NotifyUser(
            user.id,
            "Account Suspended",
            "Your account has been restricted by an administrator.",
            NotificationType.warning,
        )
    else:
        notice = NotifyUser(
            user.id,
            "Account Activated",
            "Your account access has been restored.",
            NotificationType.success,
        )
    return _account_changed(store, actor, user, {"is_suspended": suspended}, notice)


def set_verified(
    store: EntityStore, actor: Actor, user_id: uuid.UUID, verified: bool
) -> User:
    """Grant or revoke verification directly, bypassing the KYC queue.

    A grant sets the override so a later KYC resubmission keeps the user
    verified while the packet is reviewed.
    """
    user = _managed_user(store, actor, user_id)
    if verified:
        notice = NotifyUser(
            user.id,
            "Identity Verified",
            "Your identity has been successfully validated.",
            NotificationType.success,
        )
    else:
        notice = NotifyUser(
            user.id,
            "Verification Revoked",
            "Your verification status has been revoked.",
            NotificationType.info,
        )
    fields = {"is_verified": verified, "verification_override": verified}
    return _account_changed(store, actor, user, fields, notice)


def change_role(
    store: EntityStore, actor: Actor, user_id: uuid.UUID, role: UserRole
) -> User:
    user = _managed_user(store, actor, user_id)
    if user.role == role:
        return user
    notice = NotifyUser(
        user.id,
        "Role Updated",
        f"Your account role is now {role.value}.",
        NotificationType.info,
    )
    return _account_changed(store, actor, user, {"role": role}, notice)


def set_all_suspended(store: EntityStore, actor: Actor, suspended: bool) -> int:
    """Suspend or restore every non-admin account. Returns how many changed."""
    require(actor, Action.manage_users)
    targets = store.get(
        Collection.users,
        User.role != UserRole.admin,
        User.is_suspended != suspended,
    )
    if suspended:
        title, message, type = (
            "Account Suspended",
            "Your account has been suspended for policy review.",
            NotificationType.warning,
        )
    else:
        title, message, type = (
            "Account Restored",
            "Your account access has been fully restored.",
            NotificationType.success,
        )
    for user in targets:
        store.patch(Collection.users, user.id, {"is_suspended": suspended})
    logger.info(
        "%d accounts %s by %s",
        len(targets),
        "suspended" if suspended else "restored",
        actor.id,
        extra={"event": "accounts_bulk_updated", "actor_id": actor.id},
    )
    dispatch(store, [NotifyUser(user.id, title, message, type) for user in targets])
    return len(targets)
