"""Tests for profile and admin account operations."""

import uuid
from unittest.mock import MagicMock

import pytest

from autosphere.access.exceptions import AuthorizationDenied, DenyReason
from autosphere.access.policy import Actor
from autosphere.auth.service import FirebaseUser
from autosphere.core.exceptions import AppException, BadRequestError
from autosphere.listing.models import ListingStatus
from autosphere.notification.models import Notification
from autosphere.store.adapter import Collection, EntityStore, RecordNotFoundError
from autosphere.user import service
from autosphere.user.models import User, UserRole
from autosphere.user.exceptions import EmailExistsError
from autosphere.user.schemas import SecuritySettingsUpdate, UserCreate, UserUpdateMe


def _titles(store: EntityStore, user: User) -> list[str]:
    notes = store.get(Collection.notifications, Notification.recipient_id == user.id)
    return [n.title for n in notes]


# --- self-service ---


def test_update_profile(store: EntityStore, buyer: User):
    updated = service.update_profile(
        store, Actor.from_user(buyer), UserUpdateMe(first_name="Ada")
    )

    assert updated.first_name == "Ada"
    assert updated.last_name == buyer.last_name


def test_security_settings_are_merged(store: EntityStore, buyer: User):
    updated = service.update_security_settings(
        store, Actor.from_user(buyer), SecuritySettingsUpdate(two_factor_enabled=True)
    )

    assert updated.security_settings == {
        "two_factor_enabled": True,
        "login_alerts": True,
    }


def test_suspended_user_cannot_edit_profile(store: EntityStore, make_user):
    suspended = make_user(UserRole.buyer, is_suspended=True)

    with pytest.raises(AuthorizationDenied) as exc_info:
        service.update_profile(
            store, Actor.from_user(suspended), UserUpdateMe(first_name="X")
        )

    assert exc_info.value.reason == DenyReason.suspended


def test_toggle_favorite(store: EntityStore, buyer: User, listing):
    me = Actor.from_user(buyer)

    saved = service.toggle_favorite(store, me, listing.id)
    assert saved.favorites == [str(listing.id)]
    assert [item.id for item in service.list_favorites(store, me)] == [listing.id]

    removed = service.toggle_favorite(store, me, listing.id)
    assert removed.favorites == []


def test_favorite_unknown_listing(store: EntityStore, buyer: User):
    with pytest.raises(RecordNotFoundError):
        service.toggle_favorite(store, Actor.from_user(buyer), uuid.uuid4())


def test_favorites_hide_unpublished(
    store: EntityStore, buyer: User, admin: User, listing
):
    me = Actor.from_user(buyer)
    service.toggle_favorite(store, me, listing.id)
    store.patch(Collection.listings, listing.id, {"status": ListingStatus.archived})

    assert service.list_favorites(store, me) == []
    assert store.get_one(Collection.users, buyer.id).favorites == [str(listing.id)]


# --- admin actions ---


def test_suspend_and_activate_notify_user(
    store: EntityStore, admin: User, dealer: User
):
    admin_actor = Actor.from_user(admin)

    suspended = service.set_suspended(store, admin_actor, dealer.id, True)
    assert suspended.is_suspended is True
    activated = service.set_suspended(store, admin_actor, dealer.id, False)
    assert activated.is_suspended is False

    assert sorted(_titles(store, dealer)) == ["Account Activated", "Account Suspended"]


def test_verify_sets_override(store: EntityStore, admin: User, dealer: User):
    admin_actor = Actor.from_user(admin)

    verified = service.set_verified(store, admin_actor, dealer.id, True)
    assert verified.is_verified is True
    assert verified.verification_override is True

    revoked = service.set_verified(store, admin_actor, dealer.id, False)
    assert revoked.is_verified is False
    assert revoked.verification_override is False
    assert "Verification Revoked" in _titles(store, dealer)


def test_change_role(store: EntityStore, admin: User, buyer: User):
    admin_actor = Actor.from_user(admin)

    changed = service.change_role(store, admin_actor, buyer.id, UserRole.dealer)
    unchanged = service.change_role(store, admin_actor, buyer.id, UserRole.dealer)

    assert changed.role == UserRole.dealer
    assert unchanged.role == UserRole.dealer
    assert _titles(store, buyer) == ["Role Updated"]


def test_admin_cannot_change_self(store: EntityStore, admin: User):
    with pytest.raises(BadRequestError):
        service.set_suspended(store, Actor.from_user(admin), admin.id, True)


def test_non_admin_cannot_manage(store: EntityStore, dealer: User, buyer: User):
    with pytest.raises(AuthorizationDenied) as exc_info:
        service.set_suspended(store, Actor.from_user(dealer), buyer.id, True)

    assert exc_info.value.reason == DenyReason.wrong_role


def test_bulk_suspend_skips_admins(
    store: EntityStore, admin: User, buyer: User, dealer: User, make_user
):
    other_admin = make_user(UserRole.admin)
    admin_actor = Actor.from_user(admin)

    assert service.set_all_suspended(store, admin_actor, True) == 2
    assert service.set_all_suspended(store, admin_actor, True) == 0
    assert store.get_one(Collection.users, other_admin.id).is_suspended is False
    assert _titles(store, buyer) == ["Account Suspended"]

    assert service.set_all_suspended(store, admin_actor, False) == 2
    assert "Account Restored" in _titles(store, dealer)


def test_list_users_by_role(
    store: EntityStore, admin: User, buyer: User, dealer: User
):
    users = service.list_users(store, Actor.from_user(admin), role=UserRole.dealer)

    assert [u.id for u in users] == [dealer.id]


# --- account provisioning ---


def _account(**fields) -> UserCreate:
    defaults = {
        "email": "ops@example.com",
        "password": "securepassword123",
        "first_name": "Olive",
        "last_name": "Ops",
    }
    return UserCreate(**{**defaults, **fields})


def test_create_user_pre_verified_dealer(
    store: EntityStore, admin: User, mock_firebase_auth: MagicMock
):
    mock_firebase_auth.create_user.return_value = FirebaseUser(uid="uid-ops")

    created = service.create_user(
        store,
        Actor.from_user(admin),
        mock_firebase_auth,
        _account(role=UserRole.dealer, is_verified=True),
    )

    stored = store.get_one(Collection.users, created.id)
    assert stored.external_id == "uid-ops"
    assert stored.is_verified is True
    assert stored.verification_override is True
    assert _titles(store, stored) == ["Welcome to AutoSphere"]


def test_create_user_requires_admin(
    store: EntityStore, dealer: User, mock_firebase_auth: MagicMock
):
    with pytest.raises(AuthorizationDenied) as exc_info:
        service.create_user(
            store, Actor.from_user(dealer), mock_firebase_auth, _account()
        )

    assert exc_info.value.reason == DenyReason.wrong_role
    mock_firebase_auth.create_user.assert_not_called()


def test_create_user_rejects_taken_email(
    store: EntityStore, admin: User, buyer: User, mock_firebase_auth: MagicMock
):
    with pytest.raises(EmailExistsError):
        service.create_user(
            store,
            Actor.from_user(admin),
            mock_firebase_auth,
            _account(email=buyer.email),
        )


def test_provision_account_rolls_back_identity(
    store: EntityStore, buyer: User, mock_firebase_auth: MagicMock
):
    mock_firebase_auth.create_user.return_value = FirebaseUser(uid=buyer.external_id)

    with pytest.raises(AppException):
        service.provision_account(
            store,
            mock_firebase_auth,
            email="fresh@example.com",
            password="securepassword123",
            first_name="Fresh",
            last_name="Start",
            role=UserRole.buyer,
        )

    mock_firebase_auth.delete_user.assert_called_once_with(buyer.external_id)
