"""User domain router.

Self-service profile routes under /users/me and admin account management.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from autosphere.auth.dependencies import ActorDep, FirebaseAuthDep, require_auth
from autosphere.core.constants import CommonResponses, Routes
from autosphere.core.deps import StoreDep
from autosphere.listing.schemas import ListingRead, to_read_list
from autosphere.user import service
from autosphere.user.models import UserRole
from autosphere.user.schemas import (
    BulkAccountResult,
    RoleUpdate,
    SecuritySettingsUpdate,
    UserPublicRead,
    UserCreate,
    UserRead,
    UserUpdateMe,
)

router = APIRouter(
    prefix=Routes.USER.prefix,
    tags=[Routes.USER.tag],
    dependencies=[Depends(require_auth)],
    responses={
        **CommonResponses.UNAUTHORIZED,
        **CommonResponses.FORBIDDEN,
        **CommonResponses.UNAVAILABLE,
    },
)

_ADMIN_RESPONSES = {**CommonResponses.NOT_FOUND, **CommonResponses.BAD_REQUEST}


@router.get("/me", response_model=UserPublicRead)
async def get_me(actor: ActorDep, store: StoreDep):
    return service.get_profile(store, actor)


@router.patch("/me", response_model=UserPublicRead)
async def update_me(data: UserUpdateMe, actor: ActorDep, store: StoreDep):
    """Update the caller's first and last name."""
    return service.update_profile(store, actor, data)


@router.patch("/me/security", response_model=UserPublicRead)
async def update_my_security(
    data: SecuritySettingsUpdate, actor: ActorDep, store: StoreDep
):
    """Toggle two-factor and login-alert preferences."""
    return service.update_security_settings(store, actor, data)


@router.get("/me/favorites", response_model=list[ListingRead])
async def list_my_favorites(actor: ActorDep, store: StoreDep):
    return to_read_list(service.list_favorites(store, actor))


@router.put(
    "/me/favorites/{listing_id}",
    response_model=UserPublicRead,
    responses={**CommonResponses.NOT_FOUND},
)
async def toggle_favorite(listing_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    """Save a listing to the garage, or remove it if already saved."""
    return service.toggle_favorite(store, actor, listing_id)


@router.get("", response_model=list[UserRead])
async def list_users(
    actor: ActorDep,
    store: StoreDep,
    role: Annotated[UserRole | None, Query()] = None,
):
    """List all users, optionally by role. Admin only."""
    return service.list_users(store, actor, role=role)


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    responses={**CommonResponses.BAD_REQUEST, **CommonResponses.CONFLICT},
)
async def create_user(
    data: UserCreate,
    actor: ActorDep,
    store: StoreDep,
    firebase_auth: FirebaseAuthDep,
):
    """Provision an account of any role, optionally pre-verified. Admin only."""
    return service.create_user(store, actor, firebase_auth, data)


@router.post("/suspend-all", response_model=BulkAccountResult)
async def suspend_all(actor: ActorDep, store: StoreDep):
    """Suspend every non-admin account. Admin only."""
    return BulkAccountResult(count=service.set_all_suspended(store, actor, True))


@router.post("/restore-all", response_model=BulkAccountResult)
async def restore_all(actor: ActorDep, store: StoreDep):
    """Lift suspension on every non-admin account. Admin only."""
    return BulkAccountResult(count=service.set_all_suspended(store, actor, False))


@router.get(
    "/{user_id}",
    response_model=UserRead,
    responses={**CommonResponses.NOT_FOUND},
)
async def get_user(user_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    """Get a user by ID. Admin only."""
    return service.get_user(store, actor, user_id)


@router.put("/{user_id}/role", response_model=UserRead, responses=_ADMIN_RESPONSES)
async def change_role(
    user_id: uuid.UUID, data: RoleUpdate, actor: ActorDep, store: StoreDep
):
    return service.change_role(store, actor, user_id, data.role)


@router.post("/{user_id}/suspend", response_model=UserRead, responses=_ADMIN_RESPONSES)
async def suspend_user(user_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    return service.set_suspended(store, actor, user_id, True)


@router.post(
    "/{user_id}/activate", response_model=UserRead, responses=_ADMIN_RESPONSES
)
async def activate_user(user_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    return service.set_suspended(store, actor, user_id, False)


@router.post("/{user_id}/verify", response_model=UserRead, responses=_ADMIN_RESPONSES)
async def verify_user(user_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    """Mark a user verified without a KYC review."""
    return service.set_verified(store, actor, user_id, True)


@router.post(
    "/{user_id}/revoke-verification",
    response_model=UserRead,
    responses=_ADMIN_RESPONSES,
)
async def revoke_verification(user_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    return service.set_verified(store, actor, user_id, False)
