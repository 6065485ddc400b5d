"""Listing domain router.

Public inventory reads plus one endpoint per moderation operation.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Query, status

from autosphere.auth.dependencies import ActorDep, OptionalActorDep
from autosphere.core.constants import CommonResponses, Routes
from autosphere.core.deps import StoreDep
from autosphere.listing import service
from autosphere.listing.models import ListingStatus
from autosphere.listing.schemas import (
    ListingCreate,
    ListingRead,
    ListingUpdate,
    RejectRequest,
    to_read,
    to_read_list,
)

router = APIRouter(
    prefix=Routes.LISTING.prefix,
    tags=[Routes.LISTING.tag],
    responses={**CommonResponses.UNAVAILABLE},
)

_MUTATION_RESPONSES = {
    **CommonResponses.UNAUTHORIZED,
    **CommonResponses.FORBIDDEN,
    **CommonResponses.NOT_FOUND,
    **CommonResponses.BAD_REQUEST,
}


@router.get("", response_model=list[ListingRead])
async def list_public_listings(store: StoreDep, featured: bool | None = None):
    """Public inventory: approved listings that are not suspended."""
    return to_read_list(service.list_public(store, featured=featured))


@router.get(
    "/mine",
    response_model=list[ListingRead],
    responses={**CommonResponses.UNAUTHORIZED},
)
async def list_my_listings(actor: ActorDep, store: StoreDep):
    """Every listing owned by the calling dealer, in any state."""
    return to_read_list(service.list_for_dealer(store, actor))


@router.get(
    "/all",
    response_model=list[ListingRead],
    responses={**CommonResponses.UNAUTHORIZED, **CommonResponses.FORBIDDEN},
)
async def list_all_listings(
    actor: ActorDep,
    store: StoreDep,
    status_filter: Annotated[ListingStatus | None, Query(alias="status")] = None,
):
    """Moderation queue. Admin only."""
    return to_read_list(service.list_all(store, actor, status=status_filter))


@router.get(
    "/{listing_id}",
    response_model=ListingRead,
    responses={**CommonResponses.NOT_FOUND},
)
async def get_listing(
    listing_id: uuid.UUID, store: StoreDep, actor: OptionalActorDep
):
    return to_read(service.get_visible_listing(store, actor, listing_id))


@router.post(
    "",
    response_model=ListingRead,
    status_code=status.HTTP_201_CREATED,
    responses={**CommonResponses.UNAUTHORIZED, **CommonResponses.FORBIDDEN},
)
async def create_listing(data: ListingCreate, actor: ActorDep, store: StoreDep):
    """Create a listing.

    Verified dealers create pending listings; admins create approved
    platform inventory.
    """
    return to_read(service.create_listing(store, actor, data))


@router.patch(
    "/{listing_id}", response_model=ListingRead, responses=_MUTATION_RESPONSES
)
async def update_listing(
    listing_id: uuid.UUID, data: ListingUpdate, actor: ActorDep, store: StoreDep
):
    """Edit vehicle details. Status is changed only by the moderation endpoints."""
    return to_read(service.update_listing(store, actor, listing_id, data))


@router.post(
    "/{listing_id}/approve", response_model=ListingRead, responses=_MUTATION_RESPONSES
)
async def approve_listing(listing_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    return to_read(service.approve_listing(store, actor, listing_id))


@router.post(
    "/{listing_id}/reject", response_model=ListingRead, responses=_MUTATION_RESPONSES
)
async def reject_listing(
    listing_id: uuid.UUID, body: RejectRequest, actor: ActorDep, store: StoreDep
):
    return to_read(service.reject_listing(store, actor, listing_id, body.reason))


@router.post(
    "/{listing_id}/archive", response_model=ListingRead, responses=_MUTATION_RESPONSES
)
async def archive_listing(listing_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    """Archive an approved listing. Admin archives lock out the dealer."""
    return to_read(service.archive_listing(store, actor, listing_id))


@router.post(
    "/{listing_id}/restore", response_model=ListingRead, responses=_MUTATION_RESPONSES
)
async def restore_listing(listing_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    return to_read(service.restore_listing(store, actor, listing_id))


@router.post(
    "/{listing_id}/suspend", response_model=ListingRead, responses=_MUTATION_RESPONSES
)
async def suspend_listing(listing_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    """Hide from public inventory without changing moderation status."""
    return to_read(service.suspend_listing(store, actor, listing_id, True))


@router.post(
    "/{listing_id}/unsuspend",
    response_model=ListingRead,
    responses=_MUTATION_RESPONSES,
)
async def unsuspend_listing(listing_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    return to_read(service.suspend_listing(store, actor, listing_id, False))


@router.post(
    "/{listing_id}/feature", response_model=ListingRead, responses=_MUTATION_RESPONSES
)
async def feature_listing(listing_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    return to_read(service.feature_listing(store, actor, listing_id, True))


@router.post(
    "/{listing_id}/unfeature",
    response_model=ListingRead,
    responses=_MUTATION_RESPONSES,
)
async def unfeature_listing(listing_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    return to_read(service.feature_listing(store, actor, listing_id, False))


@router.delete(
    "/{listing_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses=_MUTATION_RESPONSES,
)
async def delete_listing(listing_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    service.delete_listing(store, actor, listing_id)
