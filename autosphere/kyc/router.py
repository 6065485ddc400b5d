"""KYC domain router."""

import uuid

from fastapi import APIRouter, Depends

from autosphere.auth.dependencies import ActorDep, require_auth
from autosphere.core.constants import CommonResponses, Routes
from autosphere.core.deps import StoreDep
from autosphere.kyc import service
from autosphere.kyc.schemas import KycRead, KycRejectRequest, KycSubmission

router = APIRouter(
    prefix=Routes.KYC.prefix,
    tags=[Routes.KYC.tag],
    dependencies=[Depends(require_auth)],
    responses={
        **CommonResponses.UNAUTHORIZED,
        **CommonResponses.FORBIDDEN,
        **CommonResponses.UNAVAILABLE,
    },
)


@router.get("/me", response_model=KycRead)
async def get_my_kyc(actor: ActorDep, store: StoreDep):
    return service.get_status(store, actor)


@router.post("/me", response_model=KycRead, responses={**CommonResponses.BAD_REQUEST})
async def submit_kyc(packet: KycSubmission, actor: ActorDep, store: StoreDep):
    """Submit ID front, ID back and a live selfie for review.

    Clears verification until an admin approves the packet, unless an
    admin override is in place.
    """
    return service.submit_kyc(store, actor, packet)


@router.get("/pending", response_model=list[KycRead])
async def list_pending(actor: ActorDep, store: StoreDep):
    """Packets awaiting review. Admin only."""
    return service.review_queue(store, actor)


@router.post(
    "/{user_id}/approve",
    response_model=KycRead,
    responses={**CommonResponses.NOT_FOUND, **CommonResponses.BAD_REQUEST},
)
async def approve_kyc(user_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    return service.approve_kyc(store, actor, user_id)


@router.post(
    "/{user_id}/reject",
    response_model=KycRead,
    responses={**CommonResponses.NOT_FOUND, **CommonResponses.BAD_REQUEST},
)
async def reject_kyc(
    user_id: uuid.UUID, body: KycRejectRequest, actor: ActorDep, store: StoreDep
):
    """Decline a packet. The reason is sent to the user."""
    return service.reject_kyc(store, actor, user_id, body.reason)
