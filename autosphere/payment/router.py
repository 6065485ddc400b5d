"""Payment domain router."""

import uuid

from fastapi import APIRouter, Depends, status

from autosphere.auth.dependencies import ActorDep, require_auth
from autosphere.core.constants import CommonResponses, Routes
from autosphere.core.deps import StoreDep
from autosphere.payment import service
from autosphere.payment.schemas import PaymentCreate, PaymentRead, PaymentStats

router = APIRouter(
    prefix=Routes.PAYMENT.prefix,
    tags=[Routes.PAYMENT.tag],
    dependencies=[Depends(require_auth)],
    responses={
        **CommonResponses.UNAUTHORIZED,
        **CommonResponses.FORBIDDEN,
        **CommonResponses.UNAVAILABLE,
    },
)


@router.post(
    "",
    response_model=PaymentRead,
    status_code=status.HTTP_201_CREATED,
    responses={**CommonResponses.BAD_REQUEST},
)
async def create_payment(data: PaymentCreate, actor: ActorDep, store: StoreDep):
    """Submit a proof of payment (receipt number or transaction hash)."""
    return service.create_payment(store, actor, data)


@router.get("", response_model=list[PaymentRead])
async def list_payments(actor: ActorDep, store: StoreDep):
    """Admins see every payment; everyone else their own."""
    return service.list_payments(store, actor)


@router.get("/stats", response_model=PaymentStats)
async def payment_stats(actor: ActorDep, store: StoreDep):
    """Verified volume, recomputed from all payments on each request. Admin only."""
    return service.payment_stats(store, actor)


@router.get(
    "/{payment_id}",
    response_model=PaymentRead,
    responses={**CommonResponses.NOT_FOUND},
)
async def get_payment(payment_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    return service.get_payment(store, actor, payment_id)


@router.post(
    "/{payment_id}/verify",
    response_model=PaymentRead,
    responses={**CommonResponses.NOT_FOUND, **CommonResponses.BAD_REQUEST},
)
async def verify_payment(payment_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    return service.verify_payment(store, actor, payment_id)


@router.post(
    "/{payment_id}/reject",
    response_model=PaymentRead,
    responses={**CommonResponses.NOT_FOUND, **CommonResponses.BAD_REQUEST},
)
async def reject_payment(payment_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    return service.reject_payment(store, actor, payment_id)
