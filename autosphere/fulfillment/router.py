"""Fulfillment domain routers.

Bookings and rentals expose the same operations, so both routers are built
by one factory. Only the create payload and the name of the positive
decision ("confirm" for bookings, "accept" for rentals) differ.
"""

import uuid
from collections.abc import Callable
from typing import Any

from fastapi import APIRouter, Depends, status

from autosphere.auth.dependencies import ActorDep, require_auth
from autosphere.core.constants import CommonResponses, RouteConfig, Routes
from autosphere.core.deps import StoreDep
from autosphere.fulfillment import service
from autosphere.fulfillment.models import FulfillmentKind
from autosphere.fulfillment.schemas import (
    BookingCreate,
    BookingRead,
    HideFromDealerRequest,
    RentalCreate,
    RentalRead,
)


def build_router(
    kind: FulfillmentKind,
    route: RouteConfig,
    create_schema: type,
    read_schema: type,
    create: Callable[..., Any],
    accept_path: str,
) -> APIRouter:
    router = APIRouter(
        prefix=route.prefix,
        tags=[route.tag],
        dependencies=[Depends(require_auth)],
        responses={
            **CommonResponses.UNAUTHORIZED,
            **CommonResponses.FORBIDDEN,
            **CommonResponses.UNAVAILABLE,
        },
    )

    @router.post(
        "",
        response_model=read_schema,
        status_code=status.HTTP_201_CREATED,
        responses={**CommonResponses.NOT_FOUND, **CommonResponses.BAD_REQUEST},
    )
    async def create_request(
        data: create_schema,  # type: ignore[valid-type]
        actor: ActorDep,
        store: StoreDep,
    ):
        """Create a request against a publicly listed vehicle."""
        return create(store, actor, data)

    @router.get("", response_model=list[read_schema])
    async def list_requests(actor: ActorDep, store: StoreDep):
        """Admins see all; buyers their own; dealers their unhidden inventory."""
        return service.list_records(store, actor, kind)

    @router.get(
        "/{record_id}",
        response_model=read_schema,
        responses={**CommonResponses.NOT_FOUND},
    )
    async def get_request(record_id: uuid.UUID, actor: ActorDep, store: StoreDep):
        return service.get_record(store, actor, kind, record_id)

    @router.post(
        f"/{{record_id}}/{accept_path}",
        response_model=read_schema,
        responses={**CommonResponses.NOT_FOUND, **CommonResponses.BAD_REQUEST},
    )
    async def accept_request(record_id: uuid.UUID, actor: ActorDep, store: StoreDep):
        return service.accept(store, actor, kind, record_id)

    @router.post(
        "/{record_id}/cancel",
        response_model=read_schema,
        responses={**CommonResponses.NOT_FOUND, **CommonResponses.BAD_REQUEST},
    )
    async def cancel_request(record_id: uuid.UUID, actor: ActorDep, store: StoreDep):
        return service.cancel(store, actor, kind, record_id)

    @router.post(
        "/{record_id}/revert",
        response_model=read_schema,
        responses={**CommonResponses.NOT_FOUND, **CommonResponses.BAD_REQUEST},
    )
    async def revert_request(record_id: uuid.UUID, actor: ActorDep, store: StoreDep):
        """Return a decided request to Pending. Admin only."""
        return service.revert(store, actor, kind, record_id)

    @router.put(
        "/{record_id}/hide-from-dealer",
        response_model=read_schema,
        responses={**CommonResponses.NOT_FOUND},
    )
    async def hide_from_dealer(
        record_id: uuid.UUID,
        body: HideFromDealerRequest,
        actor: ActorDep,
        store: StoreDep,
    ):
        """Toggle the dealer-visibility overlay. Status is unchanged."""
        return service.set_hidden(store, actor, kind, record_id, body.hidden)

    return router


booking_router = build_router(
    FulfillmentKind.booking,
    Routes.BOOKING,
    BookingCreate,
    BookingRead,
    service.create_booking,
    accept_path="confirm",
)

rental_router = build_router(
    FulfillmentKind.rental,
    Routes.RENTAL,
    RentalCreate,
    RentalRead,
    service.create_rental,
    accept_path="accept",
)
