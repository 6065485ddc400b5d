"""Inquiry domain router.

Anyone may send an inquiry; signed-in senders are linked to their account.
Reading and deleting inquiries is admin only.
"""

import uuid

from fastapi import APIRouter, status

from autosphere.auth.dependencies import ActorDep, OptionalActorDep
from autosphere.core.constants import CommonResponses, Routes
from autosphere.core.deps import StoreDep
from autosphere.inquiry import service
from autosphere.inquiry.schemas import InquiryCreate, InquiryRead

router = APIRouter(
    prefix=Routes.INQUIRY.prefix,
    tags=[Routes.INQUIRY.tag],
    responses={**CommonResponses.UNAVAILABLE},
)

_ADMIN_RESPONSES = {**CommonResponses.UNAUTHORIZED, **CommonResponses.FORBIDDEN}


@router.post("", response_model=InquiryRead, status_code=status.HTTP_201_CREATED)
async def send_inquiry(data: InquiryCreate, store: StoreDep, actor: OptionalActorDep):
    """Send a message to the sales team. Every admin is notified."""
    return service.create_inquiry(store, actor, data)


@router.get("", response_model=list[InquiryRead], responses=_ADMIN_RESPONSES)
async def list_inquiries(actor: ActorDep, store: StoreDep):
    return service.list_inquiries(store, actor)


@router.get(
    "/{inquiry_id}",
    response_model=InquiryRead,
    responses={**_ADMIN_RESPONSES, **CommonResponses.NOT_FOUND},
)
async def get_inquiry(inquiry_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    return service.get_inquiry(store, actor, inquiry_id)


@router.delete(
    "/{inquiry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**_ADMIN_RESPONSES, **CommonResponses.NOT_FOUND},
)
async def delete_inquiry(inquiry_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    service.delete_inquiry(store, actor, inquiry_id)
