"""Notification domain routers.

``/notifications`` is the caller's own feed. ``/broadcasts`` is the admin
message log: broadcasts to all users or all dealers, direct messages, and
later edits or deletions of those log entries.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from autosphere.auth.dependencies import ActorDep, require_auth
from autosphere.core.constants import CommonResponses, Routes
from autosphere.core.deps import StoreDep
from autosphere.notification import service
from autosphere.notification.models import Audience
from autosphere.notification.schemas import (
    BroadcastCreate,
    DirectMessageCreate,
    FeedUpdate,
    MessageLogRead,
    MessageUpdate,
    NotificationRead,
)

_AUTHENTICATED = {
    **CommonResponses.UNAUTHORIZED,
    **CommonResponses.FORBIDDEN,
    **CommonResponses.UNAVAILABLE,
}

router = APIRouter(
    prefix=Routes.NOTIFICATION.prefix,
    tags=[Routes.NOTIFICATION.tag],
    dependencies=[Depends(require_auth)],
    responses=_AUTHENTICATED,
)

broadcast_router = APIRouter(
    prefix=Routes.BROADCAST.prefix,
    tags=[Routes.BROADCAST.tag],
    dependencies=[Depends(require_auth)],
    responses=_AUTHENTICATED,
)


@router.get("", response_model=list[NotificationRead])
async def list_notifications(actor: ActorDep, store: StoreDep):
    return service.list_feed(store, actor)


@router.post(
    "/{notification_id}/read",
    response_model=NotificationRead,
    responses={**CommonResponses.NOT_FOUND},
)
async def mark_read(notification_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    return service.mark_read(store, actor, notification_id)


@router.post("/read-all", response_model=FeedUpdate)
async def mark_all_read(actor: ActorDep, store: StoreDep):
    return FeedUpdate(count=service.mark_all_read(store, actor))


@router.delete("", response_model=FeedUpdate)
async def clear_notifications(actor: ActorDep, store: StoreDep):
    """Delete every notification in the caller's feed."""
    return FeedUpdate(count=service.clear_feed(store, actor))


@broadcast_router.post(
    "", response_model=MessageLogRead, status_code=status.HTTP_201_CREATED
)
async def send_broadcast(data: BroadcastCreate, actor: ActorDep, store: StoreDep):
    """Broadcast to all users or all dealers. Admin only."""
    return service.send_broadcast(store, actor, data)


@broadcast_router.post(
    "/direct",
    response_model=MessageLogRead,
    status_code=status.HTTP_201_CREATED,
    responses={**CommonResponses.NOT_FOUND},
)
async def send_direct(data: DirectMessageCreate, actor: ActorDep, store: StoreDep):
    """Message a single user. Admin only."""
    return service.send_direct(store, actor, data)


@broadcast_router.get("", response_model=list[MessageLogRead])
async def list_messages(
    actor: ActorDep,
    store: StoreDep,
    audience: Annotated[Audience | None, Query()] = None,
):
    """Message history, newest first. Admin only."""
    return service.list_messages(store, actor, audience)


@broadcast_router.patch(
    "/{message_id}",
    response_model=MessageLogRead,
    responses={**CommonResponses.NOT_FOUND},
)
async def edit_message(
    message_id: uuid.UUID, data: MessageUpdate, actor: ActorDep, store: StoreDep
):
    return service.edit_message(store, actor, message_id, data)


@broadcast_router.delete(
    "/{message_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={**CommonResponses.NOT_FOUND},
)
async def delete_message(message_id: uuid.UUID, actor: ActorDep, store: StoreDep):
    service.delete_message(store, actor, message_id)
