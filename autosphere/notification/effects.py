"""Notification effects.

State machines never write notifications themselves. A transition returns
the field changes to persist plus the notifications it implies; the caller
commits the changes and hands the effects to
``autosphere.notification.dispatcher.dispatch``.
"""

import uuid
from dataclasses import dataclass, field
from typing import Any

from autosphere.notification.models import Audience, NotificationType


@dataclass(frozen=True)
class NotifyUser:
    """Notify a single user."""

    recipient_id: uuid.UUID
    title: str
    message: str
    type: NotificationType = NotificationType.info


@dataclass(frozen=True)
class NotifyAdmins:
    """Notify every admin so moderation work is visible when it lands."""

    title: str
    message: str
    type: NotificationType = NotificationType.info


@dataclass(frozen=True)
class NotifyAudience:
    """Fan a broadcast out to every user or every dealer."""

    audience: Audience
    title: str
    message: str
    type: NotificationType = NotificationType.info


Effect = NotifyUser | NotifyAdmins | NotifyAudience


@dataclass(frozen=True)
class Transition:
    """Result of a state machine step: fields to patch, then effects to run."""

    changes: dict[str, Any]
    effects: list[Effect] = field(default_factory=list)
    status_field: str = "status"

    @property
    def target(self) -> Any:
        return self.changes.get(self.status_field)
