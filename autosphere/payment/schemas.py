"""Payment domain schemas."""

import uuid

from pydantic import Field
from sqlmodel import SQLModel

from autosphere.core.mixins import TimestampReadMixin
from autosphere.payment.models import PaymentItemType, PaymentMethod, PaymentStatus


class PaymentCreate(SQLModel):
    """Proof of payment submitted by a buyer."""

    item_type: PaymentItemType
    item_id: uuid.UUID
    amount: float = Field(gt=0)
    method: PaymentMethod
    reference_id: str = Field(
        min_length=1, max_length=255, description="Receipt number or transaction hash"
    )


class PaymentRead(TimestampReadMixin):
    id: uuid.UUID
    user_id: uuid.UUID
    user_name: str
    item_type: PaymentItemType
    item_id: uuid.UUID
    item_description: str
    amount: float
    method: PaymentMethod
    reference_id: str
    status: PaymentStatus


class PaymentStats(SQLModel):
    verified_volume: float
    pending_count: int
