"""Payment domain models.

A Payment is a buyer-submitted proof of payment (receipt number or
transaction hash). The platform only records the proof and an admin's
verification decision.
"""

import uuid
from enum import Enum

from sqlmodel import Field, SQLModel

from autosphere.core.mixins import TimestampMixin


class PaymentStatus(str, Enum):
    pending = "Pending"
    verified = "Verified"
    rejected = "Rejected"


class PaymentItemType(str, Enum):
    purchase = "Purchase"
    rental = "Rental"


class PaymentMethod(str, Enum):
    bank_transfer = "Bank Transfer"
    crypto = "Crypto"
    card = "Card"


class Payment(TimestampMixin, SQLModel, table=True):
    """Payment database model.

    ``item_id`` points at a Listing (Purchase) or a Rental (Rental). It is
    deliberately not a foreign key: ``item_description`` keeps the payment
    auditable after the referenced record is deleted.
    """

    __tablename__: str = "payments"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", index=True)
    user_name: str = Field(max_length=120)
    item_type: PaymentItemType = Field(max_length=20)
    item_id: uuid.UUID = Field(index=True)
    item_description: str = Field(max_length=255)
    amount: float = Field(gt=0)
    method: PaymentMethod = Field(max_length=20)
    reference_id: str = Field(max_length=255)
    status: PaymentStatus = Field(
        default=PaymentStatus.pending, max_length=20, index=True
    )
