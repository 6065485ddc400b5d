"""
Model package.

IMPORTANT (Alembic / SQLModel):
- Alembic autogenerate relies on `SQLModel.metadata`, which is populated only
  when the table models are imported.
- `alembic/env.py` imports `autosphere.models`, so this module must import all
  SQLModel `table=True` models to register them.
"""

# Import table models so SQLModel registers them in metadata.
from autosphere.fulfillment.models import Booking, Rental  # noqa: F401
from autosphere.inquiry.models import Inquiry  # noqa: F401
from autosphere.listing.models import Listing  # noqa: F401
from autosphere.notification.models import MessageLogEntry, Notification  # noqa: F401
from autosphere.payment.models import Payment  # noqa: F401
from autosphere.user.models import User  # noqa: F401
