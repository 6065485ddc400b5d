"""SQLAdmin views over the marketplace collections.

Lifecycle status is never editable here: status only changes through the
API's state machines, which also notify the affected users. Payment
proof details and user profile fields may be corrected by direct edit.
"""

from sqladmin import ModelView

from autosphere.fulfillment.models import Booking, Rental
from autosphere.inquiry.models import Inquiry
from autosphere.listing.models import Listing
from autosphere.notification.models import MessageLogEntry
from autosphere.payment.models import Payment
from autosphere.user.models import User


class ReadOnlyView(ModelView):
    can_create = False
    can_edit = False
    can_delete = False


class UserAdmin(ModelView, model=User):
    name = "User"
    name_plural = "Users"
    icon = "fa-solid fa-user"
    can_create = False
    can_delete = False

    column_list = [
        User.email,
        User.first_name,
        User.last_name,
        User.role,
        User.is_verified,
        User.kyc_status,
        User.is_suspended,
        User.created_at,
    ]
    column_searchable_list = [User.email, User.first_name, User.last_name]
    column_sortable_list = [User.email, User.role, User.created_at]
    # Identity and KYC state are owned by Firebase and the KYC workflow.
    form_excluded_columns = [
        User.external_id,
        User.email,
        User.kyc_status,
        User.kyc_documents,
        User.kyc_rejection_reason,
        User.is_verified,
        User.verification_override,
        User.is_suspended,
        User.role,
        User.created_at,
        User.updated_at,
    ]


class ListingAdmin(ReadOnlyView, model=Listing):
    name = "Listing"
    name_plural = "Listings"
    icon = "fa-solid fa-car"

    column_list = [
        Listing.make,
        Listing.model,
        Listing.year,
        Listing.price,
        Listing.status,
        Listing.is_suspended,
        Listing.is_featured,
        Listing.dealer_id,
        Listing.created_at,
    ]
    column_searchable_list = [Listing.make, Listing.model]
    column_sortable_list = [Listing.price, Listing.year, Listing.created_at]


class BookingAdmin(ReadOnlyView, model=Booking):
    name = "Test Drive"
    name_plural = "Test Drives"
    icon = "fa-solid fa-calendar"

    column_list = [
        Booking.listing_label,
        Booking.user_name,
        Booking.scheduled_date,
        Booking.status,
        Booking.hide_from_dealer,
        Booking.created_at,
    ]
    column_sortable_list = [Booking.scheduled_date, Booking.created_at]


class RentalAdmin(ReadOnlyView, model=Rental):
    name = "Rental"
    name_plural = "Rentals"
    icon = "fa-solid fa-key"

    column_list = [
        Rental.listing_label,
        Rental.user_name,
        Rental.start_date,
        Rental.duration,
        Rental.total_price,
        Rental.status,
        Rental.hide_from_dealer,
    ]
    column_sortable_list = [Rental.start_date, Rental.created_at]


class PaymentAdmin(ModelView, model=Payment):
    """Payments can be corrected by direct edit; status cannot.

    Verification decisions go through the API so the payer is notified.
    """

    name = "Payment"
    name_plural = "Payments"
    icon = "fa-solid fa-receipt"
    can_create = False
    can_delete = False

    column_list = [
        Payment.item_description,
        Payment.user_name,
        Payment.amount,
        Payment.method,
        Payment.reference_id,
        Payment.status,
        Payment.created_at,
    ]
    column_searchable_list = [Payment.reference_id, Payment.user_name]
    column_sortable_list = [Payment.amount, Payment.created_at]
    form_columns = [Payment.amount, Payment.method, Payment.reference_id]


class MessageLogAdmin(ReadOnlyView, model=MessageLogEntry):
    name = "Message"
    name_plural = "Message Log"
    icon = "fa-solid fa-bullhorn"

    column_list = [
        MessageLogEntry.title,
        MessageLogEntry.audience,
        MessageLogEntry.recipient_count,
        MessageLogEntry.created_at,
    ]


class InquiryAdmin(ReadOnlyView, model=Inquiry):
    name = "Inquiry"
    name_plural = "Inquiries"
    icon = "fa-solid fa-envelope"
    can_delete = True

    column_list = [
        Inquiry.name,
        Inquiry.email,
        Inquiry.interest,
        Inquiry.created_at,
    ]
    column_searchable_list = [Inquiry.name, Inquiry.email]


VIEWS: list[type[ModelView]] = [
    UserAdmin,
    ListingAdmin,
    BookingAdmin,
    RentalAdmin,
    PaymentAdmin,
    MessageLogAdmin,
    InquiryAdmin,
]
