"""Tests for what the back-office panel lets an operator change."""

import pytest

from autosphere.admin.views import (
    VIEWS,
    BookingAdmin,
    ListingAdmin,
    PaymentAdmin,
    RentalAdmin,
    UserAdmin,
)


def test_payment_proof_can_be_corrected():
    assert PaymentAdmin.can_edit is True
    assert PaymentAdmin.can_create is False
    assert PaymentAdmin.can_delete is False
    assert [column.key for column in PaymentAdmin.form_columns] == [
        "amount",
        "method",
        "reference_id",
    ]


@pytest.mark.parametrize("view", [ListingAdmin, BookingAdmin, RentalAdmin])
def test_lifecycle_records_are_read_only(view):
    assert view.can_edit is False
    assert view.can_create is False


def test_user_lifecycle_fields_are_not_editable():
    excluded = {column.key for column in UserAdmin.form_excluded_columns}

    assert {"role", "is_verified", "kyc_status", "is_suspended"} <= excluded


def test_every_view_is_registered():
    assert PaymentAdmin in VIEWS
    assert len(VIEWS) == len(set(VIEWS))
