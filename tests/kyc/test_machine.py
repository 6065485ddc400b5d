"""Tests for the KYC clearance state machine."""

import pytest

from autosphere.core.exceptions import InvalidTransitionError, MissingReasonError
from autosphere.kyc import machine
from autosphere.notification.effects import NotifyAdmins
from autosphere.user.models import KycStatus, User, UserRole

PACKET = {
    "front": "https://cdn.example.com/front.jpg",
    "back": "https://cdn.example.com/back.jpg",
    "selfie": "https://cdn.example.com/selfie.jpg",
}


def _user(status: KycStatus = KycStatus.none, **fields) -> User:
    return User(
        external_id="uid-1",
        email="dealer@example.com",
        first_name="Dana",
        last_name="Dealer",
        role=UserRole.dealer,
        kyc_status=status,
        **fields,
    )


@pytest.mark.parametrize(
    "status", [KycStatus.none, KycStatus.rejected, KycStatus.approved]
)
def test_submit_complete_packet(status: KycStatus):
    transition = machine.submit(_user(status), PACKET)

    assert transition.target == KycStatus.pending
    assert transition.status_field == "kyc_status"
    documents = transition.changes["kyc_documents"]
    assert {k: documents[k] for k in PACKET} == PACKET
    assert documents["submitted_at"].endswith("Z")
    assert isinstance(transition.effects[0], NotifyAdmins)


def test_submit_clears_verification_without_override():
    transition = machine.submit(_user(KycStatus.approved, is_verified=True), PACKET)

    assert transition.changes["is_verified"] is False


def test_submit_keeps_override():
    user = _user(is_verified=True, verification_override=True)

    assert machine.submit(user, PACKET).changes["is_verified"] is True


@pytest.mark.parametrize("missing", ["front", "back", "selfie"])
def test_incomplete_packet_names_missing_artifact(missing: str):
    packet = {**PACKET, missing: "  "}

    with pytest.raises(machine.IncompleteKycPacketError) as exc_info:
        machine.submit(_user(), packet)

    assert exc_info.value.context == {"missing": [missing]}
    assert exc_info.value.status_code == 400


def test_cannot_resubmit_while_pending():
    with pytest.raises(InvalidTransitionError):
        machine.submit(_user(KycStatus.pending), PACKET)


def test_approve_sets_verified():
    transition = machine.approve(_user(KycStatus.pending))

    assert transition.changes["is_verified"] is True
    assert transition.effects[0].title == "Identity Verified"


def test_reject_requires_reason_and_pending():
    with pytest.raises(MissingReasonError):
        machine.reject(_user(KycStatus.pending), "")
    with pytest.raises(InvalidTransitionError):
        machine.reject(_user(KycStatus.none), "Blurry ID")


def test_reject_clears_override_and_explains():
    user = _user(KycStatus.pending, is_verified=True, verification_override=True)
    transition = machine.reject(user, "Blurry ID")

    assert transition.changes["is_verified"] is False
    assert transition.changes["verification_override"] is False
    assert transition.changes["kyc_rejection_reason"] == "Blurry ID"
    assert "Blurry ID" in transition.effects[0].message
