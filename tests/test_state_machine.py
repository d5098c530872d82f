"""
Tests for status transition tables
"""

import pytest

from cleanhood.core.exceptions import InvalidStatusTransitionException
from cleanhood.models import PickupStatus, DonationStatus, RedemptionStatus
from cleanhood.services.state_machine import (
    pickup_state_machine,
    donation_state_machine,
    redemption_state_machine,
)


class TestTransitions:

    @pytest.mark.parametrize("current,new,allowed", [
        (PickupStatus.SCHEDULED, PickupStatus.COMPLETED, True),
        (PickupStatus.SCHEDULED, PickupStatus.CANCELLED, True),
        (PickupStatus.COMPLETED, PickupStatus.CANCELLED, False),
        (PickupStatus.CANCELLED, PickupStatus.SCHEDULED, False),
    ])
    def test_pickup(self, current, new, allowed):
        assert pickup_state_machine.can_transition(current, new) is allowed

    def test_rejected_donation_can_be_approved_again(self):
        assert donation_state_machine.can_transition(DonationStatus.REJECTED, DonationStatus.APPROVED)
        assert donation_state_machine.get_valid_transitions(DonationStatus.RECEIVED) == []

    def test_terminal_redemption_raises(self):
        with pytest.raises(InvalidStatusTransitionException) as exc_info:
            redemption_state_machine.validate_transition(RedemptionStatus.COMPLETED, RedemptionStatus.PENDING)

        assert exc_info.value.error_code == "INVALID_STATUS_TRANSITION"
        assert exc_info.value.detail.endswith("A redemption request that is 'completed' can no longer change.")
        assert redemption_state_machine.get_valid_transitions(RedemptionStatus.PENDING) == [
            RedemptionStatus.CANCELLED,
            RedemptionStatus.COMPLETED,
        ]

    def test_error_lists_allowed_statuses(self):
        with pytest.raises(InvalidStatusTransitionException) as exc_info:
            donation_state_machine.validate_transition(DonationStatus.APPROVED, DonationStatus.PENDING)

        assert exc_info.value.detail == (
            "Cannot move donation from 'approved' to 'pending'. "
            "Allowed next statuses: received, rejected."
        )
