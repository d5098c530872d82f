"""
Status state machines for pickups, donations and redemption workflows
"""

from enum import Enum
from typing import Dict, List, Set

from cleanhood.core.exceptions import InvalidStatusTransitionException
from cleanhood.models import (
    PickupStatus,
    DonationStatus,
    RedemptionStatus,
    FinancialSupportStatus,
    VoucherRedemptionStatus,
)

class StatusStateMachine:
    """
    Manages valid status transitions for one entity

    Repeating the current status is not a transition; callers treat it as
    an idempotent no-op.
    """

    def __init__(self, entity: str, transitions: Dict[Enum, Set[Enum]]):
        self.entity = entity
        self.transitions = transitions

    def can_transition(self, current_status: Enum, new_status: Enum) -> bool:
        return new_status in self.transitions.get(current_status, set())

    def get_valid_transitions(self, current_status: Enum) -> List[Enum]:
        return sorted(self.transitions.get(current_status, set()), key=lambda s: s.value)

    def validate_transition(self, current_status: Enum, new_status: Enum) -> None:
        """
        Raise if the move is not allowed

        Raises:
            InvalidStatusTransitionException: move not in the transition table
        """
        if not self.can_transition(current_status, new_status):
            raise InvalidStatusTransitionException(
                self.entity,
                current_status.value,
                new_status.value,
                allowed=[status.value for status in self.get_valid_transitions(current_status)],
            )

pickup_state_machine = StatusStateMachine(
    "pickup",
    {
        PickupStatus.SCHEDULED: {PickupStatus.COMPLETED, PickupStatus.CANCELLED},
        PickupStatus.COMPLETED: set(),
        PickupStatus.CANCELLED: set(),
    },
)

donation_state_machine = StatusStateMachine(
    "donation",
    {
        DonationStatus.PENDING: {DonationStatus.APPROVED, DonationStatus.REJECTED},
        DonationStatus.APPROVED: {DonationStatus.RECEIVED, DonationStatus.REJECTED},
        DonationStatus.REJECTED: {DonationStatus.APPROVED},
        DonationStatus.RECEIVED: set(),
    },
)

redemption_state_machine = StatusStateMachine(
    "redemption request",
    {
        RedemptionStatus.PENDING: {RedemptionStatus.COMPLETED, RedemptionStatus.CANCELLED},
        RedemptionStatus.COMPLETED: set(),
        RedemptionStatus.CANCELLED: set(),
    },
)

financial_support_state_machine = StatusStateMachine(
    "financial support",
    {
        FinancialSupportStatus.PENDING_REVIEW: {
            FinancialSupportStatus.APPROVED,
            FinancialSupportStatus.REJECTED,
        },
        FinancialSupportStatus.APPROVED: set(),
        FinancialSupportStatus.REJECTED: set(),
    },
)

voucher_redemption_state_machine = StatusStateMachine(
    "voucher redemption",
    {
        VoucherRedemptionStatus.PENDING_REVIEW: {VoucherRedemptionStatus.PROCESSED},
        VoucherRedemptionStatus.PROCESSED: set(),
    },
)
