"""
Tests for donation submissions and the approval grant
"""

from sqlalchemy import select

from cleanhood.models import Donation, DonationStatus, Notification
from cleanhood.services.donation_service import DonationService
from cleanhood.services.point_settings_service import PointSettingsService


async def submit(call, user_id, quantity=3):
    result = await call(
        DonationService, "submit_donation", user_id, "Shirts", "Good", quantity, "Street 5, Al-Tahrir district"
    )
    assert result.success
    return result.data["donation_id"]


class TestSubmission:

    async def test_short_address_rejected(self, call, make_user):
        user_id = await make_user()

        result = await call(DonationService, "submit_donation", user_id, "Shirts", "Good", 1, "short")

        assert result.error_code == "VALIDATION_ERROR"

    async def test_delete_has_no_ledger_effect(self, call, make_user, ledger_state, session_factory):
        user_id = await make_user(balance=5)
        donation_id = await submit(call, user_id)

        assert (await call(DonationService, "delete_donation", donation_id)).success
        async with session_factory() as session:
            assert await session.get(Donation, donation_id) is None
        assert await ledger_state(user_id) == (5, 5, 1)


class TestApprovalGrant:

    async def test_approval_grants_per_piece_and_notifies(self, call, make_user, ledger_state, notifier, session_factory):
        user_id = await make_user()
        donation_id = await submit(call, user_id, quantity=4)

        result = await call(DonationService, "update_donation_status", donation_id, DonationStatus.APPROVED)

        assert result.success
        assert result.data["points_granted"] == 8
        assert await ledger_state(user_id) == (8, 8, 1)
        assert [(sent[0], sent[1]) for sent in notifier.sent] == [(user_id, "Donation accepted!")]

        async with session_factory() as session:
            stored = (await session.execute(select(Notification))).scalars().all()
        assert [n.target_user_id for n in stored] == [user_id]

    async def test_reapproval_after_rejection_grants_once(self, call, make_user, ledger_state):
        user_id = await make_user()
        donation_id = await submit(call, user_id, quantity=2)

        for status in (
            DonationStatus.APPROVED,
            DonationStatus.APPROVED,
            DonationStatus.REJECTED,
            DonationStatus.APPROVED,
        ):
            assert (await call(DonationService, "update_donation_status", donation_id, status)).success

        assert await ledger_state(user_id) == (4, 4, 1)

    async def test_zero_rate_grants_nothing(self, call, make_user, ledger_state):
        user_id = await make_user()
        donation_id = await submit(call, user_id)
        await call(PointSettingsService, "update_point_settings", donation_per_piece=0)

        result = await call(DonationService, "update_donation_status", donation_id, DonationStatus.APPROVED)

        assert result.success
        assert await ledger_state(user_id) == (0, 0, 0)

    async def test_received_is_terminal(self, call, make_user):
        user_id = await make_user()
        donation_id = await submit(call, user_id)
        await call(DonationService, "update_donation_status", donation_id, DonationStatus.APPROVED)
        await call(DonationService, "update_donation_status", donation_id, DonationStatus.RECEIVED)

        result = await call(DonationService, "update_donation_status", donation_id, DonationStatus.PENDING)

        assert result.error_code == "INVALID_STATUS_TRANSITION"

    async def test_failed_approval_sends_no_notification(self, call, make_user, notifier, monkeypatch):
        from sqlalchemy.exc import SQLAlchemyError
        from cleanhood.services.points_ledger import PointsLedger

        user_id = await make_user()
        donation_id = await submit(call, user_id)

        async def broken_grant(self, *args, **kwargs):
            raise SQLAlchemyError("deadlock detected")

        monkeypatch.setattr(PointsLedger, "grant", broken_grant)
        result = await call(DonationService, "update_donation_status", donation_id, DonationStatus.APPROVED)

        assert result.error_code == "DATABASE_ERROR"
        assert notifier.sent == []
