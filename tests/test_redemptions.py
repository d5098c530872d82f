"""
Tests for cash-out requests: snapshot at creation, debit at completion
"""

from decimal import Decimal

from sqlalchemy import select

from cleanhood.models import PointsLog, LogType, RedemptionRequest, RedemptionStatus
from cleanhood.services.ledger_service import LedgerService
from cleanhood.services.redemption_service import RedemptionService


async def open_request(call, user_id, points=None):
    return await call(
        RedemptionService, "create_redemption_request",
        user_id, "Al-Kuraimi Bank", "Resident", "00112233", points=points,
    )


class TestCreateRequest:

    async def test_defaults_to_whole_balance(self, call, make_user, ledger_state):
        user_id = await make_user(balance=120)

        result = await open_request(call, user_id)

        assert result.success
        assert result.data["points_redeemed"] == 120
        assert Decimal(result.data["amount"]) == Decimal("240.00")
        assert await ledger_state(user_id) == (120, 120, 1)

    async def test_pending_requests_reserve_points(self, call, make_user):
        user_id = await make_user(balance=100)
        assert (await open_request(call, user_id, points=70)).success

        result = await open_request(call, user_id, points=40)

        assert not result.success
        assert result.error_code == "INSUFFICIENT_POINTS"

    async def test_empty_balance_rejected(self, call, make_user):
        user_id = await make_user()

        result = await open_request(call, user_id)

        assert result.error_code == "INSUFFICIENT_POINTS"


class TestCompletion:

    async def test_points_debited_only_on_completion(self, call, make_user, ledger_state, notifier, session_factory):
        user_id = await make_user(balance=80)
        redemption_id = (await open_request(call, user_id, points=50)).data["redemption_id"]
        assert await ledger_state(user_id) == (80, 80, 1)

        result = await call(RedemptionService, "update_redemption_status", redemption_id, RedemptionStatus.COMPLETED)

        assert result.success
        assert await ledger_state(user_id) == (30, 30, 2)
        assert notifier.sent[-1][:2] == (user_id, "Amount transferred!")

        async with session_factory() as session:
            entry = (
                await session.execute(select(PointsLog).order_by(PointsLog.id.desc()))
            ).scalars().first()
        assert entry.log_type == LogType.REDEEM_CASH
        assert entry.source_id == redemption_id

    async def test_second_completion_does_not_debit_again(self, call, make_user, ledger_state):
        user_id = await make_user(balance=60)
        redemption_id = (await open_request(call, user_id, points=60)).data["redemption_id"]

        await call(RedemptionService, "update_redemption_status", redemption_id, RedemptionStatus.COMPLETED)
        again = await call(RedemptionService, "update_redemption_status", redemption_id, RedemptionStatus.COMPLETED)

        assert again.success
        assert await ledger_state(user_id) == (0, 0, 2)

    async def test_completion_rejected_when_balance_dropped(self, call, make_user, ledger_state, session_factory):
        user_id = await make_user(balance=100)
        redemption_id = (await open_request(call, user_id)).data["redemption_id"]
        await call(LedgerService, "deduct_points", user_id, 30, "Correction")

        result = await call(RedemptionService, "update_redemption_status", redemption_id, RedemptionStatus.COMPLETED)

        assert result.error_code == "INSUFFICIENT_POINTS"
        assert await ledger_state(user_id) == (70, 70, 2)
        async with session_factory() as session:
            request = await session.get(RedemptionRequest, redemption_id)
        assert request.status == RedemptionStatus.PENDING

    async def test_cancel_then_complete_is_rejected(self, call, make_user, ledger_state):
        user_id = await make_user(balance=10)
        redemption_id = (await open_request(call, user_id)).data["redemption_id"]
        await call(RedemptionService, "update_redemption_status", redemption_id, RedemptionStatus.CANCELLED)

        result = await call(RedemptionService, "update_redemption_status", redemption_id, RedemptionStatus.COMPLETED)

        assert result.error_code == "INVALID_STATUS_TRANSITION"
        assert await ledger_state(user_id) == (10, 10, 1)

    async def test_delete_has_no_ledger_effect(self, call, make_user, ledger_state):
        user_id = await make_user(balance=10)
        redemption_id = (await open_request(call, user_id)).data["redemption_id"]

        assert (await call(RedemptionService, "delete_redemption_request", redemption_id)).success
        assert (await call(RedemptionService, "delete_redemption_request", redemption_id)).error_code == "NOT_FOUND"
        assert await ledger_state(user_id) == (10, 10, 1)
