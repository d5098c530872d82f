"""
Tests for voucher redemption against a finite stock
"""

import asyncio

from sqlalchemy import select, func

from cleanhood.models import Voucher, VoucherRedemption, VoucherRedemptionStatus, VoucherStatus
from cleanhood.services.voucher_service import VoucherService


async def create_voucher(call, points_required=500, quantity=5, status=VoucherStatus.ACTIVE):
    result = await call(
        VoucherService, "create_voucher",
        "Green Grocer", "10% off", "Discount on fresh produce", points_required, quantity, status=status,
    )
    assert result.success
    return result.data["voucher_id"]


async def stock_of(session_factory, voucher_id):
    async with session_factory() as session:
        return await session.scalar(select(Voucher.quantity).where(Voucher.id == voucher_id))


class TestRedeemVoucher:

    async def test_500_point_voucher_scenario(self, call, make_user, ledger_state, session_factory):
        user_id = await make_user(balance=500)
        voucher_id = await create_voucher(call, points_required=500, quantity=5)

        first = await call(VoucherService, "redeem_voucher", user_id, voucher_id)

        assert first.success
        assert await ledger_state(user_id) == (0, 0, 2)
        assert await stock_of(session_factory, voucher_id) == 4

        second = await call(VoucherService, "redeem_voucher", user_id, voucher_id)

        assert not second.success
        assert second.error_code == "INSUFFICIENT_POINTS"
        assert await ledger_state(user_id) == (0, 0, 2)
        assert await stock_of(session_factory, voucher_id) == 4
        async with session_factory() as session:
            assert await session.scalar(select(func.count(VoucherRedemption.id))) == 1

    async def test_out_of_stock(self, call, make_user, ledger_state):
        user_id = await make_user(balance=900)
        voucher_id = await create_voucher(call, quantity=0)

        result = await call(VoucherService, "redeem_voucher", user_id, voucher_id)

        assert result.error_code == "VOUCHER_UNAVAILABLE"
        assert await ledger_state(user_id) == (900, 900, 1)

    async def test_inactive_voucher(self, call, make_user):
        user_id = await make_user(balance=900)
        voucher_id = await create_voucher(call, status=VoucherStatus.INACTIVE)

        result = await call(VoucherService, "redeem_voucher", user_id, voucher_id)

        assert result.error_code == "VOUCHER_UNAVAILABLE"

    async def test_unknown_voucher(self, call, make_user):
        user_id = await make_user(balance=900)

        result = await call(VoucherService, "redeem_voucher", user_id, 31337)

        assert result.error_code == "NOT_FOUND"

    async def test_race_for_last_unit(self, call, make_user, ledger_state, session_factory):
        """Two residents racing for one unit: exactly one wins"""
        alice = await make_user(balance=500, full_name="Alice")
        bob = await make_user(balance=500, full_name="Bob")
        voucher_id = await create_voucher(call, quantity=1)

        results = await asyncio.gather(
            call(VoucherService, "redeem_voucher", alice, voucher_id),
            call(VoucherService, "redeem_voucher", bob, voucher_id),
        )

        assert sorted(result.success for result in results) == [False, True]
        loser = next(result for result in results if not result.success)
        assert loser.error_code == "VOUCHER_UNAVAILABLE"
        assert await stock_of(session_factory, voucher_id) == 0

        balances = [(await ledger_state(user_id))[:2] for user_id in (alice, bob)]
        assert sorted(balances) == [(0, 0), (500, 500)]
        async with session_factory() as session:
            assert await session.scalar(select(func.count(VoucherRedemption.id))) == 1


class TestVoucherInventory:

    async def test_restock_and_deactivate(self, call, make_user, ledger_state, session_factory):
        user_id = await make_user(balance=1000)
        voucher_id = await create_voucher(call, quantity=0)

        restocked = await call(VoucherService, "update_voucher", voucher_id, quantity=2)

        assert restocked.success
        assert restocked.data["quantity"] == 2
        assert (await call(VoucherService, "redeem_voucher", user_id, voucher_id)).success

        deactivated = await call(VoucherService, "update_voucher", voucher_id, status="inactive")

        assert deactivated.data["status"] == "inactive"
        result = await call(VoucherService, "redeem_voucher", user_id, voucher_id)
        assert result.error_code == "VOUCHER_UNAVAILABLE"
        assert await stock_of(session_factory, voucher_id) == 1
        assert await ledger_state(user_id) == (500, 500, 2)

    async def test_invalid_edits_rejected(self, call):
        voucher_id = await create_voucher(call, quantity=3)

        for changes in ({"quantity": -1}, {"points_required": 0}, {"status": "archived"}, {"id": 7}):
            result = await call(VoucherService, "update_voucher", voucher_id, **changes)
            assert result.error_code == "VALIDATION_ERROR"

        assert (await call(VoucherService, "update_voucher", 31337, quantity=1)).error_code == "NOT_FOUND"

    async def test_delete_voucher_keeps_ledger(self, call, make_user, ledger_state, session_factory):
        user_id = await make_user(balance=500)
        voucher_id = await create_voucher(call)
        await call(VoucherService, "redeem_voucher", user_id, voucher_id)

        assert (await call(VoucherService, "delete_voucher", voucher_id)).success

        async with session_factory() as session:
            assert await session.get(Voucher, voucher_id) is None
            assert await session.scalar(select(func.count(VoucherRedemption.id))) == 0
        assert await ledger_state(user_id) == (0, 0, 2)
        assert (await call(VoucherService, "delete_voucher", voucher_id)).error_code == "NOT_FOUND"

    async def test_delete_redemption_returns_nothing(self, call, make_user, ledger_state, session_factory):
        user_id = await make_user(balance=500)
        voucher_id = await create_voucher(call, quantity=2)
        redemption_id = (await call(VoucherService, "redeem_voucher", user_id, voucher_id)).data["redemption_id"]

        assert (await call(VoucherService, "delete_voucher_redemption", redemption_id)).success

        assert await stock_of(session_factory, voucher_id) == 1
        assert await ledger_state(user_id) == (0, 0, 2)
        result = await call(VoucherService, "delete_voucher_redemption", redemption_id)
        assert result.error_code == "NOT_FOUND"


class TestProcessRedemption:

    async def test_processing_sets_code_without_ledger_effect(self, call, make_user, ledger_state, notifier, session_factory):
        user_id = await make_user(balance=600)
        voucher_id = await create_voucher(call)
        redemption_id = (await call(VoucherService, "redeem_voucher", user_id, voucher_id)).data["redemption_id"]

        result = await call(VoucherService, "process_voucher_redemption", redemption_id, "GREEN-10-XYZ")

        assert result.success
        assert await ledger_state(user_id) == (100, 100, 2)
        async with session_factory() as session:
            redemption = await session.get(VoucherRedemption, redemption_id)
        assert redemption.status == VoucherRedemptionStatus.PROCESSED
        assert redemption.coupon_code == "GREEN-10-XYZ"
        assert notifier.sent[-1][0] == user_id

    async def test_blank_code_rejected(self, call):
        result = await call(VoucherService, "process_voucher_redemption", 1, "  ")

        assert result.error_code == "VALIDATION_ERROR"
