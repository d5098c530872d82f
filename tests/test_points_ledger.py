"""
Tests for the ledger primitives and manual adjustments

Tests cover:
1. Grant and deduct through LedgerService
2. The clamp rule for deductions larger than the balance
3. Validation and unknown users
4. Rollback when the log append fails
5. Concurrent writers on one balance
6. Drift detection
"""

import asyncio

import pytest
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from cleanhood.core.exceptions import GENERIC_FAILURE_MESSAGE, InsufficientPointsException
from cleanhood.models import User, PointsLog, LogType, SourceType
from cleanhood.services.ledger_service import (
    LedgerService,
    get_balance,
    get_points_log,
    find_balance_drift,
)
from cleanhood.services.points_ledger import PointsLedger


class TestGrantAndDeduct:

    async def test_grant_adds_points_and_logs(self, call, make_user, ledger_state):
        user_id = await make_user()

        result = await call(LedgerService, "grant_points", user_id, 25, "Cleanup day")

        assert result.success
        assert result.data["balance"] == 25
        assert await ledger_state(user_id) == (25, 25, 1)

    async def test_deduct_within_balance(self, call, make_user, ledger_state):
        user_id = await make_user(balance=100)

        result = await call(LedgerService, "deduct_points", user_id, 30, "Correction")

        assert result.success
        assert result.data["delta"] == -30
        assert await ledger_state(user_id) == (70, 70, 2)

    async def test_deduct_is_clamped_at_zero(self, call, make_user, ledger_state, session_factory):
        """Balance 100, deduct 150: balance 0 and the entry records -100 of 150 requested"""
        user_id = await make_user(balance=100)

        result = await call(LedgerService, "deduct_points", user_id, 150, "test")

        assert result.success
        assert result.data["balance"] == 0
        assert result.data["delta"] == -100
        assert result.data["requested_points"] == 150

        async with session_factory() as session:
            entry = (
                await session.execute(
                    select(PointsLog).where(PointsLog.user_id == user_id).order_by(PointsLog.id.desc())
                )
            ).scalars().first()
        assert entry.log_type == LogType.DEDUCT
        assert entry.delta == -100
        assert entry.requested_points == 150
        assert await ledger_state(user_id) == (0, 0, 2)

    async def test_deduct_from_empty_balance_records_zero_delta(self, call, make_user, ledger_state):
        user_id = await make_user()

        result = await call(LedgerService, "deduct_points", user_id, 10, "Nothing to take")

        assert result.success
        assert result.data["delta"] == 0
        assert await ledger_state(user_id) == (0, 0, 1)

    async def test_mixed_sequence_keeps_balance_equal_to_log(self, call, make_user, ledger_state):
        user_id = await make_user()

        for method, points in [
            ("grant_points", 40),
            ("deduct_points", 15),
            ("grant_points", 5),
            ("deduct_points", 100),
            ("grant_points", 12),
        ]:
            assert (await call(LedgerService, method, user_id, points)).success

        balance, total, _ = await ledger_state(user_id)
        assert balance == total == 12


class TestValidation:

    @pytest.mark.parametrize("points", [0, -5, 2.5, True])
    async def test_non_positive_or_fractional_points_rejected(self, call, make_user, ledger_state, points):
        user_id = await make_user(balance=10)

        result = await call(LedgerService, "grant_points", user_id, points)

        assert not result.success
        assert result.error_code == "VALIDATION_ERROR"
        assert await ledger_state(user_id) == (10, 10, 1)

    async def test_unknown_user(self, call):
        result = await call(LedgerService, "deduct_points", 9999, 5)

        assert not result.success
        assert result.error_code == "NOT_FOUND"

    async def test_strict_debit_refuses_overdraft(self, session_factory, make_user):
        user_id = await make_user(balance=20)

        async with session_factory() as session:
            with pytest.raises(InsufficientPointsException) as exc_info:
                await PointsLedger(session).debit(
                    user_id, 21, "Too much", LogType.REDEEM_CASH, SourceType.REDEMPTION, 1
                )
            await session.rollback()

        assert exc_info.value.error_code == "INSUFFICIENT_POINTS"


class TestAtomicity:

    async def test_failed_log_append_rolls_back_balance(self, call, make_user, ledger_state, monkeypatch):
        user_id = await make_user(balance=50)

        async def broken_append(self, *args, **kwargs):
            raise SQLAlchemyError("disk full")

        monkeypatch.setattr(PointsLedger, "_append_entry", broken_append)
        result = await call(LedgerService, "grant_points", user_id, 10)

        assert not result.success
        assert result.error_code == "DATABASE_ERROR"
        assert result.message == GENERIC_FAILURE_MESSAGE
        assert await ledger_state(user_id) == (50, 50, 1)


class TestConcurrentWriters:

    async def test_concurrent_grants_all_succeed(self, call, make_user, ledger_state):
        user_id = await make_user(balance=10)

        results = await asyncio.gather(
            *(call(LedgerService, "grant_points", user_id, 5, f"Cleanup {n}") for n in range(4))
        )

        assert [(result.success, result.error_code) for result in results] == [(True, None)] * 4
        assert await ledger_state(user_id) == (30, 30, 5)

    async def test_grants_and_deductions_interleave(self, call, make_user, ledger_state):
        user_id = await make_user(balance=20)

        results = await asyncio.gather(
            call(LedgerService, "grant_points", user_id, 10),
            call(LedgerService, "deduct_points", user_id, 5),
            call(LedgerService, "grant_points", user_id, 7),
            call(LedgerService, "deduct_points", user_id, 2),
        )

        assert all(result.success for result in results)
        assert await ledger_state(user_id) == (30, 30, 5)


class TestReads:

    async def test_balance_and_log_newest_first(self, call, make_user, session_factory):
        user_id = await make_user()
        await call(LedgerService, "grant_points", user_id, 3, "first")
        await call(LedgerService, "grant_points", user_id, 4, "second")

        async with session_factory() as session:
            assert await get_balance(session, user_id) == 7
            entries = await get_points_log(session, user_id)

        assert [entry.reason for entry in entries] == ["second", "first"]

    async def test_drift_is_reported(self, make_user, session_factory):
        consistent = await make_user(balance=30)
        tampered = await make_user(balance=30)

        async with session_factory() as session:
            assert await find_balance_drift(session) == []
            await session.execute(update(User).where(User.id == tampered).values(points_balance=31))
            await session.commit()

        async with session_factory() as session:
            drift = await find_balance_drift(session)

        assert drift == [{"user_id": tampered, "balance": 31, "log_total": 30}]
        assert consistent not in [row["user_id"] for row in drift]
