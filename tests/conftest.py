"""
Shared fixtures: a fresh SQLite database per test, seeded like production
"""

import itertools
from typing import List, Tuple

import pytest
from sqlalchemy import select, func

from cleanhood.core.database import create_engine_for, create_session_factory, init_db
from cleanhood.models import User, UserRole, PointsLog
from cleanhood.services.notification import NotificationService
from cleanhood.services.points_ledger import PointsLedger

_phones = itertools.count(1)

class RecordingNotifier(NotificationService):
    """Stores notifications and remembers what was sent"""

    def __init__(self, session_factory):
        super().__init__(session_factory)
        self.sent: List[Tuple[int, str, str]] = []

    async def notify(self, user_id: int, title: str, content: str) -> bool:
        self.sent.append((user_id, title, content))
        return await super().notify(user_id, title, content)

@pytest.fixture
async def engine(tmp_path):
    engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()

@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)

@pytest.fixture
def notifier(session_factory):
    return RecordingNotifier(session_factory)

@pytest.fixture
def call(session_factory, notifier):
    """Run one service method in its own session, the way a request does"""
    async def _call(service_cls, method: str, *args, **kwargs):
        async with session_factory() as session:
            service = service_cls(session, notifier)
            return await getattr(service, method)(*args, **kwargs)
    return _call

@pytest.fixture
def make_user(session_factory):
    """Create a user; an opening balance is granted through the ledger"""
    async def _make(balance: int = 0, role: UserRole = UserRole.USER, full_name: str = "Resident") -> int:
        async with session_factory() as session:
            user = User(
                full_name=full_name,
                phone_number=f"+96777{next(_phones):07d}",
                role=role,
                points_balance=0,
            )
            session.add(user)
            await session.flush()
            if balance:
                await PointsLedger(session).grant(user.id, balance, reason="Opening balance")
            await session.commit()
            return user.id
    return _make

@pytest.fixture
def ledger_state(session_factory):
    """(balance, sum of deltas, number of entries) for a user"""
    async def _state(user_id: int) -> Tuple[int, int, int]:
        async with session_factory() as session:
            balance = await session.scalar(select(User.points_balance).where(User.id == user_id))
            total, count = (
                await session.execute(
                    select(func.coalesce(func.sum(PointsLog.delta), 0), func.count(PointsLog.id))
                    .where(PointsLog.user_id == user_id)
                )
            ).one()
            return balance, int(total), count
    return _state
