"""
Database configuration and session management
Uses SQLAlchemy with async support
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy import event, select
from sqlalchemy.pool import NullPool
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional
import logging

from .config import settings
from cleanhood.models.base import Base

logger = logging.getLogger(__name__)

def _serialize_sqlite_writers(bind: AsyncEngine) -> None:
    """
    Open every SQLite transaction with BEGIN IMMEDIATE

    SQLite ignores FOR UPDATE, so the write lock is taken up front instead;
    a second writer waits on the busy timeout until the first one commits.
    """
    @event.listens_for(bind.sync_engine, "connect")
    def _disable_pysqlite_begin(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(bind.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

def create_engine_for(url: str, echo: bool = False) -> AsyncEngine:
    """Create an async engine with pooling suited to the backend"""
    if url.startswith("sqlite"):
        # SQLite doesn't support connection pooling parameters
        sqlite_engine = create_async_engine(
            url,
            echo=echo,
            poolclass=NullPool,
            connect_args={"timeout": 30},
        )
        _serialize_sqlite_writers(sqlite_engine)
        return sqlite_engine

    # PostgreSQL and other databases support pooling
    return create_async_engine(
        url,
        echo=echo,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_MAX_OVERFLOW,
        pool_timeout=settings.DATABASE_POOL_TIMEOUT,
        pool_pre_ping=True,  # Verify connections before use
    )

engine = create_engine_for(settings.database_url_async, echo=settings.DATABASE_ECHO)

def create_session_factory(bind: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

AsyncSessionLocal = create_session_factory(engine)

# Database dependency
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Create and yield database session
    Services own their transactions; anything left open is rolled back
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()

@asynccontextmanager
async def get_db_context(
    session_factory: Optional[async_sessionmaker] = None,
) -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager for database sessions
    Useful for scripts and background tasks
    """
    factory = session_factory or AsyncSessionLocal
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

async def seed_reference_data(session: AsyncSession) -> None:
    """Insert the point settings singleton and the badge catalog if missing"""
    from cleanhood.models.badge import Badge, DEFAULT_BADGES
    from cleanhood.models.points import PointSettings, SETTINGS_ROW_ID

    if await session.get(PointSettings, SETTINGS_ROW_ID) is None:
        session.add(PointSettings(
            id=SETTINGS_ROW_ID,
            auto_grant_enabled=settings.DEFAULT_AUTO_GRANT_ENABLED,
            recycling_per_kg=settings.DEFAULT_RECYCLING_PER_KG,
            organic_per_kg=settings.DEFAULT_ORGANIC_PER_KG,
            donation_per_piece=settings.DEFAULT_DONATION_PER_PIECE,
        ))

    existing = set((await session.execute(select(Badge.name))).scalars().all())
    for name, description, icon in DEFAULT_BADGES:
        if name not in existing:
            session.add(Badge(name=name, description=description, icon_name=icon))

async def init_db(bind: Optional[AsyncEngine] = None) -> None:
    """Initialize database tables and reference data"""
    import cleanhood.models  # noqa: F401  registers every table on Base.metadata

    bind = bind or engine
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created successfully")

    async with get_db_context(create_session_factory(bind)) as session:
        await seed_reference_data(session)
    logger.info("Reference data seeded")

async def close_db() -> None:
    """Close database connections"""
    await engine.dispose()
    logger.info("Database connections closed")
