# peerlearn/core/database.py
"""Database connection and session management using SQLAlchemy."""
from typing import AsyncGenerator, Optional
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy import func, text
import logging

from .config import settings

logger = logging.getLogger(__name__)

engine: Optional[AsyncEngine] = None
AsyncSessionLocal: Optional[async_sessionmaker] = None


def init_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """Create the process-wide engine and session factory"""
    global engine, AsyncSessionLocal

    url = database_url or settings.database_url
    engine_kwargs = {"echo": False}
    if url.startswith("postgresql"):
        engine_kwargs.update(
            pool_size=10,
            max_overflow=20,
            pool_timeout=30,
            pool_recycle=1800,
            pool_pre_ping=True,
            connect_args={
                "command_timeout": 60,
                "server_settings": {
                    "application_name": "peerlearn_api",
                    "statement_timeout": "30s",
                    "idle_in_transaction_session_timeout": "60s",
                    "lock_timeout": "10s",
                }
            }
        )

    engine = create_async_engine(url, **engine_kwargs)
    AsyncSessionLocal = async_sessionmaker(
        engine,
        expire_on_commit=False,
        class_=AsyncSession,
        autoflush=False,
    )
    logger.info(f"Database engine initialised ({engine.dialect.name})")
    return engine


async def dispose_engine():
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")
    engine = None
    AsyncSessionLocal = None


async def create_all():
    """Create all tables; used for local development and tests (production uses Alembic)"""
    from ..models import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session for API requests with proper error handling"""
    if AsyncSessionLocal is None:
        raise RuntimeError("Database engine is not initialised")
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception as e:
            logger.error(f"Database session error: {e}")
            await session.rollback()
            raise
        finally:
            await session.close()


def insert_for(db: AsyncSession, model):
    """INSERT construct for the session's dialect, supporting ON CONFLICT DO NOTHING"""
    if db.get_bind().dialect.name == "sqlite":
        return sqlite.insert(model)
    return postgresql.insert(model)


def new_uuid_for(db: AsyncSession):
    """Server-side UUID expression, for INSERT ... SELECT where ids can't be bound per row"""
    if db.get_bind().dialect.name == "sqlite":
        # Uuid is stored as 32 hex chars on SQLite
        return func.lower(func.hex(func.randomblob(16)))
    return func.gen_random_uuid()


async def health_check_db():
    """Fast health check"""
    if engine is None:
        return False
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
            return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False
