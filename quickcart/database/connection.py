import logging

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from quickcart.config.settings import Settings
from quickcart.database.base import Base
from quickcart.shared.utils import LOG_LEVEL, get_logger

logger = get_logger(__name__)


def create_engine(settings: Settings) -> AsyncEngine:
    """Build the async engine for DATABASE_URL"""
    database_url = settings.DATABASE_URL
    if not database_url:
        raise ValueError("DATABASE_URL is not set in environment variables.")

    if database_url.startswith("sqlite"):
        # A single shared connection keeps in-memory databases alive across sessions
        return create_async_engine(
            database_url,
            echo=LOG_LEVEL == logging.DEBUG,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_async_engine(
        database_url,
        echo=LOG_LEVEL == logging.DEBUG,
        # Connection pool settings
        pool_size=settings.DB_POOL_SIZE,  # Number of permanent connections
        max_overflow=settings.DB_MAX_OVERFLOW,  # Additional connections that can be created
        pool_timeout=settings.DB_POOL_TIMEOUT,  # Seconds to wait for connection from pool
        pool_recycle=settings.DB_POOL_RECYCLE,  # Recycle connections after N seconds
        pool_pre_ping=True,  # Validate connections before using them
        # asyncpg-specific settings
        connect_args={
            "command_timeout": settings.DB_QUERY_TIMEOUT,
            "server_settings": {"application_name": "quickcart_api"},
        },
    )


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def init_models(engine: AsyncEngine) -> None:
    """Create any missing tables"""
    # Registers every model on Base.metadata
    import quickcart.database.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables are in place")
