"""
Database configuration and session management.
Uses SQLAlchemy async engine (PostgreSQL via asyncpg in production).
"""
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker

from app.config import settings
from app.models.base import Base

# Pool sizing only applies to server databases
_engine_options = {}
if not settings.database_url.startswith("sqlite"):
    _engine_options = {"pool_size": 10, "max_overflow": 20}

# Create async engine
engine = create_async_engine(
    settings.database_url,
    echo=False,  # Disable SQLAlchemy query logging
    future=True,
    pool_pre_ping=True,
    **_engine_options,
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncSession:
    """
    Dependency for FastAPI routes to get database session.
    Usage: db: AsyncSession = Depends(get_db)
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db():
    """
    Initialize database: create tables.
    Called on application startup.
    """
    from app.models.property import Property  # noqa: F401 - registers the table

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
