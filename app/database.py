from typing import AsyncGenerator, Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.config import Settings


def create_engine(settings: Settings):
    """Create async SQLAlchemy engine from settings.

    SQLite URLs (local runs, tests) get a single shared connection instead of
    the PostgreSQL pool sizing.
    """
    if settings.DATABASE_URL.startswith("sqlite"):
        return create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG, poolclass=StaticPool)
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        pool_size=5,
        max_overflow=10,
    )


def create_session_factory(engine) -> async_sessionmaker[AsyncSession]:
    """Create async session factory bound to the engine."""
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def session_dependency(
    get_factory: Callable[[], async_sessionmaker[AsyncSession]],
) -> Callable[[], AsyncGenerator[AsyncSession, None]]:
    """Build the per-request session dependency.

    One session per request: committed when the handler returns, rolled back
    if it raises. `get_factory` is resolved lazily because the factory only
    exists once the lifespan has started.
    """

    async def get_session() -> AsyncGenerator[AsyncSession, None]:
        async with get_factory()() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    return get_session
