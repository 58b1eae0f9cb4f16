from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings

# Upper bounds of the BIGINT id and INT quantity columns
BIGINT_MAX = 2**63 - 1
INT_MAX = 2**31 - 1


class Base(DeclarativeBase):
    """Shared declarative base for the ORM mappings of users, products and orders."""

    pass


engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one AsyncSession per request, closed afterwards.

    Mutating services own commit/rollback; a session that reaches the end of
    the request without commit is rolled back by close().
    """
    async with async_session_factory() as session:
        yield session
