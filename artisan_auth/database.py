"""
Engine, session factory and declarative base for the account store.

DATABASE_URL selects the backend; tests and local runs use
sqlite+aiosqlite, and the tables are created by the app lifespan.

AccountRepository commits its own writes, so get_db() only has to close
out whatever a request left behind: commit on success, roll back if the
request raised.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from artisan_auth.config import settings


engine = create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG)

# Accounts are serialised after the commit that created them
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def get_db():
    """Yield one session per request."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
