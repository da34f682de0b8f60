from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Session, declarative_base

from .config import Settings

# Base class for models
Base = declarative_base()


class ContentSession(Session):
    """Sync session class behind every AsyncSession.

    Change-tracking listeners are registered on this class only, so plain
    sessions created elsewhere are never observed.
    """


def build_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine for the configured database."""
    return create_async_engine(
        settings.DATABASE_URL,
        echo=settings.DEBUG,
        pool_pre_ping=True,
    )


def build_session_factory(engine: AsyncEngine, **info) -> async_sessionmaker:
    """Session factory bound to `engine`; `info` is copied onto every session."""
    return async_sessionmaker(
        engine,
        sync_session_class=ContentSession,
        expire_on_commit=False,
        autoflush=False,
        info=info,
    )
