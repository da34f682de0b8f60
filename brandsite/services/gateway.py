"""Single entry point for every database call made by the content layer."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Iterable, Optional, TypeVar

from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from brandsite.config import Settings
from brandsite.core.exceptions import ConstraintError, TransientError
from brandsite.database import build_engine, build_session_factory
from brandsite.services.realtime import ANY_EVENT, ChangeFeed, Subscription
from brandsite.services.retry import RetryOptions, Sleep, with_retry

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Pool checkout timeouts, dropped connections and client-side timeouts
_TRANSIENT_TYPES = (
    sa_exc.DisconnectionError,
    sa_exc.TimeoutError,
    ConnectionError,
    asyncio.TimeoutError,
    TimeoutError,
)

# Postgres SQLSTATEs: class 08 is "connection exception"; the rest are
# shutdown, cannot-connect-now, statement cancel, serialization and deadlock.
_TRANSIENT_SQLSTATE_CLASSES = ("08",)
_TRANSIENT_SQLSTATES = {"57P01", "57P02", "57P03", "57014", "40001", "40P01"}

# SQLite reports a busy writer as an OperationalError
_TRANSIENT_MESSAGES = ("database is locked",)


def _sqlstate(orig: BaseException) -> str:
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is None and orig.__cause__ is not None:
        code = getattr(orig.__cause__, "sqlstate", None)
    return code or ""


def is_transient(error: BaseException) -> bool:
    """True only for failures that may succeed if the same call is repeated."""
    if isinstance(error, _TRANSIENT_TYPES):
        return True
    if not isinstance(error, sa_exc.DBAPIError):
        return False
    if error.connection_invalidated:
        return True
    orig = error.orig
    if orig is None:
        return False
    if isinstance(orig, (ConnectionError, TimeoutError, asyncio.TimeoutError)):
        return True
    code = _sqlstate(orig)
    if code[:2] in _TRANSIENT_SQLSTATE_CLASSES or code in _TRANSIENT_SQLSTATES:
        return True
    message = str(orig).lower()
    return any(text in message for text in _TRANSIENT_MESSAGES)


def classify_error(error: BaseException) -> BaseException:
    """
    Translate driver/ORM failures into the content error taxonomy.

    Connection and timeout failures become TransientError, integrity
    violations become ConstraintError with the driver message kept.
    Anything else, including a deterministic OperationalError such as a
    missing table, is returned unchanged and never retried.
    """
    if isinstance(error, (TransientError, ConstraintError)):
        return error
    if isinstance(error, sa_exc.IntegrityError):
        return ConstraintError(str(error.orig) if error.orig is not None else str(error))
    if is_transient(error):
        return TransientError(str(error) or type(error).__name__)
    return error


class DataGateway:
    """
    Wraps the engine, the session factory and the change feed.

    Build one per process with ``DataGateway.from_settings`` and hand it to
    every consumer; call ``close()`` on shutdown.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        *,
        retry: Optional[RetryOptions] = None,
        feed: Optional[ChangeFeed] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.engine = engine
        self.feed = feed or ChangeFeed()
        self.retry = retry or RetryOptions()
        self._sleep = sleep
        self._session_factory: async_sessionmaker = build_session_factory(
            engine, change_feed=self.feed
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "DataGateway":
        return cls(
            build_engine(settings),
            retry=RetryOptions(
                max_retries=settings.RETRY_MAX_RETRIES,
                base_delay_ms=settings.RETRY_BASE_DELAY_MS,
                jitter=settings.RETRY_JITTER,
            ),
        )

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """Fresh session; closing it rolls back anything left uncommitted."""
        async with self._session_factory() as session:
            yield session

    async def run(
        self,
        fn: Callable[[AsyncSession], Awaitable[T]],
        *,
        idempotent: bool = True,
        options: Optional[RetryOptions] = None,
    ) -> T:
        """
        Run `fn` with a fresh session per attempt.

        Idempotent operations go through the retry policy; anything else
        (inserts) is attempted exactly once.
        """
        async def attempt() -> T:
            try:
                async with self.session() as session:
                    return await fn(session)
            except Exception as e:
                translated = classify_error(e)
                if translated is e:
                    raise
                raise translated from e

        if not idempotent:
            return await attempt()
        return await with_retry(attempt, options or self.retry, sleep=self._sleep)

    def subscribe(
        self,
        channel_id: str,
        table_names: Iterable[str],
        on_change: Callable[[], None],
        event: str = ANY_EVENT,
    ) -> Subscription:
        """Open a change subscription; the caller must release() it."""
        return self.feed.subscribe(channel_id, table_names, on_change, event)

    async def close(self) -> None:
        self.feed.close()
        await self.engine.dispose()
        logger.info("Data gateway closed")
