"""
Campus Roster Backend — Database Session Management
====================================================

What:  Engine, per-request session dependency and lifecycle helpers for the roster store.
How:   One pooled async engine built from Settings; each request gets a session
       that commits when the handler returns and rolls back when it raises.
Who:   Collection routes (via Depends), the readiness probe and the lifespan.
When:  Engine at import time, sessions per request.

Connection Pooling Strategy:
    pool_size=10:     Persistent connections (DB_POOL_SIZE)
    max_overflow=0:   No burst connections beyond the pool (DB_MAX_OVERFLOW)
    pool_timeout=30:  Bounded wait for a free connection (DB_POOL_TIMEOUT)
    pool_pre_ping:    Validates connections before use
    pool_recycle=3600: Recycles connections every hour

    SQLite URLs (used by the test suite) get none of the pool options;
    SQLAlchemy picks a pool suited to the file or memory database itself.

Transaction Scope:
    One session per request. Writes are committed by RosterService before
    the handler returns, because FastAPI runs the code after `yield` in
    get_db_session only once the response has been sent. A client that
    receives 200 for a create or delete can immediately build on it.
    A delete plus its compaction updates, or an id lookup plus its insert,
    lands together or not at all.
"""

import logging
import ssl
from typing import Any, AsyncGenerator, Dict, Optional

from sqlalchemy import text
from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from roster.config import Settings, settings

logger = logging.getLogger(__name__)


def build_engine_options(config: Settings) -> Dict[str, Any]:
    """
    What:  Keyword arguments for create_async_engine derived from settings.
    How:   Pool options for server databases, an unverified SSL context when
           DB_SSL is enabled, SQL echo when running at DEBUG level.
    """
    url: URL = config.sqlalchemy_url
    options: Dict[str, Any] = {"echo": config.log_level == "DEBUG"}

    if url.get_backend_name() == "sqlite":
        # In-memory SQLite gets StaticPool, which rejects pool sizing arguments
        return options

    # What: A bounded pool; a request waits at most pool_timeout for a connection
    # How:  max_overflow=0 caps concurrent store work at pool_size. pre_ping and
    #       the hourly recycle replace connections the server or a proxy dropped.
    options.update(
        pool_size=config.db_pool_size,
        max_overflow=config.db_max_overflow,
        pool_timeout=config.db_pool_timeout,
        pool_pre_ping=config.db_pool_pre_ping,
        pool_recycle=3600,
    )

    if config.db_ssl:
        # Encrypted but unverified: managed databases often present a
        # certificate that is not in the local trust store.
        ssl_context = ssl.create_default_context()
        ssl_context.check_hostname = False
        ssl_context.verify_mode = ssl.CERT_NONE
        options["connect_args"] = {"ssl": ssl_context}

    return options


# ── Engine Configuration ──────────────────────────────────────────────────
engine: AsyncEngine = create_async_engine(
    settings.sqlalchemy_url,
    **build_engine_options(settings),
)

# ── Session Factory ───────────────────────────────────────────────────────
# expire_on_commit=False: services commit before building the response, and
# the committed rows must stay readable without another round trip
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Base Model ────────────────────────────────────────────────────────────
class Base(DeclarativeBase):
    """
    Declarative base shared by the student and teacher tables.

    Every collection table registers with this metadata; the test suite uses
    `Base.metadata.create_all` to build a throwaway schema.
    """
    pass


# ── Session Dependency ────────────────────────────────────────────────────
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that provides a database session per request.

    How it works:
        1. Opens a session from async_session_factory
        2. Hands it to the route, which runs the service calls
        3. On success: commits anything still pending (a no-op after a
           service commit; this runs after the response is sent)
        4. On error: rolls back the transaction
        5. Always: closes the session so the connection goes back to the pool

    Example usage in a route:
        @router.get("/student")
        async def list_students(db: AsyncSession = Depends(get_db_session)):
            return await student_service.list_entities(db)
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def ping_database(bind: Optional[AsyncEngine] = None) -> None:
    """
    What:  Round-trips `SELECT 1` through a pooled connection.
    When:  Once at startup (fail fast) and from the readiness probe.
    Raises whatever the driver raises; callers decide how to report it.
    """
    target = bind if bind is not None else engine
    async with target.connect() as conn:
        await conn.execute(text("SELECT 1"))


async def dispose_engine() -> None:
    """
    What:  Closes every pooled connection.
    When:  Lifespan shutdown.
    """
    await engine.dispose()
    logger.info("Database connection pool closed")
