"""Database session provisioning.

Provides tenant-bound async sessions with proper transaction management and
connection pooling. Sessions are created per request and bound to that
request's tenant context accessor.
"""

from __future__ import annotations

import threading
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from infrastructure.database.engines import create_write_engine
from infrastructure.database.tenant_session import bind_tenant_to_session
from infrastructure.observability import DefaultConnectionProbe
from infrastructure.settings import get_database_settings
from shared_kernel.tenancy import TenantContextAccessor

# Module-level probe for observability
_probe = DefaultConnectionProbe()

# Module-level engine instance (created on first use)
_write_engine: AsyncEngine | None = None

# Module-level sessionmaker instance (created with the engine)
_write_sessionmaker: async_sessionmaker[AsyncSession] | None = None

# Thread lock for safe engine initialization
_engine_lock = threading.Lock()


def get_write_engine() -> AsyncEngine:
    """Get the database engine (singleton).

    Creates engine on first call and caches for subsequent calls.
    Uses double-check locking for thread-safe initialization.
    Also creates and caches the sessionmaker for efficient session creation.

    Returns:
        Configured async engine
    """
    global _write_engine, _write_sessionmaker
    if _write_engine is None:
        with _engine_lock:
            # Double-check after acquiring lock
            if _write_engine is None:
                settings = get_database_settings()
                _write_engine = create_write_engine(settings)
                _write_sessionmaker = async_sessionmaker(
                    _write_engine,
                    expire_on_commit=False,
                    class_=AsyncSession,
                )
                _probe.pool_initialized(
                    host=settings.host,
                    database=settings.database,
                    max_conn=settings.pool_max_connections,
                )
    return _write_engine


def get_write_sessionmaker() -> async_sessionmaker[AsyncSession]:
    """Get the sessionmaker of the shared engine, creating both on first use."""
    get_write_engine()
    assert _write_sessionmaker is not None
    return _write_sessionmaker


async def get_write_session(
    accessor: TenantContextAccessor,
) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session bound to the request's tenant.

    The session is configured to NOT auto-commit. Callers must explicitly
    manage transactions using `async with session.begin()`. Every
    transaction the session opens first sets the PostgreSQL tenant setting
    read by the row-level security policies.

    Usage:
        async for session in get_write_session(accessor):
            service = CoopService(session, CoopRepository(session, accessor), accessor)
            result = await service.create_coop(name="North coop")

    Args:
        accessor: Tenant context accessor for the current request

    Yields:
        AsyncSession for database operations
    """
    async with get_write_sessionmaker()() as session:
        bind_tenant_to_session(session, accessor)
        yield session


async def close_database_connections() -> None:
    """Close the database engine's connections.

    Should be called on application shutdown to properly cleanup connections.
    Also resets the sessionmaker to allow reinitialization.
    """
    global _write_engine, _write_sessionmaker

    if _write_engine is not None:
        await _write_engine.dispose()
        _probe.pool_closed()
        _write_engine = None
        _write_sessionmaker = None
