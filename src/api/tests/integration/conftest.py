"""Integration test fixtures for database tests.

These fixtures require a running PostgreSQL instance migrated to head
(``alembic upgrade head``), reached through a role that is neither the
table owner nor a superuser, so that row-level security applies.

Each test provisions fresh tenants. Rows are left behind because flock
history cannot be deleted, so point these tests at a disposable database.
"""

from collections.abc import AsyncGenerator, Callable
import os

import pytest
import pytest_asyncio
from pydantic import SecretStr
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from iam.application.services import TenantService
from iam.domain.value_objects import TenantId
from iam.infrastructure.tenant_repository import TenantRepository
from infrastructure.database.engines import create_write_engine
from infrastructure.database.tenant_session import bind_tenant_to_session
from infrastructure.settings import DatabaseSettings
from shared_kernel.tenancy import RequestTenantContextAccessor, TenantContextAccessor
from ulid import ULID


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (requires database)",
    )


@pytest.fixture(scope="session")
def integration_db_settings() -> DatabaseSettings:
    """Database settings for integration tests.

    Override with environment variables:
        HENHOUSE_DB_HOST, HENHOUSE_DB_PORT, etc.
    """
    return DatabaseSettings(
        host=os.getenv("HENHOUSE_DB_HOST", "localhost"),
        port=int(os.getenv("HENHOUSE_DB_PORT", "5432")),
        database=os.getenv("HENHOUSE_DB_DATABASE", "henhouse"),
        username=os.getenv("HENHOUSE_DB_USERNAME", "henhouse_app"),
        password=SecretStr(os.getenv("HENHOUSE_DB_PASSWORD", "henhouse_dev_password")),
        pool_min_connections=1,
        pool_max_connections=5,
    )


@pytest_asyncio.fixture
async def engine(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[AsyncEngine, None]:
    engine = create_write_engine(integration_db_settings)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_for(
    engine: AsyncEngine,
) -> Callable[[TenantContextAccessor], AsyncSession]:
    """Factory for sessions bound to a given accessor.

    Sessions are closed by the caller, usually with ``async with``.
    """
    factory = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    def build(accessor: TenantContextAccessor) -> AsyncSession:
        session = factory()
        bind_tenant_to_session(session, accessor)
        return session

    return build


@pytest.fixture
def provision_tenant(session_for):
    """Create a tenant for a fresh identity and return an accessor for it."""

    async def provision() -> RequestTenantContextAccessor:
        external_user_id = f"it|{ULID()}"
        async with session_for(RequestTenantContextAccessor.anonymous()) as session:
            result = await TenantService(
                TenantRepository(session), session
            ).sync_tenant(external_user_id, f"{external_user_id}@example.com")
        tenant_id: TenantId = result.value.id
        return RequestTenantContextAccessor.for_tenant(
            tenant_id, user_id=external_user_id
        )

    return provision
