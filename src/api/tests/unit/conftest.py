"""Unit test fixtures with mocked dependencies."""

from unittest.mock import AsyncMock, MagicMock, Mock

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from shared_kernel.tenancy import RequestTenantContextAccessor, TenantId


@pytest.fixture
def mock_db_settings():
    """Provide test database settings."""
    from infrastructure.settings import DatabaseSettings

    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password="testpass",
    )


@pytest.fixture
def tenant_id() -> TenantId:
    """The tenant the current request acts for."""
    return TenantId.generate()


@pytest.fixture
def other_tenant_id() -> TenantId:
    """A second tenant whose data must stay invisible."""
    return TenantId.generate()


@pytest.fixture
def accessor(tenant_id) -> RequestTenantContextAccessor:
    """Accessor for an authenticated caller with a resolved tenant."""
    return RequestTenantContextAccessor.for_tenant(tenant_id, user_id="user_123")


@pytest.fixture
def anonymous_accessor() -> RequestTenantContextAccessor:
    return RequestTenantContextAccessor.anonymous()


@pytest.fixture
def unprovisioned_accessor() -> RequestTenantContextAccessor:
    """Accessor for an authenticated caller that has no tenant yet."""
    return RequestTenantContextAccessor(user_id="user_456")


@pytest.fixture
def mock_session():
    """Mock AsyncSession whose begin() works as an async context manager."""
    session = Mock(spec=AsyncSession)

    ctx_manager = MagicMock()
    ctx_manager.__aenter__ = AsyncMock(return_value=None)
    ctx_manager.__aexit__ = AsyncMock(return_value=None)

    session.begin = Mock(return_value=ctx_manager)
    return session


@pytest.fixture
def repo_session():
    """Mock AsyncSession for repository tests.

    execute, flush and delete are awaitable; add is synchronous like the
    real AsyncSession.add.
    """
    session = MagicMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.delete = AsyncMock()
    return session


@pytest.fixture
def scalar_result():
    """Builder for a mock execute() result read with scalar_one_or_none or scalar."""

    def build(value):
        result = MagicMock()
        result.scalar_one_or_none.return_value = value
        result.scalar.return_value = value
        return result

    return build


@pytest.fixture
def scalars_result():
    """Builder for a mock execute() result read with scalars().all()."""

    def build(values):
        result = MagicMock()
        result.scalars.return_value.all.return_value = list(values)
        return result

    return build


@pytest.fixture
def compile_stmt():
    """Compile a statement for PostgreSQL, returning (sql, params)."""
    from sqlalchemy.dialects import postgresql

    def build(stmt):
        compiled = stmt.compile(dialect=postgresql.dialect())
        return str(compiled), compiled.params

    return build
