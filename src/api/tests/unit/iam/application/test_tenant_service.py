"""Unit tests for TenantService."""

from unittest.mock import create_autospec

import pytest

from iam.application.observability import TenantServiceProbe
from iam.application.services import TenantService
from iam.domain.aggregates import Tenant
from iam.ports.repositories import ITenantRepository
from shared_kernel.result import GENERIC_FAILURE_MESSAGE, ErrorKind


@pytest.fixture
def mock_tenant_repo():
    return create_autospec(ITenantRepository, instance=True)


@pytest.fixture
def mock_probe():
    return create_autospec(TenantServiceProbe, instance=True)


@pytest.fixture
def tenant_service(mock_tenant_repo, mock_session, mock_probe):
    return TenantService(
        tenant_repository=mock_tenant_repo,
        session=mock_session,
        probe=mock_probe,
    )


class TestSyncTenant:
    @pytest.mark.asyncio
    async def test_first_sync_creates_tenant(
        self, tenant_service, mock_tenant_repo, mock_probe
    ):
        mock_tenant_repo.get_by_external_user_id.return_value = None

        result = await tenant_service.sync_tenant("auth0|abc", "k@example.com")

        tenant = result.value
        assert tenant.external_user_id == "auth0|abc"
        mock_tenant_repo.add.assert_awaited_once_with(tenant)
        mock_tenant_repo.save.assert_not_called()
        mock_probe.tenant_created.assert_called_once_with(
            tenant.id.value, "auth0|abc"
        )

    @pytest.mark.asyncio
    async def test_changed_email_is_updated(
        self, tenant_service, mock_tenant_repo, mock_probe
    ):
        existing = Tenant.create(external_user_id="auth0|abc", email="old@example.com")
        mock_tenant_repo.get_by_external_user_id.return_value = existing

        result = await tenant_service.sync_tenant("auth0|abc", "new@example.com")

        assert result.value.id == existing.id
        assert result.value.email == "new@example.com"
        mock_tenant_repo.save.assert_awaited_once_with(existing)
        mock_probe.tenant_email_updated.assert_called_once_with(existing.id.value)

    @pytest.mark.asyncio
    async def test_unchanged_tenant_is_not_written(
        self, tenant_service, mock_tenant_repo, mock_probe
    ):
        existing = Tenant.create(external_user_id="auth0|abc", email="k@example.com")
        mock_tenant_repo.get_by_external_user_id.return_value = existing

        result = await tenant_service.sync_tenant("auth0|abc", "k@example.com")

        assert result.value is existing
        mock_tenant_repo.add.assert_not_called()
        mock_tenant_repo.save.assert_not_called()
        mock_probe.tenant_created.assert_not_called()
        mock_probe.tenant_email_updated.assert_not_called()

    @pytest.mark.asyncio
    async def test_invalid_email_is_a_validation_error(
        self, tenant_service, mock_tenant_repo, mock_probe
    ):
        mock_tenant_repo.get_by_external_user_id.return_value = None

        result = await tenant_service.sync_tenant("auth0|abc", "no-at-sign")

        assert result.error.kind == ErrorKind.VALIDATION
        assert result.error.field == "email"
        mock_tenant_repo.add.assert_not_called()
        mock_probe.tenant_sync_rejected.assert_called_once_with("auth0|abc", "email")

    @pytest.mark.asyncio
    async def test_repository_error_is_a_generic_failure(
        self, tenant_service, mock_tenant_repo, mock_probe
    ):
        error = RuntimeError("relation tenants does not exist")
        mock_tenant_repo.get_by_external_user_id.side_effect = error

        result = await tenant_service.sync_tenant("auth0|abc", "k@example.com")

        assert result.error.kind == ErrorKind.FAILURE
        assert result.error.message == GENERIC_FAILURE_MESSAGE
        mock_probe.tenant_sync_failed.assert_called_once_with("auth0|abc", error)
