"""Unit tests for TenantRepository."""

from datetime import UTC, datetime
from unittest.mock import MagicMock

import pytest

from iam.domain.aggregates import Tenant
from iam.domain.value_objects import TenantId
from iam.infrastructure.models import TenantModel
from iam.infrastructure.tenant_repository import TenantRepository
from iam.ports.repositories import ITenantRepository
from infrastructure.database.tenant_session import EXTERNAL_USER_SETTING


@pytest.fixture
def probe():
    return MagicMock()


@pytest.fixture
def repository(repo_session, probe):
    return TenantRepository(repo_session, probe=probe)


def _model(**overrides) -> TenantModel:
    now = datetime(2024, 1, 1, tzinfo=UTC)
    values = {
        "id": TenantId.generate().value,
        "external_user_id": "auth0|abc",
        "email": "keeper@example.com",
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return TenantModel(**values)


def test_implements_protocol(repository):
    assert isinstance(repository, ITenantRepository)


class TestGetByExternalUserId:
    @pytest.mark.asyncio
    async def test_sets_identity_setting_before_lookup(
        self, repository, repo_session, scalar_result
    ):
        model = _model()
        repo_session.execute.side_effect = [MagicMock(), scalar_result(model)]

        tenant = await repository.get_by_external_user_id("auth0|abc")

        assert tenant is not None
        assert tenant.id.value == model.id
        set_config_call = repo_session.execute.call_args_list[0]
        assert "set_config" in str(set_config_call.args[0])
        assert set_config_call.args[1] == {
            "name": EXTERNAL_USER_SETTING,
            "value": "auth0|abc",
        }

    @pytest.mark.asyncio
    async def test_unknown_identity_returns_none(
        self, repository, repo_session, scalar_result, probe
    ):
        repo_session.execute.side_effect = [MagicMock(), scalar_result(None)]

        assert await repository.get_by_external_user_id("auth0|nobody") is None
        probe.tenant_not_visible.assert_called_once_with("auth0|nobody")


class TestWrites:
    @pytest.mark.asyncio
    async def test_add_exposes_identity_then_inserts(
        self, repository, repo_session, probe
    ):
        tenant = Tenant.create(external_user_id="auth0|abc", email="k@example.com")

        await repository.add(tenant)

        assert repo_session.execute.call_args.args[1]["value"] == "auth0|abc"
        added = repo_session.add.call_args.args[0]
        assert isinstance(added, TenantModel)
        assert added.id == tenant.id.value
        assert added.email == "k@example.com"
        repo_session.flush.assert_awaited_once()
        probe.identity_exposed.assert_called_once_with("auth0|abc")
        probe.tenant_inserted.assert_called_once_with(tenant.id.value)

    @pytest.mark.asyncio
    async def test_save_updates_email(
        self, repository, repo_session, scalar_result, probe
    ):
        tenant = Tenant.create(external_user_id="auth0|abc", email="k@example.com")
        model = _model(id=tenant.id.value)
        repo_session.execute.return_value = scalar_result(model)

        tenant.update_email("new@example.com")
        await repository.save(tenant)

        assert model.email == "new@example.com"
        assert model.updated_at == tenant.updated_at
        probe.tenant_email_updated.assert_called_once_with(tenant.id.value)

    @pytest.mark.asyncio
    async def test_save_missing_tenant_raises(
        self, repository, repo_session, scalar_result
    ):
        repo_session.execute.return_value = scalar_result(None)

        with pytest.raises(ValueError):
            await repository.save(
                Tenant.create(external_user_id="auth0|abc", email="k@example.com")
            )
