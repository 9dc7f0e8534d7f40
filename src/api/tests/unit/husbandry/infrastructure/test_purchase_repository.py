"""Unit tests for PurchaseRepository."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from husbandry.domain.aggregates import Purchase
from husbandry.domain.value_objects import CoopId, PurchaseType, QuantityUnit
from husbandry.infrastructure.models import PurchaseModel
from husbandry.infrastructure.purchase_repository import PurchaseRepository
from husbandry.ports.repositories import IPurchaseRepository


@pytest.fixture
def repository(repo_session, accessor):
    return PurchaseRepository(
        repo_session, accessor, probe=MagicMock(), max_search_limit=20
    )


def _purchase(tenant_id, coop_id=None) -> Purchase:
    return Purchase.create(
        tenant_id=tenant_id,
        name="Layer pellets",
        purchase_type=PurchaseType.FEED,
        amount=Decimal("24.90"),
        quantity=Decimal("25"),
        unit=QuantityUnit.KG,
        purchase_date=datetime(2024, 4, 2, 15, 0, tzinfo=UTC),
        coop_id=coop_id,
    )


def test_implements_protocol(repository):
    assert isinstance(repository, IPurchaseRepository)


@pytest.mark.asyncio
async def test_add_maps_enums_and_optional_coop(repository, repo_session, tenant_id):
    purchase = _purchase(tenant_id)

    await repository.add(purchase)

    model = repo_session.add.call_args[0][0]
    assert isinstance(model, PurchaseModel)
    assert model.tenant_id == tenant_id.value
    assert model.coop_id is None
    assert model.purchase_type == "feed"
    assert model.unit == "kg"
    assert model.amount == Decimal("24.90")
    assert model.created_at == purchase.created_at


@pytest.mark.asyncio
async def test_round_trip_through_row(
    repository, repo_session, tenant_id, scalar_result
):
    coop_id = CoopId.generate()
    purchase = _purchase(tenant_id, coop_id=coop_id)
    await repository.add(purchase)
    row = repo_session.add.call_args[0][0]
    repo_session.execute.return_value = scalar_result(row)

    loaded = await repository.get_by_id(purchase.id)

    assert loaded is not None
    assert loaded.coop_id == coop_id
    assert loaded.purchase_type is PurchaseType.FEED
    assert loaded.unit is QuantityUnit.KG
    assert loaded.purchase_date == purchase.purchase_date


@pytest.mark.asyncio
async def test_list_all_combines_filters(
    repository, repo_session, tenant_id, scalars_result, compile_stmt
):
    repo_session.execute.return_value = scalars_result([])
    coop_id = CoopId.generate()

    await repository.list_all(
        from_date=datetime(2024, 4, 1, 9, 0, tzinfo=UTC),
        to_date=datetime(2024, 4, 30, tzinfo=UTC),
        purchase_type=PurchaseType.BEDDING,
        coop_id=coop_id,
    )

    sql, params = compile_stmt(repo_session.execute.call_args[0][0])
    assert "purchases.tenant_id = " in sql
    assert "purchases.purchase_type = " in sql
    assert "ORDER BY purchases.purchase_date DESC" in sql
    assert "bedding" in params.values()
    assert coop_id.value in params.values()
    assert datetime(2024, 4, 1, tzinfo=UTC) in params.values()
    assert tenant_id.value in params.values()


@pytest.mark.asyncio
async def test_search_limit_is_clamped(
    repository, repo_session, scalars_result, compile_stmt
):
    repo_session.execute.return_value = scalars_result(["Layer pellets"])

    assert await repository.search_names("layer", limit=1000) == ["Layer pellets"]

    _, params = compile_stmt(repo_session.execute.call_args[0][0])
    assert 20 in params.values()
    assert 1000 not in params.values()
