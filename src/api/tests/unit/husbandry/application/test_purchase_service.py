"""Unit tests for PurchaseService."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import create_autospec

import pytest

from husbandry.application.services import PurchaseService
from husbandry.domain.aggregates import Coop, Purchase
from husbandry.domain.value_objects import (
    CoopId,
    PurchaseId,
    PurchaseType,
    QuantityUnit,
)
from husbandry.ports.repositories import ICoopRepository, IPurchaseRepository
from shared_kernel.result import ErrorKind

BOUGHT = datetime(2024, 4, 2, tzinfo=UTC)


@pytest.fixture
def mock_purchase_repository():
    return create_autospec(IPurchaseRepository, instance=True)


@pytest.fixture
def mock_coop_repository():
    return create_autospec(ICoopRepository, instance=True)


@pytest.fixture
def service(mock_session, mock_purchase_repository, mock_coop_repository, accessor):
    return PurchaseService(
        session=mock_session,
        purchase_repository=mock_purchase_repository,
        coop_repository=mock_coop_repository,
        accessor=accessor,
    )


def _fields(**overrides):
    fields = {
        "name": "Layer pellets",
        "purchase_type": PurchaseType.FEED,
        "amount": Decimal("24.90"),
        "quantity": Decimal("25"),
        "unit": QuantityUnit.KG,
        "purchase_date": BOUGHT,
    }
    fields.update(overrides)
    return fields


class TestCreatePurchase:
    @pytest.mark.asyncio
    async def test_purchase_without_coop(
        self, service, mock_purchase_repository, mock_coop_repository, tenant_id
    ):
        result = await service.create_purchase(**_fields())

        assert result.is_success
        assert result.value.coop_id is None
        assert result.value.tenant_id == tenant_id
        mock_coop_repository.get_by_id.assert_not_called()
        mock_purchase_repository.add.assert_awaited_once_with(result.value)

    @pytest.mark.asyncio
    async def test_purchase_for_visible_coop(
        self, service, mock_coop_repository, tenant_id
    ):
        coop = Coop.create(tenant_id=tenant_id, name="Main coop")
        mock_coop_repository.get_by_id.return_value = coop

        result = await service.create_purchase(**_fields(coop_id=coop.id))

        assert result.value.coop_id == coop.id

    @pytest.mark.asyncio
    async def test_invisible_coop_is_not_found(
        self, service, mock_coop_repository, mock_purchase_repository
    ):
        mock_coop_repository.get_by_id.return_value = None

        result = await service.create_purchase(**_fields(coop_id=CoopId.generate()))

        assert result.error.code == "coop.not_found"
        mock_purchase_repository.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_consumed_before_purchase_is_rejected(self, service):
        result = await service.create_purchase(
            **_fields(consumed_date=datetime(2024, 4, 1, tzinfo=UTC))
        )

        assert result.error.kind == ErrorKind.VALIDATION
        assert result.error.field == "consumed_date"

    @pytest.mark.asyncio
    async def test_zero_quantity_is_rejected(self, service):
        result = await service.create_purchase(**_fields(quantity=Decimal("0")))

        assert result.error.field == "quantity"


class TestUpdatePurchase:
    @pytest.mark.asyncio
    async def test_missing_purchase_is_not_found(
        self, service, mock_purchase_repository
    ):
        mock_purchase_repository.get_by_id.return_value = None

        result = await service.update_purchase(PurchaseId.generate(), **_fields())

        assert result.error.code == "purchase.not_found"

    @pytest.mark.asyncio
    async def test_replaces_fields(self, service, mock_purchase_repository, tenant_id):
        purchase = Purchase.create(tenant_id=tenant_id, **_fields())
        mock_purchase_repository.get_by_id.return_value = purchase

        result = await service.update_purchase(
            purchase.id,
            **_fields(
                name="Straw",
                purchase_type=PurchaseType.BEDDING,
                unit=QuantityUnit.PACKAGE,
                consumed_date=datetime(2024, 4, 20, tzinfo=UTC),
            ),
        )

        assert result.value.name == "Straw"
        assert result.value.purchase_type is PurchaseType.BEDDING
        assert result.value.is_consumed
        mock_purchase_repository.save.assert_awaited_once_with(purchase)


class TestDeleteAndQueries:
    @pytest.mark.asyncio
    async def test_delete(self, service, mock_purchase_repository, tenant_id):
        purchase = Purchase.create(tenant_id=tenant_id, **_fields())
        mock_purchase_repository.get_by_id.return_value = purchase

        result = await service.delete_purchase(purchase.id)

        assert result.is_success
        mock_purchase_repository.delete.assert_awaited_once_with(purchase)

    @pytest.mark.asyncio
    async def test_list_filters(self, service, mock_purchase_repository):
        mock_purchase_repository.list_all.return_value = []

        await service.list_purchases(purchase_type=PurchaseType.VETERINARY)

        mock_purchase_repository.list_all.assert_awaited_once_with(
            from_date=None,
            to_date=None,
            purchase_type=PurchaseType.VETERINARY,
            coop_id=None,
        )

    @pytest.mark.asyncio
    async def test_search_failure_is_generic(
        self, service, mock_purchase_repository
    ):
        mock_purchase_repository.search_names.side_effect = RuntimeError("boom")

        result = await service.search_purchase_names("lay", limit=5)

        assert result.error.kind == ErrorKind.FAILURE
        assert "boom" not in result.error.message
