"""PostgreSQL implementation of IPurchaseRepository."""

from __future__ import annotations

from datetime import datetime

from husbandry.domain.aggregates import Purchase
from husbandry.domain.value_objects import (
    CoopId,
    PurchaseId,
    PurchaseType,
    QuantityUnit,
)
from husbandry.infrastructure.models import PurchaseModel
from husbandry.infrastructure.tenant_scoped import TenantScopedRepository
from husbandry.ports.repositories import DEFAULT_SEARCH_LIMIT, IPurchaseRepository
from shared_kernel.tenancy import TenantId
from shared_kernel.validation import to_utc_day


class PurchaseRepository(TenantScopedRepository, IPurchaseRepository):
    """Repository managing PostgreSQL storage for Purchase aggregates."""

    _model = PurchaseModel
    _aggregate = "purchase"

    async def get_by_id(self, purchase_id: PurchaseId) -> Purchase | None:
        model = await self._get_model(purchase_id.value, "get_by_id")
        if model is None:
            return None

        self._probe.aggregate_retrieved(self._aggregate, model.id)
        return self._to_domain(model)

    async def list_all(
        self,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
        purchase_type: PurchaseType | None = None,
        coop_id: CoopId | None = None,
    ) -> list[Purchase]:
        """List purchases of the current tenant, newest purchase date first.

        Date bounds are inclusive and compared by UTC calendar day.
        """
        stmt = self._scoped_select("list_all")
        if from_date is not None:
            stmt = stmt.where(PurchaseModel.purchase_date >= to_utc_day(from_date))
        if to_date is not None:
            stmt = stmt.where(PurchaseModel.purchase_date <= to_utc_day(to_date))
        if purchase_type is not None:
            stmt = stmt.where(PurchaseModel.purchase_type == purchase_type.value)
        if coop_id is not None:
            stmt = stmt.where(PurchaseModel.coop_id == coop_id.value)
        stmt = stmt.order_by(
            PurchaseModel.purchase_date.desc(), PurchaseModel.id.desc()
        )

        result = await self._session.execute(stmt)
        purchases = [self._to_domain(model) for model in result.scalars().all()]

        self._probe.aggregates_listed(self._aggregate, len(purchases))
        return purchases

    async def add(self, purchase: Purchase) -> None:
        tenant = self._assert_owned(purchase.tenant_id, "add")
        model = PurchaseModel(id=purchase.id.value, tenant_id=tenant)
        self._apply(model, purchase)
        model.created_at = purchase.created_at
        self._session.add(model)
        await self._session.flush()
        self._probe.aggregate_saved(self._aggregate, purchase.id.value, tenant)

    async def save(self, purchase: Purchase) -> None:
        """Persist changes to an existing purchase.

        Raises:
            ValueError: If the purchase does not exist in the current tenant
        """
        tenant = self._assert_owned(purchase.tenant_id, "save")
        model = await self._get_model(purchase.id.value, "save")
        if model is None:
            raise ValueError(f"Purchase {purchase.id.value} does not exist")

        self._apply(model, purchase)
        await self._session.flush()
        self._probe.aggregate_saved(self._aggregate, purchase.id.value, tenant)

    async def delete(self, purchase: Purchase) -> bool:
        return await self._delete_row(purchase.id.value, purchase.tenant_id)

    async def search_names(
        self, query: str, limit: int = DEFAULT_SEARCH_LIMIT
    ) -> list[str]:
        return await self._search_distinct(PurchaseModel.name, query, limit)

    @staticmethod
    def _apply(model: PurchaseModel, purchase: Purchase) -> None:
        """Copy the purchase's mutable fields onto its row."""
        model.coop_id = purchase.coop_id.value if purchase.coop_id else None
        model.name = purchase.name
        model.purchase_type = purchase.purchase_type.value
        model.amount = purchase.amount
        model.quantity = purchase.quantity
        model.unit = purchase.unit.value
        model.purchase_date = purchase.purchase_date
        model.consumed_date = purchase.consumed_date
        model.notes = purchase.notes
        model.updated_at = purchase.updated_at

    @staticmethod
    def _to_domain(model: PurchaseModel) -> Purchase:
        return Purchase(
            id=PurchaseId(value=model.id),
            tenant_id=TenantId(value=model.tenant_id),
            coop_id=CoopId(value=model.coop_id) if model.coop_id else None,
            name=model.name,
            purchase_type=PurchaseType(model.purchase_type),
            amount=model.amount,
            quantity=model.quantity,
            unit=QuantityUnit(model.unit),
            purchase_date=model.purchase_date,
            consumed_date=model.consumed_date,
            notes=model.notes,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
