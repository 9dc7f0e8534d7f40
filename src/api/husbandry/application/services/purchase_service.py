"""Purchase application service for the husbandry bounded context."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from husbandry.application.observability import HusbandryServiceProbe
from husbandry.application.services.base import TenantScopedService
from husbandry.domain.aggregates import Purchase
from husbandry.domain.value_objects import (
    CoopId,
    PurchaseId,
    PurchaseType,
    QuantityUnit,
)
from husbandry.ports.repositories import ICoopRepository, IPurchaseRepository
from shared_kernel.result import Error, Result
from shared_kernel.tenancy import TenantContextAccessor
from shared_kernel.validation import DomainValidationError


class PurchaseService(TenantScopedService):
    """Application service for supply purchases.

    A purchase may reference one of the tenant's coops or none at all.
    """

    def __init__(
        self,
        session: AsyncSession,
        purchase_repository: IPurchaseRepository,
        coop_repository: ICoopRepository,
        accessor: TenantContextAccessor,
        probe: HusbandryServiceProbe | None = None,
    ):
        """Initialize PurchaseService with dependencies.

        Args:
            session: Database session for transaction management
            purchase_repository: Tenant-scoped repository for purchases
            coop_repository: Used to check that a referenced coop is visible
            accessor: Tenant context accessor for the current request
            probe: Optional domain probe for observability
        """
        super().__init__(session, accessor, probe)
        self._purchase_repository = purchase_repository
        self._coop_repository = coop_repository

    async def create_purchase(
        self,
        name: str,
        purchase_type: PurchaseType,
        amount: Decimal,
        quantity: Decimal,
        unit: QuantityUnit,
        purchase_date: datetime | date,
        coop_id: CoopId | None = None,
        consumed_date: datetime | date | None = None,
        notes: str | None = None,
    ) -> Result[Purchase]:
        """Record a purchase. NotFound if coop_id is given but not visible."""
        tenant = self._current_tenant("create_purchase")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            async with self._session.begin():
                if coop_id is not None and not await self._coop_visible(coop_id):
                    return self._not_found("create_purchase", "coop", coop_id.value)

                purchase = Purchase.create(
                    tenant_id=tenant,
                    name=name,
                    purchase_type=purchase_type,
                    amount=amount,
                    quantity=quantity,
                    unit=unit,
                    purchase_date=purchase_date,
                    coop_id=coop_id,
                    consumed_date=consumed_date,
                    notes=notes,
                )
                await self._purchase_repository.add(purchase)
        except DomainValidationError as e:
            return self._invalid("create_purchase", e)
        except Exception as e:
            return self._unexpected("create_purchase", e)

        self._probe.aggregate_created("purchase", purchase.id.value, tenant.value)
        return Result.success(purchase)

    async def update_purchase(
        self,
        purchase_id: PurchaseId,
        name: str,
        purchase_type: PurchaseType,
        amount: Decimal,
        quantity: Decimal,
        unit: QuantityUnit,
        purchase_date: datetime | date,
        coop_id: CoopId | None = None,
        consumed_date: datetime | date | None = None,
        notes: str | None = None,
    ) -> Result[Purchase]:
        """Replace every editable field of a purchase."""
        tenant = self._current_tenant("update_purchase")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            async with self._session.begin():
                purchase = await self._purchase_repository.get_by_id(purchase_id)
                if purchase is None:
                    return self._not_found(
                        "update_purchase", "purchase", purchase_id.value
                    )

                if coop_id is not None and not await self._coop_visible(coop_id):
                    return self._not_found("update_purchase", "coop", coop_id.value)

                purchase.update(
                    name=name,
                    purchase_type=purchase_type,
                    amount=amount,
                    quantity=quantity,
                    unit=unit,
                    purchase_date=purchase_date,
                    coop_id=coop_id,
                    consumed_date=consumed_date,
                    notes=notes,
                )
                await self._purchase_repository.save(purchase)
        except DomainValidationError as e:
            return self._invalid("update_purchase", e)
        except Exception as e:
            return self._unexpected("update_purchase", e)

        self._probe.aggregate_updated("update_purchase", "purchase", purchase.id.value)
        return Result.success(purchase)

    async def delete_purchase(self, purchase_id: PurchaseId) -> Result[None]:
        tenant = self._current_tenant("delete_purchase")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            async with self._session.begin():
                purchase = await self._purchase_repository.get_by_id(purchase_id)
                if purchase is None:
                    return self._not_found(
                        "delete_purchase", "purchase", purchase_id.value
                    )

                await self._purchase_repository.delete(purchase)
        except Exception as e:
            return self._unexpected("delete_purchase", e)

        self._probe.aggregate_deleted("purchase", purchase_id.value)
        return Result.success(None)

    async def get_purchase(self, purchase_id: PurchaseId) -> Result[Purchase]:
        tenant = self._current_tenant("get_purchase")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            purchase = await self._purchase_repository.get_by_id(purchase_id)
        except Exception as e:
            return self._unexpected("get_purchase", e)

        if purchase is None:
            return self._not_found("get_purchase", "purchase", purchase_id.value)
        return Result.success(purchase)

    async def list_purchases(
        self,
        from_date: datetime | None = None,
        to_date: datetime | None = None,
        purchase_type: PurchaseType | None = None,
        coop_id: CoopId | None = None,
    ) -> Result[list[Purchase]]:
        """List purchases, newest purchase date first, optionally filtered."""
        tenant = self._current_tenant("list_purchases")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            purchases = await self._purchase_repository.list_all(
                from_date=from_date,
                to_date=to_date,
                purchase_type=purchase_type,
                coop_id=coop_id,
            )
        except Exception as e:
            return self._unexpected("list_purchases", e)

        return Result.success(purchases)

    async def search_purchase_names(
        self, query: str, limit: int | None = None
    ) -> Result[list[str]]:
        """Autocomplete purchase names for the current tenant."""
        tenant = self._current_tenant("search_purchase_names")
        if isinstance(tenant, Error):
            return Result.failure(tenant)

        try:
            names = await self._purchase_repository.search_names(
                query, limit or self._default_search_limit
            )
        except Exception as e:
            return self._unexpected("search_purchase_names", e)

        return Result.success(names)

    async def _coop_visible(self, coop_id: CoopId) -> bool:
        return await self._coop_repository.get_by_id(coop_id) is not None
