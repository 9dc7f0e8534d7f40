"""Purchase aggregate: supplies bought for the flocks."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal

from husbandry.domain.value_objects import (
    CoopId,
    PurchaseId,
    PurchaseType,
    QuantityUnit,
)
from shared_kernel.tenancy import TenantId
from shared_kernel.validation import (
    DomainValidationError,
    max_length,
    member_of,
    non_negative,
    positive,
    require_text,
    to_utc_day,
)

NAME_MAX_LENGTH = 100
NOTES_MAX_LENGTH = 500


@dataclass
class Purchase:
    """A purchase of feed, bedding, medicine or other supplies.

    Business rules:
    - Name is required, at most 100 characters
    - Amount is never negative; zero is allowed for gifts
    - Quantity is strictly positive
    - purchase_date and consumed_date are normalized to UTC midnight
    - consumed_date, when set, is on or after purchase_date
    - Notes are optional, at most 500 characters
    - A purchase may be linked to a coop or to the whole tenant
    """

    id: PurchaseId
    tenant_id: TenantId
    coop_id: CoopId | None
    name: str
    purchase_type: PurchaseType
    amount: Decimal
    quantity: Decimal
    unit: QuantityUnit
    purchase_date: datetime
    consumed_date: datetime | None
    notes: str | None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(
        cls,
        tenant_id: TenantId,
        name: str,
        purchase_type: PurchaseType,
        amount: Decimal,
        quantity: Decimal,
        unit: QuantityUnit,
        purchase_date: datetime | date,
        coop_id: CoopId | None = None,
        consumed_date: datetime | date | None = None,
        notes: str | None = None,
    ) -> Purchase:
        """Factory method for recording a purchase.

        Raises:
            DomainValidationError: If any field is invalid
        """
        purchase_type, unit, purchase_day, consumed_day = _validate(
            name,
            purchase_type,
            amount,
            quantity,
            unit,
            purchase_date,
            consumed_date,
            notes,
        )

        now = datetime.now(UTC)
        return cls(
            id=PurchaseId.generate(),
            tenant_id=tenant_id,
            coop_id=coop_id,
            name=name,
            purchase_type=purchase_type,
            amount=amount,
            quantity=quantity,
            unit=unit,
            purchase_date=purchase_day,
            consumed_date=consumed_day,
            notes=notes,
            created_at=now,
            updated_at=now,
        )

    def update(
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
    ) -> None:
        """Replace every editable field of the purchase.

        Raises:
            DomainValidationError: If any field is invalid
        """
        purchase_type, unit, purchase_day, consumed_day = _validate(
            name,
            purchase_type,
            amount,
            quantity,
            unit,
            purchase_date,
            consumed_date,
            notes,
        )

        self.coop_id = coop_id
        self.name = name
        self.purchase_type = purchase_type
        self.amount = amount
        self.quantity = quantity
        self.unit = unit
        self.purchase_date = purchase_day
        self.consumed_date = consumed_day
        self.notes = notes
        self.updated_at = datetime.now(UTC)

    @property
    def is_consumed(self) -> bool:
        return self.consumed_date is not None


def _validate(
    name: str,
    purchase_type: PurchaseType | str,
    amount: Decimal,
    quantity: Decimal,
    unit: QuantityUnit | str,
    purchase_date: datetime | date,
    consumed_date: datetime | date | None,
    notes: str | None,
) -> tuple[PurchaseType, QuantityUnit, datetime, datetime | None]:
    """Check all purchase fields and return the normalized values."""
    require_text(name, "name")
    max_length(name, NAME_MAX_LENGTH, "name")
    max_length(notes, NOTES_MAX_LENGTH, "notes")
    purchase_type = member_of(PurchaseType, purchase_type, "purchase_type")
    unit = member_of(QuantityUnit, unit, "unit")
    non_negative(amount, "amount")
    positive(quantity, "quantity")

    purchase_day = to_utc_day(purchase_date)
    consumed_day = to_utc_day(consumed_date) if consumed_date is not None else None
    if consumed_day is not None and consumed_day < purchase_day:
        raise DomainValidationError(
            "consumed_date", "consumed_date cannot be before purchase_date"
        )
    return purchase_type, unit, purchase_day, consumed_day
