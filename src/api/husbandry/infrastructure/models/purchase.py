"""SQLAlchemy ORM model for the purchases table."""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TenantScopedMixin, TimestampMixin


class PurchaseModel(Base, TenantScopedMixin, TimestampMixin):
    """ORM model for purchases table.

    Foreign Key Constraints:
    - coop_id references coops.id with SET NULL delete
      Deleting a coop keeps its purchases as tenant-wide purchases
    """

    __tablename__ = "purchases"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    coop_id: Mapped[str | None] = mapped_column(
        String(26),
        ForeignKey("coops.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    purchase_type: Mapped[str] = mapped_column(String(20), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    quantity: Mapped[Decimal] = mapped_column(Numeric(12, 3), nullable=False)
    unit: Mapped[str] = mapped_column(String(20), nullable=False)
    purchase_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    consumed_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    __table_args__ = (
        CheckConstraint("amount >= 0", name="ck_purchases_amount_non_negative"),
        CheckConstraint("quantity > 0", name="ck_purchases_quantity_positive"),
        CheckConstraint(
            "consumed_date IS NULL OR consumed_date >= purchase_date",
            name="ck_purchases_consumed_after_purchase",
        ),
        Index("idx_purchases_tenant_date", "tenant_id", "purchase_date"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<PurchaseModel(id={self.id}, tenant_id={self.tenant_id}, "
            f"name={self.name}, purchase_date={self.purchase_date})>"
        )
