"""SQLAlchemy ORM model for the flocks table."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TenantScopedMixin, TimestampMixin


class FlockModel(Base, TenantScopedMixin, TimestampMixin):
    """ORM model for flocks table.

    Foreign Key Constraints:
    - tenant_id references tenants.id with RESTRICT delete
    - coop_id references coops.id with RESTRICT delete
      A coop cannot be deleted while it still holds flocks

    Check Constraints:
    - Counts are never negative and at least one of them is positive
    """

    __tablename__ = "flocks"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    coop_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("coops.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    identifier: Mapped[str] = mapped_column(String(50), nullable=False)
    hatch_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    hens: Mapped[int] = mapped_column(Integer, nullable=False)
    roosters: Mapped[int] = mapped_column(Integer, nullable=False)
    chicks: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint("hens >= 0", name="ck_flocks_hens_non_negative"),
        CheckConstraint("roosters >= 0", name="ck_flocks_roosters_non_negative"),
        CheckConstraint("chicks >= 0", name="ck_flocks_chicks_non_negative"),
        CheckConstraint(
            "hens + roosters + chicks > 0", name="ck_flocks_has_animals"
        ),
        Index("idx_flocks_coop_identifier", "coop_id", "identifier"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<FlockModel(id={self.id}, tenant_id={self.tenant_id}, "
            f"coop_id={self.coop_id}, identifier={self.identifier})>"
        )
