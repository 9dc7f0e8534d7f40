"""SQLAlchemy ORM model for the coops table."""

from sqlalchemy import Boolean, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TenantScopedMixin, TimestampMixin


class CoopModel(Base, TenantScopedMixin, TimestampMixin):
    """ORM model for coops table.

    Foreign Key Constraints:
    - tenant_id references tenants.id with RESTRICT delete
    """

    __tablename__ = "coops"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (Index("idx_coops_tenant_name", "tenant_id", "name"),)

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<CoopModel(id={self.id}, tenant_id={self.tenant_id}, "
            f"name={self.name}, is_active={self.is_active})>"
        )
