"""SQLAlchemy ORM model for the flock_history table.

Rows are append-only. A database trigger rejects updates to any column
other than notes and updated_at, and rejects deletes.
"""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TenantScopedMixin, TimestampMixin


class FlockHistoryModel(Base, TenantScopedMixin, TimestampMixin):
    """ORM model for flock_history table.

    position is the entry's zero-based index in its flock's ledger and is
    the only ordering used when reading history back.
    """

    __tablename__ = "flock_history"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    flock_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("flocks.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    change_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    hens: Mapped[int] = mapped_column(Integer, nullable=False)
    roosters: Mapped[int] = mapped_column(Integer, nullable=False)
    chicks: Mapped[int] = mapped_column(Integer, nullable=False)
    reason: Mapped[str] = mapped_column(String(50), nullable=False)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    __table_args__ = (
        UniqueConstraint("flock_id", "position", name="uq_flock_history_position"),
        CheckConstraint("hens >= 0", name="ck_flock_history_hens_non_negative"),
        CheckConstraint(
            "roosters >= 0", name="ck_flock_history_roosters_non_negative"
        ),
        CheckConstraint("chicks >= 0", name="ck_flock_history_chicks_non_negative"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<FlockHistoryModel(id={self.id}, flock_id={self.flock_id}, "
            f"position={self.position}, reason={self.reason})>"
        )
