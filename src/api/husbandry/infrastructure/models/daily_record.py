"""SQLAlchemy ORM model for the daily_records table."""

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


class DailyRecordModel(Base, TenantScopedMixin, TimestampMixin):
    """ORM model for daily_records table.

    A flock has at most one record per calendar day. record_date is always
    stored as UTC midnight.
    """

    __tablename__ = "daily_records"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    flock_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("flocks.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    record_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    egg_count: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[str | None] = mapped_column(String(500), nullable=True)

    __table_args__ = (
        UniqueConstraint(
            "flock_id", "record_date", name="uq_daily_records_flock_date"
        ),
        CheckConstraint("egg_count >= 0", name="ck_daily_records_egg_count"),
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<DailyRecordModel(id={self.id}, flock_id={self.flock_id}, "
            f"record_date={self.record_date}, egg_count={self.egg_count})>"
        )
