"""create husbandry tables

Creates coops, flocks, flock_history, daily_records and purchases. Every
table carries a tenant_id referencing tenants.id with RESTRICT delete.

Revision ID: 5e2f8d13a6b7
Revises: 1c7e4a9b2d30
Create Date: 2026-02-02 10:40:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "5e2f8d13a6b7"
down_revision: Union[str, Sequence[str], None] = "1c7e4a9b2d30"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _tenant_column() -> sa.Column:
    return sa.Column(
        "tenant_id",
        sa.String(length=26),
        sa.ForeignKey("tenants.id", ondelete="RESTRICT"),
        nullable=False,
    )


def _timestamp_columns() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "coops",
        sa.Column("id", sa.String(length=26), nullable=False),
        _tenant_column(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_coops_tenant_id", "coops", ["tenant_id"])
    op.create_index("idx_coops_tenant_name", "coops", ["tenant_id", "name"])

    op.create_table(
        "flocks",
        sa.Column("id", sa.String(length=26), nullable=False),
        _tenant_column(),
        sa.Column(
            "coop_id",
            sa.String(length=26),
            sa.ForeignKey("coops.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("identifier", sa.String(length=50), nullable=False),
        sa.Column("hatch_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("hens", sa.Integer(), nullable=False),
        sa.Column("roosters", sa.Integer(), nullable=False),
        sa.Column("chicks", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("hens >= 0", name="ck_flocks_hens_non_negative"),
        sa.CheckConstraint("roosters >= 0", name="ck_flocks_roosters_non_negative"),
        sa.CheckConstraint("chicks >= 0", name="ck_flocks_chicks_non_negative"),
        sa.CheckConstraint(
            "hens + roosters + chicks > 0", name="ck_flocks_has_animals"
        ),
    )
    op.create_index("ix_flocks_tenant_id", "flocks", ["tenant_id"])
    op.create_index("ix_flocks_coop_id", "flocks", ["coop_id"])
    op.create_index(
        "idx_flocks_coop_identifier", "flocks", ["coop_id", "identifier"]
    )

    op.create_table(
        "flock_history",
        sa.Column("id", sa.String(length=26), nullable=False),
        _tenant_column(),
        sa.Column(
            "flock_id",
            sa.String(length=26),
            sa.ForeignKey("flocks.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("change_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("hens", sa.Integer(), nullable=False),
        sa.Column("roosters", sa.Integer(), nullable=False),
        sa.Column("chicks", sa.Integer(), nullable=False),
        sa.Column("reason", sa.String(length=50), nullable=False),
        sa.Column("notes", sa.String(length=500), nullable=True),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("flock_id", "position", name="uq_flock_history_position"),
        sa.CheckConstraint("hens >= 0", name="ck_flock_history_hens_non_negative"),
        sa.CheckConstraint(
            "roosters >= 0", name="ck_flock_history_roosters_non_negative"
        ),
        sa.CheckConstraint("chicks >= 0", name="ck_flock_history_chicks_non_negative"),
    )
    op.create_index("ix_flock_history_tenant_id", "flock_history", ["tenant_id"])
    op.create_index("ix_flock_history_flock_id", "flock_history", ["flock_id"])

    op.create_table(
        "daily_records",
        sa.Column("id", sa.String(length=26), nullable=False),
        _tenant_column(),
        sa.Column(
            "flock_id",
            sa.String(length=26),
            sa.ForeignKey("flocks.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("record_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("egg_count", sa.Integer(), nullable=False),
        sa.Column("notes", sa.String(length=500), nullable=True),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "flock_id", "record_date", name="uq_daily_records_flock_date"
        ),
        sa.CheckConstraint("egg_count >= 0", name="ck_daily_records_egg_count"),
    )
    op.create_index("ix_daily_records_tenant_id", "daily_records", ["tenant_id"])
    op.create_index("ix_daily_records_flock_id", "daily_records", ["flock_id"])

    op.create_table(
        "purchases",
        sa.Column("id", sa.String(length=26), nullable=False),
        _tenant_column(),
        sa.Column(
            "coop_id",
            sa.String(length=26),
            sa.ForeignKey("coops.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("purchase_type", sa.String(length=20), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("quantity", sa.Numeric(12, 3), nullable=False),
        sa.Column("unit", sa.String(length=20), nullable=False),
        sa.Column("purchase_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("consumed_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("notes", sa.String(length=500), nullable=True),
        *_timestamp_columns(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("amount >= 0", name="ck_purchases_amount_non_negative"),
        sa.CheckConstraint("quantity > 0", name="ck_purchases_quantity_positive"),
        sa.CheckConstraint(
            "consumed_date IS NULL OR consumed_date >= purchase_date",
            name="ck_purchases_consumed_after_purchase",
        ),
    )
    op.create_index("ix_purchases_tenant_id", "purchases", ["tenant_id"])
    op.create_index("ix_purchases_coop_id", "purchases", ["coop_id"])
    op.create_index(
        "idx_purchases_tenant_date", "purchases", ["tenant_id", "purchase_date"]
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("purchases")
    op.drop_table("daily_records")
    op.drop_table("flock_history")
    op.drop_table("flocks")
    op.drop_table("coops")
