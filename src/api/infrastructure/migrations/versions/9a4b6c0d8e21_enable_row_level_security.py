"""enable row level security

Every tenant-owned table only exposes rows whose tenant_id equals the
transaction-local ``app.current_tenant_id`` setting, for reads and writes
alike. FORCE applies the policies to the table owner as well.

The tenants table additionally lets a transaction see the row whose
external_user_id equals ``app.current_external_user_id``, which is how a
caller's tenant is resolved before any tenant is known.

current_setting(..., true) returns NULL for an unset setting, and an
empty or NULL value matches no row.

Revision ID: 9a4b6c0d8e21
Revises: 5e2f8d13a6b7
Create Date: 2026-02-02 11:05:00.000000

"""

from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = "9a4b6c0d8e21"
down_revision: Union[str, Sequence[str], None] = "5e2f8d13a6b7"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TENANT_SCOPED_TABLES = (
    "coops",
    "flocks",
    "flock_history",
    "daily_records",
    "purchases",
)

_CURRENT_TENANT = "current_setting('app.current_tenant_id', true)"
_CURRENT_EXTERNAL_USER = "current_setting('app.current_external_user_id', true)"


def upgrade() -> None:
    """Upgrade schema."""
    for table in TENANT_SCOPED_TABLES:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;")
        op.execute(f"ALTER TABLE {table} FORCE ROW LEVEL SECURITY;")
        op.execute(f"""
            CREATE POLICY tenant_isolation ON {table}
                USING (tenant_id = {_CURRENT_TENANT})
                WITH CHECK (tenant_id = {_CURRENT_TENANT});
        """)

    op.execute("ALTER TABLE tenants ENABLE ROW LEVEL SECURITY;")
    op.execute("ALTER TABLE tenants FORCE ROW LEVEL SECURITY;")
    op.execute(f"""
        CREATE POLICY tenant_isolation ON tenants
            USING (
                id = {_CURRENT_TENANT}
                OR external_user_id = {_CURRENT_EXTERNAL_USER}
            )
            WITH CHECK (
                id = {_CURRENT_TENANT}
                OR external_user_id = {_CURRENT_EXTERNAL_USER}
            );
    """)


def downgrade() -> None:
    """Downgrade schema."""
    for table in (*TENANT_SCOPED_TABLES, "tenants"):
        op.execute(f"DROP POLICY IF EXISTS tenant_isolation ON {table};")
        op.execute(f"ALTER TABLE {table} NO FORCE ROW LEVEL SECURITY;")
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY;")
