"""protect flock history

Flock history is an append-only ledger. This trigger rejects deleting
entries and rejects updates to any column other than notes and updated_at.

Revision ID: c3d5e7f9a1b2
Revises: 9a4b6c0d8e21
Create Date: 2026-02-02 11:30:00.000000

"""

from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = "c3d5e7f9a1b2"
down_revision: Union[str, Sequence[str], None] = "9a4b6c0d8e21"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.execute("""
        CREATE OR REPLACE FUNCTION protect_flock_history()
        RETURNS TRIGGER AS $$
        BEGIN
            IF TG_OP = 'DELETE' THEN
                RAISE EXCEPTION 'flock_history entries cannot be deleted';
            END IF;
            IF NEW.id IS DISTINCT FROM OLD.id
               OR NEW.tenant_id IS DISTINCT FROM OLD.tenant_id
               OR NEW.flock_id IS DISTINCT FROM OLD.flock_id
               OR NEW.position IS DISTINCT FROM OLD.position
               OR NEW.change_date IS DISTINCT FROM OLD.change_date
               OR NEW.hens IS DISTINCT FROM OLD.hens
               OR NEW.roosters IS DISTINCT FROM OLD.roosters
               OR NEW.chicks IS DISTINCT FROM OLD.chicks
               OR NEW.reason IS DISTINCT FROM OLD.reason
               OR NEW.created_at IS DISTINCT FROM OLD.created_at THEN
                RAISE EXCEPTION 'only notes of a flock_history entry can change';
            END IF;
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)

    op.execute("""
        CREATE TRIGGER flock_history_protect
            BEFORE UPDATE OR DELETE ON flock_history
            FOR EACH ROW
            EXECUTE FUNCTION protect_flock_history();
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("DROP TRIGGER IF EXISTS flock_history_protect ON flock_history;")
    op.execute("DROP FUNCTION IF EXISTS protect_flock_history();")
