"""Database-specific exceptions."""


class DatabaseError(Exception):
    """Base exception for database operations."""

    pass


class TenantIsolationError(DatabaseError):
    """Raised when a row would be written for a tenant other than the caller's.

    Repositories raise this before flushing; PostgreSQL row-level security
    rejects the same write independently.
    """

    def __init__(self, table: str, row_tenant_id: str, current_tenant_id: str):
        super().__init__(
            f"Refusing to write {table} row of tenant {row_tenant_id} "
            f"while scoped to tenant {current_tenant_id}"
        )
        self.table = table
        self.row_tenant_id = row_tenant_id
        self.current_tenant_id = current_tenant_id
