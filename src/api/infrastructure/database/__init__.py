"""Database infrastructure - shared connection primitives."""

from infrastructure.database.exceptions import (
    DatabaseError,
    TenantIsolationError,
)

__all__ = [
    "DatabaseError",
    "TenantIsolationError",
]
