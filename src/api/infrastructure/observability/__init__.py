"""Probes for the database layer.

Covers connection pool lifecycle and the tenant each transaction is bound
to for row-level security. ObservationContext is re-exported for callers
that only depend on infrastructure.
"""

from shared_kernel.observability_context import ObservationContext
from infrastructure.observability.probes import (
    ConnectionProbe,
    DefaultConnectionProbe,
)

__all__ = [
    "ConnectionProbe",
    "DefaultConnectionProbe",
    "ObservationContext",
]
