"""Probes for tenant persistence."""

from iam.infrastructure.observability.repository_probe import (
    DefaultTenantRepositoryProbe,
    TenantRepositoryProbe,
)

__all__ = [
    "TenantRepositoryProbe",
    "DefaultTenantRepositoryProbe",
]
