"""Tenant identity and per-request tenant context.

Every bounded context scopes its data by TenantId. The resolution of the
caller's tenant lives in the IAM context; this package only carries the
resolved result and the accessor protocol the other contexts consume.
"""

from shared_kernel.tenancy.tenant_context import (
    MissingTenantContextError,
    RequestTenantContextAccessor,
    TenantContext,
    TenantContextAccessor,
    require_tenant_id,
)
from shared_kernel.tenancy.value_objects import TenantId

__all__ = [
    "MissingTenantContextError",
    "RequestTenantContextAccessor",
    "TenantContext",
    "TenantContextAccessor",
    "TenantId",
    "require_tenant_id",
]
