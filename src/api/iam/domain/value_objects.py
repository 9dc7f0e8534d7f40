"""Value objects for the IAM domain.

TenantId lives in the shared kernel because every bounded context scopes
its data by it; it is re-exported here for IAM callers.
"""

from shared_kernel.tenancy import TenantId

__all__ = ["TenantId"]
