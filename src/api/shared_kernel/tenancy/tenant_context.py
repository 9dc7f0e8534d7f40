"""Tenant context and the per-request tenant context accessor.

The accessor is how repositories and services learn who is calling and
which tenant they act for. An accessor is built once per request from the
authenticated principal and the resolved tenant; it holds no module-level
state and must never be reused for another request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol, runtime_checkable

from shared_kernel.tenancy.value_objects import TenantId


class MissingTenantContextError(RuntimeError):
    """Raised when tenant-scoped data access runs without a resolved tenant."""

    def __init__(self, operation: str):
        super().__init__(
            f"Tenant-scoped operation '{operation}' requires a resolved tenant"
        )
        self.operation = operation


@dataclass(frozen=True)
class TenantContext:
    """Resolved tenant context for the current request.

    Attributes:
        tenant_id: The tenant the caller acts for.
        user_id: External identity of the caller.
        source: How the tenant was resolved. 'identity' when looked up from
            the caller's external identity, 'explicit' when supplied by a
            trusted caller such as a background job or test.
    """

    tenant_id: TenantId
    user_id: str
    source: Literal["identity", "explicit"] = "identity"


@runtime_checkable
class TenantContextAccessor(Protocol):
    """Read-only view of the caller and tenant for the current request."""

    def is_authenticated(self) -> bool:
        """Return True when an authenticated caller is present."""
        ...

    def current_tenant_id(self) -> TenantId | None:
        """Return the caller's tenant, or None if it could not be resolved."""
        ...


class RequestTenantContextAccessor:
    """TenantContextAccessor backed by values resolved for one request."""

    def __init__(
        self,
        user_id: str | None,
        context: TenantContext | None = None,
    ) -> None:
        if context is not None and user_id is None:
            raise ValueError("A tenant context requires an authenticated caller")
        self._user_id = user_id
        self._context = context

    @classmethod
    def anonymous(cls) -> RequestTenantContextAccessor:
        """Accessor for a request with no authenticated caller."""
        return cls(user_id=None)

    @classmethod
    def for_tenant(
        cls, tenant_id: TenantId, user_id: str
    ) -> RequestTenantContextAccessor:
        """Accessor for a caller acting explicitly on behalf of tenant_id."""
        return cls(
            user_id=user_id,
            context=TenantContext(
                tenant_id=tenant_id, user_id=user_id, source="explicit"
            ),
        )

    @property
    def user_id(self) -> str | None:
        return self._user_id

    @property
    def context(self) -> TenantContext | None:
        return self._context

    def is_authenticated(self) -> bool:
        return self._user_id is not None

    def current_tenant_id(self) -> TenantId | None:
        if self._context is None:
            return None
        return self._context.tenant_id


def require_tenant_id(accessor: TenantContextAccessor, operation: str) -> TenantId:
    """Return the accessor's tenant or fail closed.

    Raises:
        MissingTenantContextError: If no tenant is resolved
    """
    tenant_id = accessor.current_tenant_id()
    if tenant_id is None:
        raise MissingTenantContextError(operation)
    return tenant_id
