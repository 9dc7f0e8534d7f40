"""Shared boundary handling for husbandry application services.

Each use case checks the caller first, then runs load, validate, mutate and
persist inside a single transaction, and finally translates the outcome into
a Result. Invariant violations become Validation errors; any other
exception becomes a Failure whose message never includes the exception text.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from husbandry.application.observability import (
    DefaultHusbandryServiceProbe,
    HusbandryServiceProbe,
)
from infrastructure.settings import get_husbandry_settings
from shared_kernel.result import Error, Result
from shared_kernel.tenancy import TenantContextAccessor, TenantId
from shared_kernel.validation import DomainValidationError


class TenantScopedService:
    """Base class for services that act on behalf of the current tenant."""

    def __init__(
        self,
        session: AsyncSession,
        accessor: TenantContextAccessor,
        probe: HusbandryServiceProbe | None = None,
    ):
        self._session = session
        self._accessor = accessor
        self._probe = probe or DefaultHusbandryServiceProbe()
        self._default_search_limit = get_husbandry_settings().default_search_limit

    def _current_tenant(self, operation: str) -> TenantId | Error:
        """Return the caller's tenant, or an Unauthorized error.

        Both a missing caller and a caller without a tenant are reported as
        Unauthorized.
        """
        if not self._accessor.is_authenticated():
            self._probe.access_denied(operation, reason="unauthenticated")
            return Error.unauthorized()

        tenant_id = self._accessor.current_tenant_id()
        if tenant_id is None:
            self._probe.access_denied(operation, reason="tenant_not_resolved")
            return Error.unauthorized(
                message="No tenant is associated with the current user",
                code="tenant_not_resolved",
            )
        return tenant_id

    def _not_found(
        self, operation: str, aggregate: str, aggregate_id: str
    ) -> Result[Any]:
        self._probe.aggregate_not_found(operation, aggregate, aggregate_id)
        return Result.failure(
            Error.not_found(
                message=f"{aggregate.replace('_', ' ').capitalize()} not found",
                code=f"{aggregate}.not_found",
            )
        )

    def _invalid(self, operation: str, error: DomainValidationError) -> Result[Any]:
        self._probe.validation_failed(operation, error.field, error.message)
        return Result.failure(Error.from_validation(error))

    def _conflict(self, operation: str, code: str, message: str) -> Result[Any]:
        self._probe.conflict_detected(operation, code, message)
        return Result.failure(Error.conflict(message=message, code=code))

    def _unexpected(self, operation: str, error: Exception) -> Result[Any]:
        self._probe.operation_failed(operation, error)
        return Result.failure(Error.failure())
