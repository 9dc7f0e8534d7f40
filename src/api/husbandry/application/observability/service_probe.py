"""Protocol for husbandry application service observability.

Defines the interface for domain probes that capture application-level
domain events for coop, flock, daily record and purchase use cases.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class HusbandryServiceProbe(Protocol):
    """Domain probe for husbandry application service operations.

    The operation argument is the service method name, e.g. "create_flock".
    """

    def access_denied(self, operation: str, reason: str) -> None:
        """Record that a use case was refused for lack of caller or tenant."""
        ...

    def aggregate_created(
        self, aggregate: str, aggregate_id: str, tenant_id: str
    ) -> None:
        """Record that an aggregate was created."""
        ...

    def aggregate_updated(
        self, operation: str, aggregate: str, aggregate_id: str
    ) -> None:
        """Record that an aggregate was changed."""
        ...

    def aggregate_deleted(self, aggregate: str, aggregate_id: str) -> None:
        """Record that an aggregate was deleted."""
        ...

    def aggregate_not_found(
        self, operation: str, aggregate: str, aggregate_id: str
    ) -> None:
        """Record that a referenced aggregate is not visible to the tenant."""
        ...

    def composition_changed(
        self,
        flock_id: str,
        reason: str,
        hens: int,
        roosters: int,
        chicks: int,
        history_length: int,
    ) -> None:
        """Record a flock composition change and the resulting ledger size."""
        ...

    def validation_failed(self, operation: str, field: str, message: str) -> None:
        """Record that caller input violated an invariant."""
        ...

    def conflict_detected(self, operation: str, code: str, message: str) -> None:
        """Record that a use case was refused because of existing state."""
        ...

    def operation_failed(self, operation: str, error: Exception) -> None:
        """Record an unexpected failure."""
        ...

    def with_context(self, context: ObservationContext) -> HusbandryServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultHusbandryServiceProbe:
    """Default implementation of HusbandryServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultHusbandryServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultHusbandryServiceProbe(logger=self._logger, context=context)

    def access_denied(self, operation: str, reason: str) -> None:
        """Record that a use case was refused for lack of caller or tenant."""
        self._logger.warning(
            "husbandry_access_denied",
            operation=operation,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def aggregate_created(
        self, aggregate: str, aggregate_id: str, tenant_id: str
    ) -> None:
        """Record that an aggregate was created."""
        self._logger.info(
            f"{aggregate}_created",
            aggregate_id=aggregate_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def aggregate_updated(
        self, operation: str, aggregate: str, aggregate_id: str
    ) -> None:
        """Record that an aggregate was changed."""
        self._logger.info(
            f"{aggregate}_updated",
            operation=operation,
            aggregate_id=aggregate_id,
            **self._get_context_kwargs(),
        )

    def aggregate_deleted(self, aggregate: str, aggregate_id: str) -> None:
        """Record that an aggregate was deleted."""
        self._logger.info(
            f"{aggregate}_deleted",
            aggregate_id=aggregate_id,
            **self._get_context_kwargs(),
        )

    def aggregate_not_found(
        self, operation: str, aggregate: str, aggregate_id: str
    ) -> None:
        """Record that a referenced aggregate is not visible to the tenant."""
        self._logger.info(
            f"{aggregate}_not_found",
            operation=operation,
            aggregate_id=aggregate_id,
            **self._get_context_kwargs(),
        )

    def composition_changed(
        self,
        flock_id: str,
        reason: str,
        hens: int,
        roosters: int,
        chicks: int,
        history_length: int,
    ) -> None:
        """Record a flock composition change and the resulting ledger size."""
        self._logger.info(
            "flock_composition_changed",
            flock_id=flock_id,
            reason=reason,
            hens=hens,
            roosters=roosters,
            chicks=chicks,
            history_length=history_length,
            **self._get_context_kwargs(),
        )

    def validation_failed(self, operation: str, field: str, message: str) -> None:
        """Record that caller input violated an invariant."""
        self._logger.info(
            "husbandry_validation_failed",
            operation=operation,
            field=field,
            message=message,
            **self._get_context_kwargs(),
        )

    def conflict_detected(self, operation: str, code: str, message: str) -> None:
        """Record that a use case was refused because of existing state."""
        self._logger.info(
            "husbandry_conflict",
            operation=operation,
            code=code,
            message=message,
            **self._get_context_kwargs(),
        )

    def operation_failed(self, operation: str, error: Exception) -> None:
        """Record an unexpected failure."""
        self._logger.error(
            "husbandry_operation_failed",
            operation=operation,
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
