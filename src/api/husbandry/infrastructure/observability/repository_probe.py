"""Domain probe for husbandry repository operations.

Following Domain-Oriented Observability patterns, this probe captures
domain-significant events related to coop, flock, history, daily record
and purchase persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class HusbandryRepositoryProbe(Protocol):
    """Domain probe for husbandry repository operations.

    The aggregate argument names the aggregate type, e.g. "coop" or "flock".
    """

    def aggregate_saved(
        self, aggregate: str, aggregate_id: str, tenant_id: str
    ) -> None:
        """Record that an aggregate was inserted or updated."""
        ...

    def aggregate_retrieved(self, aggregate: str, aggregate_id: str) -> None:
        """Record that an aggregate was retrieved."""
        ...

    def aggregate_not_found(self, aggregate: str, aggregate_id: str) -> None:
        """Record that an aggregate was not found in the current tenant."""
        ...

    def aggregate_deleted(self, aggregate: str, aggregate_id: str) -> None:
        """Record that an aggregate was deleted."""
        ...

    def aggregates_listed(self, aggregate: str, count: int) -> None:
        """Record that aggregates were listed."""
        ...

    def history_appended(self, flock_id: str, count: int) -> None:
        """Record that new history entries were written for a flock."""
        ...

    def history_notes_saved(self, entry_id: str, flock_id: str) -> None:
        """Record that a history entry's notes were replaced."""
        ...

    def names_searched(self, aggregate: str, query: str, count: int) -> None:
        """Record an autocomplete lookup."""
        ...

    def statistics_computed(self, report: str, rows: int) -> None:
        """Record that a statistics report was aggregated."""
        ...

    def with_context(self, context: ObservationContext) -> HusbandryRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultHusbandryRepositoryProbe:
    """Default implementation of HusbandryRepositoryProbe using structlog."""

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
    ) -> DefaultHusbandryRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultHusbandryRepositoryProbe(logger=self._logger, context=context)

    def aggregate_saved(
        self, aggregate: str, aggregate_id: str, tenant_id: str
    ) -> None:
        """Record that an aggregate was inserted or updated."""
        self._logger.info(
            f"{aggregate}_saved",
            aggregate_id=aggregate_id,
            tenant_id=tenant_id,
            **self._get_context_kwargs(),
        )

    def aggregate_retrieved(self, aggregate: str, aggregate_id: str) -> None:
        """Record that an aggregate was retrieved."""
        self._logger.debug(
            f"{aggregate}_retrieved",
            aggregate_id=aggregate_id,
            **self._get_context_kwargs(),
        )

    def aggregate_not_found(self, aggregate: str, aggregate_id: str) -> None:
        """Record that an aggregate was not found in the current tenant."""
        self._logger.debug(
            f"{aggregate}_not_found",
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

    def aggregates_listed(self, aggregate: str, count: int) -> None:
        """Record that aggregates were listed."""
        self._logger.debug(
            f"{aggregate}s_listed",
            count=count,
            **self._get_context_kwargs(),
        )

    def history_appended(self, flock_id: str, count: int) -> None:
        """Record that new history entries were written for a flock."""
        self._logger.info(
            "flock_history_appended",
            flock_id=flock_id,
            count=count,
            **self._get_context_kwargs(),
        )

    def history_notes_saved(self, entry_id: str, flock_id: str) -> None:
        """Record that a history entry's notes were replaced."""
        self._logger.info(
            "flock_history_notes_saved",
            entry_id=entry_id,
            flock_id=flock_id,
            **self._get_context_kwargs(),
        )

    def names_searched(self, aggregate: str, query: str, count: int) -> None:
        """Record an autocomplete lookup."""
        self._logger.debug(
            f"{aggregate}_names_searched",
            query=query,
            count=count,
            **self._get_context_kwargs(),
        )

    def statistics_computed(self, report: str, rows: int) -> None:
        self._logger.debug(
            "statistics_computed",
            report=report,
            rows=rows,
            **self._get_context_kwargs(),
        )
