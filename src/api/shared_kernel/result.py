"""Result/Error envelope returned by use-case services.

Services report expected outcomes (missing caller, missing entity,
invariant violation, conflicting state, unexpected failure) as values
instead of raising across the application boundary.

Usage:
    result = await coop_service.get_coop(coop_id)
    if result.is_failure:
        return to_http_error(result.error)
    coop = result.value
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeVar

from shared_kernel.validation import DomainValidationError

T = TypeVar("T")

GENERIC_FAILURE_MESSAGE = "An unexpected error occurred"


class ErrorKind(StrEnum):
    """Categories of use-case failure."""

    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    CONFLICT = "conflict"
    FAILURE = "failure"


@dataclass(frozen=True)
class Error:
    """A typed failure with a stable code and a human-readable message.

    Attributes:
        kind: Failure category
        code: Stable machine-readable code (e.g. "flock.not_found")
        message: Human-readable description safe to show to the caller
        field: Offending field for validation failures, otherwise None
    """

    kind: ErrorKind
    code: str
    message: str
    field: str | None = None

    @classmethod
    def unauthorized(
        cls, message: str = "Authentication required", code: str = "unauthorized"
    ) -> Error:
        return cls(kind=ErrorKind.UNAUTHORIZED, code=code, message=message)

    @classmethod
    def not_found(cls, message: str, code: str = "not_found") -> Error:
        return cls(kind=ErrorKind.NOT_FOUND, code=code, message=message)

    @classmethod
    def validation(
        cls, message: str, field: str | None = None, code: str = "validation_error"
    ) -> Error:
        return cls(kind=ErrorKind.VALIDATION, code=code, message=message, field=field)

    @classmethod
    def conflict(cls, message: str, code: str = "conflict") -> Error:
        return cls(kind=ErrorKind.CONFLICT, code=code, message=message)

    @classmethod
    def failure(
        cls, message: str = GENERIC_FAILURE_MESSAGE, code: str = "internal_error"
    ) -> Error:
        return cls(kind=ErrorKind.FAILURE, code=code, message=message)

    @classmethod
    def from_validation(cls, exc: DomainValidationError) -> Error:
        """Translate an invariant violation raised by an aggregate."""
        return cls.validation(message=exc.message, field=exc.field)


class Result(Generic[T]):
    """Outcome of a use case: either a value or an Error, never both."""

    __slots__ = ("_value", "_error")

    def __init__(self, value: T | None = None, error: Error | None = None):
        self._value = value
        self._error = error

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: Error) -> Result[T]:
        return cls(error=error)

    @classmethod
    def fail(cls, kind: ErrorKind, code: str, message: str) -> Result[T]:
        """Build a failed result from its parts."""
        return cls(error=Error(kind=kind, code=code, message=message))

    @property
    def is_success(self) -> bool:
        return self._error is None

    @property
    def is_failure(self) -> bool:
        return self._error is not None

    @property
    def value(self) -> T:
        """The success value.

        Raises:
            ValueError: If the result is a failure
        """
        if self._error is not None:
            raise ValueError(
                f"Cannot access value of a failed result ({self._error.code})"
            )
        return self._value  # type: ignore[return-value]

    @property
    def error(self) -> Error | None:
        return self._error

    def __repr__(self) -> str:
        if self._error is not None:
            return f"Result.failure({self._error!r})"
        return f"Result.success({self._value!r})"
