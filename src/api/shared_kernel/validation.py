"""Field validation guards shared by all aggregates.

Aggregates call these guards from their factory and update methods before
touching any state, so a failed guard leaves the aggregate unchanged.
Every guard raises DomainValidationError naming the offending field.
"""

from __future__ import annotations

from datetime import UTC, date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import TypeVar

E = TypeVar("E", bound=Enum)


class DomainValidationError(ValueError):
    """Raised when an aggregate invariant is violated.

    Attributes:
        field: Name of the offending field, as the caller passed it
        message: Human-readable description of the violation
    """

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


def require_text(value: str | None, field: str) -> str:
    """Reject None, empty, and whitespace-only strings."""
    if value is None or not value.strip():
        raise DomainValidationError(field, f"{field} is required")
    return value


def max_length(value: str | None, limit: int, field: str) -> None:
    """Reject strings longer than limit. The limit itself is valid."""
    if value is not None and len(value) > limit:
        raise DomainValidationError(
            field, f"{field} must be at most {limit} characters"
        )


def non_negative(value: int | Decimal, field: str) -> None:
    if value < 0:
        raise DomainValidationError(field, f"{field} cannot be negative")


def positive(value: int | Decimal, field: str) -> None:
    if value <= 0:
        raise DomainValidationError(field, f"{field} must be greater than zero")


def normalize_utc(value: datetime) -> datetime:
    """Return value as an aware UTC datetime.

    Naive datetimes are taken to already be in UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def to_utc_day(value: datetime | date) -> datetime:
    """Normalize to UTC and truncate to midnight.

    Plain dates are interpreted as UTC calendar days.
    """
    if not isinstance(value, datetime):
        return datetime.combine(value, time.min, tzinfo=UTC)
    utc_value = normalize_utc(value)
    return datetime.combine(utc_value.date(), time.min, tzinfo=UTC)


def not_in_future(value: datetime, now: datetime, field: str) -> None:
    """Reject instants after now."""
    if value > now:
        raise DomainValidationError(field, f"{field} cannot be in the future")


def day_not_in_future(value: datetime, now: datetime, field: str) -> None:
    """Reject calendar days after today (UTC). Today itself is valid."""
    if value.date() > now.astimezone(UTC).date():
        raise DomainValidationError(field, f"{field} cannot be in the future")


def member_of(enum_type: type[E], value: E | str, field: str) -> E:
    """Coerce value to a member of enum_type."""
    try:
        return enum_type(value)
    except ValueError as e:
        allowed = ", ".join(member.value for member in enum_type)
        raise DomainValidationError(
            field, f"{field} must be one of: {allowed}"
        ) from e
