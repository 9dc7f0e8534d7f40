"""Value objects for the husbandry domain.

Value objects are immutable descriptors that provide type safety and
domain semantics for identifiers and domain concepts.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import ClassVar, TypeVar

from ulid import ULID

_IdT = TypeVar("_IdT", bound="_UlidId")


@dataclass(frozen=True)
class _UlidId:
    """Base for ULID-backed aggregate identifiers."""

    value: str

    _label: ClassVar[str] = "Id"

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls: type[_IdT]) -> _IdT:
        """Generate a new identifier using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls: type[_IdT], value: str) -> _IdT:
        """Create an identifier from its string value.

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid {cls._label}: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class CoopId(_UlidId):
    """Identifier for a Coop aggregate."""

    _label: ClassVar[str] = "CoopId"


@dataclass(frozen=True)
class FlockId(_UlidId):
    """Identifier for a Flock aggregate."""

    _label: ClassVar[str] = "FlockId"


@dataclass(frozen=True)
class FlockHistoryId(_UlidId):
    """Identifier for a single composition history entry."""

    _label: ClassVar[str] = "FlockHistoryId"


@dataclass(frozen=True)
class DailyRecordId(_UlidId):
    """Identifier for a DailyRecord aggregate."""

    _label: ClassVar[str] = "DailyRecordId"


@dataclass(frozen=True)
class PurchaseId(_UlidId):
    """Identifier for a Purchase aggregate."""

    _label: ClassVar[str] = "PurchaseId"


class PurchaseType(StrEnum):
    """What a purchase was spent on."""

    FEED = "feed"
    VITAMINS = "vitamins"
    BEDDING = "bedding"
    TOYS = "toys"
    VETERINARY = "veterinary"
    OTHER = "other"


class QuantityUnit(StrEnum):
    """Unit in which a purchased quantity is measured."""

    KG = "kg"
    PCS = "pcs"
    L = "l"
    PACKAGE = "package"
    OTHER = "other"


class CompositionReason(StrEnum):
    """Well-known reasons for a flock composition change.

    History entries accept any reason text; these are the ones the
    application itself writes or suggests.
    """

    INITIAL = "Initial"
    PURCHASE = "Purchase"
    DEATH = "Death"
    SALE = "Sale"
    MATURATION = "Maturation"
