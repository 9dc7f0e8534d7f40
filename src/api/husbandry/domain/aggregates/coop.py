"""Coop aggregate for the husbandry context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from husbandry.domain.value_objects import CoopId
from shared_kernel.tenancy import TenantId
from shared_kernel.validation import max_length, require_text

NAME_MAX_LENGTH = 100
LOCATION_MAX_LENGTH = 200


@dataclass
class Coop:
    """A coop housing one or more flocks.

    Business rules:
    - Name is required, at most 100 characters
    - Location is optional, at most 200 characters
    - Coops are created active; deactivation never removes flocks
    - Deletion is only allowed while the coop has no flocks, which the
      application service checks before deleting

    Direct construction performs no validation so that persisted coops can
    be reconstituted as-is. Use create() for new coops.
    """

    id: CoopId
    tenant_id: TenantId
    name: str
    location: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(
        cls,
        tenant_id: TenantId,
        name: str,
        location: str | None = None,
    ) -> Coop:
        """Factory method for creating a new, active coop.

        Raises:
            DomainValidationError: If name or location is invalid
        """
        _validate(name, location)

        now = datetime.now(UTC)
        return cls(
            id=CoopId.generate(),
            tenant_id=tenant_id,
            name=name,
            location=location,
            is_active=True,
            created_at=now,
            updated_at=now,
        )

    def update(self, name: str, location: str | None = None) -> None:
        """Rename and relocate the coop.

        Raises:
            DomainValidationError: If name or location is invalid
        """
        _validate(name, location)

        self.name = name
        self.location = location
        self.updated_at = datetime.now(UTC)

    def deactivate(self) -> None:
        """Mark the coop inactive."""
        self.is_active = False
        self.updated_at = datetime.now(UTC)

    def activate(self) -> None:
        """Mark the coop active again."""
        self.is_active = True
        self.updated_at = datetime.now(UTC)


def _validate(name: str, location: str | None) -> None:
    require_text(name, "name")
    max_length(name, NAME_MAX_LENGTH, "name")
    max_length(location, LOCATION_MAX_LENGTH, "location")
