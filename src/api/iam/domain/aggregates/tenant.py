"""Tenant aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime

from iam.domain.value_objects import TenantId
from shared_kernel.validation import DomainValidationError, max_length, require_text

EXTERNAL_USER_ID_MAX_LENGTH = 255
EMAIL_MAX_LENGTH = 255


@dataclass
class Tenant:
    """Tenant aggregate representing one keeper's account.

    Tenants are the top-level isolation boundary in the system. Each tenant
    is linked to exactly one identity at the external identity provider,
    and every coop, flock, record and purchase belongs to one tenant.

    Business rules:
    - external_user_id is required and never changes
    - email is required, at most 255 characters, and contains "@"
    """

    id: TenantId
    external_user_id: str
    email: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def create(cls, external_user_id: str, email: str) -> Tenant:
        """Factory method for creating a new tenant.

        Args:
            external_user_id: Subject of the caller at the identity provider
            email: Contact email synchronized from the identity provider

        Returns:
            A new Tenant aggregate

        Raises:
            DomainValidationError: If either value is invalid
        """
        require_text(external_user_id, "external_user_id")
        require_text(email, "email")
        max_length(external_user_id, EXTERNAL_USER_ID_MAX_LENGTH, "external_user_id")
        _check_email(email)

        now = datetime.now(UTC)
        return cls(
            id=TenantId.generate(),
            external_user_id=external_user_id,
            email=email,
            created_at=now,
            updated_at=now,
        )

    def update_email(self, email: str) -> None:
        """Replace the tenant's email address.

        Raises:
            DomainValidationError: If the email is invalid
        """
        require_text(email, "email")
        _check_email(email)

        self.email = email
        self.updated_at = datetime.now(UTC)


def _check_email(email: str) -> None:
    max_length(email, EMAIL_MAX_LENGTH, "email")
    if "@" not in email:
        raise DomainValidationError("email", "email must be a valid email address")
