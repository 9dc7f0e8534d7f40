"""Tenant application service for IAM bounded context.

Keeps the tenants table in step with the external identity provider.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from iam.application.observability import DefaultTenantServiceProbe, TenantServiceProbe
from iam.domain.aggregates import Tenant
from iam.ports.repositories import ITenantRepository
from shared_kernel.result import Error, Result
from shared_kernel.validation import DomainValidationError


class TenantService:
    """Application service for tenant provisioning.

    Each identity at the external provider owns exactly one tenant. The
    tenant is created the first time the identity is seen; later syncs only
    refresh the email address.
    """

    def __init__(
        self,
        tenant_repository: ITenantRepository,
        session: AsyncSession,
        probe: TenantServiceProbe | None = None,
    ):
        """Initialize TenantService with dependencies.

        Args:
            tenant_repository: Repository for tenant persistence
            session: Database session for transaction management
            probe: Optional domain probe for observability
        """
        self._tenant_repository = tenant_repository
        self._session = session
        self._probe = probe or DefaultTenantServiceProbe()

    async def sync_tenant(self, external_user_id: str, email: str) -> Result[Tenant]:
        """Create the tenant for an identity, or update its email.

        Args:
            external_user_id: Subject of the identity at the provider
            email: Current email address reported by the provider

        Returns:
            The created or updated tenant, a Validation failure for invalid
            identity data, or a generic Failure
        """
        created = False
        email_changed = False
        try:
            async with self._session.begin():
                tenant = await self._tenant_repository.get_by_external_user_id(
                    external_user_id
                )
                if tenant is None:
                    tenant = Tenant.create(
                        external_user_id=external_user_id, email=email
                    )
                    await self._tenant_repository.add(tenant)
                    created = True
                elif tenant.email != email:
                    tenant.update_email(email)
                    await self._tenant_repository.save(tenant)
                    email_changed = True
        except DomainValidationError as e:
            self._probe.tenant_sync_rejected(external_user_id, e.field)
            return Result.failure(Error.from_validation(e))
        except Exception as e:
            self._probe.tenant_sync_failed(external_user_id, e)
            return Result.failure(Error.failure())

        if created:
            self._probe.tenant_created(tenant.id.value, external_user_id)
        elif email_changed:
            self._probe.tenant_email_updated(tenant.id.value)
        return Result.success(tenant)
