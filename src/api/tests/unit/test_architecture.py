"""Architecture tests using pytest-archon.

These tests enforce DDD architectural boundaries between layers
within the Husbandry bounded context.
"""

from pytest_archon import archrule


class TestHusbandryDomainLayerBoundaries:
    """Tests that the domain layer has no forbidden dependencies."""

    def test_domain_does_not_import_infrastructure(self):
        """Domain layer should not depend on infrastructure.

        Aggregates hold business rules only and should not know about
        SQL, sessions or row-level security.
        """
        (
            archrule("domain_no_infrastructure")
            .match("husbandry.domain*")
            .should_not_import("husbandry.infrastructure*", "infrastructure*")
            .check("husbandry")
        )

    def test_domain_does_not_import_application(self):
        """Domain objects should be usable without application services."""
        (
            archrule("domain_no_application")
            .match("husbandry.domain*")
            .should_not_import("husbandry.application*")
            .check("husbandry")
        )

    def test_domain_does_not_import_sqlalchemy(self):
        (
            archrule("domain_no_sqlalchemy")
            .match("husbandry.domain*")
            .should_not_import("sqlalchemy*", "asyncpg*")
            .check("husbandry")
        )


class TestHusbandryPortsLayerBoundaries:
    def test_ports_does_not_import_infrastructure(self):
        """Ports define repository protocols, not their implementations."""
        (
            archrule("ports_no_infrastructure")
            .match("husbandry.ports*")
            .should_not_import("husbandry.infrastructure*", "sqlalchemy*")
            .check("husbandry")
        )


class TestHusbandryApplicationLayerBoundaries:
    def test_application_does_not_import_infrastructure(self):
        """Services receive repositories through their ports."""
        (
            archrule("application_no_infrastructure")
            .match("husbandry.application*")
            .should_not_import("husbandry.infrastructure*")
            .check("husbandry")
        )


class TestSharedKernelBoundaries:
    def test_shared_kernel_does_not_import_bounded_contexts(self):
        (
            archrule("shared_kernel_independent")
            .match("shared_kernel*")
            .should_not_import("husbandry*", "iam*", "infrastructure*")
            .check("shared_kernel")
        )
