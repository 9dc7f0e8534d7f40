"""Unit tests for domain probes.

Tests that domain probes correctly capture domain events
following the Domain Oriented Observability pattern.
"""

from unittest.mock import MagicMock

import structlog

from husbandry.application.observability import DefaultHusbandryServiceProbe
from husbandry.infrastructure.observability import DefaultHusbandryRepositoryProbe
from iam.application.observability import DefaultTenantServiceProbe
from iam.infrastructure.observability import DefaultTenantRepositoryProbe
from infrastructure.observability import DefaultConnectionProbe, ObservationContext
from shared_kernel.tenancy.observability import DefaultTenantContextProbe


def _logger() -> MagicMock:
    return MagicMock(spec=structlog.stdlib.BoundLogger)


class TestConnectionProbe:
    """Tests for ConnectionProbe protocol and implementation."""

    def test_default_probe_creates_with_default_logger(self):
        probe = DefaultConnectionProbe()
        assert probe._logger is not None

    def test_default_probe_accepts_custom_logger(self):
        mock_logger = _logger()
        probe = DefaultConnectionProbe(logger=mock_logger)
        assert probe._logger is mock_logger

    def test_pool_initialized_logs_info(self):
        mock_logger = _logger()
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.pool_initialized(host="localhost", database="henhouse", max_conn=10)

        mock_logger.info.assert_called_once_with(
            "connection_pool_initialized",
            host="localhost",
            database="henhouse",
            max_connections=10,
        )

    def test_tenant_binding_logs_debug(self):
        mock_logger = _logger()
        probe = DefaultConnectionProbe(logger=mock_logger)

        probe.tenant_bound_to_transaction("01HTENANT")

        mock_logger.debug.assert_called_once_with(
            "transaction_tenant_bound", tenant_id="01HTENANT"
        )


class TestHusbandryRepositoryProbe:
    def test_event_names_carry_the_aggregate(self):
        mock_logger = _logger()
        probe = DefaultHusbandryRepositoryProbe(logger=mock_logger)

        probe.aggregate_saved("flock", "01HFLOCK", "01HTENANT")

        mock_logger.info.assert_called_once_with(
            "flock_saved", aggregate_id="01HFLOCK", tenant_id="01HTENANT"
        )

    def test_history_appended_logs_count(self):
        mock_logger = _logger()
        probe = DefaultHusbandryRepositoryProbe(logger=mock_logger)

        probe.history_appended("01HFLOCK", 2)

        mock_logger.info.assert_called_once_with(
            "flock_history_appended", flock_id="01HFLOCK", count=2
        )

    def test_reads_log_at_debug(self):
        mock_logger = _logger()
        probe = DefaultHusbandryRepositoryProbe(logger=mock_logger)

        probe.aggregate_retrieved("coop", "01HCOOP")
        probe.aggregates_listed("coop", 3)

        assert mock_logger.debug.call_count == 2
        mock_logger.info.assert_not_called()


    def test_statistics_computed_logs_debug(self):
        mock_logger = _logger()
        probe = DefaultHusbandryRepositoryProbe(logger=mock_logger)

        probe.statistics_computed("dashboard", 2)

        mock_logger.debug.assert_called_once_with(
            "statistics_computed", report="dashboard", rows=2
        )


class TestHusbandryServiceProbe:
    def test_access_denied_logs_warning(self):
        mock_logger = _logger()
        probe = DefaultHusbandryServiceProbe(logger=mock_logger)

        probe.access_denied("create_coop", reason="unauthenticated")

        mock_logger.warning.assert_called_once_with(
            "husbandry_access_denied",
            operation="create_coop",
            reason="unauthenticated",
        )

    def test_composition_changed_logs_counts(self):
        mock_logger = _logger()
        probe = DefaultHusbandryServiceProbe(logger=mock_logger)

        probe.composition_changed(
            flock_id="01HFLOCK",
            reason="Sale",
            hens=8,
            roosters=1,
            chicks=0,
            history_length=4,
        )

        mock_logger.info.assert_called_once_with(
            "flock_composition_changed",
            flock_id="01HFLOCK",
            reason="Sale",
            hens=8,
            roosters=1,
            chicks=0,
            history_length=4,
        )

    def test_operation_failed_logs_error_type(self):
        mock_logger = _logger()
        probe = DefaultHusbandryServiceProbe(logger=mock_logger)

        probe.operation_failed("list_coops", ValueError("bad"))

        mock_logger.error.assert_called_once_with(
            "husbandry_operation_failed",
            operation="list_coops",
            error="bad",
            error_type="ValueError",
        )

    def test_with_context_adds_request_metadata(self):
        mock_logger = _logger()
        probe = DefaultHusbandryServiceProbe(logger=mock_logger).with_context(
            ObservationContext(request_id="req-1", tenant_id="01HTENANT")
        )

        probe.aggregate_deleted("purchase", "01HPURCHASE")

        kwargs = mock_logger.info.call_args.kwargs
        assert kwargs["request_id"] == "req-1"
        assert kwargs["tenant_id"] == "01HTENANT"
        assert kwargs["aggregate_id"] == "01HPURCHASE"


class TestTenantProbes:
    def test_tenant_created_logs_info(self):
        mock_logger = _logger()
        probe = DefaultTenantServiceProbe(logger=mock_logger)

        probe.tenant_created("01HTENANT", "auth0|abc")

        mock_logger.info.assert_called_once_with(
            "tenant_created", tenant_id="01HTENANT", external_user_id="auth0|abc"
        )

    def test_tenant_sync_failed_logs_error(self):
        mock_logger = _logger()
        probe = DefaultTenantServiceProbe(logger=mock_logger)

        probe.tenant_sync_failed("auth0|abc", RuntimeError("down"))

        mock_logger.error.assert_called_once_with(
            "tenant_sync_failed",
            external_user_id="auth0|abc",
            error="down",
            error_type="RuntimeError",
        )

    def test_tenant_not_provisioned_logs_warning(self):
        mock_logger = _logger()
        probe = DefaultTenantContextProbe(logger=mock_logger)

        probe.tenant_not_provisioned(user_id="auth0|new")

        assert mock_logger.warning.call_args.args == ("tenant_context_not_provisioned",)
        assert mock_logger.warning.call_args.kwargs["user_id"] == "auth0|new"

    def test_tenant_identity_exposure_logs_debug(self):
        mock_logger = _logger()
        probe = DefaultTenantRepositoryProbe(logger=mock_logger)

        probe.identity_exposed("auth0|abc")

        mock_logger.debug.assert_called_once_with(
            "tenant_identity_exposed", external_user_id="auth0|abc"
        )

    def test_tenant_insert_logs_info_with_context(self):
        mock_logger = _logger()
        probe = DefaultTenantRepositoryProbe(logger=mock_logger).with_context(
            ObservationContext(request_id="req-9")
        )

        probe.tenant_inserted("01HTENANT")

        mock_logger.info.assert_called_once_with(
            "tenant_inserted", tenant_id="01HTENANT", request_id="req-9"
        )
