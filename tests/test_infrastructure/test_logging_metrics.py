"""
Test infrastructure components: logging, metrics, retry, timeout, metrics server.

These tests verify the ambient infrastructure around the pipeline works.
"""

import time

import pytest
from prometheus_client import REGISTRY

from tender_award.kernel.logging import (
    LogOperation,
    configure_logging,
    get_logger,
    get_run_id,
    redact_context,
    set_run_id,
)
from tender_award.kernel.metrics import (
    PIPELINE_STAGES,
    initialize_stage_labels,
    track_stage_duration,
    unknown_price_lookups_total,
)
from tender_award.kernel.retry import retry_on_transient_error
from tender_award.kernel.timeout import TimeoutError, call_with_timeout, with_timeout
from tender_award.metrics_server import build_parser, main, metric_families
from tender_award.quantities.boq import build_boq
from tests.helpers import make_element


class TestLoggingFramework:
    """Test structured logging framework."""

    def test_configure_logging_console(self) -> None:
        """Test logging configuration for console output."""
        configure_logging(json_output=False, log_level="INFO")
        logger = get_logger(__name__)
        assert logger is not None

    def test_configure_logging_json(self) -> None:
        """Test logging configuration for JSON output."""
        configure_logging(json_output=True, log_level="DEBUG")
        logger = get_logger(__name__)
        assert logger is not None

    def test_run_id(self) -> None:
        """Test run id context management."""
        rid = get_run_id()
        assert rid is not None
        assert len(rid) > 0

        set_run_id("run-123")
        assert get_run_id() == "run-123"

    def test_redact_context_hides_prices(self) -> None:
        """Test bid prices and revenue never reach the logs."""
        redacted = redact_context({"base_price": "1000", "annual_revenue": 5, "plans": 8})

        assert redacted["base_price"] == "***REDACTED***"
        assert redacted["annual_revenue"] == "***REDACTED***"
        assert redacted["plans"] == 8

    def test_log_operation_context_manager(self) -> None:
        """Test LogOperation context manager records duration."""
        configure_logging(json_output=False, log_level="INFO")
        logger = get_logger(__name__)

        with LogOperation(logger, "test_operation", foo="bar") as op:
            pass

        assert op.duration_seconds >= 0

    def test_log_operation_with_exception(self) -> None:
        """Test LogOperation re-raises after logging the failure."""
        configure_logging(json_output=False, log_level="INFO")
        logger = get_logger(__name__)

        with pytest.raises(ValueError):
            with LogOperation(logger, "failing_operation"):
                raise ValueError("Test error")


class TestMetrics:
    """Test Prometheus metrics collection."""

    def test_unknown_price_lookup_metric(self) -> None:
        """Test unknown_price_lookups_total is incremented for default-priced keys."""
        before = unknown_price_lookups_total.labels(category="400")._value.get()

        build_boq([make_element("sensor", "co2_sensor", "mep", quantity=3)])

        after = unknown_price_lookups_total.labels(category="400")._value.get()
        assert after == before + 1

    def test_track_stage_duration(self) -> None:
        """Test stage durations are observed even when the stage raises."""

        @track_stage_duration("test_stage")
        def failing_stage() -> None:
            raise RuntimeError("boom")

        sample = "tender_award_stage_duration_seconds_count"
        before = REGISTRY.get_sample_value(sample, {"stage": "test_stage"}) or 0.0
        with pytest.raises(RuntimeError):
            failing_stage()

        after = REGISTRY.get_sample_value(sample, {"stage": "test_stage"})
        assert after == before + 1

    def test_metrics_server_arguments(self) -> None:
        """Test metrics server CLI defaults."""
        args = build_parser().parse_args([])
        assert args.port == 9090
        assert args.log_level == "INFO"
        assert args.json_logs is False

        args = build_parser().parse_args(["--port", "9100", "--json-logs"])
        assert args.port == 9100
        assert args.json_logs is True
        assert args.list is False

    def test_stage_histogram_exported_before_first_run(self) -> None:
        """Test every pipeline stage has a duration series once labels are initialized."""
        initialize_stage_labels()

        for stage in PIPELINE_STAGES:
            count = REGISTRY.get_sample_value(
                "tender_award_stage_duration_seconds_count", {"stage": stage}
            )
            assert count is not None

    def test_metric_families_lists_project_metrics(self) -> None:
        """Test only tender-award families are listed, with type and help text."""
        families = {name: (kind, doc) for name, kind, doc in metric_families()}

        assert families["tender_award_stage_duration_seconds"] == (
            "histogram",
            "Duration of one pipeline stage in seconds",
        )
        assert families["tender_award_analyzer_fallbacks"][0] == "counter"
        assert "tender_award_bids_rejected" in families
        assert all(name.startswith("tender_award_") for name in families)

    def test_list_prints_metric_families(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test --list prints the families and stages without starting a server."""
        main(["--list", "--log-level", "WARNING"])

        out = capsys.readouterr().out
        assert "tender_award_stage_duration_seconds [histogram]" in out
        assert "tender_award_unknown_price_lookups [counter]" in out
        assert "Stages: catalogs, din277, boq, bids, compliance, evaluate, award" in out


class TestRetry:
    """Test transient-error retry."""

    def test_retry_succeeds_after_transient_errors(self) -> None:
        """Test a call succeeding on the third attempt."""
        calls = []

        @retry_on_transient_error(max_attempts=3, min_wait_ms=1, max_wait_ms=2)
        def flaky() -> str:
            calls.append(1)
            if len(calls) < 3:
                raise ConnectionError("connection reset")
            return "ok"

        assert flaky() == "ok"
        assert len(calls) == 3

    def test_retry_gives_up_and_reraises(self) -> None:
        """Test the last transient error surfaces once attempts run out."""
        calls = []

        @retry_on_transient_error(max_attempts=2, min_wait_ms=1, max_wait_ms=2)
        def always_down() -> None:
            calls.append(1)
            raise ConnectionError("service down")

        with pytest.raises(ConnectionError):
            always_down()
        assert len(calls) == 2

    def test_non_transient_errors_not_retried(self) -> None:
        """Test ValueError fails on the first attempt."""
        calls = []

        @retry_on_transient_error(max_attempts=3, min_wait_ms=1, max_wait_ms=2)
        def broken() -> None:
            calls.append(1)
            raise ValueError("bad input")

        with pytest.raises(ValueError):
            broken()
        assert len(calls) == 1


class TestTimeout:
    """Test bounded calls."""

    def test_call_within_timeout(self) -> None:
        """Test a fast call returns its result."""
        assert call_with_timeout(lambda x: x * 2, 21, seconds=1.0) == 42

    def test_call_exceeding_timeout(self) -> None:
        """Test a slow call raises TimeoutError."""
        with pytest.raises(TimeoutError, match="slow_call exceeded timeout"):
            call_with_timeout(time.sleep, 1.0, seconds=0.05, operation_name="slow_call")

    def test_exceptions_pass_through(self) -> None:
        """Test exceptions of the wrapped call surface unchanged."""

        def broken() -> None:
            raise KeyError("missing")

        with pytest.raises(KeyError):
            call_with_timeout(broken, seconds=1.0)

    def test_with_timeout_decorator(self) -> None:
        """Test decorator form."""

        @with_timeout(0.05, "decorated_sleep")
        def slow() -> None:
            time.sleep(1.0)

        @with_timeout(1.0, "decorated_add")
        def add(a: int, b: int) -> int:
            return a + b

        assert add(2, b=3) == 5
        with pytest.raises(TimeoutError):
            slow()
