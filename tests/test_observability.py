"""Tests for the observability module."""

import logging
from unittest.mock import patch

import pytest
import structlog
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.sampling import ParentBasedTraceIdRatio

from src.config import Settings
from src.infrastructure.observability import (
    add_span_attributes,
    add_trace_context,
    get_tracer,
    init_observability,
    init_observability_from_settings,
    shutdown_observability,
    traced,
)
from src.infrastructure.observability import setup as observability_setup


@pytest.fixture
def restore_logging():
    """Undo global structlog, logging and tracer state after a test."""
    root = logging.getLogger()
    level = root.level
    yield
    shutdown_observability()
    structlog.reset_defaults()
    root.setLevel(level)


class TestTracedDecorator:
    """Tests for the @traced decorator."""

    def test_sync_function_creates_span(self, span_exporter):
        """A traced sync function should run inside a span."""

        @traced
        def describe():
            return "result"

        assert describe() == "result"
        spans = span_exporter.get_finished_spans()
        assert len(spans) == 1
        assert spans[0].name.endswith("describe")
        assert spans[0].status.status_code == trace.StatusCode.OK

    @pytest.mark.asyncio
    async def test_async_function_creates_named_span(self, span_exporter):
        """A traced coroutine should use the custom span name and attributes."""

        @traced(span_name="qdrant_node.test", attributes={"node": "qdrantAdvanced"})
        async def execute():
            return "async_result"

        assert await execute() == "async_result"
        spans = span_exporter.get_finished_spans()
        assert len(spans) == 1
        assert spans[0].name == "qdrant_node.test"
        assert dict(spans[0].attributes or {})["node"] == "qdrantAdvanced"

    @pytest.mark.asyncio
    async def test_exception_sets_error_status(self, span_exporter):
        """Failures should be recorded and re-raised."""

        @traced(span_name="failing")
        async def fail():
            raise ValueError("test error")

        with pytest.raises(ValueError, match="test error"):
            await fail()

        spans = span_exporter.get_finished_spans()
        assert len(spans) == 1
        assert spans[0].status.status_code == trace.StatusCode.ERROR
        assert len(spans[0].events) == 1
        assert spans[0].events[0].name == "exception"

    def test_exception_recording_can_be_disabled(self, span_exporter):
        """record_exception=False should keep the status but skip the event."""

        @traced(span_name="quiet", record_exception=False)
        def fail():
            raise RuntimeError("quiet")

        with pytest.raises(RuntimeError):
            fail()

        span = span_exporter.get_finished_spans()[0]
        assert span.status.status_code == trace.StatusCode.ERROR
        assert len(span.events) == 0


class TestAddSpanAttributes:
    """Tests for add_span_attributes()."""

    def test_adds_attributes_to_current_span(self, span_exporter):
        """Attributes should land on the active span."""
        tracer = get_tracer("test")

        with tracer.start_as_current_span("test_span"):
            add_span_attributes({"qdrant.collection": "docs", "count": 3})

        attrs = dict(span_exporter.get_finished_spans()[0].attributes or {})
        assert attrs["qdrant.collection"] == "docs"
        assert attrs["count"] == 3

    def test_does_nothing_without_active_span(self):
        """Calling outside a span should not fail."""
        add_span_attributes({"key": "value"})


class TestStructlogProcessor:
    """Tests for the structlog trace context processor."""

    def test_adds_trace_context_when_in_span(self, span_exporter):
        """Events inside a span should get trace and span IDs."""
        tracer = get_tracer("test")

        with tracer.start_as_current_span("test_span"):
            result = add_trace_context(None, "info", {"event": "test_event"})

        assert len(result["trace_id"]) == 32
        assert len(result["span_id"]) == 16

    def test_leaves_event_alone_without_span(self):
        """Events outside a span should pass through unchanged."""
        result = add_trace_context(None, "info", {"event": "test_event"})

        assert result == {"event": "test_event"}


class TestInitFromSettings:
    """Tests for init_observability_from_settings()."""

    def test_passes_settings_through(self):
        """Settings values should be forwarded to init_observability."""
        settings = Settings(
            _env_file=None,
            otel_enabled=True,
            otel_endpoint="http://collector:4318",
            otel_sample_rate=0.5,
            log_level="WARNING",
        )

        with patch(
            "src.infrastructure.observability.setup.init_observability"
        ) as init:
            init_observability_from_settings(settings)

        init.assert_called_once_with(
            "qdrant-advanced",
            "0.1.0",
            otlp_endpoint="http://collector:4318",
            console_export=False,
            enabled=True,
            sample_rate=0.5,
            log_level="WARNING",
        )

    def test_debug_forces_debug_logging(self):
        """Debug mode should lower the log level."""
        settings = Settings(_env_file=None, debug=True)

        with patch(
            "src.infrastructure.observability.setup.init_observability"
        ) as init:
            init_observability_from_settings(settings)

        assert init.call_args.kwargs["log_level"] == "DEBUG"


class TestInitObservability:
    """Tests for init_observability() and shutdown_observability()."""

    def test_disabled_tracing_still_configures_logging(self, restore_logging):
        """Disabled tracing should install a no-op provider and JSON logging."""
        with patch("opentelemetry.trace.set_tracer_provider") as set_provider:
            init_observability(
                "qdrant-advanced", "0.1.0", enabled=False, log_level="WARNING"
            )

        assert structlog.is_configured()
        processors = structlog.get_config()["processors"]
        assert add_trace_context in processors
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)
        assert logging.getLogger().level == logging.WARNING
        assert isinstance(set_provider.call_args.args[0], trace.NoOpTracerProvider)
        assert observability_setup._tracer_provider is None

    def test_second_call_is_ignored(self, restore_logging):
        """Initialization should only happen once until shutdown."""
        with patch("opentelemetry.trace.set_tracer_provider") as set_provider:
            init_observability("qdrant-advanced", "0.1.0", enabled=False)
            init_observability("qdrant-advanced", "0.1.0", enabled=False)

        set_provider.assert_called_once()

    def test_unknown_log_level_falls_back_to_info(self, restore_logging):
        """An unrecognized level name should mean INFO."""
        with patch("opentelemetry.trace.set_tracer_provider"):
            init_observability(
                "qdrant-advanced", "0.1.0", enabled=False, log_level="chatty"
            )

        assert logging.getLogger().level == logging.INFO

    def test_enabled_tracing_builds_provider_and_exporters(self, restore_logging):
        """Enabled tracing should wire exporters and instrument httpx."""
        with (
            patch("opentelemetry.trace.set_tracer_provider") as set_provider,
            patch.object(observability_setup, "OTLPSpanExporter") as otlp,
            patch.object(observability_setup, "HTTPXClientInstrumentor") as httpx,
        ):
            init_observability(
                "qdrant-advanced",
                "0.1.0",
                otlp_endpoint="http://collector:4318",
                console_export=True,
                sample_rate=0.25,
            )

        provider = set_provider.call_args.args[0]
        assert isinstance(provider, TracerProvider)
        assert provider is observability_setup._tracer_provider
        assert provider.resource.attributes["service.name"] == "qdrant-advanced"
        assert provider.resource.attributes["service.version"] == "0.1.0"
        assert isinstance(provider.sampler, ParentBasedTraceIdRatio)
        otlp.assert_called_once_with(endpoint="http://collector:4318/v1/traces")
        httpx.return_value.instrument.assert_called_once_with()

        with patch.object(provider, "shutdown", wraps=provider.shutdown) as shutdown:
            shutdown_observability()

        shutdown.assert_called_once_with()
        assert observability_setup._tracer_provider is None
        assert observability_setup._initialized is False
