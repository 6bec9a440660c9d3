"""Tests for tracing configuration."""

from unittest.mock import patch

from opentelemetry.sdk.trace import TracerProvider

from elastic_graph.observability.tracing import configure_tracing


class TestConfigureTracing:
    """Tests for configure_tracing setup."""

    def test_sets_tracer_provider(self) -> None:
        with patch("elastic_graph.observability.tracing.trace") as mock_trace:
            provider = configure_tracing(service_name="test-svc")
        assert isinstance(provider, TracerProvider)
        mock_trace.set_tracer_provider.assert_called_once_with(provider)

    def test_resource_carries_service_name(self) -> None:
        with patch("elastic_graph.observability.tracing.trace"):
            provider = configure_tracing(service_name="test-svc")
        assert provider.resource.attributes["service.name"] == "test-svc"

    def test_otlp_exporter_when_endpoint_set(self) -> None:
        with (
            patch("elastic_graph.observability.tracing.trace"),
            patch("elastic_graph.observability.tracing.OTLPSpanExporter") as mock_exporter,
            patch("elastic_graph.observability.tracing.BatchSpanProcessor") as mock_processor,
        ):
            configure_tracing(service_name="test-svc", otlp_endpoint="http://collector:4318/v1/traces")
            mock_exporter.assert_called_once_with(endpoint="http://collector:4318/v1/traces")
            mock_processor.assert_called_once_with(mock_exporter.return_value)

    def test_no_exporter_without_endpoint(self) -> None:
        with (
            patch("elastic_graph.observability.tracing.trace"),
            patch("elastic_graph.observability.tracing.OTLPSpanExporter") as mock_exporter,
        ):
            configure_tracing(service_name="test-svc")
            mock_exporter.assert_not_called()
