"""Tests for structured log enrichment with OTel context."""

import json
import logging

from opentelemetry.sdk.trace import TracerProvider

from elastic_graph.logging import OTelContextFilter, configure_logging


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname="",
        lineno=0,
        msg="test",
        args=(),
        exc_info=None,
    )


class TestOTelContextFilter:
    """Tests for OTel context log filter."""

    def test_filter_adds_service_field(self) -> None:
        record = _record()
        assert OTelContextFilter(service_name="elastic-graph").filter(record) is True
        assert record.service == "elastic-graph"  # type: ignore[attr-defined]

    def test_filter_adds_empty_ids_without_span(self) -> None:
        record = _record()
        OTelContextFilter(service_name="elastic-graph").filter(record)
        assert record.trace_id == ""  # type: ignore[attr-defined]
        assert record.span_id == ""  # type: ignore[attr-defined]

    def test_filter_adds_ids_with_active_span(self) -> None:
        tracer = TracerProvider().get_tracer("test")
        record = _record()
        with tracer.start_as_current_span("element_service.get"):
            OTelContextFilter(service_name="elastic-graph").filter(record)
        assert len(record.trace_id) == 32  # type: ignore[attr-defined]
        assert len(record.span_id) == 16  # type: ignore[attr-defined]


class TestConfigureLogging:
    def test_installs_json_handler(self, capsys) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging(level="debug", service_name="graph-test")
            assert root.level == logging.DEBUG
            logging.getLogger("elastic_graph.test").info("store.ready", extra={"index": "graph"})
            line = capsys.readouterr().out.strip().splitlines()[-1]
            payload = json.loads(line)
            assert payload["message"] == "store.ready"
            assert payload["service"] == "graph-test"
            assert payload["index"] == "graph"
        finally:
            root.handlers = saved_handlers
            root.setLevel(saved_level)
