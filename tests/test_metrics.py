"""Tests for the CloudWatch metrics client."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from src.services.metrics import NAMESPACE, MetricsClient


def _make_client(*, enabled: bool = False) -> MetricsClient:
    with patch.dict("os.environ", {"METRICS_ENABLED": str(enabled).lower()}):
        return MetricsClient()


def _dimensions(datum: dict) -> dict[str, str]:
    return {d["Name"]: d["Value"] for d in datum["Dimensions"]}


class TestExternalCallMetrics:
    """Verify that record_success / record_failure buffer the right data."""

    def test_record_success_appends_two_data_points(self):
        client = _make_client()
        client.record_success("catalog", "GET /services", latency_ms=123.4)
        names = {m["MetricName"] for m in client._buffer}
        assert names == {"ExternalAPI/RequestCount", "ExternalAPI/Latency"}

    def test_record_failure_appends_count_and_error(self):
        client = _make_client()
        client.record_failure("anthropic", "chat", error_type="TimeoutError")
        names = {m["MetricName"] for m in client._buffer}
        assert names == {"ExternalAPI/RequestCount", "ExternalAPI/ErrorCount"}

    def test_record_failure_with_latency_appends_three_data_points(self):
        client = _make_client()
        client.record_failure("catalog", "GET /services", error_type="503", latency_ms=500.0)
        assert len(client._buffer) == 3

    def test_success_dimensions_include_service_and_status(self):
        client = _make_client()
        client.record_success("catalog", "GET /services", latency_ms=50.0)
        count_metric = next(
            m for m in client._buffer if m["MetricName"] == "ExternalAPI/RequestCount"
        )
        assert _dimensions(count_metric) == {"Service": "catalog", "Status": "success"}


class TestAssistantMetrics:
    def test_record_fallback(self):
        client = _make_client()
        client.record_fallback("suggest_services", "fr")
        (datum,) = client._buffer
        assert datum["MetricName"] == "Assistant/FallbackCount"
        assert _dimensions(datum) == {"Operation": "suggest_services", "Locale": "fr"}
        assert datum["Value"] == 1

    def test_record_guardrail_block(self):
        client = _make_client()
        client.record_guardrail_block("documentSummary")
        (datum,) = client._buffer
        assert datum["MetricName"] == "Assistant/GuardrailBlockCount"
        assert _dimensions(datum) == {"Field": "documentSummary"}


class TestMetricsFlush:
    """Verify flush behaviour with and without CloudWatch enabled."""

    def test_flush_when_disabled_clears_buffer_without_sending(self):
        client = _make_client()
        client.record_fallback("chat", "en")
        assert client.flush() == 0
        assert client._buffer == []

    def test_flush_when_enabled_calls_put_metric_data(self):
        with patch.object(MetricsClient, "_start_flush_thread"):
            client = _make_client(enabled=True)
        mock_cw = MagicMock()
        client._cw_client = mock_cw

        client.record_success("anthropic", "chat", latency_ms=100.0)
        sent = client.flush()

        assert sent == 2
        call_args = mock_cw.put_metric_data.call_args
        assert call_args.kwargs["Namespace"] == NAMESPACE == "ServicesAssistant"
        assert len(call_args.kwargs["MetricData"]) == 2

    def test_flush_swallows_cloudwatch_errors(self):
        with patch.object(MetricsClient, "_start_flush_thread"):
            client = _make_client(enabled=True)
        client._cw_client = MagicMock()
        client._cw_client.put_metric_data.side_effect = RuntimeError("throttled")

        client.record_guardrail_block("message")
        assert client.flush() == 0

    def test_flush_empty_buffer_returns_zero(self):
        assert _make_client().flush() == 0
