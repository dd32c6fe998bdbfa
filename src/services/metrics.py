"""CloudWatch custom metrics emitter with background batching.

Publishes assistant health signals:

* per-call metrics (count, latency, errors) for the external services the
  assistant depends on (language-model provider, service catalog);
* ``Assistant/FallbackCount`` every time a caller receives a canned answer
  because the model backend was unavailable;
* ``Assistant/GuardrailBlockCount`` every time input is rejected by the
  safety filters.

Metrics are buffered in memory and flushed by a daemon thread every
``FLUSH_INTERVAL_SECONDS``.  When ``METRICS_ENABLED != "true"`` (local dev,
tests) data points are only logged at DEBUG level.

Usage
-----
>>> from src.services.metrics import metrics
>>> metrics.record_success("anthropic", "chat", latency_ms=812.0)
>>> metrics.record_fallback("suggest_services", locale="fr")
"""

from __future__ import annotations

import atexit
import logging
import os
import threading
import time
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

NAMESPACE = "ServicesAssistant"
FLUSH_INTERVAL_SECONDS = 60
MAX_BATCH_SIZE = 1_000  # CloudWatch API limit per PutMetricData call


def _datum(
    name: str,
    dimensions: dict[str, str],
    value: float = 1,
    unit: str = "Count",
) -> dict[str, Any]:
    return {
        "MetricName": name,
        "Dimensions": [{"Name": k, "Value": v} for k, v in dimensions.items()],
        "Timestamp": datetime.now(UTC),
        "Value": value,
        "Unit": unit,
    }


class MetricsClient:
    """Batched CloudWatch metrics publisher."""

    def __init__(self) -> None:
        self._enabled = os.getenv("METRICS_ENABLED", "false").lower() == "true"
        self._buffer: list[dict[str, Any]] = []
        self._lock = threading.Lock()
        self._cw_client = None  # lazy-init

        if self._enabled:
            self._start_flush_thread()

    def _get_cw_client(self):
        """Create the boto3 CloudWatch client on first use."""
        if self._cw_client is None:
            import boto3

            self._cw_client = boto3.client("cloudwatch")
        return self._cw_client

    # ── External calls ────────────────────────────────────────────────

    def record_success(self, service: str, operation: str, latency_ms: float) -> None:
        """Record a successful call to *service*."""
        self._append(
            _datum("ExternalAPI/RequestCount", {"Service": service, "Status": "success"}),
            _datum(
                "ExternalAPI/Latency",
                {"Service": service, "Operation": operation},
                latency_ms, "Milliseconds",
            ),
        )
        logger.debug("Metric: %s %s success latency=%.1fms", service, operation, latency_ms)

    def record_failure(
        self,
        service: str,
        operation: str,
        error_type: str,
        latency_ms: float = 0,
    ) -> None:
        """Record a failed call to *service*."""
        points = [
            _datum("ExternalAPI/RequestCount", {"Service": service, "Status": "failure"}),
            _datum("ExternalAPI/ErrorCount", {"Service": service, "ErrorType": error_type}),
        ]
        if latency_ms > 0:
            points.append(
                _datum(
                    "ExternalAPI/Latency",
                    {"Service": service, "Operation": operation},
                    latency_ms, "Milliseconds",
                )
            )
        self._append(*points)
        logger.debug(
            "Metric: %s %s failure error=%s latency=%.1fms",
            service, operation, error_type, latency_ms,
        )

    # ── Assistant behaviour ───────────────────────────────────────────

    def record_fallback(self, operation: str, locale: str) -> None:
        """Record that *operation* answered with a canned fallback."""
        self._append(
            _datum("Assistant/FallbackCount", {"Operation": operation, "Locale": locale}),
        )
        logger.debug("Metric: fallback operation=%s locale=%s", operation, locale)

    def record_guardrail_block(self, field: str) -> None:
        """Record an input rejected by the blocked-phrase filter."""
        self._append(_datum("Assistant/GuardrailBlockCount", {"Field": field}))
        logger.debug("Metric: guardrail block field=%s", field)

    # ── Flushing ──────────────────────────────────────────────────────

    def flush(self) -> int:
        """Send buffered metrics to CloudWatch.  Returns count sent."""
        with self._lock:
            if not self._buffer:
                return 0
            batch = self._buffer[:]
            self._buffer.clear()

        if not self._enabled:
            logger.debug("Metrics flush skipped (not enabled): %d items", len(batch))
            return 0

        sent = 0
        try:
            cw = self._get_cw_client()
            for i in range(0, len(batch), MAX_BATCH_SIZE):
                chunk = batch[i : i + MAX_BATCH_SIZE]
                cw.put_metric_data(Namespace=NAMESPACE, MetricData=chunk)
                sent += len(chunk)
            logger.info("Flushed %d metrics to CloudWatch", sent)
        except Exception:
            logger.exception("Failed to flush metrics to CloudWatch")
        return sent

    def _append(self, *points: dict[str, Any]) -> None:
        with self._lock:
            self._buffer.extend(points)

    def _start_flush_thread(self) -> None:
        """Start a daemon thread that flushes metrics periodically."""

        def _loop():
            while True:
                time.sleep(FLUSH_INTERVAL_SECONDS)
                try:
                    self.flush()
                except Exception:
                    logger.exception("Metrics flush thread error")

        t = threading.Thread(target=_loop, daemon=True, name="metrics-flush")
        t.start()
        atexit.register(self.flush)
        logger.info("Metrics flush thread started (interval=%ds)", FLUSH_INTERVAL_SECONDS)


# ── Module-level singleton ──────────────────────────────────────────
metrics = MetricsClient()
