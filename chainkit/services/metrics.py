"""Remote-call metrics for OpenAI and Textract, published to CloudWatch.

Every HTTP request in :mod:`chainkit.services.openai_client` and every
Textract call reports here under the ``Chainkit`` namespace:

``RemoteCall/RequestCount``  dimensions Service, Status
``RemoteCall/Latency``       dimensions Service, Operation
``RemoteCall/ErrorCount``    dimensions Service, ErrorType

Publishing is opt-in (``METRICS_ENABLED=true``).  Otherwise points are only
logged at DEBUG and discarded on flush, so importing the library never needs
AWS credentials.  When enabled, a daemon thread flushes once a minute in
batches of at most 1 000 points, and once more at interpreter exit.

Usage
-----
>>> from chainkit.services.metrics import metrics
>>> metrics.record_success("openai", "POST /chat/completions", latency_ms=812.0)
>>> with metrics.timed("textract", "start_document_text_detection"):
...     client.start_document_text_detection(...)
"""

from __future__ import annotations

import atexit
import logging
import os
import threading
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

NAMESPACE = "Chainkit"
FLUSH_INTERVAL_SECONDS = 60
MAX_BATCH_SIZE = 1_000  # CloudWatch API limit per PutMetricData call
MAX_BUFFERED = 10_000  # oldest points are dropped beyond this
METRIC_PREFIX = "RemoteCall/"


def _point(name: str, timestamp: datetime, value: float, unit: str, **dimensions: str) -> dict[str, Any]:
    """One ``MetricData`` entry; dimensions keep keyword order."""
    return {
        "MetricName": METRIC_PREFIX + name,
        "Dimensions": [{"Name": k, "Value": v} for k, v in dimensions.items()],
        "Timestamp": timestamp,
        "Value": value,
        "Unit": unit,
    }


class MetricsClient:
    """Buffers remote-call data points and publishes them in batches.

    *enabled* defaults to the ``METRICS_ENABLED`` environment variable.
    """

    def __init__(self, enabled: bool | None = None, namespace: str = NAMESPACE) -> None:
        if enabled is None:
            enabled = os.getenv("METRICS_ENABLED", "false").lower() == "true"
        self._enabled = enabled
        self.namespace = namespace
        self._buffer: list[dict[str, Any]] = []
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._cw = None

        if self._enabled:
            self._start_flush_thread()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def _cloudwatch(self):
        if self._cw is None:
            import boto3

            self._cw = boto3.client("cloudwatch")
        return self._cw

    # ── Public API ────────────────────────────────────────────────────

    def record_success(self, service: str, operation: str, latency_ms: float) -> None:
        """Count one successful call to *service* and record its latency."""
        now = datetime.now(UTC)
        self._append(_point("RequestCount", now, 1, "Count", Service=service, Status="success"))
        self._append(_point("Latency", now, latency_ms, "Milliseconds", Service=service, Operation=operation))
        logger.debug("Metric: %s %s success latency=%.1fms", service, operation, latency_ms)

    def record_failure(
        self,
        service: str,
        operation: str,
        error_type: str,
        latency_ms: float = 0,
    ) -> None:
        """Count one failed call, keyed by exception class name.

        Latency is only recorded when the call got far enough to measure it.
        """
        now = datetime.now(UTC)
        self._append(_point("RequestCount", now, 1, "Count", Service=service, Status="failure"))
        self._append(_point("ErrorCount", now, 1, "Count", Service=service, ErrorType=error_type))
        if latency_ms > 0:
            self._append(_point("Latency", now, latency_ms, "Milliseconds", Service=service, Operation=operation))
        logger.debug(
            "Metric: %s %s failure error=%s latency=%.1fms",
            service, operation, error_type, latency_ms,
        )

    @contextmanager
    def timed(self, service: str, operation: str) -> Iterator[None]:
        """Record success or failure (with latency) of the wrapped block.

        Exceptions are recorded and re-raised unchanged.
        """
        t0 = time.perf_counter()
        try:
            yield
        except Exception as exc:
            self.record_failure(
                service, operation,
                error_type=type(exc).__name__,
                latency_ms=(time.perf_counter() - t0) * 1000,
            )
            raise
        self.record_success(service, operation, latency_ms=(time.perf_counter() - t0) * 1000)

    def flush(self) -> int:
        """Publish everything buffered so far.  Returns how many points were sent.

        Points from a batch CloudWatch rejects are put back at the front of the
        buffer for the next flush; the ``MAX_BUFFERED`` cap still applies.
        """
        with self._lock:
            pending, self._buffer = self._buffer, []
        if not pending:
            return 0
        if not self._enabled:
            logger.debug("Metrics disabled; dropped %d points", len(pending))
            return 0

        sent = 0
        try:
            cw = self._cloudwatch()
            while sent < len(pending):
                chunk = pending[sent : sent + MAX_BATCH_SIZE]
                cw.put_metric_data(Namespace=self.namespace, MetricData=chunk)
                sent += len(chunk)
        except Exception:
            logger.exception("CloudWatch publish failed after %d of %d points", sent, len(pending))
            with self._lock:
                self._buffer[:0] = pending[sent:]
                self._trim()
        else:
            logger.info("Published %d metrics to CloudWatch", sent)
        return sent

    # ── Internal ──────────────────────────────────────────────────────

    def _trim(self) -> None:
        overflow = len(self._buffer) - MAX_BUFFERED
        if overflow > 0:
            del self._buffer[:overflow]

    def _append(self, metric_data: dict[str, Any]) -> None:
        with self._lock:
            self._buffer.append(metric_data)
            self._trim()

    def _start_flush_thread(self) -> None:
        def _loop():
            while not self._stop.wait(FLUSH_INTERVAL_SECONDS):
                try:
                    self.flush()
                except Exception:
                    logger.exception("Metrics flush thread error")

        threading.Thread(target=_loop, daemon=True, name="chainkit-metrics-flush").start()
        atexit.register(self.close)
        logger.info("Metrics publishing to %s every %ds", self.namespace, FLUSH_INTERVAL_SECONDS)

    def close(self) -> None:
        """Stop the background flusher and publish what is left."""
        self._stop.set()
        self.flush()


# ── Module-level singleton ──────────────────────────────────────────
metrics = MetricsClient()
