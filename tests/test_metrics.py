"""Tests for the CloudWatch remote-call metrics."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

import chainkit.services.metrics as metrics_module
from chainkit.services.metrics import MetricsClient


def _dims(point: dict) -> dict[str, str]:
    return {d["Name"]: d["Value"] for d in point["Dimensions"]}


def _by_name(client: MetricsClient, suffix: str) -> list[dict]:
    return [p for p in client._buffer if p["MetricName"] == f"RemoteCall/{suffix}"]


@pytest.fixture
def publishing_client():
    """An enabled client with no flush thread and a mock CloudWatch."""
    with patch.object(MetricsClient, "_start_flush_thread"):
        client = MetricsClient(enabled=True)
    client._cw = MagicMock()
    return client


# ── Recording ────────────────────────────────────────────────────────


class TestRecording:
    def test_success_counts_and_times(self):
        client = MetricsClient(enabled=False)
        client.record_success("openai", "POST /chat/completions", latency_ms=123.4)

        [count] = _by_name(client, "RequestCount")
        [latency] = _by_name(client, "Latency")
        assert _dims(count) == {"Service": "openai", "Status": "success"}
        assert _dims(latency) == {"Service": "openai", "Operation": "POST /chat/completions"}
        assert (latency["Value"], latency["Unit"]) == (123.4, "Milliseconds")

    def test_failure_without_latency(self):
        client = MetricsClient(enabled=False)
        client.record_failure("openai", "POST /completions", error_type="RateLimitExceededError")

        assert len(client._buffer) == 2
        [error] = _by_name(client, "ErrorCount")
        assert _dims(error)["ErrorType"] == "RateLimitExceededError"
        assert _by_name(client, "Latency") == []

    def test_failure_with_latency(self):
        client = MetricsClient(enabled=False)
        client.record_failure("textract", "get_document_text_detection", "ClientError", latency_ms=500.0)
        assert len(client._buffer) == 3

    def test_enabled_follows_environment(self):
        with patch.dict("os.environ", {"METRICS_ENABLED": "false"}):
            assert MetricsClient().enabled is False
        with patch.dict("os.environ", {"METRICS_ENABLED": "TRUE"}), \
                patch.object(MetricsClient, "_start_flush_thread") as start:
            assert MetricsClient().enabled is True
        start.assert_called_once()

    def test_buffer_keeps_newest_points(self):
        client = MetricsClient(enabled=False)
        with patch.object(metrics_module, "MAX_BUFFERED", 4):
            for i in range(3):
                client.record_success("openai", f"op{i}", latency_ms=1.0)
        assert len(client._buffer) == 4
        assert _dims(client._buffer[-1])["Operation"] == "op2"


class TestTimed:
    def test_success(self):
        client = MetricsClient(enabled=False)
        with client.timed("textract", "start_document_text_detection"):
            pass
        [count] = _by_name(client, "RequestCount")
        assert _dims(count)["Status"] == "success"

    def test_failure_is_recorded_and_reraised(self):
        client = MetricsClient(enabled=False)
        with pytest.raises(KeyError):
            with client.timed("textract", "get_document_text_detection"):
                raise KeyError("boom")
        [error] = _by_name(client, "ErrorCount")
        assert _dims(error)["ErrorType"] == "KeyError"


# ── Publishing ───────────────────────────────────────────────────────


class TestFlush:
    def test_disabled_client_drops_points(self):
        client = MetricsClient(enabled=False)
        client.record_success("openai", "POST /chat/completions", latency_ms=100.0)
        assert client.flush() == 0
        assert client._buffer == []

    def test_publishes_to_namespace(self, publishing_client):
        publishing_client.record_success("openai", "POST /chat/completions", latency_ms=100.0)
        assert publishing_client.flush() == 2

        kwargs = publishing_client._cw.put_metric_data.call_args.kwargs
        assert kwargs["Namespace"] == "Chainkit"
        assert len(kwargs["MetricData"]) == 2

    def test_batches_are_capped(self, publishing_client):
        with patch.object(metrics_module, "MAX_BATCH_SIZE", 3):
            for _ in range(4):
                publishing_client.record_success("openai", "POST /embeddings", latency_ms=1.0)
            assert publishing_client.flush() == 8
        sizes = [len(c.kwargs["MetricData"]) for c in publishing_client._cw.put_metric_data.call_args_list]
        assert sizes == [3, 3, 2]

    def test_empty_buffer_sends_nothing(self, publishing_client):
        assert publishing_client.flush() == 0
        publishing_client._cw.put_metric_data.assert_not_called()

    def test_failed_publish_keeps_unsent_points(self, publishing_client):
        publishing_client._cw.put_metric_data.side_effect = RuntimeError("throttled")
        publishing_client.record_success("openai", "POST /embeddings", latency_ms=10.0)
        assert publishing_client.flush() == 0
        assert len(publishing_client._buffer) == 2

        publishing_client._cw.put_metric_data.side_effect = None
        assert publishing_client.flush() == 2
        assert publishing_client._buffer == []

    def test_close_flushes_and_stops(self, publishing_client):
        publishing_client.record_success("openai", "POST /embeddings", latency_ms=10.0)
        publishing_client.close()
        assert publishing_client._stop.is_set()
        publishing_client._cw.put_metric_data.assert_called_once()
