"""Unit tests for the Prometheus metrics collector."""

import threading

from mockai.core.metrics import MetricLabels, MetricsCollector


def _count(collector: MetricsCollector, method: str, path: str, status: int) -> float | None:
    return collector.registry.get_sample_value(
        "http_requests_total",
        {"method": method, "path": path, "status": str(status)},
    )


def test_record_updates_all_three_series_once() -> None:
    collector = MetricsCollector()
    labels = MetricLabels("POST", "/v1/chat/completions", 200)

    collector.record(labels, duration_ms=12.5, payload_bytes=321)

    sample_labels = labels.as_dict()
    assert _count(collector, "POST", "/v1/chat/completions", 200) == 1
    assert collector.registry.get_sample_value("http_request_duration_ms_count", sample_labels) == 1
    assert collector.registry.get_sample_value("http_request_duration_ms_sum", sample_labels) == 12.5
    assert collector.registry.get_sample_value("http_request_payload_size_bytes_count", sample_labels) == 1
    assert collector.registry.get_sample_value("http_request_payload_size_bytes_sum", sample_labels) == 321


def test_label_sets_are_independent() -> None:
    collector = MetricsCollector()

    collector.increment(MetricLabels("GET", "/", 200))
    collector.increment(MetricLabels("GET", "/", 200))
    collector.increment(MetricLabels("GET", "/", 429))

    assert _count(collector, "GET", "/", 200) == 2
    assert _count(collector, "GET", "/", 429) == 1
    assert _count(collector, "POST", "/", 200) is None


def test_collectors_do_not_share_registries() -> None:
    first = MetricsCollector()
    second = MetricsCollector()

    first.increment(MetricLabels("GET", "/", 200))

    assert _count(first, "GET", "/", 200) == 1
    assert _count(second, "GET", "/", 200) is None


def test_snapshot_is_read_only() -> None:
    collector = MetricsCollector()
    collector.record(MetricLabels("GET", "/", 200), duration_ms=3, payload_bytes=0)

    first = collector.snapshot()
    second = collector.snapshot()

    assert first == second
    assert b'http_requests_total{method="GET",path="/",status="200"} 1.0' in first
    assert _count(collector, "GET", "/", 200) == 1


def test_concurrent_increments_are_not_lost() -> None:
    collector = MetricsCollector()
    labels = MetricLabels("GET", "/", 200)

    def worker() -> None:
        for _ in range(500):
            collector.increment(labels)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert _count(collector, "GET", "/", 200) == 4000
