"""Prometheus metrics for requests handled by the pipeline.

Every collector owns a private ``CollectorRegistry`` so that tests (and
multiple apps in one process) never share series. prometheus_client metric
children are internally locked, so concurrent requests never lose updates.
"""

from __future__ import annotations

from dataclasses import dataclass

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest

LABEL_NAMES = ("method", "path", "status")

LATENCY_BUCKETS_MS = (5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000, 10000, 30000)
PAYLOAD_BUCKETS_BYTES = (0, 64, 256, 1024, 4096, 10240, 65536, 262144, 1048576)


@dataclass(frozen=True)
class MetricLabels:
    """Label set identifying one metrics series."""

    method: str
    path: str
    status: int

    def as_dict(self) -> dict[str, str]:
        return {"method": self.method, "path": self.path, "status": str(self.status)}


class MetricsCollector:
    """Request count, latency and payload size per (method, path, status)."""

    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry()
        self._requests = Counter(
            "http_requests_total",
            "Total HTTP requests handled",
            LABEL_NAMES,
            registry=self.registry,
        )
        self._latency = Histogram(
            "http_request_duration_ms",
            "Time from request arrival to final response in milliseconds",
            LABEL_NAMES,
            buckets=LATENCY_BUCKETS_MS,
            registry=self.registry,
        )
        self._payload_size = Histogram(
            "http_request_payload_size_bytes",
            "Request body bytes read",
            LABEL_NAMES,
            buckets=PAYLOAD_BUCKETS_BYTES,
            registry=self.registry,
        )

    def increment(self, labels: MetricLabels) -> None:
        self._requests.labels(**labels.as_dict()).inc()

    def observe_latency(self, labels: MetricLabels, duration_ms: float) -> None:
        self._latency.labels(**labels.as_dict()).observe(max(0.0, duration_ms))

    def observe_payload_size(self, labels: MetricLabels, size_bytes: int) -> None:
        self._payload_size.labels(**labels.as_dict()).observe(max(0, size_bytes))

    def record(self, labels: MetricLabels, *, duration_ms: float, payload_bytes: int) -> None:
        """Record one finished request: a count, a latency and a payload size."""
        self.increment(labels)
        self.observe_latency(labels, duration_ms)
        self.observe_payload_size(labels, payload_bytes)

    def snapshot(self) -> bytes:
        """Serialize all series in the Prometheus text exposition format."""
        return generate_latest(self.registry)
