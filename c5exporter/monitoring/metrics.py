"""Prometheus self-metrics of the exporter.

Registered on the same ``CollectorRegistry`` as the exported C5 series, so a
single scrape returns both.
"""

from __future__ import annotations

import logging

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

logger = logging.getLogger(__name__)


class ExporterMetrics:
    """Scrape instrumentation for the exporter itself."""

    def __init__(self, registry: CollectorRegistry, version: str) -> None:
        """Create and register the exporter metrics.

        Args:
            registry: Registry shared with the C5 series
            version: Exporter version for the build info gauge
        """
        self.scrape_duration_seconds = Histogram(
            "c5exporter_scrape_duration_seconds",
            "Duration of a full scrape across all sources in seconds",
            buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 2.5, 5.0],
            registry=registry,
        )
        self.source_scrape_errors_total = Counter(
            "c5exporter_source_scrape_errors_total",
            "Failed source scrapes by source and error kind",
            ["source", "error"],
            registry=registry,
        )
        self.build_info = Gauge(
            "c5exporter_build_info",
            "Exporter build information",
            ["version"],
            registry=registry,
        )
        self.build_info.labels(version=version).set(1)

    def observe_scrape(self, duration: float) -> None:
        """Record the duration of one full scrape."""
        self.scrape_duration_seconds.observe(duration)

    def record_source_error(self, source: str, error: str) -> None:
        """Count a failed source scrape."""
        self.source_scrape_errors_total.labels(source=source, error=error).inc()
