"""Observability module: metric registry and recording of parsed values."""

from c5exporter.observability.recorder import (
    build_metric_name,
    clear_source_metrics,
    record_base_health,
    record_counters,
    record_event_counter,
    record_usage_counter,
)
from c5exporter.observability.registry import MetricRegistry, split_series_name

__all__ = [
    "MetricRegistry",
    "build_metric_name",
    "clear_source_metrics",
    "record_base_health",
    "record_counters",
    "record_event_counter",
    "record_usage_counter",
    "split_series_name",
]
