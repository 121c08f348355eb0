"""Metric naming and recording of parsed C5 values into the registry."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from c5exporter.models.schemas import RawStatusResponse
from c5exporter.observability.registry import MetricRegistry
from c5exporter.parsing.classifier import ParsedCounter
from c5exporter.parsing.counters import EventCounter, UsageCounter
from c5exporter.parsing.fields import parse_build_banner, parse_memory_health
from c5exporter.parsing.scalars import parse_process_state, parse_queue_health

logger = logging.getLogger(__name__)

_INVALID_NAME_CHARS_RE = re.compile(r"[^a-z0-9_:]")


def build_metric_name(prefix: str, field_name: str, index: int | None = None) -> str:
    """Build the exposition name of one series.

    >>> build_metric_name("sipproxyd", "Foo_Bar")
    'sipproxyd_foo_bar'
    >>> build_metric_name("sipproxyd", "Foo_Bar", 3)
    'sipproxyd_foo_bar{idx="3"}'

    Names are only lower-cased, never rewritten, so distinct lower-case
    inputs always give distinct names.

    Args:
        prefix: Source prefix, may be empty
        field_name: Counter field name, lower-cased
        index: Sub-instance index, rendered as the ``idx`` label

    Returns:
        Series name

    Raises:
        ValueError: If the name has characters outside ``[a-z0-9_:]``
    """
    name = f"{prefix}_{field_name}" if prefix else field_name
    name = name.lower()
    if _INVALID_NAME_CHARS_RE.search(name):
        raise ValueError(f"Invalid metric name: {name!r}")
    if index is not None:
        return f'{name}{{idx="{index}"}}'
    return name


def escape_label_value(value: str) -> str:
    """Escape a label value for the text exposition format."""
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")


def record_event_counter(registry: MetricRegistry, prefix: str, counter: EventCounter) -> None:
    """Record ``<name>_total`` for an event counter."""
    registry.set_value(build_metric_name(prefix, f"{counter.name}_total", counter.index), counter.total)


def record_usage_counter(registry: MetricRegistry, prefix: str, counter: UsageCounter) -> None:
    """Record current, lastmin, lastavg and lastmax of a usage counter."""
    for suffix, value in (
        ("current", counter.current),
        ("lastmin", counter.last_min),
        ("lastavg", counter.last_avg),
        ("lastmax", counter.last_max),
    ):
        registry.set_value(build_metric_name(prefix, f"{counter.name}_{suffix}", counter.index), value)


def record_counters(registry: MetricRegistry, prefix: str, counters: Iterable[ParsedCounter]) -> int:
    """Record a sequence of parsed counters.

    Returns:
        Number of counters recorded
    """
    count = 0
    for counter in counters:
        if isinstance(counter, UsageCounter):
            record_usage_counter(registry, prefix, counter)
        else:
            record_event_counter(registry, prefix, counter)
        count += 1
    return count


def record_base_health(registry: MetricRegistry, prefix: str, response: RawStatusResponse) -> None:
    """Record the info, state, queue and memory series of a source.

    All fields are parsed before anything is written, so a malformed memory
    line leaves the registry untouched.

    Args:
        registry: Target registry
        prefix: Source prefix
        response: Decoded status response

    Raises:
        CounterParseError: If the memory line holds malformed values
    """
    version = parse_build_banner(response.build_version)
    state = parse_process_state(response.proxy_state, response.queue_state, response.registrar_state)
    queue_state = parse_queue_health(response.tu_queue_status)
    memory = parse_memory_health(response.memory_usage)

    logger.info(f"Processed {prefix} {version} started {response.startup_time}")

    info_base = build_metric_name(prefix, "info")
    info_name = (
        f'{info_base}{{version="{escape_label_value(version)}",'
        f'starttime="{escape_label_value(response.startup_time)}"}}'
    )
    # Only one info series per source, even after an upstream upgrade
    for stale in registry.remove_by_prefix(info_base + "{"):
        if stale != info_name:
            logger.debug(f"Replaced info series {stale}")
    registry.set_value(info_name, 1)

    registry.set_value(build_metric_name(prefix, "state"), state)
    registry.set_value(build_metric_name(prefix, "tu_queue_state"), queue_state)
    registry.set_value(build_metric_name(prefix, "memory_used_bytes"), memory.used)
    registry.set_value(build_metric_name(prefix, "memory_total_bytes"), memory.total)
    registry.set_value(build_metric_name(prefix, "memory_max_used_percent"), memory.max_percent)


def clear_source_metrics(registry: MetricRegistry, prefix: str) -> list[str]:
    """Remove every series of a source so a dead source disappears from output.

    Returns:
        Names of the removed series
    """
    logger.debug(f"Clear metric counters for {prefix}")
    return registry.remove_by_prefix(f"{prefix}_")
