"""Process-wide store of exported metric values.

Every value is kept under its fully-qualified exposition name, labels
included, e.g. ``sipproxyd_transaction_queue_size_current{idx="2"}``. The
registry is handed to the scrape pipeline by reference; concurrent per-source
tasks write through it and it serializes access with its own lock.

Exposition goes through prometheus_client: the registry is a collector on its
own ``CollectorRegistry`` and renders with ``generate_latest``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from threading import Lock

from prometheus_client import CollectorRegistry, generate_latest
from prometheus_client.metrics_core import Metric
from prometheus_client.registry import Collector

logger = logging.getLogger(__name__)

_SERIES_RE = re.compile(r"^(?P<base>[^{]+)(?:\{(?P<labels>.*)\})?$", re.DOTALL)
_LABEL_RE = re.compile(r'(?P<key>[a-zA-Z_][a-zA-Z0-9_]*)="(?P<value>(?:[^"\\]|\\.)*)"')
_UNESCAPE_RE = re.compile(r"\\(.)")


def _unescape(value: str) -> str:
    return _UNESCAPE_RE.sub(lambda m: "\n" if m.group(1) == "n" else m.group(1), value)


def split_series_name(name: str) -> tuple[str, dict[str, str]]:
    """Split ``base{k="v",...}`` into the base name and its labels.

    Args:
        name: Fully-qualified series name

    Returns:
        Tuple of (base name, labels)
    """
    match = _SERIES_RE.match(name)
    if match is None:
        return name, {}
    labels = {
        m.group("key"): _unescape(m.group("value"))
        for m in _LABEL_RE.finditer(match.group("labels") or "")
    }
    return match.group("base"), labels


class MetricRegistry(Collector):
    """Thread-safe mapping of series name to its current value.

    Attributes:
        collector_registry: prometheus_client registry this collector is
            registered on, used for rendering
    """

    def __init__(self, collector_registry: CollectorRegistry | None = None) -> None:
        """Initialize metric registry.

        Args:
            collector_registry: Registry to attach to (a fresh one by default)
        """
        self._values: dict[str, int] = {}
        self._lock = Lock()
        self.collector_registry = collector_registry or CollectorRegistry()
        self.collector_registry.register(self)

    def set_value(self, name: str, value: int) -> None:
        """Create or overwrite a series."""
        with self._lock:
            self._values[name] = value

    def get_value(self, name: str) -> int | None:
        """Return the current value of a series, or None if absent."""
        with self._lock:
            return self._values.get(name)

    def remove_by_prefix(self, prefix: str) -> list[str]:
        """Remove every series whose name starts with ``prefix``.

        Returns:
            Names of the removed series
        """
        with self._lock:
            removed = [name for name in self._values if name.startswith(prefix)]
            for name in removed:
                del self._values[name]

        for name in removed:
            logger.debug(f"Unregistered metric {name}")
        return removed

    def list_names(self) -> list[str]:
        """Return all series names, sorted."""
        with self._lock:
            return sorted(self._values)

    def describe(self) -> list[Metric]:
        # Series come and go with the upstream sources; nothing to pre-declare
        return []

    def collect(self) -> Iterator[Metric]:
        """Yield one metric family per base name.

        Base names ending in ``_total`` are exposed as counters, everything
        else as gauges. Sample values are float64 in the exposition format,
        so values above 2**53 are rendered rounded; ``get_value`` stays exact.
        """
        with self._lock:
            snapshot = sorted(self._values.items())

        families: dict[str, Metric] = {}
        for name, value in snapshot:
            base, labels = split_series_name(name)
            family = families.get(base)
            if family is None:
                try:
                    if base.endswith("_total"):
                        family = Metric(base[: -len("_total")], base, "counter")
                    else:
                        family = Metric(base, base, "gauge")
                except ValueError:
                    logger.warning(f"Skipping series with invalid name: {name}")
                    continue
                families[base] = family
            family.add_sample(base, labels, float(value))

        yield from families.values()

    def render(self) -> bytes:
        """Render all series in the Prometheus text exposition format."""
        return generate_latest(self.collector_registry)
