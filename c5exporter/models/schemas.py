"""Pydantic schemas for configured sources and upstream status responses.

The C5 status endpoint returns a loosely structured JSON document. Keys are
matched case-insensitively (older releases also emit ``buildVersion:`` and
``startupTime:`` with a trailing colon), unknown keys are ignored and missing
or null values fall back to empty defaults.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator

from c5exporter.parsing.classifier import CounterEntry, decode_counter_block

PREFIX_PATTERN = r"^[a-z_][a-z0-9_]*$"


class Source(BaseModel):
    """A polled C5 daemon.

    Attributes:
        prefix: Metric name prefix, also the identity of the source
        url: Status endpoint URL
    """

    model_config = ConfigDict(frozen=True)

    prefix: str = Field(..., min_length=1, max_length=64, pattern=PREFIX_PATTERN)
    url: str = Field(..., min_length=1)


def check_source_prefixes(sources: Iterable[Source]) -> None:
    """Check that no source can clear another source's series.

    A source's series are cleared by the ``<prefix>_`` name prefix, so a
    prefix must neither repeat nor extend another one (``sip`` and
    ``sip_edge`` cannot be polled together).

    Raises:
        ValueError: On a duplicate or nested prefix
    """
    seen: list[str] = []
    for source in sources:
        prefix = source.prefix
        for other in seen:
            if prefix == other:
                raise ValueError(f"Duplicate source prefix: {prefix}")
            if prefix.startswith(f"{other}_") or other.startswith(f"{prefix}_"):
                raise ValueError(f"Source prefixes {other} and {prefix} overlap")
        seen.append(prefix)


# Lower-cased upstream key -> field name
_RESPONSE_KEYS: dict[str, str] = {
    "proxystate": "proxy_state",
    "queuestate": "queue_state",
    "registrarstate": "registrar_state",
    "buildversion": "build_version",
    "startuptime": "startup_time",
    "memoryusage": "memory_usage",
    "tuqueuestatus": "tu_queue_status",
    "counterinfos": "counter_infos",
}


class RawStatusResponse(BaseModel):
    """Decoded status response of one fetch.

    Example payload (abridged)::

        {
          "proxyState": "active",
          "buildVersion": "Version: 6.0.2.57, compiled on Jan 15 2020, 13:06:31 ...",
          "startupTime": "2020-01-19 04:01:04.503",
          "memoryUsage": "C5 Heap Health: OK  - Mem used: 2%  - Mem used: 57MB  - ...",
          "tuQueueStatus": "OK - checked: 1830",
          "counterInfos": ["       Event counters  ...", "  0 TRANSPORT_MESSAGE_IN  6461 31 69", ...]
        }
    """

    proxy_state: str = ""
    queue_state: str = ""
    registrar_state: str = ""
    build_version: str = ""
    startup_time: str = ""
    memory_usage: str = ""
    tu_queue_status: str = ""
    counter_infos: list[str | list[str]] = Field(default_factory=list)

    _counter_block: list[CounterEntry] = PrivateAttr(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_keys(cls, data: Any) -> Any:
        """Map upstream keys onto field names."""
        if not isinstance(data, dict):
            return data

        normalized: dict[str, Any] = {}
        for key, value in data.items():
            if value is None or not isinstance(key, str):
                continue
            field_name = _RESPONSE_KEYS.get(key.strip().rstrip(":").lower())
            if field_name is None:
                field_name = key if key in cls.model_fields else None
            if field_name is not None:
                normalized[field_name] = value
        return normalized

    @model_validator(mode="after")
    def decode_counters(self) -> RawStatusResponse:
        """Decode the counter block into tagged entries."""
        self._counter_block = decode_counter_block(self.counter_infos)
        return self

    @property
    def counter_block(self) -> list[CounterEntry]:
        """Counter block as header, counter line and continuation entries."""
        return self._counter_block
