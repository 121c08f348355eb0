"""Parsers for the composite status strings of a C5 status response."""

from __future__ import annotations

from typing import NamedTuple

from c5exporter.errors import MalformedSize
from c5exporter.parsing.scalars import parse_byte_size, parse_unsigned_integer

BUILD_VERSION_PREFIX = "Version: "


class MemoryHealth(NamedTuple):
    """Heap usage reported in the ``memoryUsage`` status line."""

    used: int = 0
    total: int = 0
    max_percent: int = 0


def parse_build_banner(banner: str) -> str:
    """Extract the version label from a build banner.

    ``"Version: 6.0.2.57, compiled on Jan 15 2020, ..."`` gives ``"6.0.2.57"``.
    Without the ``Version: `` prefix the first comma-separated segment is
    returned as-is.
    """
    first = banner.split(",", 1)[0]
    return first.removeprefix(BUILD_VERSION_PREFIX)


def _parse_mem_used(value: str) -> int | None:
    # R6.0 reports the percentage and the absolute size as two clauses,
    # R6.2 as one: "3%  76MB  (min: 76 max: 76)"
    if value.endswith("%"):
        return None
    if "%" not in value:
        return parse_byte_size(value)

    tokens = value.split()
    for i, token in enumerate(tokens):
        if token.endswith("%"):
            if i + 1 < len(tokens):
                return parse_byte_size(tokens[i + 1])
            break
    raise MalformedSize(value)


def parse_memory_health(line: str) -> MemoryHealth:
    """Parse the heap health line into used bytes, total bytes and max percent.

    The line is a ``-`` delimited list of ``key: value`` clauses. Both known
    upstream layouts are accepted and told apart by clause shape::

        C5 Heap Health: OK  - Mem used: 18%  - Mem used: 383MB  - Mem total: 2048MB  - Max: 18% - UpdCtr: 60793
        C5 Heap Health: OK  - Mem used: 3%  76MB  (min: 76 max: 76)  - Mem total: 2048MB  - MAX: 3% - UpdCtr: 92205

    Clauses that are absent leave their field at zero; unknown clauses are
    ignored.

    Args:
        line: Raw ``memoryUsage`` string

    Returns:
        Parsed memory health

    Raises:
        MalformedSize: If a recognised size clause has no numeric value
        MalformedNumber: If the max percentage is not a number
    """
    used = total = max_percent = 0

    for clause in line.split("-"):
        key, sep, value = clause.strip().partition(":")
        if not sep:
            continue
        key = key.strip().lower()
        value = value.strip()

        if key == "mem used":
            parsed = _parse_mem_used(value)
            if parsed is not None:
                used = parsed
        elif key == "mem total":
            total = parse_byte_size(value)
        elif key == "max":
            max_percent = parse_unsigned_integer(value.removesuffix("%").strip())

    return MemoryHealth(used=used, total=total, max_percent=max_percent)
