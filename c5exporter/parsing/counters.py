"""Parsers for the fixed-width counter listings of the C5 counter dump.

Event counter lines::

           Event counters                              absolute   curr   last
      0 TRANSPORT_MESSAGE_IN                              6461     31     69

Usage counter lines, optionally followed by continuation lines carrying one
sub-instance each::

           Usage counters                              current    min    max   lMin   lMax   lAvg
     84 TRANSACTION_AND_TU_TU_MANAGER_QUEUE_SIZE          0      0      3      0      9      0
                                                          0      0      3      0      4      0
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from c5exporter.errors import MalformedCounterLine, MalformedCounterName
from c5exporter.parsing.scalars import parse_unsigned_integer

EVENT_LINE_COLUMNS = 3
USAGE_LINE_COLUMNS = 8
CONTINUATION_LINE_COLUMNS = 6

# Counter names become part of the series name as-is (lower-cased)
_COUNTER_NAME_RE = re.compile(r"[A-Za-z_:][A-Za-z0-9_:]*")


@dataclass(frozen=True)
class EventCounter:
    """Monotonic count since upstream process start."""

    id: str
    name: str
    total: int
    index: int | None = None


@dataclass(frozen=True)
class UsageCounter:
    """Gauge with rolling statistics of the last interval.

    The absolute min/max columns are not kept.
    """

    id: str
    name: str
    current: int
    last_min: int
    last_max: int
    last_avg: int
    index: int | None = None


def _split(line: str, expected: int) -> list[str]:
    tokens = line.split()
    if len(tokens) < expected:
        raise MalformedCounterLine(line, expected, len(tokens))
    return tokens


def _counter_name(line: str, token: str) -> str:
    if not _COUNTER_NAME_RE.fullmatch(token):
        raise MalformedCounterName(line, token)
    return token


def parse_event_counter_line(line: str) -> EventCounter:
    """Parse ``<id> <name> <total> ...``; trailing columns are ignored."""
    tokens = _split(line, EVENT_LINE_COLUMNS)
    return EventCounter(
        id=tokens[0],
        name=_counter_name(line, tokens[1]),
        total=parse_unsigned_integer(tokens[2]),
    )


def parse_usage_counter_line(line: str, index: int | None = None) -> UsageCounter:
    """Parse ``<id> <name> <current> <min> <max> <lMin> <lMax> <lAvg>``.

    Args:
        line: Usage counter line
        index: Sub-instance index, None for a stand-alone counter

    Returns:
        Parsed usage counter

    Raises:
        MalformedCounterLine: If the line has fewer than eight columns
        MalformedCounterName: If the name is not a metric name fragment
        MalformedNumber: If a value column is not a number
    """
    tokens = _split(line, USAGE_LINE_COLUMNS)
    return UsageCounter(
        id=tokens[0],
        name=_counter_name(line, tokens[1]),
        current=parse_unsigned_integer(tokens[2]),
        last_min=parse_unsigned_integer(tokens[5]),
        last_max=parse_unsigned_integer(tokens[6]),
        last_avg=parse_unsigned_integer(tokens[7]),
        index=index,
    )


def parse_usage_counter_group(lines: list[str]) -> list[UsageCounter]:
    """Parse a usage counter spanning several lines.

    The first line is a full usage line and gets index 0. Continuation lines
    have no id/name columns; they inherit both from the first line and get
    their position in the group as index.

    Args:
        lines: Lines of one continuation group

    Returns:
        One usage counter per line, in order
    """
    if not lines:
        return []

    head = parse_usage_counter_line(lines[0], index=0)
    counters = [head]
    for idx, line in enumerate(lines[1:], start=1):
        tokens = _split(line, CONTINUATION_LINE_COLUMNS)
        counters.append(
            UsageCounter(
                id=head.id,
                name=head.name,
                current=parse_unsigned_integer(tokens[0]),
                last_min=parse_unsigned_integer(tokens[3]),
                last_max=parse_unsigned_integer(tokens[4]),
                last_avg=parse_unsigned_integer(tokens[5]),
                index=idx,
            )
        )
    return counters
