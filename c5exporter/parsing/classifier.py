"""Counter block decoding and classification.

The ``counterInfos`` array mixes event and usage counters in one stream. Which
kind a plain line belongs to is only known from the most recent section
header, so classification tracks that header across entries. Nested arrays
are always usage counter continuation groups and do not change the mode.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from c5exporter.errors import DuplicateCounter
from c5exporter.parsing.counters import (
    EventCounter,
    UsageCounter,
    parse_event_counter_line,
    parse_usage_counter_group,
    parse_usage_counter_line,
)

logger = logging.getLogger(__name__)

EVENT_HEADER_MARKER = "Event counters"
USAGE_HEADER_MARKER = "Usage counters"


class CounterMode(Enum):
    """Interpretation of plain counter lines."""

    EVENT = "event"
    USAGE = "usage"


@dataclass(frozen=True)
class HeaderLine:
    """Section header switching the interpretation mode."""

    mode: CounterMode
    text: str


@dataclass(frozen=True)
class CounterLine:
    """Single counter line, interpreted according to the current mode."""

    text: str


@dataclass(frozen=True)
class ContinuationGroup:
    """Usage counter spread over several lines, one per sub-instance."""

    lines: tuple[str, ...]


CounterEntry = Union[HeaderLine, CounterLine, ContinuationGroup]
ParsedCounter = Union[EventCounter, UsageCounter]


def decode_counter_entry(raw: Any) -> CounterEntry:
    """Decode one JSON element of ``counterInfos`` into a tagged entry.

    Args:
        raw: A string or a list of strings

    Returns:
        Header, counter line or continuation group

    Raises:
        ValueError: If the element is neither a string nor a list of strings
    """
    if isinstance(raw, str):
        if EVENT_HEADER_MARKER in raw:
            return HeaderLine(CounterMode.EVENT, raw)
        if USAGE_HEADER_MARKER in raw:
            return HeaderLine(CounterMode.USAGE, raw)
        return CounterLine(raw)

    if isinstance(raw, list):
        if not all(isinstance(line, str) for line in raw):
            raise ValueError(f"continuation group must contain only strings: {raw!r}")
        return ContinuationGroup(tuple(raw))

    raise ValueError(f"unexpected counter block entry of type {type(raw).__name__}")


def decode_counter_block(raw_entries: Iterable[Any]) -> list[CounterEntry]:
    """Decode the whole ``counterInfos`` array."""
    return [decode_counter_entry(raw) for raw in raw_entries]


def iter_counters(entries: Iterable[CounterEntry]) -> Iterator[ParsedCounter]:
    """Walk a counter block and yield parsed counters in order.

    Parse errors propagate and abort the walk.

    Args:
        entries: Decoded counter block

    Yields:
        Event and usage counters
    """
    mode = CounterMode.EVENT

    for entry in entries:
        if isinstance(entry, ContinuationGroup):
            yield from parse_usage_counter_group(list(entry.lines))
        elif isinstance(entry, HeaderLine):
            logger.debug(f"Switching to {entry.mode.value} counters")
            mode = entry.mode
        elif mode is CounterMode.USAGE:
            yield parse_usage_counter_line(entry.text)
        else:
            yield parse_event_counter_line(entry.text)


def classify_counter_block(entries: Iterable[CounterEntry]) -> list[ParsedCounter]:
    """Parse a full counter block before anything is recorded.

    Series names are lower-cased, so two counters of the same kind whose
    names differ only in case would overwrite each other; such a block is
    rejected.

    Returns:
        All counters of the block, in block order

    Raises:
        DuplicateCounter: If two counters would map to the same series
    """
    counters = list(iter_counters(entries))

    seen: set[tuple[type, str, int | None]] = set()
    for counter in counters:
        key = (type(counter), counter.name.lower(), counter.index)
        if key in seen:
            raise DuplicateCounter(counter.name, counter.index)
        seen.add(key)
    return counters
