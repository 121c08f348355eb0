"""Parsing of C5 status payloads into typed values."""

from c5exporter.parsing.classifier import (
    ContinuationGroup,
    CounterEntry,
    CounterLine,
    CounterMode,
    HeaderLine,
    ParsedCounter,
    classify_counter_block,
    decode_counter_block,
    decode_counter_entry,
    iter_counters,
)
from c5exporter.parsing.counters import (
    EventCounter,
    UsageCounter,
    parse_event_counter_line,
    parse_usage_counter_group,
    parse_usage_counter_line,
)
from c5exporter.parsing.fields import MemoryHealth, parse_build_banner, parse_memory_health
from c5exporter.parsing.scalars import (
    parse_byte_size,
    parse_process_state,
    parse_queue_health,
    parse_unsigned_integer,
)

__all__ = [
    "ContinuationGroup",
    "CounterEntry",
    "CounterLine",
    "CounterMode",
    "EventCounter",
    "HeaderLine",
    "MemoryHealth",
    "ParsedCounter",
    "UsageCounter",
    "classify_counter_block",
    "decode_counter_block",
    "decode_counter_entry",
    "iter_counters",
    "parse_build_banner",
    "parse_byte_size",
    "parse_event_counter_line",
    "parse_memory_health",
    "parse_process_state",
    "parse_queue_health",
    "parse_unsigned_integer",
    "parse_usage_counter_group",
    "parse_usage_counter_line",
]
