"""Scalar parsers for primitive tokens of the C5 status payload."""

from __future__ import annotations

import re

from c5exporter.errors import MalformedNumber, MalformedSize

# Values are reported as non-negative 63-bit integers
MAX_COUNTER_VALUE = 2**63 - 1
MAX_U64 = 2**64 - 1

_DIGITS_RE = re.compile(r"[0-9]+")
_SIZE_RE = re.compile(r"([0-9]*)(.*)", re.DOTALL)

SIZE_UNITS: dict[str, int] = {
    "kb": 1024,
    "mb": 1024**2,
    "gb": 1024**3,
    "tb": 1024**4,
}

# Process state values
STATE_INACTIVE = 0
STATE_ACTIVE = 1
STATE_UNKNOWN = 2
STATE_NOT_REPORTED = 3


def parse_unsigned_integer(token: str) -> int:
    """Parse a strict base-10 non-negative integer.

    Args:
        token: Decimal digits only, no sign or whitespace

    Returns:
        Parsed value

    Raises:
        MalformedNumber: If the token has non-digit characters or exceeds 63 bits
    """
    if not _DIGITS_RE.fullmatch(token):
        raise MalformedNumber(token)
    value = int(token)
    if value > MAX_COUNTER_VALUE:
        raise MalformedNumber(token)
    return value


def parse_byte_size(token: str) -> int:
    """Parse a human-readable size such as ``2048MB`` into bytes.

    The unit suffix is case-insensitive (kb, mb, gb, tb) and scales by powers
    of 1024. A missing or unrecognised alphabetic suffix (``B``) leaves the
    value as bytes.

    Args:
        token: Numeric prefix with optional unit suffix

    Returns:
        Size in bytes

    Raises:
        MalformedSize: If the numeric prefix is missing or out of range, or
            the suffix is not a plain unit word
    """
    match = _SIZE_RE.fullmatch(token)
    digits, unit = match.group(1), match.group(2)  # type: ignore[union-attr]
    if not digits or (unit and not unit.isalpha()):
        raise MalformedSize(token)
    try:
        size = parse_unsigned_integer(digits)
    except MalformedNumber as e:
        raise MalformedSize(token) from e

    size *= SIZE_UNITS.get(unit.lower(), 1)
    if size > MAX_U64:
        raise MalformedSize(token)
    return size


def parse_process_state(*candidates: str) -> int:
    """Map the first non-empty state word to its numeric state.

    Candidates are given in role order (proxy, queue, registrar). Once one is
    non-empty the remaining candidates are never consulted.

    Returns:
        1 for "active", 0 for "inactive"/"passive", 2 for any other word,
        3 if every candidate is empty
    """
    for state in candidates:
        if not state:
            continue
        if state == "active":
            return STATE_ACTIVE
        if state in ("inactive", "passive"):
            return STATE_INACTIVE
        return STATE_UNKNOWN
    return STATE_NOT_REPORTED


def parse_queue_health(token: str) -> int:
    """Return 1 if the queue status starts with "OK", else 0."""
    return 1 if token.startswith("OK") else 0
