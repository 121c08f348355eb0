"""Error types raised while fetching and parsing C5 status payloads.

Parse errors abort processing of a single source's payload. Upstream errors
short-circuit before any parsing. Both are handled in the per-source scrape
task, which clears the source's metrics and logs the failure.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "C5ExporterError",
    "ConfigurationError",
    "CounterParseError",
    "DuplicateCounter",
    "MalformedCounterLine",
    "MalformedCounterName",
    "MalformedNumber",
    "MalformedSize",
    "UpstreamDecodeFailure",
    "UpstreamError",
    "UpstreamUnreachable",
]


class C5ExporterError(Exception):
    """Base exception for all exporter errors."""

    kind = "exporter_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize exporter error.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary.

        Returns:
            Error dictionary with kind, message and details
        """
        return {
            "error": self.kind,
            "message": self.message,
            "details": self.details,
        }


class CounterParseError(C5ExporterError):
    """Base exception for structural parse failures."""

    kind = "parse_error"


class MalformedNumber(CounterParseError):
    """Raised when a token is not a non-negative 63-bit decimal integer."""

    kind = "malformed_number"

    def __init__(self, token: str):
        super().__init__(f"Malformed number: {token!r}", {"token": token})
        self.token = token


class MalformedSize(CounterParseError):
    """Raised when a byte-size token has no numeric prefix."""

    kind = "malformed_size"

    def __init__(self, token: str):
        super().__init__(f"Malformed size: {token!r}", {"token": token})
        self.token = token


class MalformedCounterLine(CounterParseError):
    """Raised when a counter line has fewer columns than its shape needs."""

    kind = "malformed_counter_line"

    def __init__(self, line: str, expected: int, found: int):
        super().__init__(
            f"Malformed counter line (expected {expected} columns, found {found}): {line!r}",
            {"line": line, "expected": expected, "found": found},
        )
        self.line = line


class MalformedCounterName(CounterParseError):
    """Raised when a counter name is not a valid metric name fragment."""

    kind = "malformed_counter_name"

    def __init__(self, line: str, name: str):
        super().__init__(
            f"Malformed counter name {name!r}: {line!r}",
            {"line": line, "name": name},
        )
        self.line = line
        self.name = name


class DuplicateCounter(CounterParseError):
    """Raised when two counters of one block would share a series name."""

    kind = "duplicate_counter"

    def __init__(self, name: str, index: int | None):
        super().__init__(
            f"Duplicate counter {name!r} (index {index})",
            {"name": name, "index": index},
        )
        self.name = name
        self.index = index


class UpstreamError(C5ExporterError):
    """Base exception for fetch-layer failures."""

    kind = "upstream_error"

    def __init__(self, prefix: str, message: str, cause: BaseException | None = None):
        """Initialize upstream error.

        Args:
            prefix: Metric prefix of the failing source
            message: Error message
            cause: Underlying exception, if any
        """
        details: dict[str, Any] = {"source": prefix}
        if cause is not None:
            details["cause"] = repr(cause)
        super().__init__(f"{prefix}: {message}", details)
        self.prefix = prefix
        self.cause = cause


class UpstreamUnreachable(UpstreamError):
    """Raised on connection failure, timeout or non-success HTTP status."""

    kind = "upstream_unreachable"


class UpstreamDecodeFailure(UpstreamError):
    """Raised when the upstream body cannot be decoded into a status response."""

    kind = "upstream_decode_failure"


class ConfigurationError(C5ExporterError):
    """Raised when the exporter configuration cannot be loaded."""

    kind = "configuration_error"
