"""C5 exporter data models."""

from c5exporter.models.schemas import RawStatusResponse, Source

__all__ = [
    "RawStatusResponse",
    "Source",
]
