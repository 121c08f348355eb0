"""HTTP surface of the exporter."""

from c5exporter.api.app import create_app

__all__ = ["create_app"]
