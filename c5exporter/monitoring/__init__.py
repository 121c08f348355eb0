"""Exporter self-monitoring."""
