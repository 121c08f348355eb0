"""C5 exporter: Prometheus metrics for TELES C5 telephony daemons."""

__version__ = "0.4.1"
