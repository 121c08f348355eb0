"""C5 exporter application wiring."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from c5exporter import __version__
from c5exporter.api.app import create_app
from c5exporter.ingestion.fetcher import StatusFetcher
from c5exporter.ingestion.worker import ScrapeWorker
from c5exporter.monitoring.metrics import ExporterMetrics
from c5exporter.observability.registry import MetricRegistry

if TYPE_CHECKING:
    import httpx
    from fastapi import FastAPI

    from c5exporter.config import ExporterSettings

logger = logging.getLogger(__name__)


class ExporterApplication:
    """C5 exporter with its process-wide components.

    Attributes:
        settings: Loaded configuration
        registry: Metric registry shared by all scrapes
        fetcher: Upstream status fetcher
        worker: Scrape worker
        app: FastAPI application serving ``/metrics``
    """

    def __init__(
        self,
        settings: ExporterSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Build the application from settings.

        Args:
            settings: Exporter configuration
            transport: Optional httpx transport for the fetcher
        """
        self.settings = settings
        self.registry = MetricRegistry()
        self.metrics = ExporterMetrics(self.registry.collector_registry, __version__)
        self.fetcher = StatusFetcher(
            timeout_seconds=settings.fetch_timeout_seconds,
            transport=transport,
        )
        self.worker = ScrapeWorker(
            sources=settings.sources,
            registry=self.registry,
            fetcher=self.fetcher,
            metrics=self.metrics,
        )
        self.app: FastAPI = create_app(self.worker)

    def run(self) -> None:
        """Serve the metrics endpoint until interrupted."""
        import uvicorn

        host, port = self.settings.listen_address
        logger.info(f"Starting c5exporter v{__version__} on {host}:{port}")
        uvicorn.run(
            self.app,
            host=host,
            port=port,
            log_level="debug" if self.settings.debug else "info",
        )
