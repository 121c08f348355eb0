"""FastAPI application exposing the scrape endpoint."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST
from starlette.responses import Response

if TYPE_CHECKING:
    from c5exporter.ingestion.worker import ScrapeWorker

logger = logging.getLogger(__name__)


def create_app(worker: ScrapeWorker) -> FastAPI:
    """Create the exporter application.

    ``GET /metrics`` fetches every source, waits for all of them and renders
    the registry. The application lifespan owns the fetcher's HTTP client.

    Args:
        worker: Scrape worker wired to the registry and fetcher

    Returns:
        FastAPI application
    """

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        await worker.fetcher.start()
        logger.info(f"Polling {len(worker.sources)} sources: {', '.join(s.prefix for s in worker.sources)}")
        try:
            yield
        finally:
            await worker.fetcher.stop()

    app = FastAPI(title="c5exporter", docs_url=None, redoc_url=None, openapi_url=None, lifespan=lifespan)

    @app.get("/metrics")
    async def metrics() -> Response:
        """Scrape all sources and expose their metrics."""
        await worker.scrape()
        return Response(
            content=worker.registry.render(),
            media_type=CONTENT_TYPE_LATEST,
        )

    return app
