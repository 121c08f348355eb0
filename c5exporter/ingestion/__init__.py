"""Ingestion module: fetching of C5 sources and the scrape pipeline."""

from .fetcher import StatusFetcher
from .worker import ScrapeResult, ScrapeWorker, process_response

__all__ = [
    "ScrapeResult",
    "ScrapeWorker",
    "StatusFetcher",
    "process_response",
]
