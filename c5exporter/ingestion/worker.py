"""Scrape worker: fetch and process every configured source concurrently."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from c5exporter.errors import C5ExporterError, ConfigurationError
from c5exporter.models.schemas import check_source_prefixes
from c5exporter.observability.recorder import (
    clear_source_metrics,
    record_base_health,
    record_counters,
)
from c5exporter.parsing.classifier import classify_counter_block

if TYPE_CHECKING:
    from c5exporter.ingestion.fetcher import StatusFetcher
    from c5exporter.models.schemas import RawStatusResponse, Source
    from c5exporter.monitoring.metrics import ExporterMetrics
    from c5exporter.observability.registry import MetricRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScrapeResult:
    """Outcome of one source within a scrape."""

    prefix: str
    ok: bool
    duration_seconds: float
    counters: int = 0
    error: str | None = None


def process_response(registry: MetricRegistry, prefix: str, response: RawStatusResponse) -> int:
    """Record the base health and counters of one decoded response.

    The whole counter block is parsed before the first counter is written.

    Args:
        registry: Target registry
        prefix: Source prefix
        response: Decoded status response

    Returns:
        Number of counters recorded

    Raises:
        CounterParseError: If any field or counter line is malformed
    """
    counters = classify_counter_block(response.counter_block)
    record_base_health(registry, prefix, response)
    return record_counters(registry, prefix, counters)


class ScrapeWorker:
    """Runs one fetch-and-process task per source and joins on all of them.

    A failing source has its series cleared and is absent from the output;
    it never fails the scrape as a whole.
    """

    def __init__(
        self,
        sources: list[Source],
        registry: MetricRegistry,
        fetcher: StatusFetcher,
        metrics: ExporterMetrics | None = None,
    ) -> None:
        """Initialize worker.

        Args:
            sources: Sources to poll on each scrape
            registry: Shared metric registry
            fetcher: Upstream fetcher
            metrics: Optional exporter self-metrics

        Raises:
            ConfigurationError: If two sources have duplicate or nested prefixes
        """
        try:
            check_source_prefixes(sources)
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        self.sources = list(sources)
        self.registry = registry
        self.fetcher = fetcher
        self.metrics = metrics

    async def scrape(self) -> list[ScrapeResult]:
        """Scrape all sources concurrently.

        Returns:
            One result per source, in configured order
        """
        start = time.perf_counter()

        tasks = [self._scrape_source(source) for source in self.sources]
        outcomes = await asyncio.gather(*tasks, return_exceptions=True)

        results: list[ScrapeResult] = []
        for source, outcome in zip(self.sources, outcomes):
            if isinstance(outcome, BaseException):
                # Not a C5ExporterError: still drop the source, keep scraping
                logger.error(
                    f"Unexpected failure scraping {source.prefix}: {outcome!r}",
                    exc_info=outcome if logger.isEnabledFor(logging.DEBUG) else None,
                )
                clear_source_metrics(self.registry, source.prefix)
                self._record_error(source.prefix, "internal_error")
                outcome = ScrapeResult(source.prefix, False, 0.0, error="internal_error")
            results.append(outcome)

        duration = time.perf_counter() - start
        if self.metrics is not None:
            self.metrics.observe_scrape(duration)

        ok = sum(1 for r in results if r.ok)
        logger.debug(f"Scrape complete: {ok}/{len(results)} sources in {duration:.3f}s")
        return results

    async def _scrape_source(self, source: Source) -> ScrapeResult:
        """Fetch and process a single source."""
        start = time.perf_counter()
        try:
            response = await self.fetcher.fetch(source)
            counters = process_response(self.registry, source.prefix, response)
        except C5ExporterError as e:
            logger.warning(f"Scrape of {source.prefix} failed ({e.kind}): {e.message}")
            removed = clear_source_metrics(self.registry, source.prefix)
            logger.debug(f"Cleared {len(removed)} series for {source.prefix}")
            self._record_error(source.prefix, e.kind)
            return ScrapeResult(
                source.prefix,
                ok=False,
                duration_seconds=time.perf_counter() - start,
                error=e.kind,
            )

        return ScrapeResult(
            source.prefix,
            ok=True,
            duration_seconds=time.perf_counter() - start,
            counters=counters,
        )

    def _record_error(self, prefix: str, kind: str) -> None:
        if self.metrics is not None:
            self.metrics.record_source_error(prefix, kind)
