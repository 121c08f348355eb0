"""Fetching of C5 status responses over HTTP."""

from __future__ import annotations

import logging

import httpx
from pydantic import ValidationError

from c5exporter.errors import UpstreamDecodeFailure, UpstreamUnreachable
from c5exporter.models.schemas import RawStatusResponse, Source

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT_SECONDS = 2.0


class StatusFetcher:
    """Single-attempt fetcher for C5 status endpoints.

    One fetch is one GET with a bounded timeout; there are no retries.
    """

    def __init__(
        self,
        timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize fetcher.

        Args:
            timeout_seconds: Timeout of a single fetch
            transport: Optional httpx transport (used by tests)
        """
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._http_client: httpx.AsyncClient | None = None

    async def start(self) -> httpx.AsyncClient:
        """Open the HTTP client.

        Returns:
            The open client, created on first call
        """
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=self.timeout_seconds,
                transport=self._transport,
            )
        return self._http_client

    async def stop(self) -> None:
        """Close the HTTP client."""
        if self._http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def fetch(self, source: Source) -> RawStatusResponse:
        """Fetch and decode the status response of a source.

        Args:
            source: Source to fetch

        Returns:
            Decoded status response

        Raises:
            UpstreamUnreachable: On connection failure, timeout or error status
            UpstreamDecodeFailure: If the body is not a valid status response
        """
        client = await self.start()

        try:
            response = await client.get(source.url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise UpstreamUnreachable(source.prefix, f"failed to connect: {e}", e) from e

        try:
            return RawStatusResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise UpstreamDecodeFailure(
                source.prefix, f"failed to parse response: {e.error_count()} errors", e
            ) from e
