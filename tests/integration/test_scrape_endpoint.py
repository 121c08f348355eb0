"""End-to-end tests of the /metrics endpoint against mocked C5 daemons."""

from __future__ import annotations

from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient
from prometheus_client import CONTENT_TYPE_LATEST

from c5exporter.config import ExporterSettings
from c5exporter.main import ExporterApplication

pytestmark = pytest.mark.integration

PORTS = {9980: "sipproxyd", 9982: "acdqueued", 9984: "registrard"}


class FakeC5:
    """Mock transport handler serving one payload per daemon port."""

    def __init__(self, payloads: dict[str, Any]) -> None:
        self.payloads = payloads
        self.down: set[str] = set()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        prefix = PORTS[request.url.port or 80]
        if prefix in self.down:
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json=self.payloads[prefix])


@pytest.fixture
def settings() -> ExporterSettings:
    """Settings pointing at the three mocked daemons."""
    return ExporterSettings(
        sources=[
            {"prefix": prefix, "url": f"http://c5.test:{port}/c5/proxy/commands?49&1&-v"}
            for port, prefix in PORTS.items()
        ]
    )


@pytest.fixture
def fake_c5(sipproxyd_payload: dict[str, Any], acdqueued_payload: dict[str, Any]) -> FakeC5:
    """Mocked C5 host."""
    return FakeC5(
        {
            "sipproxyd": sipproxyd_payload,
            "acdqueued": acdqueued_payload,
            "registrard": {"registrarState": "active", "counterInfos": []},
        }
    )


def _series(text: str) -> list[str]:
    return [line for line in text.splitlines() if line and not line.startswith("#")]


class TestScrapeEndpoint:
    """Test suite for GET /metrics."""

    def test_scrape_all_sources(self, settings: ExporterSettings, fake_c5: FakeC5) -> None:
        """Test one scrape exposes every source."""
        exporter = ExporterApplication(settings, transport=httpx.MockTransport(fake_c5))

        with TestClient(exporter.app) as client:
            response = client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"] == CONTENT_TYPE_LATEST
        text = response.text
        assert "sipproxyd_transport_message_in_total 6461.0" in text
        assert 'sipproxyd_transaction_and_tu_tu_manager_queue_size_current{idx="1"} 1.0' in text
        assert "# TYPE sipproxyd_transport_message_in counter" in text
        assert 'sipproxyd_info{version="6.0.2.57",starttime="2020-01-19 04:01:04.503"} 1.0' in text
        assert "acdqueued_acd_calls_queued_total 40.0" in text
        assert "acdqueued_memory_used_bytes 7.9691776e+07" in text
        assert "registrard_state 1.0" in text
        assert 'c5exporter_build_info{version="' in text

    def test_failing_source_disappears(self, settings: ExporterSettings, fake_c5: FakeC5) -> None:
        """Test a source that stops answering is dropped from the next scrape."""
        exporter = ExporterApplication(settings, transport=httpx.MockTransport(fake_c5))

        with TestClient(exporter.app) as client:
            first = client.get("/metrics")
            fake_c5.down.add("sipproxyd")
            second = client.get("/metrics")
            fake_c5.down.clear()
            third = client.get("/metrics")

        assert any(s.startswith("sipproxyd_") for s in _series(first.text))

        assert second.status_code == 200
        series = _series(second.text)
        assert not any(s.startswith("sipproxyd_") for s in series)
        assert any(s.startswith("acdqueued_") for s in series)
        assert any(s.startswith("registrard_") for s in series)
        assert (
            'c5exporter_source_scrape_errors_total{source="sipproxyd",error="upstream_unreachable"} 1.0'
            in second.text
        )

        assert "sipproxyd_transport_message_in_total 6461.0" in third.text

    def test_malformed_payload_disappears(self, settings: ExporterSettings, fake_c5: FakeC5) -> None:
        """Test a source with a malformed counter block is dropped."""
        fake_c5.payloads["acdqueued"]["counterInfos"].append("17 TRUNCATED")
        exporter = ExporterApplication(settings, transport=httpx.MockTransport(fake_c5))

        with TestClient(exporter.app) as client:
            response = client.get("/metrics")

        assert response.status_code == 200
        assert not any(s.startswith("acdqueued_") for s in _series(response.text))
        assert "sipproxyd_state 1.0" in response.text

    def test_all_sources_down(self, settings: ExporterSettings, fake_c5: FakeC5) -> None:
        """Test the endpoint still answers when every source fails."""
        fake_c5.down.update(PORTS.values())
        exporter = ExporterApplication(settings, transport=httpx.MockTransport(fake_c5))

        with TestClient(exporter.app) as client:
            response = client.get("/metrics")

        assert response.status_code == 200
        assert all(s.startswith("c5exporter_") for s in _series(response.text))

    def test_unknown_path(self, settings: ExporterSettings, fake_c5: FakeC5) -> None:
        """Test only /metrics is served."""
        exporter = ExporterApplication(settings, transport=httpx.MockTransport(fake_c5))

        with TestClient(exporter.app) as client:
            assert client.get("/").status_code == 404
