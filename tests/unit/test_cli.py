"""Tests for c5exporter CLI commands."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from typer.testing import CliRunner

from c5exporter import __version__
from c5exporter.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Isolate from ambient configuration and restore the root log level."""
    monkeypatch.delenv("C5EXPORTER_CONFIG", raising=False)
    monkeypatch.delenv("C5EXPORTER_LISTEN", raising=False)
    monkeypatch.delenv("C5EXPORTER_DEBUG", raising=False)
    monkeypatch.delenv("C5EXPORTER_SOURCES", raising=False)
    monkeypatch.chdir(tmp_path)
    level = logging.getLogger().level
    yield
    logging.getLogger().setLevel(level)


class TestCLICommands:
    """Test suite for CLI commands."""

    def test_version_command(self) -> None:
        """Test version command."""
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "c5exporter version" in result.stdout

    def test_help(self) -> None:
        """Test top-level help lists the commands."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "start" in result.stdout
        assert "sources" in result.stdout

    def test_sources_defaults(self) -> None:
        """Test the default sources are listed."""
        result = runner.invoke(app, ["sources"])

        assert result.exit_code == 0
        assert "Configured sources:" in result.stdout
        assert "sipproxyd: http://127.0.0.1:9980/c5/proxy/commands?49&1&-v" in result.stdout
        assert "acdqueued:" in result.stdout
        assert "registrard:" in result.stdout

    def test_sources_from_file(self, tmp_path: Path) -> None:
        """Test sources are read from --config."""
        path = tmp_path / "c5exporter.yaml"
        path.write_text("sources:\n  - prefix: lab\n    url: http://lab:9980/\n")

        result = runner.invoke(app, ["sources", "--config", str(path)])

        assert result.exit_code == 0
        assert "lab: http://lab:9980/" in result.stdout
        assert "sipproxyd" not in result.stdout

    def test_sources_missing_config(self, tmp_path: Path) -> None:
        """Test a missing config file exits with status 1."""
        result = runner.invoke(app, ["sources", "-c", str(tmp_path / "missing.yaml")])

        assert result.exit_code == 1
        assert "Config file not found" in result.output

    @patch("c5exporter.main.ExporterApplication")
    def test_start_command(self, mock_app: MagicMock) -> None:
        """Test start builds the application from options and runs it."""
        result = runner.invoke(app, ["start", "--listen", "127.0.0.1:9100", "--debug"])

        assert result.exit_code == 0
        mock_app.assert_called_once()
        settings = mock_app.call_args.args[0]
        assert settings.listen_address == ("127.0.0.1", 9100)
        assert settings.debug is True
        mock_app.return_value.run.assert_called_once()
        assert logging.getLogger().level == logging.DEBUG

    @patch("c5exporter.main.ExporterApplication")
    def test_start_invalid_listen(self, mock_app: MagicMock) -> None:
        """Test an invalid listen address exits with status 1."""
        result = runner.invoke(app, ["start", "--listen", "nowhere"])

        assert result.exit_code == 1
        assert "Invalid configuration" in result.output
        mock_app.assert_not_called()


def test_package_version() -> None:
    """Test the package exposes its version."""
    assert __version__.count(".") == 2
