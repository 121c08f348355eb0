"""C5 exporter CLI entry point.

Provides command-line interface for running the exporter and inspecting its
configuration.
"""

from __future__ import annotations

import logging

import typer
from typing_extensions import Annotated

from c5exporter import __version__
from c5exporter.config import get_config
from c5exporter.errors import ConfigurationError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Create CLI app
app = typer.Typer(
    name="c5exporter",
    help="c5exporter - Prometheus exporter for TELES C5 telephony daemons",
    add_completion=False,
)


@app.command()
def start(
    listen: Annotated[
        str, typer.Option("--listen", "-l", help="Listen address (defaults to :9055)")
    ] = "",
    config: Annotated[
        str, typer.Option("--config", "-c", help="Path to configuration file")
    ] = "",
    debug: Annotated[
        bool, typer.Option("--debug", "-d", help="Enable debug output")
    ] = False,
) -> None:
    """Start the exporter and serve /metrics.

    Every scrape of /metrics fetches all configured C5 sources concurrently
    and returns their counters in the Prometheus text format.

    Examples:
        # Listen on the default port
        c5exporter start

        # Custom listen address and config file
        c5exporter start --listen 127.0.0.1:9100 --config /etc/c5exporter.yaml

    Args:
        listen: Listen address
        config: Path to YAML configuration file
        debug: Enable debug logging
    """
    try:
        settings = get_config(config or None, listen=listen or None, debug=debug or None)
    except ConfigurationError as e:
        typer.echo(f"❌ {e.message}", err=True)
        raise typer.Exit(code=1)

    if settings.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    from c5exporter.main import ExporterApplication

    ExporterApplication(settings).run()


@app.command()
def version() -> None:
    """Show c5exporter version information."""
    try:
        import importlib.metadata

        ver = importlib.metadata.version("c5exporter")
    except importlib.metadata.PackageNotFoundError:
        ver = __version__
    typer.echo(f"c5exporter version: {ver}")


@app.command()
def sources(
    config: Annotated[
        str, typer.Option("--config", "-c", help="Path to configuration file")
    ] = "",
) -> None:
    """List the configured C5 sources."""
    try:
        settings = get_config(config or None)
    except ConfigurationError as e:
        typer.echo(f"❌ {e.message}", err=True)
        raise typer.Exit(code=1)

    typer.echo("Configured sources:")
    for source in settings.sources:
        typer.echo(f"  {source.prefix}: {source.url}")


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
