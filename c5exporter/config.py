"""C5 exporter configuration management with environment variable overrides.

Priority order for configuration values:
1. Values from the YAML config file (``--config`` / ``C5EXPORTER_CONFIG``)
2. Environment variables (``C5EXPORTER_*``) and ``.env``
3. Pydantic defaults (lowest priority)

Example YAML file::

    listen: ":9055"
    debug: false
    fetch_timeout_seconds: 2.0
    sources:
      - prefix: sipproxyd
        url: http://127.0.0.1:9980/c5/proxy/commands?49&1&-v
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from c5exporter.errors import ConfigurationError
from c5exporter.models.schemas import Source, check_source_prefixes

logger = logging.getLogger(__name__)

DEFAULT_LISTEN = ":9055"

DEFAULT_SOURCES: list[dict[str, str]] = [
    {"prefix": "sipproxyd", "url": "http://127.0.0.1:9980/c5/proxy/commands?49&1&-v"},
    {"prefix": "acdqueued", "url": "http://127.0.0.1:9982/c5/proxy/commands?49&1&-v"},
    {"prefix": "registrard", "url": "http://127.0.0.1:9984/c5/proxy/commands?49&1&-v"},
]


def parse_listen_address(listen: str) -> tuple[str, int]:
    """Split a ``host:port`` listen address.

    An empty host (``":9055"``) binds all interfaces.

    Args:
        listen: Listen address

    Returns:
        Tuple of (host, port)

    Raises:
        ValueError: If the port is missing or not a valid port number
    """
    host, sep, port_str = listen.strip().rpartition(":")
    if not sep or not port_str.isdigit():
        raise ValueError(f"Invalid listen address: {listen!r}")
    port = int(port_str)
    if not 0 < port < 65536:
        raise ValueError(f"Invalid listen port: {port}")
    host = host.strip("[]") or "0.0.0.0"
    return host, port


class ExporterSettings(BaseSettings):
    """Main exporter configuration.

    Attributes:
        listen: Listen address of the metrics endpoint
        debug: Enable debug logging
        fetch_timeout_seconds: Timeout of a single upstream fetch
        sources: C5 daemons to poll on each scrape
    """

    listen: str = DEFAULT_LISTEN
    debug: bool = False
    fetch_timeout_seconds: float = Field(default=2.0, gt=0, le=60)
    sources: list[Source] = Field(
        default_factory=lambda: [Source(**s) for s in DEFAULT_SOURCES]
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        env_prefix="c5exporter_",
        extra="ignore",
    )

    @field_validator("listen")
    @classmethod
    def validate_listen(cls, v: str) -> str:
        """Validate that the listen address has a usable port."""
        parse_listen_address(v)
        return v

    @field_validator("sources")
    @classmethod
    def validate_source_prefixes(cls, v: list[Source]) -> list[Source]:
        """Reject duplicate or nested source prefixes."""
        check_source_prefixes(v)
        return v

    @property
    def listen_address(self) -> tuple[str, int]:
        """Listen address as (host, port)."""
        return parse_listen_address(self.listen)


def load_config_from_file(config_path: str) -> dict[str, Any]:
    """Load configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        ConfigurationError: If the file is missing or not a YAML mapping
    """
    path = Path(config_path).expanduser()
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}", {"path": str(path)})

    try:
        with path.open() as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            f"Failed to load config from {config_path}: {e}", {"path": str(path)}
        ) from e

    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Config file must contain a mapping: {config_path}", {"path": str(path)}
        )

    logger.info(f"Loaded configuration from {config_path}")
    return config


def get_config(config_path: str | None = None, **overrides: Any) -> ExporterSettings:
    """Get configuration instance.

    Args:
        config_path: Optional path to YAML config file, defaults to
            ``C5EXPORTER_CONFIG`` when set
        **overrides: Values taking precedence over file and environment
            (None values are ignored)

    Returns:
        ExporterSettings instance

    Raises:
        ConfigurationError: If the file cannot be loaded or values are invalid
    """
    config_path = config_path or os.getenv("C5EXPORTER_CONFIG") or None

    values: dict[str, Any] = {}
    if config_path:
        values.update(load_config_from_file(config_path))
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ExporterSettings(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
