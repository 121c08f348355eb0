"""Entry point for running the exporter with ``python -m c5exporter``."""

from c5exporter.cli import main

if __name__ == "__main__":
    main()
