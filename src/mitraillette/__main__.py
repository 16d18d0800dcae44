# src/mitraillette/__main__.py
"""Command line entry point for the :mod:`mitraillette` package.

When executed as ``python -m mitraillette`` this module simply delegates to
:func:`mitraillette.cli.main.main` which implements the full CLI logic.
"""

from __future__ import annotations

from mitraillette.cli.main import main as cli_main


def main() -> None:
    """Invoke :func:`mitraillette.cli.main.main`."""

    cli_main()


if __name__ == "__main__":  # pragma: no cover - direct execution path
    main()
