"""CLI package for CloudSearchable.

Contains the click interface, the command runner that owns logging and
resource cleanup, and the command implementations.
"""

from __future__ import annotations

__all__ = ["CommandRunner", "main"]

from CloudSearchable.cli.runner import CommandRunner
from CloudSearchable.cli.ui import cli


def main() -> None:
    """Run CloudSearchable CLI.

    Entry point referenced by console script in pyproject.toml.
    """
    cli()
