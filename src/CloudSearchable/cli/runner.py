"""Command runner for coordinating CLI execution.

Manages logging configuration, component creation, resource cleanup and
error handling for command execution.
"""

from __future__ import annotations

from typing import Any

import click

from CloudSearchable.cli.commands import SearchCommand
from CloudSearchable.config import AppConfig
from CloudSearchable.services import create_domain
from CloudSearchable.utils.log import configure_logging, log


class CommandRunner:
    """Orchestrates command execution with proper resource management."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def run_search(self, action: str, **options: Any) -> None:
        """Execute the search command.

        Args:
            action: The CLI command name (e.g., 'search').
            **options: `SearchCommand` attributes parsed from the CLI.

        Raises:
            click.Abort: When the search fails.
        """
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )
        try:
            domain = create_domain(self.config)
            with domain.api_client:
                SearchCommand(domain=domain, echo=click.echo, **options).execute()
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("Search failed: %s", e)
            raise click.Abort from e
