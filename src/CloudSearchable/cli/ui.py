"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands
to their respective runners.
"""

from __future__ import annotations

import re
from pathlib import Path

import click
from dotenv import load_dotenv

from CloudSearchable.cli.runner import CommandRunner
from CloudSearchable.config import load_config

_RE_WHERE = re.compile(r"^\s*([\w.-]+)\s*(==|!=|>=|<=|>|<|=)\s*(.*?)\s*$")


def _parse_where(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]) -> tuple[tuple[str, str, str], ...]:
    """Turn `FIELD=VALUE` / `FIELD>=VALUE` options into filter triples."""
    del ctx, param
    out: list[tuple[str, str, str]] = []
    for raw in values:
        match = _RE_WHERE.match(raw)
        if not match:
            raise click.BadParameter(f"expected FIELD<op>VALUE, got {raw!r}")
        name, op, value = match.groups()
        out.append((name, "==" if op == "=" else op, value))
    return tuple(out)


@click.group(help="CloudSearchable: query a search domain from the terminal.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=Path("config/default.yml"),
    show_default=True,
    help="Path to YAML config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path) -> None:
    """CLI entry group.

    Loads environment variables from .env file before processing config.
    """
    load_dotenv()

    ctx.obj = load_config(config_path)


@cli.command("search")
@click.option("--text", default=None, help="Free text; matches any of the words.")
@click.option("--plain-text", default=None, help="Free-text query passed verbatim.")
@click.option("--where", "where", multiple=True, callback=_parse_where, help="Filter, e.g. status=active or age>=30.")
@click.option("--sort", default=None, help="Sort expression, e.g. '-created_at'.")
@click.option("--limit", type=int, default=None, help="Maximum number of hits.")
@click.option("--offset", type=int, default=None, help="Number of hits to skip.")
@click.option("--return", "returning", multiple=True, help="Field to return with each hit.")
@click.option("--facet", "facets", multiple=True, help="Print facet buckets for this field.")
@click.option("--dry-run", is_flag=True, help="Print the compiled query parameters and exit.")
@click.pass_context
def search_cmd(ctx: click.Context, **options) -> None:
    """Run one search against the configured domain.

    Raises:
        click.Abort: When the search fails.
    """
    runner = CommandRunner(ctx.obj)
    runner.run_search(action=ctx.command.name, **options)
