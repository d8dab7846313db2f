"""Query execution configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from CloudSearchable.config.common import expect_bool, expect_optional_float, get_section


@dataclass(frozen=True, slots=True)
class QueryConfig:
    """Store validated query behavior settings.

    Attributes:
        fatal_warnings: Raise when the service reports a warning.
        timeout: HTTP timeout in seconds; None keeps the transport default.
    """

    fatal_warnings: bool = False
    timeout: float | None = None


def load_query(raw: Mapping[str, Any]) -> QueryConfig:
    section = get_section(raw, "query", required=False)
    return QueryConfig(
        fatal_warnings=expect_bool(section.get("fatal_warnings", False), "query.fatal_warnings"),
        timeout=expect_optional_float(section.get("timeout"), "query.timeout"),
    )


def check_query(config: QueryConfig) -> None:
    if config.timeout is not None and config.timeout <= 0:
        raise ValueError("query.timeout must be positive")
