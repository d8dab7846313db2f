from __future__ import annotations

"""Application config orchestration and YAML loading entrypoints."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from CloudSearchable.config.aws import AwsConfig, check_aws, load_aws
from CloudSearchable.config.domain import DomainConfig, check_domain, load_domain
from CloudSearchable.config.query import QueryConfig, check_query, load_query
from CloudSearchable.config.runtime import RuntimeConfig, check_runtime, load_runtime


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application root configuration."""

    runtime: RuntimeConfig
    aws: AwsConfig
    domain: DomainConfig
    query: QueryConfig


def parse_config_dict(raw: Mapping[str, Any]) -> AppConfig:
    """Parse normalized mapping into AppConfig."""
    runtime = load_runtime(raw)
    aws = load_aws(raw)
    domain = load_domain(raw)
    query = load_query(raw)

    check_runtime(runtime)
    check_aws(aws)
    check_domain(domain)
    check_query(query)

    return AppConfig(runtime=runtime, aws=aws, domain=domain, query=query)


def load_config(path: Path, default_path: Path | None = None) -> AppConfig:
    """Load a YAML config file, deep-merged over `default_path` when given."""
    raw = parse_yaml(path.read_text(encoding="utf-8"))
    if default_path is not None and default_path != path:
        base = parse_yaml(default_path.read_text(encoding="utf-8"))
        raw = merge_config_dicts(base, raw)
    return parse_config_dict(raw)


def parse_yaml(text: str) -> dict[str, Any]:
    """Parse raw YAML text into a mapping."""
    data = yaml.safe_load(text) or {}
    if not isinstance(data, Mapping):
        raise ValueError("Config root must be a mapping/object")
    return dict(data)


def merge_config_dicts(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Deep-merge two config mappings."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], Mapping) and isinstance(value, Mapping):
            merged[key] = merge_config_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged
