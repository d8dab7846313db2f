from __future__ import annotations

"""Public configuration API for CloudSearchable."""

from CloudSearchable.config.app import (
    AppConfig,
    load_config,
    merge_config_dicts,
    parse_config_dict,
)
from CloudSearchable.config.aws import AwsConfig
from CloudSearchable.config.domain import DomainConfig
from CloudSearchable.config.query import QueryConfig
from CloudSearchable.config.runtime import RuntimeConfig

__all__ = [
    "AppConfig",
    "AwsConfig",
    "DomainConfig",
    "QueryConfig",
    "RuntimeConfig",
    "load_config",
    "merge_config_dicts",
    "parse_config_dict",
]
