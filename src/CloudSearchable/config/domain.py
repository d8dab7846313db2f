"""Search domain configuration and index field declarations."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from CloudSearchable.client.http import API_VERSION
from CloudSearchable.config.common import (
    expect_list,
    expect_mapping,
    expect_optional_str,
    expect_str,
    get_required_value,
    get_section,
)
from CloudSearchable.core.fields import Field, NamedField


@dataclass(frozen=True, slots=True)
class DomainConfig:
    """Store validated domain settings.

    Attributes:
        name: Domain name without prefix.
        prefix: Prefix prepended to the name (e.g. "dev-").
        api_version: Service API version path segment.
        search_endpoint: Search endpoint host; looked up when None.
        doc_endpoint: Document endpoint host; looked up when None.
        fields: Index field descriptors.
    """

    name: str
    prefix: str = ""
    api_version: str = API_VERSION
    search_endpoint: str | None = None
    doc_endpoint: str | None = None
    fields: tuple[Field, ...] = ()

    @property
    def full_name(self) -> str:
        return f"{self.prefix}{self.name}"


def load_domain(raw: Mapping[str, Any]) -> DomainConfig:
    """Load the `domain` section.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing or a field type is unknown.
    """
    section = get_section(raw, "domain", required=True)
    fields_raw = expect_list(section.get("fields", []), "domain.fields")
    return DomainConfig(
        name=expect_str(get_required_value(section, "name", "domain.name"), "domain.name"),
        prefix=expect_str(section.get("prefix", ""), "domain.prefix"),
        api_version=expect_str(section.get("api_version", API_VERSION), "domain.api_version"),
        search_endpoint=expect_optional_str(section.get("search_endpoint"), "domain.search_endpoint"),
        doc_endpoint=expect_optional_str(section.get("doc_endpoint"), "domain.doc_endpoint"),
        fields=tuple(_parse_field(item, f"domain.fields[{idx}]") for idx, item in enumerate(fields_raw)),
    )


def _parse_field(value: Any, config_key: str) -> Field:
    item = expect_mapping(value, config_key)
    name = expect_str(get_required_value(item, "name", f"{config_key}.name"), f"{config_key}.name")
    field_type = expect_str(get_required_value(item, "type", f"{config_key}.type"), f"{config_key}.type")
    source = expect_optional_str(item.get("source"), f"{config_key}.source")
    options = expect_mapping(item.get("options") or {}, f"{config_key}.options")
    try:
        return Field(
            name=name,
            type=field_type,
            source=NamedField(source) if source else None,
            options=dict(options),
        )
    except ValueError as e:
        raise ValueError(f"{config_key}.type: {e}") from e


def check_domain(config: DomainConfig) -> None:
    """Validate domain constraints."""
    if not config.name.strip():
        raise ValueError("domain.name must not be empty")
    if not config.api_version.strip():
        raise ValueError("domain.api_version must not be empty")
    seen: set[str] = set()
    for field in config.fields:
        if field.name in seen:
            raise ValueError(f"domain.fields has duplicate field: {field.name}")
        seen.add(field.name)
