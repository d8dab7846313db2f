"""Index field descriptors.

A `Field` describes one index field of a search domain: its name, its type,
where a record's value comes from, and the options used when the field is
defined on the service.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Mapping, Union


class FieldType(str, Enum):
    """Index field types supported by the service."""

    LITERAL = "literal"
    INT = "int"
    TEXT = "text"
    LATLON = "latlon"
    DOUBLE = "double"


# Name of the options block in the field definition payload, per type.
_OPTIONS_BLOCK: dict[FieldType, str] = {
    FieldType.LITERAL: "LiteralOptions",
    FieldType.INT: "IntOptions",
    FieldType.TEXT: "TextOptions",
    FieldType.LATLON: "LatLonOptions",
    FieldType.DOUBLE: "DoubleOptions",
}

_SCALAR_OPTIONS = frozenset(
    {"default_value", "facet_enabled", "return_enabled", "search_enabled", "sort_enabled", "source_field"}
)

# Allowed option keys per type; anything else is dropped.
_ALLOWED_OPTIONS: dict[FieldType, frozenset[str]] = {
    FieldType.LITERAL: _SCALAR_OPTIONS,
    FieldType.INT: _SCALAR_OPTIONS,
    FieldType.LATLON: _SCALAR_OPTIONS,
    FieldType.DOUBLE: _SCALAR_OPTIONS,
    FieldType.TEXT: frozenset({"default_value", "return_enabled", "sort_enabled", "highlight_enabled", "source_field"}),
}


@dataclass(frozen=True, slots=True)
class NamedField:
    """Read the value from a record attribute (or mapping key) by name."""

    attribute: str


@dataclass(frozen=True, slots=True)
class Computed:
    """Compute the value by calling `func(record)`."""

    func: Callable[[Any], Any]


FieldSource = Union[NamedField, Computed]


def _camel(key: str) -> str:
    return "".join(part.capitalize() for part in key.split("_"))


@dataclass(frozen=True, slots=True)
class Field:
    """Descriptor of one index field.

    Attributes:
        name: Field name in the index.
        type: Field type.
        source: Where to read the record value from. Defaults to the
            attribute with the same name as the field.
        options: Definition options, filtered to those valid for `type`.
    """

    name: str
    type: FieldType
    source: FieldSource | None = None
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        try:
            field_type = FieldType(self.type)
        except ValueError:
            raise ValueError(f"Invalid field type '{self.type}'") from None
        object.__setattr__(self, "type", field_type)
        object.__setattr__(self, "name", str(self.name))
        if self.source is None:
            object.__setattr__(self, "source", NamedField(self.name))
        elif not isinstance(self.source, (NamedField, Computed)):
            raise TypeError(f"source must be NamedField or Computed, not {type(self.source).__name__}")
        allowed = _ALLOWED_OPTIONS[field_type]
        kept = {k: v for k, v in dict(self.options).items() if k in allowed}
        object.__setattr__(self, "options", MappingProxyType(kept))

    @property
    def facet_enabled(self) -> bool:
        return self.options.get("facet_enabled") is True

    def value_for(self, record: Any) -> Any:
        """Extract this field's value from a record."""
        source = self.source
        if isinstance(source, Computed):
            return source.func(record)
        if isinstance(record, Mapping):
            return record.get(source.attribute)
        return getattr(record, source.attribute)

    def definition(self) -> dict[str, Any]:
        """Render the index field definition sent when provisioning a domain."""
        return {
            "IndexFieldName": self.name,
            "IndexFieldType": self.type.value,
            _OPTIONS_BLOCK[self.type]: {_camel(k): v for k, v in self.options.items()},
        }
