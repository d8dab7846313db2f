"""Shared stand-ins for query tests."""

from __future__ import annotations

from typing import Any, Mapping

from CloudSearchable.core.fields import Field


def make_fields(*specs: tuple[str, str] | tuple[str, str, dict]) -> dict[str, Field]:
    fields: dict[str, Field] = {}
    for spec in specs:
        name, field_type = spec[0], spec[1]
        options = spec[2] if len(spec) > 2 else {}
        fields[name] = Field(name=name, type=field_type, options=options)
    return fields


class FakeTarget:
    """Domain stand-in that records every executed query."""

    def __init__(self, fields: dict[str, Field], response: Mapping[str, Any] | None = None) -> None:
        self.fields = fields
        self.response = response if response is not None else {"hits": {"found": 0, "hit": []}}
        self.calls: list[dict[str, Any]] = []

    def execute_query(self, params: Mapping[str, Any]) -> Mapping[str, Any]:
        self.calls.append(dict(params))
        return self.response
