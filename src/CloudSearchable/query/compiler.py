"""Structured query compiler.

Compiles `(field, operator, value)` triples into clauses of the service's
structured query grammar, and assembles the search request parameters.

Operators
- any              -> (or f:v1 f:v2 ...)
- within_range     -> (range field=f <range>)          int/date only
- not_within_range -> (not (range field=f <range>))    int/date only
- prefixed_with    -> (prefix field=f 'v')
- == / eq          -> f:v
- !=               -> (not f:v)
- > / < / >= / <=  -> f:(v+1).. / f:..(v-1) / f:v.. / f:..v   int only

Date fields take the bracketed range form for the comparison operators since
their values are quoted strings, e.g. `>` becomes `(range field=f {'v',})`.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Sequence

from CloudSearchable.core.exceptions import (
    NoClausesError,
    UnrecognizedOperatorError,
    ValueConversionError,
)
from CloudSearchable.core.fields import Field, FieldType

MATCH_ALL = "matchall"
DEFAULT_PARSER = "structured"
DEFAULT_LIMIT = 10000

# km -> miles; distances in the geo pseudo-facet are reported in miles.
DISTANCE_UNIT_FACTOR = 0.621371
DISTANCE_EXPR = "distance"

RANGE_TYPES = frozenset({"int", "date"})
COMPARISON_OPS = frozenset({">", "<", ">=", "<="})

_RE_NON_WORD = re.compile(r"\W+")

_DATE_BOUNDS = {
    ">": "{{{v},}}",
    "<": "{{,{v}}}",
    ">=": "[{v},}}",
    "<=": "{{,{v}]",
}


def _type_name(field_type: FieldType | str) -> str:
    return str(getattr(field_type, "value", field_type))


def quote(value: Any) -> str:
    """Render a scalar as a single-quoted string literal."""
    text = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{text}'"


def query_clause_value(field_type: FieldType | str, value: Any) -> int | str:
    """Format a value for use in a clause.

    Int fields take integer literals; every other type takes quoted strings.

    Raises:
        ValueConversionError: If the value is None, or is not numeric for an
            int field.
    """
    type_name = _type_name(field_type)
    if value is None:
        raise ValueConversionError(f"Value {value!r} cannot be converted to query string on type {type_name}")
    if type_name == "int":
        try:
            return int(value)
        except (TypeError, ValueError) as e:
            raise ValueConversionError(
                f"Value {value!r} cannot be converted to query string on type {type_name}"
            ) from e
    return quote(value)


def clause_for(field: str, field_type: FieldType | str, op: str, value: Any) -> str:
    """Compile one `(field, op, value)` triple into a structured clause.

    Args:
        field: Index field name.
        field_type: Type of the field, which decides value formatting and
            operator applicability.
        op: Operator name (see module docstring).
        value: Operand. A sequence for `any`, a literal range expression for
            the range operators, a scalar otherwise.

    Returns:
        The clause string.

    Raises:
        UnrecognizedOperatorError: If `op` does not apply to `field_type`.
        ValueConversionError: If `value` cannot be formatted.
    """
    type_name = _type_name(field_type)
    op = str(op)

    if op == "any":
        if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
            raise ValueConversionError(f"any requires a sequence of values, not {type(value).__name__}")
        return "(or " + " ".join(f"{field}:{query_clause_value(type_name, v)}" for v in value) + ")"
    if op == "within_range" and type_name in RANGE_TYPES:
        return f"(range field={field} {value})"
    if op == "not_within_range" and type_name in RANGE_TYPES:
        return f"(not (range field={field} {value}))"
    if op == "prefixed_with":
        return f"(prefix field={field} {quote(value)})"

    formatted = query_clause_value(type_name, value)

    if op in ("==", "eq"):
        return f"{field}:{formatted}"
    if op == "!=":
        return f"(not {field}:{formatted})"

    if op in COMPARISON_OPS:
        if type_name == "int":
            assert isinstance(formatted, int)
            if op == ">":
                return f"{field}:{formatted + 1}.."
            if op == "<":
                return f"{field}:..{formatted - 1}"
            if op == ">=":
                return f"{field}:{formatted}.."
            return f"{field}:..{formatted}"
        if type_name == "date":
            return f"(range field={field} {_DATE_BOUNDS[op].format(v=formatted)})"

    raise UnrecognizedOperatorError(f"op {op} is unrecognized for value {value!r} of type {type_name}")


def text_query(text: str) -> str:
    """Compile free text into an OR of quoted tokens split on non-word runs."""
    tokens = [t for t in _RE_NON_WORD.split(text) if t]
    return "(or " + " ".join(quote(t) for t in tokens) + ")"


def compile_query(
    *,
    q: str | None,
    clauses: Sequence[str],
    return_fields: Iterable[str],
    size: int,
    parser: str = DEFAULT_PARSER,
    sort: str | None = None,
    start: int | None = None,
    fields: Mapping[str, Field] | None = None,
    location: tuple[float, float] | None = None,
) -> dict[str, Any]:
    """Assemble the search request parameters.

    `fq`, `sort` and `start` are emitted only when set. A facet request is
    appended for every facet-enabled field; latlon fields contribute a
    distance expression instead, and only while a location is set.

    Raises:
        NoClausesError: If there are no clauses and the free-text query is empty.
    """
    if not clauses and not q:
        raise NoClausesError("no search terms were specified")

    if len(clauses) > 1:
        fq: str | None = "(and " + " ".join(clauses) + ")"
    elif clauses:
        fq = clauses[0]
    else:
        fq = None

    params: dict[str, Any] = {
        "q": q,
        "return": "".join(str(f) for f in return_fields),
        "size": size,
        "q.parser": parser,
    }
    if fq is not None:
        params["fq"] = fq
    if sort is not None:
        params["sort"] = sort
    if start is not None:
        params["start"] = start

    for name, field in (fields or {}).items():
        if not field.facet_enabled:
            continue
        if field.type is FieldType.LATLON:
            if location is None or f"expr.{DISTANCE_EXPR}" in params:
                continue
            lat, lon = location
            params[f"expr.{DISTANCE_EXPR}"] = (
                f"haversin({lat}, {lon}, {name}.latitude, {name}.longitude)*{DISTANCE_UNIT_FACTOR}"
            )
            params["return"] = f"{params['return']},{DISTANCE_EXPR}" if params["return"] else DISTANCE_EXPR
        else:
            params[f"facet.{name}"] = {}
    return params

