"""Chainable search query builder.

A `QueryChain` accumulates filters, free text, sort and paging through
chained calls, and runs the search the first time a result is read:

    chain = domain.query().where("customer_id", "==", 12345).order("-created_at").limit(25)
    for hit in chain:
        ...

The response is cached on the chain; every later read reuses it. A chain is
single-use: once executed, builder methods raise `InvalidStateError`.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Iterator, Mapping, Protocol

from CloudSearchable.core.exceptions import (
    InvalidStateError,
    UnknownFieldError,
    ValueConversionError,
    WarningInQueryResultError,
)
from CloudSearchable.core.fields import Field
from CloudSearchable.core.models import FacetBucket
from CloudSearchable.query.compiler import (
    DEFAULT_LIMIT,
    DEFAULT_PARSER,
    MATCH_ALL,
    clause_for,
    compile_query,
    text_query,
)
from CloudSearchable.query.results import ResultView
from CloudSearchable.utils.log import log


class QueryTarget(Protocol):
    """What a chain needs from the index it queries."""

    @property
    def fields(self) -> Mapping[str, Field]:
        raise NotImplementedError

    def execute_query(self, params: Mapping[str, Any]) -> Mapping[str, Any]:
        """Run a compiled search and return the parsed response."""
        raise NotImplementedError


class ChainState(Enum):
    BUILDING = "building"
    MATERIALIZED = "materialized"


def _coerce_count(count: Any, name: str) -> int:
    try:
        return int(count)
    except (TypeError, ValueError) as e:
        raise ValueConversionError(f"{name} value must be convertible to an integer, got {count!r}") from e


class QueryChain:
    """Query against one search domain.

    Args:
        target: The domain (field registry + query execution).
        fatal_warnings: If true, a warning in the response raises
            `WarningInQueryResultError` after it is logged.
    """

    def __init__(self, target: QueryTarget, *, fatal_warnings: bool = False) -> None:
        self.target = target
        self.fatal_warnings = fatal_warnings
        self.state = ChainState.BUILDING
        self._q: str | None = MATCH_ALL
        self._clauses: list[str] = []
        self._sort: str | None = None
        self._limit: int = DEFAULT_LIMIT
        self._offset: int | None = None
        self._fields: dict[str, None] = {}
        self._parser: str = DEFAULT_PARSER
        self._location: tuple[float, float] | None = None
        self._results: ResultView | None = None

    @property
    def fields(self) -> tuple[str, ...]:
        """Fields requested via `returning`, in first-requested order."""
        return tuple(self._fields)

    @property
    def materialized(self) -> bool:
        """True once the search has been executed."""
        return self.state is ChainState.MATERIALIZED

    def _ensure_building(self) -> None:
        if self.state is not ChainState.BUILDING:
            raise InvalidStateError("query has already been executed and can no longer be modified")

    def where(self, field_or_mapping: str | Mapping[str, Any], op: str | None = None, value: Any = None) -> QueryChain:
        """Add a filter clause.

        Either `where(field, op, value)` for a single field, or
        `where({"field": value, ...})` for equality on several fields:

            chain.where("customer_id", "==", 12345)
            chain.where("product_group", "any", ["gl_kitchen", "gl_grocery"])
            chain.where({"customer_id": "12345", "another_field": "Some value"})

        Raises:
            InvalidStateError: If the chain was already executed.
            UnknownFieldError: If the field is not part of the index.
            TypeError: If the first argument is neither a name nor a mapping.
        """
        self._ensure_building()

        if isinstance(field_or_mapping, Mapping):
            for key, val in field_or_mapping.items():
                self.where(key, "==", val)
            return self
        if not isinstance(field_or_mapping, str):
            raise TypeError(f"field_or_mapping must be a str or Mapping, not {type(field_or_mapping).__name__}")

        field = self.target.fields.get(field_or_mapping)
        if field is None:
            raise UnknownFieldError(
                f"cannot query on field '{field_or_mapping}' because it is not a member of this index"
            )
        self._clauses.append(clause_for(field_or_mapping, field.type, str(op), value))
        return self

    def text(self, text: str) -> QueryChain:
        """Search for any of the words in `text`, replacing any previous text query."""
        self._ensure_building()
        self._q = text_query(text)
        return self

    def plain_text(self, text: str | None) -> QueryChain:
        """Set the free-text query verbatim."""
        self._ensure_building()
        self._q = text
        return self

    def order(self, rank_expression: str) -> QueryChain:
        """Set the sort expression, e.g. `"created_at asc"` or `"-created_at"`."""
        self._ensure_building()
        if not isinstance(rank_expression, str):
            raise TypeError(f"order clause must be a string, not a {type(rank_expression).__name__}")
        self._sort = rank_expression
        return self

    def limit(self, count: Any) -> QueryChain:
        self._ensure_building()
        self._limit = _coerce_count(count, "limit")
        return self

    def offset(self, count: Any) -> QueryChain:
        self._ensure_building()
        self._offset = _coerce_count(count, "offset")
        return self

    def returning(self, *fields: str | Iterable[str]) -> QueryChain:
        """Add fields to return with each hit.

        Accepts names and (nested) lists of names; duplicates are ignored.
        """
        self._ensure_building()
        for item in _flatten(fields):
            self._fields[str(item)] = None
        return self

    def set_location(self, lat: float, lon: float) -> QueryChain:
        """Set the reference point for the geo-distance facet."""
        self._ensure_building()
        self._location = (float(lat), float(lon))
        return self

    def to_query(self) -> dict[str, Any]:
        """Compile this chain into search request parameters.

        Raises:
            NoClausesError: If there are no clauses and no free-text query.
        """
        return compile_query(
            q=self._q,
            clauses=self._clauses,
            return_fields=self._fields,
            size=self._limit,
            parser=self._parser,
            sort=self._sort,
            start=self._offset,
            fields=self.target.fields,
            location=self._location,
        )

    def materialize(self) -> bool:
        """Execute the search unless already done.

        Returns:
            True if the search ran now, False if the result was already cached.

        Raises:
            WarningInQueryResultError: If `fatal_warnings` is set and the
                response carries a warning. The result stays cached.
        """
        if self.materialized:
            return False

        params = self.to_query()
        view = ResultView(self.target.execute_query(params))
        self._results = view
        self.state = ChainState.MATERIALIZED

        warnings = view.warnings
        for message in warnings:
            log.warning("Cloud Search Warning: %s: %s", message.get("code"), message.get("message"))
        if warnings and self.fatal_warnings:
            first = warnings[0]
            raise WarningInQueryResultError(str(first.get("code")), str(first.get("message")))
        return True

    def results(self) -> ResultView:
        """Return the cached response view, executing the search if needed."""
        self.materialize()
        assert self._results is not None
        return self._results

    def found_count(self) -> int:
        return self.results().found

    total_count = found_count

    def each(self) -> Iterator[Mapping[str, Any]]:
        return iter(self.results())

    def __iter__(self) -> Iterator[Mapping[str, Any]]:
        return self.each()

    def facet_values_for(self, index: str) -> list[FacetBucket]:
        return self.results().facet_values_for(index)

    def __repr__(self) -> str:
        return f"<QueryChain state={self.state.value} clauses={self._clauses!r} q={self._q!r}>"


def _flatten(items: Iterable[Any]) -> Iterator[Any]:
    for item in items:
        if isinstance(item, (list, tuple, set, frozenset)):
            yield from _flatten(item)
        else:
            yield item
