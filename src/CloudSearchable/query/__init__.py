"""Query building, compilation and result access."""

from __future__ import annotations

from CloudSearchable.query.chain import ChainState, QueryChain, QueryTarget
from CloudSearchable.query.compiler import clause_for, compile_query
from CloudSearchable.query.results import ResultView

__all__ = [
    "ChainState",
    "QueryChain",
    "QueryTarget",
    "ResultView",
    "clause_for",
    "compile_query",
]
