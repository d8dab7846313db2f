from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FacetBucket:
    """One facet histogram entry.

    Attributes:
        value: Facet value (or distance band label for the geo pseudo-facet).
        count: Number of matching documents.
    """

    value: str
    count: int
