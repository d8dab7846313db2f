"""Read-only view over a parsed search response."""

from __future__ import annotations

from typing import Any, Iterator, Mapping

from CloudSearchable.core.exceptions import MalformedResponseError
from CloudSearchable.core.models import FacetBucket
from CloudSearchable.query.compiler import DISTANCE_EXPR

LATLON_FACET = "latlon"

# (upper bound exclusive, label); the last band is open-ended.
DISTANCE_BANDS: tuple[tuple[float, str], ...] = (
    (5, "0-5 miles"),
    (10, "5-10 miles"),
    (15, "10-15 miles"),
    (20, "15-20 miles"),
    (float("inf"), "20+ miles"),
)


class ResultView:
    """Accessors over one cached search response.

    Iterating the view walks the cached `hits.hit` array, so it can be
    repeated without another request.
    """

    def __init__(self, payload: Mapping[str, Any]) -> None:
        if not isinstance(payload, Mapping):
            raise MalformedResponseError(f"improperly formed response: expected an object, got {type(payload).__name__}")
        self._payload = payload

    @property
    def payload(self) -> Mapping[str, Any]:
        return self._payload

    def _hits(self) -> Mapping[str, Any]:
        hits = self._payload.get("hits")
        if not isinstance(hits, Mapping):
            raise MalformedResponseError(
                f"improperly formed response. hits parameter not available. messages: {self.messages}"
            )
        return hits

    @property
    def messages(self) -> list[Mapping[str, Any]]:
        info = self._payload.get("info")
        if not isinstance(info, Mapping):
            return []
        messages = info.get("messages")
        if not isinstance(messages, list):
            return []
        return [m for m in messages if isinstance(m, Mapping)]

    @property
    def warnings(self) -> list[Mapping[str, Any]]:
        return [m for m in self.messages if m.get("severity") == "warning"]

    @property
    def found(self) -> int:
        return self._hits().get("found", 0)

    def __iter__(self) -> Iterator[Mapping[str, Any]]:
        return iter(self._hits().get("hit") or [])

    def facet_values_for(self, index: str) -> list[FacetBucket]:
        """Return facet buckets for a field.

        The `latlon` index is a client-side pseudo-facet: hits are counted
        into fixed distance bands using each hit's `exprs.distance` value.

        Raises:
            MalformedResponseError: If the response has no facets or none for
                `index` (no hits, for the distance pseudo-facet).
        """
        if index == LATLON_FACET:
            return self._distance_buckets()

        facets = self._payload.get("facets")
        if not isinstance(facets, Mapping):
            raise MalformedResponseError(
                f"improperly formed response. facets parameter not available. messages: {self.messages}"
            )
        facet = facets.get(index)
        if not isinstance(facet, Mapping):
            raise MalformedResponseError(f"Facet for {index} unavailable.")
        return [
            FacetBucket(value=str(bucket.get("value", "")), count=int(bucket.get("count", 0)))
            for bucket in facet.get("buckets") or []
        ]

    def _distance_buckets(self) -> list[FacetBucket]:
        counts = [0] * len(DISTANCE_BANDS)
        for hit in self:
            exprs = hit.get("exprs") or {}
            distance = _to_distance(exprs.get(DISTANCE_EXPR))
            for idx, (upper, _) in enumerate(DISTANCE_BANDS):
                if distance < upper:
                    counts[idx] += 1
                    break
        return [FacetBucket(value=label, count=count) for (_, label), count in zip(DISTANCE_BANDS, counts)]


def _to_distance(value: Any) -> int:
    """Whole distance units; missing or unparsable values count as 0."""
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return 0
