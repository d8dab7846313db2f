"""Command implementations for the CloudSearchable CLI."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Callable

from CloudSearchable.domain import Domain
from CloudSearchable.query.chain import QueryChain
from CloudSearchable.utils.log import log


@dataclass(slots=True)
class SearchCommand:
    """Build one query from CLI options and print its results.

    Attributes:
        domain: Domain to query.
        text: Free text, tokenized into an OR of words.
        plain_text: Free-text query passed verbatim; wins over `text`.
        where: `(field, op, value)` filters.
        sort: Sort expression.
        limit: Maximum number of hits.
        offset: Number of hits to skip.
        returning: Fields to return with each hit.
        facets: Fields whose facet buckets are printed after the hits.
        dry_run: Print the compiled parameters instead of searching.
        echo: Output sink.
    """

    domain: Domain
    echo: Callable[[str], None]
    text: str | None = None
    plain_text: str | None = None
    where: tuple[tuple[str, str, str], ...] = ()
    sort: str | None = None
    limit: int | None = None
    offset: int | None = None
    returning: tuple[str, ...] = ()
    facets: tuple[str, ...] = ()
    dry_run: bool = False

    def build(self) -> QueryChain:
        chain = self.domain.query()
        if self.plain_text is not None:
            chain.plain_text(self.plain_text)
        elif self.text:
            chain.text(self.text)
        for name, op, value in self.where:
            chain.where(name, op, value)
        if self.sort:
            chain.order(self.sort)
        if self.limit is not None:
            chain.limit(self.limit)
        if self.offset is not None:
            chain.offset(self.offset)
        if self.returning:
            chain.returning(*self.returning)
        return chain

    def execute(self) -> None:
        chain = self.build()
        if self.dry_run:
            self.echo(json.dumps(chain.to_query(), sort_keys=True))
            return

        found = chain.found_count()
        log.info("Found %d documents", found)
        self.echo(f"found: {found}")
        for hit in chain:
            self.echo(json.dumps(hit, sort_keys=True))
        for name in self.facets:
            for bucket in chain.facet_values_for(name):
                self.echo(f"facet {name}: {bucket.value}={bucket.count}")
