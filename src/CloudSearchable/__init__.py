"""CloudSearchable: chainable queries and signed requests for search domains."""

from __future__ import annotations

from CloudSearchable.client.http import CloudSearchApiClient
from CloudSearchable.core import (
    CloudSearchError,
    Computed,
    ConfigurationError,
    FacetBucket,
    Field,
    FieldType,
    NamedField,
)
from CloudSearchable.domain import Domain
from CloudSearchable.query.chain import QueryChain
from CloudSearchable.signing.signer import Credentials

__version__ = "0.1.0"

__all__ = [
    "CloudSearchApiClient",
    "CloudSearchError",
    "Computed",
    "ConfigurationError",
    "Credentials",
    "Domain",
    "FacetBucket",
    "Field",
    "FieldType",
    "NamedField",
    "QueryChain",
]
