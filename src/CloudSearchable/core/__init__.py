"""Core types shared by the query, signing and domain layers."""

from __future__ import annotations

from CloudSearchable.core.exceptions import (
    CloudSearchError,
    ConfigurationError,
    DomainNotFoundError,
    InvalidStateError,
    MalformedResponseError,
    NoClausesError,
    RequestFailedError,
    UnknownFieldError,
    UnrecognizedOperatorError,
    ValidationError,
    ValueConversionError,
    WarningInQueryResultError,
)
from CloudSearchable.core.fields import Computed, Field, FieldType, NamedField
from CloudSearchable.core.models import FacetBucket

__all__ = [
    "CloudSearchError",
    "ConfigurationError",
    "DomainNotFoundError",
    "InvalidStateError",
    "MalformedResponseError",
    "NoClausesError",
    "RequestFailedError",
    "UnknownFieldError",
    "UnrecognizedOperatorError",
    "ValidationError",
    "ValueConversionError",
    "WarningInQueryResultError",
    "Computed",
    "Field",
    "FieldType",
    "NamedField",
    "FacetBucket",
]
