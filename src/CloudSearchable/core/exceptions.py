"""Exception hierarchy for CloudSearchable.

Every error raised by the package derives from `CloudSearchError`. Validation
and configuration errors additionally derive from `ValueError` so callers that
already guard on the builtin keep working.
"""

from __future__ import annotations


class CloudSearchError(Exception):
    """Base class for all CloudSearchable errors."""


class ConfigurationError(CloudSearchError, ValueError):
    """Missing credentials, an unresolvable domain, or unusable settings."""


class DomainNotFoundError(ConfigurationError):
    """The control plane returned no status for the requested domain."""


class ValidationError(CloudSearchError, ValueError):
    """A query or record was built incorrectly by the caller."""


class UnknownFieldError(ValidationError):
    """The field is not a member of the domain's index."""


class UnrecognizedOperatorError(ValidationError):
    """The operator is not applicable to the field type."""


class ValueConversionError(ValidationError):
    """A value cannot be rendered into the query grammar for its field type."""


class InvalidStateError(ValidationError):
    """A builder method was called on a chain that has already been executed."""


class NoClausesError(ValidationError):
    """Neither filter clauses nor a free-text query were specified."""


class MalformedResponseError(CloudSearchError):
    """The service response does not have the expected shape."""


class WarningInQueryResultError(CloudSearchError):
    """The service reported a warning and the chain treats warnings as fatal."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(f"{code}: {message}")
        self.code = code
        self.message = message


class RequestFailedError(CloudSearchError):
    """The service answered with a non-success HTTP status."""

    def __init__(self, status_code: int, body: str, *, url: str | None = None) -> None:
        target = f" for {url}" if url else ""
        super().__init__(f"HTTP {status_code}{target}: {body}")
        self.status_code = status_code
        self.body = body
        self.url = url
