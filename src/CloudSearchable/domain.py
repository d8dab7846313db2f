"""Search domain handle.

A `Domain` holds the index schema (its `Field` descriptors), converts records
into document operations, resolves the domain's endpoints and runs queries
through an explicitly passed API client.

Provisioning (create, reindex, apply_changes) goes through a control-plane
client exposing the CloudSearch configuration API method names, e.g.
``boto3.client("cloudsearch")``.
"""

from __future__ import annotations

import hashlib
import time
from typing import Any, Iterable, Mapping, Protocol

from CloudSearchable.client.http import API_VERSION, CloudSearchApiClient
from CloudSearchable.core.exceptions import ConfigurationError, DomainNotFoundError
from CloudSearchable.core.fields import Computed, Field, FieldType, NamedField
from CloudSearchable.query.chain import QueryChain
from CloudSearchable.utils.log import log


class ControlPlaneClient(Protocol):
    """Subset of the CloudSearch configuration API used for provisioning."""

    def create_domain(self, *, DomainName: str) -> Mapping[str, Any]:
        raise NotImplementedError

    def define_index_field(self, *, DomainName: str, IndexField: Mapping[str, Any]) -> Mapping[str, Any]:
        raise NotImplementedError

    def index_documents(self, *, DomainName: str) -> Mapping[str, Any]:
        raise NotImplementedError

    def describe_domains(self, *, DomainNames: list[str]) -> Mapping[str, Any]:
        raise NotImplementedError


class Domain:
    """Schema and endpoints of one search domain.

    Args:
        name: Domain name without prefix.
        api_client: Client used for search and document requests.
        control_client: Optional control-plane client; required for
            provisioning and for endpoint lookup when endpoints are not given.
        domain_prefix: Prefix prepended to `name` (e.g. per environment).
        search_endpoint: Search endpoint host, if known.
        doc_endpoint: Document endpoint host, if known.
        api_version: Service API version path segment.
        fatal_warnings: Default for queries created by `query()`.
    """

    def __init__(
        self,
        name: str,
        *,
        api_client: CloudSearchApiClient,
        control_client: ControlPlaneClient | None = None,
        domain_prefix: str = "",
        search_endpoint: str | None = None,
        doc_endpoint: str | None = None,
        api_version: str = API_VERSION,
        fatal_warnings: bool = False,
    ) -> None:
        self.name = f"{domain_prefix}{name}"
        self.api_client = api_client
        self.control_client = control_client
        self.api_version = api_version
        self.fatal_warnings = fatal_warnings
        self.fields: dict[str, Field] = {}
        self._search_endpoint = search_endpoint
        self._doc_endpoint = doc_endpoint
        self._status: Mapping[str, Any] | None = None

    def add_field(
        self,
        name: str,
        type: FieldType | str,  # noqa: A002 - mirrors the field attribute
        *,
        source: str | Any = None,
        **options: Any,
    ) -> Field:
        """Define an index field.

        Args:
            name: Field name.
            type: One of literal/int/text/latlon/double.
            source: Attribute name or callable used to read the value from a
                record. Defaults to the attribute named like the field.
            **options: Field options (facet_enabled, return_enabled, ...).

        Returns:
            The new field.

        Raises:
            ValueError: If the field already exists or the type is invalid.
        """
        if source is None or isinstance(source, (NamedField, Computed)):
            resolved = source
        elif callable(source):
            resolved = Computed(source)
        else:
            resolved = NamedField(str(source))
        field = Field(name=name, type=type, source=resolved, options=options)
        if field.name in self.fields:
            raise ValueError(f"Field {field.name} already exists on index {self.name}")
        self.fields[field.name] = field
        return field

    def query(self, *, fatal_warnings: bool | None = None) -> QueryChain:
        """Start a new query chain against this domain."""
        if fatal_warnings is None:
            fatal_warnings = self.fatal_warnings
        return QueryChain(self, fatal_warnings=fatal_warnings)

    def execute_query(self, params: Mapping[str, Any]) -> dict[str, Any]:
        return self.api_client.search(self.search_endpoint, params, api_version=self.api_version)

    # Documents

    @staticmethod
    def document_id(record_id: Any) -> str:
        """Return a document id that satisfies the service's id restrictions."""
        return hashlib.md5(str(record_id).encode("utf-8")).hexdigest()

    def sdf_fields(self, record: Any) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for field in self.fields.values():
            value = field.value_for(record)
            if value is not None:
                out[field.name] = value
        return out

    def addition_sdf(self, record: Any, record_id: Any) -> dict[str, Any]:
        return {
            "type": "add",
            "id": self.document_id(record_id),
            "lang": "en",
            "fields": self.sdf_fields(record),
        }

    def deletion_sdf(self, record_id: Any) -> dict[str, Any]:
        return {
            "type": "delete",
            "id": self.document_id(record_id),
        }

    def post_record(self, record: Any, record_id: Any) -> dict[str, Any]:
        """Add or replace the document for a record."""
        return self.post_sdf_list([self.addition_sdf(record, record_id)])

    def post_records(self, records: Iterable[tuple[Any, Any]]) -> dict[str, Any]:
        """Add or replace documents for `(record, record_id)` pairs in one batch."""
        return self.post_sdf_list([self.addition_sdf(record, record_id) for record, record_id in records])

    def delete_record(self, record_id: Any) -> dict[str, Any]:
        """Delete the document for a record."""
        return self.post_sdf_list([self.deletion_sdf(record_id)])

    def post_sdf_list(self, sdf_list: list[dict[str, Any]]) -> dict[str, Any]:
        return self.api_client.post_documents(self.doc_endpoint, sdf_list, api_version=self.api_version)

    # Provisioning

    def _control(self) -> ControlPlaneClient:
        if self.control_client is None:
            raise ConfigurationError(f"domain {self.name} has no control-plane client configured")
        return self.control_client

    def create(self) -> None:
        """Create the domain and define its index fields.

        Index fields are redefined unconditionally; creating an existing
        domain is a no-op on the service side.
        """
        control = self._control()
        log.info("Creating domain %s", self.name)
        control.create_domain(DomainName=self.name)
        for field in self.fields.values():
            log.info("  ...creating %s field %s", field.type.value, field.name)
            control.define_index_field(DomainName=self.name, IndexField=field.definition())
        log.info("  ...done!")

    def reindex(self) -> None:
        self._control().index_documents(DomainName=self.name)

    def apply_changes(self, timeout: float = 0) -> bool:
        """Reindex if the domain needs it and wait up to `timeout` seconds.

        Polls the domain status with exponential backoff (1s, doubling,
        capped by the remaining wait window).

        Args:
            timeout: Seconds to wait for processing to finish. Reindexing
                usually takes 15-30 minutes.

        Returns:
            True if the changes are applied, False if still processing.
        """
        status = self.describe(force_reload=True)
        if status.get("RequiresIndexDocuments"):
            log.info("Domain %s requires reindexing; starting", self.name)
            self.reindex()

        end_time = time.monotonic() + timeout
        sleep_time = 1.0
        while True:
            status = self.describe(force_reload=True)
            remaining = end_time - time.monotonic()
            if not status.get("Processing") or remaining <= 0:
                break
            log.debug("Domain %s still processing; sleeping %.1fs", self.name, min(sleep_time, remaining))
            time.sleep(min(sleep_time, remaining))
            sleep_time *= 2

        return not status.get("Processing")

    def describe(self, *, force_reload: bool = False) -> Mapping[str, Any]:
        """Return the domain status from the control plane (cached).

        Raises:
            DomainNotFoundError: If the service does not know the domain.
        """
        if force_reload or self._status is None:
            response = self._control().describe_domains(DomainNames=[self.name])
            status_list = response.get("DomainStatusList") or []
            if not status_list:
                raise DomainNotFoundError(
                    f"could not find the domain '{self.name}'. Check the name and the region."
                )
            self._status = status_list[0]
        return self._status

    @property
    def search_endpoint(self) -> str:
        if self._search_endpoint is None:
            self._search_endpoint = self._endpoint_from_status("SearchService")
        return self._search_endpoint

    @property
    def doc_endpoint(self) -> str:
        if self._doc_endpoint is None:
            self._doc_endpoint = self._endpoint_from_status("DocService")
        return self._doc_endpoint

    def _endpoint_from_status(self, service_key: str) -> str:
        if self.control_client is None:
            raise ConfigurationError(
                f"no {service_key} endpoint configured for domain {self.name} and no control-plane client to look it up"
            )
        endpoint = (self.describe().get(service_key) or {}).get("Endpoint")
        if not endpoint:
            raise ConfigurationError(f"domain {self.name} has no {service_key} endpoint yet")
        return endpoint
