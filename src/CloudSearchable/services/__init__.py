"""Component wiring for CloudSearchable.

Builds a ready-to-query `Domain` from the application configuration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from CloudSearchable.client.http import CloudSearchApiClient
from CloudSearchable.domain import ControlPlaneClient, Domain

if TYPE_CHECKING:
    from CloudSearchable.config import AppConfig


def create_domain(
    config: AppConfig,
    *,
    api_client: CloudSearchApiClient | None = None,
    control_client: ControlPlaneClient | None = None,
) -> Domain:
    """Create a domain handle with its fields registered.

    Args:
        config: Application configuration.
        api_client: Optional pre-built API client; built from the aws and
            query settings when omitted.
        control_client: Optional control-plane client for provisioning and
            endpoint lookup.

    Returns:
        Configured Domain instance.

    Raises:
        ConfigurationError: If credentials are missing and no client is given.
    """
    if api_client is None:
        api_client = CloudSearchApiClient(
            config.aws.credentials(),
            config.aws.region,
            timeout=config.query.timeout,
        )
    domain = Domain(
        config.domain.name,
        api_client=api_client,
        control_client=control_client,
        domain_prefix=config.domain.prefix,
        search_endpoint=config.domain.search_endpoint,
        doc_endpoint=config.domain.doc_endpoint,
        api_version=config.domain.api_version,
        fatal_warnings=config.query.fatal_warnings,
    )
    for field in config.domain.fields:
        domain.add_field(field.name, field.type, source=field.source, **dict(field.options))
    return domain


__all__ = ["create_domain"]
