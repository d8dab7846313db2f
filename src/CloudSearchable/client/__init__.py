"""HTTP access to the search and document services."""

from __future__ import annotations

from CloudSearchable.client.http import API_VERSION, CloudSearchApiClient

__all__ = ["API_VERSION", "CloudSearchApiClient"]
