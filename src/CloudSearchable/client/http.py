"""Search and document service HTTP client.

Signs each request and sends it over HTTPS. Failures are reported, not
retried.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional, Sequence

import requests

from CloudSearchable.core.exceptions import MalformedResponseError, RequestFailedError
from CloudSearchable.signing.signer import Credentials, SignedRequest, sign_request
from CloudSearchable.utils.log import log

API_VERSION = "2013-01-01"

HEADERS = {
    "User-Agent": "cloudsearchable/0.1",
    "Accept": "application/json",
}


class CloudSearchApiClient:
    """Low-level HTTP client for a domain's search and document endpoints.

    Responsible only for signing, sending and decoding. Query compilation
    and result interpretation are handled elsewhere.
    """

    def __init__(
        self,
        credentials: Credentials,
        region: str,
        *,
        timeout: Optional[float] = None,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the client with a reusable HTTP session.

        Args:
            credentials: Access key pair used for signing.
            region: Region the domain lives in.
            timeout: Optional request timeout in seconds; None leaves the
                transport default in place.
            session: Optional pre-built session.
        """
        self.credentials = credentials
        self.region = region
        self.timeout = timeout
        self._session = session or requests.Session()

    def close(self) -> None:
        """Close the underlying HTTP session and release pooled connections.
        """
        self._session.close()

    def __enter__(self) -> CloudSearchApiClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def search(
        self,
        endpoint: str,
        params: Mapping[str, Any],
        *,
        api_version: str = API_VERSION,
    ) -> dict[str, Any]:
        """Run a search request.

        Args:
            endpoint: Search endpoint host of the domain.
            params: Compiled search parameters.
            api_version: Service API version path segment.

        Returns:
            Parsed response payload.

        Raises:
            RequestFailedError: On a non-success HTTP status.
            MalformedResponseError: If the body is not a JSON object.
        """
        url = f"https://{endpoint}/{api_version}/search"
        query = {str(k): _encode_param(v) for k, v in params.items()}
        signed = sign_request(
            method="GET",
            url=url,
            region=self.region,
            credentials=self.credentials,
            params=query,
        )
        log.info("CloudSearch execute: %s", url)
        return _decode(self.send(signed), url)

    def post_documents(
        self,
        endpoint: str,
        sdf_list: Sequence[Mapping[str, Any]],
        *,
        api_version: str = API_VERSION,
    ) -> dict[str, Any]:
        """Submit a batch of add/delete operations.

        Args:
            endpoint: Document endpoint host of the domain.
            sdf_list: Document operations.
            api_version: Service API version path segment.

        Returns:
            Parsed response payload.

        Raises:
            RequestFailedError: On a non-success HTTP status.
            MalformedResponseError: If the body is not a JSON object.
        """
        url = f"https://{endpoint}/{api_version}/documents/batch"
        body = json.dumps(list(sdf_list))
        signed = sign_request(
            method="POST",
            url=url,
            region=self.region,
            credentials=self.credentials,
            body=body,
        )
        log.info("CloudSearch post documents: %s count=%d", url, len(sdf_list))
        return _decode(self.send(signed), url)

    def send(self, signed: SignedRequest) -> str:
        """Send a signed request and return the response text.

        Raises:
            RequestFailedError: On a non-success HTTP status.
        """
        headers = dict(HEADERS)
        headers.update(signed.headers)
        resp = self._session.request(
            signed.method,
            signed.url,
            data=signed.body or None,
            headers=headers,
            timeout=self.timeout,
        )
        log.debug("CloudSearch response: status=%s bytes=%s", resp.status_code, len(resp.text))
        if not resp.ok:
            raise RequestFailedError(resp.status_code, resp.text, url=signed.url)
        return resp.text


def _encode_param(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, Mapping):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _decode(text: str, url: str) -> dict[str, Any]:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(f"response from {url} is not valid JSON: {e}") from e
    if not isinstance(payload, dict):
        raise MalformedResponseError(f"response from {url} is not a JSON object")
    return payload
