"""Request signing (AWS Signature Version 4).

Signing is a pure function of the request and the clock; pass `now` to make
it deterministic.

1. Canonical request: method, path, canonical query string, canonical
   headers, signed header list and the body digest, newline-joined.
2. String to sign: algorithm, timestamp, credential scope and the digest of
   the canonical request.
3. Signing key: HMAC chain over date, region, service and "aws4_request",
   seeded with "AWS4" + secret key.
4. Authorization header built from the scope, the signed headers and the
   hex HMAC of the string to sign.
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping
from urllib.parse import quote, urlsplit

from CloudSearchable.core.exceptions import ConfigurationError
from CloudSearchable.utils.log import log

ALGORITHM = "AWS4-HMAC-SHA256"
SERVICE = "cloudsearch"
TERMINATOR = "aws4_request"
SIGNED_HEADERS = "content-type;host;x-amz-content-sha256;x-amz-date"

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"
JSON_CONTENT_TYPE = "application/json"

AMZ_DATE_FORMAT = "%Y%m%dT%H%M%SZ"
DATE_STAMP_FORMAT = "%Y%m%d"


@dataclass(frozen=True, slots=True)
class Credentials:
    """Access key pair used to sign requests."""

    access_key: str
    secret_key: str

    def __post_init__(self) -> None:
        if not self.access_key or not self.secret_key:
            raise ConfigurationError("AWS access key and secret key must both be set")

    def __repr__(self) -> str:
        return f"Credentials(access_key={self.access_key!r}, secret_key='***')"


@dataclass(frozen=True, slots=True)
class SignedRequest:
    """A request ready to send: the URL carries the canonical query string."""

    method: str
    url: str
    headers: Mapping[str, str]
    body: bytes


def payload_hash(body: bytes | str) -> str:
    """Hex SHA-256 of the request body."""
    if isinstance(body, str):
        body = body.encode("utf-8")
    return hashlib.sha256(body).hexdigest()


def content_type_for(method: str) -> str:
    return FORM_CONTENT_TYPE if method.upper() == "GET" else JSON_CONTENT_TYPE


def _uri_encode(value: str) -> str:
    return quote(value, safe="-_.~")


def canonical_query_string(params: Mapping[str, Any] | None) -> str:
    """Sort parameters by name and percent-encode names and values."""
    if not params:
        return ""
    pairs = sorted((_uri_encode(str(k)), _uri_encode(str(v))) for k, v in params.items())
    return "&".join(f"{k}={v}" for k, v in pairs)


def canonical_request(
    *,
    method: str,
    path: str,
    query: str,
    host: str,
    content_type: str,
    body_hash: str,
    amz_date: str,
) -> str:
    headers = (
        f"content-type:{content_type}\n"
        f"host:{host}\n"
        f"x-amz-content-sha256:{body_hash}\n"
        f"x-amz-date:{amz_date}\n"
    )
    return "\n".join([method, path or "/", query, headers, SIGNED_HEADERS, body_hash])


def credential_scope(date_stamp: str, region: str, service: str = SERVICE) -> str:
    return "/".join([date_stamp, region, service, TERMINATOR])


def string_to_sign(*, amz_date: str, scope: str, canonical: str) -> str:
    return "\n".join([ALGORITHM, amz_date, scope, hashlib.sha256(canonical.encode("utf-8")).hexdigest()])


def _hmac(key: bytes, msg: str) -> bytes:
    return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()


def signing_key(secret_key: str, date_stamp: str, region: str, service: str = SERVICE) -> bytes:
    k_date = _hmac(("AWS4" + secret_key).encode("utf-8"), date_stamp)
    k_region = _hmac(k_date, region)
    k_service = _hmac(k_region, service)
    return _hmac(k_service, TERMINATOR)


def sign_request(
    *,
    method: str,
    url: str,
    region: str,
    credentials: Credentials,
    body: bytes | str = b"",
    params: Mapping[str, Any] | None = None,
    service: str = SERVICE,
    now: datetime | None = None,
) -> SignedRequest:
    """Sign an HTTP request.

    Args:
        method: HTTP method.
        url: Endpoint URL without a query string.
        region: Region of the domain.
        credentials: Access key pair.
        body: Request body; empty for GET.
        params: Query parameters. They are folded into the returned URL in
            canonical form so the sent and signed query strings match.
        service: Service name in the credential scope.
        now: Signing time; defaults to the current UTC time.

    Returns:
        The signed request.
    """
    method = method.upper()
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    now = now.astimezone(timezone.utc)
    amz_date = now.strftime(AMZ_DATE_FORMAT)
    date_stamp = now.strftime(DATE_STAMP_FORMAT)

    parts = urlsplit(url)
    host = parts.netloc
    path = parts.path or "/"
    query = canonical_query_string(params)
    body_bytes = body.encode("utf-8") if isinstance(body, str) else body
    body_hash = payload_hash(body_bytes)
    content_type = content_type_for(method)

    canonical = canonical_request(
        method=method,
        path=path,
        query=query,
        host=host,
        content_type=content_type,
        body_hash=body_hash,
        amz_date=amz_date,
    )
    scope = credential_scope(date_stamp, region, service)
    to_sign = string_to_sign(amz_date=amz_date, scope=scope, canonical=canonical)
    signature = hmac.new(
        signing_key(credentials.secret_key, date_stamp, region, service),
        to_sign.encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    log.debug("Canonical request:\n%s", canonical)
    log.debug("String to sign:\n%s", to_sign)

    authorization = (
        f"{ALGORITHM} Credential={credentials.access_key}/{scope}, "
        f"SignedHeaders={SIGNED_HEADERS}, Signature={signature}"
    )
    headers = {
        "Content-Type": content_type,
        "X-Amz-Date": amz_date,
        "X-Amz-Content-Sha256": body_hash,
        "Authorization": authorization,
    }
    signed_url = f"{parts.scheme}://{host}{path}" + (f"?{query}" if query else "")
    return SignedRequest(method=method, url=signed_url, headers=headers, body=body_bytes)
