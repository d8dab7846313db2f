"""Request signing for the search and document services."""

from __future__ import annotations

from CloudSearchable.signing.signer import Credentials, SignedRequest, sign_request

__all__ = ["Credentials", "SignedRequest", "sign_request"]
