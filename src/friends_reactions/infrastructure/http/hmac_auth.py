"""HMAC signature helpers for sync callbacks sent by the feed poller."""

from __future__ import annotations

import hashlib
import hmac

SIGNATURE_HEADER = "X-Signature"


def compute_hmac_signature(*, secret: str, body: bytes) -> str:
    """Return hex HMAC-SHA256 of body."""

    return hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()


def verify_hmac_signature(*, secret: str, body: bytes, provided_signature: str | None) -> bool:
    """Compare provided signature against the expected one in constant time.

    A `sha256=` prefix on the provided value is accepted.
    """

    if not provided_signature:
        return False
    candidate = provided_signature.strip()
    if candidate.lower().startswith("sha256="):
        candidate = candidate[len("sha256=") :]
    expected = compute_hmac_signature(secret=secret, body=body)
    return hmac.compare_digest(expected.encode("ascii"), candidate.lower().encode("utf-8"))
