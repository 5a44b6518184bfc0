from __future__ import annotations

import hashlib
import time
from dataclasses import dataclass


@dataclass(frozen=True)
class SignedRequest:
    timestamp: int
    signature: str
    authorization_header: str


def compute_signature(*, app_id: str, timestamp: int, payload_json: str, app_secret: str) -> str:
    """SHA-256 hex digest of ``app_id + timestamp + payload + secret``.

    ``payload_json`` must be the exact text that goes on the wire; re-serializing it
    afterwards invalidates the signature.
    """
    factor = f"{app_id}{timestamp}{payload_json}{app_secret}"
    return hashlib.sha256(factor.encode("utf-8")).hexdigest()


def build_shopee_signature(
    *,
    app_id: str,
    app_secret: str,
    payload_json: str,
    timestamp: int | None = None,
) -> SignedRequest:
    ts = int(time.time()) if timestamp is None else int(timestamp)
    signature = compute_signature(app_id=app_id, timestamp=ts, payload_json=payload_json, app_secret=app_secret)
    header = f"SHA256 Credential={app_id}, Timestamp={ts}, Signature={signature}"
    return SignedRequest(timestamp=ts, signature=signature, authorization_header=header)
