"""Ed25519 request signing and verification.

The platform signs ``timestamp + body`` with the application's key pair and
sends the signature hex-encoded in ``X-Signature-Ed25519`` alongside
``X-Signature-Timestamp``.
"""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric.ed25519 import (
    Ed25519PrivateKey,
    Ed25519PublicKey,
)

SIGNATURE_HEADER = "X-Signature-Ed25519"
TIMESTAMP_HEADER = "X-Signature-Timestamp"


def _message(timestamp: str, body: str | bytes) -> bytes:
    if isinstance(body, str):
        body = body.encode("utf-8")
    return timestamp.encode("utf-8") + body


def load_public_key(key: str | bytes) -> bytes:
    """Accept a hex string (as shown in the developer portal) or raw key bytes."""
    if isinstance(key, bytes):
        return key
    return bytes.fromhex(key)


def verify_interaction_signature(
    public_key: bytes,
    timestamp: str,
    signature: str,
    body: str | bytes,
) -> bool:
    try:
        sig = bytes.fromhex(signature)
        key = Ed25519PublicKey.from_public_bytes(public_key)
        key.verify(sig, _message(timestamp, body))
        return True
    except (ValueError, TypeError, InvalidSignature):
        return False


def sign_interaction(private_key: Ed25519PrivateKey, timestamp: str, body: str | bytes) -> str:
    """Produce the hex signature the platform would send for this request."""
    return private_key.sign(_message(timestamp, body)).hex()
