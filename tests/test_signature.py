"""Tests for Ed25519 interaction signature verification."""

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat

from slashkit.signature import load_public_key, sign_interaction, verify_interaction_signature

BODY = '{"type":1,"id":"1","application_id":"2","token":"t","version":1}'
TIMESTAMP = "1700000000"


def _flip(s: str, index: int) -> str:
    c = s[index]
    return s[:index] + ("b" if c == "a" else "a") + s[index + 1:]


def _flip_hex(h: str, index: int) -> str:
    c = h[index]
    return h[:index] + ("1" if c == "0" else "0") + h[index + 1:]


@pytest.fixture()
def keypair():
    private = Ed25519PrivateKey.generate()
    public = private.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
    return private, public


def test_valid_signature_verifies(keypair):
    private, public = keypair
    sig = sign_interaction(private, TIMESTAMP, BODY)
    assert verify_interaction_signature(public, TIMESTAMP, sig, BODY) is True


def test_bytes_body_verifies(keypair):
    private, public = keypair
    sig = sign_interaction(private, TIMESTAMP, BODY)
    assert verify_interaction_signature(public, TIMESTAMP, sig, BODY.encode()) is True


@pytest.mark.parametrize("index", [0, 1, len(BODY) // 2, len(BODY) - 1])
def test_mutated_body_rejected(keypair, index):
    private, public = keypair
    sig = sign_interaction(private, TIMESTAMP, BODY)
    assert verify_interaction_signature(public, TIMESTAMP, sig, _flip(BODY, index)) is False


@pytest.mark.parametrize("index", range(len(TIMESTAMP)))
def test_mutated_timestamp_rejected(keypair, index):
    private, public = keypair
    sig = sign_interaction(private, TIMESTAMP, BODY)
    assert verify_interaction_signature(public, _flip_hex(TIMESTAMP, index), sig, BODY) is False


@pytest.mark.parametrize("index", [0, 31, 64, 127])
def test_mutated_signature_rejected(keypair, index):
    private, public = keypair
    sig = sign_interaction(private, TIMESTAMP, BODY)
    assert verify_interaction_signature(public, TIMESTAMP, _flip_hex(sig, index), BODY) is False


def test_wrong_key_rejected(keypair):
    private, _ = keypair
    other = Ed25519PrivateKey.generate().public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
    sig = sign_interaction(private, TIMESTAMP, BODY)
    assert verify_interaction_signature(other, TIMESTAMP, sig, BODY) is False


@pytest.mark.parametrize("signature", ["", "zz", "abc", "00" * 10])
def test_malformed_signature_returns_false(keypair, signature):
    _, public = keypair
    assert verify_interaction_signature(public, TIMESTAMP, signature, BODY) is False


def test_malformed_public_key_returns_false(keypair):
    private, _ = keypair
    sig = sign_interaction(private, TIMESTAMP, BODY)
    assert verify_interaction_signature(b"short", TIMESTAMP, sig, BODY) is False


def test_load_public_key_accepts_hex_and_bytes(keypair):
    _, public = keypair
    assert load_public_key(public.hex()) == public
    assert load_public_key(public) == public
