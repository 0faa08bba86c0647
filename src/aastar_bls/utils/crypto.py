"""Provides helper functions for BLS12-381 key material.

This module contains self-contained, pure functions for handling secret keys
of the minimal-pubkey-size scheme: key derivation from seed material, 32-byte
scalar (de)serialization and hex conversion.

Dependencies:
  - py_ecc: IETF KeyGen (HKDF-based) for secret key derivation.
"""
from __future__ import annotations

from py_ecc.bls.ciphersuites import BaseG2Ciphersuite

from aastar_bls.clients.errors import InputValidationError, InvalidScalar
from aastar_bls.constants import SECRET_KEY_BYTE_LENGTH
from aastar_bls.utils.bls12381 import is_valid_secret_key

# --- Constants ---

_MIN_IKM_LENGTH = 32

# --- Hex ---

def to_hex(data: bytes) -> str:
    """Returns `data` as a 0x-prefixed lowercase hex string."""
    return "0x" + bytes(data).hex()


def from_hex(value: str) -> bytes:
    """Parses a hex string, with or without the 0x prefix.

    Raises:
        InputValidationError: If `value` is not valid hex.
    """
    raw = value[2:] if value.startswith(("0x", "0X")) else value
    try:
        return bytes.fromhex(raw)
    except ValueError as e:
        raise InputValidationError(f"Invalid hex string: {e}") from e

# --- Scalars ---

def secret_key_to_bytes(sk: int) -> bytes:
    """Serializes a secret scalar as 32 big-endian bytes.

    Raises:
        InvalidScalar: If `sk` is not in [1, r-1].
    """
    if not is_valid_secret_key(sk):
        raise InvalidScalar("Secret key must be in the range [1, r-1]")
    return sk.to_bytes(SECRET_KEY_BYTE_LENGTH, "big")


def secret_key_from_bytes(data: bytes) -> int:
    """Parses a 32-byte big-endian secret scalar.

    Raises:
        InvalidScalar: If `data` is not 32 bytes, is zero, or is >= r.
    """
    if len(data) != SECRET_KEY_BYTE_LENGTH:
        raise InvalidScalar(f"Secret key must be {SECRET_KEY_BYTE_LENGTH} bytes, got {len(data)}")
    sk = int.from_bytes(data, "big")
    if not is_valid_secret_key(sk):
        raise InvalidScalar("Secret key must be in the range [1, r-1]")
    return sk


def derive_secret_key(ikm: bytes, key_info: bytes = b"") -> int:
    """Derives a secret scalar from input keying material (IETF KeyGen).

    Args:
        ikm: At least 32 bytes of seed material.
        key_info: Optional context string.

    Raises:
        InputValidationError: If `ikm` is shorter than 32 bytes.
    """
    if len(ikm) < _MIN_IKM_LENGTH:
        raise InputValidationError(f"IKM must be at least {_MIN_IKM_LENGTH} bytes, got {len(ikm)}")
    return BaseG2Ciphersuite.KeyGen(bytes(ikm), key_info)


__all__ = [
    "to_hex",
    "from_hex",
    "secret_key_to_bytes",
    "secret_key_from_bytes",
    "derive_secret_key",
]
