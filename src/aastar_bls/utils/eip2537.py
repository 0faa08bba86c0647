"""Converts BLS12-381 points between compressed and EIP-2537 encodings.

Compressed points use the zcash/blst layout (48 bytes for G1, 96 bytes for
G2) with three flag bits in the first byte:

  - 0x80: the point is compressed (always set here).
  - 0x40: the point at infinity.
  - 0x20: y is the lexicographically largest of the two roots.

EIP-2537 precompiles take uncompressed, zero-padded big-endian coordinates:

  - Fp:  64 bytes = 16 zero bytes || 48-byte element.
  - Fp2: 128 bytes = Fp(c0) || Fp(c1).
  - G1:  128 bytes = Fp(X) || Fp(Y).
  - G2:  256 bytes = Fp2(X) || Fp2(Y).

The point at infinity is all zero bytes in EIP-2537 form.

Compression and decompression are py_ecc's g2_primitives (pubkey_to_G1,
signature_to_G2 and their inverses). py_ecc reduces an x-coordinate modulo p
without complaint, so non-canonical encodings are rejected here first. Every
decoded point is then checked for curve and subgroup membership.

Throughout this module a "raw" Fp2 value is 96 bytes in c0 || c1 order,
which is also the order EIP-2537 uses.
"""
from __future__ import annotations

from typing import Tuple

from eth_typing import BLSPubkey, BLSSignature
from py_ecc.bls.g2_primitives import G1_to_pubkey, G2_to_signature, pubkey_to_G1, signature_to_G2

from aastar_bls.clients.errors import InvalidFieldElement, InvalidLength, PointNotOnCurve
from aastar_bls.constants import (
    COMPRESSION_FLAG,
    EIP2537_FP_BYTE_LENGTH,
    EIP2537_FP_PADDING,
    EIP2537_FP2_BYTE_LENGTH,
    EIP2537_G1_BYTE_LENGTH,
    EIP2537_G2_BYTE_LENGTH,
    FP_BYTE_LENGTH,
    FP2_BYTE_LENGTH,
    G1_COMPRESSED_BYTE_LENGTH,
    G2_COMPRESSED_BYTE_LENGTH,
    INFINITY_FLAG,
    SIGN_FLAG,
)
from aastar_bls.utils.bls12381 import (
    Fp2Coeffs,
    PointG1,
    PointG2,
    Z1,
    Z2,
    g1_from_affine,
    g1_to_affine,
    g2_from_affine,
    g2_to_affine,
    is_inf,
    p,
    validate_g1,
    validate_g2,
)

__all__ = [
    "pad_fp", "unpad_fp", "pad_fp2", "unpad_fp2",
    "decompress_g1", "decompress_g2",
    "compress_g1", "compress_g2",
    "encode_g1_for_eip2537", "encode_g2_for_eip2537",
    "decode_g1_from_eip2537", "decode_g2_from_eip2537",
    "g1_point_from_compressed", "g2_point_from_compressed",
    "g1_point_to_compressed", "g2_point_to_compressed",
    "g1_point_to_eip2537", "g2_point_to_eip2537",
    "eip2537_to_g1_point", "eip2537_to_g2_point",
]

_FP_ZERO = bytes(FP_BYTE_LENGTH)
_G1_INFINITY = bytes([COMPRESSION_FLAG | INFINITY_FLAG]) + bytes(G1_COMPRESSED_BYTE_LENGTH - 1)
_G2_INFINITY = bytes([COMPRESSION_FLAG | INFINITY_FLAG]) + bytes(G2_COMPRESSED_BYTE_LENGTH - 1)


# --- Field Element Padding ---

def pad_fp(fp: bytes) -> bytes:
    """Pads a 48-byte Fp element to the 64-byte EIP-2537 slot.

    Raises:
        InvalidLength: If `fp` is not 48 bytes.
        InvalidFieldElement: If the element is not below the field modulus.
    """
    _require_length(fp, FP_BYTE_LENGTH, "Fp element")
    _fp_from_bytes(fp)
    return bytes(EIP2537_FP_PADDING) + bytes(fp)


def unpad_fp(slot: bytes) -> bytes:
    """Strips the 16 zero bytes of a 64-byte EIP-2537 Fp slot.

    Raises:
        InvalidLength: If `slot` is not 64 bytes.
        InvalidFieldElement: If the padding is not zero or the element is >= p.
    """
    _require_length(slot, EIP2537_FP_BYTE_LENGTH, "EIP-2537 Fp element")
    if any(slot[:EIP2537_FP_PADDING]):
        raise InvalidFieldElement("EIP-2537 Fp element has non-zero padding")
    fp = bytes(slot[EIP2537_FP_PADDING:])
    _fp_from_bytes(fp)
    return fp


def pad_fp2(fp2: bytes) -> bytes:
    """Pads a 96-byte Fp2 element (c0 || c1) to 128 bytes, one limb at a time."""
    _require_length(fp2, FP2_BYTE_LENGTH, "Fp2 element")
    return pad_fp(fp2[:FP_BYTE_LENGTH]) + pad_fp(fp2[FP_BYTE_LENGTH:])


def unpad_fp2(slot: bytes) -> bytes:
    """Inverse of `pad_fp2`: 128 bytes back to 96 bytes (c0 || c1)."""
    _require_length(slot, EIP2537_FP2_BYTE_LENGTH, "EIP-2537 Fp2 element")
    return unpad_fp(slot[:EIP2537_FP_BYTE_LENGTH]) + unpad_fp(slot[EIP2537_FP_BYTE_LENGTH:])


# --- Decompression / Compression ---

def decompress_g1(data: bytes) -> Tuple[bytes, bytes]:
    """Decompresses a 48-byte G1 point into its 48-byte X and Y coordinates.

    The point at infinity decompresses to two zero coordinates, matching
    its EIP-2537 representation.

    Raises:
        InvalidLength: If `data` is not 48 bytes.
        InvalidFieldElement: If the flags or the x-coordinate are malformed.
        PointNotOnCurve: If x^3 + 4 has no square root.
        PointNotInSubgroup: If the point is not in the G1 subgroup.
    """
    pt = g1_point_from_compressed(data)
    if is_inf(pt):
        return _FP_ZERO, _FP_ZERO
    x, y = g1_to_affine(pt)
    return _fp_to_bytes(x), _fp_to_bytes(y)


def decompress_g2(data: bytes) -> Tuple[bytes, bytes]:
    """Decompresses a 96-byte G2 point into 96-byte X and Y (each c0 || c1).

    Raises:
        InvalidLength: If `data` is not 96 bytes.
        InvalidFieldElement: If the flags or the x-coordinate are malformed.
        PointNotOnCurve: If x^3 + 4(1 + u) has no square root in Fp2.
        PointNotInSubgroup: If the point is not in the G2 subgroup.
    """
    pt = g2_point_from_compressed(data)
    if is_inf(pt):
        return bytes(FP2_BYTE_LENGTH), bytes(FP2_BYTE_LENGTH)
    x, y = g2_to_affine(pt)
    return _fp2_to_bytes(x), _fp2_to_bytes(y)


def compress_g1(x: bytes, y: bytes) -> bytes:
    """Compresses affine G1 coordinates (48 bytes each) to 48 bytes."""
    _require_length(x, FP_BYTE_LENGTH, "G1 x-coordinate")
    _require_length(y, FP_BYTE_LENGTH, "G1 y-coordinate")
    if not any(x) and not any(y):
        return _G1_INFINITY
    pt = validate_g1(g1_from_affine(_fp_from_bytes(x), _fp_from_bytes(y)))
    return g1_point_to_compressed(pt)


def compress_g2(x: bytes, y: bytes) -> bytes:
    """Compresses affine G2 coordinates (96 bytes each, c0 || c1) to 96 bytes."""
    _require_length(x, FP2_BYTE_LENGTH, "G2 x-coordinate")
    _require_length(y, FP2_BYTE_LENGTH, "G2 y-coordinate")
    if not any(x) and not any(y):
        return _G2_INFINITY
    pt = validate_g2(g2_from_affine(_fp2_from_bytes(x), _fp2_from_bytes(y)))
    return g2_point_to_compressed(pt)


# --- EIP-2537 Encoding ---

def encode_g1_for_eip2537(pubkey: bytes) -> bytes:
    """Encodes a 48-byte compressed G1 point into the 128-byte EIP-2537 layout."""
    x, y = decompress_g1(pubkey)
    return pad_fp(x) + pad_fp(y)


def encode_g2_for_eip2537(signature: bytes) -> bytes:
    """Encodes a 96-byte compressed G2 point into the 256-byte EIP-2537 layout."""
    x, y = decompress_g2(signature)
    return pad_fp2(x) + pad_fp2(y)


def decode_g1_from_eip2537(buf: bytes) -> bytes:
    """Strips and recompresses a 128-byte EIP-2537 G1 point to 48 bytes."""
    _require_length(buf, EIP2537_G1_BYTE_LENGTH, "EIP-2537 G1 point")
    return compress_g1(unpad_fp(buf[:64]), unpad_fp(buf[64:]))


def decode_g2_from_eip2537(buf: bytes) -> bytes:
    """Strips and recompresses a 256-byte EIP-2537 G2 point to 96 bytes."""
    _require_length(buf, EIP2537_G2_BYTE_LENGTH, "EIP-2537 G2 point")
    return compress_g2(unpad_fp2(buf[:128]), unpad_fp2(buf[128:]))


# --- Point-level Helpers ---

def g1_point_from_compressed(data: bytes) -> PointG1:
    """Decompresses and validates a 48-byte G1 point."""
    _require_length(data, G1_COMPRESSED_BYTE_LENGTH, "G1 compressed point")
    _check_compressed(data, _G1_INFINITY)
    try:
        pt = pubkey_to_G1(BLSPubkey(bytes(data)))
    except ValueError as e:
        raise PointNotOnCurve(f"Invalid G1 point: {e}") from e
    return validate_g1(pt)


def g2_point_from_compressed(data: bytes) -> PointG2:
    """Decompresses and validates a 96-byte G2 point (zcash order: x.c1 || x.c0)."""
    _require_length(data, G2_COMPRESSED_BYTE_LENGTH, "G2 compressed point")
    _check_compressed(data, _G2_INFINITY)
    try:
        pt = signature_to_G2(BLSSignature(bytes(data)))
    except ValueError as e:
        raise PointNotOnCurve(f"Invalid G2 point: {e}") from e
    return validate_g2(pt)


def g1_point_to_compressed(pt: PointG1) -> bytes:
    """Compresses a G1 point to 48 bytes."""
    return bytes(G1_to_pubkey(pt))


def g2_point_to_compressed(pt: PointG2) -> bytes:
    """Compresses a G2 point to 96 bytes (x.c1 || x.c0 with flags)."""
    return bytes(G2_to_signature(pt))


def g1_point_to_eip2537(pt: PointG1) -> bytes:
    """Encodes a G1 point as 128 EIP-2537 bytes."""
    if is_inf(pt):
        return bytes(EIP2537_G1_BYTE_LENGTH)
    x, y = g1_to_affine(pt)
    return pad_fp(_fp_to_bytes(x)) + pad_fp(_fp_to_bytes(y))


def g2_point_to_eip2537(pt: PointG2) -> bytes:
    """Encodes a G2 point as 256 EIP-2537 bytes."""
    if is_inf(pt):
        return bytes(EIP2537_G2_BYTE_LENGTH)
    x, y = g2_to_affine(pt)
    return pad_fp2(_fp2_to_bytes(x)) + pad_fp2(_fp2_to_bytes(y))


def eip2537_to_g1_point(buf: bytes) -> PointG1:
    """Decodes and validates a 128-byte EIP-2537 G1 point."""
    _require_length(buf, EIP2537_G1_BYTE_LENGTH, "EIP-2537 G1 point")
    if not any(buf):
        return Z1
    x = _fp_from_bytes(unpad_fp(buf[:64]))
    y = _fp_from_bytes(unpad_fp(buf[64:]))
    return validate_g1(g1_from_affine(x, y))


def eip2537_to_g2_point(buf: bytes) -> PointG2:
    """Decodes and validates a 256-byte EIP-2537 G2 point."""
    _require_length(buf, EIP2537_G2_BYTE_LENGTH, "EIP-2537 G2 point")
    if not any(buf):
        return Z2
    x = _fp2_from_bytes(unpad_fp2(buf[:128]))
    y = _fp2_from_bytes(unpad_fp2(buf[128:]))
    return validate_g2(g2_from_affine(x, y))


# --- Internal Helpers ---

def _require_length(data: bytes, expected: int, what: str) -> None:
    if len(data) != expected:
        raise InvalidLength(what, expected, len(data))


def _check_compressed(data: bytes, infinity: bytes) -> None:
    """Rejects encodings py_ecc would reject with a bare ValueError or silently reduce.

    Each 48-byte limb of x, with the flag bits cleared, must be below p.
    """
    flags = data[0]
    if not flags & COMPRESSION_FLAG:
        raise InvalidFieldElement("Compression bit is not set.")
    if flags & INFINITY_FLAG:
        if bytes(data) != infinity:
            raise InvalidFieldElement("Invalid encoding of the point at infinity.")
        return
    x = bytes([flags & ~(COMPRESSION_FLAG | INFINITY_FLAG | SIGN_FLAG) & 0xFF]) + bytes(data[1:])
    for i in range(0, len(x), FP_BYTE_LENGTH):
        _fp_from_bytes(x[i:i + FP_BYTE_LENGTH])


def _fp_from_bytes(data: bytes) -> int:
    n = int.from_bytes(data, "big")
    if n >= p:
        raise InvalidFieldElement("Field element is not below the field modulus")
    return n


def _fp_to_bytes(n: int) -> bytes:
    return n.to_bytes(FP_BYTE_LENGTH, "big")


def _fp2_from_bytes(data: bytes) -> Fp2Coeffs:
    return _fp_from_bytes(data[:FP_BYTE_LENGTH]), _fp_from_bytes(data[FP_BYTE_LENGTH:])


def _fp2_to_bytes(z: Fp2Coeffs) -> bytes:
    return _fp_to_bytes(z[0]) + _fp_to_bytes(z[1])
