"""Implements the BLS signature primitives over the BLS12-381 curve.

This module provides the point-level operations used by the signers, the
aggregator and the local verifier. It follows the minimal-pubkey-size
convention used by Ethereum: public keys are points on G1 and signatures
(and hashed messages) are points on G2.

Group arithmetic and pairings come from py_ecc's optimized BLS12-381
implementation; the subgroup check is py_ecc's g2_primitives.subgroup_check
(r * P == O), which works for points of either group.

Key Features:
  - Hash-to-curve onto G2 (RFC 9380, SSWU, expand_message_xmd with SHA-256).
  - Key derivation and signing.
  - Aggregation of public keys and signatures with subgroup validation.
  - Pairing checks for common-message and distinct-message aggregates.
"""
from __future__ import annotations

import hashlib
from typing import List, NewType, Sequence, Tuple

from py_ecc.bls.g2_primitives import subgroup_check
from py_ecc.bls.hash_to_curve import hash_to_G2
from py_ecc.fields import optimized_bls12_381_FQ as FQ
from py_ecc.fields import optimized_bls12_381_FQ2 as FQ2
from py_ecc.fields import optimized_bls12_381_FQ12 as FQ12
from py_ecc.optimized_bls12_381 import (
    G1, G2, Z1, Z2,
    b, b2, curve_order,
    add, multiply, neg, normalize, is_inf, is_on_curve,
    pairing, final_exponentiate,
    field_modulus as p,
)
from py_ecc.typing import Optimized_Point3D

from aastar_bls.clients.errors import (
    EmptyInputSet,
    HashToCurveFailure,
    InputValidationError,
    InvalidScalar,
    PointNotInSubgroup,
    PointNotOnCurve,
)

# --- Type Aliases ---
PointG1 = Optimized_Point3D[FQ]
PointG2 = Optimized_Point3D[FQ2]
PublicKeyPoint = NewType("PublicKeyPoint", PointG1)
SignaturePoint = NewType("SignaturePoint", PointG2)
Fp2Coeffs = Tuple[int, int]

__all__ = [
    "PointG1", "PointG2", "PublicKeyPoint", "SignaturePoint",
    "G1", "G2", "Z1", "Z2", "curve_order", "p",
    "is_valid_secret_key",
    "g1_from_affine", "g2_from_affine", "g1_to_affine", "g2_to_affine",
    "subgroup_check", "validate_g1", "validate_g2", "points_equal",
    "hash_to_g2",
    "hash_to_g2_points",
    "sk_to_pk",
    "sign",
    "aggregate_pks",
    "aggregate_sigs",
    "pairing_check",
    "aggregate_pairing_check",
]


# --- Scalars ---

def is_valid_secret_key(sk: int) -> bool:
    """Returns True if `sk` is a usable secret scalar, i.e. 0 < sk < r."""
    return 0 < sk < curve_order


# --- Affine <-> Projective ---

def g1_from_affine(x: int, y: int) -> PointG1:
    """Builds a projective G1 point from affine integer coordinates."""
    return FQ(x), FQ(y), FQ.one()


def g2_from_affine(x: Fp2Coeffs, y: Fp2Coeffs) -> PointG2:
    """Builds a projective G2 point from affine (c0, c1) coordinates."""
    return FQ2([x[0], x[1]]), FQ2([y[0], y[1]]), FQ2.one()


def g1_to_affine(pt: PointG1) -> Tuple[int, int]:
    """Returns the affine (x, y) integer coordinates of a finite G1 point."""
    x, y = normalize(pt)
    return int(x.n), int(y.n)


def g2_to_affine(pt: PointG2) -> Tuple[Fp2Coeffs, Fp2Coeffs]:
    """Returns the affine ((x.c0, x.c1), (y.c0, y.c1)) of a finite G2 point."""
    x, y = normalize(pt)
    return _coeffs(x), _coeffs(y)


def points_equal(a: Optimized_Point3D, b_: Optimized_Point3D) -> bool:
    """Compares two projective points as group elements."""
    if is_inf(a) or is_inf(b_):
        return is_inf(a) and is_inf(b_)
    return normalize(a) == normalize(b_)


# --- Validation ---

def validate_g1(pt: PointG1) -> PointG1:
    """Checks curve and subgroup membership of a G1 point.

    Returns:
        The same point, for chaining.

    Raises:
        PointNotOnCurve: If y^2 != x^3 + 4.
        PointNotInSubgroup: If the point is not in the order-r subgroup.
    """
    if not is_on_curve(pt, b):
        raise PointNotOnCurve("G1 point is not on the curve y^2 = x^3 + 4")
    if not subgroup_check(pt):
        raise PointNotInSubgroup("G1 point is not in the prime-order subgroup")
    return pt


def validate_g2(pt: PointG2) -> PointG2:
    """Checks curve and subgroup membership of a G2 point.

    Raises:
        PointNotOnCurve: If the point is not on the twist y^2 = x^3 + 4(1 + u).
        PointNotInSubgroup: If the point is not in the order-r subgroup.
    """
    if not is_on_curve(pt, b2):
        raise PointNotOnCurve("G2 point is not on the curve y^2 = x^3 + 4(1 + u)")
    if not subgroup_check(pt):
        raise PointNotInSubgroup("G2 point is not in the prime-order subgroup")
    return pt


# --- Hash-to-Curve ---

def hash_to_g2(msg: bytes, domain: bytes) -> SignaturePoint:
    """Hashes a message to a point on G2.

    Implements the RFC 9380 suite BLS12381G2_XMD:SHA-256_SSWU_RO_: the message
    is expanded with expand_message_xmd, mapped to two Fp2 elements, sent
    through the simplified SWU map and the 3-isogeny, added, and the
    cofactor is cleared.

    Args:
        msg: The message to hash.
        domain: The domain separation tag, 1 to 255 bytes.

    Returns:
        A point in the prime-order subgroup of G2.

    Raises:
        InputValidationError: If the DST length is invalid.
        HashToCurveFailure: If the mapping produced an invalid point.
    """
    dst_len = len(domain)
    if dst_len == 0 or dst_len > 255:
        raise InputValidationError(f"DST length must be between 1 and 255 bytes (got {dst_len}).")
    try:
        h = hash_to_G2(bytes(msg), bytes(domain), hashlib.sha256)
    except ValueError as e:
        raise HashToCurveFailure(f"hash_to_g2 failed: {e}") from e

    if is_inf(h):
        raise HashToCurveFailure("hash_to_g2 produced the point at infinity")
    if not is_on_curve(h, b2) or not subgroup_check(h):
        raise HashToCurveFailure("hash_to_g2 produced a point outside the G2 subgroup")
    return SignaturePoint(h)


# --- BLS Signature Core Functions ---

def sk_to_pk(sk: int) -> PublicKeyPoint:
    """Derives the G1 public key sk * G1.

    Raises:
        InvalidScalar: If `sk` is not in [1, r-1].
    """
    if not is_valid_secret_key(sk):
        raise InvalidScalar("Secret key must be in the range [1, r-1]")
    return PublicKeyPoint(multiply(G1, sk))


def sign(msg: bytes, sk: int, domain: bytes) -> SignaturePoint:
    """Creates a BLS signature: the message hash (a G2 point) times the secret key.

    Args:
        msg: The message to be signed.
        sk: The signer's secret scalar.
        domain: The domain separation tag.

    Returns:
        The signature as a G2 point.
    """
    if not is_valid_secret_key(sk):
        raise InvalidScalar("Secret key must be in the range [1, r-1]")
    h = hash_to_g2(msg, domain)
    return SignaturePoint(multiply(h, sk))


def aggregate_pks(pks: Sequence[PublicKeyPoint]) -> PublicKeyPoint:
    """Aggregates public keys by adding their G1 points.

    Raises:
        EmptyInputSet: If `pks` is empty.
    """
    if not pks:
        raise EmptyInputSet("No public keys provided for aggregation")
    acc = Z1
    for pk in pks:
        acc = add(acc, pk)
    return PublicKeyPoint(acc)


def aggregate_sigs(sigs: Sequence[SignaturePoint]) -> SignaturePoint:
    """Aggregates signatures by adding their G2 points.

    Raises:
        EmptyInputSet: If `sigs` is empty.
    """
    if not sigs:
        raise EmptyInputSet("No signatures provided for aggregation")
    acc = Z2
    for sig in sigs:
        acc = add(acc, sig)
    return SignaturePoint(acc)


def pairing_check(pk: PublicKeyPoint, hashed_msg: SignaturePoint, sig: SignaturePoint) -> bool:
    """Checks e(pk, H(m)) == e(G1, sig).

    Both sides are combined into one product e(pk, H(m)) * e(-G1, sig) so that
    only a single final exponentiation is needed.
    """
    if is_inf(pk) or is_inf(hashed_msg):
        return False
    product = pairing(hashed_msg, pk, final_exponentiate=False) * pairing(sig, neg(G1), final_exponentiate=False)
    return final_exponentiate(product) == FQ12.one()


def aggregate_pairing_check(
    pks: Sequence[PublicKeyPoint],
    hashed_msgs: Sequence[SignaturePoint],
    sig: SignaturePoint,
) -> bool:
    """Checks e(G1, sig) == prod(e(pk_i, H(m_i))) for distinct-message aggregates.

    Raises:
        InputValidationError: If the number of public keys and hashes differ.
    """
    if len(pks) != len(hashed_msgs):
        raise InputValidationError("Number of public keys and messages must be equal.")
    if not pks:
        return False
    product: FQ12 = pairing(sig, neg(G1), final_exponentiate=False)
    for pk, h in zip(pks, hashed_msgs):
        if is_inf(pk):
            return False
        product *= pairing(h, pk, final_exponentiate=False)
    return final_exponentiate(product) == FQ12.one()


# --- Internal Helpers ---

def _coeffs(z: FQ2) -> Fp2Coeffs:
    """Extracts integer coefficients (c0, c1) from an FQ2 field element."""
    c0, c1 = z.coeffs
    return int(getattr(c0, "n", c0)), int(getattr(c1, "n", c1))


def hash_to_g2_points(msgs: Sequence[bytes], domain: bytes) -> List[SignaturePoint]:
    """Hashes each message of `msgs` to G2."""
    return [hash_to_g2(m, domain) for m in msgs]
