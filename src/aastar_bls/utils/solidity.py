"""Reshapes EIP-2537 buffers into the ABI tuples of the on-chain verifier.

The verifier contract exposes

    verifyAggregateSignature(G1Point aggPk, G2Point hashedMsg, G2Point aggSig)

with `G1Point { uint256 X; uint256 Y; }` and
`G2Point { uint256[2] X; uint256[2] Y; }`. Each value is the big-endian
integer decode of one 64-byte EIP-2537 Fp slot, so it is always below the
field modulus. G2 arrays hold [c0, c1].
"""
from __future__ import annotations

from typing import List

from aastar_bls.clients.errors import InvalidLength
from aastar_bls.constants import EIP2537_FP_BYTE_LENGTH, EIP2537_G1_BYTE_LENGTH, EIP2537_G2_BYTE_LENGTH
from aastar_bls.types import SolidityArguments, SolidityG1Point, SolidityG2Point
from aastar_bls.utils.eip2537 import unpad_fp

__all__ = [
    "eip2537_to_uint256_words",
    "g1_to_solidity",
    "g2_to_solidity",
    "to_solidity_arguments",
]


def eip2537_to_uint256_words(buf: bytes) -> List[int]:
    """Decodes consecutive 64-byte EIP-2537 Fp slots into integers.

    Raises:
        InvalidFieldElement: If a slot has non-zero padding or is >= p.
    """
    return [
        int.from_bytes(unpad_fp(buf[i:i + EIP2537_FP_BYTE_LENGTH]), "big")
        for i in range(0, len(buf), EIP2537_FP_BYTE_LENGTH)
    ]


def g1_to_solidity(buf: bytes) -> SolidityG1Point:
    """Converts a 128-byte EIP-2537 G1 point into `G1Point{X, Y}`.

    Raises:
        InvalidLength: If `buf` is not 128 bytes.
    """
    if len(buf) != EIP2537_G1_BYTE_LENGTH:
        raise InvalidLength("EIP-2537 G1 point", EIP2537_G1_BYTE_LENGTH, len(buf))
    x, y = eip2537_to_uint256_words(buf)
    return SolidityG1Point(X=x, Y=y)


def g2_to_solidity(buf: bytes) -> SolidityG2Point:
    """Converts a 256-byte EIP-2537 G2 point into `G2Point{X: [c0, c1], Y: [c0, c1]}`.

    Raises:
        InvalidLength: If `buf` is not 256 bytes.
    """
    if len(buf) != EIP2537_G2_BYTE_LENGTH:
        raise InvalidLength("EIP-2537 G2 point", EIP2537_G2_BYTE_LENGTH, len(buf))
    x0, x1, y0, y1 = eip2537_to_uint256_words(buf)
    return SolidityG2Point(X=(x0, x1), Y=(y0, y1))


def to_solidity_arguments(agg_pk: bytes, hashed_msg: bytes, agg_sig: bytes) -> SolidityArguments:
    """Builds the three ABI tuples for `verifyAggregateSignature`.

    This is a pure reshaping: no curve check is performed here, the buffers
    are expected to come out of the signing pipeline.

    Args:
        agg_pk: 128-byte EIP-2537 aggregated public key.
        hashed_msg: 256-byte EIP-2537 H(m).
        agg_sig: 256-byte EIP-2537 aggregated signature.

    Returns:
        A SolidityArguments model.

    Raises:
        InvalidLength: If any buffer has the wrong size.
        InvalidFieldElement: If any Fp slot is malformed.
    """
    return SolidityArguments(
        aggPk=g1_to_solidity(agg_pk),
        hashedMsg=g2_to_solidity(hashed_msg),
        aggSig=g2_to_solidity(agg_sig),
    )
