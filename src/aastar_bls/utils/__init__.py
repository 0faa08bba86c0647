"""Initializes the aastar-bls utilities sub-package.

This package bundles the curve-level helpers used by the clients. This
`__init__.py` file exposes the most important functions from the
sub-modules, allowing for convenient, direct access.

Available Utilities:
  - bls12381: Point arithmetic, hash-to-curve onto G2, signing, aggregation
    and pairing checks over BLS12-381 (minimal-pubkey-size).
  - eip2537: Conversion between compressed points and the padded EIP-2537
    layout used by the precompiles.
  - solidity: Reshapes EIP-2537 buffers into the verifier's ABI tuples.
  - crypto: Key derivation, scalar serialization and hex helpers.
"""
from .bls12381 import (
    PublicKeyPoint,
    SignaturePoint,
    hash_to_g2,
    sk_to_pk,
    sign,
    aggregate_pks,
    aggregate_sigs,
    pairing_check,
    aggregate_pairing_check,
)
from .eip2537 import (
    pad_fp,
    unpad_fp,
    pad_fp2,
    unpad_fp2,
    compress_g1,
    compress_g2,
    decompress_g1,
    decompress_g2,
    encode_g1_for_eip2537,
    encode_g2_for_eip2537,
    decode_g1_from_eip2537,
    decode_g2_from_eip2537,
)
from .solidity import to_solidity_arguments
from .crypto import (
    derive_secret_key,
    secret_key_to_bytes,
    secret_key_from_bytes,
    to_hex,
    from_hex,
)


__all__ = [
    # from .bls12381
    "PublicKeyPoint",
    "SignaturePoint",
    "hash_to_g2",
    "sk_to_pk",
    "sign",
    "aggregate_pks",
    "aggregate_sigs",
    "pairing_check",
    "aggregate_pairing_check",

    # from .eip2537
    "pad_fp",
    "unpad_fp",
    "pad_fp2",
    "unpad_fp2",
    "compress_g1",
    "compress_g2",
    "decompress_g1",
    "decompress_g2",
    "encode_g1_for_eip2537",
    "encode_g2_for_eip2537",
    "decode_g1_from_eip2537",
    "decode_g2_from_eip2537",

    # from .solidity
    "to_solidity_arguments",

    # from .crypto
    "derive_secret_key",
    "secret_key_to_bytes",
    "secret_key_from_bytes",
    "to_hex",
    "from_hex",
]
