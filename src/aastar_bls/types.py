"""Defines the core data structures and Pydantic models for aastar-bls.

This module contains the artifacts exchanged between the signing pipeline and
its callers: the EIP-2537 encoded aggregate, the Solidity-shaped arguments
derived from it, and the tagged signing requests that select between
common-message (fast aggregate) and per-signer-message (general aggregate)
signing. Length checks run at construction, so an instance with a wrongly
sized buffer can never exist.
"""
from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

from aastar_bls.clients.errors import InputValidationError, InvalidLength
from aastar_bls.constants import (
    EIP2537_G1_BYTE_LENGTH,
    EIP2537_G2_BYTE_LENGTH,
    G1_COMPRESSED_BYTE_LENGTH,
    G2_COMPRESSED_BYTE_LENGTH,
)
from aastar_bls.utils.crypto import from_hex, to_hex


class AggregateSignatureResult(BaseModel):
    """The terminal artifact of an aggregation, in EIP-2537 layout.

    Instances are immutable and are only produced after the local pairing
    check has passed (unless the caller disabled it).

    Attributes:
        aggPk: Aggregated public key, a 128-byte EIP-2537 G1 point.
        hashedMsg: H(message), a 256-byte EIP-2537 G2 point.
        aggSig: Aggregated signature, a 256-byte EIP-2537 G2 point.
    """
    model_config = ConfigDict(frozen=True)

    aggPk: bytes
    hashedMsg: bytes
    aggSig: bytes

    @field_validator("aggPk")
    @classmethod
    def check_agg_pk(cls, v: bytes) -> bytes:
        if len(v) != EIP2537_G1_BYTE_LENGTH:
            raise InvalidLength("aggPk", EIP2537_G1_BYTE_LENGTH, len(v))
        return v

    @field_validator("hashedMsg", "aggSig")
    @classmethod
    def check_g2_length(cls, v: bytes, info: ValidationInfo) -> bytes:
        if len(v) != EIP2537_G2_BYTE_LENGTH:
            raise InvalidLength(info.field_name, EIP2537_G2_BYTE_LENGTH, len(v))
        return v

    def to_hex(self) -> Dict[str, str]:
        """Returns the three buffers as 0x-prefixed hex strings."""
        return {
            "aggPk": to_hex(self.aggPk),
            "hashedMsg": to_hex(self.hashedMsg),
            "aggSig": to_hex(self.aggSig),
        }

    @classmethod
    def from_hex(cls, data: Dict[str, str]) -> "AggregateSignatureResult":
        """Builds a result from hex strings (the 0x prefix is optional)."""
        return cls(
            aggPk=from_hex(data["aggPk"]),
            hashedMsg=from_hex(data["hashedMsg"]),
            aggSig=from_hex(data["aggSig"]),
        )


class SolidityG1Point(BaseModel):
    """ABI shape of `struct G1Point { uint256 X; uint256 Y; }`."""
    model_config = ConfigDict(frozen=True)

    X: int
    Y: int

    def as_tuple(self) -> Tuple[int, int]:
        return self.X, self.Y


class SolidityG2Point(BaseModel):
    """ABI shape of `struct G2Point { uint256[2] X; uint256[2] Y; }`.

    Index 0 holds c0 and index 1 holds c1 of each Fp2 coordinate.
    """
    model_config = ConfigDict(frozen=True)

    X: Tuple[int, int]
    Y: Tuple[int, int]

    def as_tuple(self) -> Tuple[Tuple[int, int], Tuple[int, int]]:
        return self.X, self.Y


class SolidityArguments(BaseModel):
    """Arguments of `verifyAggregateSignature(G1Point, G2Point, G2Point)`.

    Attributes:
        aggPk: The aggregated public key.
        hashedMsg: The hashed message H(m).
        aggSig: The aggregated signature.
    """
    model_config = ConfigDict(frozen=True)

    aggPk: SolidityG1Point
    hashedMsg: SolidityG2Point
    aggSig: SolidityG2Point

    def as_tuple(self) -> tuple:
        """Returns the arguments as nested tuples, in call order.

        Every value is a full Fp element of up to 381 bits, not a 256-bit
        word. An ABI encoder will reject most of them as `uint256`, so the
        contract must take each coordinate as its padded 64-byte EIP-2537
        slot rather than a single word.
        """
        return self.aggPk.as_tuple(), self.hashedMsg.as_tuple(), self.aggSig.as_tuple()


class CommonMessage(BaseModel):
    """Fast-aggregate request: every signer signs the same message.

    This is the only mode whose result can be checked by the on-chain
    verifier, which takes a single hashed message.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["common"] = "common"
    message: bytes


class PerSignerMessages(BaseModel):
    """General aggregate request: signer i signs messages[i]."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["per_signer"] = "per_signer"
    messages: List[bytes]


SigningRequest = Annotated[Union[CommonMessage, PerSignerMessages], Field(discriminator="kind")]


class DistinctMessageAggregate(BaseModel):
    """Result of general (per-signer message) aggregation.

    The public keys are kept individually because verification needs one
    pairing per (public key, message) pair.

    Attributes:
        publicKeys: Compressed 48-byte G1 public keys, one per signer.
        messages: The message each signer signed, in signer order.
        aggSig: Compressed 96-byte aggregated G2 signature.
    """
    model_config = ConfigDict(frozen=True)

    publicKeys: List[bytes]
    messages: List[bytes]
    aggSig: bytes

    @field_validator("publicKeys")
    @classmethod
    def check_public_keys(cls, v: List[bytes]) -> List[bytes]:
        for pk in v:
            if len(pk) != G1_COMPRESSED_BYTE_LENGTH:
                raise InvalidLength("public key", G1_COMPRESSED_BYTE_LENGTH, len(pk))
        return v

    @field_validator("aggSig")
    @classmethod
    def check_agg_sig(cls, v: bytes) -> bytes:
        if len(v) != G2_COMPRESSED_BYTE_LENGTH:
            raise InvalidLength("aggSig", G2_COMPRESSED_BYTE_LENGTH, len(v))
        return v

    @model_validator(mode="after")
    def check_counts(self) -> "DistinctMessageAggregate":
        if not self.publicKeys or len(self.publicKeys) != len(self.messages):
            raise InputValidationError("publicKeys and messages must be non-empty and have matching lengths.")
        return self
