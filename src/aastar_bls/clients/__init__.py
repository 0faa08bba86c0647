"""
aastar-bls Client Subpackage.

This package provides the client classes of the signing pipeline: the
per-key Signer, the off-chain LocalVerifier, and the SignatureAggregator
that turns a set of signatures into EIP-2537 encoded arguments for the
on-chain verifier.
"""

from .errors import (
    BLSError,
    InputValidationError,
    EmptyInputSet,
    InvalidScalar,
    EncodingError,
    InvalidLength,
    InvalidFieldElement,
    InvalidPointError,
    PointNotOnCurve,
    PointNotInSubgroup,
    HashToCurveFailure,
    LocalVerificationFailed,
)
from .signer import Signer
from .verifier import LocalVerifier
from .signature_aggregator import SignatureAggregator

__all__ = [
    "Signer",
    "LocalVerifier",
    "SignatureAggregator",
    "BLSError",
    "InputValidationError",
    "EmptyInputSet",
    "InvalidScalar",
    "EncodingError",
    "InvalidLength",
    "InvalidFieldElement",
    "InvalidPointError",
    "PointNotOnCurve",
    "PointNotInSubgroup",
    "HashToCurveFailure",
    "LocalVerificationFailed",
]
