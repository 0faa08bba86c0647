"""BLS12-381 aggregate signatures encoded for EIP-2537 on-chain verification."""
from .clients import (
    Signer,
    LocalVerifier,
    SignatureAggregator,
    BLSError,
)
from .config import BLSConfig
from .types import AggregateSignatureResult, SolidityArguments

__all__ = [
    "Signer",
    "LocalVerifier",
    "SignatureAggregator",
    "BLSError",
    "BLSConfig",
    "AggregateSignatureResult",
    "SolidityArguments",
]
