import logging
import time
from typing import Optional

from eth_typing import BLSPubkey, BLSSignature

from aastar_bls.clients.errors import InvalidScalar
from aastar_bls.config import BLSConfig, DEFAULT_CONFIG
from aastar_bls.utils import bls12381
from aastar_bls.utils.bls12381 import PublicKeyPoint, SignaturePoint
from aastar_bls.utils.crypto import derive_secret_key, from_hex, secret_key_from_bytes, secret_key_to_bytes
from aastar_bls.utils.eip2537 import g1_point_to_compressed, g2_point_to_compressed


class Signer:
    """Holds one secret scalar and produces BLS12-381 signatures with it.

    Public keys are 48-byte compressed G1 points and signatures are 96-byte
    compressed G2 points (minimal-pubkey-size). The secret is kept in a
    mutable buffer that is zeroed by `close()`; a closed signer refuses to
    sign.

    Example:
        with Signer.from_seed(seed) as signer:
            pk = signer.derive_public_key()
            sig = signer.sign(b"hello world")
    """

    def __init__(
        self,
        secret_key: bytes,
        *,
        config: BLSConfig = DEFAULT_CONFIG,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize the Signer.

        Args:
            secret_key: 32-byte big-endian scalar in [1, r-1].
            config: Hash-to-curve settings; the DST must match the verifier's.
            logger: Optional logger; defaults to this module's logger.

        Raises:
            InvalidScalar: If the key is not 32 bytes, is zero, or is >= r.
        """
        secret_key_from_bytes(bytes(secret_key))
        self._secret = bytearray(secret_key)
        self._closed = False
        self._config = config
        self._log = logger or logging.getLogger(__name__)

    @classmethod
    def from_seed(cls, ikm: bytes, **kwargs) -> "Signer":
        """Derives the secret key from at least 32 bytes of seed material (IETF KeyGen)."""
        return cls(secret_key_to_bytes(derive_secret_key(ikm)), **kwargs)

    @classmethod
    def from_hex(cls, secret_key_hex: str, **kwargs) -> "Signer":
        """Builds a signer from a hex-encoded 32-byte secret key."""
        return cls(from_hex(secret_key_hex), **kwargs)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def dst(self) -> bytes:
        """Domain separation tag this signer hashes messages with."""
        return self._config.dst

    def _scalar(self) -> int:
        if self._closed:
            raise InvalidScalar("Signer is closed; its secret key has been wiped")
        return secret_key_from_bytes(bytes(self._secret))

    def public_key_point(self) -> PublicKeyPoint:
        """Returns the public key sk * G1 as a projective point."""
        return bls12381.sk_to_pk(self._scalar())

    def derive_public_key(self) -> BLSPubkey:
        """Returns the 48-byte compressed G1 public key."""
        return BLSPubkey(g1_point_to_compressed(self.public_key_point()))

    def sign_point(self, message: bytes) -> SignaturePoint:
        """Returns sk * H(message) as a projective G2 point."""
        return bls12381.sign(message, self._scalar(), self._config.dst)

    def sign(self, message: bytes) -> BLSSignature:
        """
        Sign a message.

        Args:
            message: Arbitrary bytes; hashed to G2 with the configured DST.

        Returns:
            The 96-byte compressed signature.

        Raises:
            InvalidScalar: If the signer has been closed.
            HashToCurveFailure: If the message could not be hashed to G2.
        """
        start = time.time()
        sig = BLSSignature(g2_point_to_compressed(self.sign_point(message)))
        self._log.debug("signed %d-byte message in %.6f s", len(message), time.time() - start)
        return sig

    def close(self) -> None:
        """Zeroes the secret buffer. Further use raises InvalidScalar."""
        for i in range(len(self._secret)):
            self._secret[i] = 0
        self._closed = True

    def __enter__(self) -> "Signer":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "closed" if self._closed else "open"
        return f"<Signer {state}>"
