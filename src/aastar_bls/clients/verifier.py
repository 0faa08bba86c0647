import logging
import time
from typing import Optional, Sequence

from aastar_bls.clients.errors import (
    EncodingError,
    InvalidPointError,
    LocalVerificationFailed,
)
from aastar_bls.config import BLSConfig, DEFAULT_CONFIG
from aastar_bls.utils import bls12381
from aastar_bls.utils.eip2537 import (
    eip2537_to_g1_point,
    eip2537_to_g2_point,
    g1_point_from_compressed,
    g2_point_from_compressed,
)


class LocalVerifier:
    """Runs the BLS12-381 pairing checks off-chain.

    This is the same check the on-chain verifier performs,
    e(aggPk, H(m)) == e(G1, aggSig), evaluated before anything is encoded for
    a contract call. The boolean methods never raise on malformed input:
    bad lengths, flags or points simply make the check fail.
    """

    def __init__(
        self,
        *,
        config: BLSConfig = DEFAULT_CONFIG,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._config = config
        self._log = logger or logging.getLogger(__name__)

    def verify(self, agg_pk: bytes, message: bytes, agg_sig: bytes) -> bool:
        """
        Fast-aggregate check for signatures over one common message.

        Args:
            agg_pk: 48-byte compressed aggregate public key.
            message: The message every signer signed.
            agg_sig: 96-byte compressed aggregate signature.

        Returns:
            True if e(aggPk, H(message)) == e(G1, aggSig).
        """
        try:
            pk = g1_point_from_compressed(agg_pk)
            sig = g2_point_from_compressed(agg_sig)
        except (EncodingError, InvalidPointError) as e:
            self._log.debug("verify: rejecting malformed input: %s", e)
            return False
        return self.verify_points(pk, bls12381.hash_to_g2(message, self._config.dst), sig)

    def verify_with_public_keys(self, public_keys: Sequence[bytes], message: bytes, agg_sig: bytes) -> bool:
        """Validates every individual key, aggregates them, then runs `verify`.

        Each key must decode to a non-infinity subgroup point; one bad key
        fails the whole check.
        """
        if not public_keys:
            return False
        try:
            points = [g1_point_from_compressed(pk) for pk in public_keys]
            sig = g2_point_from_compressed(agg_sig)
        except (EncodingError, InvalidPointError) as e:
            self._log.debug("verify_with_public_keys: rejecting malformed input: %s", e)
            return False
        if any(bls12381.is_inf(pt) for pt in points):
            self._log.debug("verify_with_public_keys: public key at infinity")
            return False
        agg_pk = bls12381.aggregate_pks(points)
        return self.verify_points(agg_pk, bls12381.hash_to_g2(message, self._config.dst), sig)

    def verify_eip2537(self, agg_pk: bytes, hashed_msg: bytes, agg_sig: bytes) -> bool:
        """Pairing check over the 128/256/256-byte EIP-2537 buffers sent on-chain."""
        try:
            pk = eip2537_to_g1_point(agg_pk)
            h = eip2537_to_g2_point(hashed_msg)
            sig = eip2537_to_g2_point(agg_sig)
        except (EncodingError, InvalidPointError) as e:
            self._log.debug("verify_eip2537: rejecting malformed input: %s", e)
            return False
        return self.verify_points(pk, h, sig)

    def verify_distinct(self, public_keys: Sequence[bytes], messages: Sequence[bytes], agg_sig: bytes) -> bool:
        """General aggregate verification, e(G1, aggSig) == prod e(pk_i, H(m_i))."""
        if not public_keys or len(public_keys) != len(messages):
            return False
        try:
            points = [g1_point_from_compressed(pk) for pk in public_keys]
            sig = g2_point_from_compressed(agg_sig)
        except (EncodingError, InvalidPointError) as e:
            self._log.debug("verify_distinct: rejecting malformed input: %s", e)
            return False
        hashes = bls12381.hash_to_g2_points(messages, self._config.dst)
        start = time.time()
        ok = bls12381.aggregate_pairing_check(points, hashes, sig)
        self._log.debug("distinct-message pairing check (%d pairs) in %.6f s", len(points), time.time() - start)
        return ok

    def verify_single(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        """Checks one signature against one public key."""
        return self.verify(public_key, message, signature)

    def require(self, agg_pk: bytes, message: bytes, agg_sig: bytes) -> None:
        """
        Like `verify`, but raise instead of returning False.

        Raises:
            LocalVerificationFailed: If the aggregate does not verify.
        """
        if not self.verify(agg_pk, message, agg_sig):
            self._log.warning("local verification failed for aggregate key %s...", agg_pk.hex()[:16])
            raise LocalVerificationFailed("Aggregate signature failed local pairing verification")

    def verify_points(self, pk, hashed_msg, sig) -> bool:
        """Pairing check over already decoded points (G1, G2, G2)."""
        start = time.time()
        ok = bls12381.pairing_check(pk, hashed_msg, sig)
        self._log.debug("pairing check in %.6f s", time.time() - start)
        return ok
