import logging
import time
from typing import List, Optional, Sequence, Tuple, Union

from eth_typing import BLSPubkey, BLSSignature
from pydantic import TypeAdapter

from aastar_bls.clients.errors import EmptyInputSet, InputValidationError, LocalVerificationFailed
from aastar_bls.clients.signer import Signer
from aastar_bls.clients.verifier import LocalVerifier
from aastar_bls.config import BLSConfig, DEFAULT_CONFIG
from aastar_bls.types import (
    AggregateSignatureResult,
    CommonMessage,
    DistinctMessageAggregate,
    PerSignerMessages,
    SigningRequest,
    SolidityArguments,
)
from aastar_bls.utils import bls12381, solidity
from aastar_bls.utils.bls12381 import PublicKeyPoint, SignaturePoint
from aastar_bls.utils.eip2537 import (
    g1_point_from_compressed,
    g1_point_to_compressed,
    g1_point_to_eip2537,
    g2_point_from_compressed,
    g2_point_to_compressed,
    g2_point_to_eip2537,
)

SecretKeyLike = Union[bytes, Signer]

_REQUEST_ADAPTER = TypeAdapter(SigningRequest)


class SignatureAggregator:
    """Aggregates BLS12-381 signatures and encodes them for the on-chain verifier.

    The end-to-end flow is: every signer signs the common message, public
    keys and signatures are summed, H(m) is computed on its own, the
    aggregate is checked off-chain, and the three points are written in the
    EIP-2537 layout. A result is only returned once the local check passed.
    """

    def __init__(
        self,
        *,
        config: BLSConfig = DEFAULT_CONFIG,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        """
        Initialize the SignatureAggregator.

        Args:
            config: DST and local-verification settings shared with the signers.
            logger: Optional logger; defaults to this module's logger.
        """
        self._config = config
        self._log = logger or logging.getLogger(__name__)
        self._verifier = LocalVerifier(config=config, logger=self._log)

    @property
    def verifier(self) -> LocalVerifier:
        return self._verifier

    # --- Byte-level aggregation ---

    @staticmethod
    def aggregate_public_keys(public_keys: Sequence[bytes]) -> BLSPubkey:
        """
        Sum compressed G1 public keys.

        Args:
            public_keys: 48-byte compressed keys, each validated on decode.

        Returns:
            The 48-byte compressed aggregate key.

        Raises:
            EmptyInputSet: If no keys are given.
            EncodingError: If a key is malformed.
            InvalidPointError: If a key is off-curve or outside the subgroup.
        """
        if not public_keys:
            raise EmptyInputSet("No public keys provided for aggregation")
        points = [PublicKeyPoint(g1_point_from_compressed(pk)) for pk in public_keys]
        return BLSPubkey(g1_point_to_compressed(bls12381.aggregate_pks(points)))

    @staticmethod
    def aggregate_signatures(signatures: Sequence[bytes]) -> BLSSignature:
        """
        Sum compressed G2 signatures.

        All signatures must have been produced over the same message for the
        result to verify as a fast aggregate.

        Raises:
            EmptyInputSet: If no signatures are given.
            EncodingError: If a signature is malformed.
            InvalidPointError: If a signature is off-curve or outside the subgroup.
        """
        if not signatures:
            raise EmptyInputSet("No signatures provided for aggregation")
        points = [SignaturePoint(g2_point_from_compressed(sig)) for sig in signatures]
        return BLSSignature(g2_point_to_compressed(bls12381.aggregate_sigs(points)))

    def hash_message(self, message: bytes) -> bytes:
        """Returns H(message) as a 256-byte EIP-2537 G2 point."""
        return g2_point_to_eip2537(bls12381.hash_to_g2(message, self._config.dst))

    @staticmethod
    def to_solidity_arguments(agg_pk: bytes, hashed_msg: bytes, agg_sig: bytes) -> SolidityArguments:
        """Shapes EIP-2537 buffers into the `verifyAggregateSignature` ABI tuples."""
        return solidity.to_solidity_arguments(agg_pk, hashed_msg, agg_sig)

    # --- Pipeline ---

    def generate_aggregate_signature(
        self,
        secret_keys: Sequence[SecretKeyLike],
        messages: Sequence[bytes],
    ) -> AggregateSignatureResult:
        """
        Sign one common message with every key and return the encoded aggregate.

        `messages[i]` is the message for `secret_keys[i]`; all entries must be
        identical. Use `generate_distinct_message_aggregate` when signers sign
        different messages.

        Args:
            secret_keys: 32-byte secret keys or `Signer` instances.
            messages: One message per key.

        Returns:
            The EIP-2537 encoded aggregate public key, H(m) and aggregate signature.

        Raises:
            InputValidationError: If a list is empty, the lengths differ, or the
                messages are not identical.
            InvalidScalar: If a secret key is invalid.
            LocalVerificationFailed: If the aggregate does not verify locally.
        """
        if not secret_keys or not messages:
            raise InputValidationError("secret_keys and messages must both be non-empty")
        if len(secret_keys) != len(messages):
            raise InputValidationError(
                f"Got {len(secret_keys)} secret keys but {len(messages)} messages"
            )
        message = bytes(messages[0])
        if any(bytes(m) != message for m in messages[1:]):
            raise InputValidationError(
                "Messages differ between signers; use generate_distinct_message_aggregate"
            )
        return self.generate_fast_aggregate_signature(secret_keys, message)

    def generate_fast_aggregate_signature(
        self,
        secret_keys: Sequence[SecretKeyLike],
        message: bytes,
    ) -> AggregateSignatureResult:
        """Sign `message` with every key and return the encoded aggregate.

        Raises:
            EmptyInputSet: If no keys are given.
            LocalVerificationFailed: If the aggregate does not verify locally.
        """
        if not secret_keys:
            raise EmptyInputSet("No secret keys provided for signing")

        start = time.time()
        pks, sigs = self._sign_all(secret_keys, [message] * len(secret_keys))
        agg_pk = bls12381.aggregate_pks(pks)
        agg_sig = bls12381.aggregate_sigs(sigs)
        self._log.debug("signed and aggregated %d signatures in %.6f s", len(pks), time.time() - start)

        return self._finalize(agg_pk, agg_sig, message)

    def generate_distinct_message_aggregate(
        self,
        secret_keys: Sequence[SecretKeyLike],
        messages: Sequence[bytes],
    ) -> DistinctMessageAggregate:
        """
        General aggregation: signer i signs messages[i].

        The result keeps individual public keys, since it is verified with one
        pairing per (key, message) pair and cannot be sent to the
        single-message contract.

        Raises:
            InputValidationError: If a list is empty or the lengths differ.
            LocalVerificationFailed: If the aggregate does not verify locally.
        """
        if not secret_keys or not messages:
            raise InputValidationError("secret_keys and messages must both be non-empty")
        if len(secret_keys) != len(messages):
            raise InputValidationError(
                f"Got {len(secret_keys)} secret keys but {len(messages)} messages"
            )

        pks, sigs = self._sign_all(secret_keys, messages)
        agg_sig = bls12381.aggregate_sigs(sigs)

        if self._config.verify_locally:
            hashes = bls12381.hash_to_g2_points(messages, self._config.dst)
            if not bls12381.aggregate_pairing_check(pks, hashes, agg_sig):
                self._log.warning("local verification failed for %d-signer distinct-message aggregate", len(pks))
                raise LocalVerificationFailed("Distinct-message aggregate failed local pairing verification")

        return DistinctMessageAggregate(
            publicKeys=[g1_point_to_compressed(pk) for pk in pks],
            messages=[bytes(m) for m in messages],
            aggSig=g2_point_to_compressed(agg_sig),
        )

    def generate(
        self,
        secret_keys: Sequence[SecretKeyLike],
        request: Union[SigningRequest, dict],
    ) -> Union[AggregateSignatureResult, DistinctMessageAggregate]:
        """Dispatches on the request kind: "common" or "per_signer"."""
        if isinstance(request, dict):
            request = _REQUEST_ADAPTER.validate_python(request)
        if isinstance(request, CommonMessage):
            return self.generate_fast_aggregate_signature(secret_keys, request.message)
        if isinstance(request, PerSignerMessages):
            return self.generate_distinct_message_aggregate(secret_keys, request.messages)
        raise InputValidationError(f"Unsupported signing request: {type(request).__name__}")

    def build_result(
        self,
        public_keys: Sequence[bytes],
        signatures: Sequence[bytes],
        message: bytes,
    ) -> AggregateSignatureResult:
        """
        Aggregate signatures collected from remote signers.

        Args:
            public_keys: 48-byte compressed keys of the signers.
            signatures: 96-byte compressed signatures over `message`, in the same order.
            message: The common message.

        Raises:
            InputValidationError: If the lists are empty, differ in length, or a key
                is the point at infinity.
            EncodingError: If a key or signature is malformed.
            InvalidPointError: If a key or signature is not a valid subgroup point.
            LocalVerificationFailed: If the aggregate does not verify locally.
        """
        if not public_keys or not signatures:
            raise InputValidationError("public_keys and signatures must both be non-empty")
        if len(public_keys) != len(signatures):
            raise InputValidationError(
                f"Got {len(public_keys)} public keys but {len(signatures)} signatures"
            )

        pks = [PublicKeyPoint(g1_point_from_compressed(pk)) for pk in public_keys]
        for i, pk in enumerate(pks):
            if bls12381.is_inf(pk):
                raise InputValidationError(f"Public key {i} is the point at infinity")
        sigs = [SignaturePoint(g2_point_from_compressed(sig)) for sig in signatures]

        return self._finalize(bls12381.aggregate_pks(pks), bls12381.aggregate_sigs(sigs), message)

    # --- Internals ---

    def _sign_all(
        self,
        secret_keys: Sequence[SecretKeyLike],
        messages: Sequence[bytes],
    ) -> Tuple[List[PublicKeyPoint], List[SignaturePoint]]:
        pks: List[PublicKeyPoint] = []
        sigs: List[SignaturePoint] = []
        for sk, msg in zip(secret_keys, messages):
            if isinstance(sk, Signer):
                if sk.dst != self._config.dst:
                    raise InputValidationError(
                        "Signer DST does not match the aggregator DST; the aggregate would not verify"
                    )
                pks.append(sk.public_key_point())
                sigs.append(sk.sign_point(msg))
                continue
            with Signer(sk, config=self._config, logger=self._log) as signer:
                pks.append(signer.public_key_point())
                sigs.append(signer.sign_point(msg))
        return pks, sigs

    def _finalize(
        self,
        agg_pk: PublicKeyPoint,
        agg_sig: SignaturePoint,
        message: bytes,
    ) -> AggregateSignatureResult:
        hashed = bls12381.hash_to_g2(message, self._config.dst)

        if self._config.verify_locally:
            if not self._verifier.verify_points(agg_pk, hashed, agg_sig):
                self._log.warning(
                    "local verification failed for aggregate key %s...",
                    g1_point_to_compressed(agg_pk).hex()[:16],
                )
                raise LocalVerificationFailed("Aggregate signature failed local pairing verification")

        start = time.time()
        result = AggregateSignatureResult(
            aggPk=g1_point_to_eip2537(agg_pk),
            hashedMsg=g2_point_to_eip2537(hashed),
            aggSig=g2_point_to_eip2537(agg_sig),
        )
        self._log.debug("EIP-2537 encoding in %.6f s", time.time() - start)
        return result
