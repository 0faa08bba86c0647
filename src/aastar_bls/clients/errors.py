class BLSError(Exception):
    """
    Base class for all aastar-bls errors.

    This exception serves as the root of the aastar-bls error hierarchy.
    """
    pass


class InputValidationError(BLSError):
    """
    Raised when the key/message sets handed to the library are unusable.

    Examples include empty inputs or a secret key list whose length does not
    match the message list.
    """
    pass


class EmptyInputSet(InputValidationError):
    """
    Raised when an aggregation is requested over zero elements.
    """
    pass


class InvalidScalar(InputValidationError):
    """
    Raised when a secret key is not a 32-byte integer in the range [1, r-1].

    Also raised when a signer is used after its secret has been wiped.
    """
    pass


class EncodingError(BLSError):
    """
    Base class for byte-level encoding failures.

    Any deviation from the fixed compressed or EIP-2537 layouts is fatal.
    """
    pass


class InvalidLength(EncodingError):
    """
    Raised when a buffer does not have the exact expected size.

    Attributes:
        expected: The required length in bytes.
        actual: The length that was supplied.
    """

    def __init__(self, what: str, expected: int, actual: int):
        """
        Initialize an InvalidLength error.

        Args:
            what: Name of the value being decoded (e.g. "G1 compressed point").
            expected: Required length in bytes.
            actual: Supplied length in bytes.
        """
        super().__init__(f"Invalid {what} length: expected {expected} bytes, got {actual}")
        self.expected = expected
        self.actual = actual


class InvalidFieldElement(EncodingError):
    """
    Raised when a field element slot is malformed.

    Covers non-zero EIP-2537 padding, coordinates not below the field
    modulus, and inconsistent compression flags.
    """
    pass


class InvalidPointError(BLSError):
    """
    Base class for points that fail curve or subgroup validation.
    """
    pass


class PointNotOnCurve(InvalidPointError):
    """
    Raised when coordinates do not satisfy the curve equation.

    For compressed input this means the x-coordinate has no square root on
    the curve.
    """
    pass


class PointNotInSubgroup(InvalidPointError):
    """
    Raised when a point lies on the curve but outside the prime-order subgroup.
    """
    pass


class HashToCurveFailure(BLSError):
    """
    Raised when hashing a message to G2 does not yield a valid subgroup point.
    """
    pass


class LocalVerificationFailed(BLSError):
    """
    Raised when the off-chain pairing check rejects an aggregate.

    This gates the on-chain call: no encoded arguments are produced for an
    aggregate that failed here.
    """
    pass
