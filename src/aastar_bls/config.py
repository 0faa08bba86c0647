"""Runtime configuration for the signing pipeline.

A `BLSConfig` is passed by keyword to `Signer`, `LocalVerifier` and
`SignatureAggregator`. Every component that hashes messages must use the
same DST, otherwise signatures and H(m) are built from different G2 points
and the pairing check fails.
"""
from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from aastar_bls.constants import DEFAULT_DST

ENV_DST = "AASTAR_BLS_DST"
ENV_VERIFY_LOCALLY = "AASTAR_BLS_VERIFY_LOCALLY"


class BLSConfig(BaseModel):
    """Configuration shared by the signing components.

    Attributes:
        dst: Domain separation tag for hash-to-curve, 1 to 255 bytes.
        verify_locally: Run the off-chain pairing check before encoding an
            aggregate. Disabling it is meant for benchmarking only.
    """
    model_config = ConfigDict(frozen=True)

    dst: bytes = DEFAULT_DST
    verify_locally: bool = True

    @field_validator("dst")
    @classmethod
    def check_dst(cls, v: bytes) -> bytes:
        if not 1 <= len(v) <= 255:
            raise ValueError(f"DST length must be between 1 and 255 bytes (got {len(v)}).")
        return v

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "BLSConfig":
        """Builds a config from AASTAR_BLS_* environment variables.

        Unset variables keep their defaults.
        """
        env = os.environ if environ is None else environ
        values = {}
        if env.get(ENV_DST):
            values["dst"] = env[ENV_DST].encode("utf-8")
        if env.get(ENV_VERIFY_LOCALLY):
            values["verify_locally"] = env[ENV_VERIFY_LOCALLY].strip().lower() not in ("0", "false", "no", "off")
        return cls(**values)


DEFAULT_CONFIG = BLSConfig()
