"""Crypto suite configuration.

``SuiteConfig`` is the explicit configuration handed to ``CryptoSuite``. The
suite never reads process-wide settings itself; ``SuiteConfig.from_env`` is the
one place environment defaults are read, for CLIs and application bootstrap.

Environment Variables:
    ECSUITE_KEY_SIZE: Key size in bits (256 or 384)
    ECSUITE_HASH_ALGORITHM: Hash family (SHA2, SHA3, SM3)
"""

from __future__ import annotations

import os

from pydantic import Field

from ecsuite.errors import InvalidKeySizeError
from ecsuite.models.base import ECSuiteBaseModel

DEFAULT_KEY_SIZE = 256
DEFAULT_HASH_ALGORITHM = "SHA2"
SUPPORTED_KEY_SIZES = (256, 384)

ENV_KEY_SIZE = "ECSUITE_KEY_SIZE"
ENV_HASH_ALGORITHM = "ECSUITE_HASH_ALGORITHM"


class SuiteConfig(ECSuiteBaseModel):
    """Key size and hash family for a crypto suite instance."""

    key_size: int = Field(default=DEFAULT_KEY_SIZE, description="Key size in bits.")
    hash_algorithm: str = Field(
        default=DEFAULT_HASH_ALGORITHM,
        min_length=1,
        description="Hash family name; combined with key_size to pick the digest.",
    )

    @classmethod
    def from_env(cls) -> SuiteConfig:
        """Build a config from ECSUITE_* environment variables, falling back to defaults.

        Raises InvalidKeySizeError if ECSUITE_KEY_SIZE is not an integer.
        """
        raw_size = os.environ.get(ENV_KEY_SIZE, "").strip()
        if raw_size:
            try:
                key_size = int(raw_size)
            except ValueError as e:
                raise InvalidKeySizeError(raw_size, SUPPORTED_KEY_SIZES) from e
        else:
            key_size = DEFAULT_KEY_SIZE
        hash_algorithm = os.environ.get(ENV_HASH_ALGORITHM, "").strip() or DEFAULT_HASH_ALGORITHM
        return cls(key_size=key_size, hash_algorithm=hash_algorithm)
