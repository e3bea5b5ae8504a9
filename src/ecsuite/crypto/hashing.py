"""Hash selection by (algorithm family, key size) pair.

The digest must be as long as the curve's key size (RFC 5480 section 4,
"Recommended key size, digest algorithm and curve"). Table keys are derived
from each algorithm's digest size, so every entry satisfies that by
construction.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from cryptography.hazmat.primitives import hashes

from ecsuite.errors import UnsupportedHashKeySizeError


class HashFunction:
    """A digest function bound to one ``cryptography`` hash algorithm.

    Calling the instance hashes ``bytes``. ``algorithm`` is the instance used
    for prehashed ECDSA signing and verification.
    """

    __slots__ = ("name", "algorithm")

    def __init__(self, name: str, algorithm: hashes.HashAlgorithm) -> None:
        self.name = name
        self.algorithm = algorithm

    @property
    def digest_size(self) -> int:
        return self.algorithm.digest_size

    def __call__(self, data: bytes) -> bytes:
        digest = hashes.Hash(self.algorithm)
        digest.update(data)
        return digest.finalize()

    def __repr__(self) -> str:
        return f"HashFunction({self.name!r}, {self.algorithm.name})"


def _entry(family: str, algorithm: hashes.HashAlgorithm) -> tuple[str, HashFunction]:
    key = f"{family}-{algorithm.digest_size * 8}"
    return key, HashFunction(key, algorithm)


# SM3 has no implementation in the backend; the SHA2-256 function stands in
# for it because both produce 32-byte digests.
HASH_FUNCTIONS: Mapping[str, HashFunction] = MappingProxyType(
    dict(
        [
            _entry("sha2", hashes.SHA256()),
            _entry("sha2", hashes.SHA384()),
            _entry("sha3", hashes.SHA3_256()),
            _entry("sha3", hashes.SHA3_384()),
            _entry("sm3", hashes.SHA256()),
        ]
    )
)


def supported_pairs() -> list[str]:
    return sorted(HASH_FUNCTIONS)


def select(algorithm: str, key_size: int) -> HashFunction:
    """Return the hash function for ``algorithm`` at ``key_size`` bits.

    Raises UnsupportedHashKeySizeError if the pair is not in the table.

    Example:
        >>> select("SHA2", 256).digest_size
        32
    """
    key = f"{algorithm.lower()}-{key_size}"
    hash_function = HASH_FUNCTIONS.get(key)
    if hash_function is None:
        raise UnsupportedHashKeySizeError(
            algorithm, key_size, details={"supported": supported_pairs()}
        )
    return hash_function
