"""Key store protocol consumed by ``CryptoSuite``.

A key store persists ``KeyMaterial`` addressed by its subject key identifier
(SKI). Both operations are asynchronous because persistence is an I/O
boundary. Errors raised by an implementation reach the suite's caller as they
are; the suite never wraps or retries them.
"""

from __future__ import annotations

from typing import Protocol, Union, runtime_checkable

from ecsuite.crypto.keys import KeyMaterial

# A store may hand back decoded key material or the PEM it persisted.
StoredKey = Union[KeyMaterial, bytes, str]


@runtime_checkable
class KeyStore(Protocol):
    """Protocol for key storage implementations."""

    async def get_key(self, ski: str) -> StoredKey | None:
        """Return the key stored under ``ski``, or None if there is none.

        Implementations may return the PEM text they persisted; the suite
        decodes it.
        """
        ...

    async def put_key(self, key: KeyMaterial) -> None:
        """Persist ``key`` under ``key.ski``."""
        ...
