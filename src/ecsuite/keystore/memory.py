"""In-memory KeyStore implementation."""

from __future__ import annotations

import threading

from ecsuite.crypto.keys import KeyMaterial


class InMemoryKeyStore:
    """In-memory implementation of KeyStore.

    Keys are kept per SKI; a private key replaces a public key with the same
    SKI but not the other way round, so importing a certificate after its key
    pair never loses the private half. Useful for tests and for processes that
    do not need keys to survive a restart.

    This implementation is thread-safe using RLock for concurrent access.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._keys: dict[str, KeyMaterial] = {}
        self.put_calls: list[KeyMaterial] = []

    async def get_key(self, ski: str) -> KeyMaterial | None:
        with self._lock:
            return self._keys.get(ski)

    async def put_key(self, key: KeyMaterial) -> None:
        stored = key.with_ephemeral(False)
        with self._lock:
            self.put_calls.append(key)
            existing = self._keys.get(stored.ski)
            if existing is not None and existing.is_private and not stored.is_private:
                return
            self._keys[stored.ski] = stored

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)

    def clear(self) -> None:
        with self._lock:
            self._keys.clear()
            self.put_calls.clear()
