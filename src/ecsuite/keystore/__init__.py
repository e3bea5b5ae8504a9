"""Key storage backends for ecsuite.

Example:
    >>> from ecsuite.keystore import InMemoryKeyStore
    >>> store = InMemoryKeyStore()
    >>> suite.bind_key_store(store)
"""

from ecsuite.keystore.base import KeyStore, StoredKey
from ecsuite.keystore.memory import InMemoryKeyStore
from ecsuite.keystore.sqlite import SQLiteKeyStore

__all__ = [
    "InMemoryKeyStore",
    "KeyStore",
    "SQLiteKeyStore",
    "StoredKey",
]
