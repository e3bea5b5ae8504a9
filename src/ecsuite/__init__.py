"""ecsuite: pluggable elliptic-curve crypto suite for ledger clients.

Example:
    >>> from ecsuite import CryptoSuite, InMemoryKeyStore
    >>>
    >>> suite = CryptoSuite(key_size=256, hash_algorithm="SHA2", key_store=InMemoryKeyStore())
    >>> key = await suite.generate_key()
    >>> signature = suite.sign(key, suite.hash(b"payload"))
"""

__version__ = "0.1.0"

from ecsuite.config import SuiteConfig
from ecsuite.crypto import CryptoSuite, KeyMaterial, Signature, decode_pem, encode_pem
from ecsuite.errors import CryptoSuiteError
from ecsuite.keystore import InMemoryKeyStore, KeyStore, SQLiteKeyStore
from ecsuite.models import KeyType

__all__ = [
    "__version__",
    "CryptoSuite",
    "CryptoSuiteError",
    "InMemoryKeyStore",
    "KeyMaterial",
    "KeyStore",
    "KeyType",
    "SQLiteKeyStore",
    "Signature",
    "SuiteConfig",
    "decode_pem",
    "encode_pem",
]
