"""ecsuite cryptographic layer.

This module provides the elliptic-curve crypto suite and its building blocks:
- Curve registry (P-256, P-384) with cached half orders
- Hash selection by (algorithm family, key size)
- Key material generation, PEM/DER import and export
- DER signature codec with low-S malleability protection
- The CryptoSuite facade tying them to a key store

Public exports:
    CryptoSuite: The suite facade
    KeyMaterial: Immutable EC key value
    Signature: Decoded (r, s) pair
    decode_pem / encode_pem: PEM import and export
"""

from ecsuite.crypto import curves, engine, hashing, signatures
from ecsuite.crypto.curves import CurveParams
from ecsuite.crypto.hashing import HashFunction
from ecsuite.crypto.keys import KeyMaterial
from ecsuite.crypto.pem import decode_pem, encode_pem, normalize_pem
from ecsuite.crypto.signatures import (
    Signature,
    is_canonical,
    normalize,
    prevent_malleability,
    require_canonical,
)
from ecsuite.crypto.suite import CryptoSuite

__all__ = [
    "curves",
    "engine",
    "hashing",
    "signatures",
    "CryptoSuite",
    "CurveParams",
    "HashFunction",
    "KeyMaterial",
    "Signature",
    "decode_pem",
    "encode_pem",
    "is_canonical",
    "normalize",
    "normalize_pem",
    "prevent_malleability",
    "require_canonical",
]
