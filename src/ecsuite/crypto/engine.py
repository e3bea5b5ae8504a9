"""Elliptic-curve math engine backed by ``cryptography``.

These are the only places the suite touches curve arithmetic. All functions
are pure: they keep no state between calls.
"""

from __future__ import annotations

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    Prehashed,
    decode_dss_signature,
    encode_dss_signature,
)

from ecsuite.crypto.curves import CurveParams


def generate_scalar(curve: CurveParams) -> int:
    """Return a fresh random private scalar in [1, order)."""
    private_key = ec.generate_private_key(curve.generator)
    return private_key.private_numbers().private_value


def private_key_from_scalar(curve: CurveParams, scalar: int) -> ec.EllipticCurvePrivateKey:
    """Raises ValueError if ``scalar`` is outside [1, order)."""
    return ec.derive_private_key(scalar, curve.generator)


def multiply_generator(curve: CurveParams, scalar: int) -> tuple[int, int]:
    """Return the affine (x, y) coordinates of scalar * G.

    Raises ValueError if ``scalar`` is outside [1, order).
    """
    numbers = private_key_from_scalar(curve, scalar).public_key().public_numbers()
    return numbers.x, numbers.y


def encode_point(curve: CurveParams, x: int, y: int) -> bytes:
    """Uncompressed SEC1 encoding ``04 || X || Y`` with coordinates left-padded."""
    return b"\x04" + x.to_bytes(curve.byte_length, "big") + y.to_bytes(curve.byte_length, "big")


def public_key_from_point(curve: CurveParams, point: bytes) -> ec.EllipticCurvePublicKey:
    """Raises ValueError if ``point`` is not a valid encoding of a point on ``curve``."""
    return ec.EllipticCurvePublicKey.from_encoded_point(curve.generator, point)


def raw_sign(
    curve: CurveParams,
    digest: bytes,
    scalar: int,
    algorithm: hashes.HashAlgorithm,
) -> tuple[int, int]:
    """Sign a precomputed digest and return the raw (r, s) pair.

    The returned ``s`` may be in either half of the order; callers normalize it.
    """
    private_key = private_key_from_scalar(curve, scalar)
    der = private_key.sign(digest, ec.ECDSA(Prehashed(algorithm)))
    return decode_dss_signature(der)


def raw_verify(
    curve: CurveParams,
    digest: bytes,
    signature: tuple[int, int],
    public_point: bytes,
    algorithm: hashes.HashAlgorithm,
) -> bool:
    """Check (r, s) over a precomputed digest. Accepts high-S signatures."""
    r, s = signature
    public_key = public_key_from_point(curve, public_point)
    try:
        public_key.verify(encode_dss_signature(r, s), digest, ec.ECDSA(Prehashed(algorithm)))
    except InvalidSignature:
        return False
    return True
