"""DER signature codec and low-S malleability guard.

ECDSA signatures do not have a unique representation: for any valid ``(r, s)``
the pair ``(r, order - s)`` verifies as well. Accepting both lets an attacker
resubmit a byte-distinct copy of a signed transaction, which defeats duplicate
detection upstream (see BIP-62). The suite therefore only produces, and only
accepts, signatures whose ``s`` lies in the lower half of the group order.
"""

from __future__ import annotations

from cryptography.hazmat.primitives.asymmetric.utils import (
    decode_dss_signature,
    encode_dss_signature,
)
from pydantic import Field

from ecsuite.crypto import curves
from ecsuite.crypto.curves import CurveParams
from ecsuite.errors import (
    MalleableSignatureError,
    SignatureDecodeError,
    UnknownCurveForMalleabilityCheckError,
    UnsupportedCurveError,
)
from ecsuite.models.base import ECSuiteBaseModel


class Signature(ECSuiteBaseModel):
    """An ECDSA (r, s) pair exchanged as a DER SEQUENCE of two INTEGERs."""

    r: int = Field(..., ge=0)
    s: int = Field(..., ge=0)

    @classmethod
    def from_der(cls, data: bytes) -> Signature:
        """Decode DER bytes. Raises SignatureDecodeError on malformed input or a zero component."""
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise SignatureDecodeError(
                f"expected bytes, got {type(data).__name__}",
                details={"type": type(data).__name__},
            )
        try:
            r, s = decode_dss_signature(bytes(data))
        except ValueError as e:
            raise SignatureDecodeError(str(e), details={"length": len(data)}) from e
        if r == 0 or s == 0:
            raise SignatureDecodeError(
                "signature is missing its r or s component", details={"r_zero": r == 0}
            )
        return cls(r=r, s=s)

    def to_der(self) -> bytes:
        return encode_dss_signature(self.r, self.s)


def _half_order_for(curve: CurveParams) -> int:
    try:
        return curves.half_order(curve.name)
    except UnsupportedCurveError as e:
        raise UnknownCurveForMalleabilityCheckError(curve.name) from e


def _as_signature(signature: Signature | bytes) -> Signature:
    if isinstance(signature, Signature):
        return signature
    return Signature.from_der(signature)


def normalize(signature: Signature, curve: CurveParams) -> Signature:
    """Return the low-S form of ``signature``; ``r`` is never changed.

    Raises UnknownCurveForMalleabilityCheckError if ``curve`` is not registered
    and SignatureDecodeError if ``s`` is not below the order.
    """
    half = _half_order_for(curve)
    if signature.s > half:
        order = curves.lookup(curve.name).order
        if signature.s >= order:
            raise SignatureDecodeError(
                "s is not smaller than the curve order", details={"curve": curve.name}
            )
        return Signature(r=signature.r, s=order - signature.s)
    return signature


def is_canonical(signature: Signature | bytes, curve: CurveParams) -> bool:
    """Return False iff ``s`` is greater than half the curve order.

    DER input that cannot be decoded raises SignatureDecodeError.
    """
    half = _half_order_for(curve)
    return _as_signature(signature).s <= half


def require_canonical(signature: Signature | bytes, curve: CurveParams) -> Signature:
    """Return the decoded signature, raising MalleableSignatureError for high-S values."""
    sig = _as_signature(signature)
    if not is_canonical(sig, curve):
        raise MalleableSignatureError(curve.name)
    return sig


def prevent_malleability(der: bytes, curve: CurveParams) -> bytes:
    """DER-in, DER-out form of ``normalize``."""
    return normalize(Signature.from_der(der), curve).to_der()
