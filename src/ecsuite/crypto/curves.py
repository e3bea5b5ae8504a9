"""Registry of supported elliptic curves and their domain parameters.

The registry is built once at import time and is read-only afterwards, so it
can be read concurrently without locking. ``half_order`` is computed here, once,
and is what the malleability guard compares signature ``s`` values against.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from cryptography.hazmat.primitives.asymmetric import ec
from pydantic import ConfigDict, Field, model_validator

from ecsuite.errors import UnsupportedCurveError
from ecsuite.models.base import ECSuiteBaseModel

P256_ORDER = 0xFFFFFFFF_00000000_FFFFFFFF_FFFFFFFF_BCE6FAAD_A7179E84_F3B9CAC2_FC632551
P384_ORDER = int(
    "FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF"
    "C7634D81F4372DDF581A0DB248B0A77AECEC196ACCC52973",
    16,
)


class CurveParams(ECSuiteBaseModel):
    """Domain parameters of a registered curve.

    ``generator`` is the ``cryptography`` curve instance; the EC engine uses it
    as the handle for generator multiplication.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str = Field(..., description="Canonical curve name (e.g. secp256r1).")
    aliases: tuple[str, ...] = Field(default=(), description="Alternative names.")
    oid: str = Field(..., description="Dotted namedCurve object identifier.")
    key_size: int = Field(..., description="Curve size in bits.")
    byte_length: int = Field(..., description="Length of scalars and coordinates in bytes.")
    order: int = Field(..., gt=0, description="Group order n.")
    half_order: int = Field(..., gt=0, description="n >> 1.")
    generator: ec.EllipticCurve

    @model_validator(mode="after")
    def _check_half_order(self) -> CurveParams:
        if self.half_order != self.order >> 1:
            raise ValueError(f"half_order of {self.name} must equal order >> 1")
        return self


def _curve(
    name: str,
    aliases: tuple[str, ...],
    oid: str,
    key_size: int,
    order: int,
    generator: ec.EllipticCurve,
) -> CurveParams:
    return CurveParams(
        name=name,
        aliases=aliases,
        oid=oid,
        key_size=key_size,
        byte_length=(key_size + 7) // 8,
        order=order,
        half_order=order >> 1,
        generator=generator,
    )


CURVES: Mapping[str, CurveParams] = MappingProxyType(
    {
        "secp256r1": _curve(
            "secp256r1",
            ("p256", "p-256", "prime256v1", "nistp256"),
            "1.2.840.10045.3.1.7",
            256,
            P256_ORDER,
            ec.SECP256R1(),
        ),
        "secp384r1": _curve(
            "secp384r1",
            ("p384", "p-384", "nistp384"),
            "1.3.132.0.34",
            384,
            P384_ORDER,
            ec.SECP384R1(),
        ),
    }
)

_BY_NAME: Mapping[str, CurveParams] = MappingProxyType(
    {
        alias: params
        for params in CURVES.values()
        for alias in (params.name, *params.aliases)
    }
)
_BY_OID: Mapping[str, CurveParams] = MappingProxyType(
    {params.oid: params for params in CURVES.values()}
)
_BY_KEY_SIZE: Mapping[int, CurveParams] = MappingProxyType(
    {params.key_size: params for params in CURVES.values()}
)


def supported_curves() -> list[str]:
    return sorted(CURVES)


def is_registered(name: str) -> bool:
    return name.lower() in _BY_NAME


def lookup(name: str) -> CurveParams:
    """Return the parameters for ``name`` (case-insensitive, aliases accepted).

    Raises UnsupportedCurveError for names outside the registry.
    """
    params = _BY_NAME.get(name.lower()) if isinstance(name, str) else None
    if params is None:
        raise UnsupportedCurveError(str(name), details={"supported": supported_curves()})
    return params


def lookup_by_oid(oid: str) -> CurveParams:
    params = _BY_OID.get(oid)
    if params is None:
        raise UnsupportedCurveError(oid, details={"supported": supported_curves()})
    return params


def for_key_size(key_size: int) -> CurveParams:
    params = _BY_KEY_SIZE.get(key_size)
    if params is None:
        raise UnsupportedCurveError(f"{key_size}-bit", details={"supported": supported_curves()})
    return params


def for_cryptography_curve(curve: ec.EllipticCurve) -> CurveParams:
    """Map a parsed ``cryptography`` curve object back to its registry entry."""
    return lookup(curve.name)


def half_order(name: str) -> int:
    return lookup(name).half_order
