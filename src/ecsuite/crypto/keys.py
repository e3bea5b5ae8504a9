"""Elliptic-curve key material: generation, conversion and serialization."""

from __future__ import annotations

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from pydantic import Field, field_validator, model_validator

from ecsuite.crypto import curves, engine
from ecsuite.crypto.curves import CurveParams
from ecsuite.errors import UnsupportedCurveError
from ecsuite.models.base import ECSuiteBaseModel
from ecsuite.models.enums import KeyType


class KeyMaterial(ECSuiteBaseModel):
    """An EC public key, private key or key pair on a registered curve.

    ``public_point`` is the uncompressed SEC1 point (``04 || X || Y``) and
    ``private_scalar`` the big-endian scalar, both padded to the curve's byte
    length. Which of the two is present is fixed by ``key_type``.

    Instances are immutable; persisting one in a key store leaves the caller's
    copy untouched.
    """

    key_type: KeyType = Field(..., description="ECPublic, ECPrivate or ECKeyPair.")
    curve_name: str = Field(..., description="Canonical registry name of the curve.")
    public_point: bytes | None = Field(default=None, description="Uncompressed SEC1 point.")
    private_scalar: bytes | None = Field(
        default=None, repr=False, description="Big-endian private scalar."
    )
    ephemeral: bool = Field(default=False, description="True if never persisted.")

    @field_validator("curve_name")
    @classmethod
    def _canonical_curve_name(cls, value: str) -> str:
        try:
            return curves.lookup(value).name
        except UnsupportedCurveError as e:
            raise ValueError(e.message) from e

    @model_validator(mode="after")
    def _check_components(self) -> KeyMaterial:
        curve = curves.lookup(self.curve_name)
        if self.key_type.has_private != (self.private_scalar is not None):
            raise ValueError(
                f"{self.key_type.value} key must "
                f"{'' if self.key_type.has_private else 'not '}carry a private scalar"
            )
        if self.key_type.has_public != (self.public_point is not None):
            raise ValueError(
                f"{self.key_type.value} key must "
                f"{'' if self.key_type.has_public else 'not '}carry a public point"
            )
        if self.private_scalar is not None:
            if len(self.private_scalar) != curve.byte_length:
                raise ValueError(
                    f"private scalar must be {curve.byte_length} bytes for {curve.name}"
                )
            scalar = int.from_bytes(self.private_scalar, "big")
            if not 0 < scalar < curve.order:
                raise ValueError("private scalar must be in [1, order)")
        if self.public_point is not None:
            if len(self.public_point) != 1 + 2 * curve.byte_length or self.public_point[0] != 4:
                raise ValueError(f"public point must be an uncompressed {curve.name} point")
            # rejects points that are not on the curve
            engine.public_key_from_point(curve, self.public_point)
        return self

    # -- construction -------------------------------------------------------

    @classmethod
    def generate(cls, curve: CurveParams, *, ephemeral: bool = False) -> KeyMaterial:
        return cls.from_private_scalar(curve, engine.generate_scalar(curve), ephemeral=ephemeral)

    @classmethod
    def from_private_scalar(
        cls, curve: CurveParams, scalar: int, *, ephemeral: bool = False
    ) -> KeyMaterial:
        """Key pair whose public point is ``scalar * G``.

        Raises ValueError if ``scalar`` is outside [1, order).
        """
        x, y = engine.multiply_generator(curve, scalar)
        return cls(
            key_type=KeyType.EC_KEY_PAIR,
            curve_name=curve.name,
            public_point=engine.encode_point(curve, x, y),
            private_scalar=scalar.to_bytes(curve.byte_length, "big"),
            ephemeral=ephemeral,
        )

    @classmethod
    def from_cryptography(
        cls,
        key: ec.EllipticCurvePrivateKey | ec.EllipticCurvePublicKey,
        *,
        ephemeral: bool = False,
    ) -> KeyMaterial:
        """Wrap a ``cryptography`` EC key. Raises UnsupportedCurveError for foreign curves."""
        curve = curves.for_cryptography_curve(key.curve)
        if isinstance(key, ec.EllipticCurvePrivateKey):
            return cls.from_private_scalar(
                curve, key.private_numbers().private_value, ephemeral=ephemeral
            )
        point = key.public_bytes(
            serialization.Encoding.X962, serialization.PublicFormat.UncompressedPoint
        )
        return cls(
            key_type=KeyType.EC_PUBLIC,
            curve_name=curve.name,
            public_point=point,
            ephemeral=ephemeral,
        )

    # -- accessors ----------------------------------------------------------

    @property
    def curve(self) -> CurveParams:
        return curves.lookup(self.curve_name)

    @property
    def is_private(self) -> bool:
        return self.key_type.has_private

    @property
    def is_symmetric(self) -> bool:
        return False

    @property
    def scalar(self) -> int | None:
        if self.private_scalar is None:
            return None
        return int.from_bytes(self.private_scalar, "big")

    @property
    def point(self) -> bytes:
        """The public point, derived from the scalar for ECPrivate keys."""
        if self.public_point is not None:
            return self.public_point
        assert self.scalar is not None
        x, y = engine.multiply_generator(self.curve, self.scalar)
        return engine.encode_point(self.curve, x, y)

    @property
    def ski(self) -> str:
        """Subject key identifier: hex SHA-256 of the uncompressed public point."""
        digest = hashes.Hash(hashes.SHA256())
        digest.update(self.point)
        return digest.finalize().hex()

    def public_key(self) -> KeyMaterial:
        if self.key_type is KeyType.EC_PUBLIC:
            return self
        return KeyMaterial(
            key_type=KeyType.EC_PUBLIC,
            curve_name=self.curve_name,
            public_point=self.point,
            ephemeral=self.ephemeral,
        )

    def with_ephemeral(self, ephemeral: bool) -> KeyMaterial:
        return self.model_copy(update={"ephemeral": ephemeral})

    # -- conversion ---------------------------------------------------------

    def to_cryptography_private(self) -> ec.EllipticCurvePrivateKey:
        if self.scalar is None:
            raise ValueError(f"{self.key_type.value} key has no private scalar")
        return engine.private_key_from_scalar(self.curve, self.scalar)

    def to_cryptography_public(self) -> ec.EllipticCurvePublicKey:
        return engine.public_key_from_point(self.curve, self.point)

    def to_pem(self) -> bytes:
        """PKCS#8 PEM for keys with a private scalar, SubjectPublicKeyInfo PEM otherwise."""
        if self.is_private:
            pem: bytes = self.to_cryptography_private().private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            )
            return pem
        return self.to_cryptography_public().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
