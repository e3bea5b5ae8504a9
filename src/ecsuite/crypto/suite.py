"""Crypto suite facade: key lifecycle, hashing, signing and verification.

``CryptoSuite`` binds one curve and one hash function at construction time and
optionally a key store. Key generation and import persist to the store unless
``ephemeral=True``; the async variants resolve only after the store has
accepted the key, and store failures reach the caller unchanged.

Example:
    >>> suite = CryptoSuite(key_size=256, hash_algorithm="SHA2")
    >>> key = suite.generate_ephemeral_key()
    >>> signature = suite.sign(key, suite.hash(b"abc"))
    >>> suite.verify(key, signature, b"abc")
    True
"""

from __future__ import annotations

from typing import Any

from ecsuite.config import (
    DEFAULT_HASH_ALGORITHM,
    DEFAULT_KEY_SIZE,
    SUPPORTED_KEY_SIZES,
    SuiteConfig,
)
from ecsuite.crypto import curves, engine, hashing, signatures
from ecsuite.crypto.curves import CurveParams
from ecsuite.crypto.hashing import HashFunction
from ecsuite.crypto.keys import KeyMaterial
from ecsuite.crypto.pem import decode_pem
from ecsuite.crypto.signatures import Signature
from ecsuite.errors import (
    InvalidArgumentError,
    InvalidKeySizeError,
    KeyParseError,
    KeyStoreRequiredError,
    MalleableSignatureError,
    NotImplementedOperationError,
    SignatureDecodeError,
)
from ecsuite.keystore.base import KeyStore
from ecsuite.observability import get_logger

logger = get_logger(__name__)

BytesLike = bytes | bytearray | memoryview


class CryptoSuite:
    """ECDSA crypto suite over the P-256 or P-384 curve.

    Attributes:
        key_size: Key size in bits (256 or 384)
        curve: Registry parameters of the bound curve
        hash_function: Digest function selected for (hash_algorithm, key_size)
    """

    def __init__(
        self,
        key_size: int = DEFAULT_KEY_SIZE,
        hash_algorithm: str | None = None,
        key_store: KeyStore | None = None,
    ) -> None:
        """Bind the suite to a curve and hash function.

        Args:
            key_size: 256 or 384.
            hash_algorithm: Hash family (SHA2, SHA3, SM3). Empty or None means SHA2.
            key_store: Optional store used by generate_key, import_key and get_key.

        Raises:
            InvalidKeySizeError: key_size is not 256 or 384.
            UnsupportedHashKeySizeError: the hash family has no digest of key_size bits.
        """
        logger.debug("ecsuite.suite.init", key_size=key_size, hash_algorithm=hash_algorithm)
        if isinstance(key_size, bool) or key_size not in SUPPORTED_KEY_SIZES:
            raise InvalidKeySizeError(key_size, SUPPORTED_KEY_SIZES)

        self._key_size: int = key_size
        self._hash_algorithm = hash_algorithm or DEFAULT_HASH_ALGORITHM
        self._curve = curves.for_key_size(key_size)
        # digest size must match the key size (RFC 5480, section 4)
        self._hash_function = hashing.select(self._hash_algorithm, key_size)
        self._key_store = key_store

        logger.debug(
            "ecsuite.suite.initialized",
            curve=self._curve.name,
            hash_function=self._hash_function.name,
            key_store_bound=key_store is not None,
        )

    @classmethod
    def from_config(cls, config: SuiteConfig, key_store: KeyStore | None = None) -> CryptoSuite:
        return cls(
            key_size=config.key_size,
            hash_algorithm=config.hash_algorithm,
            key_store=key_store,
        )

    @property
    def key_size(self) -> int:
        return self._key_size

    @property
    def hash_algorithm(self) -> str:
        return self._hash_algorithm

    @property
    def curve(self) -> CurveParams:
        return self._curve

    @property
    def hash_function(self) -> HashFunction:
        return self._hash_function

    @property
    def key_store(self) -> KeyStore | None:
        return self._key_store

    @property
    def is_key_store_bound(self) -> bool:
        return self._key_store is not None

    def bind_key_store(self, key_store: KeyStore | None) -> None:
        """Set (or with None, clear) the key store, replacing any prior binding.

        Rebinding is not synchronized with in-flight operations.
        """
        self._key_store = key_store
        logger.debug("ecsuite.suite.key_store_bound", bound=key_store is not None)

    def _require_key_store(self, operation: str) -> KeyStore:
        if self._key_store is None:
            raise KeyStoreRequiredError(operation)
        return self._key_store

    # -- key lifecycle ------------------------------------------------------

    def generate_ephemeral_key(self) -> KeyMaterial:
        """Generate a key pair on the suite's curve without persisting it."""
        key = KeyMaterial.generate(self._curve, ephemeral=True)
        logger.debug("ecsuite.suite.key_generated", ski=key.ski, ephemeral=True)
        return key

    async def generate_key(self, *, ephemeral: bool = False) -> KeyMaterial:
        """Generate a key pair; persist it unless ``ephemeral`` is True.

        Raises:
            KeyStoreRequiredError: persistence requested but no store is bound.
                Nothing is generated in that case.
        """
        if ephemeral:
            return self.generate_ephemeral_key()

        store = self._require_key_store("generate_key")
        key = KeyMaterial.generate(self._curve)
        await store.put_key(key)
        logger.info(
            "ecsuite.suite.key_generated",
            ski=key.ski,
            curve=key.curve_name,
            ephemeral=False,
        )
        return key

    def _decode(self, pem: BytesLike | str) -> KeyMaterial:
        if pem is None:
            raise InvalidArgumentError("pem", "A PEM document is required to import a key")
        try:
            return decode_pem(pem if isinstance(pem, str) else bytes(pem), self._curve)
        except KeyParseError as e:
            logger.error("ecsuite.suite.import_failed", error=e.message, code=e.code)
            raise

    def import_ephemeral_key(self, pem: BytesLike | str) -> KeyMaterial:
        """Decode ``pem`` into key material without persisting it.

        Raises KeyParseError or UnrecognizedKeyFormatError.
        """
        key = self._decode(pem).with_ephemeral(True)
        logger.debug("ecsuite.suite.key_imported", ski=key.ski, key_type=key.key_type.value)
        return key

    async def import_key(self, pem: BytesLike | str, *, ephemeral: bool = False) -> KeyMaterial:
        """Import an EC key or certificate; persist it unless ``ephemeral`` is True.

        The store requirement is checked before the PEM is parsed, and nothing
        is persisted when parsing fails.

        Raises:
            KeyStoreRequiredError: persistence requested but no store is bound.
            KeyParseError: the PEM is malformed.
            UnrecognizedKeyFormatError: the PEM is not an EC key or certificate.
        """
        if ephemeral:
            return self.import_ephemeral_key(pem)

        store = self._require_key_store("import_key")
        key = self._decode(pem)
        await store.put_key(key)
        logger.info(
            "ecsuite.suite.key_imported",
            ski=key.ski,
            key_type=key.key_type.value,
            curve=key.curve_name,
            ephemeral=False,
        )
        return key

    async def get_key(self, ski: str) -> KeyMaterial | None:
        """Look up a key by subject key identifier.

        PEM returned by the store is decoded. Returns None if the store has no
        key for ``ski``.

        Raises:
            KeyStoreRequiredError: no store is bound.
            InvalidArgumentError: ``ski`` is empty.
        """
        store = self._require_key_store("get_key")
        if not ski:
            raise InvalidArgumentError("ski", "A subject key identifier is required")
        stored = await store.get_key(ski)
        if stored is None:
            logger.debug("ecsuite.suite.key_not_found", ski=ski)
            return None
        if isinstance(stored, KeyMaterial):
            return stored
        return self._decode(stored)

    # -- hashing and signatures --------------------------------------------

    def hash(self, message: BytesLike | str, **opts: Any) -> bytes:
        """Digest ``message`` with the suite's hash function; ``opts`` are ignored.

        ``str`` messages are UTF-8 encoded.
        """
        data = message.encode("utf-8") if isinstance(message, str) else bytes(message)
        return self._hash_function(data)

    def sign(self, key: KeyMaterial, digest: BytesLike, **opts: Any) -> bytes:
        """Sign a digest produced by ``hash`` and return a low-S DER signature.

        Raises:
            InvalidArgumentError: key or digest missing, key has no private
                scalar, or the digest length does not match the hash function.
        """
        if key is None:
            raise InvalidArgumentError("key", "A valid key is required to sign")
        if digest is None:
            raise InvalidArgumentError("digest", "A valid message is required to sign")
        if not key.key_type.can_sign:
            raise InvalidArgumentError(
                "key",
                f"A key with a private scalar is required to sign, got {key.key_type.value}",
            )
        digest = bytes(digest)
        if len(digest) != self._hash_function.digest_size:
            raise InvalidArgumentError(
                "digest",
                f"Digest must be {self._hash_function.digest_size} bytes "
                f"({self._hash_function.name}); hash the message with CryptoSuite.hash first",
                details={"length": len(digest)},
            )

        assert key.scalar is not None
        r, s = engine.raw_sign(key.curve, digest, key.scalar, self._hash_function.algorithm)
        signature = signatures.normalize(Signature(r=r, s=s), key.curve)
        logger.debug(
            "ecsuite.suite.signed",
            ski=key.ski,
            curve=key.curve_name,
            normalized=signature.s != s,
        )
        return signature.to_der()

    def verify(self, key: KeyMaterial, signature: BytesLike, message: BytesLike | str) -> bool:
        """Verify a DER signature over ``message`` (hashed here, not by the caller).

        Returns False for undecodable or high-S signatures as well as for
        signatures that do not match.

        Raises:
            InvalidArgumentError: key, signature or message missing, or the key
                has no public point.
        """
        if key is None:
            raise InvalidArgumentError("key", "A valid key is required to verify")
        if signature is None:
            raise InvalidArgumentError("signature", "A valid signature is required to verify")
        if message is None:
            raise InvalidArgumentError("message", "A valid message is required to verify")
        if not key.key_type.can_verify:
            raise InvalidArgumentError(
                "key",
                f"A key with a public point is required to verify, got {key.key_type.value}",
            )

        try:
            sig = signatures.require_canonical(signature, key.curve)
        except SignatureDecodeError as e:
            logger.warning(
                "ecsuite.suite.verify.undecodable_signature", ski=key.ski, error=e.reason
            )
            return False
        except MalleableSignatureError as e:
            logger.error(
                "ecsuite.suite.verify.malleable_signature", ski=key.ski, error=e.message
            )
            return False

        assert key.public_point is not None
        return engine.raw_verify(
            key.curve,
            self.hash(message),
            (sig.r, sig.s),
            key.public_point,
            self._hash_function.algorithm,
        )

    # -- unsupported operations --------------------------------------------

    def derive_key(self, key: KeyMaterial, **opts: Any) -> KeyMaterial:
        raise NotImplementedOperationError("derive_key")

    def encrypt(self, key: KeyMaterial, plain_text: bytes, **opts: Any) -> bytes:
        raise NotImplementedOperationError("encrypt")

    def decrypt(self, key: KeyMaterial, cipher_text: bytes, **opts: Any) -> bytes:
        raise NotImplementedOperationError("decrypt")
