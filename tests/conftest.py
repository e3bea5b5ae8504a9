"""Shared pytest fixtures for ecsuite tests.

This module provides common fixtures used across multiple test modules:
suites for each supported key size, key stores, and PEM documents produced
with ``cryptography`` so decoding is tested against an independent encoder.
"""

from __future__ import annotations

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, rsa

from ecsuite.crypto import curves
from ecsuite.crypto.curves import CurveParams
from ecsuite.crypto.keys import KeyMaterial
from ecsuite.crypto.suite import CryptoSuite
from ecsuite.keystore.memory import InMemoryKeyStore
from tests.factories import make_certificate_pem


@pytest.fixture
def p256() -> CurveParams:
    """Registry entry for secp256r1."""
    return curves.lookup("secp256r1")


@pytest.fixture
def p384() -> CurveParams:
    """Registry entry for secp384r1."""
    return curves.lookup("secp384r1")


@pytest.fixture
def suite() -> CryptoSuite:
    """Unbound 256-bit SHA2 suite."""
    return CryptoSuite(key_size=256, hash_algorithm="SHA2")


@pytest.fixture
def suite384() -> CryptoSuite:
    """Unbound 384-bit SHA2 suite."""
    return CryptoSuite(key_size=384, hash_algorithm="SHA2")


@pytest.fixture
def key_store() -> InMemoryKeyStore:
    """Fresh in-memory key store."""
    return InMemoryKeyStore()


@pytest.fixture
def bound_suite(key_store: InMemoryKeyStore) -> CryptoSuite:
    """256-bit SHA2 suite bound to the in-memory key store."""
    return CryptoSuite(key_size=256, hash_algorithm="SHA2", key_store=key_store)


@pytest.fixture
def key_pair(suite: CryptoSuite) -> KeyMaterial:
    """Ephemeral P-256 key pair."""
    return suite.generate_ephemeral_key()


@pytest.fixture
def ec_private_key() -> ec.EllipticCurvePrivateKey:
    """P-256 private key generated by ``cryptography``."""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture
def certificate_pem(ec_private_key: ec.EllipticCurvePrivateKey) -> bytes:
    """Self-signed certificate PEM for ``ec_private_key``."""
    return make_certificate_pem(ec_private_key)


@pytest.fixture
def pkcs8_pem(ec_private_key: ec.EllipticCurvePrivateKey) -> bytes:
    """Unencrypted PKCS#8 PEM for ``ec_private_key``."""
    return ec_private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )


@pytest.fixture
def sec1_pem(ec_private_key: ec.EllipticCurvePrivateKey) -> bytes:
    """Traditional OpenSSL (SEC1 ``EC PRIVATE KEY``) PEM for ``ec_private_key``."""
    return ec_private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.TraditionalOpenSSL,
        serialization.NoEncryption(),
    )


@pytest.fixture
def rsa_private_pem() -> bytes:
    """PKCS#8 PEM of a 2048-bit RSA key."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    )


@pytest.fixture
def rsa_public_pem() -> bytes:
    """SubjectPublicKeyInfo PEM of a 2048-bit RSA key."""
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )
