"""Test data factories shared across ecsuite tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.x509.oid import NameOID

from ecsuite.crypto.curves import CurveParams
from ecsuite.crypto.signatures import Signature

# RFC 6979 appendix A.2.5 (P-256) private key and public point
RFC6979_P256_SCALAR = int(
    "C9AFA9D845BA75166B5C215767B1D6934E50C3DB36E89B127B8A622B120F6721", 16
)
RFC6979_P256_X = int("60FED4BA255A9D31C961EB74C6356D68C049B8923B61FA6CE669622E60F29FB6", 16)
RFC6979_P256_Y = int("7903FE1008B8BC99A41AE9E95628BC64F2F1B20C2D7E9F5177A3C294D4462299", 16)


def make_certificate_pem(private_key: ec.EllipticCurvePrivateKey) -> bytes:
    """Self-signed X.509 certificate over ``private_key``'s public key."""
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, "peer0.org1.example.com")])
    now = datetime.now(timezone.utc)
    certificate = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(private_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - timedelta(minutes=1))
        .not_valid_after(now + timedelta(days=1))
        .sign(private_key, hashes.SHA256())
    )
    return certificate.public_bytes(serialization.Encoding.PEM)


def wrap_pem(label: str, body: str) -> str:
    """PEM document with ``body`` between ``label`` boundary lines."""
    return f"-----BEGIN {label}-----\n{body}\n-----END {label}-----\n"


def high_s(signature: Signature, curve: CurveParams) -> Signature:
    """The other valid form of ``signature``: ``(r, order - s)``."""
    return Signature(r=signature.r, s=curve.order - signature.s)
