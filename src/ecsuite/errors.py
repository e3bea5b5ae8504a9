"""ecsuite Error Taxonomy.

This module defines the error hierarchy for the crypto suite, providing
structured error handling with specific error codes and context information.

Configuration and parse errors are raised to the immediate caller. Signature
errors are raised by the codec and the malleability guard; ``CryptoSuite.verify``
turns them into ``False``. Errors raised by a Key Store are never wrapped.
"""

from __future__ import annotations

from typing import Any


class CryptoSuiteError(Exception):
    """Base exception for all ecsuite errors.

    Attributes:
        code: Error code following the ecsuite:<area>/<reason> pattern
        message: Human-readable error message
        details: Optional additional error context
    """

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Serialize to ``{code, message, details}`` dict."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(CryptoSuiteError):
    """Suite misconfiguration: bad key size, hash/size pair, curve, or missing key store."""


class InvalidKeySizeError(ConfigurationError):
    """Raised when the suite is constructed with a key size other than 256 or 384.

    Attributes:
        key_size: The rejected key size
        supported: Supported key sizes
    """

    def __init__(
        self,
        key_size: object,
        supported: tuple[int, ...],
        details: dict[str, Any] | None = None,
    ) -> None:
        supported_list = ", ".join(str(s) for s in supported)
        message = (
            f"Illegal key size: {key_size} - this crypto suite only supports key sizes "
            f"{supported_list}"
        )
        super().__init__(
            code="ecsuite:config/invalid_key_size",
            message=message,
            details={"key_size": key_size, "supported": list(supported), **(details or {})},
        )
        self.key_size = key_size
        self.supported = supported


class UnsupportedHashKeySizeError(ConfigurationError):
    """Raised when a hash algorithm cannot produce digests of the requested key size.

    Attributes:
        algorithm: The requested hash algorithm name
        key_size: The requested key size in bits
    """

    def __init__(
        self, algorithm: str, key_size: int, details: dict[str, Any] | None = None
    ) -> None:
        message = f"Unsupported hash algorithm and key size pair: {algorithm}-{key_size}"
        super().__init__(
            code="ecsuite:config/unsupported_hash_key_size",
            message=message,
            details={"algorithm": algorithm, "key_size": key_size, **(details or {})},
        )
        self.algorithm = algorithm
        self.key_size = key_size


class UnsupportedCurveError(ConfigurationError):
    """Raised when a curve name, OID or key size is not in the curve registry."""

    def __init__(self, curve: str, details: dict[str, Any] | None = None) -> None:
        message = f"Unsupported curve: {curve}"
        super().__init__(
            code="ecsuite:config/unsupported_curve",
            message=message,
            details={"curve": curve, **(details or {})},
        )
        self.curve = curve


class UnknownCurveForMalleabilityCheckError(ConfigurationError):
    """Raised when the half order needed for low-S checks cannot be found for a curve."""

    def __init__(self, curve: str, details: dict[str, Any] | None = None) -> None:
        message = (
            'Can not find the half order needed to calculate "s" value for immalleable '
            f"signatures. Unsupported curve name: {curve}"
        )
        super().__init__(
            code="ecsuite:config/unknown_curve_for_malleability_check",
            message=message,
            details={"curve": curve, **(details or {})},
        )
        self.curve = curve


class KeyStoreRequiredError(ConfigurationError):
    """Raised when an operation needs a key store and none is bound.

    Attributes:
        operation: Name of the suite operation that required the store
    """

    def __init__(self, operation: str, details: dict[str, Any] | None = None) -> None:
        message = f"{operation} requires a key store to be bound unless ephemeral=True"
        super().__init__(
            code="ecsuite:config/key_store_required",
            message=message,
            details={"operation": operation, **(details or {})},
        )
        self.operation = operation


class KeyParseError(CryptoSuiteError):
    """Raised when PEM/DER key content is malformed and cannot be decoded."""

    error_code = "ecsuite:key/parse_error"

    def __init__(self, reason: str, details: dict[str, Any] | None = None) -> None:
        message = f"Failed to parse key from PEM: {reason}"
        super().__init__(code=self.error_code, message=message, details=details or {})
        self.reason = reason


class UnrecognizedKeyFormatError(KeyParseError):
    """Raised when PEM content decodes but is not an EC key or certificate."""

    error_code = "ecsuite:key/unrecognized_format"

    def __init__(self, reason: str | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            reason
            or "does not understand PEM contents other than EC private keys and certificates",
            details=details,
        )


class SignatureError(CryptoSuiteError):
    """Base class for structurally invalid or non-canonical signatures."""


class SignatureDecodeError(SignatureError):
    """Raised when signature bytes are not a valid DER (r, s) sequence."""

    def __init__(self, reason: str, details: dict[str, Any] | None = None) -> None:
        message = f"Failed to load the signature object from the bytes: {reason}"
        super().__init__(
            code="ecsuite:signature/decode_error", message=message, details=details or {}
        )
        self.reason = reason


class MalleableSignatureError(SignatureError):
    """Raised when a signature's s value is greater than half the curve order."""

    def __init__(self, curve: str, details: dict[str, Any] | None = None) -> None:
        message = "Invalid S value in signature. Must be smaller than half of the order."
        super().__init__(
            code="ecsuite:signature/malleable",
            message=message,
            details={"curve": curve, **(details or {})},
        )
        self.curve = curve


class InvalidArgumentError(CryptoSuiteError):
    """Raised when sign/verify is called without a usable key, message or signature.

    Attributes:
        argument: Name of the offending argument
    """

    def __init__(
        self, argument: str, message: str, details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(
            code="ecsuite:argument/invalid",
            message=message,
            details={"argument": argument, **(details or {})},
        )
        self.argument = argument


class NotImplementedOperationError(CryptoSuiteError, NotImplementedError):
    """Raised by derive_key, encrypt and decrypt, which this suite does not provide."""

    def __init__(self, operation: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            code="ecsuite:operation/not_implemented",
            message=f"{operation} is not implemented by this crypto suite",
            details={"operation": operation, **(details or {})},
        )
        self.operation = operation
