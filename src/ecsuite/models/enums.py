"""Enumerations for ecsuite value types."""

from enum import Enum


class KeyType(str, Enum):
    """Closed set of elliptic-curve key variants.

    Consumers decide what a key can do through ``can_sign`` and ``can_verify``
    rather than by inspecting which components happen to be present.
    """

    EC_PUBLIC = "ECPublic"
    """Public point only; usable for verification."""

    EC_PRIVATE = "ECPrivate"
    """Private scalar only; usable for signing."""

    EC_KEY_PAIR = "ECKeyPair"
    """Private scalar plus public point."""

    @property
    def has_private(self) -> bool:
        return self in (KeyType.EC_PRIVATE, KeyType.EC_KEY_PAIR)

    @property
    def has_public(self) -> bool:
        return self in (KeyType.EC_PUBLIC, KeyType.EC_KEY_PAIR)

    @property
    def can_sign(self) -> bool:
        return self.has_private

    @property
    def can_verify(self) -> bool:
        return self.has_public
