# -*- coding: utf-8 -*-
"""
RU: Конфигурация набора примитивов с профилями для разных сценариев.
EN: Primitive suite configuration with scenario-specific profiles.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

BLOCK_CIPHER_NAMES: Final[frozenset[str]] = frozenset({"AES-128", "AES-256"})
KEY_EXCHANGE_NAMES: Final[frozenset[str]] = frozenset(
    {"ECDH-P256", "ECDH-P384", "X25519", "X448"}
)
SIGNATURE_NAMES: Final[frozenset[str]] = frozenset({"Ed25519", "ECDSA-P256"})


class SuiteProfile(str, Enum):
    """Predefined algorithm combinations."""

    # AES-256 + ECDH-P384 + Ed25519
    DEFAULT = "default"

    # NIST-only curves and ciphers
    NIST = "nist"

    # Smallest keys and signatures
    COMPACT = "compact"


@dataclass(frozen=True)
class SuiteConfig:
    """
    Algorithm selection for a protocol layer.

    Attributes:
        block_cipher: Registered block cipher name.
        key_exchange: Registered key exchange name.
        signature: Registered signature scheme name.

    Examples:
        >>> config = SuiteConfig.from_profile(SuiteProfile.DEFAULT)
        >>> config.key_exchange
        'ECDH-P384'

        >>> SuiteConfig(block_cipher="AES-128", key_exchange="X25519",
        ...             signature="Ed25519").block_cipher
        'AES-128'
    """

    block_cipher: str
    key_exchange: str
    signature: str

    def __post_init__(self) -> None:
        """Validate algorithm names."""
        if self.block_cipher not in BLOCK_CIPHER_NAMES:
            raise ValueError(
                f"Unknown block cipher '{self.block_cipher}', "
                f"expected one of {sorted(BLOCK_CIPHER_NAMES)}"
            )
        if self.key_exchange not in KEY_EXCHANGE_NAMES:
            raise ValueError(
                f"Unknown key exchange '{self.key_exchange}', "
                f"expected one of {sorted(KEY_EXCHANGE_NAMES)}"
            )
        if self.signature not in SIGNATURE_NAMES:
            raise ValueError(
                f"Unknown signature scheme '{self.signature}', "
                f"expected one of {sorted(SIGNATURE_NAMES)}"
            )

    @staticmethod
    def from_profile(profile: SuiteProfile) -> "SuiteConfig":
        """
        Create configuration from predefined profile.

        Args:
            profile: Suite profile.

        Returns:
            SuiteConfig instance.

        Examples:
            >>> SuiteConfig.from_profile(SuiteProfile.NIST).signature
            'ECDSA-P256'
        """
        return _PROFILE_PARAMS[profile]


# Predefined profiles
_PROFILE_PARAMS: Final[dict[SuiteProfile, SuiteConfig]] = {
    SuiteProfile.DEFAULT: SuiteConfig(
        block_cipher="AES-256",
        key_exchange="ECDH-P384",
        signature="Ed25519",
    ),
    SuiteProfile.NIST: SuiteConfig(
        block_cipher="AES-256",
        key_exchange="ECDH-P384",
        signature="ECDSA-P256",
    ),
    SuiteProfile.COMPACT: SuiteConfig(
        block_cipher="AES-128",
        key_exchange="X25519",
        signature="Ed25519",
    ),
}


__all__ = [
    "BLOCK_CIPHER_NAMES",
    "KEY_EXCHANGE_NAMES",
    "SIGNATURE_NAMES",
    "SuiteProfile",
    "SuiteConfig",
]
