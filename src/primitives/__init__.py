"""
Криптографические примитивы: блочные шифры, обмен ключами, подписи.
EN: Typed primitive layer. Every algorithm of one abstraction is
interchangeable, and selection by name goes through the registry.
"""

from src.primitives.algorithms.block import (
    AES128BlockCipher,
    AES256BlockCipher,
    get_block_cipher,
    new_aes128,
    new_aes256,
)
from src.primitives.algorithms.ecdsa import ECDSA, ECDSA_P256
from src.primitives.algorithms.key_exchange import (
    ECDHKeyExchange,
    ECDHP256KeyExchange,
    ECDHP384KeyExchange,
    X25519KeyExchange,
    X448KeyExchange,
    get_kex_algorithm,
)
from src.primitives.algorithms.signing import (
    ECDSAP256Scheme,
    Ed25519Scheme,
    get_signature_scheme,
)
from src.primitives.config import SuiteConfig, SuiteProfile
from src.primitives.core.exceptions import CryptoError
from src.primitives.core.registry import AlgorithmRegistry, register_all_algorithms
from src.primitives.suite import PrimitiveSuite, resolve_suite

__all__ = [
    # Block ciphers
    "AES128BlockCipher",
    "AES256BlockCipher",
    "new_aes128",
    "new_aes256",
    "get_block_cipher",
    # Key exchange
    "ECDHKeyExchange",
    "ECDHP256KeyExchange",
    "ECDHP384KeyExchange",
    "X25519KeyExchange",
    "X448KeyExchange",
    "get_kex_algorithm",
    # Signatures
    "ECDSA",
    "ECDSA_P256",
    "Ed25519Scheme",
    "ECDSAP256Scheme",
    "get_signature_scheme",
    # Composition
    "AlgorithmRegistry",
    "register_all_algorithms",
    "SuiteConfig",
    "SuiteProfile",
    "PrimitiveSuite",
    "resolve_suite",
    # Errors
    "CryptoError",
]
