"""
Схемы цифровой подписи с единым byte-in/byte-out контрактом.

Реализует 2 схемы, взаимозаменяемые без ветвления по типу:

    1. Ed25519 (RFC 8032) — детерминированная, фиксированные размеры
    2. ECDSA-P256 (FIPS 186-5) — рандомизированная, DER-подписи

Единый контракт (SignatureSchemeProtocol):
    - generate_key(rand) -> (public_key, private_key)
    - sign(private_key, message) -> signature
    - verify(public_key, message, signature) -> bool

Verification Semantics:
    "Подпись не сошлась" — нормальный исход, verify возвращает False.
    Неверные типы аргументов (str вместо bytes) — неправильное
    использование API, бросается TypeError.

Key Formats:
    Ed25519:
        - public: 32 байта
        - private: 64 байта = seed (32) || public (32)
        - signature: 64 байта
    ECDSA-P256:
        - public: 65 байт (0x04 || X || Y)
        - private: 32 байта (скаляр big-endian)
        - signature: DER, до 72 байт

Example:
    >>> from src.primitives.algorithms.signing import get_signature_scheme
    >>> for name in ("ed25519", "ecdsa-p256"):
    ...     scheme = get_signature_scheme(name)
    ...     public, private = scheme.generate_key()
    ...     signature = scheme.sign(private, b"Document v1.0")
    ...     assert scheme.verify(public, b"Document v1.0", signature)

Version: 1.0
Date: October 2026
"""

from __future__ import annotations

import hmac
import logging
import os
from typing import Dict, Tuple, Type, Union

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

from src.primitives.algorithms.ecdsa import ECDSA, ECDSA_P256
from src.primitives.core.entropy import read_random
from src.primitives.core.exceptions import (
    InvalidKeyError,
    InvalidKeySizeError,
    InvalidSeedSizeError,
    InvalidSignatureError,
    SigningFailedError,
)
from src.primitives.core.metadata import (
    AlgorithmMetadata,
    SecurityLevel,
    create_signature_metadata,
)
from src.primitives.core.protocols import RandomSource, SignatureSchemeProtocol

logger = logging.getLogger(__name__)


# ==============================================================================
# CONSTANTS
# ==============================================================================

ED25519_PUBLIC_KEY_SIZE = 32
ED25519_PRIVATE_KEY_SIZE = 64
ED25519_SEED_SIZE = 32
ED25519_SIGNATURE_SIZE = 64

# SEQUENCE(2) + 2 * INTEGER(2 + 33)
ECDSA_P256_MAX_SIGNATURE_SIZE = 72


def _ensure_bytes(**values: object) -> None:
    for name, value in values.items():
        if not isinstance(value, bytes):
            raise TypeError(f"{name} must be bytes, got {type(value).__name__}")


# ==============================================================================
# ED25519
# ==============================================================================


class Ed25519Scheme:
    """
    Ed25519 цифровая подпись (RFC 8032).

    Характеристики:
        - Кривая: edwards25519
        - Подпись: 64 байта, детерминированная
        - Публичный ключ: 32 байта
        - Приватный ключ: 64 байта (seed || public)
        - Seed: 32 байта

    Security Note:
        sign проверяет, что публичная половина приватного ключа совпадает
        с ключом, выведенным из seed. Несогласованный ключ отклоняется,
        а не используется молча.

    Example:
        >>> scheme = Ed25519Scheme()
        >>> public, private = scheme.derive_from_seed(bytes(32))
        >>> sig = scheme.sign(private, b"Hello")
        >>> scheme.verify(public, b"Hello", sig)
        True
    """

    algorithm_name = "Ed25519"
    public_key_size = ED25519_PUBLIC_KEY_SIZE
    private_key_size = ED25519_PRIVATE_KEY_SIZE
    seed_size = ED25519_SEED_SIZE
    signature_size = ED25519_SIGNATURE_SIZE

    def __init__(self) -> None:
        self._logger = logger.getChild("ed25519")

    def generate_key(self, rand: RandomSource = os.urandom) -> Tuple[bytes, bytes]:
        """
        Сгенерировать новую пару ключей из 32 случайных байтов seed.

        Returns:
            (public_key, private_key)

        Raises:
            RandomSourceError: Источник случайности отказал
        """
        seed = read_random(rand, self.seed_size, self.algorithm_name)
        return self.derive_from_seed(seed)

    def derive_from_seed(self, seed: bytes) -> Tuple[bytes, bytes]:
        """
        Детерминированно вывести пару ключей из seed.

        Args:
            seed: Ровно 32 байта (не усекается и не дополняется)

        Returns:
            (public_key, private_key = seed || public_key)

        Raises:
            TypeError: seed не bytes
            InvalidSeedSizeError: len(seed) != 32
        """
        _ensure_bytes(seed=seed)
        if len(seed) != self.seed_size:
            raise InvalidSeedSizeError(self.algorithm_name, self.seed_size, len(seed))

        public = self._public_bytes(ed25519.Ed25519PrivateKey.from_private_bytes(seed))
        return public, seed + public

    @staticmethod
    def _public_bytes(key: ed25519.Ed25519PrivateKey) -> bytes:
        return key.public_key().public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )

    def sign(self, private_key: bytes, message: bytes) -> bytes:
        """
        Создать Ed25519 подпись сообщения.

        Returns:
            64-байтовая подпись

        Raises:
            TypeError: Аргументы не bytes
            InvalidKeySizeError: len(private_key) != 64
            InvalidKeyError: Публичная половина не соответствует seed
            SigningFailedError: Примитив отказал
        """
        _ensure_bytes(private_key=private_key, message=message)
        if len(private_key) != self.private_key_size:
            raise InvalidKeySizeError(
                self.algorithm_name, self.private_key_size, len(private_key)
            )

        seed = private_key[: self.seed_size]
        embedded_public = private_key[self.seed_size :]
        key = ed25519.Ed25519PrivateKey.from_private_bytes(seed)
        if not hmac.compare_digest(self._public_bytes(key), embedded_public):
            raise InvalidKeyError(
                "Ed25519 private key public half does not match its seed",
                algorithm=self.algorithm_name,
            )

        try:
            return key.sign(message)
        except Exception as exc:
            self._logger.error(f"Ed25519 signing failed: {exc}", exc_info=True)
            raise SigningFailedError(
                "Ed25519 signing failed", algorithm=self.algorithm_name
            ) from exc

    def verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        """
        Проверить Ed25519 подпись.

        Returns:
            True если подпись валидна; False при неверной подписи,
            неверных размерах ключа/подписи или несовпадении

        Raises:
            TypeError: Аргументы не bytes
        """
        _ensure_bytes(public_key=public_key, message=message, signature=signature)
        if (
            len(public_key) != self.public_key_size
            or len(signature) != self.signature_size
        ):
            return False

        try:
            key = ed25519.Ed25519PublicKey.from_public_bytes(public_key)
            key.verify(signature, message)
        except (InvalidSignature, ValueError):
            return False
        return True


# ==============================================================================
# ECDSA-P256
# ==============================================================================


class ECDSAP256Scheme:
    """
    ECDSA на NIST P-256 за единым byte-in/byte-out контрактом.

    Фасад над ECDSA_P256: sign хеширует сообщение SHA-256 и подписывает
    дайджест; verify возвращает False для некорректного ключа,
    некорректного DER или неверной подписи.

    Характеристики:
        - Хеш: SHA-256
        - Подпись: DER, 8-72 байта, рандомизированная
        - Публичный ключ: 65 байт (несжатая точка)
        - Приватный ключ: 32 байта

    Example:
        >>> scheme = ECDSAP256Scheme()
        >>> public, private = scheme.generate_key()
        >>> sig = scheme.sign(private, b"data")
        >>> scheme.verify(public, b"data", sig)
        True
    """

    algorithm_name = "ECDSA-P256"
    signature_size = ECDSA_P256_MAX_SIGNATURE_SIZE

    def __init__(self, ecdsa: ECDSA = ECDSA_P256) -> None:
        self._ecdsa = ecdsa
        self.public_key_size = ecdsa.curve.uncompressed_point_size
        self.private_key_size = ecdsa.curve.scalar_size

    def _digest(self, message: bytes) -> bytes:
        h = hashes.Hash(self._ecdsa.curve.hash_algorithm)
        h.update(message)
        return h.finalize()

    def generate_key(self, rand: RandomSource = os.urandom) -> Tuple[bytes, bytes]:
        """
        Сгенерировать пару ключей.

        Returns:
            (public_key, private_key) в канонических кодировках

        Raises:
            RandomSourceError: Источник случайности отказал
        """
        priv, pub = self._ecdsa.generate_key_pair(rand)
        return self._ecdsa.marshal_public_key(pub), self._ecdsa.marshal_private_key(priv)

    def sign(self, private_key: bytes, message: bytes) -> bytes:
        """
        Подписать SHA-256 дайджест сообщения.

        Raises:
            TypeError: Аргументы не bytes
            InvalidKeySizeError: Приватный ключ не 32 байта
            ScalarOutOfRangeError: Скаляр вне [1, n-1]
            SigningFailedError: Примитив отказал
        """
        _ensure_bytes(private_key=private_key, message=message)
        priv = self._ecdsa.parse_private_key(private_key)
        return self._ecdsa.sign_digest(priv, self._digest(message))

    def verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        """
        Проверить подпись.

        Returns:
            True если подпись валидна, False иначе (включая некорректный
            публичный ключ и некорректный DER)

        Raises:
            TypeError: Аргументы не bytes
        """
        _ensure_bytes(public_key=public_key, message=message, signature=signature)
        try:
            pub = self._ecdsa.parse_public_key(public_key)
            return self._ecdsa.verify_digest(pub, self._digest(message), signature)
        except (InvalidKeyError, InvalidSignatureError) as exc:
            logger.debug(f"{self.algorithm_name} verify rejected input: {exc}")
            return False


# ==============================================================================
# ALGORITHM METADATA
# ==============================================================================

METADATA_ED25519 = create_signature_metadata(
    name="Ed25519",
    implementation_class="src.primitives.algorithms.signing.Ed25519Scheme",
    signature_size=ED25519_SIGNATURE_SIZE,
    public_key_size=ED25519_PUBLIC_KEY_SIZE,
    private_key_size=ED25519_PRIVATE_KEY_SIZE,
    seed_size=ED25519_SEED_SIZE,
    curve="edwards25519",
    is_deterministic=True,
    security_level=SecurityLevel.STANDARD,
    description_ru="EdDSA подпись на кривой edwards25519 (RFC 8032)",
    description_en="EdDSA signature on edwards25519 (RFC 8032)",
    test_vectors_source="RFC 8032",
    use_cases=["SSH", "Git", "TLS", "API tokens"],
)

METADATA_ECDSA_P256 = create_signature_metadata(
    name="ECDSA-P256",
    implementation_class="src.primitives.algorithms.signing.ECDSAP256Scheme",
    signature_size=ECDSA_P256_MAX_SIGNATURE_SIZE,
    public_key_size=ECDSA_P256.curve.uncompressed_point_size,
    private_key_size=ECDSA_P256.curve.scalar_size,
    curve=ECDSA_P256.curve.name,
    security_level=SecurityLevel.STANDARD,
    description_ru="ECDSA подпись на NIST P-256 со строгим DER",
    description_en="ECDSA signature on NIST P-256 with strict DER decoding",
    test_vectors_source="RFC 6979 A.2.5",
    use_cases=["TLS", "X.509", "Hybrid public-key encryption"],
)


# ==============================================================================
# REGISTRY
# ==============================================================================

ALL_METADATA: list[AlgorithmMetadata] = [METADATA_ED25519, METADATA_ECDSA_P256]

SignatureScheme = Union[Ed25519Scheme, ECDSAP256Scheme]

SIGNATURE_SCHEMES: Dict[str, tuple[Type[SignatureScheme], AlgorithmMetadata]] = {
    "ed25519": (Ed25519Scheme, METADATA_ED25519),
    "ecdsa-p256": (ECDSAP256Scheme, METADATA_ECDSA_P256),
}


def get_signature_scheme(algorithm_id: str) -> SignatureSchemeProtocol:
    """
    Получить схему подписи по ID.

    Args:
        algorithm_id: "ed25519" или "ecdsa-p256" (регистр не важен)

    Raises:
        KeyError: Если схема не найдена
    """
    try:
        scheme_cls, _ = SIGNATURE_SCHEMES[algorithm_id.lower()]
    except KeyError as exc:
        raise KeyError(
            f"Signature scheme '{algorithm_id}' not found. "
            f"Available: {list(SIGNATURE_SCHEMES.keys())}"
        ) from exc

    return scheme_cls()  # type: ignore[return-value]


__all__ = [
    "Ed25519Scheme",
    "ECDSAP256Scheme",
    "METADATA_ED25519",
    "METADATA_ECDSA_P256",
    "ALL_METADATA",
    "SIGNATURE_SCHEMES",
    "get_signature_scheme",
    "ED25519_PUBLIC_KEY_SIZE",
    "ED25519_PRIVATE_KEY_SIZE",
    "ED25519_SEED_SIZE",
    "ED25519_SIGNATURE_SIZE",
    "ECDSA_P256_MAX_SIGNATURE_SIZE",
]
