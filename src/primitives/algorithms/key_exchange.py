"""
Обмен ключами Diffie-Hellman на эллиптических кривых (ECDH).

Этот модуль реализует абстракцию KeyExchange для 4 алгоритмов:

    1. ECDH-P384 (NIST SP 800-56A) — secp384r1, основной экземпляр
    2. ECDH-P256 (NIST SP 800-56A) — secp256r1
    3. X25519 (RFC 7748) — Curve25519
    4. X448 (RFC 7748) — Curve448

Контракт (одинаковый для всех алгоритмов):
    - generate_key(rand) -> (private, public)
    - parse_private_key(bytes) -> private
    - parse_public_key(bytes) -> public
    - shared_secret(private, peer_public) -> bytes

Validation Rules (NIST кривые):
    - Приватный скаляр: ровно scalar_size байт, 0 < d < n
    - Публичная точка: несжатая, на кривой, не точка на бесконечности
    - Нестрогий разбор НЕ выполняется: любая ошибка — типизированное исключение

Shared secret — сырая X-координата d·Q (размер поля). KDF здесь
не применяется: это задача протокола, использующего обмен ключами.

Randomness:
    Источник случайности передаётся явно в generate_key. Ошибка
    источника пробрасывается как RandomSourceError, повторов с другим
    источником нет.

Example:
    >>> from src.primitives.algorithms.key_exchange import ECDHP384KeyExchange
    >>> kex = ECDHP384KeyExchange()
    >>> priv_a, pub_a = kex.generate_key()
    >>> priv_b, pub_b = kex.generate_key()
    >>> kex.shared_secret(priv_a, pub_b) == kex.shared_secret(priv_b, pub_a)
    True

Version: 1.0
Date: October 2026
"""

from __future__ import annotations

import hmac
import logging
import os
from typing import Any, Dict, Tuple, Type

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec, x448, x25519

from src.primitives.core.curves import (
    P256,
    P384,
    CurveParameters,
    decode_point,
    decode_scalar,
    encode_point,
    encode_scalar,
    private_key_from_scalar,
    sample_scalar,
)
from src.primitives.core.entropy import read_random
from src.primitives.core.exceptions import (
    InvalidKeySizeError,
    InvalidPointError,
    KeyExchangeError,
    KeyGenerationError,
)
from src.primitives.core.metadata import (
    AlgorithmMetadata,
    SecurityLevel,
    create_key_exchange_metadata,
)
from src.primitives.core.protocols import KeyExchangeProtocol, RandomSource

logger = logging.getLogger(__name__)


# ==============================================================================
# CONSTANTS
# ==============================================================================

X25519_KEY_SIZE = 32  # bytes
X448_KEY_SIZE = 56  # bytes


# ==============================================================================
# HELPER FUNCTIONS
# ==============================================================================


def _ensure_bytes(value: bytes, name: str) -> None:
    """
    Проверить, что значение является bytes.

    Raises:
        TypeError: Если value не является bytes
    """
    if not isinstance(value, bytes):
        raise TypeError(f"{name} must be bytes, got {type(value).__name__}")


# ==============================================================================
# KEY OBJECTS
# ==============================================================================


class ExchangePublicKey:
    """
    Публичный ключ обмена ключами.

    Хранит каноническую кодировку и проверенный объект cryptography.
    Сравнение выполняется по алгоритму и кодировке.
    """

    def __init__(self, algorithm: str, encoded: bytes, key: Any) -> None:
        self.algorithm = algorithm
        self._encoded = encoded
        self._key = key

    def to_bytes(self) -> bytes:
        """Каноническая кодировка (несжатая точка или u-координата X25519/X448)."""
        return self._encoded

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExchangePublicKey):
            return NotImplemented
        return self.algorithm == other.algorithm and hmac.compare_digest(
            self._encoded, other._encoded
        )

    def __hash__(self) -> int:
        return hash((self.algorithm, self._encoded))

    def __repr__(self) -> str:
        return f"ExchangePublicKey(algorithm={self.algorithm!r}, {self._encoded.hex()})"


class ExchangePrivateKey:
    """
    Приватный ключ обмена ключами.

    Security Note:
        - __repr__ не выводит секретные байты
        - __eq__ сравнивает кодировки за постоянное время
        - Объект не хешируется
        - Время жизни ключевого материала контролирует вызывающий код
    """

    def __init__(
        self,
        algorithm: str,
        encoded: bytes,
        key: Any,
        public_key: ExchangePublicKey,
    ) -> None:
        self.algorithm = algorithm
        self._encoded = encoded
        self._key = key
        self._public_key = public_key

    def to_bytes(self) -> bytes:
        """Каноническая кодировка приватного ключа."""
        return self._encoded

    def public_key(self) -> ExchangePublicKey:
        """Соответствующий публичный ключ."""
        return self._public_key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExchangePrivateKey):
            return NotImplemented
        return self.algorithm == other.algorithm and hmac.compare_digest(
            self._encoded, other._encoded
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ExchangePrivateKey(algorithm={self.algorithm!r}, <redacted>)"


# ==============================================================================
# BASE CLASS
# ==============================================================================


class _DHKeyExchangeBase:
    """
    Базовый класс Diffie-Hellman обмена ключами.

    Реализует общую проверку пары ключей перед вычислением общего секрета.
    """

    algorithm_name: str
    private_key_size: int
    public_key_size: int
    shared_secret_size: int

    def __init__(self) -> None:
        self._logger = logger.getChild(self.algorithm_name.lower())

    def _check_pair(
        self, private_key: ExchangePrivateKey, peer_public_key: ExchangePublicKey
    ) -> None:
        if not isinstance(private_key, ExchangePrivateKey):
            raise TypeError(
                f"private_key must be ExchangePrivateKey, "
                f"got {type(private_key).__name__}"
            )
        if not isinstance(peer_public_key, ExchangePublicKey):
            raise TypeError(
                f"peer_public_key must be ExchangePublicKey, "
                f"got {type(peer_public_key).__name__}"
            )
        for key in (private_key, peer_public_key):
            if key.algorithm != self.algorithm_name:
                raise KeyExchangeError(
                    f"{self.algorithm_name} cannot use a {key.algorithm} key",
                    algorithm=self.algorithm_name,
                )

    def _exchange(self, private_key: Any, peer_key: Any, *args: Any) -> bytes:
        try:
            secret: bytes = private_key.exchange(*args, peer_key)
        except ValueError as exc:
            self._logger.debug(f"{self.algorithm_name}: peer key rejected: {exc}")
            raise KeyExchangeError(
                f"{self.algorithm_name} rejected the peer public key",
                algorithm=self.algorithm_name,
            ) from exc
        except Exception as exc:
            self._logger.error(
                f"{self.algorithm_name} key exchange failed: {exc}", exc_info=True
            )
            raise KeyExchangeError(
                f"{self.algorithm_name} key exchange failed",
                algorithm=self.algorithm_name,
            ) from exc

        if len(secret) != self.shared_secret_size:
            raise KeyExchangeError(
                f"{self.algorithm_name} produced {len(secret)}-byte secret, "
                f"expected {self.shared_secret_size}",
                algorithm=self.algorithm_name,
            )

        self._logger.debug(
            f"{self.algorithm_name}: derived {len(secret)}B shared secret"
        )
        return secret


# ==============================================================================
# ECDH OVER NIST CURVES
# ==============================================================================


class ECDHKeyExchange(_DHKeyExchangeBase):
    """
    ECDH на кривой NIST, заданной CurveParameters.

    Параметры кривой передаются явно и не изменяются; экземпляр не хранит
    изменяемого состояния и безопасен для параллельного использования.

    Attributes:
        curve: Доменные параметры кривой
        algorithm_name: "ECDH-P256" или "ECDH-P384"
        private_key_size: scalar_size
        public_key_size: 1 + 2 * field_size
        shared_secret_size: field_size

    Example:
        >>> kex = ECDHKeyExchange(P384)
        >>> priv = kex.parse_private_key(scalar_bytes)
        >>> peer = kex.parse_public_key(peer_point_bytes)
        >>> secret = kex.shared_secret(priv, peer)
        >>> len(secret)
        48
    """

    def __init__(self, curve: CurveParameters) -> None:
        self.curve = curve
        self.algorithm_name = f"ECDH-{curve.name.replace('-', '')}"
        self.private_key_size = curve.scalar_size
        self.public_key_size = curve.uncompressed_point_size
        self.shared_secret_size = curve.field_size
        super().__init__()

    def _private_from_scalar(self, d: int) -> ExchangePrivateKey:
        try:
            key_obj = private_key_from_scalar(d, self.curve)
        except Exception as exc:
            self._logger.error(
                f"{self.algorithm_name} key derivation failed: {exc}", exc_info=True
            )
            raise KeyGenerationError(
                f"{self.algorithm_name} key derivation failed",
                algorithm=self.algorithm_name,
            ) from exc

        public_obj = key_obj.public_key()
        public = ExchangePublicKey(
            self.algorithm_name, encode_point(public_obj), public_obj
        )
        return ExchangePrivateKey(
            self.algorithm_name, encode_scalar(d, self.curve), key_obj, public
        )

    def generate_key(
        self, rand: RandomSource = os.urandom
    ) -> Tuple[ExchangePrivateKey, ExchangePublicKey]:
        """
        Сгенерировать пару ключей.

        Скаляр выбирается равномерно из [1, n-1] (rejection sampling),
        публичная точка вычисляется как d·G.

        Args:
            rand: Источник случайности

        Returns:
            (private_key, public_key)

        Raises:
            RandomSourceError: Источник случайности отказал
            KeyGenerationError: Примитив не смог построить ключ
        """
        self._logger.debug(f"Generating {self.algorithm_name} keypair...")
        d = sample_scalar(rand, self.curve, self.algorithm_name)
        private = self._private_from_scalar(d)
        return private, private.public_key()

    def parse_private_key(self, data: bytes) -> ExchangePrivateKey:
        """
        Разобрать приватный скаляр в канонической кодировке.

        Raises:
            TypeError: data не bytes
            InvalidKeySizeError: len(data) != scalar_size
            ScalarOutOfRangeError: d == 0 или d >= n
        """
        d = decode_scalar(data, self.curve, self.algorithm_name)
        return self._private_from_scalar(d)

    def parse_public_key(self, data: bytes) -> ExchangePublicKey:
        """
        Разобрать несжатую публичную точку.

        Raises:
            TypeError: data не bytes
            InvalidPointError: Неверная длина/префикс, точка не на кривой
                или точка на бесконечности
        """
        key_obj = decode_point(data, self.curve, self.algorithm_name)
        return ExchangePublicKey(self.algorithm_name, bytes(data), key_obj)

    def shared_secret(
        self, private_key: ExchangePrivateKey, peer_public_key: ExchangePublicKey
    ) -> bytes:
        """
        Вычислить общий секрет: X-координата d·Q.

        Returns:
            field_size байт, без KDF

        Raises:
            TypeError: Аргументы не ключи обмена
            KeyExchangeError: Ключи другого алгоритма или отказ примитива
        """
        self._check_pair(private_key, peer_public_key)
        return self._exchange(private_key._key, peer_public_key._key, ec.ECDH())


class ECDHP384KeyExchange(ECDHKeyExchange):
    """
    ECDH-P384 — обмен ключами на secp384r1 (NIST P-384).

    Размеры: скаляр 48 байт, точка 97 байт, общий секрет 48 байт.
    """

    def __init__(self) -> None:
        super().__init__(P384)


class ECDHP256KeyExchange(ECDHKeyExchange):
    """
    ECDH-P256 — обмен ключами на secp256r1 (NIST P-256).

    Размеры: скаляр 32 байта, точка 65 байт, общий секрет 32 байта.
    """

    def __init__(self) -> None:
        super().__init__(P256)


# ==============================================================================
# X25519 / X448
# ==============================================================================


class _XDHKeyExchangeBase(_DHKeyExchangeBase):
    """
    Общая реализация X25519/X448 (RFC 7748).

    Приватный ключ, публичный ключ (u-координата) и общий секрет имеют
    одинаковый размер. Clamping скаляра выполняет примитив.

    Security Note:
        Точка малого порядка у партнёра отклоняется с KeyExchangeError:
        либо самим примитивом, либо проверкой нулевого секрета.
    """

    _private_cls: Any
    _public_cls: Any

    def _private_from_bytes(self, data: bytes) -> ExchangePrivateKey:
        try:
            key_obj = self._private_cls.from_private_bytes(data)
        except Exception as exc:
            raise KeyGenerationError(
                f"{self.algorithm_name} private key construction failed",
                algorithm=self.algorithm_name,
            ) from exc

        public_obj = key_obj.public_key()
        public_bytes = public_obj.public_bytes(
            encoding=serialization.Encoding.Raw,
            format=serialization.PublicFormat.Raw,
        )
        public = ExchangePublicKey(self.algorithm_name, public_bytes, public_obj)
        return ExchangePrivateKey(self.algorithm_name, data, key_obj, public)

    def generate_key(
        self, rand: RandomSource = os.urandom
    ) -> Tuple[ExchangePrivateKey, ExchangePublicKey]:
        """
        Сгенерировать пару ключей из private_key_size случайных байтов.

        Raises:
            RandomSourceError: Источник случайности отказал
        """
        self._logger.debug(f"Generating {self.algorithm_name} keypair...")
        private = self._private_from_bytes(
            read_random(rand, self.private_key_size, self.algorithm_name)
        )
        return private, private.public_key()

    def parse_private_key(self, data: bytes) -> ExchangePrivateKey:
        """
        Разобрать приватный ключ фиксированного размера.

        Raises:
            TypeError: data не bytes
            InvalidKeySizeError: len(data) != private_key_size
        """
        _ensure_bytes(data, "private_key")
        if len(data) != self.private_key_size:
            raise InvalidKeySizeError(
                self.algorithm_name, self.private_key_size, len(data)
            )
        return self._private_from_bytes(data)

    def parse_public_key(self, data: bytes) -> ExchangePublicKey:
        """
        Разобрать публичный ключ (u-координату).

        Raises:
            TypeError: data не bytes
            InvalidPointError: len(data) != public_key_size
        """
        _ensure_bytes(data, "public_key")
        if len(data) != self.public_key_size:
            raise InvalidPointError(
                f"{self.algorithm_name} public key must be "
                f"{self.public_key_size} bytes",
                algorithm=self.algorithm_name,
                expected_size=self.public_key_size,
                actual_size=len(data),
            )
        try:
            key_obj = self._public_cls.from_public_bytes(data)
        except ValueError as exc:
            raise InvalidPointError(
                f"{self.algorithm_name} public key rejected",
                algorithm=self.algorithm_name,
            ) from exc
        return ExchangePublicKey(self.algorithm_name, data, key_obj)

    def shared_secret(
        self, private_key: ExchangePrivateKey, peer_public_key: ExchangePublicKey
    ) -> bytes:
        """
        Вычислить общий секрет.

        Raises:
            KeyExchangeError: Ключи другого алгоритма или точка малого порядка
        """
        self._check_pair(private_key, peer_public_key)
        secret = self._exchange(private_key._key, peer_public_key._key)
        if not any(secret):
            raise KeyExchangeError(
                f"{self.algorithm_name} produced an all-zero shared secret",
                algorithm=self.algorithm_name,
            )
        return secret


class X25519KeyExchange(_XDHKeyExchangeBase):
    """
    X25519 — ECDH на Curve25519 (RFC 7748).

    Параметры:
        - Приватный ключ: 32 байта
        - Публичный ключ: 32 байта (u-координата)
        - Общий секрет: 32 байта
    """

    algorithm_name = "X25519"
    private_key_size = X25519_KEY_SIZE
    public_key_size = X25519_KEY_SIZE
    shared_secret_size = X25519_KEY_SIZE
    _private_cls = x25519.X25519PrivateKey
    _public_cls = x25519.X25519PublicKey


class X448KeyExchange(_XDHKeyExchangeBase):
    """
    X448 — ECDH на Curve448 (RFC 7748).

    Параметры:
        - Приватный ключ: 56 байт
        - Публичный ключ: 56 байт (u-координата)
        - Общий секрет: 56 байт
        - Security: ~224 бит

    Example:
        >>> kex = X448KeyExchange()
        >>> priv_a, pub_a = kex.generate_key()
        >>> priv_b, pub_b = kex.generate_key()
        >>> kex.shared_secret(priv_a, pub_b) == kex.shared_secret(priv_b, pub_a)
        True
    """

    algorithm_name = "X448"
    private_key_size = X448_KEY_SIZE
    public_key_size = X448_KEY_SIZE
    shared_secret_size = X448_KEY_SIZE
    _private_cls = x448.X448PrivateKey
    _public_cls = x448.X448PublicKey


# ==============================================================================
# ALGORITHM METADATA
# ==============================================================================

METADATA_ECDH_P384 = create_key_exchange_metadata(
    name="ECDH-P384",
    implementation_class="src.primitives.algorithms.key_exchange.ECDHP384KeyExchange",
    public_key_size=P384.uncompressed_point_size,
    private_key_size=P384.scalar_size,
    shared_secret_size=P384.field_size,
    curve=P384.name,
    security_level=SecurityLevel.HIGH,
    description_ru=(
        "ECDH-P384 — Diffie-Hellman на secp384r1 (NIST P-384). "
        "Строгая проверка скаляров и точек."
    ),
    description_en=(
        "ECDH-P384 — Elliptic Curve Diffie-Hellman on secp384r1 (NIST P-384) "
        "with strict scalar and point validation."
    ),
    test_vectors_source="NIST CAVP (ECC CDH)",
    use_cases=["Hybrid public-key encryption", "NSA Suite B compliance"],
)

METADATA_ECDH_P256 = create_key_exchange_metadata(
    name="ECDH-P256",
    implementation_class="src.primitives.algorithms.key_exchange.ECDHP256KeyExchange",
    public_key_size=P256.uncompressed_point_size,
    private_key_size=P256.scalar_size,
    shared_secret_size=P256.field_size,
    curve=P256.name,
    security_level=SecurityLevel.STANDARD,
    description_ru="ECDH-P256 — Diffie-Hellman на secp256r1 (NIST P-256).",
    description_en="ECDH-P256 — Elliptic Curve Diffie-Hellman on secp256r1.",
    test_vectors_source="NIST CAVP (ECC CDH)",
    use_cases=["Government/enterprise compliance", "Legacy interoperability"],
)

METADATA_X25519 = create_key_exchange_metadata(
    name="X25519",
    implementation_class="src.primitives.algorithms.key_exchange.X25519KeyExchange",
    public_key_size=X25519_KEY_SIZE,
    private_key_size=X25519_KEY_SIZE,
    shared_secret_size=X25519_KEY_SIZE,
    curve="Curve25519",
    security_level=SecurityLevel.STANDARD,
    description_ru="X25519 — ECDH на Curve25519 (RFC 7748).",
    description_en="X25519 — Curve25519 Diffie-Hellman (RFC 7748).",
    test_vectors_source="RFC 7748",
    use_cases=["TLS 1.3", "General-purpose key agreement"],
)

METADATA_X448 = create_key_exchange_metadata(
    name="X448",
    implementation_class="src.primitives.algorithms.key_exchange.X448KeyExchange",
    public_key_size=X448_KEY_SIZE,
    private_key_size=X448_KEY_SIZE,
    shared_secret_size=X448_KEY_SIZE,
    curve="Curve448",
    security_level=SecurityLevel.HIGH,
    description_ru="X448 — ECDH на Curve448 (RFC 7748), ~224 бит.",
    description_en="X448 — Curve448 Diffie-Hellman (RFC 7748), ~224-bit security.",
    test_vectors_source="RFC 7748",
    use_cases=["Long-term key protection", "High-security key agreement"],
)


# ==============================================================================
# REGISTRY
# ==============================================================================

ALL_METADATA: list[AlgorithmMetadata] = [
    METADATA_ECDH_P256,
    METADATA_ECDH_P384,
    METADATA_X25519,
    METADATA_X448,
]

KEY_EXCHANGE_ALGORITHMS: Dict[str, tuple[Type[_DHKeyExchangeBase], AlgorithmMetadata]] = {
    "ecdh-p256": (ECDHP256KeyExchange, METADATA_ECDH_P256),
    "ecdh-p384": (ECDHP384KeyExchange, METADATA_ECDH_P384),
    "x25519": (X25519KeyExchange, METADATA_X25519),
    "x448": (X448KeyExchange, METADATA_X448),
}


def get_kex_algorithm(algorithm_id: str) -> KeyExchangeProtocol:
    """
    Получить реализацию обмена ключами по ID.

    Args:
        algorithm_id: "ecdh-p256", "ecdh-p384", "x25519" или "x448" (регистр не важен)

    Returns:
        Экземпляр класса, реализующего KeyExchangeProtocol

    Raises:
        KeyError: Если алгоритм не найден
    """
    try:
        kex_cls, _ = KEY_EXCHANGE_ALGORITHMS[algorithm_id.lower()]
    except KeyError as exc:
        available = list(KEY_EXCHANGE_ALGORITHMS.keys())
        raise KeyError(
            f"Key exchange algorithm '{algorithm_id}' not found. "
            f"Available: {available}"
        ) from exc

    return kex_cls()  # type: ignore[return-value]


# ==============================================================================
# MODULE EXPORTS
# ==============================================================================

__all__ = [
    # Key objects
    "ExchangePrivateKey",
    "ExchangePublicKey",
    # Classes
    "ECDHKeyExchange",
    "ECDHP384KeyExchange",
    "ECDHP256KeyExchange",
    "X25519KeyExchange",
    "X448KeyExchange",
    # Metadata
    "METADATA_ECDH_P384",
    "METADATA_ECDH_P256",
    "METADATA_X25519",
    "METADATA_X448",
    "ALL_METADATA",
    # Registry
    "KEY_EXCHANGE_ALGORITHMS",
    "get_kex_algorithm",
    # Constants
    "X25519_KEY_SIZE",
    "X448_KEY_SIZE",
]
