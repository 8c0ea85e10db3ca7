"""
Параметры эллиптических кривых NIST и каноническое кодирование.

Модуль определяет неизменяемый CurveParameters (поле, коэффициенты,
порядок группы, размеры кодировок) и два экземпляра: P256 и P384.
Экземпляры создаются один раз при импорте и передаются по ссылке
в каждый объект обмена ключами и подписи.

Канонические кодировки:
    - Скаляр: big-endian фиксированной ширины (scalar_size), с ведущими нулями
    - Точка: несжатая, 0x04 || X || Y (каждая координата field_size байт)

Правила валидации:
    - Скаляр: ровно scalar_size байт, 0 < d < n
    - Точка: ровно 1 + 2 * field_size байт, префикс 0x04, не точка
      на бесконечности, координаты в поле, уравнение кривой выполняется

Example:
    >>> from src.primitives.core.curves import P256, decode_scalar
    >>> d = decode_scalar(bytes(31) + b"\\x01", P256, "ECDSA-P256")
    >>> d
    1

Version: 1.0
Date: October 2026
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Tuple

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec

from src.primitives.core.entropy import read_random
from src.primitives.core.exceptions import (
    InvalidKeySizeError,
    InvalidPointError,
    RandomSourceError,
    ScalarOutOfRangeError,
)
from src.primitives.core.protocols import RandomSource

logger = logging.getLogger(__name__)


# Префикс несжатой точки SEC 1 (X9.62)
UNCOMPRESSED_POINT_PREFIX = 0x04

# Лимит попыток rejection sampling. Для P-256/P-384 вероятность отказа
# одной попытки < 2^-32, поэтому исчерпание означает сломанный источник.
MAX_SCALAR_SAMPLING_ATTEMPTS = 64


# ==============================================================================
# CURVE PARAMETERS
# ==============================================================================


@dataclass(frozen=True)
class CurveParameters:
    """
    Доменные параметры короткой кривой Вейерштрасса y² = x³ + ax + b (mod p).

    Attributes:
        name: Имя кривой ("P-256", "P-384")
        curve: Объект кривой cryptography (ec.SECP256R1() и т.д.)
        p: Простое число поля
        a: Коэффициент a
        b: Коэффициент b
        n: Порядок группы (порядок базовой точки G)
        field_size: Размер координаты в байтах
        scalar_size: Размер закодированного скаляра в байтах
        hash_algorithm: Хеш для ECDSA (размер дайджеста = scalar_size)
    """

    name: str
    curve: ec.EllipticCurve
    p: int
    a: int
    b: int
    n: int
    field_size: int
    scalar_size: int
    hash_algorithm: hashes.HashAlgorithm

    def __post_init__(self) -> None:
        if self.n <= 1 or self.p <= 3:
            raise ValueError(f"Invalid domain parameters for {self.name}")
        if self.field_size * 8 < self.p.bit_length():
            raise ValueError(f"field_size too small for {self.name}")
        if self.scalar_size * 8 < self.n.bit_length():
            raise ValueError(f"scalar_size too small for {self.name}")

    @property
    def uncompressed_point_size(self) -> int:
        """Размер несжатой точки: 1 + 2 * field_size."""
        return 1 + 2 * self.field_size

    @property
    def digest_size(self) -> int:
        """Размер дайджеста hash_algorithm в байтах."""
        return self.hash_algorithm.digest_size

    def is_on_curve(self, x: int, y: int) -> bool:
        """
        Проверить, что (x, y) — аффинная точка кривой.

        Координаты должны лежать в [0, p-1], и y² ≡ x³ + ax + b (mod p).
        """
        if not (0 <= x < self.p and 0 <= y < self.p):
            return False
        lhs = (y * y) % self.p
        rhs = (pow(x, 3, self.p) + self.a * x + self.b) % self.p
        return lhs == rhs


_P256_PRIME = 0xFFFFFFFF00000001000000000000000000000000FFFFFFFFFFFFFFFFFFFFFFFF
_P384_PRIME = int(
    "FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFE"
    "FFFFFFFF0000000000000000FFFFFFFF",
    16,
)

P256 = CurveParameters(
    name="P-256",
    curve=ec.SECP256R1(),
    p=_P256_PRIME,
    a=_P256_PRIME - 3,
    b=0x5AC635D8AA3A93E7B3EBBD55769886BC651D06B0CC53B0F63BCE3C3E27D2604B,
    n=0xFFFFFFFF00000000FFFFFFFFFFFFFFFFBCE6FAADA7179E84F3B9CAC2FC632551,
    field_size=32,
    scalar_size=32,
    hash_algorithm=hashes.SHA256(),
)

P384 = CurveParameters(
    name="P-384",
    curve=ec.SECP384R1(),
    p=_P384_PRIME,
    a=_P384_PRIME - 3,
    b=int(
        "B3312FA7E23EE7E4988E056BE3F82D19181D9C6EFE8141120314088F5013875A"
        "C656398D8A2ED19D2A85C8EDD3EC2AEF",
        16,
    ),
    n=int(
        "FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFC7634D81F4372DDF"
        "581A0DB248B0A77AECEC196ACCC52973",
        16,
    ),
    field_size=48,
    scalar_size=48,
    hash_algorithm=hashes.SHA384(),
)


# ==============================================================================
# SCALARS
# ==============================================================================


def encode_scalar(d: int, curve: CurveParameters) -> bytes:
    """
    Закодировать скаляр в big-endian фиксированной ширины.

    Ширина сохраняется даже для скаляров с ведущими нулевыми байтами.

    Example:
        >>> encode_scalar(1, P256).hex()
        '0000000000000000000000000000000000000000000000000000000000000001'
    """
    return d.to_bytes(curve.scalar_size, "big")


def decode_scalar(data: bytes, curve: CurveParameters, algorithm: str) -> int:
    """
    Декодировать приватный скаляр из канонической кодировки.

    Args:
        data: Ровно scalar_size байт, big-endian
        curve: Параметры кривой
        algorithm: Имя алгоритма (для ошибок)

    Returns:
        Скаляр d, 0 < d < n

    Raises:
        TypeError: data не bytes
        InvalidKeySizeError: Неверная длина
        ScalarOutOfRangeError: d == 0 или d >= n
    """
    if not isinstance(data, bytes):
        raise TypeError(f"private scalar must be bytes, got {type(data).__name__}")

    if len(data) != curve.scalar_size:
        raise InvalidKeySizeError(
            algorithm, curve.scalar_size, len(data), what="private scalar"
        )

    d = int.from_bytes(data, "big")
    if not 0 < d < curve.n:
        raise ScalarOutOfRangeError(
            f"{algorithm} private scalar must satisfy 0 < d < n",
            algorithm=algorithm,
        )
    return d


def sample_scalar(
    rand: RandomSource,
    curve: CurveParameters,
    algorithm: str,
    *,
    max_attempts: int = MAX_SCALAR_SAMPLING_ATTEMPTS,
) -> int:
    """
    Выбрать скаляр равномерно из [1, n-1] методом rejection sampling.

    Каждая попытка читает scalar_size байт; значения 0 и >= n отбрасываются.

    Args:
        rand: Источник случайности
        curve: Параметры кривой
        algorithm: Имя алгоритма (для ошибок)
        max_attempts: Лимит попыток

    Returns:
        Скаляр d, 0 < d < n

    Raises:
        RandomSourceError: Источник отказал или лимит попыток исчерпан
    """
    for attempt in range(1, max_attempts + 1):
        candidate = int.from_bytes(
            read_random(rand, curve.scalar_size, algorithm), "big"
        )
        if 0 < candidate < curve.n:
            if attempt > 1:
                logger.debug(f"{algorithm}: scalar accepted after {attempt} attempts")
            return candidate

    raise RandomSourceError(
        f"{algorithm}: no scalar in range after {max_attempts} attempts",
        algorithm=algorithm,
        context={"attempts": max_attempts},
    )


def private_key_from_scalar(
    d: int, curve: CurveParameters
) -> ec.EllipticCurvePrivateKey:
    """Построить объект приватного ключа cryptography; публичная точка = d·G."""
    return ec.derive_private_key(d, curve.curve)


# ==============================================================================
# POINTS
# ==============================================================================


def encode_point(public_key: ec.EllipticCurvePublicKey) -> bytes:
    """Несжатая кодировка точки: 0x04 || X || Y."""
    return public_key.public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    )


def decode_point(
    data: bytes, curve: CurveParameters, algorithm: str
) -> ec.EllipticCurvePublicKey:
    """
    Декодировать и проверить несжатую точку.

    Порядок проверок:
        1. Длина == 1 + 2 * field_size и префикс 0x04
        2. Не кодировка точки на бесконечности (X = Y = 0)
        3. Координаты в поле и уравнение кривой
        4. Собственная проверка cryptography (from_encoded_point)

    Args:
        data: Закодированная точка
        curve: Параметры кривой
        algorithm: Имя алгоритма (для ошибок)

    Returns:
        Публичный ключ cryptography

    Raises:
        TypeError: data не bytes
        InvalidPointError: Любая проверка не пройдена
    """
    if not isinstance(data, bytes):
        raise TypeError(f"public key must be bytes, got {type(data).__name__}")

    expected = curve.uncompressed_point_size
    if len(data) != expected:
        raise InvalidPointError(
            f"{algorithm} public key must be an uncompressed point of "
            f"{expected} bytes",
            algorithm=algorithm,
            expected_size=expected,
            actual_size=len(data),
        )

    if data[0] != UNCOMPRESSED_POINT_PREFIX:
        raise InvalidPointError(
            f"{algorithm} public key must start with 0x04 (uncompressed point)",
            algorithm=algorithm,
        )

    fs = curve.field_size
    x = int.from_bytes(data[1 : 1 + fs], "big")
    y = int.from_bytes(data[1 + fs :], "big")

    if x == 0 and y == 0:
        raise InvalidPointError(
            f"{algorithm} public key is the point at infinity",
            algorithm=algorithm,
        )

    if not curve.is_on_curve(x, y):
        raise InvalidPointError(
            f"{algorithm} public key is not on curve {curve.name}",
            algorithm=algorithm,
        )

    try:
        return ec.EllipticCurvePublicKey.from_encoded_point(curve.curve, data)
    except ValueError as exc:
        raise InvalidPointError(
            f"{algorithm} public key rejected by point validation",
            algorithm=algorithm,
        ) from exc


def point_coordinates(public_key: ec.EllipticCurvePublicKey) -> Tuple[int, int]:
    """Аффинные координаты (x, y) публичного ключа."""
    numbers = public_key.public_numbers()
    return numbers.x, numbers.y


__all__ = [
    "CurveParameters",
    "P256",
    "P384",
    "UNCOMPRESSED_POINT_PREFIX",
    "MAX_SCALAR_SAMPLING_ATTEMPTS",
    "encode_scalar",
    "decode_scalar",
    "sample_scalar",
    "private_key_from_scalar",
    "encode_point",
    "decode_point",
    "point_coordinates",
]
