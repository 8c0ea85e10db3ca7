"""
Типизированный слой ECDSA: ключи, кодировки и строгий DER.

Этот модуль содержит всю логику валидации ECDSA, на которую опирается
фасад ECDSAP256Scheme из signing.py:

    - Приватный скаляр: ровно scalar_size байт, 0 < d < n
    - Публичная точка: несжатая, на кривой, не точка на бесконечности
    - Подпись: DER SEQUENCE { INTEGER r, INTEGER s }, строгое декодирование

Strict DER:
    DER сам по себе не гарантирует уникальность кодировки на практике:
    многие парсеры принимают лишние байты, неминимальные длины или
    INTEGER с лишними ведущими нулями. Здесь подпись принимается,
    только если:

    1. decode_dss_signature (cryptography) разбирает её без ошибок
    2. r > 0 и s > 0
    3. Повторное кодирование (r, s) даёт ровно те же байты

    Проверка подписи выполняется над канонической перекодировкой, поэтому
    интерпретация подписи всегда однозначна.

Example:
    >>> from src.primitives.algorithms.ecdsa import ECDSA_P256
    >>> import hashlib
    >>> priv, pub = ECDSA_P256.generate_key_pair()
    >>> digest = hashlib.sha256(b"message").digest()
    >>> der = ECDSA_P256.sign_digest(priv, digest)
    >>> ECDSA_P256.verify_digest(pub, digest, der)
    True

Version: 1.0
Date: October 2026
"""

from __future__ import annotations

import hmac
import logging
import os
from typing import Tuple

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.utils import (
    Prehashed,
    decode_dss_signature,
    encode_dss_signature,
)

from src.primitives.core.curves import (
    P256,
    CurveParameters,
    decode_point,
    decode_scalar,
    encode_point,
    encode_scalar,
    point_coordinates,
    private_key_from_scalar,
    sample_scalar,
)
from src.primitives.core.exceptions import (
    InvalidInputError,
    InvalidKeyError,
    KeyGenerationError,
    MalformedSignatureError,
    SigningFailedError,
)
from src.primitives.core.protocols import RandomSource

logger = logging.getLogger(__name__)


def _ensure_bytes(value: bytes, name: str) -> None:
    if not isinstance(value, bytes):
        raise TypeError(f"{name} must be bytes, got {type(value).__name__}")


# ==============================================================================
# KEY OBJECTS
# ==============================================================================


class ECDSAPublicKey:
    """
    Публичный ключ ECDSA: проверенная точка (x, y) на кривой.

    Два ключа равны, если совпадают кривая и координаты.
    """

    def __init__(self, curve: CurveParameters, key: ec.EllipticCurvePublicKey) -> None:
        self.curve = curve
        self._key = key
        self.x, self.y = point_coordinates(key)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ECDSAPublicKey):
            return NotImplemented
        return (
            self.curve.name == other.curve.name
            and self.x == other.x
            and self.y == other.y
        )

    def __hash__(self) -> int:
        return hash((self.curve.name, self.x, self.y))

    def __repr__(self) -> str:
        return f"ECDSAPublicKey(curve={self.curve.name!r}, x={self.x:#x})"


class ECDSAPrivateKey:
    """
    Приватный ключ ECDSA: скаляр d и публичная точка d·G.

    Attributes:
        curve: Параметры кривой
        public_key: Соответствующий ECDSAPublicKey

    Security Note:
        Скаляр не выводится в __repr__; сравнение за постоянное время.
    """

    def __init__(
        self,
        curve: CurveParameters,
        d: int,
        key: ec.EllipticCurvePrivateKey,
    ) -> None:
        self.curve = curve
        self._d = d
        self._key = key
        self.public_key = ECDSAPublicKey(curve, key.public_key())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ECDSAPrivateKey):
            return NotImplemented
        return self.curve.name == other.curve.name and hmac.compare_digest(
            encode_scalar(self._d, self.curve), encode_scalar(other._d, other.curve)
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"ECDSAPrivateKey(curve={self.curve.name!r}, <redacted>)"


# ==============================================================================
# ECDSA
# ==============================================================================


class ECDSA:
    """
    ECDSA над кривой, заданной CurveParameters.

    Подписывается дайджест, а не сообщение: хеширование выполняет
    вызывающий код. Длина дайджеста должна равняться размеру хеша кривой
    (32 байта для P-256).

    Signing:
        Подпись рандомизирована; nonce k генерирует примитив cryptography
        (OpenSSL). Источник случайности вызывающего кода используется
        только для генерации ключей.

    Example:
        >>> ecdsa = ECDSA(P256)
        >>> priv = ecdsa.parse_private_key(scalar_bytes)
        >>> der = ecdsa.sign_digest(priv, digest)
        >>> r, s = ecdsa.parse_signature_components(der)
    """

    def __init__(self, curve: CurveParameters) -> None:
        self.curve = curve
        self.algorithm_name = f"ECDSA-{curve.name.replace('-', '')}"
        self._algorithm = ec.ECDSA(Prehashed(curve.hash_algorithm))
        self._logger = logger.getChild(self.algorithm_name.lower())

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def _private_from_scalar(self, d: int) -> ECDSAPrivateKey:
        try:
            key = private_key_from_scalar(d, self.curve)
        except Exception as exc:
            self._logger.error(
                f"{self.algorithm_name} key derivation failed: {exc}", exc_info=True
            )
            raise KeyGenerationError(
                f"{self.algorithm_name} key derivation failed",
                algorithm=self.algorithm_name,
            ) from exc
        return ECDSAPrivateKey(self.curve, d, key)

    def generate_key_pair(
        self, rand: RandomSource = os.urandom
    ) -> Tuple[ECDSAPrivateKey, ECDSAPublicKey]:
        """
        Сгенерировать пару ключей.

        Returns:
            (private_key, public_key)

        Raises:
            RandomSourceError: Источник случайности отказал
        """
        self._logger.debug(f"Generating {self.algorithm_name} keypair...")
        priv = self._private_from_scalar(
            sample_scalar(rand, self.curve, self.algorithm_name)
        )
        return priv, priv.public_key

    def parse_private_key(self, scalar_bytes: bytes) -> ECDSAPrivateKey:
        """
        Разобрать приватный ключ из скаляра.

        Args:
            scalar_bytes: Ровно scalar_size байт, big-endian

        Raises:
            TypeError: Не bytes
            InvalidKeySizeError: Неверная длина
            ScalarOutOfRangeError: d == 0 или d >= n
        """
        return self._private_from_scalar(
            decode_scalar(scalar_bytes, self.curve, self.algorithm_name)
        )

    def marshal_private_key(self, priv: ECDSAPrivateKey) -> bytes:
        """Скаляр фиксированной ширины (ведущие нули сохраняются)."""
        self._check_curve(priv)
        return encode_scalar(priv._d, self.curve)

    def marshal_public_key(self, pub: ECDSAPublicKey) -> bytes:
        """Несжатая точка 0x04 || X || Y."""
        self._check_curve(pub)
        return encode_point(pub._key)

    def parse_public_key(self, data: bytes) -> ECDSAPublicKey:
        """
        Разобрать несжатую публичную точку.

        Raises:
            TypeError: Не bytes
            InvalidPointError: Точка не на кривой, на бесконечности
                или кодировка неверна
        """
        return ECDSAPublicKey(
            self.curve, decode_point(data, self.curve, self.algorithm_name)
        )

    def _check_curve(self, key: object) -> None:
        if not isinstance(key, (ECDSAPrivateKey, ECDSAPublicKey)):
            raise TypeError(f"expected ECDSA key, got {type(key).__name__}")
        if key.curve.name != self.curve.name:
            raise InvalidKeyError(
                f"{self.algorithm_name} cannot use a key on {key.curve.name}",
                algorithm=self.algorithm_name,
            )

    def _check_digest(self, digest: bytes) -> None:
        _ensure_bytes(digest, "digest")
        if len(digest) != self.curve.digest_size:
            raise InvalidInputError(
                f"{self.algorithm_name} digest must be "
                f"{self.curve.digest_size} bytes, got {len(digest)}",
                algorithm=self.algorithm_name,
            )

    # ------------------------------------------------------------------
    # Signatures
    # ------------------------------------------------------------------

    def sign_digest(self, priv: ECDSAPrivateKey, digest: bytes) -> bytes:
        """
        Подписать дайджест.

        Args:
            priv: Приватный ключ
            digest: Дайджест сообщения (digest_size байт)

        Returns:
            DER SEQUENCE { INTEGER r, INTEGER s }

        Raises:
            InvalidInputError: Неверная длина дайджеста
            SigningFailedError: Примитив не смог подписать
        """
        self._check_curve(priv)
        self._check_digest(digest)

        try:
            signature = priv._key.sign(digest, self._algorithm)
        except Exception as exc:
            self._logger.error(
                f"{self.algorithm_name} signing failed: {exc}", exc_info=True
            )
            raise SigningFailedError(
                f"{self.algorithm_name} signing failed",
                algorithm=self.algorithm_name,
            ) from exc

        self._logger.debug(f"{self.algorithm_name}: signed ({len(signature)}B DER)")
        return signature

    def parse_signature_components(self, der: bytes) -> Tuple[int, int]:
        """
        Строго декодировать DER-подпись в (r, s).

        Отклоняются: не-SEQUENCE, лишние байты, неопределённые или
        неминимальные длины, неминимальные или отрицательные INTEGER,
        отсутствующие или NULL компоненты, нулевые r/s.

        Returns:
            (r, s), оба > 0

        Raises:
            TypeError: der не bytes
            MalformedSignatureError: Любое нарушение строгого DER
        """
        _ensure_bytes(der, "signature")

        try:
            r, s = decode_dss_signature(der)
        except ValueError as exc:
            raise MalformedSignatureError(
                f"{self.algorithm_name} signature is not valid DER",
                algorithm=self.algorithm_name,
                actual_size=len(der),
            ) from exc

        if r <= 0 or s <= 0:
            raise MalformedSignatureError(
                f"{self.algorithm_name} signature component is zero or negative",
                algorithm=self.algorithm_name,
            )

        if encode_dss_signature(r, s) != der:
            raise MalformedSignatureError(
                f"{self.algorithm_name} signature is not canonical DER",
                algorithm=self.algorithm_name,
                actual_size=len(der),
            )

        return r, s

    def verify_digest(self, pub: ECDSAPublicKey, digest: bytes, der: bytes) -> bool:
        """
        Проверить DER-подпись над дайджестом.

        Returns:
            True если подпись валидна; False если r/s вне [1, n-1]
            или арифметическая проверка не прошла

        Raises:
            MalformedSignatureError: DER не прошёл строгое декодирование
            InvalidInputError: Неверная длина дайджеста
        """
        self._check_curve(pub)
        self._check_digest(digest)
        r, s = self.parse_signature_components(der)

        if r >= self.curve.n or s >= self.curve.n:
            self._logger.debug(f"{self.algorithm_name}: r or s out of range")
            return False

        try:
            pub._key.verify(encode_dss_signature(r, s), digest, self._algorithm)
        except InvalidSignature:
            return False
        return True


ECDSA_P256 = ECDSA(P256)


__all__ = [
    "ECDSA",
    "ECDSA_P256",
    "ECDSAPrivateKey",
    "ECDSAPublicKey",
]
