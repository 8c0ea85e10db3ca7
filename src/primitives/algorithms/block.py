"""
Блочные шифры AES-128 и AES-256 (один блок за вызов).

Модуль реализует абстракцию BlockCipher: ключевое расписание строится один
раз в конструкторе, после чего экземпляр шифрует и расшифровывает ровно
один 16-байтовый блок за вызов. Режимы работы (GCM, CTR и т.д.) строятся
выше по стеку и здесь не реализуются.

Algorithms:
    1. AES-128 (FIPS 197) — 16-байтовый ключ
    2. AES-256 (FIPS 197) — 32-байтовый ключ

Validation Rules:
    - Длина ключа проверяется ДО построения примитива
    - InvalidKeySizeError несёт имя алгоритма ("AES-128"/"AES-256")
      и ожидаемый размер, чтобы вызывающий код мог различить варианты
    - src/dst должны быть ровно 16 байт, иначе BufferSizeMismatchError

Thread Safety:
    Объект Cipher из cryptography неизменяем; каждый вызов открывает
    собственный контекст encryptor/decryptor, поэтому один экземпляр
    безопасно использовать из нескольких потоков.

Example:
    >>> from src.primitives.algorithms.block import new_aes128
    >>> cipher = new_aes128(bytes(16))
    >>> block = cipher.encrypt_block(bytes(range(16)))
    >>> cipher.decrypt_block(block) == bytes(range(16))
    True

Version: 1.0
Date: October 2026
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Optional, Type

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from src.primitives.core.entropy import read_random
from src.primitives.core.exceptions import (
    BufferSizeMismatchError,
    CryptoError,
    InvalidKeySizeError,
)
from src.primitives.core.metadata import (
    AlgorithmMetadata,
    SecurityLevel,
    create_block_cipher_metadata,
)
from src.primitives.core.protocols import BlockCipherProtocol, RandomSource

logger = logging.getLogger(__name__)


# ==============================================================================
# CONSTANTS
# ==============================================================================

AES_BLOCK_SIZE = 16  # bytes
AES128_KEY_SIZE = 16  # bytes
AES256_KEY_SIZE = 32  # bytes


def aes_block_size() -> int:
    """Размер блока AES в байтах (16)."""
    return AES_BLOCK_SIZE


def aes128_key_size() -> int:
    """Размер ключа AES-128 в байтах (16)."""
    return AES128_KEY_SIZE


def aes256_key_size() -> int:
    """Размер ключа AES-256 в байтах (32)."""
    return AES256_KEY_SIZE


# ==============================================================================
# BASE CLASS
# ==============================================================================


class _AESBlockCipherBase:
    """
    Общая логика AES-128/AES-256.

    Подклассы задают только algorithm_name и key_size.
    """

    algorithm_name: str
    key_size: int
    block_size: int = AES_BLOCK_SIZE

    def __init__(self, key: bytes) -> None:
        """
        Построить ключевое расписание.

        Args:
            key: Ключ ровно key_size байт

        Raises:
            TypeError: key не bytes
            InvalidKeySizeError: Неверная длина ключа
        """
        if not isinstance(key, (bytes, bytearray)):
            raise TypeError(f"Key must be bytes, got {type(key).__name__}")

        if len(key) != self.key_size:
            raise InvalidKeySizeError(self.algorithm_name, self.key_size, len(key))

        # Одноблочный ECB: ровно одно применение блочного преобразования.
        self._cipher = Cipher(algorithms.AES(bytes(key)), modes.ECB())
        self._logger = logger.getChild(self.algorithm_name.lower())

    @classmethod
    def generate_key(cls, rand: RandomSource = os.urandom) -> bytes:
        """
        Сгенерировать случайный ключ нужного размера.

        Args:
            rand: Источник случайности

        Returns:
            Ключ длиной key_size

        Raises:
            RandomSourceError: Источник случайности отказал
        """
        return read_random(rand, cls.key_size, cls.algorithm_name)

    def _check_buffers(
        self, src: bytes, dst: Optional[bytearray]
    ) -> None:
        if not isinstance(src, (bytes, bytearray, memoryview)):
            raise TypeError(f"src must be bytes, got {type(src).__name__}")

        if len(src) != self.block_size:
            raise BufferSizeMismatchError(
                self.algorithm_name, self.block_size, len(src), buffer_name="src"
            )

        if dst is None:
            return

        if not isinstance(dst, (bytearray, memoryview)) or memoryview(dst).readonly:
            raise TypeError(
                f"dst must be a writable buffer, got {type(dst).__name__}"
            )

        if len(dst) != self.block_size:
            raise BufferSizeMismatchError(
                self.algorithm_name, self.block_size, len(dst), buffer_name="dst"
            )

    def _transform(
        self, src: bytes, dst: Optional[bytearray], *, encrypt: bool
    ) -> bytes:
        self._check_buffers(src, dst)

        try:
            ctx = self._cipher.encryptor() if encrypt else self._cipher.decryptor()
            out = ctx.update(bytes(src)) + ctx.finalize()
        except Exception as exc:
            operation = "encryption" if encrypt else "decryption"
            self._logger.error(
                f"{self.algorithm_name} block {operation} failed: {exc}",
                exc_info=True,
            )
            raise CryptoError(
                f"{self.algorithm_name} block {operation} failed",
                algorithm=self.algorithm_name,
            ) from exc

        if dst is not None:
            dst[:] = out
        return out

    def encrypt_block(
        self, src: bytes, dst: Optional[bytearray] = None
    ) -> bytes:
        """
        Зашифровать один блок.

        Args:
            src: Открытый блок (ровно 16 байт)
            dst: Записываемый буфер для результата (ровно 16 байт, опционально)

        Returns:
            Зашифрованный блок (также записан в dst, если dst указан)

        Raises:
            TypeError: src не bytes-like или dst не записываемый буфер
            BufferSizeMismatchError: src или dst не 16 байт
        """
        return self._transform(src, dst, encrypt=True)

    def decrypt_block(
        self, src: bytes, dst: Optional[bytearray] = None
    ) -> bytes:
        """Расшифровать один блок (правила те же, что и у encrypt_block)."""
        return self._transform(src, dst, encrypt=False)

    def __repr__(self) -> str:
        # Ключ не выводится никогда
        return f"{self.__class__.__name__}(algorithm={self.algorithm_name!r})"


# ==============================================================================
# CONCRETE CIPHERS
# ==============================================================================


class AES128BlockCipher(_AESBlockCipherBase):
    """
    AES-128 — блочный шифр FIPS 197 со 128-битным ключом.

    Example:
        >>> cipher = AES128BlockCipher(bytes.fromhex("000102030405060708090a0b0c0d0e0f"))
        >>> cipher.encrypt_block(
        ...     bytes.fromhex("00112233445566778899aabbccddeeff")
        ... ).hex()
        '69c4e0d86a7b0430d8cdb78070b4c55a'
    """

    algorithm_name = "AES-128"
    key_size = AES128_KEY_SIZE


class AES256BlockCipher(_AESBlockCipherBase):
    """
    AES-256 — блочный шифр FIPS 197 с 256-битным ключом.

    Размер блока тот же (16 байт); отличается только длина ключа
    и число раундов (14 вместо 10).
    """

    algorithm_name = "AES-256"
    key_size = AES256_KEY_SIZE


def new_aes128(key: bytes) -> AES128BlockCipher:
    """
    Создать AES-128 шифр.

    Raises:
        InvalidKeySizeError: len(key) != 16 (algorithm="AES-128")
    """
    return AES128BlockCipher(key)


def new_aes256(key: bytes) -> AES256BlockCipher:
    """
    Создать AES-256 шифр.

    Raises:
        InvalidKeySizeError: len(key) != 32 (algorithm="AES-256")
    """
    return AES256BlockCipher(key)


# ==============================================================================
# ALGORITHM METADATA
# ==============================================================================

METADATA_AES128 = create_block_cipher_metadata(
    name="AES-128",
    implementation_class="src.primitives.algorithms.block.AES128BlockCipher",
    key_size=AES128_KEY_SIZE,
    block_size=AES_BLOCK_SIZE,
    security_level=SecurityLevel.STANDARD,
    description_ru="AES-128 — блочный шифр FIPS 197, один блок за вызов.",
    description_en="AES-128 block cipher (FIPS 197), single-block transform.",
    test_vectors_source="FIPS 197 Appendix C.1",
    use_cases=["Building block for CTR/GCM modes", "Key wrapping"],
)

METADATA_AES256 = create_block_cipher_metadata(
    name="AES-256",
    implementation_class="src.primitives.algorithms.block.AES256BlockCipher",
    key_size=AES256_KEY_SIZE,
    block_size=AES_BLOCK_SIZE,
    security_level=SecurityLevel.HIGH,
    description_ru="AES-256 — блочный шифр FIPS 197, один блок за вызов.",
    description_en="AES-256 block cipher (FIPS 197), single-block transform.",
    test_vectors_source="FIPS 197 Appendix C.3",
    use_cases=["Building block for CTR/GCM modes", "Long-term data protection"],
)


# ==============================================================================
# REGISTRY
# ==============================================================================

BLOCK_CIPHERS: Dict[str, tuple[Type[_AESBlockCipherBase], AlgorithmMetadata]] = {
    "aes-128": (AES128BlockCipher, METADATA_AES128),
    "aes-256": (AES256BlockCipher, METADATA_AES256),
}


def get_block_cipher(algorithm_id: str, key: bytes) -> BlockCipherProtocol:
    """
    Создать блочный шифр по ID.

    Args:
        algorithm_id: "aes-128" или "aes-256" (регистр не важен)
        key: Ключ шифра

    Returns:
        Экземпляр, реализующий BlockCipherProtocol

    Raises:
        KeyError: Если алгоритм не найден
        InvalidKeySizeError: Неверная длина ключа
    """
    try:
        cipher_cls, _ = BLOCK_CIPHERS[algorithm_id.lower()]
    except KeyError as exc:
        raise KeyError(
            f"Block cipher '{algorithm_id}' not found. "
            f"Available: {list(BLOCK_CIPHERS.keys())}"
        ) from exc

    return cipher_cls(key)  # type: ignore[return-value]


__all__ = [
    "AES128BlockCipher",
    "AES256BlockCipher",
    "new_aes128",
    "new_aes256",
    "aes_block_size",
    "aes128_key_size",
    "aes256_key_size",
    "AES_BLOCK_SIZE",
    "AES128_KEY_SIZE",
    "AES256_KEY_SIZE",
    "METADATA_AES128",
    "METADATA_AES256",
    "BLOCK_CIPHERS",
    "get_block_cipher",
]
