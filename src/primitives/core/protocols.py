"""
Протокольные интерфейсы слоя криптографических примитивов.

Определяет 3 Protocol класса:
- BlockCipherProtocol — блочные шифры с фиксированным размером блока
- KeyExchangeProtocol — Diffie-Hellman обмен ключами на именованной кривой
- SignatureSchemeProtocol — единый byte-in/byte-out контракт подписи

Модуль использует typing.Protocol для определения контрактов, что обеспечивает
structural subtyping без явного наследования. Все Protocol классы помечены
@runtime_checkable для поддержки isinstance() проверок в реестре.

Example:
    >>> from src.primitives.algorithms.signing import Ed25519Scheme
    >>> scheme = Ed25519Scheme()
    >>> isinstance(scheme, SignatureSchemeProtocol)
    True

Version: 1.0
Date: October 2026
"""

from __future__ import annotations

from typing import (
    Any,
    Callable,
    Optional,
    Protocol,
    Tuple,
    runtime_checkable,
)

# Источник случайности: сигнатура os.urandom / secrets.token_bytes.
# Передаётся явно в каждую операцию генерации ключей.
RandomSource = Callable[[int], bytes]


# ==============================================================================
# BLOCK CIPHER PROTOCOL
# ==============================================================================


@runtime_checkable
class BlockCipherProtocol(Protocol):
    """
    Протокол для блочного шифра (один блок за вызов).

    Экземпляр создаётся с ключом; расписание ключей неизменяемо
    после конструирования, поэтому экземпляр можно использовать
    из нескольких потоков.

    Attributes:
        algorithm_name: Название алгоритма ("AES-128", "AES-256")
        key_size: Размер ключа в байтах
        block_size: Размер блока в байтах (16 для AES)

    Validation Rules:
        - src: длина строго == block_size
        - dst: если указан, длина строго == block_size

    Example:
        >>> cipher = AES128BlockCipher(bytes(16))
        >>> block = cipher.encrypt_block(bytes(range(16)))
        >>> cipher.decrypt_block(block) == bytes(range(16))
        True
    """

    algorithm_name: str
    key_size: int
    block_size: int

    def encrypt_block(
        self, src: bytes, dst: Optional[bytearray] = None
    ) -> bytes:
        """
        Зашифровать один блок.

        Args:
            src: Открытый блок (ровно block_size байт)
            dst: Буфер для результата (опционально, записывается in-place)

        Returns:
            Зашифрованный блок

        Raises:
            BufferSizeMismatchError: src или dst не равен block_size
        """
        ...

    def decrypt_block(
        self, src: bytes, dst: Optional[bytearray] = None
    ) -> bytes:
        """Расшифровать один блок (те же правила, что и encrypt_block)."""
        ...


# ==============================================================================
# KEY EXCHANGE PROTOCOL
# ==============================================================================


@runtime_checkable
class KeyExchangeProtocol(Protocol):
    """
    Протокол для обмена ключами (ECDH).

    Attributes:
        algorithm_name: Название алгоритма ("ECDH-P384", "X25519")
        private_key_size: Размер закодированного приватного скаляра
        public_key_size: Размер закодированного публичного ключа
        shared_secret_size: Размер общего секрета (размер поля)

    Security Requirements:
        - parse_public_key ОБЯЗАН проверять принадлежность точки кривой
        - parse_private_key принимает только каноническую кодировку
        - shared_secret НЕ применяет KDF (это задача протокола выше)

    Example:
        >>> kex = ECDHP384KeyExchange()
        >>> priv_a, pub_a = kex.generate_key()
        >>> priv_b, pub_b = kex.generate_key()
        >>> kex.shared_secret(priv_a, pub_b) == kex.shared_secret(priv_b, pub_a)
        True
    """

    algorithm_name: str
    private_key_size: int
    public_key_size: int
    shared_secret_size: int

    def generate_key(self, rand: RandomSource = ...) -> Tuple[Any, Any]:
        """
        Сгенерировать пару ключей.

        Args:
            rand: Источник случайности

        Returns:
            (private_key, public_key)

        Raises:
            RandomSourceError: Источник случайности отказал
        """
        ...

    def parse_private_key(self, data: bytes) -> Any:
        """
        Разобрать приватный ключ из канонической кодировки.

        Raises:
            InvalidKeySizeError: Неверная длина
            ScalarOutOfRangeError: Скаляр вне [1, n-1]
        """
        ...

    def parse_public_key(self, data: bytes) -> Any:
        """
        Разобрать публичный ключ.

        Raises:
            InvalidPointError: Точка не на кривой или на бесконечности
        """
        ...

    def shared_secret(self, private_key: Any, peer_public_key: Any) -> bytes:
        """
        Вычислить общий секрет d·Q (сырая X-координата).

        Raises:
            KeyExchangeError: Несовместимые ключи или отказ примитива
        """
        ...


# ==============================================================================
# SIGNATURE SCHEME PROTOCOL
# ==============================================================================


@runtime_checkable
class SignatureSchemeProtocol(Protocol):
    """
    Единый контракт схемы подписи (byte-in/byte-out).

    Позволяет вызывающему коду менять Ed25519 на ECDSA-P256 без ветвления
    по типу: ключи и подписи — всегда bytes.

    Attributes:
        algorithm_name: Название алгоритма ("Ed25519", "ECDSA-P256")
        public_key_size: Размер публичного ключа в байтах
        private_key_size: Размер приватного ключа в байтах
        signature_size: Размер подписи (максимальный для DER)

    Validation Rules:
        - verify возвращает False для неверной подписи, НЕ бросает исключение
        - неверные типы аргументов (не bytes) → TypeError

    Example:
        >>> scheme = Ed25519Scheme()
        >>> public, private = scheme.generate_key()
        >>> signature = scheme.sign(private, b"Document v1.0")
        >>> scheme.verify(public, b"Document v1.0", signature)
        True
    """

    algorithm_name: str
    public_key_size: int
    private_key_size: int
    signature_size: int

    def generate_key(self, rand: RandomSource = ...) -> Tuple[bytes, bytes]:
        """
        Сгенерировать пару ключей.

        Returns:
            (public_key, private_key)
        """
        ...

    def sign(self, private_key: bytes, message: bytes) -> bytes:
        """Подписать сообщение."""
        ...

    def verify(self, public_key: bytes, message: bytes, signature: bytes) -> bool:
        """
        Проверить подпись.

        Returns:
            True если подпись валидна, False иначе
        """
        ...


__all__ = [
    "RandomSource",
    "BlockCipherProtocol",
    "KeyExchangeProtocol",
    "SignatureSchemeProtocol",
]
