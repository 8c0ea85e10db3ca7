"""
Централизованные исключения слоя криптографических примитивов.

Иерархия типизированных исключений для блочных шифров, обмена ключами
и схем подписи. Каждая ошибка валидации различима по типу, чтобы
вызывающий код мог отличить неправильное использование API
от криптографического отказа.

Example:
    >>> from src.primitives.core.exceptions import CryptoError
    >>> try:
    ...     cipher = AES256BlockCipher(b"short")
    ... except CryptoError as e:
    ...     logger.error(f"Crypto failed: {e}")
    ...     print(f"Algorithm: {e.algorithm}")

Иерархия:
    CryptoError (базовое)
    ├── AlgorithmError
    │   └── AlgorithmNotFoundError
    ├── CryptoKeyError
    │   ├── InvalidKeyError
    │   │   ├── InvalidKeySizeError
    │   │   │   └── InvalidSeedSizeError
    │   │   ├── ScalarOutOfRangeError
    │   │   └── InvalidPointError
    │   └── KeyGenerationError
    │       └── RandomSourceError
    ├── KeyExchangeError
    ├── SignatureError
    │   ├── SigningFailedError
    │   └── InvalidSignatureError
    │       └── MalformedSignatureError
    ├── RegistryError
    │   ├── DuplicateRegistrationError
    │   └── ProtocolValidationError
    └── ValidationError
        └── InvalidInputError
            └── BufferSizeMismatchError

Security Note:
    Все исключения НЕ раскрывают:
    - Ключи, скаляры или seed
    - Открытый текст блоков
    - Другие чувствительные данные

Version: 1.0
Date: October 2026
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

__all__: list[str] = [
    # Base exception
    "CryptoError",
    # Algorithm errors
    "AlgorithmError",
    "AlgorithmNotFoundError",
    # Key errors
    "CryptoKeyError",
    "InvalidKeyError",
    "InvalidKeySizeError",
    "InvalidSeedSizeError",
    "ScalarOutOfRangeError",
    "InvalidPointError",
    "KeyGenerationError",
    "RandomSourceError",
    # Key exchange errors
    "KeyExchangeError",
    # Signature errors
    "SignatureError",
    "SigningFailedError",
    "InvalidSignatureError",
    "MalformedSignatureError",
    # Registry errors
    "RegistryError",
    "DuplicateRegistrationError",
    "ProtocolValidationError",
    # Validation errors
    "ValidationError",
    "InvalidInputError",
    "BufferSizeMismatchError",
]


# ==============================================================================
# BASE EXCEPTION
# ==============================================================================


class CryptoError(Exception):
    """
    Базовое исключение для всех криптографических ошибок.

    Attributes:
        message: Человекочитаемое сообщение об ошибке
        algorithm: Имя алгоритма, вызвавшего ошибку (опционально)
        context: Дополнительный контекст для отладки (опционально)

    Example:
        >>> raise CryptoError(
        ...     "Operation failed",
        ...     algorithm="ECDSA-P256",
        ...     context={"operation": "sign"},
        ... )

    Security Note:
        Сообщения и context НЕ должны содержать ключевой материал.
    """

    def __init__(
        self,
        message: str,
        *,
        algorithm: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.algorithm = algorithm
        self.context = context or {}

    def __str__(self) -> str:
        """
        Строковое представление исключения.

        Example:
            >>> str(error)
            'CryptoError: Operation failed [algorithm=AES-256]'
        """
        parts = [self.__class__.__name__, ": ", self.message]

        if self.algorithm:
            parts.append(f" [algorithm={self.algorithm}]")

        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            parts.append(f" ({ctx_str})")

        return "".join(parts)

    def __repr__(self) -> str:
        """Представление для отладки."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"algorithm={self.algorithm!r}, "
            f"context={self.context!r})"
        )


# ==============================================================================
# ALGORITHM ERRORS
# ==============================================================================


class AlgorithmError(CryptoError):
    """Ошибки выбора или инициализации алгоритма."""

    pass


class AlgorithmNotFoundError(AlgorithmError):
    """
    Алгоритм не найден в реестре.

    Attributes:
        algorithm_name: Имя запрошенного алгоритма
        available: Список доступных алгоритмов

    Example:
        >>> registry.create("ECDH-P999")
        AlgorithmNotFoundError: Algorithm 'ECDH-P999' not found in registry
    """

    def __init__(
        self,
        algorithm_name: str,
        available: Optional[List[str]] = None,
    ) -> None:
        message = f"Algorithm '{algorithm_name}' not found in registry"

        if available:
            message += f". Available: {', '.join(available[:5])}"
            if len(available) > 5:
                message += f" ... ({len(available)} total)"

        super().__init__(
            message,
            algorithm=algorithm_name,
            context={"available_count": len(available) if available else 0},
        )
        self.algorithm_name = algorithm_name
        self.available = available or []


# ==============================================================================
# KEY ERRORS
# ==============================================================================


class CryptoKeyError(CryptoError):
    """
    Базовая ошибка для операций с ключами.

    Note:
        Названа CryptoKeyError чтобы не конфликтовать с builtin KeyError.
    """

    pass


class InvalidKeyError(CryptoKeyError):
    """
    Некорректный ключ.

    Raises когда:
    - Ключ имеет неверный формат
    - Ключ не соответствует спецификации алгоритма
    - Приватный ключ не согласован со своей публичной частью

    Attributes:
        expected_size: Ожидаемый размер ключа в байтах
        actual_size: Фактический размер ключа в байтах
    """

    def __init__(
        self,
        message: str,
        *,
        algorithm: Optional[str] = None,
        expected_size: Optional[int] = None,
        actual_size: Optional[int] = None,
    ) -> None:
        context: Dict[str, Any] = {}
        if expected_size is not None:
            context["expected_size"] = expected_size
        if actual_size is not None:
            context["actual_size"] = actual_size

        super().__init__(message, algorithm=algorithm, context=context)
        self.expected_size = expected_size
        self.actual_size = actual_size


class InvalidKeySizeError(InvalidKeyError):
    """
    Неверный размер ключа, скаляра или seed.

    Алгоритм всегда указан: вызывающий код различает AES-128 и AES-256
    (или P-256 и P-384) по атрибуту ``algorithm`` и ``expected_size``.

    Example:
        >>> InvalidKeySizeError("AES-256", 32, 16)
        InvalidKeySizeError: Invalid key size for AES-256: expected 32 bytes, got 16 bytes
    """

    def __init__(
        self,
        algorithm: str,
        expected: int,
        actual: int,
        *,
        what: str = "key",
    ) -> None:
        message = (
            f"Invalid {what} size for {algorithm}: "
            f"expected {expected} bytes, got {actual} bytes"
        )
        super().__init__(
            message,
            algorithm=algorithm,
            expected_size=expected,
            actual_size=actual,
        )


class InvalidSeedSizeError(InvalidKeySizeError):
    """
    Неверный размер seed для детерминированной генерации ключей.

    Seed никогда не усекается и не дополняется.
    """

    def __init__(self, algorithm: str, expected: int, actual: int) -> None:
        super().__init__(algorithm, expected, actual, what="seed")


class ScalarOutOfRangeError(InvalidKeyError):
    """
    Приватный скаляр вне диапазона [1, n-1].

    Raises когда:
    - d == 0
    - d >= n (порядок группы кривой)

    Security Note:
        Значение скаляра НЕ попадает в сообщение.
    """

    pass


class InvalidPointError(InvalidKeyError):
    """
    Публичный ключ не является допустимой точкой кривой.

    Raises когда:
    - Неверная длина или префикс кодировки (ожидается 0x04 || X || Y)
    - Координаты вне поля
    - Точка не удовлетворяет уравнению кривой (invalid-curve атаки)
    - Точка на бесконечности
    """

    pass


class KeyGenerationError(CryptoKeyError):
    """
    Ошибка генерации ключа.

    Raises когда:
    - Не удалось сгенерировать ключ
    - Внутренняя ошибка примитива
    """

    pass


class RandomSourceError(KeyGenerationError):
    """
    Источник случайности вернул ошибку или недостаточно байтов.

    Note:
        Повторные попытки с другим (более слабым) источником
        НЕ выполняются никогда.
    """

    pass


# ==============================================================================
# KEY EXCHANGE ERRORS
# ==============================================================================


class KeyExchangeError(CryptoError):
    """
    Ошибка вычисления общего секрета.

    Raises когда:
    - Ключи принадлежат другому алгоритму
    - Примитив отказался выполнить операцию (например, нулевой секрет X25519)
    """

    pass


# ==============================================================================
# SIGNATURE ERRORS
# ==============================================================================


class SignatureError(CryptoError):
    """Базовая ошибка операций с подписями."""

    pass


class SigningFailedError(SignatureError):
    """
    Неудачная генерация подписи.

    Example:
        >>> signature = ecdsa.sign_digest(private_key, digest)
        SigningFailedError: ECDSA-P256 signing failed
    """

    pass


class InvalidSignatureError(SignatureError):
    """
    Некорректная подпись (формат или размер).

    Attributes:
        expected_size: Ожидаемый размер подписи
        actual_size: Фактический размер подписи
    """

    def __init__(
        self,
        message: str,
        *,
        algorithm: Optional[str] = None,
        expected_size: Optional[int] = None,
        actual_size: Optional[int] = None,
    ) -> None:
        context: Dict[str, Any] = {}
        if expected_size is not None:
            context["expected_signature_size"] = expected_size
        if actual_size is not None:
            context["actual_signature_size"] = actual_size

        super().__init__(message, algorithm=algorithm, context=context)
        self.expected_size = expected_size
        self.actual_size = actual_size


class MalformedSignatureError(InvalidSignatureError):
    """
    DER-подпись не прошла строгое декодирование.

    Raises когда:
    - Лишние байты после SEQUENCE
    - Неминимальная кодировка длины или INTEGER
    - Компонента R или S отсутствует, NULL, отрицательна или равна нулю

    Note:
        Неканоническая кодировка отклоняется, а не исправляется.
    """

    pass


# ==============================================================================
# REGISTRY ERRORS
# ==============================================================================


class RegistryError(CryptoError):
    """Базовая ошибка реестра алгоритмов."""

    pass


class DuplicateRegistrationError(RegistryError):
    """Алгоритм с таким именем уже зарегистрирован."""

    def __init__(self, algorithm_name: str) -> None:
        super().__init__(
            f"Algorithm '{algorithm_name}' is already registered",
            algorithm=algorithm_name,
        )
        self.algorithm_name = algorithm_name


class ProtocolValidationError(RegistryError):
    """Экземпляр алгоритма не реализует заявленный Protocol."""

    pass


# ==============================================================================
# VALIDATION ERRORS
# ==============================================================================


class ValidationError(CryptoError):
    """Базовая ошибка валидации входных данных."""

    pass


class InvalidInputError(ValidationError):
    """
    Некорректные входные данные.

    Example:
        >>> ecdsa.sign_digest(priv, b"not a digest")
        InvalidInputError: ECDSA-P256 digest must be 32 bytes, got 12
    """

    pass


class BufferSizeMismatchError(InvalidInputError):
    """
    Буфер src/dst не равен размеру блока.

    Attributes:
        expected_size: Размер блока алгоритма
        actual_size: Фактический размер буфера
    """

    def __init__(
        self,
        algorithm: str,
        expected: int,
        actual: int,
        *,
        buffer_name: str = "src",
    ) -> None:
        super().__init__(
            f"{algorithm} {buffer_name} buffer must be exactly {expected} bytes, "
            f"got {actual}",
            algorithm=algorithm,
            context={"buffer": buffer_name, "expected_size": expected, "actual_size": actual},
        )
        self.expected_size = expected
        self.actual_size = actual
