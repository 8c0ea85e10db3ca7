"""
Метаданные криптографических примитивов.

Единая система метаданных для блочных шифров, обмена ключами и схем подписи.
Определяет:
- AlgorithmMetadata — immutable dataclass с характеристиками алгоритма
- Enums для категоризации (AlgorithmCategory, SecurityLevel,
  ImplementationStatus)
- Factory functions для создания метаданных
- Validation правила

Example:
    >>> from src.primitives.core.metadata import create_block_cipher_metadata
    >>> metadata = create_block_cipher_metadata(
    ...     name="AES-128",
    ...     implementation_class="src.primitives.algorithms.block.AES128BlockCipher",
    ...     key_size=16,
    ... )
    >>> metadata.is_safe_for_production()
    True

Version: 1.0
Date: October 2026
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Type

from src.primitives.core.protocols import (
    BlockCipherProtocol,
    KeyExchangeProtocol,
    SignatureSchemeProtocol,
)


# ==============================================================================
# ENUM: ALGORITHM CATEGORY
# ==============================================================================


class AlgorithmCategory(str, Enum):
    """
    Категория криптографического примитива.

    Наследует str для корректной JSON сериализации.

    Example:
        >>> category = AlgorithmCategory.BLOCK_CIPHER
        >>> category.value
        'block_cipher'
        >>> category.label()
        'Блочный шифр'
    """

    BLOCK_CIPHER = "block_cipher"
    KEY_EXCHANGE = "key_exchange"
    SIGNATURE = "signature"

    def label(self) -> str:
        """Человекочитаемое название категории на русском."""
        labels = {
            AlgorithmCategory.BLOCK_CIPHER: "Блочный шифр",
            AlgorithmCategory.KEY_EXCHANGE: "Обмен ключами",
            AlgorithmCategory.SIGNATURE: "Цифровая подпись",
        }
        return labels[self]

    @classmethod
    def from_str(cls, value: str) -> AlgorithmCategory:
        """
        Парсинг из строки (case-insensitive).

        Args:
            value: Строковое представление ("block_cipher" или "BLOCK_CIPHER")

        Returns:
            Соответствующий AlgorithmCategory

        Raises:
            ValueError: Некорректное значение
        """
        try:
            return cls[value.upper()]
        except KeyError:
            raise ValueError(
                f"Неизвестная категория алгоритма: {value}. "
                f"Допустимые значения: {[c.value for c in cls]}"
            ) from None


# ==============================================================================
# ENUM: SECURITY LEVEL
# ==============================================================================


class SecurityLevel(str, Enum):
    """
    Уровень безопасности примитива.

    Градация:
        - LEGACY: Только для совместимости
        - STANDARD: ~128 бит (AES-128, P-256, X25519, Ed25519)
        - HIGH: ~192-256 бит (AES-256, P-384, X448)
    """

    LEGACY = "legacy"
    STANDARD = "standard"
    HIGH = "high"

    def label(self) -> str:
        """Человекочитаемое название на русском."""
        labels = {
            SecurityLevel.LEGACY: "Устаревший",
            SecurityLevel.STANDARD: "Стандартный",
            SecurityLevel.HIGH: "Повышенный",
        }
        return labels[self]

    def is_safe_for_new_systems(self) -> bool:
        """False только для LEGACY."""
        return self is not SecurityLevel.LEGACY


# ==============================================================================
# ENUM: IMPLEMENTATION STATUS
# ==============================================================================


class ImplementationStatus(str, Enum):
    """
    Статус реализации алгоритма.

    Values:
        - STABLE: Production-ready
        - EXPERIMENTAL: Экспериментальный
        - DEPRECATED: Устаревший, не использовать в новом коде
    """

    STABLE = "stable"
    EXPERIMENTAL = "experimental"
    DEPRECATED = "deprecated"

    def label(self) -> str:
        """Человекочитаемое название на русском."""
        labels = {
            ImplementationStatus.STABLE: "Стабильный",
            ImplementationStatus.EXPERIMENTAL: "Экспериментальный",
            ImplementationStatus.DEPRECATED: "Устаревший",
        }
        return labels[self]


# ==============================================================================
# DATACLASS: ALGORITHM METADATA
# ==============================================================================


@dataclass(frozen=True)
class AlgorithmMetadata:
    """
    Метаданные криптографического примитива.

    Attributes:
        name: Уникальное имя алгоритма (например, "ECDSA-P256")
        category: Категория алгоритма
        protocol_class: Protocol класс для проверки соответствия
        library: Python библиотека, выполняющая примитив
        implementation_class: Полное имя класса реализации
        security_level: Уровень безопасности
        status: Статус реализации
        key_size: Размер симметричного ключа в байтах (блочные шифры)
        block_size: Размер блока в байтах (блочные шифры)
        signature_size: Размер подписи (максимальный для DER)
        public_key_size: Размер публичного ключа
        private_key_size: Размер приватного ключа
        shared_secret_size: Размер общего секрета (обмен ключами)
        seed_size: Размер seed для детерминированной генерации
        curve: Имя кривой ("P-256", "P-384", "Curve25519")
        is_deterministic: Детерминированная подпись (Ed25519)
        description_ru: Краткое описание на русском
        description_en: Краткое описание на английском
        use_cases: Рекомендуемые сценарии использования
        test_vectors_source: Источник тестовых векторов (FIPS, RFC)
        extra: Дополнительные параметры (гибкое поле)

    Example:
        >>> meta = REGISTRY.get_metadata("Ed25519")
        >>> meta.signature_size
        64
        >>> meta.category.label()
        'Цифровая подпись'
    """

    # Обязательные поля
    name: str
    category: AlgorithmCategory
    protocol_class: Type[object]
    library: str
    implementation_class: str
    security_level: SecurityLevel
    status: ImplementationStatus

    # Опциональные размеры (зависят от категории)
    key_size: Optional[int] = None
    block_size: Optional[int] = None
    signature_size: Optional[int] = None
    public_key_size: Optional[int] = None
    private_key_size: Optional[int] = None
    shared_secret_size: Optional[int] = None
    seed_size: Optional[int] = None

    curve: Optional[str] = None
    is_deterministic: bool = False

    # Описания
    description_ru: str = ""
    description_en: str = ""
    use_cases: List[str] = field(default_factory=list)

    test_vectors_source: Optional[str] = None

    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """
        Валидация метаданных после инициализации.

        Raises:
            ValueError: Некорректные значения полей
        """
        if not self.name or not self.name.strip():
            raise ValueError("name не может быть пустым")

        allowed_libraries = {"cryptography"}
        if self.library not in allowed_libraries:
            raise ValueError(
                f"Неизвестная библиотека: {self.library}. "
                f"Допустимые: {allowed_libraries}"
            )

        if self.category == AlgorithmCategory.BLOCK_CIPHER:
            if self.key_size is None or self.block_size is None:
                raise ValueError(
                    f"Блочный шифр {self.name} требует key_size и block_size"
                )

        if self.category == AlgorithmCategory.KEY_EXCHANGE:
            if self.public_key_size is None or self.shared_secret_size is None:
                raise ValueError(
                    f"Обмен ключами {self.name} требует public_key_size "
                    f"и shared_secret_size"
                )

        if self.category == AlgorithmCategory.SIGNATURE:
            if self.signature_size is None or self.public_key_size is None:
                raise ValueError(
                    f"Алгоритм подписи {self.name} требует signature_size "
                    f"и public_key_size"
                )

        for size_attr in [
            "key_size",
            "block_size",
            "signature_size",
            "public_key_size",
            "private_key_size",
            "shared_secret_size",
            "seed_size",
        ]:
            size_value = getattr(self, size_attr)
            if size_value is not None and size_value <= 0:
                raise ValueError(f"{size_attr} должен быть > 0, получено {size_value}")

    def is_safe_for_production(self) -> bool:
        """
        Безопасен ли алгоритм для production использования.

        Returns:
            True если status=STABLE и security_level не LEGACY
        """
        return (
            self.status == ImplementationStatus.STABLE
            and self.security_level.is_safe_for_new_systems()
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Сериализация в словарь (для JSON/YAML).

        Note:
            protocol_class не сериализуется.
        """
        return {
            "name": self.name,
            "category": self.category.value,
            "library": self.library,
            "implementation_class": self.implementation_class,
            "security_level": self.security_level.value,
            "status": self.status.value,
            "key_size": self.key_size,
            "block_size": self.block_size,
            "signature_size": self.signature_size,
            "public_key_size": self.public_key_size,
            "private_key_size": self.private_key_size,
            "shared_secret_size": self.shared_secret_size,
            "seed_size": self.seed_size,
            "curve": self.curve,
            "is_deterministic": self.is_deterministic,
            "description_ru": self.description_ru,
            "description_en": self.description_en,
            "use_cases": list(self.use_cases),
            "test_vectors_source": self.test_vectors_source,
            "extra": dict(self.extra),
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        protocol_class: Optional[Type[object]] = None,
    ) -> AlgorithmMetadata:
        """
        Десериализация из словаря (из to_dict()).

        Args:
            data: Словарь с метаданными
            protocol_class: Protocol класс; по умолчанию выводится из категории

        Raises:
            ValueError: Некорректные данные
        """
        data = data.copy()

        category = AlgorithmCategory.from_str(data["category"])
        data["category"] = category
        data["security_level"] = SecurityLevel(data["security_level"])
        data["status"] = ImplementationStatus(data["status"])
        data["protocol_class"] = protocol_class or _CATEGORY_PROTOCOLS[category]

        return cls(**data)


_CATEGORY_PROTOCOLS: Dict[AlgorithmCategory, Type[object]] = {
    AlgorithmCategory.BLOCK_CIPHER: BlockCipherProtocol,
    AlgorithmCategory.KEY_EXCHANGE: KeyExchangeProtocol,
    AlgorithmCategory.SIGNATURE: SignatureSchemeProtocol,
}


# ==============================================================================
# FACTORY FUNCTIONS
# ==============================================================================


def create_block_cipher_metadata(
    name: str,
    implementation_class: str,
    key_size: int,
    block_size: int = 16,
    *,
    library: str = "cryptography",
    security_level: SecurityLevel = SecurityLevel.STANDARD,
    status: ImplementationStatus = ImplementationStatus.STABLE,
    description_ru: str = "",
    description_en: str = "",
    test_vectors_source: Optional[str] = None,
    use_cases: Optional[List[str]] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> AlgorithmMetadata:
    """
    Factory для создания метаданных блочного шифра.

    Args:
        name: Имя алгоритма (например, "AES-256")
        implementation_class: Полное имя класса
        key_size: Размер ключа в байтах
        block_size: Размер блока в байтах (16 для AES)
        library: Библиотека
        security_level: Уровень безопасности
        status: Статус реализации
        description_ru: Описание на русском
        description_en: Описание на английском
        test_vectors_source: Источник тестовых векторов
        use_cases: Рекомендуемые сценарии использования
        extra: Дополнительные параметры

    Returns:
        Сконфигурированный AlgorithmMetadata
    """
    return AlgorithmMetadata(
        name=name,
        category=AlgorithmCategory.BLOCK_CIPHER,
        protocol_class=BlockCipherProtocol,
        library=library,
        implementation_class=implementation_class,
        security_level=security_level,
        status=status,
        key_size=key_size,
        block_size=block_size,
        description_ru=description_ru,
        description_en=description_en,
        test_vectors_source=test_vectors_source,
        use_cases=use_cases or [],
        extra=extra or {},
    )


def create_key_exchange_metadata(
    name: str,
    implementation_class: str,
    public_key_size: int,
    private_key_size: int,
    shared_secret_size: int,
    *,
    curve: Optional[str] = None,
    library: str = "cryptography",
    security_level: SecurityLevel = SecurityLevel.STANDARD,
    status: ImplementationStatus = ImplementationStatus.STABLE,
    description_ru: str = "",
    description_en: str = "",
    test_vectors_source: Optional[str] = None,
    use_cases: Optional[List[str]] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> AlgorithmMetadata:
    """
    Factory для создания метаданных обмена ключами.

    Args:
        name: Имя алгоритма (например, "ECDH-P384")
        implementation_class: Полное имя класса
        public_key_size: Размер публичного ключа в байтах
        private_key_size: Размер приватного ключа в байтах
        shared_secret_size: Размер общего секрета в байтах
        curve: Имя кривой

    Returns:
        Сконфигурированный AlgorithmMetadata
    """
    return AlgorithmMetadata(
        name=name,
        category=AlgorithmCategory.KEY_EXCHANGE,
        protocol_class=KeyExchangeProtocol,
        library=library,
        implementation_class=implementation_class,
        security_level=security_level,
        status=status,
        public_key_size=public_key_size,
        private_key_size=private_key_size,
        shared_secret_size=shared_secret_size,
        curve=curve,
        description_ru=description_ru,
        description_en=description_en,
        test_vectors_source=test_vectors_source,
        use_cases=use_cases or [],
        extra=extra or {},
    )


def create_signature_metadata(
    name: str,
    implementation_class: str,
    signature_size: int,
    public_key_size: int,
    private_key_size: int,
    *,
    seed_size: Optional[int] = None,
    curve: Optional[str] = None,
    is_deterministic: bool = False,
    library: str = "cryptography",
    security_level: SecurityLevel = SecurityLevel.STANDARD,
    status: ImplementationStatus = ImplementationStatus.STABLE,
    description_ru: str = "",
    description_en: str = "",
    test_vectors_source: Optional[str] = None,
    use_cases: Optional[List[str]] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> AlgorithmMetadata:
    """
    Factory для создания метаданных схемы подписи.

    Args:
        name: Имя алгоритма (например, "Ed25519")
        implementation_class: Полное имя класса
        signature_size: Размер подписи (максимальный для DER)
        public_key_size: Размер публичного ключа в байтах
        private_key_size: Размер приватного ключа в байтах
        seed_size: Размер seed (только для схем с derive_from_seed)
        curve: Имя кривой
        is_deterministic: Подпись детерминирована

    Returns:
        Сконфигурированный AlgorithmMetadata

    Example:
        >>> meta = create_signature_metadata(
        ...     name="Ed25519",
        ...     implementation_class="src.primitives.algorithms.signing.Ed25519Scheme",
        ...     signature_size=64,
        ...     public_key_size=32,
        ...     private_key_size=64,
        ...     seed_size=32,
        ...     is_deterministic=True,
        ... )
    """
    return AlgorithmMetadata(
        name=name,
        category=AlgorithmCategory.SIGNATURE,
        protocol_class=SignatureSchemeProtocol,
        library=library,
        implementation_class=implementation_class,
        security_level=security_level,
        status=status,
        signature_size=signature_size,
        public_key_size=public_key_size,
        private_key_size=private_key_size,
        seed_size=seed_size,
        curve=curve,
        is_deterministic=is_deterministic,
        description_ru=description_ru,
        description_en=description_en,
        test_vectors_source=test_vectors_source,
        use_cases=use_cases or [],
        extra=extra or {},
    )


# ==============================================================================
# MODULE EXPORTS
# ==============================================================================

__all__: list[str] = [
    # Enums
    "AlgorithmCategory",
    "SecurityLevel",
    "ImplementationStatus",
    # Dataclass
    "AlgorithmMetadata",
    # Factory functions
    "create_block_cipher_metadata",
    "create_key_exchange_metadata",
    "create_signature_metadata",
]
