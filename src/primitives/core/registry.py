"""
Централизованный реестр криптографических примитивов.

Thread-safe Singleton реестр: имя алгоритма -> (фабрика, метаданные).
Обеспечивает:
- Регистрацию алгоритмов с валидацией Protocol
- Фабричные методы для создания экземпляров
- Thread-safe доступ (RLock)
- Query API для поиска алгоритмов
- Статистику по реестру

Это слой композиции: код протоколов выбирает алгоритм по имени из
конфигурации и работает со всеми экземплярами одной абстракции одинаково.

Example:
    >>> from src.primitives.core.registry import (
    ...     AlgorithmRegistry,
    ...     register_all_algorithms,
    ... )
    >>> register_all_algorithms()
    >>> registry = AlgorithmRegistry.get_instance()
    >>> kex = registry.create("ECDH-P384")
    >>> cipher = registry.create("AES-256", bytes(32))

Thread Safety:
    Все публичные методы thread-safe благодаря RLock.
    Можно безопасно вызывать из разных потоков.

Version: 1.0
Date: October 2026
"""

from __future__ import annotations

import logging
import threading
from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from src.primitives.core.exceptions import (
    AlgorithmError,
    AlgorithmNotFoundError,
    CryptoError,
    DuplicateRegistrationError,
    ProtocolValidationError,
)
from src.primitives.core.metadata import (
    AlgorithmCategory,
    AlgorithmMetadata,
    SecurityLevel,
)

logger = logging.getLogger(__name__)


# ==============================================================================
# DATACLASSES
# ==============================================================================


@dataclass(frozen=True)
class RegistryEntry:
    """
    Запись в реестре.

    Attributes:
        name: Имя алгоритма
        factory: Конструктор экземпляра (блочные шифры принимают ключ)
        metadata: Метаданные алгоритма
    """

    name: str
    factory: Callable[..., Any]
    metadata: AlgorithmMetadata


@dataclass(frozen=True)
class RegistryStatistics:
    """
    Статистика зарегистрированных алгоритмов.

    Example:
        >>> stats = registry.get_statistics()
        >>> stats.by_category[AlgorithmCategory.SIGNATURE]
        2
    """

    total: int
    by_category: Dict[AlgorithmCategory, int]
    by_security_level: Dict[SecurityLevel, int]
    safe_for_production_count: int

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация в словарь."""
        return {
            "total": self.total,
            "by_category": {
                cat.value: count for cat, count in self.by_category.items()
            },
            "by_security_level": {
                level.value: count for level, count in self.by_security_level.items()
            },
            "safe_for_production_count": self.safe_for_production_count,
        }


# ==============================================================================
# MAIN CLASS: ALGORITHM REGISTRY
# ==============================================================================


class AlgorithmRegistry:
    """
    Thread-safe реестр криптографических примитивов (Singleton).

    Attributes:
        _instance: Singleton instance
        _lock: RLock для thread-safety
        _registry: Словарь {algorithm_name -> RegistryEntry}

    Example:
        >>> registry = AlgorithmRegistry.get_instance()
        >>> registry.register_algorithm(
        ...     name="Ed25519",
        ...     factory=Ed25519Scheme,
        ...     metadata=METADATA_ED25519,
        ... )
        >>> scheme = registry.create("Ed25519")
        >>> isinstance(scheme, SignatureSchemeProtocol)
        True
    """

    _instance: Optional[AlgorithmRegistry] = None
    _lock: threading.RLock = threading.RLock()

    def __init__(self) -> None:
        """
        Приватный конструктор (используйте get_instance()).

        Raises:
            RuntimeError: Если попытка создать второй экземпляр
        """
        if AlgorithmRegistry._instance is not None:
            raise RuntimeError(
                "AlgorithmRegistry is a singleton. "
                "Use AlgorithmRegistry.get_instance()"
            )

        self._registry: Dict[str, RegistryEntry] = {}
        logger.info("AlgorithmRegistry initialized")

    @classmethod
    def get_instance(cls) -> AlgorithmRegistry:
        """
        Получить singleton instance реестра.

        Thread Safety:
            Thread-safe double-checked locking
        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """
        Сбросить singleton (только для тестов).

        WARNING:
            Используйте только в unit-тестах!
        """
        with cls._lock:
            cls._instance = None
            logger.warning("AlgorithmRegistry instance reset (testing only!)")

    def register_algorithm(
        self,
        name: str,
        factory: Callable[..., Any],
        metadata: AlgorithmMetadata,
        *,
        validate: bool = True,
    ) -> None:
        """
        Зарегистрировать алгоритм в реестре.

        Args:
            name: Уникальное имя алгоритма (например, "ECDH-P384")
            factory: Конструктор экземпляра
            metadata: Метаданные алгоритма
            validate: Валидировать соответствие Protocol (по умолчанию True)

        Raises:
            ValueError: Пустое имя или имя не совпадает с metadata.name
            TypeError: factory не callable или метаданные некорректны
            DuplicateRegistrationError: Алгоритм уже зарегистрирован
            ProtocolValidationError: Экземпляр не реализует Protocol
        """
        with self._lock:
            if not name or not name.strip():
                raise ValueError("Имя алгоритма не может быть пустым")

            if name in self._registry:
                raise DuplicateRegistrationError(name)

            if not callable(factory):
                raise TypeError(
                    f"factory должна быть callable, получено {type(factory).__name__}"
                )

            if not isinstance(metadata, AlgorithmMetadata):
                raise TypeError(
                    f"metadata должна быть AlgorithmMetadata, "
                    f"получено {type(metadata).__name__}"
                )

            if metadata.name != name:
                raise ValueError(
                    f"Имя '{name}' не совпадает с metadata.name '{metadata.name}'"
                )

            if validate:
                self._validate_protocol(factory, metadata)

            self._registry[name] = RegistryEntry(
                name=name,
                factory=factory,
                metadata=metadata,
            )

            logger.info(
                f"Registered algorithm: {name} "
                f"(category={metadata.category.value}, "
                f"security={metadata.security_level.value})"
            )

    def _validate_protocol(
        self,
        factory: Callable[..., Any],
        metadata: AlgorithmMetadata,
    ) -> None:
        """
        Валидация соответствия тестового экземпляра Protocol интерфейсу.

        Блочные шифры создаются с нулевым ключом объявленного размера.

        Raises:
            ProtocolValidationError: Экземпляр не соответствует Protocol
        """
        try:
            if metadata.category == AlgorithmCategory.BLOCK_CIPHER:
                instance = factory(bytes(metadata.key_size or 0))
            else:
                instance = factory()

            if not isinstance(instance, metadata.protocol_class):
                raise ProtocolValidationError(
                    f"Экземпляр {type(instance).__name__} не реализует "
                    f"{metadata.protocol_class.__name__}",
                    algorithm=metadata.name,
                )

            if getattr(instance, "algorithm_name", None) != metadata.name:
                raise ProtocolValidationError(
                    f"algorithm_name экземпляра не совпадает с '{metadata.name}'",
                    algorithm=metadata.name,
                )

            logger.debug(
                f"Protocol validation passed: {metadata.name} -> "
                f"{metadata.protocol_class.__name__}"
            )

        except ProtocolValidationError:
            raise
        except Exception as e:
            raise ProtocolValidationError(
                f"Не удалось валидировать Protocol для {metadata.name}: {e}",
                algorithm=metadata.name,
            ) from e

    def create(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """
        Создать экземпляр алгоритма по имени.

        Args:
            name: Имя алгоритма (например, "AES-256")
            *args: Аргументы конструктора (ключ для блочных шифров)

        Returns:
            Новый экземпляр алгоритма

        Raises:
            AlgorithmNotFoundError: Алгоритм не найден в реестре
            CryptoError: Ошибка валидации аргументов (например, длина ключа)
            AlgorithmError: Не удалось создать экземпляр по другой причине

        Example:
            >>> cipher = registry.create("AES-128", bytes(16))
            >>> cipher.block_size
            16
        """
        with self._lock:
            entry = self._registry.get(name)
            if entry is None:
                raise AlgorithmNotFoundError(name, sorted(self._registry.keys()))

        try:
            instance = entry.factory(*args, **kwargs)
        except (CryptoError, TypeError):
            raise
        except Exception as e:
            logger.error(f"Failed to create instance of {name}: {e}", exc_info=True)
            raise AlgorithmError(
                f"Не удалось создать экземпляр {name}", algorithm=name
            ) from e

        logger.debug(f"Created instance of {name}")
        return instance

    def get_metadata(self, name: str) -> AlgorithmMetadata:
        """
        Получить метаданные алгоритма.

        Raises:
            AlgorithmNotFoundError: Алгоритм не найден
        """
        with self._lock:
            if name not in self._registry:
                raise AlgorithmNotFoundError(name, sorted(self._registry.keys()))
            return self._registry[name].metadata

    def list_algorithms(self) -> List[str]:
        """Список всех зарегистрированных алгоритмов (sorted)."""
        with self._lock:
            return sorted(self._registry.keys())

    def list_by_category(self, category: AlgorithmCategory) -> List[str]:
        """
        Получить список алгоритмов по категории.

        Example:
            >>> registry.list_by_category(AlgorithmCategory.BLOCK_CIPHER)
            ['AES-128', 'AES-256']
        """
        with self._lock:
            return sorted(
                name
                for name, entry in self._registry.items()
                if entry.metadata.category == category
            )

    def list_by_security_level(self, level: SecurityLevel) -> List[str]:
        """Получить список алгоритмов с заданным уровнем безопасности."""
        with self._lock:
            return sorted(
                name
                for name, entry in self._registry.items()
                if entry.metadata.security_level == level
            )

    def list_safe_for_production(self) -> List[str]:
        """Список алгоритмов со status=STABLE и не LEGACY."""
        with self._lock:
            return sorted(
                name
                for name, entry in self._registry.items()
                if entry.metadata.is_safe_for_production()
            )

    def get_statistics(self) -> RegistryStatistics:
        """Получить статистику по зарегистрированным алгоритмам."""
        with self._lock:
            entries = list(self._registry.values())

        return RegistryStatistics(
            total=len(entries),
            by_category=dict(Counter(e.metadata.category for e in entries)),
            by_security_level=dict(Counter(e.metadata.security_level for e in entries)),
            safe_for_production_count=sum(
                1 for e in entries if e.metadata.is_safe_for_production()
            ),
        )

    def is_registered(self, name: str) -> bool:
        """Проверка, зарегистрирован ли алгоритм."""
        with self._lock:
            return name in self._registry

    def unregister(self, name: str) -> None:
        """
        Удалить алгоритм из реестра.

        Raises:
            AlgorithmNotFoundError: Алгоритм не найден
        """
        with self._lock:
            if name not in self._registry:
                raise AlgorithmNotFoundError(name, sorted(self._registry.keys()))

            del self._registry[name]
            logger.warning(f"Unregistered algorithm: {name}")


# ==============================================================================
# REGISTRATION FUNCTION
# ==============================================================================


def register_all_algorithms(registry: Optional[AlgorithmRegistry] = None) -> int:
    """
    Зарегистрировать все встроенные примитивы.

    Регистрирует AES-128, AES-256, ECDH-P256, ECDH-P384, X25519, X448,
    Ed25519 и ECDSA-P256. Повторный вызов безопасен: уже зарегистрированные
    алгоритмы пропускаются.

    Args:
        registry: Реестр (по умолчанию singleton)

    Returns:
        Количество алгоритмов, зарегистрированных этим вызовом

    Example:
        >>> register_all_algorithms()
        7
        >>> register_all_algorithms()
        0
    """
    # Ленивые импорты: модули алгоритмов зависят от core
    from src.primitives.algorithms.block import BLOCK_CIPHERS
    from src.primitives.algorithms.key_exchange import KEY_EXCHANGE_ALGORITHMS
    from src.primitives.algorithms.signing import SIGNATURE_SCHEMES

    registry = registry or AlgorithmRegistry.get_instance()
    registered_count = 0

    with registry._lock:
        for table in (BLOCK_CIPHERS, KEY_EXCHANGE_ALGORITHMS, SIGNATURE_SCHEMES):
            for factory, metadata in table.values():
                if registry.is_registered(metadata.name):
                    continue
                registry.register_algorithm(metadata.name, factory, metadata)
                registered_count += 1

    logger.info(
        f"Registered {registered_count} algorithms "
        f"(total: {len(registry.list_algorithms())})"
    )
    return registered_count


# ==============================================================================
# MODULE EXPORTS
# ==============================================================================

__all__: list[str] = [
    "AlgorithmRegistry",
    "RegistryEntry",
    "RegistryStatistics",
    "register_all_algorithms",
]
