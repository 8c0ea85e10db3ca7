"""
Сборка набора примитивов из конфигурации.

Протокольный слой выбирает алгоритмы по имени (SuiteConfig) и получает
экземпляры через реестр, не зная конкретных классов.

Example:
    >>> from src.primitives.config import SuiteConfig, SuiteProfile
    >>> from src.primitives.suite import resolve_suite
    >>> suite = resolve_suite(SuiteConfig.from_profile(SuiteProfile.DEFAULT))
    >>> priv, pub = suite.key_exchange.generate_key()
    >>> cipher = suite.new_block_cipher(bytes(32))

Version: 1.0
Date: October 2026
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from src.primitives.config import SuiteConfig
from src.primitives.core.protocols import (
    BlockCipherProtocol,
    KeyExchangeProtocol,
    SignatureSchemeProtocol,
)
from src.primitives.core.registry import AlgorithmRegistry, register_all_algorithms

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PrimitiveSuite:
    """
    Набор примитивов, выбранный конфигурацией.

    Attributes:
        config: Исходная конфигурация
        key_exchange: Экземпляр KeyExchangeProtocol
        signature: Экземпляр SignatureSchemeProtocol
    """

    config: SuiteConfig
    key_exchange: KeyExchangeProtocol
    signature: SignatureSchemeProtocol
    _registry: AlgorithmRegistry

    def new_block_cipher(self, key: bytes) -> BlockCipherProtocol:
        """
        Создать блочный шифр выбранного алгоритма.

        Raises:
            InvalidKeySizeError: Длина ключа не соответствует алгоритму
        """
        cipher: BlockCipherProtocol = self._registry.create(
            self.config.block_cipher, key
        )
        return cipher


def resolve_suite(
    config: SuiteConfig,
    registry: Optional[AlgorithmRegistry] = None,
) -> PrimitiveSuite:
    """
    Создать набор примитивов по конфигурации.

    Встроенные алгоритмы регистрируются при необходимости.

    Args:
        config: Выбор алгоритмов
        registry: Реестр (по умолчанию singleton)

    Returns:
        PrimitiveSuite

    Raises:
        AlgorithmNotFoundError: Алгоритм из конфигурации не зарегистрирован
    """
    registry = registry or AlgorithmRegistry.get_instance()
    register_all_algorithms(registry)

    suite = PrimitiveSuite(
        config=config,
        key_exchange=registry.create(config.key_exchange),
        signature=registry.create(config.signature),
        _registry=registry,
    )
    logger.debug(
        f"Resolved suite: {config.block_cipher} / "
        f"{config.key_exchange} / {config.signature}"
    )
    return suite


__all__ = ["PrimitiveSuite", "resolve_suite"]
