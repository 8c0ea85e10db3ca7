"""
Адаптер источника случайности.

Источник случайности (``RandomSource``) внедряется в каждую операцию
генерации ключей и никогда не читается из глобального состояния. Это
позволяет тестам подставлять детерминированный поток байтов.

Правила:
    - Источник вызывается ровно один раз на запрос
    - Исключение источника, не-bytes результат или короткое чтение
      превращаются в RandomSourceError (с цепочкой исключений)
    - Повторов и отката на другой источник НЕТ

Example:
    >>> import os
    >>> from src.primitives.core.entropy import read_random
    >>> len(read_random(os.urandom, 32, "Ed25519"))
    32
"""

from __future__ import annotations

import logging

from src.primitives.core.exceptions import RandomSourceError
from src.primitives.core.protocols import RandomSource

logger = logging.getLogger(__name__)


def read_random(rand: RandomSource, size: int, algorithm: str) -> bytes:
    """
    Прочитать ровно ``size`` байтов из источника случайности.

    Args:
        rand: Источник случайности (сигнатура os.urandom)
        size: Требуемое количество байтов
        algorithm: Имя алгоритма (для сообщения об ошибке)

    Returns:
        Ровно size случайных байтов

    Raises:
        RandomSourceError: Источник упал, вернул не bytes или не то
            количество байтов
    """
    try:
        data = rand(size)
    except Exception as exc:
        logger.error(f"{algorithm}: random source failed: {exc}", exc_info=True)
        raise RandomSourceError(
            f"{algorithm}: random source failed",
            algorithm=algorithm,
            context={"requested": size},
        ) from exc

    if not isinstance(data, (bytes, bytearray)):
        raise RandomSourceError(
            f"{algorithm}: random source returned {type(data).__name__}, "
            f"expected bytes",
            algorithm=algorithm,
            context={"requested": size},
        )

    if len(data) != size:
        raise RandomSourceError(
            f"{algorithm}: random source returned {len(data)} bytes, "
            f"expected {size}",
            algorithm=algorithm,
            context={"requested": size, "received": len(data)},
        )

    return bytes(data)


__all__ = ["read_random"]
