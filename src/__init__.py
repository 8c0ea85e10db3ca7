"""
Пакет криптографических примитивов
==================================

Слой абстракции над примитивами библиотеки cryptography для протоколов
более высокого уровня (гибридное шифрование, подписанные конверты).

Этот пакет предоставляет:
    - Блочные шифры AES-128/AES-256 (один блок за вызов)
    - Обмен ключами ECDH-P384, ECDH-P256, X25519 и X448
    - Подписи Ed25519 и ECDSA-P256 со строгим DER
    - Строгую проверку скаляров и точек эллиптических кривых
    - Явно передаваемый источник случайности
    - Типизированную иерархию исключений
    - Реестр алгоритмов и выбор набора примитивов из конфигурации

Пример базового использования:
    >>> from src.primitives.config import SuiteConfig, SuiteProfile
    >>> from src.primitives.suite import resolve_suite
    >>>
    >>> suite = resolve_suite(SuiteConfig.from_profile(SuiteProfile.DEFAULT))
    >>> public, private = suite.signature.generate_key()
    >>> signature = suite.signature.sign(private, b"Hello")
    >>> suite.signature.verify(public, b"Hello", signature)
    True

Логирование:
    Уровень задаётся переменной окружения PRIMITIVES_LOG_LEVEL
    (DEBUG, INFO, WARNING, ERROR, CRITICAL). Путь к файлу журнала можно
    задать через PRIMITIVES_LOG_FILE.

Версия: 1.0.0
Python: 3.11+
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

# =============================================================================
# МЕТАДАННЫЕ ВЕРСИИ
# =============================================================================

__version__ = "1.0.0"
__description__ = "Typed abstraction layer over block ciphers, ECDH and signatures"
__python_requires__ = ">=3.11"

VERSION_MAJOR = 1
VERSION_MINOR = 0
VERSION_PATCH = 0

# =============================================================================
# ПРОВЕРКА ВЕРСИИ PYTHON
# =============================================================================

if sys.version_info < (3, 11):
    raise RuntimeError(
        f"Пакет требует Python 3.11 или выше. "
        f"Текущая версия: {sys.version_info.major}."
        f"{sys.version_info.minor}.{sys.version_info.micro}"
    )

# =============================================================================
# КОНФИГУРАЦИЯ ЛОГИРОВАНИЯ
# =============================================================================

_LOGGER_NAME = "src"


def _setup_logging() -> None:
    """
    Инициализировать логирование пакета.

    Настраивает логгер пакета с:
    - Консольным обработчиком (stderr) для WARNING и выше
    - Ротирующим файловым обработчиком, если задан PRIMITIVES_LOG_FILE

    Функция идемпотентна: повторные вызовы не добавляют обработчиков.
    Секретные данные в журнал не пишутся ни на каком уровне.
    """
    log_level_str = os.environ.get("PRIMITIVES_LOG_LEVEL", "INFO").upper()

    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    log_level = log_level_map.get(log_level_str, logging.INFO)

    package_logger = logging.getLogger(_LOGGER_NAME)
    if package_logger.handlers:
        return

    package_logger.setLevel(log_level)

    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(levelname)-8s [%(name)s.%(funcName)s:%(lineno)d] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    log_file = os.environ.get("PRIMITIVES_LOG_FILE")
    if not log_file:
        return

    try:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_path,
            maxBytes=10 * 1024 * 1024,  # 10 МБ
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)
    except OSError as e:
        package_logger.warning(
            f"Не удалось инициализировать файловое логирование: {e}. "
            f"Используется только консоль."
        )


_setup_logging()

__all__ = [
    "__version__",
    "__description__",
    "VERSION_MAJOR",
    "VERSION_MINOR",
    "VERSION_PATCH",
]
