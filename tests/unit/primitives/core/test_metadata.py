"""
Тесты метаданных алгоритмов.

Покрытие:
- Enums (label, from_str, is_safe_for_new_systems)
- Валидация AlgorithmMetadata в __post_init__
- Factory функции для трёх категорий
- Сериализация to_dict/from_dict
"""

from __future__ import annotations

from typing import Any, Dict

import pytest

from src.primitives.core.metadata import (
    AlgorithmCategory,
    AlgorithmMetadata,
    ImplementationStatus,
    SecurityLevel,
    create_block_cipher_metadata,
    create_key_exchange_metadata,
    create_signature_metadata,
)
from src.primitives.core.protocols import (
    BlockCipherProtocol,
    KeyExchangeProtocol,
    SignatureSchemeProtocol,
)


def _base_fields(**overrides: Any) -> Dict[str, Any]:
    fields: Dict[str, Any] = {
        "name": "Test-AES",
        "category": AlgorithmCategory.BLOCK_CIPHER,
        "protocol_class": BlockCipherProtocol,
        "library": "cryptography",
        "implementation_class": "tests.TestAES",
        "security_level": SecurityLevel.STANDARD,
        "status": ImplementationStatus.STABLE,
        "key_size": 16,
        "block_size": 16,
    }
    fields.update(overrides)
    return fields


# ==============================================================================
# TEST: Enums
# ==============================================================================


class TestEnums:
    """Тесты перечислений."""

    def test_category_values(self) -> None:
        assert AlgorithmCategory.BLOCK_CIPHER.value == "block_cipher"
        assert AlgorithmCategory.KEY_EXCHANGE.label() == "Обмен ключами"

    @pytest.mark.parametrize("raw", ["signature", "SIGNATURE", "Signature"])
    def test_category_from_str(self, raw: str) -> None:
        assert AlgorithmCategory.from_str(raw) is AlgorithmCategory.SIGNATURE

    def test_category_from_str_invalid(self) -> None:
        with pytest.raises(ValueError, match="Неизвестная категория"):
            AlgorithmCategory.from_str("hash")

    def test_security_levels(self) -> None:
        assert not SecurityLevel.LEGACY.is_safe_for_new_systems()
        assert SecurityLevel.STANDARD.is_safe_for_new_systems()
        assert SecurityLevel.HIGH.label() == "Повышенный"

    def test_status_label(self) -> None:
        assert ImplementationStatus.EXPERIMENTAL.label() == "Экспериментальный"


# ==============================================================================
# TEST: Validation
# ==============================================================================


class TestValidation:
    """Тесты валидации AlgorithmMetadata."""

    def test_valid_metadata(self) -> None:
        meta = AlgorithmMetadata(**_base_fields())
        assert meta.name == "Test-AES"
        assert meta.is_safe_for_production()

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError, match="name"):
            AlgorithmMetadata(**_base_fields(name="  "))

    def test_unknown_library_rejected(self) -> None:
        with pytest.raises(ValueError, match="Неизвестная библиотека"):
            AlgorithmMetadata(**_base_fields(library="pycryptodome"))

    def test_block_cipher_requires_sizes(self) -> None:
        with pytest.raises(ValueError, match="key_size и block_size"):
            AlgorithmMetadata(**_base_fields(block_size=None))

    def test_key_exchange_requires_sizes(self) -> None:
        with pytest.raises(ValueError, match="shared_secret_size"):
            AlgorithmMetadata(
                **_base_fields(
                    category=AlgorithmCategory.KEY_EXCHANGE,
                    protocol_class=KeyExchangeProtocol,
                    public_key_size=65,
                )
            )

    def test_signature_requires_sizes(self) -> None:
        with pytest.raises(ValueError, match="signature_size"):
            AlgorithmMetadata(
                **_base_fields(
                    category=AlgorithmCategory.SIGNATURE,
                    protocol_class=SignatureSchemeProtocol,
                    public_key_size=32,
                )
            )

    @pytest.mark.parametrize("size_attr", ["key_size", "block_size"])
    def test_non_positive_size_rejected(self, size_attr: str) -> None:
        with pytest.raises(ValueError, match=size_attr):
            AlgorithmMetadata(**_base_fields(**{size_attr: 0}))

    def test_frozen(self) -> None:
        meta = AlgorithmMetadata(**_base_fields())
        with pytest.raises(AttributeError):
            meta.name = "other"  # type: ignore[misc]

    @pytest.mark.parametrize(
        "status,level,expected",
        [
            (ImplementationStatus.STABLE, SecurityLevel.HIGH, True),
            (ImplementationStatus.EXPERIMENTAL, SecurityLevel.HIGH, False),
            (ImplementationStatus.STABLE, SecurityLevel.LEGACY, False),
        ],
    )
    def test_is_safe_for_production(
        self,
        status: ImplementationStatus,
        level: SecurityLevel,
        expected: bool,
    ) -> None:
        meta = AlgorithmMetadata(**_base_fields(status=status, security_level=level))
        assert meta.is_safe_for_production() is expected


# ==============================================================================
# TEST: Factories
# ==============================================================================


class TestFactories:
    """Тесты factory функций."""

    def test_block_cipher_factory(self) -> None:
        meta = create_block_cipher_metadata(
            name="AES-256",
            implementation_class="x.AES256",
            key_size=32,
            security_level=SecurityLevel.HIGH,
        )
        assert meta.category is AlgorithmCategory.BLOCK_CIPHER
        assert meta.protocol_class is BlockCipherProtocol
        assert meta.block_size == 16
        assert meta.library == "cryptography"

    def test_key_exchange_factory(self) -> None:
        meta = create_key_exchange_metadata(
            name="ECDH-P384",
            implementation_class="x.ECDH",
            public_key_size=97,
            private_key_size=48,
            shared_secret_size=48,
            curve="P-384",
        )
        assert meta.category is AlgorithmCategory.KEY_EXCHANGE
        assert meta.protocol_class is KeyExchangeProtocol
        assert meta.curve == "P-384"

    def test_signature_factory(self) -> None:
        meta = create_signature_metadata(
            name="Ed25519",
            implementation_class="x.Ed25519",
            signature_size=64,
            public_key_size=32,
            private_key_size=64,
            seed_size=32,
            is_deterministic=True,
        )
        assert meta.category is AlgorithmCategory.SIGNATURE
        assert meta.protocol_class is SignatureSchemeProtocol
        assert meta.is_deterministic
        assert meta.use_cases == []


# ==============================================================================
# TEST: Serialization
# ==============================================================================


class TestSerialization:
    """Тесты to_dict/from_dict."""

    def test_to_dict_uses_plain_values(self) -> None:
        data = AlgorithmMetadata(**_base_fields()).to_dict()
        assert data["category"] == "block_cipher"
        assert data["security_level"] == "standard"
        assert "protocol_class" not in data

    def test_from_dict_restores_protocol_from_category(self) -> None:
        meta = create_key_exchange_metadata(
            name="X25519",
            implementation_class="x.X25519",
            public_key_size=32,
            private_key_size=32,
            shared_secret_size=32,
            use_cases=["TLS 1.3"],
        )
        restored = AlgorithmMetadata.from_dict(meta.to_dict())
        assert restored == meta
        assert restored.protocol_class is KeyExchangeProtocol
