"""
Тесты блочных шифров AES-128/AES-256.

Покрытие:
- FIPS 197 Appendix C test vectors
- Расшифровка обратна шифрованию
- Неверная длина ключа -> InvalidKeySizeError с именем варианта
- Неверные буферы src/dst -> BufferSizeMismatchError
- Незаписываемый dst -> TypeError до шифрования
- Запись результата в dst
- Registry (get_block_cipher) и метаданные
"""

from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Type

import pytest

from src.primitives.algorithms.block import (
    AES128_KEY_SIZE,
    AES256_KEY_SIZE,
    AES_BLOCK_SIZE,
    AES128BlockCipher,
    AES256BlockCipher,
    BLOCK_CIPHERS,
    METADATA_AES128,
    METADATA_AES256,
    aes128_key_size,
    aes256_key_size,
    aes_block_size,
    get_block_cipher,
    new_aes128,
    new_aes256,
)
from src.primitives.core.exceptions import (
    BufferSizeMismatchError,
    InvalidKeySizeError,
    RandomSourceError,
)
from src.primitives.core.metadata import AlgorithmCategory, SecurityLevel
from src.primitives.core.protocols import BlockCipherProtocol

FIPS197_PLAINTEXT = bytes.fromhex("00112233445566778899aabbccddeeff")

# (class, key, expected ciphertext)
FIPS197_VECTORS = [
    (
        AES128BlockCipher,
        bytes.fromhex("000102030405060708090a0b0c0d0e0f"),
        bytes.fromhex("69c4e0d86a7b0430d8cdb78070b4c55a"),
    ),
    (
        AES256BlockCipher,
        bytes(range(32)),
        bytes.fromhex("8ea2b7ca516745bfeafc49904b496089"),
    ),
]

VARIANTS = [
    (AES128BlockCipher, "AES-128", AES128_KEY_SIZE),
    (AES256BlockCipher, "AES-256", AES256_KEY_SIZE),
]


# ==============================================================================
# TEST: Known answers
# ==============================================================================


class TestKnownAnswers:
    """FIPS 197 Appendix C."""

    @pytest.mark.parametrize("cipher_class,key,expected", FIPS197_VECTORS)
    def test_encrypt_vector(
        self, cipher_class: Type[BlockCipherProtocol], key: bytes, expected: bytes
    ) -> None:
        cipher = cipher_class(key)  # type: ignore[call-arg]
        assert cipher.encrypt_block(FIPS197_PLAINTEXT) == expected

    @pytest.mark.parametrize("cipher_class,key,expected", FIPS197_VECTORS)
    def test_decrypt_vector(
        self, cipher_class: Type[BlockCipherProtocol], key: bytes, expected: bytes
    ) -> None:
        cipher = cipher_class(key)  # type: ignore[call-arg]
        assert cipher.decrypt_block(expected) == FIPS197_PLAINTEXT

    def test_constructors_match_vectors(self) -> None:
        _, key128, ct128 = FIPS197_VECTORS[0]
        _, key256, ct256 = FIPS197_VECTORS[1]
        assert new_aes128(key128).encrypt_block(FIPS197_PLAINTEXT) == ct128
        assert new_aes256(key256).encrypt_block(FIPS197_PLAINTEXT) == ct256


# ==============================================================================
# TEST: Basic behaviour
# ==============================================================================


class TestBlockCipherBasics:
    """Базовые свойства."""

    @pytest.mark.parametrize("cipher_class,name,key_size", VARIANTS)
    def test_attributes(
        self, cipher_class: Type[Any], name: str, key_size: int
    ) -> None:
        cipher = cipher_class(os.urandom(key_size))
        assert cipher.algorithm_name == name
        assert cipher.key_size == key_size
        assert cipher.block_size == AES_BLOCK_SIZE
        assert isinstance(cipher, BlockCipherProtocol)

    @pytest.mark.parametrize("cipher_class,name,key_size", VARIANTS)
    def test_roundtrip_random_blocks(
        self, cipher_class: Type[Any], name: str, key_size: int
    ) -> None:
        cipher = cipher_class(cipher_class.generate_key())
        for _ in range(8):
            block = os.urandom(AES_BLOCK_SIZE)
            assert cipher.decrypt_block(cipher.encrypt_block(block)) == block

    @pytest.mark.parametrize("cipher_class,name,key_size", VARIANTS)
    def test_zero_key_sequential_block_roundtrip(
        self, cipher_class: Type[Any], name: str, key_size: int
    ) -> None:
        cipher = cipher_class(bytes(key_size))
        block = bytes(range(AES_BLOCK_SIZE))

        ciphertext = cipher.encrypt_block(block)

        assert len(ciphertext) == AES_BLOCK_SIZE
        assert ciphertext != block
        assert cipher.decrypt_block(ciphertext) == block

    def test_writes_into_dst(self) -> None:
        _, key, expected = FIPS197_VECTORS[0]
        cipher = AES128BlockCipher(key)
        dst = bytearray(AES_BLOCK_SIZE)

        result = cipher.encrypt_block(FIPS197_PLAINTEXT, dst)

        assert bytes(dst) == expected
        assert result == expected

    def test_dst_may_alias_src(self) -> None:
        _, key, expected = FIPS197_VECTORS[1]
        cipher = AES256BlockCipher(key)
        buf = bytearray(FIPS197_PLAINTEXT)

        cipher.encrypt_block(buf, buf)
        assert bytes(buf) == expected

        cipher.decrypt_block(buf, buf)
        assert bytes(buf) == FIPS197_PLAINTEXT

    def test_size_accessors(self) -> None:
        assert aes_block_size() == 16
        assert aes128_key_size() == 16
        assert aes256_key_size() == 32

    def test_repr_hides_key(self) -> None:
        key = bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c")
        assert key.hex() not in repr(AES128BlockCipher(key))

    def test_concurrent_use(self) -> None:
        _, key, expected = FIPS197_VECTORS[0]
        cipher = AES128BlockCipher(key)

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(
                executor.map(
                    lambda _: cipher.encrypt_block(FIPS197_PLAINTEXT), range(64)
                )
            )

        assert all(r == expected for r in results)


# ==============================================================================
# TEST: Errors
# ==============================================================================


class TestBlockCipherErrors:
    """Обработка ошибок."""

    @pytest.mark.parametrize("size", [0, 15, 17, 24, 32])
    def test_aes128_wrong_key_size(self, size: int) -> None:
        with pytest.raises(InvalidKeySizeError) as exc_info:
            new_aes128(bytes(size))
        assert exc_info.value.algorithm == "AES-128"
        assert exc_info.value.expected_size == 16
        assert exc_info.value.actual_size == size

    @pytest.mark.parametrize("size", [0, 16, 24, 31, 33])
    def test_aes256_wrong_key_size(self, size: int) -> None:
        with pytest.raises(InvalidKeySizeError) as exc_info:
            new_aes256(bytes(size))
        assert exc_info.value.algorithm == "AES-256"
        assert exc_info.value.expected_size == 32

    def test_non_bytes_key(self) -> None:
        with pytest.raises(TypeError):
            AES128BlockCipher("0" * 16)  # type: ignore[arg-type]

    @pytest.mark.parametrize("size", [0, 15, 17, 32])
    def test_wrong_src_size(self, size: int) -> None:
        cipher = new_aes128(bytes(16))
        with pytest.raises(BufferSizeMismatchError) as exc_info:
            cipher.encrypt_block(bytes(size))
        assert exc_info.value.actual_size == size

        with pytest.raises(BufferSizeMismatchError):
            cipher.decrypt_block(bytes(size))

    def test_wrong_dst_size(self) -> None:
        cipher = new_aes256(bytes(32))
        with pytest.raises(BufferSizeMismatchError, match="dst"):
            cipher.encrypt_block(bytes(16), bytearray(15))

    @pytest.mark.parametrize(
        "dst",
        [bytes(16), memoryview(bytes(16))],
        ids=["bytes", "readonly_memoryview"],
    )
    def test_readonly_dst_rejected_before_transform(
        self, monkeypatch: pytest.MonkeyPatch, dst: Any
    ) -> None:
        cipher = new_aes128(bytes(16))
        monkeypatch.setattr(cipher, "_cipher", None)

        with pytest.raises(TypeError, match="writable"):
            cipher.encrypt_block(bytes(16), dst)
        with pytest.raises(TypeError, match="writable"):
            cipher.decrypt_block(bytes(16), dst)

    def test_writable_memoryview_dst(self) -> None:
        _, key, expected = FIPS197_VECTORS[0]
        buf = bytearray(AES_BLOCK_SIZE)

        AES128BlockCipher(key).encrypt_block(FIPS197_PLAINTEXT, memoryview(buf))

        assert bytes(buf) == expected

    def test_non_bytes_src(self) -> None:
        with pytest.raises(TypeError):
            new_aes128(bytes(16)).encrypt_block("x" * 16)  # type: ignore[arg-type]

    def test_generate_key_with_failing_source(self) -> None:
        def broken(n: int) -> bytes:
            raise OSError("no entropy")

        with pytest.raises(RandomSourceError):
            AES256BlockCipher.generate_key(broken)


# ==============================================================================
# TEST: Registry and metadata
# ==============================================================================


class TestBlockCipherRegistry:
    """Тесты get_block_cipher и метаданных."""

    @pytest.mark.parametrize(
        "algorithm_id,expected_class,key_size",
        [
            ("aes-128", AES128BlockCipher, 16),
            ("AES-256", AES256BlockCipher, 32),
        ],
    )
    def test_get_block_cipher(
        self, algorithm_id: str, expected_class: Type[Any], key_size: int
    ) -> None:
        cipher = get_block_cipher(algorithm_id, bytes(key_size))
        assert isinstance(cipher, expected_class)

    def test_get_unknown_block_cipher(self) -> None:
        with pytest.raises(KeyError, match="not found"):
            get_block_cipher("des", bytes(8))

    def test_metadata(self) -> None:
        assert METADATA_AES128.category is AlgorithmCategory.BLOCK_CIPHER
        assert METADATA_AES128.key_size == 16
        assert METADATA_AES256.key_size == 32
        assert METADATA_AES256.security_level is SecurityLevel.HIGH
        assert {meta.name for _, meta in BLOCK_CIPHERS.values()} == {
            "AES-128",
            "AES-256",
        }


# ==============================================================================
# BENCHMARKS
# ==============================================================================


@pytest.mark.benchmark
class TestBlockCipherPerformance:
    """Performance benchmarks (pytest-benchmark)."""

    @pytest.mark.parametrize("cipher_class,name,key_size", VARIANTS)
    def test_encrypt_block_speed(
        self, benchmark: Any, cipher_class: Type[Any], name: str, key_size: int
    ) -> None:
        cipher = cipher_class(bytes(key_size))
        result = benchmark(cipher.encrypt_block, FIPS197_PLAINTEXT)
        assert len(result) == AES_BLOCK_SIZE
