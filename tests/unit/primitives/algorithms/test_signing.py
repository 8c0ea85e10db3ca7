"""
Тесты для модуля signing.py (Ed25519, ECDSA-P256).

Типы тестов:
    - Known answers: RFC 8032 (Ed25519), RFC 6979 A.2.5 (ECDSA-P256)
    - Взаимозаменяемость схем за SignatureSchemeProtocol
    - Edge cases: неверные размеры, несогласованные ключи, битые подписи
    - Metadata и registry
    - Performance tests: benchmarks (optional)

Usage:
    pytest tests/unit/primitives/algorithms/test_signing.py -v
    pytest tests/unit/primitives/algorithms/test_signing.py -v --benchmark-only
"""

from __future__ import annotations

from typing import Any, Iterator

import pytest

from src.primitives.algorithms.ecdsa import ECDSA_P256
from src.primitives.algorithms.signing import (
    ALL_METADATA,
    ECDSA_P256_MAX_SIGNATURE_SIZE,
    ED25519_PRIVATE_KEY_SIZE,
    ED25519_PUBLIC_KEY_SIZE,
    ED25519_SEED_SIZE,
    ED25519_SIGNATURE_SIZE,
    SIGNATURE_SCHEMES,
    ECDSAP256Scheme,
    Ed25519Scheme,
    get_signature_scheme,
)
from src.primitives.core.curves import P256, encode_scalar
from src.primitives.core.exceptions import (
    InvalidKeyError,
    InvalidKeySizeError,
    InvalidSeedSizeError,
    RandomSourceError,
    ScalarOutOfRangeError,
)
from src.primitives.core.metadata import AlgorithmCategory
from src.primitives.core.protocols import SignatureSchemeProtocol

# RFC 8032, Section 7.1: (seed, public key, message, signature)
ED25519_VECTORS = [
    (
        bytes.fromhex(
            "9d61b19deffd5a60ba844af492ec2cc44449c5697b326919703bac031cae7f60"
        ),
        bytes.fromhex(
            "d75a980182b10ab7d54bfed3c964073a0ee172f3daa62325af021a68f707511a"
        ),
        b"",
        bytes.fromhex(
            "e5564300c360ac729086e2cc806e828a84877f1eb8e5d974d873e06522490155"
            "5fb8821590a33bacc61e39701cf9b46bd25bf5f0595bbe24655141438e7a100b"
        ),
    ),
    (
        bytes.fromhex(
            "4ccd089b28ff96da9db6c346ec114e0f5b8a319f35aba624da8cf6ed4fb8a6fb"
        ),
        bytes.fromhex(
            "3d4017c3e843895a92b70aa74d1b7ebc9c982ccf2ec4968cc0cd55f12af4660c"
        ),
        bytes.fromhex("72"),
        bytes.fromhex(
            "92a009a9f0d4cab8720e820b5f642540a2b27b5416503f8fb3762223ebdb69da"
            "085ac1e43e15996e458f3613d0f11d8c387b2eaeb4302aeeb00d291612bb0c00"
        ),
    ),
]

# RFC 6979, A.2.5
ECDSA_PRIVATE = bytes.fromhex(
    "C9AFA9D845BA75166B5C215767B1D6934E50C3DB36E89B127B8A622B120F6721"
)
ECDSA_SAMPLE_DER = bytes.fromhex(
    "3046022100EFD48B2AACB6A8FD1140DD9CD45E81D69D2C877B56AAF991C34D0EA84EAF3716"
    "022100F7CB1C942D657C41D436C7A1B6E29F65F3E900DBB9AFF4064DC4AB2F843ACDA8"
)

SCHEME_NAMES = ["ed25519", "ecdsa-p256"]


def _ecdsa_public(private: bytes) -> bytes:
    priv = ECDSA_P256.parse_private_key(private)
    return ECDSA_P256.marshal_public_key(priv.public_key)


# ==============================================================================
# TEST: Ed25519
# ==============================================================================


class TestEd25519:
    """Ed25519 (RFC 8032)."""

    @pytest.mark.parametrize("seed,public,message,signature", ED25519_VECTORS)
    def test_derive_from_seed(
        self, seed: bytes, public: bytes, message: bytes, signature: bytes
    ) -> None:
        pub, priv = Ed25519Scheme().derive_from_seed(seed)
        assert pub == public
        assert priv == seed + public

    @pytest.mark.parametrize("seed,public,message,signature", ED25519_VECTORS)
    def test_sign_vector(
        self, seed: bytes, public: bytes, message: bytes, signature: bytes
    ) -> None:
        assert Ed25519Scheme().sign(seed + public, message) == signature

    @pytest.mark.parametrize("seed,public,message,signature", ED25519_VECTORS)
    def test_verify_vector(
        self, seed: bytes, public: bytes, message: bytes, signature: bytes
    ) -> None:
        scheme = Ed25519Scheme()
        assert scheme.verify(public, message, signature)
        assert not scheme.verify(public, message + b"x", signature)

    @pytest.mark.parametrize("size", [0, 31, 33, 64])
    def test_wrong_seed_size(self, size: int) -> None:
        with pytest.raises(InvalidSeedSizeError) as exc_info:
            Ed25519Scheme().derive_from_seed(bytes(size))
        assert exc_info.value.expected_size == ED25519_SEED_SIZE
        assert exc_info.value.actual_size == size

    def test_sign_rejects_inconsistent_private_key(self) -> None:
        seed, public, _, _ = ED25519_VECTORS[0]
        _, other_public, _, _ = ED25519_VECTORS[1]
        scheme = Ed25519Scheme()

        with pytest.raises(InvalidKeyError, match="public half"):
            scheme.sign(seed + other_public, b"msg")

    @pytest.mark.parametrize("size", [0, 32, 63, 65])
    def test_sign_wrong_private_key_size(self, size: int) -> None:
        with pytest.raises(InvalidKeySizeError):
            Ed25519Scheme().sign(bytes(size), b"msg")

    def test_verify_wrong_sizes_returns_false(self) -> None:
        seed, public, message, signature = ED25519_VECTORS[0]
        scheme = Ed25519Scheme()
        assert not scheme.verify(public[:-1], message, signature)
        assert not scheme.verify(public, message, signature[:-1])
        assert not scheme.verify(public, message, signature + b"\x00")

    def test_verify_tampered_signature(self) -> None:
        _, public, message, signature = ED25519_VECTORS[0]
        tampered = bytes([signature[0] ^ 0x01]) + signature[1:]
        assert not Ed25519Scheme().verify(public, message, tampered)

    def test_generate_key_uses_given_source(self) -> None:
        seed, public, _, _ = ED25519_VECTORS[0]
        chunks: Iterator[bytes] = iter([seed])
        pub, priv = Ed25519Scheme().generate_key(lambda n: next(chunks))
        assert pub == public
        assert priv == seed + public

    def test_generate_key_failing_source(self) -> None:
        with pytest.raises(RandomSourceError):
            Ed25519Scheme().generate_key(lambda n: b"\x00" * (n - 1))

    def test_type_errors(self) -> None:
        scheme = Ed25519Scheme()
        pub, priv = scheme.generate_key()
        with pytest.raises(TypeError, match="message"):
            scheme.sign(priv, "text")  # type: ignore[arg-type]
        with pytest.raises(TypeError, match="seed"):
            scheme.derive_from_seed(bytearray(32))  # type: ignore[arg-type]
        with pytest.raises(TypeError, match="signature"):
            scheme.verify(pub, b"msg", None)  # type: ignore[arg-type]


# ==============================================================================
# TEST: ECDSA-P256
# ==============================================================================


class TestECDSAP256Scheme:
    """ECDSA-P256 за byte-in/byte-out контрактом."""

    def test_verify_rfc6979_signature(self) -> None:
        scheme = ECDSAP256Scheme()
        public = _ecdsa_public(ECDSA_PRIVATE)
        assert scheme.verify(public, b"sample", ECDSA_SAMPLE_DER)
        assert not scheme.verify(public, b"test", ECDSA_SAMPLE_DER)

    def test_sign_then_verify(self) -> None:
        scheme = ECDSAP256Scheme()
        signature = scheme.sign(ECDSA_PRIVATE, b"sample")
        assert len(signature) <= ECDSA_P256_MAX_SIGNATURE_SIZE
        assert scheme.verify(_ecdsa_public(ECDSA_PRIVATE), b"sample", signature)

    def test_malformed_der_returns_false(self) -> None:
        scheme = ECDSAP256Scheme()
        public = _ecdsa_public(ECDSA_PRIVATE)
        assert not scheme.verify(public, b"sample", ECDSA_SAMPLE_DER + b"\x00")
        assert not scheme.verify(public, b"sample", b"")

    def test_invalid_public_key_returns_false(self) -> None:
        scheme = ECDSAP256Scheme()
        assert not scheme.verify(b"\x04" + bytes(64), b"sample", ECDSA_SAMPLE_DER)
        assert not scheme.verify(b"\x04" * 33, b"sample", ECDSA_SAMPLE_DER)

    @pytest.mark.parametrize("d", [0, P256.n], ids=["zero", "n"])
    def test_sign_with_out_of_range_scalar(self, d: int) -> None:
        with pytest.raises(ScalarOutOfRangeError):
            ECDSAP256Scheme().sign(encode_scalar(d, P256), b"msg")

    def test_sign_with_wrong_key_size(self) -> None:
        with pytest.raises(InvalidKeySizeError):
            ECDSAP256Scheme().sign(ECDSA_PRIVATE + b"\x00", b"msg")

    def test_generate_key_encodings(self) -> None:
        chunks: Iterator[bytes] = iter([ECDSA_PRIVATE])
        public, private = ECDSAP256Scheme().generate_key(lambda n: next(chunks))
        assert private == ECDSA_PRIVATE
        assert public == _ecdsa_public(ECDSA_PRIVATE)
        assert len(public) == 65

    def test_type_errors(self) -> None:
        with pytest.raises(TypeError):
            ECDSAP256Scheme().verify("pub", b"msg", b"sig")  # type: ignore[arg-type]


# ==============================================================================
# TEST: Interchangeability
# ==============================================================================


class TestInterchangeableSchemes:
    """Обе схемы используются одинаково через SignatureSchemeProtocol."""

    @pytest.mark.parametrize("name", SCHEME_NAMES)
    def test_protocol_conformance(self, name: str) -> None:
        assert isinstance(get_signature_scheme(name), SignatureSchemeProtocol)

    @pytest.mark.parametrize("name", SCHEME_NAMES)
    def test_sign_verify_cycle(self, name: str) -> None:
        scheme = get_signature_scheme(name)
        public, private = scheme.generate_key()
        message = b"Document v1.0"

        signature = scheme.sign(private, message)

        assert len(public) == scheme.public_key_size
        assert len(private) == scheme.private_key_size
        assert len(signature) <= scheme.signature_size
        assert scheme.verify(public, message, signature)
        assert not scheme.verify(public, message + b"!", signature)

    @pytest.mark.parametrize("name", SCHEME_NAMES)
    def test_signature_from_other_key_fails(self, name: str) -> None:
        scheme = get_signature_scheme(name)
        _, private_a = scheme.generate_key()
        public_b, _ = scheme.generate_key()
        assert not scheme.verify(public_b, b"msg", scheme.sign(private_a, b"msg"))

    def test_ed25519_sizes(self) -> None:
        scheme = Ed25519Scheme()
        assert scheme.public_key_size == ED25519_PUBLIC_KEY_SIZE
        assert scheme.private_key_size == ED25519_PRIVATE_KEY_SIZE
        assert scheme.signature_size == ED25519_SIGNATURE_SIZE


# ==============================================================================
# TEST: Registry and metadata
# ==============================================================================


class TestSignatureRegistry:
    """Тесты get_signature_scheme и метаданных."""

    def test_get_unknown_scheme(self) -> None:
        with pytest.raises(KeyError, match="not found"):
            get_signature_scheme("rsa-pss")

    def test_case_insensitive_lookup(self) -> None:
        assert isinstance(get_signature_scheme("Ed25519"), Ed25519Scheme)

    def test_metadata_matches_instances(self) -> None:
        assert len(ALL_METADATA) == len(SIGNATURE_SCHEMES) == 2
        for scheme_class, meta in SIGNATURE_SCHEMES.values():
            scheme = scheme_class()
            assert meta.category is AlgorithmCategory.SIGNATURE
            assert meta.name == scheme.algorithm_name
            assert meta.signature_size == scheme.signature_size
            assert meta.public_key_size == scheme.public_key_size
            assert meta.private_key_size == scheme.private_key_size

    def test_ed25519_is_deterministic(self) -> None:
        _, meta = SIGNATURE_SCHEMES["ed25519"]
        assert meta.is_deterministic
        assert meta.seed_size == ED25519_SEED_SIZE
        _, ecdsa_meta = SIGNATURE_SCHEMES["ecdsa-p256"]
        assert not ecdsa_meta.is_deterministic


# ==============================================================================
# BENCHMARKS
# ==============================================================================


@pytest.mark.benchmark
class TestSigningPerformance:
    """Performance benchmarks для схем подписи."""

    @pytest.mark.parametrize("name", SCHEME_NAMES)
    def test_sign_speed(self, benchmark: Any, name: str) -> None:
        scheme = get_signature_scheme(name)
        _, private = scheme.generate_key()
        benchmark(scheme.sign, private, b"benchmark message")

    @pytest.mark.parametrize("name", SCHEME_NAMES)
    def test_verify_speed(self, benchmark: Any, name: str) -> None:
        scheme = get_signature_scheme(name)
        public, private = scheme.generate_key()
        signature = scheme.sign(private, b"benchmark message")
        assert benchmark(scheme.verify, public, b"benchmark message", signature)
