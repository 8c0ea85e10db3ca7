"""Реализации алгоритмов: AES, ECDH/X25519/X448, Ed25519 и ECDSA."""
