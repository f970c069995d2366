"""Content hashing for change detection and write fingerprints.

SHA256 is used for component definition hashes (collision resistant, stored in
the hash-cache sidecar). xxhash64 is used for fast file content fingerprints
that never leave the process.
"""

import hashlib
from enum import Enum
from typing import Any, Protocol

import xxhash

from .json import canonical_dumps


class Algorithm(str, Enum):
    """Supported hash algorithms."""

    XXHASH64 = "xxhash64"
    SHA256 = "sha256"


class Hasher(Protocol):
    def digest(self, data: bytes) -> str:
        ...


class XXHasher:
    """xxhash64, 16 hex chars."""

    def digest(self, data: bytes) -> str:
        return xxhash.xxh64(data).hexdigest()


class SHA256Hasher:
    """SHA256, 64 hex chars."""

    def digest(self, data: bytes) -> str:
        return hashlib.sha256(data).hexdigest()


_HASHERS: dict[Algorithm, Hasher] = {
    Algorithm.XXHASH64: XXHasher(),
    Algorithm.SHA256: SHA256Hasher(),
}


def create_hasher(algorithm: Algorithm = Algorithm.SHA256) -> Hasher:
    """
    Look up the hasher for ``algorithm``.

    Raises:
        ValueError: If the algorithm is unknown
    """
    try:
        return _HASHERS[Algorithm(algorithm)]
    except ValueError:
        raise ValueError(f"Unknown algorithm: {algorithm}") from None


def hash_bytes(data: bytes, algorithm: Algorithm = Algorithm.SHA256, truncate: int | None = None) -> str:
    """Hex digest of ``data``, optionally cut to ``truncate`` chars."""
    digest = create_hasher(algorithm).digest(data)
    return digest[:truncate] if truncate else digest


def hash_string(text: str, algorithm: Algorithm = Algorithm.SHA256, truncate: int | None = None) -> str:
    """Hex digest of the UTF-8 encoding of ``text``."""
    return hash_bytes(text.encode("utf-8"), algorithm, truncate)


def hash_canonical(obj: Any, algorithm: Algorithm = Algorithm.SHA256) -> str:
    """
    Hash a JSON-compatible value independent of dict key order.

    Objects are serialized with keys sorted at every depth; arrays keep
    their order.

    Examples:
        >>> hash_canonical({"b": 1, "a": 2}) == hash_canonical({"a": 2, "b": 1})
        True
    """
    return hash_bytes(canonical_dumps(obj), algorithm)


def fingerprint(content: str) -> str:
    """Fast fingerprint of generated file content."""
    return hash_string(content, Algorithm.XXHASH64)


__all__ = [
    "Algorithm",
    "Hasher",
    "create_hasher",
    "hash_string",
    "hash_bytes",
    "hash_canonical",
    "fingerprint",
]
