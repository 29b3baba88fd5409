"""
Deterministic hashing of build configuration.

A build is a no-op only when its configuration fingerprint matches the one
recorded by the previous successful build. The fingerprint must therefore be
stable across processes and interpreter runs, which rules out ``hash()``
(salted per process for ``str``).

Manifesto:
    - **Deterministic:** Same inputs always produce the same checksum
    - **Order-dependent:** (a, b) and (b, a) produce different checksums
    - **Type-agnostic:** Values are folded through ``str()``

Examples:
    >>> compute_checksum("-Werror", "1.0") == compute_checksum("-Werror", "1.0")
    True
    >>> compute_checksum("a", "b") != compute_checksum("b", "a")
    True

Tags:
    hashing, checksum, incremental-build, modkit

Doc-Types:
    - API Reference
"""

import hashlib
from collections.abc import Iterable
from typing import Any

# Checksums are persisted as decimal text, keep them to a 60-bit non-negative int.
_CHECKSUM_BITS = 60


def compute_checksum(*values: Any) -> int:
    """
    Fold values into an order-sensitive configuration checksum.

    Iterables other than ``str``/``bytes`` are folded element by element with
    their boundaries marked, so ``compute_checksum(["a", "b"], [])`` and
    ``compute_checksum(["a"], ["b"])`` differ.

    Returns:
        A non-negative integer below ``2**60``
    """
    digest = hashlib.sha256()
    for value in values:
        _fold(digest, value)
    return int.from_bytes(digest.digest()[:8], "big") >> (64 - _CHECKSUM_BITS)


def _fold(digest: Any, value: Any) -> None:
    if isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
        digest.update(b"[")
        for item in value:
            _fold(digest, item)
        digest.update(b"]")
        return
    encoded = str(value).encode()
    # Length prefix keeps ("ab", "c") distinct from ("a", "bc").
    digest.update(len(encoded).to_bytes(4, "big"))
    digest.update(encoded)


__all__ = ["compute_checksum"]
