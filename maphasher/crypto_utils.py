"""Hash primitives the sparse tree hasher can be built on.

A hash function here is anything exposing ``name``, ``digest_size`` and a
``new()`` factory for a streaming state with ``update`` and ``digest``.  The
adapters below cover the standard library digests and PyNaCl's BLAKE2b.
"""

from __future__ import annotations

import hashlib
from typing import Callable, Dict, List, Protocol

import nacl.hashlib


class HashState(Protocol):
    """Streaming state returned by :meth:`HashFunction.new`."""

    def update(self, data: bytes) -> None: ...

    def digest(self) -> bytes: ...


class HashFunction(Protocol):
    """Fixed output length cryptographic hash."""

    name: str
    digest_size: int

    def new(self) -> HashState: ...


class HashlibFunction:
    """A :mod:`hashlib` algorithm, e.g. ``sha256`` or ``sha3_256``."""

    def __init__(self, name: str) -> None:
        try:
            probe = hashlib.new(name)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Unsupported hashlib algorithm: {name}") from exc
        if not probe.digest_size:
            raise ValueError(f"{name} has no fixed digest size")
        self.name = probe.name
        self.digest_size = probe.digest_size

    def new(self):
        return hashlib.new(self.name)

    def __repr__(self) -> str:
        return f"HashlibFunction({self.name!r})"


class Blake2bFunction:
    """BLAKE2b through libsodium (PyNaCl), with a configurable digest size."""

    def __init__(self, digest_size: int = 32) -> None:
        if not nacl.hashlib.BYTES_MIN <= digest_size <= nacl.hashlib.BYTES_MAX:
            raise ValueError(
                f"BLAKE2b digest size must be between {nacl.hashlib.BYTES_MIN} "
                f"and {nacl.hashlib.BYTES_MAX} bytes"
            )
        self.digest_size = digest_size
        self.name = f"blake2b-{digest_size * 8}"

    def new(self):
        return nacl.hashlib.blake2b(digest_size=self.digest_size)

    def __repr__(self) -> str:
        return f"Blake2bFunction({self.digest_size})"


_CATALOGUE: Dict[str, Callable[[], HashFunction]] = {
    "sha256": lambda: HashlibFunction("sha256"),
    "sha384": lambda: HashlibFunction("sha384"),
    "sha512": lambda: HashlibFunction("sha512"),
    "sha3_256": lambda: HashlibFunction("sha3_256"),
    "sha3_512": lambda: HashlibFunction("sha3_512"),
    "blake2b-256": lambda: Blake2bFunction(32),
    "blake2b-512": lambda: Blake2bFunction(64),
}


def _normalise(name: str) -> str:
    return name.strip().lower().replace("-", "").replace("_", "")


def available_hash_functions() -> List[str]:
    """Return the names accepted by :func:`get_hash_function`."""

    return sorted(_CATALOGUE)


def get_hash_function(name: str) -> HashFunction:
    """Look up a hash function by *name* (case-insensitive)."""

    key = _normalise(name)
    for candidate, factory in _CATALOGUE.items():
        if _normalise(candidate) == key:
            return factory()
    raise ValueError(
        f"Unknown hash function {name!r}; expected one of {', '.join(available_hash_functions())}"
    )


def hash_bytes(hash_function: HashFunction, *chunks: bytes) -> bytes:
    """Hash the concatenation of *chunks* with *hash_function*."""

    state = hash_function.new()
    for chunk in chunks:
        state.update(bytes(chunk))
    return state.digest()


__all__ = [
    "HashState",
    "HashFunction",
    "HashlibFunction",
    "Blake2bFunction",
    "available_hash_functions",
    "get_hash_function",
    "hash_bytes",
]
