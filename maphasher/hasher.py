"""Sparse Merkle tree hashing.

The tree has one level per bit of the digest, so almost every subtree is
empty.  Empty subtrees of the same height all hash alike, which lets the
hasher precompute one "null hash" per height and answer any empty subtree
with a table lookup.

Hashed structures:

- leaf:  H(0x00 || leaf)
- node:  H(0x01 || left || right)
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence, Tuple

from .crypto_utils import HashFunction, hash_bytes

logger = logging.getLogger(__name__)

# Domain separation tags. A leaf can never be mistaken for a pair of children.
LEAF_HASH_PREFIX = b"\x00"
NODE_HASH_PREFIX = b"\x01"

Observer = Callable[[str, Tuple[bytes, ...], bytes], None]


class DepthOutOfBoundsError(ValueError):
    """A node depth the configured hash function cannot address."""


class SparseTreeHasher:
    """Leaf, node and empty-subtree hashing for a sparse Merkle map.

    The null-hash table is built once in the constructor and never changes,
    so a constructed hasher can be shared freely between threads.

    *observer*, when given, is called as ``observer(operation, inputs, digest)``
    after every hash computation, table construction included.  With
    *strict* set, :meth:`hash_children` rejects children whose length is not
    the digest size.
    """

    def __init__(
        self,
        hash_function: HashFunction,
        observer: Optional[Observer] = None,
        strict: bool = False,
    ) -> None:
        if hash_function.digest_size <= 0:
            raise ValueError("hash function must have a fixed, non-zero digest size")
        self._hash_function = hash_function
        self._observer = observer
        self._strict = strict
        self._null_hashes = self._build_null_hashes()

    def __repr__(self) -> str:
        return f"SparseTreeHasher{{{self.name}}}"

    @property
    def name(self) -> str:
        return self._hash_function.name

    @property
    def digest_size(self) -> int:
        return self._hash_function.digest_size

    @property
    def bit_len(self) -> int:
        """Number of bits in a digest, which is also the depth of the tree."""

        return self.digest_size * 8

    @property
    def strict(self) -> bool:
        return self._strict

    @property
    def null_hashes(self) -> Tuple[bytes, ...]:
        """Empty subtree hashes indexed by height, leaf first."""

        return self._null_hashes

    def hash_leaf(self, leaf: bytes) -> bytes:
        """Return the hash of the leaf data *leaf*: H(0x00 || leaf)."""

        digest = hash_bytes(self._hash_function, LEAF_HASH_PREFIX, leaf)
        self._notify("hash_leaf", (bytes(leaf),), digest)
        return digest

    def hash_children(self, left: bytes, right: bytes) -> bytes:
        """Return the hash of an internal node: H(0x01 || left || right)."""

        if self._strict:
            self._check_child("left", left)
            self._check_child("right", right)
        digest = hash_bytes(self._hash_function, NODE_HASH_PREFIX, left, right)
        self._notify("hash_children", (bytes(left), bytes(right)), digest)
        return digest

    def hash_empty(self, tree_id: int, node_id) -> bytes:
        """Return the hash of the empty subtree rooted at *node_id*.

        Only the depth of *node_id* matters.  *tree_id* is carried for
        diagnostics.  A depth past :attr:`bit_len` is a caller bug and raises
        :class:`DepthOutOfBoundsError`.
        """

        depth = self.check_depth(tree_id, node_id.depth)
        digest = self._null_hashes[self.bit_len - depth]
        self._notify("hash_empty", (), digest, node_id)
        return digest

    def check_depth(self, tree_id: int, depth: int) -> int:
        """Return *depth*, or raise :class:`DepthOutOfBoundsError` if no node can sit there."""

        if depth < 0 or depth > self.bit_len:
            raise DepthOutOfBoundsError(
                f"hash_empty(tree {tree_id}): depth {depth} out of bounds [0, {self.bit_len}]"
            )
        return depth

    def empty_root(self) -> bytes:
        """Root hash of a tree with no leaves at all."""

        return self._null_hashes[self.bit_len]

    def _build_null_hashes(self) -> Tuple[bytes, ...]:
        # Height 0 is an empty leaf; height bit_len is the root of an empty tree.
        table = [self.hash_leaf(b"")]
        for _ in range(self.bit_len):
            table.append(self.hash_children(table[-1], table[-1]))
        return tuple(table)

    def _check_child(self, label: str, child: bytes) -> None:
        if len(child) != self.digest_size:
            raise ValueError(
                f"{label} child is {len(child)} bytes, expected {self.digest_size}"
            )

    def _notify(self, operation: str, inputs: Sequence[bytes], digest: bytes, node_id=None) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            if node_id is not None:
                logger.debug("%s(%s): %s", operation, node_id, digest.hex())
            else:
                logger.debug(
                    "%s(%s): %s", operation, ", ".join(i.hex() for i in inputs), digest.hex()
                )
        if self._observer is not None:
            self._observer(operation, tuple(inputs), digest)


__all__ = [
    "LEAF_HASH_PREFIX",
    "NODE_HASH_PREFIX",
    "DepthOutOfBoundsError",
    "Observer",
    "SparseTreeHasher",
]
