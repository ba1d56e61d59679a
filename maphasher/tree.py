"""Node identifiers for sparse Merkle tree positions.

A node is named by the bit path from the root down to it.  ``depth`` counts
the bits of that path: depth 0 is the root and a leaf sits at the full bit
length of the tree's hash function.  The sparse tree hasher only ever reads
``depth``; the rest is here for the storage layer that hands NodeIDs in.
"""

from __future__ import annotations

from dataclasses import dataclass

from .utils.compact import decode_varint, encode_varint


def _mask_tail(path: bytes, depth: int) -> bytes:
    """Truncate *path* to *depth* bits and zero any bits past it."""

    size = (depth + 7) // 8
    out = bytearray(path[:size])
    spare = size * 8 - depth
    if spare:
        out[-1] &= (0xFF << spare) & 0xFF
    return bytes(out)


@dataclass(frozen=True)
class NodeID:
    """Bit-path prefix of *depth* bits stored MSB first in *path*."""

    path: bytes
    depth: int

    def __post_init__(self) -> None:
        if not isinstance(self.depth, int) or self.depth < 0:
            raise ValueError("NodeID depth must be a non-negative integer")
        path = bytes(self.path)
        if len(path) != (self.depth + 7) // 8:
            raise ValueError(
                f"NodeID path of {len(path)} bytes does not hold exactly {self.depth} bits"
            )
        if path != _mask_tail(path, self.depth):
            raise ValueError("NodeID path has bits set past its depth")
        object.__setattr__(self, "path", path)

    @classmethod
    def root(cls) -> "NodeID":
        return cls(b"", 0)

    @classmethod
    def from_key(cls, key: bytes, depth: int) -> "NodeID":
        """Return the ancestor of *key* at *depth* (the leaf when depth is the key size)."""

        if depth < 0 or depth > len(key) * 8:
            raise ValueError(f"Depth {depth} does not fit a {len(key) * 8}-bit key")
        return cls(_mask_tail(bytes(key), depth), depth)

    def bit(self, index: int) -> int:
        """Return bit *index* of the path, counting from the root."""

        if index < 0 or index >= self.depth:
            raise IndexError(f"bit {index} outside a {self.depth}-bit path")
        return (self.path[index // 8] >> (7 - index % 8)) & 1

    def prefix(self, depth: int) -> "NodeID":
        """Return the ancestor of this node at *depth*."""

        if depth < 0 or depth > self.depth:
            raise ValueError(f"Prefix depth {depth} exceeds node depth {self.depth}")
        return NodeID(_mask_tail(self.path, depth), depth)

    def to_bytes(self) -> bytes:
        return encode_varint(self.depth) + self.path

    @classmethod
    def from_bytes(cls, data: bytes) -> "NodeID":
        depth, offset = decode_varint(bytes(data))
        path = bytes(data[offset:])
        return cls(path, depth)

    def __str__(self) -> str:
        bits = "".join(str(self.bit(i)) for i in range(self.depth))
        return f"NodeID({bits or '<root>'})"


__all__ = ["NodeID"]
