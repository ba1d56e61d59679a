from typing import Tuple

# Depths never exceed the widest supported digest (512 bits), so ten groups of
# seven bits is far more than any NodeID needs.
MAX_VARINT_BYTES = 10


def encode_varint(n: int) -> bytes:
    """LEB128 unsigned varint: seven bits per byte, low group first."""
    if n < 0:
        raise ValueError("varint of negative value")
    out = bytearray()
    while n >= 0x80:
        out.append(0x80 | (n & 0x7F))
        n >>= 7
    out.append(n)
    return bytes(out)


def decode_varint(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """Return (value, offset just past the varint)."""
    result = 0
    for count in range(MAX_VARINT_BYTES):
        i = offset + count
        if i >= len(data):
            raise ValueError("truncated varint")
        b = data[i]
        result |= (b & 0x7F) << (7 * count)
        if not b & 0x80:
            if b == 0 and count:
                raise ValueError("non-minimal varint")
            return result, i + 1
    raise ValueError("varint too large")
