"""Digest encodings used at the process boundary (CLI and HTTP)."""

from __future__ import annotations

import base64
import binascii


def digest_to_hex(digest: bytes) -> str:
    """Return the lowercase hex form of *digest*."""

    return bytes(digest).hex()


def digest_from_hex(value: str) -> bytes:
    """Decode a hex string, accepting an optional ``0x`` prefix."""

    text = value.strip()
    if text[:2].lower() == "0x":
        text = text[2:]
    try:
        return bytes.fromhex(text)
    except ValueError as exc:
        raise ValueError(f"Invalid hex payload: {value!r}") from exc


def digest_to_base64(digest: bytes) -> str:
    return base64.b64encode(bytes(digest)).decode("ascii")


def digest_from_base64(value: str) -> bytes:
    try:
        return base64.b64decode(value.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise ValueError("Digest payload is not valid base64") from exc


__all__ = ["digest_to_hex", "digest_from_hex", "digest_to_base64", "digest_from_base64"]
