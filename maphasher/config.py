"""Environment-driven settings for the hasher CLI and HTTP service."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .crypto_utils import get_hash_function
from .hasher import Observer, SparseTreeHasher

DEFAULT_HASH = "sha256"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_LOG_LEVEL = "WARNING"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    hash_name: str = DEFAULT_HASH
    strict: bool = False
    log_level: str = DEFAULT_LOG_LEVEL
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read ``MAPHASHER_*`` variables from *environ* (``os.environ`` by default)."""

    env = os.environ if environ is None else environ
    port_text = env.get("MAPHASHER_PORT", str(DEFAULT_PORT))
    try:
        port = int(port_text)
    except ValueError as exc:
        raise ValueError(f"MAPHASHER_PORT must be an integer, got {port_text!r}") from exc
    return Settings(
        hash_name=env.get("MAPHASHER_HASH", DEFAULT_HASH),
        strict=env.get("MAPHASHER_STRICT", "").strip().lower() in _TRUTHY,
        log_level=env.get("MAPHASHER_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        host=env.get("MAPHASHER_HOST", DEFAULT_HOST),
        port=port,
    )


def build_hasher(settings: Settings, observer: Optional[Observer] = None) -> SparseTreeHasher:
    """Construct the hasher described by *settings*."""

    return SparseTreeHasher(
        get_hash_function(settings.hash_name),
        observer=observer,
        strict=settings.strict,
    )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ValueError(f"Unknown log level: {level}")
    root = logging.getLogger()
    root.setLevel(numeric)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        root.addHandler(handler)


__all__ = ["Settings", "load_settings", "build_hasher", "configure_logging"]
