"""Command line front end for the sparse Merkle map hasher."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from typing import List, Optional

from .config import Settings, build_hasher, configure_logging, load_settings
from .crypto_utils import available_hash_functions
from .hasher import SparseTreeHasher
from .tree import NodeID
from .utils.serialization import (
    digest_from_base64,
    digest_from_hex,
    digest_to_base64,
    digest_to_hex,
)

logger = logging.getLogger(__name__)

_DECODERS = {"hex": digest_from_hex, "base64": digest_from_base64}
_ENCODERS = {"hex": digest_to_hex, "base64": digest_to_base64}


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="maphasher", description=__doc__)
    parser.add_argument("--hash", default=settings.hash_name, help="Hash function name")
    parser.add_argument("--strict", action="store_true", default=settings.strict,
                        help="Reject child digests of the wrong length")
    parser.add_argument("--log-level", default=settings.log_level)
    parser.add_argument("--input", choices=sorted(_DECODERS), default="hex",
                        help="Encoding of leaf and child arguments")
    parser.add_argument("--output", choices=sorted(_ENCODERS), default="hex")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sub.add_parser("info", help="Show digest size, tree depth and empty root")
    sub.add_parser("algorithms", help="List available hash functions")

    leaf = sub.add_parser("leaf", help="Hash a leaf value")
    leaf.add_argument("value", nargs="?", default="", help="Leaf bytes")

    children = sub.add_parser("children", help="Hash two child digests")
    children.add_argument("left")
    children.add_argument("right")

    empty = sub.add_parser("empty", help="Hash of an empty subtree at a depth")
    empty.add_argument("depth", type=int)
    empty.add_argument("--tree-id", type=int, default=0)

    table = sub.add_parser("null-table", help="Print the null hash for each height")
    table.add_argument("--limit", type=int, default=None)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=settings.host)
    serve.add_argument("--port", type=int, default=settings.port)
    return parser


def _run(args: argparse.Namespace, hasher: SparseTreeHasher) -> None:
    decode = _DECODERS[args.input]
    encode = _ENCODERS[args.output]

    if args.cmd == "info":
        print(f"hash:        {hasher.name}")
        print(f"digest size: {hasher.digest_size}")
        print(f"bit length:  {hasher.bit_len}")
        print(f"empty root:  {encode(hasher.empty_root())}")
    elif args.cmd == "leaf":
        print(encode(hasher.hash_leaf(decode(args.value))))
    elif args.cmd == "children":
        print(encode(hasher.hash_children(decode(args.left), decode(args.right))))
    elif args.cmd == "empty":
        depth = hasher.check_depth(args.tree_id, args.depth)
        node_id = NodeID(bytes((depth + 7) // 8), depth)
        print(encode(hasher.hash_empty(args.tree_id, node_id)))
    elif args.cmd == "null-table":
        table = hasher.null_hashes
        if args.limit is not None:
            table = table[: args.limit]
        for height, digest in enumerate(table):
            print(f"{height:4d} {encode(digest)}")
    elif args.cmd == "serve":  # pragma: no cover - starts a server
        import uvicorn

        from .api import create_app

        uvicorn.run(create_app(hasher), host=args.host, port=args.port, log_level=args.log_level.lower())


def main(argv: Optional[List[str]] = None) -> int:
    try:
        settings = load_settings()
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    parser = build_parser(settings)
    args = parser.parse_args(argv)
    if args.cmd == "null-table" and args.limit is not None and args.limit < 0:
        parser.error("--limit must not be negative")

    if args.cmd == "algorithms":
        for name in available_hash_functions():
            print(name)
        return 0

    try:
        configure_logging(args.log_level)
        settings = replace(settings, hash_name=args.hash, strict=args.strict, log_level=args.log_level)
        hasher = build_hasher(settings)
        logger.debug("using %r", hasher)
        _run(args, hasher)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
