"""FastAPI application exposing a sparse tree hasher over HTTP."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel, Field

from .config import build_hasher, load_settings
from .hasher import SparseTreeHasher
from .tree import NodeID
from .utils.serialization import digest_from_hex, digest_to_hex


class InfoResponse(BaseModel):
    name: str
    digest_size: int
    bit_len: int
    empty_root: str


class LeafRequest(BaseModel):
    leaf_hex: str = Field(default="", description="Leaf value, hex encoded")


class ChildrenRequest(BaseModel):
    left: str = Field(description="Left child digest, hex encoded")
    right: str = Field(description="Right child digest, hex encoded")


class DigestResponse(BaseModel):
    digest: str


class EmptyResponse(DigestResponse):
    tree_id: int
    depth: int
    height: int


def _decode(value: str) -> bytes:
    try:
        return digest_from_hex(value)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


def _hasher(request: Request) -> SparseTreeHasher:
    return request.app.state.hasher


def create_app(hasher: Optional[SparseTreeHasher] = None) -> FastAPI:
    """Build an application bound to *hasher* (built from the environment if omitted)."""

    if hasher is None:
        hasher = build_hasher(load_settings())

    app = FastAPI(title="Sparse Merkle Map Hasher", version="1.0.0")
    app.state.hasher = hasher

    @app.get("/info", response_model=InfoResponse)
    def info(request: Request) -> InfoResponse:
        h = _hasher(request)
        return InfoResponse(
            name=h.name,
            digest_size=h.digest_size,
            bit_len=h.bit_len,
            empty_root=digest_to_hex(h.empty_root()),
        )

    @app.post("/hash/leaf", response_model=DigestResponse)
    def hash_leaf(payload: LeafRequest, request: Request) -> DigestResponse:
        leaf = _decode(payload.leaf_hex)
        return DigestResponse(digest=digest_to_hex(_hasher(request).hash_leaf(leaf)))

    @app.post("/hash/children", response_model=DigestResponse)
    def hash_children(payload: ChildrenRequest, request: Request) -> DigestResponse:
        left = _decode(payload.left)
        right = _decode(payload.right)
        try:
            digest = _hasher(request).hash_children(left, right)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return DigestResponse(digest=digest_to_hex(digest))

    @app.get("/hash/empty/{depth}", response_model=EmptyResponse)
    def hash_empty(depth: int, request: Request, tree_id: int = 0) -> EmptyResponse:
        h = _hasher(request)
        try:
            h.check_depth(tree_id, depth)
            # Any path works; only the depth selects the null hash.
            node_id = NodeID(bytes((depth + 7) // 8), depth)
            digest = h.hash_empty(tree_id, node_id)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return EmptyResponse(
            tree_id=tree_id,
            depth=depth,
            height=h.bit_len - depth,
            digest=digest_to_hex(digest),
        )

    return app


__all__ = ["create_app"]
