import hashlib
import logging
import threading

import pytest

from maphasher import (
    LEAF_HASH_PREFIX,
    NODE_HASH_PREFIX,
    DepthOutOfBoundsError,
    SparseTreeHasher,
    get_hash_function,
)
from tests.conftest import node_at_depth

EMPTY_LEAF_SHA256 = "6e340b9cffb37a989ca544e6bb780a2c78901d3fb33738768511a30617afa01d"


def test_bit_len_matches_digest(sha256_hasher):
    assert sha256_hasher.digest_size == 32
    assert sha256_hasher.bit_len == 256
    assert len(sha256_hasher.null_hashes) == 257


def test_empty_leaf_is_hash_of_single_zero_byte(sha256_hasher):
    digest = sha256_hasher.hash_leaf(b"")
    assert digest == hashlib.sha256(b"\x00").digest()
    assert digest.hex() == EMPTY_LEAF_SHA256


def test_hash_leaf_prefixes_leaf_tag(sha256_hasher):
    assert sha256_hasher.hash_leaf(b"value") == hashlib.sha256(b"\x00value").digest()


def test_hash_children_of_zero_digests(sha256_hasher):
    zero = bytes(32)
    expected = hashlib.sha256(b"\x01" + zero + zero).digest()
    assert sha256_hasher.hash_children(zero, zero) == expected


def test_hash_leaf_is_deterministic(sha256_hasher):
    for value in (b"", b"a", bytes(range(256))):
        assert sha256_hasher.hash_leaf(value) == sha256_hasher.hash_leaf(value)


def test_leaf_and_node_hashes_are_domain_separated(sha256_hasher):
    left = sha256_hasher.hash_leaf(b"left")
    right = sha256_hasher.hash_leaf(b"right")
    # A leaf whose bytes spell out a serialised node still hashes differently.
    forged = NODE_HASH_PREFIX + left + right
    assert sha256_hasher.hash_leaf(forged) != sha256_hasher.hash_children(left, right)
    assert sha256_hasher.hash_leaf(left + right) != sha256_hasher.hash_children(left, right)
    assert LEAF_HASH_PREFIX != NODE_HASH_PREFIX


def test_hash_children_is_order_sensitive(sha256_hasher):
    a = sha256_hasher.hash_leaf(b"a")
    b = sha256_hasher.hash_leaf(b"b")
    assert NODE_HASH_PREFIX + a + b != NODE_HASH_PREFIX + b + a
    assert sha256_hasher.hash_children(a, b) != sha256_hasher.hash_children(b, a)


def test_hash_children_accepts_malformed_lengths_by_default(sha256_hasher):
    digest = sha256_hasher.hash_children(b"short", b"")
    assert digest == hashlib.sha256(b"\x01short").digest()


def test_strict_mode_rejects_wrong_child_length():
    hasher = SparseTreeHasher(get_hash_function("sha256"), strict=True)
    good = bytes(32)
    assert hasher.hash_children(good, good)
    with pytest.raises(ValueError):
        hasher.hash_children(good, b"short")
    with pytest.raises(ValueError):
        hasher.hash_children(bytes(33), good)


def test_empty_leaf_base_case(sha256_hasher):
    assert sha256_hasher.hash_empty(0, node_at_depth(256)) == sha256_hasher.hash_leaf(b"")


def test_null_table_recurrence(sha256_hasher):
    bit_len = sha256_hasher.bit_len
    for height in range(1, bit_len + 1):
        below = sha256_hasher.hash_empty(0, node_at_depth(bit_len - height + 1))
        here = sha256_hasher.hash_empty(0, node_at_depth(bit_len - height))
        assert here == sha256_hasher.hash_children(below, below)


def test_empty_root_is_repeated_self_hash(sha256_hasher):
    current = hashlib.sha256(b"\x00").digest()
    for _ in range(256):
        current = hashlib.sha256(b"\x01" + current + current).digest()
    assert sha256_hasher.hash_empty(0, node_at_depth(0)) == current
    assert sha256_hasher.empty_root() == current


def test_hash_empty_ignores_tree_id_and_path(sha256_hasher):
    from maphasher import NodeID

    key = bytes([0xFF] * 32)
    for depth in (0, 1, 9, 128, 256):
        assert sha256_hasher.hash_empty(7, NodeID.from_key(key, depth)) == sha256_hasher.hash_empty(
            0, node_at_depth(depth)
        )


@pytest.mark.parametrize("depth", [0, 1, 255, 256])
def test_hash_empty_within_bounds(sha256_hasher, depth):
    assert len(sha256_hasher.hash_empty(0, node_at_depth(depth))) == 32


@pytest.mark.parametrize("depth", [257, 1000])
def test_hash_empty_out_of_bounds_is_fatal(sha256_hasher, depth):
    with pytest.raises(DepthOutOfBoundsError):
        sha256_hasher.hash_empty(0, node_at_depth(depth))


def test_hash_empty_rejects_negative_depth(sha256_hasher):
    class Node:
        depth = -1

    with pytest.raises(DepthOutOfBoundsError):
        sha256_hasher.hash_empty(0, Node())


def test_out_of_bounds_error_is_a_value_error():
    assert issubclass(DepthOutOfBoundsError, ValueError)


def test_null_hashes_are_immutable(sha256_hasher):
    with pytest.raises(TypeError):
        sha256_hasher.null_hashes[0] = b"x"
    with pytest.raises(AttributeError):
        sha256_hasher.null_hashes = ()


@pytest.mark.parametrize("name", ["sha256", "sha512", "sha3_256", "blake2b-256", "blake2b-512"])
def test_table_shape_follows_hash_function(name):
    hash_function = get_hash_function(name)
    hasher = SparseTreeHasher(hash_function)
    assert hasher.bit_len == hash_function.digest_size * 8
    assert len(hasher.null_hashes) == hasher.bit_len + 1
    assert hasher.null_hashes[0] == hasher.hash_leaf(b"")
    top = hasher.null_hashes[-2]
    assert hasher.empty_root() == hasher.hash_children(top, top)


def test_different_hash_functions_give_different_roots(sha256_hasher):
    other = SparseTreeHasher(get_hash_function("sha3_256"))
    assert other.bit_len == sha256_hasher.bit_len
    assert other.empty_root() != sha256_hasher.empty_root()


def test_observer_sees_construction_and_queries():
    calls = []
    hasher = SparseTreeHasher(
        get_hash_function("sha256"),
        observer=lambda op, inputs, digest: calls.append((op, inputs, digest)),
    )
    assert len(calls) == 257
    assert calls[0] == ("hash_leaf", (b"",), hasher.null_hashes[0])
    assert all(op == "hash_children" for op, _, _ in calls[1:])

    calls.clear()
    leaf = hasher.hash_leaf(b"v")
    hasher.hash_empty(3, node_at_depth(256))
    assert calls == [
        ("hash_leaf", (b"v",), leaf),
        ("hash_empty", (), hasher.null_hashes[0]),
    ]


def test_debug_logging_reports_digests(caplog):
    hasher = SparseTreeHasher(get_hash_function("sha256"))
    with caplog.at_level(logging.DEBUG, logger="maphasher.hasher"):
        digest = hasher.hash_leaf(b"\x01\x02")
    assert f"hash_leaf(0102): {digest.hex()}" in caplog.text


def test_repr_names_hash_function(sha256_hasher):
    assert repr(sha256_hasher) == "SparseTreeHasher{sha256}"


def test_concurrent_reads_agree(sha256_hasher):
    results = []

    def worker():
        results.append(
            (sha256_hasher.hash_leaf(b"shared"), sha256_hasher.hash_empty(0, node_at_depth(0)))
        )

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(set(results)) == 1


def test_check_depth(sha256_hasher):
    assert sha256_hasher.check_depth(0, 0) == 0
    assert sha256_hasher.check_depth(0, 256) == 256
    for depth in (-1, 257, 10**20):
        with pytest.raises(DepthOutOfBoundsError):
            sha256_hasher.check_depth(5, depth)
