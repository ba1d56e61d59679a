import pytest

from maphasher import NodeID, SparseTreeHasher, get_hash_function


def node_at_depth(depth: int) -> NodeID:
    """Helper to build a NodeID on the all-zero path at *depth*."""
    return NodeID(bytes((depth + 7) // 8), depth)


@pytest.fixture(scope="session")
def sha256_hasher():
    # Built once; the hasher is immutable after construction.
    return SparseTreeHasher(get_hash_function("sha256"))
