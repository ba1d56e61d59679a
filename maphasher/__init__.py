# Sparse Merkle map hasher
#
# Provides:
#  - SparseTreeHasher: leaf/node hashing with domain separation and a
#    precomputed null-hash table for empty subtrees
#  - pluggable hash functions (hashlib digests, PyNaCl BLAKE2b)
#  - NodeID bit-path identifiers
#
# See maphasher/api.py and maphasher/main.py for the HTTP and CLI surfaces.

from .crypto_utils import (
    Blake2bFunction,
    HashFunction,
    HashlibFunction,
    available_hash_functions,
    get_hash_function,
)
from .hasher import (
    LEAF_HASH_PREFIX,
    NODE_HASH_PREFIX,
    DepthOutOfBoundsError,
    SparseTreeHasher,
)
from .tree import NodeID

__version__ = "1.0.0"

__all__ = [
    "Blake2bFunction",
    "HashFunction",
    "HashlibFunction",
    "available_hash_functions",
    "get_hash_function",
    "LEAF_HASH_PREFIX",
    "NODE_HASH_PREFIX",
    "DepthOutOfBoundsError",
    "SparseTreeHasher",
    "NodeID",
]
