"""
Trees over upload batches, with one leaf per file content digest.
"""

import hashlib
import logging
import uuid
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from merkle_proofs.core.registry import MerkleTree

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024


def hash_content(data: bytes) -> bytes:
    """Compute the SHA-256 digest used as a leaf hash for ``data``."""
    return hashlib.sha256(data).digest()


def hash_file(path: Union[str, Path], chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """Compute the SHA-256 digest of a file's content, reading it in chunks."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    digest = hashlib.sha256()
    with open(path, 'rb') as f:
        for chunk in iter(lambda: f.read(chunk_size), b''):
            digest.update(chunk)
    return digest.digest()


def build_batch_tree(contents: Iterable[bytes], batch_id: Optional[uuid.UUID] = None) -> MerkleTree:
    """
    Build a tree over a batch of uploaded contents.

    Args:
        contents: Raw content of each item, in upload order.
        batch_id: ID for the tree. A random UUID is used if omitted.

    Returns:
        The tree, with one leaf per item holding its SHA-256 digest.

    Raises:
        EmptyInputError: If the batch is empty.
    """
    leaves = [hash_content(data) for data in contents]
    tree = MerkleTree.build(leaves, tree_id=batch_id)
    logger.info("Built batch tree %s over %d items", tree.id, tree.leaf_count)
    return tree


def build_file_tree(
    paths: Sequence[Union[str, Path]],
    batch_id: Optional[uuid.UUID] = None,
    chunk_size: int = DEFAULT_CHUNK_SIZE
) -> MerkleTree:
    """Build a tree over the content digests of ``paths``, in the given order."""
    leaves: List[bytes] = [hash_file(path, chunk_size) for path in paths]
    tree = MerkleTree.build(leaves, tree_id=batch_id)
    logger.info("Built file tree %s over %d files", tree.id, tree.leaf_count)
    return tree
