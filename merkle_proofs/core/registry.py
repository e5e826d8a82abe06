"""
In-memory registry of Merkle trees keyed by tree ID.
"""

import logging
import threading
import uuid
from dataclasses import dataclass, replace
from typing import Dict, List, Optional, Sequence

from merkle_proofs.core.merkle import MerkleError, Node, build_tree, tree_height

logger = logging.getLogger(__name__)


class TreeNotFoundError(MerkleError, KeyError):
    """Raised when a tree ID is not present in the registry."""

    def __init__(self, tree_id: uuid.UUID):
        self.tree_id = tree_id
        super().__init__(f"Tree not found: {tree_id}")

    def __str__(self) -> str:
        return self.args[0]


@dataclass(frozen=True)
class MerkleTree:
    """A built tree together with its identifier."""
    id: uuid.UUID
    root: Node
    leaf_count: int

    @classmethod
    def build(cls, leaf_hashes: Sequence[bytes], tree_id: Optional[uuid.UUID] = None) -> 'MerkleTree':
        """Build a tree from leaf hashes, assigning a random ID if none is given."""
        root = build_tree(leaf_hashes)
        return cls(id=tree_id or uuid.uuid4(), root=root, leaf_count=len(leaf_hashes))

    @property
    def root_hash(self) -> bytes:
        return self.root.hash

    @property
    def height(self) -> int:
        return tree_height(self.root)


class TreeRegistry:
    """Thread-safe collection of Merkle trees.

    All operations take the same lock, so concurrent callers observe them in
    a single order. Stored trees are immutable; ``get`` hands out a copy of
    the record that shares the node graph.
    """

    def __init__(self):
        self._trees: Dict[uuid.UUID, MerkleTree] = {}
        self._lock = threading.Lock()

    def add(self, tree: MerkleTree) -> None:
        """Add a tree to the registry."""
        with self._lock:
            self._trees[tree.id] = tree
        logger.debug("Added tree %s", tree.id)

    def get(self, tree_id: uuid.UUID) -> MerkleTree:
        """Get a tree by ID.

        Raises:
            TreeNotFoundError: If no tree with this ID is registered.
        """
        with self._lock:
            tree = self._trees.get(tree_id)
        if tree is None:
            raise TreeNotFoundError(tree_id)
        return replace(tree)

    def update(self, tree: MerkleTree) -> bool:
        """Replace the tree with the same ID, adding it if absent.

        Returns:
            True if an existing tree was replaced, False if it was added.
        """
        with self._lock:
            replaced = tree.id in self._trees
            self._trees[tree.id] = tree
        logger.debug("%s tree %s", "Replaced" if replaced else "Added", tree.id)
        return replaced

    def ids(self) -> List[uuid.UUID]:
        with self._lock:
            return list(self._trees)

    def __contains__(self, tree_id: object) -> bool:
        with self._lock:
            return tree_id in self._trees

    def __len__(self) -> int:
        with self._lock:
            return len(self._trees)
